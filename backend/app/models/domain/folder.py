"""Folder domain model."""

import datetime as dt
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator


class FolderCreate(BaseModel):
    """Payload for creating a folder."""
    name: str = Field(min_length=1, max_length=200)
    date: dt.date

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value


class Folder(BaseModel):
    """An album folder grouping the photos and notes of one occasion."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    date: dt.date
    created_by: str
    created_at: dt.datetime = Field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))

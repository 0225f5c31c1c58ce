"""Note domain model."""

from pydantic import BaseModel, Field
from datetime import datetime, timezone
from uuid import uuid4


class NoteCreate(BaseModel):
    """Payload for creating a note."""
    content: str


class NoteUpdate(BaseModel):
    """Payload for replacing a note's content."""
    content: str


class Note(BaseModel):
    """A free-text note attached to a folder."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    folder_id: str
    content: str
    updated_by: str
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

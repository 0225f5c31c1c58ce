"""Authentication models."""

from pydantic import BaseModel, Field
from datetime import datetime, timezone


class LoginRequest(BaseModel):
    """Credentials submitted at login."""
    username: str
    password: str


class User(BaseModel):
    """A signed-in family member."""
    id: str
    username: str


class Session(BaseModel):
    """An authenticated session addressed by an opaque bearer token."""
    token: str
    user: User
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

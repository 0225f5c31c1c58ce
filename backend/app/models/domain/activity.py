"""Activity feed model."""

from pydantic import BaseModel, Field
from datetime import datetime, timezone
from uuid import uuid4


class ActivityLogEntry(BaseModel):
    """One append-only record of a user action."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    action: str
    details: str
    user: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

"""Photo domain model.

The image bytes live in external object storage; the album only keeps the
public URL and who uploaded it.
"""

from pydantic import BaseModel, Field
from datetime import datetime, timezone
from uuid import uuid4


class PhotoCreate(BaseModel):
    """Payload describing an image already uploaded to storage."""
    url: str = Field(min_length=1)
    content_type: str
    size_bytes: int = Field(ge=0)


class Photo(BaseModel):
    """A photo attached to a folder."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    folder_id: str
    url: str
    uploaded_by: str
    uploaded_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

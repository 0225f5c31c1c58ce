"""
Result models for note mutations.
"""

from pydantic import BaseModel
from typing import Optional

from app.models.domain.note import Note
from app.models.enums import MutationStatus


class NoteMutationResult(BaseModel):
    """Outcome of a create, update or delete that did not raise."""
    status: MutationStatus
    note: Optional[Note] = None
    attempts: int = 0

    @property
    def cancelled(self) -> bool:
        return self.status == MutationStatus.CANCELLED

"""
Enum definitions for the family album API.
"""
from enum import Enum


class NoteSyncState(str, Enum):
    """Where a tracked note sits between local and confirmed remote state."""
    CONFIRMED = "confirmed"
    PENDING_CREATE = "pending_create"
    PENDING_UPDATE = "pending_update"
    ABSENT = "absent"


class MutationStatus(str, Enum):
    """Outcome of a note mutation that did not raise."""
    COMMITTED = "committed"
    CANCELLED = "cancelled"


class ActivityAction(str, Enum):
    """Action strings recorded in the activity feed."""
    CREATED_NOTE = "created note"
    EDITED_NOTES = "edited notes"
    DELETED_NOTE = "deleted note"
    CREATED_FOLDER = "created folder"
    DELETED_FOLDER = "deleted folder"
    UPLOADED_PHOTO = "uploaded photo"
    DELETED_PHOTO = "deleted photo"

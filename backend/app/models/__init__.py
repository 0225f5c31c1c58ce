"""
Family album models.

Usage:
    from app.models import Note, NoteCreate, Folder, Photo, ActivityLogEntry
    from app.models import NoteSyncState, MutationStatus, ActivityAction
    from app.models import NoteMutationResult
"""

# --- Enums ---
from app.models.enums import (
    NoteSyncState,
    MutationStatus,
    ActivityAction,
)

# --- Domain models ---
from app.models.domain import (
    Note, NoteCreate, NoteUpdate,
    Folder, FolderCreate,
    Photo, PhotoCreate,
    ActivityLogEntry,
    LoginRequest, User, Session,
)

# --- Result models ---
from app.models.results import NoteMutationResult

__all__ = [
    # Enums
    "NoteSyncState", "MutationStatus", "ActivityAction",
    # Domain
    "Note", "NoteCreate", "NoteUpdate",
    "Folder", "FolderCreate",
    "Photo", "PhotoCreate",
    "ActivityLogEntry",
    "LoginRequest", "User", "Session",
    # Results
    "NoteMutationResult",
]

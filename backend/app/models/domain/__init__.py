"""Domain models: the core data structures of the album."""

from app.models.domain.note import Note, NoteCreate, NoteUpdate
from app.models.domain.folder import Folder, FolderCreate
from app.models.domain.photo import Photo, PhotoCreate
from app.models.domain.activity import ActivityLogEntry
from app.models.domain.auth import LoginRequest, User, Session

__all__ = [
    "Note", "NoteCreate", "NoteUpdate",
    "Folder", "FolderCreate",
    "Photo", "PhotoCreate",
    "ActivityLogEntry",
    "LoginRequest", "User", "Session",
]

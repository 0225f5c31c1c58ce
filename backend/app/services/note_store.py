"""SQLite-backed note store used as the coordinator's remote store."""

from datetime import datetime
from typing import Any, Optional, Protocol
from uuid import uuid4

from app.database.db import connect
from app.logging import get_logger
from app.models import Note

logger = get_logger("services.note_store")

_UPDATABLE_FIELDS = ("content", "updated_by", "updated_at")


class NoteStore(Protocol):
    """Remote persistence consumed by the note coordinator."""

    async def insert(self, note: Note, note_id: Optional[str] = None) -> Note: ...

    async def update(self, note_id: str, fields: dict[str, Any]) -> None: ...

    async def delete(self, note_id: str) -> None: ...

    async def list_by_folder(self, folder_id: str) -> list[Note]: ...


def _row_to_note(row: dict) -> Note:
    return Note(
        id=row["id"],
        folder_id=row["folder_id"],
        content=row["content"],
        updated_by=row["updated_by"],
        updated_at=row["updated_at"],
    )


def _to_column(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class SqliteNoteStore:
    """Note persistence over aiosqlite.

    Writes carry no version check: the last successful write wins.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path

    async def insert(self, note: Note, note_id: Optional[str] = None) -> Note:
        """Store ``note`` under a server-issued id and return the stored row.

        Repeating an insert with the same ``note_id`` returns the existing row
        instead of adding another.
        """
        stored = note.model_copy(update={"id": note_id or str(uuid4())})
        db = await connect(self.db_path)
        try:
            await db.execute(
                """INSERT OR IGNORE INTO notes (id, folder_id, content, updated_by, updated_at)
                   VALUES (?, ?, ?, ?, ?)""",
                (
                    stored.id,
                    stored.folder_id,
                    stored.content,
                    stored.updated_by,
                    stored.updated_at.isoformat(),
                ),
            )
            await db.commit()
            cursor = await db.execute("SELECT * FROM notes WHERE id = ?", (stored.id,))
            row = await cursor.fetchone()
        finally:
            await db.close()
        return _row_to_note(dict(row))

    async def update(self, note_id: str, fields: dict[str, Any]) -> None:
        unknown = set(fields) - set(_UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update note fields: {', '.join(sorted(unknown))}")
        if not fields:
            return
        set_clause = ", ".join(f"{k} = ?" for k in fields)
        params = [_to_column(v) for v in fields.values()] + [note_id]
        db = await connect(self.db_path)
        try:
            cursor = await db.execute(f"UPDATE notes SET {set_clause} WHERE id = ?", params)
            await db.commit()
            if cursor.rowcount == 0:
                raise LookupError(f"Note {note_id} not found")
        finally:
            await db.close()

    async def delete(self, note_id: str) -> None:
        db = await connect(self.db_path)
        try:
            cursor = await db.execute("DELETE FROM notes WHERE id = ?", (note_id,))
            await db.commit()
            if cursor.rowcount == 0:
                raise LookupError(f"Note {note_id} not found")
        finally:
            await db.close()

    async def list_by_folder(self, folder_id: str) -> list[Note]:
        db = await connect(self.db_path)
        try:
            cursor = await db.execute(
                "SELECT * FROM notes WHERE folder_id = ? ORDER BY updated_at DESC",
                (folder_id,),
            )
            rows = await cursor.fetchall()
            return [_row_to_note(dict(r)) for r in rows]
        finally:
            await db.close()

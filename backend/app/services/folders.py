"""
Folder management service.
"""

from typing import Optional

from app.database.db import connect
from app.logging import get_logger
from app.models import ActivityAction, Folder, FolderCreate
from app.services.activity_log import ActivityLogService

logger = get_logger('services.folders')


def _row_to_folder(row: dict) -> Folder:
    return Folder(
        id=row["id"],
        name=row["name"],
        date=row["date"],
        created_by=row["created_by"],
        created_at=row["created_at"],
    )


class FolderService:
    """Service for folder CRUD."""

    def __init__(self, db_path: str, activity_log: Optional[ActivityLogService] = None):
        self.db_path = db_path
        self.activity_log = activity_log

    async def list_folders(self) -> list[Folder]:
        db = await connect(self.db_path)
        try:
            cursor = await db.execute("SELECT * FROM folders ORDER BY created_at DESC")
            rows = await cursor.fetchall()
            return [_row_to_folder(dict(r)) for r in rows]
        finally:
            await db.close()

    async def get_folder(self, folder_id: str) -> Folder | None:
        db = await connect(self.db_path)
        try:
            cursor = await db.execute("SELECT * FROM folders WHERE id = ?", (folder_id,))
            row = await cursor.fetchone()
            return _row_to_folder(dict(row)) if row else None
        finally:
            await db.close()

    async def create_folder(self, data: FolderCreate, actor: str) -> Folder:
        folder = Folder(name=data.name, date=data.date, created_by=actor)

        db = await connect(self.db_path)
        try:
            await db.execute(
                """INSERT INTO folders (id, name, date, created_by, created_at)
                   VALUES (?, ?, ?, ?, ?)""",
                (folder.id, folder.name, folder.date.isoformat(),
                 folder.created_by, folder.created_at.isoformat()),
            )
            await db.commit()
        finally:
            await db.close()

        logger.info(f"Created folder: {folder.name} ({folder.id[:8]})")
        await self._log_activity(
            ActivityAction.CREATED_FOLDER, f'Created folder "{folder.name}"', actor
        )
        return folder

    async def delete_folder(self, folder_id: str, actor: str) -> bool:
        folder = await self.get_folder(folder_id)
        if not folder:
            return False

        db = await connect(self.db_path)
        try:
            cursor = await db.execute("DELETE FROM folders WHERE id = ?", (folder_id,))
            await db.commit()
            deleted = cursor.rowcount > 0
        finally:
            await db.close()

        if deleted:
            logger.info(f"Deleted folder {folder_id[:8]} with its photos and notes")
            await self._log_activity(
                ActivityAction.DELETED_FOLDER, f'Deleted folder "{folder.name}"', actor
            )
        return deleted

    async def _log_activity(self, action: ActivityAction, details: str, actor: str) -> None:
        if self.activity_log is None:
            return
        try:
            await self.activity_log.append(action.value, details, actor)
        except Exception as e:
            logger.warning(f"Failed to record activity '{action.value}': {e}")

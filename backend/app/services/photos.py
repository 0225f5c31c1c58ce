"""
Photo records for album folders.
"""

from typing import Optional

from app.config import settings
from app.database.db import connect
from app.exceptions import ValidationError
from app.logging import get_logger
from app.models import ActivityAction, Folder, Photo, PhotoCreate
from app.services.activity_log import ActivityLogService

logger = get_logger('services.photos')


def _row_to_photo(row: dict) -> Photo:
    return Photo(
        id=row["id"],
        folder_id=row["folder_id"],
        url=row["url"],
        uploaded_by=row["uploaded_by"],
        uploaded_at=row["uploaded_at"],
    )


class PhotoService:
    """Service for listing, recording and removing a folder's photos."""

    def __init__(
        self,
        db_path: str,
        activity_log: Optional[ActivityLogService] = None,
        max_bytes: Optional[int] = None,
    ):
        self.db_path = db_path
        self.activity_log = activity_log
        self.max_bytes = settings.PHOTO_MAX_BYTES if max_bytes is None else max_bytes

    async def list_photos(self, folder_id: str) -> list[Photo]:
        db = await connect(self.db_path)
        try:
            cursor = await db.execute(
                "SELECT * FROM photos WHERE folder_id = ? ORDER BY uploaded_at ASC, rowid ASC",
                (folder_id,),
            )
            rows = await cursor.fetchall()
            return [_row_to_photo(dict(r)) for r in rows]
        finally:
            await db.close()

    async def get_photo(self, folder_id: str, photo_id: str) -> Photo | None:
        db = await connect(self.db_path)
        try:
            cursor = await db.execute(
                "SELECT * FROM photos WHERE id = ? AND folder_id = ?",
                (photo_id, folder_id),
            )
            row = await cursor.fetchone()
            return _row_to_photo(dict(row)) if row else None
        finally:
            await db.close()

    async def add_photo(self, folder: Folder, data: PhotoCreate, actor: str) -> Photo:
        if not data.content_type.startswith("image/"):
            raise ValidationError("Please select only image files.")
        if data.size_bytes > self.max_bytes:
            raise ValidationError(
                f"File size must be less than {self.max_bytes // (1024 * 1024)}MB."
            )

        photo = Photo(folder_id=folder.id, url=data.url, uploaded_by=actor)
        db = await connect(self.db_path)
        try:
            await db.execute(
                """INSERT INTO photos (id, folder_id, url, uploaded_by, uploaded_at)
                   VALUES (?, ?, ?, ?, ?)""",
                (photo.id, photo.folder_id, photo.url, photo.uploaded_by,
                 photo.uploaded_at.isoformat()),
            )
            await db.commit()
        finally:
            await db.close()

        logger.info(f"{actor} added photo {photo.id[:8]} to folder {folder.id[:8]}")
        await self._log_activity(ActivityAction.UPLOADED_PHOTO, "Uploaded a photo", actor)
        return photo

    async def delete_photo(self, folder: Folder, photo_id: str, actor: str) -> bool:
        db = await connect(self.db_path)
        try:
            cursor = await db.execute(
                "DELETE FROM photos WHERE id = ? AND folder_id = ?",
                (photo_id, folder.id),
            )
            await db.commit()
            deleted = cursor.rowcount > 0
        finally:
            await db.close()

        if deleted:
            await self._log_activity(
                ActivityAction.DELETED_PHOTO,
                f'Deleted a photo from folder "{folder.name}"',
                actor,
            )
        return deleted

    async def _log_activity(self, action: ActivityAction, details: str, actor: str) -> None:
        if self.activity_log is None:
            return
        try:
            await self.activity_log.append(action.value, details, actor)
        except Exception as e:
            logger.warning(f"Failed to record activity '{action.value}': {e}")

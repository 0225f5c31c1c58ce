"""Activity feed: best-effort, append-only record of user actions."""

from collections.abc import Awaitable, Callable
from typing import Optional

from app.database.db import connect
from app.logging import get_logger
from app.models import ActivityLogEntry

logger = get_logger("services.activity_log")

ActivityListener = Callable[[ActivityLogEntry], Awaitable[None]]


def _row_to_entry(row: dict) -> ActivityLogEntry:
    return ActivityLogEntry(
        id=row["id"],
        action=row["action"],
        details=row["details"],
        user=row["user"],
        timestamp=row["timestamp"],
    )


class ActivityLogService:
    def __init__(self, db_path: str, listener: Optional[ActivityListener] = None):
        self.db_path = db_path
        self.listener = listener

    async def append(self, action: str, details: str, actor: str) -> ActivityLogEntry:
        entry = ActivityLogEntry(action=action, details=details, user=actor)
        db = await connect(self.db_path)
        try:
            await db.execute(
                """INSERT INTO activity_log (id, action, details, user, timestamp)
                   VALUES (?, ?, ?, ?, ?)""",
                (entry.id, entry.action, entry.details, entry.user, entry.timestamp.isoformat()),
            )
            await db.commit()
        finally:
            await db.close()

        if self.listener is not None:
            try:
                await self.listener(entry)
            except Exception as e:
                logger.warning(f"Activity broadcast failed: {e}")
        return entry

    async def list_recent(self, limit: int = 50) -> list[ActivityLogEntry]:
        db = await connect(self.db_path)
        try:
            cursor = await db.execute(
                "SELECT * FROM activity_log ORDER BY timestamp DESC LIMIT ?",
                (limit,),
            )
            rows = await cursor.fetchall()
            return [_row_to_entry(dict(r)) for r in rows]
        finally:
            await db.close()

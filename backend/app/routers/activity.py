"""Activity feed routes."""

from fastapi import APIRouter, Query

from app.config import settings
from app.dependencies import ActivityLogDep, CurrentSessionDep
from app.models import ActivityLogEntry

router = APIRouter()


@router.get("/", response_model=list[ActivityLogEntry])
async def list_activity(
    service: ActivityLogDep,
    session: CurrentSessionDep,
    limit: int = Query(settings.ACTIVITY_FEED_LIMIT, ge=1, le=200),
):
    return await service.list_recent(limit)

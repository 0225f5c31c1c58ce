"""Photo routes."""

from fastapi import APIRouter, HTTPException

from app.dependencies import CurrentSessionDep, FolderDep, PhotoServiceDep
from app.exceptions import ValidationError
from app.models import Photo, PhotoCreate

router = APIRouter()


@router.get("/{folder_id}/photos", response_model=list[Photo])
async def list_photos(folder: FolderDep, service: PhotoServiceDep, session: CurrentSessionDep):
    return await service.list_photos(folder.id)


@router.post("/{folder_id}/photos", response_model=Photo, status_code=201)
async def add_photo(
    body: PhotoCreate,
    folder: FolderDep,
    service: PhotoServiceDep,
    session: CurrentSessionDep,
):
    try:
        return await service.add_photo(folder, body, actor=session.user.username)
    except ValidationError as exc:
        raise HTTPException(400, str(exc)) from exc


@router.delete("/{folder_id}/photos/{photo_id}")
async def delete_photo(
    photo_id: str,
    folder: FolderDep,
    service: PhotoServiceDep,
    session: CurrentSessionDep,
    confirm: bool = False,
):
    if not await service.get_photo(folder.id, photo_id):
        raise HTTPException(404, "Photo not found")
    if not confirm:
        return {"status": "cancelled", "id": photo_id}
    if not await service.delete_photo(folder, photo_id, actor=session.user.username):
        raise HTTPException(404, "Photo not found")
    return {"status": "deleted", "id": photo_id}

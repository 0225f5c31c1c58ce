"""Folder routes."""

from fastapi import APIRouter, HTTPException

from app.dependencies import CurrentSessionDep, FolderDep, FolderServiceDep, NoteRegistryDep
from app.models import Folder, FolderCreate

router = APIRouter()


@router.get("/", response_model=list[Folder])
async def list_folders(service: FolderServiceDep, session: CurrentSessionDep):
    return await service.list_folders()


@router.post("/", response_model=Folder, status_code=201)
async def create_folder(body: FolderCreate, service: FolderServiceDep, session: CurrentSessionDep):
    return await service.create_folder(body, actor=session.user.username)


@router.get("/{folder_id}", response_model=Folder)
async def get_folder(folder: FolderDep, session: CurrentSessionDep):
    return folder


@router.delete("/{folder_id}")
async def delete_folder(
    folder: FolderDep,
    service: FolderServiceDep,
    registry: NoteRegistryDep,
    session: CurrentSessionDep,
    confirm: bool = False,
):
    if not confirm:
        return {"status": "cancelled", "id": folder.id}
    deleted = await service.delete_folder(folder.id, actor=session.user.username)
    if not deleted:
        raise HTTPException(404, "Folder not found")
    registry.discard_folder(folder.id)
    return {"status": "deleted", "id": folder.id}

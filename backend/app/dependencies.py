"""
Dependency injection for FastAPI routes.

Provides typed service dependencies that enable IDE navigation (Ctrl+Click).
"""

from typing import Annotated, Optional
from fastapi import Depends, Header, HTTPException, Request

from app.exceptions import AuthenticationError
from app.models import Folder, Session
from app.services.activity_log import ActivityLogService
from app.services.auth import AuthService
from app.services.folders import FolderService
from app.services.note_coordinator import NoteCoordinatorRegistry
from app.services.photos import PhotoService


def get_activity_log(request: Request) -> ActivityLogService:
    return request.app.state.activity_log


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_folder_service(request: Request) -> FolderService:
    return request.app.state.folder_service


def get_note_registry(request: Request) -> NoteCoordinatorRegistry:
    return request.app.state.note_registry


def get_photo_service(request: Request) -> PhotoService:
    return request.app.state.photo_service


ActivityLogDep = Annotated[ActivityLogService, Depends(get_activity_log)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
FolderServiceDep = Annotated[FolderService, Depends(get_folder_service)]
NoteRegistryDep = Annotated[NoteCoordinatorRegistry, Depends(get_note_registry)]
PhotoServiceDep = Annotated[PhotoService, Depends(get_photo_service)]


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        return ""
    scheme, _, token = authorization.partition(" ")
    return token.strip() if scheme.lower() == "bearer" else ""


async def get_current_session(
    auth: AuthServiceDep,
    authorization: Annotated[Optional[str], Header()] = None,
) -> Session:
    try:
        return await auth.resolve(_bearer_token(authorization))
    except AuthenticationError as exc:
        raise HTTPException(401, str(exc)) from exc


CurrentSessionDep = Annotated[Session, Depends(get_current_session)]


async def get_folder(folder_id: str, service: FolderServiceDep) -> Folder:
    folder = await service.get_folder(folder_id)
    if not folder:
        raise HTTPException(404, "Folder not found")
    return folder


FolderDep = Annotated[Folder, Depends(get_folder)]

"""Note routes.

Mutations go through the caller's note coordinator for the folder, so the
returned collection reflects optimistic state and rollbacks.
"""

from fastapi import APIRouter, HTTPException

from app.dependencies import CurrentSessionDep, FolderDep, NoteRegistryDep
from app.exceptions import NotFoundError, PersistenceError, ValidationError
from app.logging import get_logger
from app.models import Note, NoteCreate, NoteMutationResult, NoteUpdate
from app.realtime import broadcast_note_change

logger = get_logger("routers.notes")

router = APIRouter()


def _persistence_failed(exc: PersistenceError) -> HTTPException:
    logger.error(f"{exc.operation} failed: {exc.cause!r}")
    return HTTPException(503, str(exc))


@router.get("/{folder_id}/notes", response_model=list[Note])
async def list_notes(
    folder: FolderDep,
    registry: NoteRegistryDep,
    session: CurrentSessionDep,
    refresh: bool = False,
):
    coordinator = await registry.get(session.token, folder)
    if refresh:
        return await coordinator.load()
    return await coordinator.sync()


@router.post("/{folder_id}/notes", response_model=NoteMutationResult, status_code=201)
async def create_note(
    body: NoteCreate,
    folder: FolderDep,
    registry: NoteRegistryDep,
    session: CurrentSessionDep,
):
    coordinator = await registry.get(session.token, folder)
    try:
        result = await coordinator.create(body.content, actor=session.user.username)
    except ValidationError as exc:
        raise HTTPException(400, str(exc)) from exc
    except PersistenceError as exc:
        raise _persistence_failed(exc) from exc
    await broadcast_note_change(folder.id, "created", result.note)
    return result


@router.put("/{folder_id}/notes/{note_id}", response_model=NoteMutationResult)
async def update_note(
    note_id: str,
    body: NoteUpdate,
    folder: FolderDep,
    registry: NoteRegistryDep,
    session: CurrentSessionDep,
):
    coordinator = await registry.get(session.token, folder)
    try:
        result = await coordinator.update(note_id, body.content, actor=session.user.username)
    except ValidationError as exc:
        raise HTTPException(400, str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(404, "Note not found") from exc
    except PersistenceError as exc:
        raise _persistence_failed(exc) from exc
    await broadcast_note_change(folder.id, "updated", result.note)
    return result


@router.delete("/{folder_id}/notes/{note_id}", response_model=NoteMutationResult)
async def delete_note(
    note_id: str,
    folder: FolderDep,
    registry: NoteRegistryDep,
    session: CurrentSessionDep,
    confirm: bool = False,
):
    coordinator = await registry.get(session.token, folder)
    try:
        result = await coordinator.delete(
            note_id, actor=session.user.username, confirm=lambda _note: confirm
        )
    except ValidationError as exc:
        raise HTTPException(400, str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(404, "Note not found") from exc
    except PersistenceError as exc:
        raise _persistence_failed(exc) from exc
    if not result.cancelled:
        await broadcast_note_change(folder.id, "deleted", result.note)
    return result

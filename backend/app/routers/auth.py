"""Sign-in routes."""

from fastapi import APIRouter, HTTPException

from app.dependencies import AuthServiceDep, CurrentSessionDep, NoteRegistryDep
from app.exceptions import AuthenticationError
from app.models import LoginRequest, Session, User

router = APIRouter()


@router.post("/login", response_model=Session)
async def login(body: LoginRequest, auth: AuthServiceDep):
    try:
        return await auth.login(body.username, body.password)
    except AuthenticationError as exc:
        raise HTTPException(401, str(exc)) from exc


@router.post("/logout")
async def logout(session: CurrentSessionDep, auth: AuthServiceDep, registry: NoteRegistryDep):
    await auth.logout(session.token)
    registry.discard_session(session.token)
    return {"status": "signed_out"}


@router.get("/me", response_model=User)
async def me(session: CurrentSessionDep):
    return session.user

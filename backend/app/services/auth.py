"""
Family sign-in.

Credentials come from a ``CredentialProvider`` and sessions live in a
``SessionStore``; either can be swapped without touching the routes.
"""

import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol

from app.config import settings
from app.database.db import connect
from app.exceptions import AuthenticationError
from app.logging import get_logger
from app.models import Session, User

logger = get_logger('services.auth')


class CredentialProvider(Protocol):
    def verify(self, username: str, password: str) -> Optional[User]: ...


class SessionStore(Protocol):
    async def get(self, token: str) -> Optional[Session]: ...

    async def save(self, session: Session) -> None: ...

    async def delete(self, token: str) -> None: ...


class StaticCredentialProvider:
    """Fixed username -> password table, typically from ``FAMILY_CREDENTIALS``."""

    def __init__(self, credentials: dict[str, str]):
        self._credentials = dict(credentials)

    def verify(self, username: str, password: str) -> Optional[User]:
        expected = self._credentials.get(username)
        if expected is None:
            return None
        if not hmac.compare_digest(expected.encode(), password.encode()):
            return None
        return User(id=username.lower(), username=username)


class InMemorySessionStore:
    def __init__(self):
        self._sessions: dict[str, Session] = {}

    async def get(self, token: str) -> Optional[Session]:
        return self._sessions.get(token)

    async def save(self, session: Session) -> None:
        self._sessions[session.token] = session

    async def delete(self, token: str) -> None:
        self._sessions.pop(token, None)


class SqliteSessionStore:
    """Sessions persisted across restarts."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    async def get(self, token: str) -> Optional[Session]:
        db = await connect(self.db_path)
        try:
            cursor = await db.execute("SELECT * FROM sessions WHERE token = ?", (token,))
            row = await cursor.fetchone()
        finally:
            await db.close()
        if not row:
            return None
        return Session(
            token=row["token"],
            user=User(id=row["user_id"], username=row["username"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    async def save(self, session: Session) -> None:
        db = await connect(self.db_path)
        try:
            await db.execute(
                """INSERT OR REPLACE INTO sessions (token, user_id, username, created_at)
                   VALUES (?, ?, ?, ?)""",
                (session.token, session.user.id, session.user.username,
                 session.created_at.isoformat()),
            )
            await db.commit()
        finally:
            await db.close()

    async def delete(self, token: str) -> None:
        db = await connect(self.db_path)
        try:
            await db.execute("DELETE FROM sessions WHERE token = ?", (token,))
            await db.commit()
        finally:
            await db.close()


class AuthService:
    def __init__(
        self,
        credentials: CredentialProvider,
        sessions: SessionStore,
        max_age_seconds: Optional[int] = None,
    ):
        self.credentials = credentials
        self.sessions = sessions
        self.max_age = timedelta(seconds=(
            settings.SESSION_MAX_AGE_SECONDS if max_age_seconds is None else max_age_seconds
        ))

    async def login(self, username: str, password: str) -> Session:
        user = self.credentials.verify(username, password)
        if user is None:
            logger.info(f"Rejected sign-in for '{username}'")
            raise AuthenticationError("Invalid credentials. Please try again.")

        session = Session(token=secrets.token_urlsafe(32), user=user)
        await self.sessions.save(session)
        logger.info(f"{user.username} signed in")
        return session

    async def resolve(self, token: str) -> Session:
        session = await self.sessions.get(token) if token else None
        if session is None:
            raise AuthenticationError("Not signed in")
        if datetime.now(timezone.utc) - session.created_at > self.max_age:
            await self.sessions.delete(token)
            raise AuthenticationError("Session expired; please sign in again")
        return session

    async def logout(self, token: str) -> None:
        await self.sessions.delete(token)

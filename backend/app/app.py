"""
Family Album - FastAPI Backend
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import socketio

from app.config import settings
from app.database.db import init_db
from app.logging import setup_logging, get_logger
from app.realtime import sio, broadcast_activity
from app.routers import (
    activity,
    auth,
    folders,
    notes,
    photos,
)
from app.services.activity_log import ActivityLogService
from app.services.auth import AuthService, SqliteSessionStore, StaticCredentialProvider
from app.services.folders import FolderService
from app.services.note_coordinator import NoteCoordinatorRegistry
from app.services.note_store import SqliteNoteStore
from app.services.photos import PhotoService

logger = get_logger('main')


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Starting Family Album API")

    await init_db(settings.DATABASE_PATH)
    logger.info("Database initialized")

    if not settings.FAMILY_CREDENTIALS:
        logger.warning("FAMILY_CREDENTIALS not set - nobody will be able to sign in")

    # Initialize services
    app.state.activity_log = ActivityLogService(
        db_path=settings.DATABASE_PATH,
        listener=broadcast_activity,
    )
    app.state.auth_service = AuthService(
        credentials=StaticCredentialProvider(settings.FAMILY_CREDENTIALS),
        sessions=SqliteSessionStore(settings.DATABASE_PATH),
    )
    app.state.folder_service = FolderService(
        db_path=settings.DATABASE_PATH,
        activity_log=app.state.activity_log,
    )
    app.state.note_registry = NoteCoordinatorRegistry(
        store=SqliteNoteStore(settings.DATABASE_PATH),
        activity_log=app.state.activity_log,
    )
    app.state.photo_service = PhotoService(
        db_path=settings.DATABASE_PATH,
        activity_log=app.state.activity_log,
    )
    logger.info("Services initialized")

    yield

    logger.info("Shutting down application")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Family Album API",
        description="Private family photo album: folders, photos, notes and an activity feed",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
    app.include_router(folders.router, prefix="/api/folders", tags=["Folders"])
    app.include_router(notes.router, prefix="/api/folders", tags=["Notes"])
    app.include_router(photos.router, prefix="/api/folders", tags=["Photos"])
    app.include_router(activity.router, prefix="/api/activity", tags=["Activity"])

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "service": "family-album",
        }

    @app.get("/")
    async def root():
        return {
            "name": "Family Album API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health"
        }

    return app


def create_asgi_app() -> socketio.ASGIApp:
    """FastAPI app wrapped with the Socket.IO endpoint at ``/socket.io``."""
    return socketio.ASGIApp(sio, other_asgi_app=create_app())

"""
Socket.IO server pushing note and activity changes to connected clients.

Clients join a room per folder by connecting with ``?folderId=<id>``.
"""

import socketio

from app.logging import get_logger
from app.models import ActivityLogEntry, Note

logger = get_logger('realtime')

sio = socketio.AsyncServer(
    async_mode='asgi',
    cors_allowed_origins='*'
)


@sio.event
async def connect(sid, environ):
    query_string = environ.get('QUERY_STRING', '')
    if 'folderId=' in query_string:
        folder_id = query_string.split('folderId=')[-1].split('&')[0]
        await sio.enter_room(sid, folder_id)
        logger.debug(f"Client {sid[:8]}... joined folder room: {folder_id[:8]}...")


@sio.event
async def disconnect(sid):
    logger.debug(f"Client {sid[:8]}... disconnected")


async def broadcast_activity(entry: ActivityLogEntry) -> None:
    await sio.emit('activity', entry.model_dump(mode='json'))


async def broadcast_note_change(folder_id: str, event: str, note: Note) -> None:
    try:
        await sio.emit(
            'note_changed',
            {'event': event, 'note': note.model_dump(mode='json')},
            room=folder_id,
        )
    except Exception as e:
        logger.warning(f"Note broadcast failed for folder {folder_id[:8]}: {e}")

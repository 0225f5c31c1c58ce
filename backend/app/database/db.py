"""
Database connection and initialization.
"""

import aiosqlite
from pathlib import Path
from app.logging import get_logger

logger = get_logger('database')

SCHEMA_PATH = Path(__file__).parent / "init_db.sql"


async def connect(db_path: str) -> aiosqlite.Connection:
    """
    Open a connection with row access by column name and foreign keys enforced.

    :param db_path: Path to the SQLite database file
    :type db_path: str
    :return: Open database connection; the caller closes it
    :rtype: aiosqlite.Connection
    """
    db = await aiosqlite.connect(db_path)
    db.row_factory = aiosqlite.Row
    await db.execute("PRAGMA foreign_keys = ON")
    return db


async def init_db(db_path: str):
    """
    Initialize database with schema.

    :param db_path: Path to the SQLite database file
    :type db_path: str
    :return: None
    :rtype: None
    """
    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    async with aiosqlite.connect(path) as db:
        with open(SCHEMA_PATH) as f:
            await db.executescript(f.read())
        await db.commit()
        logger.info(f"Database initialized at {path}")

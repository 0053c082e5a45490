"""
Database connection and initialization.
"""

import aiosqlite
from pathlib import Path
from recipeshare.config import settings
from recipeshare.logging import get_logger

logger = get_logger('database')

DATABASE_PATH = Path(settings.DATABASE_PATH)


async def connect(db_path: str | Path | None = None) -> aiosqlite.Connection:
    """
    Open a connection with dict-like rows.

    :param db_path: Database file, defaults to the configured path
    :type db_path: str | Path | None
    :return: Open database connection; the caller closes it
    :rtype: aiosqlite.Connection
    """
    db = await aiosqlite.connect(db_path or DATABASE_PATH)
    db.row_factory = aiosqlite.Row
    return db


async def init_db(db_path: str | Path | None = None):
    """
    Initialize database with schema.

    :param db_path: Database file, defaults to the configured path
    :type db_path: str | Path | None
    :return: None
    :rtype: None
    """
    path = Path(db_path or DATABASE_PATH)
    path.parent.mkdir(parents=True, exist_ok=True)

    async with aiosqlite.connect(path) as db:
        schema_path = Path(__file__).parent / "init_db.sql"
        with open(schema_path) as f:
            await db.executescript(f.read())
        await db.commit()
        logger.info(f"Database initialized at {path}")

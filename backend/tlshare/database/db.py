"""
Database connection and initialization.
"""

import aiosqlite
from pathlib import Path
from tlshare.logging import get_logger

logger = get_logger('database')

SCHEMA_PATH = Path(__file__).parent / "init_db.sql"


async def init_db(db_path: str | Path):
    """
    Initialize database with schema.

    :param db_path: SQLite file path
    :type db_path: str | Path
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

"""
Database module.

Owns the process-wide SQLite connection and the schema. Record CRUD lives
in the repositories (bot/repositories), which receive the connection
through BaseRepository.set_shared_connection.
"""

import logging
import sqlite3
import time
from typing import Optional

import config
from bot.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS guilds (
        guild_id TEXT PRIMARY KEY,
        embed_color TEXT,
        settings TEXT NOT NULL DEFAULT '{}',
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS guild_users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        guild_id TEXT NOT NULL,
        settings TEXT NOT NULL DEFAULT '{}',
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        updated_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        UNIQUE(user_id, guild_id)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_guild_users_guild ON guild_users(guild_id)",
)


def create_schema(conn: sqlite3.Connection):
    """Create the guilds and guild_users tables if they are missing."""
    with conn:
        for statement in SCHEMA:
            conn.execute(statement)


class Database:
    _instance = None

    def __new__(cls, *args, **kwargs):
        if not cls._instance:
            cls._instance = super(Database, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, db_path: Optional[str] = None):
        if self._initialized:
            return
        self._initialized = True
        self.db_path = str(db_path or config.DATABASE_PATH)
        # Repository calls run on worker threads via asyncio.to_thread
        self.conn = sqlite3.connect(self.db_path, check_same_thread=False, timeout=5.0)
        self.conn.row_factory = sqlite3.Row

        for attempt in range(3):
            try:
                self.conn.execute("PRAGMA journal_mode=WAL;")
                break
            except sqlite3.OperationalError as e:
                if attempt < 2:
                    logger.warning(f"Could not set journal_mode=WAL (attempt {attempt + 1}): {e}. Retrying...")
                    time.sleep(1)
                else:
                    logger.warning(f"Could not set journal_mode=WAL after 3 attempts: {e}")

        create_schema(self.conn)

        # Share connection with repositories for consistency
        BaseRepository.set_shared_connection(self.conn, self.db_path)
        logger.info(f"Database ready at {self.db_path}")

    def close(self):
        """Close the connection and forget the singleton."""
        BaseRepository.clear_shared_connection()
        self.conn.close()
        Database._instance = None

"""
User repository for per-(user, guild) record persistence.
"""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional
import sqlite3

from bot.models.user import UserRecord
from bot.repositories.base import BaseRepository


def _now() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


class UserRepository(BaseRepository[UserRecord]):
    """Repository for user records, keyed by (user_id, guild_id)."""

    def _row_to_entity(self, row: sqlite3.Row) -> UserRecord:
        return UserRecord.from_db_row(row)

    def get_all(self, limit: int = 100) -> List[UserRecord]:
        rows = self._execute(
            "SELECT * FROM guild_users ORDER BY updated_at DESC LIMIT ?",
            (limit,),
        )
        return [self._row_to_entity(row) for row in rows]

    def get(self, user_id: str, guild_id: str) -> Optional[UserRecord]:
        """Get a user's record inside one guild."""
        row = self._execute_one(
            "SELECT * FROM guild_users WHERE user_id = ? AND guild_id = ?",
            (str(user_id), str(guild_id)),
        )
        return self._row_to_entity(row) if row else None

    def count(self, user_id: str, guild_id: str) -> int:
        row = self._execute_one(
            "SELECT COUNT(*) AS total FROM guild_users WHERE user_id = ? AND guild_id = ?",
            (str(user_id), str(guild_id)),
        )
        return row["total"] if row else 0

    def insert(self, user_id: str, guild_id: str, settings: Optional[Dict[str, Any]] = None) -> UserRecord:
        """
        Insert a record with optional initial settings.

        Raises:
            sqlite3.IntegrityError: the user already has a record in this guild.
        """
        now = _now()
        self._execute_write(
            """
            INSERT INTO guild_users (user_id, guild_id, settings, created_at, updated_at)
            VALUES (?, ?, json_patch('{}', ?), ?, ?)
            """,
            (str(user_id), str(guild_id), json.dumps(settings or {}), now, now),
        )
        return self.get(user_id, guild_id)

    def insert_if_absent(self, user_id: str, guild_id: str) -> bool:
        """Insert a default record unless one exists. Returns True if a row was created."""
        now = _now()
        inserted = self._execute_write(
            """
            INSERT INTO guild_users (user_id, guild_id, created_at, updated_at) VALUES (?, ?, ?, ?)
            ON CONFLICT(user_id, guild_id) DO NOTHING
            """,
            (str(user_id), str(guild_id), now, now),
        )
        return inserted == 1

    def upsert(self, user_id: str, guild_id: str, data: Dict[str, Any]) -> Optional[UserRecord]:
        """Create the record with ``data`` as settings, or merge ``data`` into it."""
        settings_patch = json.dumps(data)
        now = _now()
        self._execute_write(
            """
            INSERT INTO guild_users (user_id, guild_id, settings, created_at, updated_at)
            VALUES (?, ?, json_patch('{}', ?), ?, ?)
            ON CONFLICT(user_id, guild_id) DO UPDATE SET
                settings = json_patch(guild_users.settings, ?),
                updated_at = excluded.updated_at
            """,
            (str(user_id), str(guild_id), settings_patch, now, now, settings_patch),
        )
        return self.get(user_id, guild_id)

    def delete(self, user_id: str, guild_id: str) -> int:
        """Delete a user's record in one guild; other guilds are untouched."""
        return self._execute_write(
            "DELETE FROM guild_users WHERE user_id = ? AND guild_id = ?",
            (str(user_id), str(guild_id)),
        )

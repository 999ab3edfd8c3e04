"""
Guild repository for per-guild record persistence.
"""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional
import sqlite3

from bot.models.guild import GuildRecord
from bot.repositories.base import BaseRepository

# Columns with a dedicated slot in the guilds table; anything else lives in settings.
GUILD_COLUMNS = ("embed_color",)


def _now() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


class GuildRepository(BaseRepository[GuildRecord]):
    """Repository for guild records."""

    def _row_to_entity(self, row: sqlite3.Row) -> GuildRecord:
        return GuildRecord.from_db_row(row)

    def get_all(self, limit: int = 100) -> List[GuildRecord]:
        """Get all guild records."""
        rows = self._execute(
            "SELECT * FROM guilds ORDER BY updated_at DESC LIMIT ?",
            (limit,),
        )
        return [self._row_to_entity(row) for row in rows]

    def get_by_guild_id(self, guild_id: str) -> Optional[GuildRecord]:
        """Get the record for a specific guild."""
        row = self._execute_one(
            "SELECT * FROM guilds WHERE guild_id = ?",
            (str(guild_id),),
        )
        return self._row_to_entity(row) if row else None

    def count(self, guild_id: str) -> int:
        row = self._execute_one(
            "SELECT COUNT(*) AS total FROM guilds WHERE guild_id = ?",
            (str(guild_id),),
        )
        return row["total"] if row else 0

    def insert(self, guild_id: str) -> GuildRecord:
        """
        Insert a default record.

        Raises:
            sqlite3.IntegrityError: a record for this guild already exists.
        """
        now = _now()
        self._execute_write(
            "INSERT INTO guilds (guild_id, created_at, updated_at) VALUES (?, ?, ?)",
            (str(guild_id), now, now),
        )
        return self.get_by_guild_id(guild_id)

    def insert_if_absent(self, guild_id: str) -> bool:
        """Insert a default record unless one exists. Returns True if a row was created."""
        now = _now()
        inserted = self._execute_write(
            """
            INSERT INTO guilds (guild_id, created_at, updated_at) VALUES (?, ?, ?)
            ON CONFLICT(guild_id) DO NOTHING
            """,
            (str(guild_id), now, now),
        )
        return inserted == 1

    def upsert(self, guild_id: str, data: Dict[str, Any]) -> Optional[GuildRecord]:
        """
        Create the record with ``data`` as initial values, or patch the existing one.

        Runs as a single statement, so a concurrent first access can't slip
        between the create and the patch. ``embed_color`` is written to its
        column; every other key is merged into settings, where a None value
        removes the key.
        """
        has_color = "embed_color" in data
        settings_patch = json.dumps({k: v for k, v in data.items() if k not in GUILD_COLUMNS})
        now = _now()
        self._execute_write(
            """
            INSERT INTO guilds (guild_id, embed_color, settings, created_at, updated_at)
            VALUES (?, ?, json_patch('{}', ?), ?, ?)
            ON CONFLICT(guild_id) DO UPDATE SET
                embed_color = CASE WHEN ? THEN excluded.embed_color ELSE guilds.embed_color END,
                settings = json_patch(guilds.settings, ?),
                updated_at = excluded.updated_at
            """,
            (
                str(guild_id),
                data.get("embed_color"),
                settings_patch,
                now,
                now,
                1 if has_color else 0,
                settings_patch,
            ),
        )
        return self.get_by_guild_id(guild_id)

    def delete(self, guild_id: str) -> int:
        """Delete every record for a guild. Returns the number of rows removed."""
        return self._execute_write(
            "DELETE FROM guilds WHERE guild_id = ?",
            (str(guild_id),),
        )

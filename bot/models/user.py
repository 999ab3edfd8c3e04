"""
User-related data models.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from bot.models.guild import parse_settings, parse_timestamp


@dataclass
class UserRecord:
    """
    Represents a Discord user's state inside one guild.

    A user has independent state per guild, so the logical key is
    (user_id, guild_id).

    Attributes:
        id: Database ID
        user_id: Discord user snowflake
        guild_id: Discord guild snowflake
        settings: Open per-user, per-guild settings and counters
    """
    id: int
    user_id: str
    guild_id: str
    settings: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_db_row(cls, row) -> "UserRecord":
        """Create a UserRecord from a guild_users table row."""
        return cls(
            id=row["id"],
            user_id=str(row["user_id"]),
            guild_id=str(row["guild_id"]),
            settings=parse_settings(row["settings"]),
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
        )

    @property
    def key(self) -> tuple:
        return (self.user_id, self.guild_id)

    def get_setting(self, key: str, default: Any = None) -> Any:
        return self.settings.get(key, default)

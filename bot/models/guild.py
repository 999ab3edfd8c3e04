"""
Guild record model for per-server configuration.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


def parse_timestamp(value) -> Optional[datetime]:
    """Parse a SQLite DATETIME column, tolerating missing or odd values."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace(" ", "T"))
    except ValueError:
        return None


def parse_settings(value) -> Dict[str, Any]:
    """Decode the JSON settings column into a dict."""
    if not value:
        return {}
    try:
        data = json.loads(value)
    except (TypeError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


@dataclass
class GuildRecord:
    """
    Persisted configuration for a Discord guild.

    Attributes:
        guild_id: Discord guild snowflake (primary key)
        embed_color: HEX embed color override without '#', or None
        settings: Open key/value region (feature toggles, temp voice config, ...)
    """
    guild_id: str
    embed_color: Optional[str] = None
    settings: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_db_row(cls, row) -> "GuildRecord":
        """Create a GuildRecord from a guilds table row."""
        return cls(
            guild_id=str(row["guild_id"]),
            embed_color=row["embed_color"] or None,
            settings=parse_settings(row["settings"]),
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
        )

    @property
    def color_value(self) -> Optional[int]:
        """The embed color override as a 24-bit integer."""
        if not self.embed_color:
            return None
        try:
            return int(self.embed_color, 16)
        except ValueError:
            return None

    def get_setting(self, key: str, default: Any = None) -> Any:
        return self.settings.get(key, default)

"""
Environment configuration loader.

This module loads environment variables from .env file
for bot configuration.
"""

import os
from typing import List

from dotenv import load_dotenv

import config


def _parse_id_list(raw: str) -> List[str]:
    """Split a comma separated list of snowflakes, dropping blanks."""
    return [part.strip() for part in raw.split(",") if part.strip()]


class Environment:
    """
    Environment configuration container.

    Loads and provides access to environment variables
    needed for bot operation.

    Attributes:
        bot_token: Discord bot authentication token.
        owner_ids: User IDs allowed to run owner-only commands.
        database_path: SQLite database file.
    """

    def __init__(self):
        """Load environment variables from .env file."""
        load_dotenv()
        self.bot_token: str = os.getenv('DISCORD_BOT_TOKEN', '')
        self.owner_ids: List[str] = _parse_id_list(os.getenv('OWNER_IDS', ''))
        self.database_path: str = os.getenv('DATABASE_PATH', str(config.DATABASE_PATH))

"""
Centralized configuration for the Aurora bot.

This module contains the configuration constants, reply texts and paths
used across the codebase. Secrets and per-deployment values live in the
environment (see bot/environment.py).
"""

from pathlib import Path

# ============================================================================
# Paths
# ============================================================================

# Project root directory
PROJECT_ROOT = Path(__file__).parent.absolute()

# Database path
DATABASE_PATH = PROJECT_ROOT / "database.db"

# Daily log files
LOGS_DIR = PROJECT_ROOT / "Logs"


# ============================================================================
# Embeds
# ============================================================================

# Default embed color (HEX, no '#')
EMBED_HEX_COLOR = "7289da"

# Fallback when EMBED_HEX_COLOR or a guild override can't be parsed
EMBED_FALLBACK_COLOR = 0x7289DA

# Show the invoking user's tag and avatar in the footer
EMBED_SHOW_AUTHOR = True

# Stamp embeds with the current time
EMBED_SET_TIMESTAMP = True

EMOJIS = {
    "cross_mark": ":x:",
    "check_mark": ":white_check_mark:",
    "art": ":art:",
    "notes": ":notes:",
    "skip": ":track_next:",
    "stop": ":stop_button:",
    "wastebasket": ":wastebasket:",
}


# ============================================================================
# Guard Messages
# ============================================================================

VOICE_CHECK_MESSAGES = {
    "not_in_voice": "You're not in a voice channel.",
    "in_afk_channel": "You're in AFK channel.",
    "self_deafened": "You've deafened yourself.",
    "server_deafened": "You're deafened server-wide.",
    "different_channel": "You're not in the same voice channel as me.",
    "no_connection": "There's no voice connection in this server.",
    "queue_empty": "The queue is empty.",
    "last_track": (
        "The current track is the last one in the queue.\n"
        "If you want to destroy the voice connection, use `/stop` instead."
    ),
}

OWNER_CHECK_MESSAGES = {
    "owners_empty": "Owners list is empty, please check your config file.",
    "not_owner": "You're not included in owners list.",
}


# ============================================================================
# Settings Commands
# ============================================================================

# Accepts "ff0000" or "#FF0000"
HEX_COLOR_PATTERN = r"^#?([0-9a-f]{6})$"

# Maximum tracks listed by /queue
QUEUE_PAGE_SIZE = 10

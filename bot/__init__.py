"""
Bot package - Core bot components and utilities.

This package contains the bot class, database access, the record
store, voice/owner guards and the slash-command cogs.
"""

from bot.core import Bot
from bot.environment import Environment
from bot.database import Database

__all__ = [
    'Bot',
    'Environment',
    'Database',
]

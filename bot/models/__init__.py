"""
Data models (DTOs) for the Aurora bot.

These dataclasses provide type-safe representations of database entities
and enable cleaner interfaces between layers.
"""

from bot.models.guild import GuildRecord
from bot.models.user import UserRecord
from bot.models.result import StoreResult, StoreStatus

__all__ = [
    "GuildRecord",
    "UserRecord",
    "StoreResult",
    "StoreStatus",
]

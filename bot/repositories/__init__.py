"""
Repository layer for data access.

Repositories provide an abstraction over the database, enabling:
- Single Responsibility: Each repository handles one entity type
- Testability: Can be pointed at an in-memory database for unit tests
- Consistency: Standardized CRUD operations
"""

from bot.repositories.base import BaseRepository
from bot.repositories.guild import GuildRepository
from bot.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "GuildRepository",
    "UserRepository",
]

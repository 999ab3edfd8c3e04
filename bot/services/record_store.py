"""
Record store for per-guild and per-(user, guild) state.

Every command that reads configuration needs a record to exist, even when
the bot missed the join event that would have provisioned it. Reads are
therefore get-or-create. Creation goes through an INSERT ... ON CONFLICT at
the database level, and first access to a key is serialized in-process so
two interactions for the same key can't both decide to create it.

Storage failures, and values the settings column can't hold as JSON, are
logged and returned as StoreResult(ERROR); nothing in here raises to the
command handlers.
"""

import asyncio
import logging
import sqlite3
from contextlib import asynccontextmanager
from typing import Any, Dict, Hashable, Optional

from bot.models.guild import GuildRecord
from bot.models.result import StoreResult, StoreStatus
from bot.models.user import UserRecord
from bot.repositories.guild import GuildRepository
from bot.repositories.user import UserRepository

logger = logging.getLogger(__name__)


class KeyedLocks:
    """asyncio locks created per key and dropped once nobody holds or waits on them."""

    def __init__(self):
        self._locks: Dict[Hashable, asyncio.Lock] = {}
        self._users: Dict[Hashable, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, key: Hashable):
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]


class RecordStore:
    """Async facade over the guild and user repositories."""

    def __init__(self, guild_repo: Optional[GuildRepository] = None,
                 user_repo: Optional[UserRepository] = None):
        self.guild_repo = guild_repo or GuildRepository()
        self.user_repo = user_repo or UserRepository()
        self._locks = KeyedLocks()

    # ------------------------------------------------------------------
    # Guilds
    # ------------------------------------------------------------------

    async def get_guild(self, guild_id) -> StoreResult[GuildRecord]:
        """Return the guild's record, creating a default one if none exists."""
        if not guild_id:
            return StoreResult.invalid_key()
        gid = str(guild_id)

        try:
            async with self._locks.hold(("guild", gid)):
                record = await asyncio.to_thread(self.guild_repo.get_by_guild_id, gid)
                if record is not None:
                    return StoreResult(StoreStatus.FOUND, record)

                created = await asyncio.to_thread(self.guild_repo.insert_if_absent, gid)
                record = await asyncio.to_thread(self.guild_repo.get_by_guild_id, gid)
        except sqlite3.Error as e:
            logger.exception(f"Failed to get guild {gid}")
            return StoreResult.failed(e)

        if record is None:
            # Deleted between our insert and read-back
            logger.warning(f"Guild {gid} vanished right after creation")
            return StoreResult.failed(LookupError(f"guild {gid} not found after insert"))
        if created:
            logger.info(f"Created guild record {gid}")
        return StoreResult(StoreStatus.CREATED if created else StoreStatus.FOUND, record)

    async def add_guild(self, guild_id) -> StoreResult[GuildRecord]:
        """Create a default guild record; fails with CONFLICT if one exists."""
        if not guild_id:
            return StoreResult.invalid_key()
        gid = str(guild_id)

        try:
            async with self._locks.hold(("guild", gid)):
                record = await asyncio.to_thread(self.guild_repo.insert, gid)
        except sqlite3.IntegrityError as e:
            logger.warning(f"Guild {gid} already exists: {e}")
            return StoreResult.conflict(e)
        except sqlite3.Error as e:
            logger.exception(f"Failed to add guild {gid}")
            return StoreResult.failed(e)

        logger.info(f"Created guild record {gid}")
        return StoreResult(StoreStatus.CREATED, record)

    async def update_guild(self, guild_id, data: Dict[str, Any]) -> StoreResult[GuildRecord]:
        """
        Apply ``data`` to the guild's record, creating it with ``data`` if absent.

        ``embed_color`` goes to its own column, other keys are merged into
        the settings region (None removes a key).
        """
        if not guild_id:
            return StoreResult.invalid_key()
        gid = str(guild_id)

        try:
            async with self._locks.hold(("guild", gid)):
                record = await asyncio.to_thread(self.guild_repo.upsert, gid, dict(data))
        except sqlite3.Error as e:
            logger.exception(f"Failed to update guild {gid} with {sorted(data)}")
            return StoreResult.failed(e)
        except (TypeError, ValueError) as e:
            logger.error(f"Guild {gid} update has values that can't be stored: {e}")
            return StoreResult.failed(e)

        return StoreResult(StoreStatus.UPDATED, record)

    async def delete_guild(self, guild_id) -> StoreResult[GuildRecord]:
        """Remove the guild's record. Deleting a guild that has none is not an error."""
        if not guild_id:
            return StoreResult.invalid_key()
        gid = str(guild_id)

        try:
            async with self._locks.hold(("guild", gid)):
                removed = await asyncio.to_thread(self.guild_repo.delete, gid)
        except sqlite3.Error as e:
            logger.exception(f"Failed to delete guild {gid}")
            return StoreResult.failed(e)

        if removed:
            logger.info(f"Deleted guild record {gid}")
        return StoreResult(StoreStatus.DELETED)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def get_user(self, user_id, guild_id) -> StoreResult[UserRecord]:
        """Return the user's record in this guild, creating it if none exists."""
        if not user_id or not guild_id:
            return StoreResult.invalid_key()
        uid, gid = str(user_id), str(guild_id)

        try:
            async with self._locks.hold(("user", uid, gid)):
                record = await asyncio.to_thread(self.user_repo.get, uid, gid)
                if record is not None:
                    return StoreResult(StoreStatus.FOUND, record)

                created = await asyncio.to_thread(self.user_repo.insert_if_absent, uid, gid)
                record = await asyncio.to_thread(self.user_repo.get, uid, gid)
        except sqlite3.Error as e:
            logger.exception(f"Failed to get user {uid} in guild {gid}")
            return StoreResult.failed(e)

        if record is None:
            logger.warning(f"User {uid} in guild {gid} vanished right after creation")
            return StoreResult.failed(LookupError(f"user {uid}/{gid} not found after insert"))
        return StoreResult(StoreStatus.CREATED if created else StoreStatus.FOUND, record)

    async def add_user(self, user_id, guild_id, extra: Optional[Dict[str, Any]] = None) -> StoreResult[UserRecord]:
        """Create the user's record in this guild with optional initial settings."""
        if not user_id or not guild_id:
            return StoreResult.invalid_key()
        uid, gid = str(user_id), str(guild_id)

        try:
            async with self._locks.hold(("user", uid, gid)):
                record = await asyncio.to_thread(self.user_repo.insert, uid, gid, extra)
        except sqlite3.IntegrityError as e:
            logger.warning(f"User {uid} already exists in guild {gid}: {e}")
            return StoreResult.conflict(e)
        except sqlite3.Error as e:
            logger.exception(f"Failed to add user {uid} in guild {gid}")
            return StoreResult.failed(e)
        except (TypeError, ValueError) as e:
            logger.error(f"User {uid} in guild {gid} has settings that can't be stored: {e}")
            return StoreResult.failed(e)

        return StoreResult(StoreStatus.CREATED, record)

    async def update_user(self, user_id, guild_id, data: Dict[str, Any]) -> StoreResult[UserRecord]:
        """Merge ``data`` into the user's settings, creating the record with it if absent."""
        if not user_id or not guild_id:
            return StoreResult.invalid_key()
        uid, gid = str(user_id), str(guild_id)

        try:
            async with self._locks.hold(("user", uid, gid)):
                record = await asyncio.to_thread(self.user_repo.upsert, uid, gid, dict(data))
        except sqlite3.Error as e:
            logger.exception(f"Failed to update user {uid} in guild {gid}")
            return StoreResult.failed(e)
        except (TypeError, ValueError) as e:
            logger.error(f"User {uid} in guild {gid} update has values that can't be stored: {e}")
            return StoreResult.failed(e)

        return StoreResult(StoreStatus.UPDATED, record)

    async def remove_user(self, user_id, guild_id) -> StoreResult[UserRecord]:
        """Remove the user's record in this guild only."""
        if not user_id or not guild_id:
            return StoreResult.invalid_key()
        uid, gid = str(user_id), str(guild_id)

        try:
            async with self._locks.hold(("user", uid, gid)):
                removed = await asyncio.to_thread(self.user_repo.delete, uid, gid)
        except sqlite3.Error as e:
            logger.exception(f"Failed to remove user {uid} from guild {gid}")
            return StoreResult.failed(e)

        if removed:
            logger.info(f"Removed user {uid} from guild {gid}")
        return StoreResult(StoreStatus.DELETED)

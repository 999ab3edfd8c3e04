"""
Tests for bot/services/record_store.py - RecordStore.
"""

import asyncio
import sqlite3
from datetime import datetime
from unittest.mock import Mock

import pytest

from bot.models.result import StoreStatus


class TestGuildRecords:
    """Get-or-create, add, update and delete for guild records."""

    @pytest.mark.asyncio
    async def test_get_or_create_twice_creates_one_record(self, record_store, guild_repository):
        first = await record_store.get_guild("123")
        second = await record_store.get_guild("123")

        assert first.status is StoreStatus.CREATED
        assert second.status is StoreStatus.FOUND
        assert second.record.guild_id == first.record.guild_id == "123"
        assert guild_repository.count("123") == 1

    @pytest.mark.asyncio
    async def test_concurrent_first_access_creates_one_record(self, record_store, guild_repository):
        results = await asyncio.gather(*(record_store.get_guild(42) for _ in range(5)))

        statuses = [result.status for result in results]
        assert statuses.count(StoreStatus.CREATED) == 1
        assert statuses.count(StoreStatus.FOUND) == 4
        assert guild_repository.count("42") == 1
        assert len(record_store._locks) == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("guild_id", [None, ""])
    async def test_missing_guild_id_has_no_side_effects(self, record_store, guild_repository, guild_id):
        result = await record_store.get_guild(guild_id)

        assert result.status is StoreStatus.INVALID_KEY
        assert result.record is None
        assert not result.unknown
        assert guild_repository.get_all() == []

    @pytest.mark.asyncio
    async def test_add_guild_conflict(self, record_store):
        created = await record_store.add_guild("123")
        duplicate = await record_store.add_guild("123")

        assert created.status is StoreStatus.CREATED
        assert duplicate.status is StoreStatus.CONFLICT
        assert isinstance(duplicate.error, sqlite3.IntegrityError)
        assert duplicate.record is None

    @pytest.mark.asyncio
    async def test_update_creates_if_absent(self, record_store, guild_repository):
        result = await record_store.update_guild("777", {"embed_color": "ff0000"})

        assert result.status is StoreStatus.UPDATED
        assert result.record.embed_color == "ff0000"
        assert guild_repository.count("777") == 1
        assert guild_repository.get_by_guild_id("777").embed_color == "ff0000"

    @pytest.mark.asyncio
    async def test_update_patches_existing(self, record_store):
        await record_store.update_guild("777", {"embed_color": "ff0000", "tempvoice_enabled": True})
        result = await record_store.update_guild("777", {"tempvoice_channel": "99"})

        assert result.record.embed_color == "ff0000"
        assert result.record.get_setting("tempvoice_enabled") is True
        assert result.record.get_setting("tempvoice_channel") == "99"

    @pytest.mark.asyncio
    async def test_delete_missing_guild_is_not_an_error(self, record_store, guild_repository):
        result = await record_store.delete_guild("404")

        assert result.status is StoreStatus.DELETED
        assert result.ok
        assert guild_repository.count("404") == 0

    @pytest.mark.asyncio
    async def test_delete_existing_guild(self, record_store, guild_repository):
        await record_store.get_guild("123")
        await record_store.delete_guild("123")

        assert guild_repository.count("123") == 0

    @pytest.mark.asyncio
    async def test_storage_failure_is_unknown_not_absent(self, record_store):
        record_store.guild_repo.get_by_guild_id = Mock(side_effect=sqlite3.OperationalError("disk I/O error"))

        result = await record_store.get_guild("123")

        assert result.status is StoreStatus.ERROR
        assert result.unknown
        assert not result.ok
        assert isinstance(result.error, sqlite3.OperationalError)

    @pytest.mark.asyncio
    async def test_update_failure_does_not_raise(self, record_store):
        record_store.guild_repo.upsert = Mock(side_effect=sqlite3.OperationalError("database is locked"))

        result = await record_store.update_guild("123", {"embed_color": "00ff00"})

        assert result.status is StoreStatus.ERROR
        assert len(record_store._locks) == 0

    @pytest.mark.asyncio
    async def test_unserializable_update_is_reported(self, record_store, guild_repository):
        result = await record_store.update_guild("123", {"joined": datetime(2024, 1, 1)})

        assert result.status is StoreStatus.ERROR
        assert isinstance(result.error, TypeError)
        assert guild_repository.count("123") == 0
        assert len(record_store._locks) == 0


class TestUserRecords:
    """Same contract, keyed by (user, guild)."""

    @pytest.mark.asyncio
    async def test_get_or_create_is_per_guild(self, record_store, user_repository):
        first = await record_store.get_user("u1", "g1")
        again = await record_store.get_user("u1", "g1")
        other_guild = await record_store.get_user("u1", "g2")

        assert first.created
        assert again.status is StoreStatus.FOUND
        assert other_guild.created
        assert user_repository.count("u1", "g1") == 1

    @pytest.mark.asyncio
    async def test_missing_ids_are_invalid(self, record_store):
        assert (await record_store.get_user("u1", None)).status is StoreStatus.INVALID_KEY
        assert (await record_store.get_user(None, "g1")).status is StoreStatus.INVALID_KEY
        assert (await record_store.update_user("u1", "", {"xp": 1})).status is StoreStatus.INVALID_KEY

    @pytest.mark.asyncio
    async def test_add_user_with_extra_then_conflict(self, record_store):
        created = await record_store.add_user("u1", "g1", {"xp": 5})
        duplicate = await record_store.add_user("u1", "g1")

        assert created.record.settings == {"xp": 5}
        assert duplicate.status is StoreStatus.CONFLICT

    @pytest.mark.asyncio
    async def test_update_user_creates_with_data(self, record_store):
        result = await record_store.update_user("u1", "g1", {"xp": 15})

        assert result.record.settings == {"xp": 15}

    @pytest.mark.asyncio
    async def test_remove_user_keeps_other_guilds(self, record_store, user_repository):
        await record_store.get_user("u1", "g1")
        await record_store.get_user("u1", "g2")

        result = await record_store.remove_user("u1", "g1")
        missing = await record_store.remove_user("u1", "g1")

        assert result.ok and missing.ok
        assert user_repository.count("u1", "g1") == 0
        assert user_repository.count("u1", "g2") == 1

    @pytest.mark.asyncio
    async def test_user_storage_failure(self, record_store):
        record_store.user_repo.get = Mock(side_effect=sqlite3.DatabaseError("malformed"))

        result = await record_store.get_user("u1", "g1")

        assert result.unknown

    @pytest.mark.asyncio
    async def test_unserializable_user_settings_are_reported(self, record_store, user_repository):
        updated = await record_store.update_user("u1", "g1", {"seen": datetime(2024, 1, 1)})
        added = await record_store.add_user("u1", "g1", {"seen": {1, 2}})

        assert updated.status is StoreStatus.ERROR
        assert added.status is StoreStatus.ERROR
        assert user_repository.count("u1", "g1") == 0

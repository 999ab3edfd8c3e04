"""
Tests for bot/repositories/guild.py - GuildRepository.
"""

import sqlite3

import pytest


class TestGuildRepository:
    """Tests for guild record persistence operations."""

    def test_insert_and_get(self, guild_repository):
        record = guild_repository.insert("123")

        assert record is not None
        assert record.guild_id == "123"
        assert record.embed_color is None
        assert record.settings == {}
        assert record.created_at is not None

    def test_insert_duplicate_raises_integrity_error(self, guild_repository):
        guild_repository.insert("123")

        with pytest.raises(sqlite3.IntegrityError):
            guild_repository.insert("123")
        assert guild_repository.count("123") == 1

    def test_insert_if_absent_only_creates_once(self, guild_repository):
        assert guild_repository.insert_if_absent("123") is True
        assert guild_repository.insert_if_absent("123") is False
        assert guild_repository.count("123") == 1

    def test_get_missing_returns_none(self, guild_repository):
        assert guild_repository.get_by_guild_id("404") is None

    def test_upsert_creates_with_initial_values(self, guild_repository):
        record = guild_repository.upsert("123", {"embed_color": "ff0000", "tempvoice_enabled": True})

        assert record.embed_color == "ff0000"
        assert record.settings == {"tempvoice_enabled": True}
        assert guild_repository.count("123") == 1

    def test_upsert_patches_existing_record(self, guild_repository):
        guild_repository.upsert("123", {"embed_color": "ff0000", "tempvoice_enabled": True})
        record = guild_repository.upsert("123", {"tempvoice_channel": "555"})

        # Color untouched when the patch doesn't mention it
        assert record.embed_color == "ff0000"
        assert record.settings == {"tempvoice_enabled": True, "tempvoice_channel": "555"}

    def test_upsert_none_clears_color_and_removes_setting(self, guild_repository):
        guild_repository.upsert("123", {"embed_color": "ff0000", "tempvoice_enabled": True})
        record = guild_repository.upsert("123", {"embed_color": None, "tempvoice_enabled": None})

        assert record.embed_color is None
        assert record.settings == {}

    def test_delete_is_idempotent(self, guild_repository):
        guild_repository.insert("123")

        assert guild_repository.delete("123") == 1
        assert guild_repository.delete("123") == 0
        assert guild_repository.get_by_guild_id("123") is None

    def test_get_all(self, guild_repository):
        guild_repository.insert("1")
        guild_repository.insert("2")

        ids = {record.guild_id for record in guild_repository.get_all()}
        assert ids == {"1", "2"}

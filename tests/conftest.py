"""
Shared pytest fixtures for Aurora bot tests.
"""

import os
import sqlite3
import sys
from types import SimpleNamespace
from typing import Dict, Optional
from unittest.mock import AsyncMock

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def db_connection():
    """Create an in-memory SQLite database with the bot's schema."""
    from bot.database import create_schema

    # Store calls run on worker threads
    conn = sqlite3.connect(":memory:", check_same_thread=False)
    conn.row_factory = sqlite3.Row
    create_schema(conn)
    yield conn
    conn.close()


@pytest.fixture
def shared_db(db_connection):
    """Point every repository at the in-memory database."""
    from bot.repositories.base import BaseRepository

    BaseRepository.set_shared_connection(db_connection, ":memory:")
    yield db_connection
    BaseRepository.clear_shared_connection()


@pytest.fixture
def guild_repository(shared_db):
    from bot.repositories.guild import GuildRepository

    return GuildRepository(use_shared=True)


@pytest.fixture
def user_repository(shared_db):
    from bot.repositories.user import UserRepository

    return UserRepository(use_shared=True)


@pytest.fixture
def record_store(guild_repository, user_repository):
    from bot.services.record_store import RecordStore

    return RecordStore(guild_repo=guild_repository, user_repo=user_repository)


# ============================================================================
# Discord Stand-ins
# ============================================================================

class FakePlayback:
    """PlaybackState stand-in with fixed answers."""

    def __init__(self, connected: bool = False, queues: Optional[Dict[int, int]] = None):
        self.connected = connected
        self.queues = queues or {}

    def has_connection(self, guild_id):
        return self.connected

    def queue_length(self, guild_id):
        return self.queues.get(guild_id)


def make_ctx(
    channel_id: Optional[int] = 10,
    self_deaf: bool = False,
    deaf: bool = False,
    afk_channel_id: Optional[int] = None,
    bot_channel_id: Optional[int] = None,
    guild_id: int = 1,
    author_id: int = 100,
):
    """Build an ApplicationContext-shaped object for a caller in a guild."""
    voice = None
    if channel_id is not None:
        voice = SimpleNamespace(channel=SimpleNamespace(id=channel_id), self_deaf=self_deaf, deaf=deaf)

    bot_voice = SimpleNamespace(channel=SimpleNamespace(id=bot_channel_id)) if bot_channel_id else None

    author = SimpleNamespace(
        id=author_id,
        voice=voice,
        mention=f"<@{author_id}>",
        display_avatar=SimpleNamespace(url="https://cdn.example.com/avatar.png"),
    )
    guild = SimpleNamespace(
        id=guild_id,
        afk_channel=SimpleNamespace(id=afk_channel_id) if afk_channel_id else None,
        me=SimpleNamespace(voice=bot_voice),
        voice_client=None,
    )
    return SimpleNamespace(author=author, guild=guild, respond=AsyncMock(), defer=AsyncMock())


@pytest.fixture
def ctx_factory():
    return make_ctx


@pytest.fixture
def message_service():
    from bot.services.message import MessageService

    return MessageService(hex_color="7289da", show_author=True, set_timestamp=False)


@pytest.fixture
def playback_factory():
    return FakePlayback

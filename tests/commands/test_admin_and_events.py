"""
Tests for bot/commands/admin.py and bot/commands/events.py.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest

import config
from bot.commands.admin import AdminCog
from bot.commands.events import EventCog
from bot.models.result import StoreResult, StoreStatus
from bot.services.voice_checks import VoiceChecks


@pytest.fixture
def store():
    store = Mock()
    store.get_guild = AsyncMock(return_value=StoreResult(StoreStatus.CREATED))
    store.delete_guild = AsyncMock(return_value=StoreResult(StoreStatus.DELETED))
    store.remove_user = AsyncMock(return_value=StoreResult(StoreStatus.DELETED))
    return store


class TestAdminCog:

    @pytest.fixture
    def make_cog(self, store, message_service, playback_factory):
        def _make(owner_ids):
            checks = VoiceChecks(playback_factory(), message_service, owner_ids)
            return AdminCog(Mock(), store, checks, message_service)
        return _make

    @pytest.mark.asyncio
    async def test_owner_can_forget_guild(self, make_cog, store, ctx_factory):
        ctx = ctx_factory(guild_id=5, author_id=100)

        await make_cog(["100"]).forget_guild(ctx)

        store.delete_guild.assert_awaited_once_with(5)
        assert ctx.respond.await_args.kwargs["ephemeral"] is True

    @pytest.mark.asyncio
    async def test_non_owner_is_refused(self, make_cog, store, ctx_factory):
        ctx = ctx_factory(author_id=200)

        await make_cog(["100"]).forget_guild(ctx)

        store.delete_guild.assert_not_awaited()
        assert config.OWNER_CHECK_MESSAGES["not_owner"] in ctx.respond.await_args.kwargs["embed"].description

    @pytest.mark.asyncio
    async def test_forget_user_is_scoped_to_guild(self, make_cog, store, ctx_factory):
        ctx = ctx_factory(guild_id=5, author_id=100)
        member = SimpleNamespace(id=42, mention="<@42>")

        await make_cog(["100"]).forget_user(ctx, member)

        store.remove_user.assert_awaited_once_with(42, 5)

    @pytest.mark.asyncio
    async def test_storage_failure_is_not_reported_as_deleted(self, make_cog, store, ctx_factory):
        store.delete_guild.return_value = StoreResult.failed(RuntimeError("locked"))
        ctx = ctx_factory(author_id=100)

        await make_cog(["100"]).forget_guild(ctx)

        assert "nothing was confirmed deleted" in ctx.respond.await_args.kwargs["embed"].description


class TestEventCog:

    @pytest.mark.asyncio
    async def test_guild_lifecycle(self, store):
        cog = EventCog(Mock(), store)
        guild = SimpleNamespace(id=9)

        await cog.on_guild_join(guild)
        await cog.on_guild_remove(guild)

        store.get_guild.assert_awaited_once_with(9)
        store.delete_guild.assert_awaited_once_with(9)

    @pytest.mark.asyncio
    async def test_member_remove(self, store):
        cog = EventCog(Mock(), store)

        await cog.on_member_remove(SimpleNamespace(id=3, bot=False, guild=SimpleNamespace(id=9)))
        await cog.on_member_remove(SimpleNamespace(id=4, bot=True, guild=SimpleNamespace(id=9)))

        store.remove_user.assert_awaited_once_with(3, 9)

    @pytest.mark.asyncio
    async def test_guild_remove_with_real_store(self, record_store, guild_repository):
        cog = EventCog(Mock(), record_store)

        await cog.on_guild_join(SimpleNamespace(id=77))
        assert guild_repository.count("77") == 1

        await cog.on_guild_remove(SimpleNamespace(id=77))
        assert guild_repository.count("77") == 0

"""
Guild lifecycle listeners.

Keeps the record store in step with the bot's guild membership: records
are provisioned on join and purged when the bot or a member leaves.
"""

import logging

import discord
from discord.ext import commands

from bot.services.record_store import RecordStore

logger = logging.getLogger(__name__)


class EventCog(commands.Cog):
    """Listeners for guild join/leave and member leave."""

    def __init__(self, bot: discord.Bot, store: RecordStore):
        self.bot = bot
        self.store = store

    @commands.Cog.listener()
    async def on_guild_join(self, guild: discord.Guild):
        result = await self.store.get_guild(guild.id)
        if result.unknown:
            logger.warning(f"Couldn't provision record for new guild {guild.id}")

    @commands.Cog.listener()
    async def on_guild_remove(self, guild: discord.Guild):
        result = await self.store.delete_guild(guild.id)
        if result.unknown:
            logger.warning(f"Record for guild {guild.id} may still exist after removal")

    @commands.Cog.listener()
    async def on_member_remove(self, member: discord.Member):
        if member.bot:
            return
        result = await self.store.remove_user(member.id, member.guild.id)
        if result.unknown:
            logger.warning(f"Record for user {member.id} in guild {member.guild.id} may still exist")


def setup(bot):
    bot.add_cog(EventCog(bot, bot.store))

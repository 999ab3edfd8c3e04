"""
Owner-only slash commands (/owner ...).

These wipe stored data, so they are gated on the OWNER_IDS list rather
than on Discord permissions.
"""

import logging

import discord
from discord.ext import commands
from discord.commands import Option, SlashCommandGroup

from bot.services.message import MessageService
from bot.services.record_store import RecordStore
from bot.services.voice_checks import VoiceChecks

logger = logging.getLogger(__name__)


class AdminCog(commands.Cog):
    """Cog for owner commands."""

    owner = SlashCommandGroup("owner", "Bot owner commands", guild_only=True)

    def __init__(self, bot: discord.Bot, store: RecordStore, checks: VoiceChecks, messages: MessageService):
        """
        Initialize the admin cog.

        Args:
            bot: The Discord bot instance
            store: Record store holding guild and user data
            checks: Guards (only the owner gate is used here)
            messages: Reply formatting
        """
        self.bot = bot
        self.store = store
        self.checks = checks
        self.messages = messages

    async def _report(self, ctx, result, done: str):
        if result.ok:
            embed = self.messages.reply_embed(ctx, done, emoji="wastebasket")
        else:
            embed = self.messages.error_embed(ctx, "The database didn't answer, nothing was confirmed deleted.")
        await ctx.respond(embed=embed, ephemeral=True)

    async def forget_guild(self, ctx: discord.ApplicationContext):
        if not await self.checks.check_owner(ctx):
            return

        result = await self.store.delete_guild(ctx.guild.id)
        logger.info(f"{ctx.author} ({ctx.author.id}) wiped guild record {ctx.guild.id}: {result.status.value}")
        await self._report(ctx, result, "Stored settings for this server were deleted.")

    async def forget_user(self, ctx: discord.ApplicationContext, member: discord.Member):
        if not await self.checks.check_owner(ctx):
            return

        result = await self.store.remove_user(member.id, ctx.guild.id)
        logger.info(f"{ctx.author} ({ctx.author.id}) wiped user {member.id} in {ctx.guild.id}: {result.status.value}")
        await self._report(ctx, result, f"Stored data for {member.mention} in this server was deleted.")

    @owner.command(name="forget-guild", description="Delete this server's stored settings (Owner only)")
    async def forget_guild_command(self, ctx: discord.ApplicationContext):
        await self.forget_guild(ctx)

    @owner.command(name="forget-user", description="Delete a member's stored data in this server (Owner only)")
    async def forget_user_command(
        self,
        ctx: discord.ApplicationContext,
        member: Option(discord.Member, "Member whose data should be deleted", required=True),
    ):
        await self.forget_user(ctx, member)


def setup(bot):
    bot.add_cog(AdminCog(bot, bot.store, bot.checks, bot.messages))

"""
Server options slash commands (/opts ...).
"""

import logging
import re

import discord
from discord.ext import commands
from discord.commands import Option, SlashCommandGroup

import config
from bot.services.message import MessageService
from bot.services.record_store import RecordStore

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(config.HEX_COLOR_PATTERN, re.IGNORECASE)

SAVE_FAILED = "Couldn't save the setting right now, please try again later."


class SettingsCog(commands.Cog):
    """Per-guild options stored in the record store."""

    opts = SlashCommandGroup(
        "opts",
        "Server options",
        guild_only=True,
        default_member_permissions=discord.Permissions(manage_guild=True),
    )
    embed = opts.create_subgroup("embed", "Embed appearance")

    def __init__(self, bot: discord.Bot, store: RecordStore, messages: MessageService):
        self.bot = bot
        self.store = store
        self.messages = messages

    async def set_embed_color(self, ctx: discord.ApplicationContext, color: str):
        """Validate a HEX color and store it as the guild's embed color."""
        await ctx.defer()

        match = _HEX_COLOR.match(color.strip())
        if not match:
            await ctx.respond(self.messages.format_reply("That's not a valid HEX color.", self.messages.emoji("cross_mark")))
            return

        hex_value = match.group(1).lower()
        result = await self.store.update_guild(ctx.guild.id, {"embed_color": hex_value})
        if not result.ok:
            await ctx.respond(self.messages.format_reply(SAVE_FAILED, self.messages.emoji("cross_mark")))
            return

        logger.info(f"{ctx.author.id} set embed color of guild {ctx.guild.id} to #{hex_value}")
        await ctx.respond(
            embed=self.messages.reply_embed(
                ctx, f"Embed color set to `#{hex_value}`.", emoji="art", color=hex_value,
            )
        )

    async def reset_embed_color(self, ctx: discord.ApplicationContext):
        """Drop the guild's embed color override."""
        await ctx.defer()

        result = await self.store.update_guild(ctx.guild.id, {"embed_color": None})
        if not result.ok:
            await ctx.respond(self.messages.format_reply(SAVE_FAILED, self.messages.emoji("cross_mark")))
            return

        await ctx.respond(
            embed=self.messages.reply_embed(ctx, f"Embed color reset to `#{self.messages.hex_color}`.", emoji="art")
        )

    @embed.command(name="color", description="Edit the embeds color for this server")
    async def embed_color(
        self,
        ctx: discord.ApplicationContext,
        color: Option(str, "The color you want to set (HEX, # allowed)", required=True),
    ):
        await self.set_embed_color(ctx, color)

    @embed.command(name="reset", description="Go back to the default embeds color")
    async def embed_reset(self, ctx: discord.ApplicationContext):
        await self.reset_embed_color(ctx)


def setup(bot):
    """Set up settings commands cog."""
    bot.add_cog(SettingsCog(bot, bot.store, bot.messages))

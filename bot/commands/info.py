"""
Informational slash commands (/info ...).
"""

import discord
from discord.ext import commands
from discord.commands import SlashCommandGroup

from bot.services.message import MessageService
from bot.services.record_store import RecordStore

BOOST_LEVELS = {0: "None", 1: "Level 1", 2: "Level 2", 3: "Level 3"}


def count_channels(guild: discord.Guild) -> dict:
    """Channel totals by type; categories aren't counted as channels."""
    counts = {"total": 0, "text": 0, "voice": 0, "stages": 0, "forums": 0}
    for channel in guild.channels:
        kind = channel.type
        if kind == discord.ChannelType.category:
            continue
        counts["total"] += 1
        if kind == discord.ChannelType.text:
            counts["text"] += 1
        elif kind == discord.ChannelType.voice:
            counts["voice"] += 1
        elif kind == discord.ChannelType.stage_voice:
            counts["stages"] += 1
        elif kind == discord.ChannelType.forum:
            counts["forums"] += 1
    return counts


class InfoCog(commands.Cog):
    """Server information."""

    info = SlashCommandGroup("info", "Information commands", guild_only=True)

    def __init__(self, bot: discord.Bot, store: RecordStore, messages: MessageService):
        self.bot = bot
        self.store = store
        self.messages = messages

    async def build_server_embed(self, ctx: discord.ApplicationContext) -> discord.Embed:
        guild = ctx.guild
        owner = guild.owner or await guild.fetch_member(guild.owner_id)

        # A failed lookup just means default colors
        result = await self.store.get_guild(guild.id)
        color = result.record.embed_color if result.ok else None

        embed = self.messages.build_embed(ctx, color=color)
        embed.description = self.messages.format_reply(
            f"Here's some info about **{self.messages.escape_md(guild.name)}**", self.messages.emoji("check_mark"),
        )
        if guild.icon:
            embed.set_thumbnail(url=guild.icon.url)

        embed.add_field(
            name="Common info",
            value=(
                f"ID: `{guild.id}`\n"
                f"Created by: {owner.mention if owner else 'Unknown'}\n"
                f"Created: {self.messages.format_time(guild.created_at, 'R')}\n"
                f"Boosts: {guild.premium_subscription_count} "
                f"({BOOST_LEVELS.get(guild.premium_tier, guild.premium_tier)})"
            ),
            inline=False,
        )

        humans = sum(1 for member in guild.members if not member.bot)
        embed.add_field(
            name="Members",
            value=(
                f"Total: {guild.member_count}\n"
                f"Humans: {humans}\n"
                f"Bots: {len(guild.members) - humans}"
            ),
            inline=True,
        )

        channels = count_channels(guild)
        embed.add_field(
            name="Channels",
            value=(
                f"Total: {channels['total']}\n"
                f"Text: {channels['text']}\n"
                f"Voice: {channels['voice']}\n"
                f"Stages: {channels['stages']}\n"
                f"Forums: {channels['forums']}"
            ),
            inline=True,
        )

        if guild.banner:
            embed.set_image(url=guild.banner.with_size(2048).with_format("png").url)
        return embed

    @info.command(name="server", description="Get the info about this server")
    async def server(self, ctx: discord.ApplicationContext):
        await ctx.respond(embed=await self.build_server_embed(ctx))


def setup(bot):
    bot.add_cog(InfoCog(bot, bot.store, bot.messages))

"""
Music queue slash commands.

Each command runs the voice checks first; the checks send their own
refusal reply, so a False result just ends the command.
"""

import asyncio
import logging

import discord
from discord.commands import Option
from discord.ext import commands

import config
from bot.services.message import MessageService
from bot.services.playback import GuildQueues, Track
from bot.services.voice_checks import VoiceChecks

logger = logging.getLogger(__name__)

NEED_PERMISSIONS = "I need permission to connect and speak in your voice channel."
JOIN_FAILED = "Couldn't join your voice channel, please try again later."


class MusicCog(commands.Cog):
    """Queueing, inspection and control of per-guild tracks."""

    def __init__(self, bot: discord.Bot, queues: GuildQueues, checks: VoiceChecks, messages: MessageService):
        self.bot = bot
        self.queues = queues
        self.checks = checks
        self.messages = messages

    async def _connect(self, ctx: discord.ApplicationContext):
        """Join the caller's voice channel. Replies and returns None on failure."""
        channel = ctx.author.voice.channel
        permissions = channel.permissions_for(ctx.guild.me)
        if not permissions.connect or not permissions.speak:
            await ctx.respond(embed=self.messages.error_embed(ctx, NEED_PERMISSIONS), ephemeral=True)
            return None

        try:
            voice_client = await channel.connect()
        except (discord.ClientException, asyncio.TimeoutError, RuntimeError) as e:
            logger.error(f"Voice connection to channel {channel.id} in guild {ctx.guild.id} failed: {e}")
            await ctx.respond(embed=self.messages.error_embed(ctx, JOIN_FAILED), ephemeral=True)
            return None

        logger.info(f"Joined voice channel {channel.id} in guild {ctx.guild.id} for {ctx.author.id}")
        return voice_client

    async def play_track(self, ctx: discord.ApplicationContext, query: str):
        """Queue a track for the caller, joining their voice channel first if needed."""
        await ctx.defer()

        if not await self.checks.check_voice(ctx):
            return

        if ctx.guild.voice_client is None and await self._connect(ctx) is None:
            return

        query = query.strip()
        track = Track(
            title=query,
            url=query if query.startswith(("http://", "https://")) else None,
            requested_by=ctx.author.id,
        )
        position = self.queues.enqueue(ctx.guild.id, track)

        title = self.messages.escape_md(track.title)
        if position == 0:
            message = f"Now playing **{title}**."
        else:
            message = f"Queued **{title}** at position `{position}`."
        await ctx.respond(embed=self.messages.reply_embed(ctx, message, emoji="notes"))

    def _queue_line(self, track: Track) -> str:
        line = self.messages.escape_md(track.title)
        if track.requested_by:
            line += f" (<@{track.requested_by}>)"
        return line

    async def show_queue(self, ctx: discord.ApplicationContext):
        if not await self.checks.check_voice(ctx, check_if_queue_exists=True):
            return

        tracks = self.queues.get(ctx.guild.id)
        shown = tracks[:config.QUEUE_PAGE_SIZE]
        lines = [f"**Now playing:** {self._queue_line(shown[0])}"]
        lines += [
            f"`{position}.` {self._queue_line(track)}"
            for position, track in enumerate(shown[1:], start=1)
        ]
        if len(tracks) > len(shown):
            lines.append(f"...and {len(tracks) - len(shown)} more")

        embed = self.messages.build_embed(ctx)
        embed.title = f"{self.messages.emoji('notes')} Queue"
        embed.description = "\n".join(lines)
        await ctx.respond(embed=embed)

    async def skip_track(self, ctx: discord.ApplicationContext):
        if not await self.checks.check_voice(
            ctx, check_if_connected=True, check_if_queue_exists=True, check_if_last_song=True,
        ):
            return

        upcoming = self.queues.skip(ctx.guild.id)
        voice_client = ctx.guild.voice_client
        if voice_client and voice_client.is_playing():
            voice_client.stop()

        await ctx.respond(
            embed=self.messages.reply_embed(
                ctx, f"Skipped. Now playing **{self.messages.escape_md(upcoming.title)}**.", emoji="skip",
            )
        )

    async def stop_playback(self, ctx: discord.ApplicationContext):
        if not await self.checks.check_voice(ctx, check_if_connected=True, check_if_queue_exists=True):
            return

        dropped = self.queues.clear(ctx.guild.id)
        voice_client = ctx.guild.voice_client
        if voice_client:
            await voice_client.disconnect(force=False)
        logger.info(f"Stopped playback in guild {ctx.guild.id}, dropped {dropped} tracks")

        await ctx.respond(
            embed=self.messages.reply_embed(ctx, "Stopped the music and left the voice channel.", emoji="stop")
        )

    @commands.slash_command(name="play", description="Add a track to the queue")
    @discord.guild_only()
    async def play(
        self,
        ctx: discord.ApplicationContext,
        query: Option(str, "Track name or URL", required=True),
    ):
        await self.play_track(ctx, query)

    @commands.slash_command(name="queue", description="Show the current queue")
    @discord.guild_only()
    async def queue(self, ctx: discord.ApplicationContext):
        await self.show_queue(ctx)

    @commands.slash_command(name="skip", description="Skip the current track")
    @discord.guild_only()
    async def skip(self, ctx: discord.ApplicationContext):
        await self.skip_track(ctx)

    @commands.slash_command(name="stop", description="Stop the music and leave the voice channel")
    @discord.guild_only()
    async def stop(self, ctx: discord.ApplicationContext):
        await self.stop_playback(ctx)


def setup(bot):
    bot.add_cog(MusicCog(bot, bot.queues, bot.checks, bot.messages))

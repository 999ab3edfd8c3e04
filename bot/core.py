"""
Core Bot class - Main Discord bot instance.

This module provides the Bot class which extends commands.Bot with the
services the cogs need. Services are passed in, never looked up globally.
"""

import logging

import discord
from discord.ext import commands

from bot.services.message import MessageService
from bot.services.playback import GuildQueues
from bot.services.record_store import RecordStore
from bot.services.voice_checks import VoiceChecks

logger = logging.getLogger(__name__)


class Bot(commands.Bot):
    """
    Main Discord bot class with injected services.

    Attributes:
        token: Discord bot authentication token.
        store: Guild/user record store.
        queues: Per-guild playback queues.
        messages: Embed and reply formatting.
        checks: Voice and owner guards.
    """

    def __init__(self, intents: discord.Intents, token: str, store: RecordStore,
                 messages: MessageService, owner_ids=None, queues: GuildQueues = None):
        """
        Initialize the bot.

        Args:
            intents: Discord intents configuration.
            token: Bot authentication token.
            store: Record store shared by every cog.
            messages: Message service shared by every cog.
            owner_ids: User IDs allowed to run owner-only commands.
            queues: Playback queues; created for this bot when omitted.
        """
        super().__init__(intents=intents)
        self.token = token
        self.store = store
        self.messages = messages
        self.queues = queues or GuildQueues(self)
        self.checks = VoiceChecks(self.queues, messages, owner_ids)

    async def on_ready(self):
        logger.info(f"Logged in as {self.user} ({len(self.guilds)} guilds)")

    def run_bot(self) -> None:
        """Start the bot using the configured token."""
        self.run(self.token)

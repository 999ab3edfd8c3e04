"""
Playback state: per-guild track queues and voice connection lookup.

The audio engine itself is out of scope here. This module keeps the state
the command layer reads before acting (is there a connection, is there a
queue, how long is it) and the queue mutations the music commands perform.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, List, Optional, Protocol

import discord

logger = logging.getLogger(__name__)


class PlaybackState(Protocol):
    """Read-only view of the playback subsystem used by the voice checks."""

    def has_connection(self, guild_id: int) -> bool:
        ...

    def queue_length(self, guild_id: int) -> Optional[int]:
        """Number of queued tracks (current one included), or None when no queue exists."""
        ...


@dataclass
class Track:
    title: str
    url: Optional[str] = None
    requested_by: Optional[int] = None


class GuildQueues:
    """
    In-memory queues keyed by guild ID.

    The head of each queue is the track currently playing. A queue that
    runs empty is dropped, so "no queue" and "empty queue" are the same state.
    """

    def __init__(self, bot: Optional[discord.Client] = None):
        self.bot = bot
        self._queues: Dict[int, Deque[Track]] = {}

    def has_connection(self, guild_id: int) -> bool:
        if self.bot is None:
            return False
        guild = self.bot.get_guild(int(guild_id))
        if guild is None or guild.voice_client is None:
            return False
        return guild.voice_client.is_connected()

    def queue_length(self, guild_id: int) -> Optional[int]:
        queue = self._queues.get(int(guild_id))
        return len(queue) if queue else None

    def get(self, guild_id: int) -> List[Track]:
        return list(self._queues.get(int(guild_id), ()))

    def now_playing(self, guild_id: int) -> Optional[Track]:
        queue = self._queues.get(int(guild_id))
        return queue[0] if queue else None

    def enqueue(self, guild_id: int, track: Track) -> int:
        """Append a track and return its position (0 = playing now)."""
        queue = self._queues.setdefault(int(guild_id), deque())
        queue.append(track)
        return len(queue) - 1

    def skip(self, guild_id: int) -> Optional[Track]:
        """Drop the current track and return the one that plays next."""
        queue = self._queues.get(int(guild_id))
        if not queue:
            return None
        skipped = queue.popleft()
        logger.info(f"Skipped '{skipped.title}' in guild {guild_id}")
        if not queue:
            del self._queues[int(guild_id)]
            return None
        return queue[0]

    def clear(self, guild_id: int) -> int:
        """Remove the guild's queue. Returns how many tracks were dropped."""
        queue = self._queues.pop(int(guild_id), None)
        return len(queue) if queue else 0

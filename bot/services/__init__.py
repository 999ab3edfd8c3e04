"""
Service layer providing business logic.

Services encapsulate business operations and coordinate between
repositories, the playback state and Discord replies.
"""

from bot.services.message import MessageService
from bot.services.playback import GuildQueues, PlaybackState, Track
from bot.services.record_store import RecordStore
from bot.services.voice_checks import VoiceChecks

__all__ = [
    "MessageService",
    "GuildQueues",
    "PlaybackState",
    "Track",
    "RecordStore",
    "VoiceChecks",
]

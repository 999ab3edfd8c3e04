"""
Guards run before voice/music commands and owner-only commands.

The voice checks are an ordered list of (name, failing predicate) pairs.
They run against a VoiceSession snapshot taken at call time, stop at the
first failure and answer with exactly one ephemeral reply.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, NamedTuple, Optional, Sequence

import config
from bot.services.message import MessageService
from bot.services.playback import PlaybackState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VoiceSession:
    """What the caller, the guild and the player look like right now."""
    guild_id: Optional[int]
    caller_channel_id: Optional[int]
    self_deaf: bool
    server_deaf: bool
    afk_channel_id: Optional[int]
    bot_channel_id: Optional[int]
    connected: bool
    queue_length: Optional[int]

    @classmethod
    def from_context(cls, ctx, playback: PlaybackState) -> "VoiceSession":
        guild = ctx.guild
        voice = getattr(ctx.author, "voice", None)
        caller_channel = voice.channel if voice else None

        me = guild.me if guild else None
        bot_voice = me.voice if me else None
        bot_channel = bot_voice.channel if bot_voice else None

        afk_channel = guild.afk_channel if guild else None
        guild_id = guild.id if guild else None

        return cls(
            guild_id=guild_id,
            caller_channel_id=caller_channel.id if caller_channel else None,
            self_deaf=bool(voice and voice.self_deaf),
            server_deaf=bool(voice and voice.deaf),
            afk_channel_id=afk_channel.id if afk_channel else None,
            bot_channel_id=bot_channel.id if bot_channel else None,
            connected=bool(guild_id and playback.has_connection(guild_id)),
            queue_length=playback.queue_length(guild_id) if guild_id else None,
        )


class VoiceCheck(NamedTuple):
    name: str
    fails: Callable[[VoiceSession], bool]


BASE_CHECKS: Sequence[VoiceCheck] = (
    VoiceCheck("not_in_voice", lambda s: s.caller_channel_id is None),
    VoiceCheck("in_afk_channel",
               lambda s: s.afk_channel_id is not None and s.caller_channel_id == s.afk_channel_id),
    VoiceCheck("self_deafened", lambda s: s.self_deaf),
    VoiceCheck("server_deafened", lambda s: s.server_deaf),
    VoiceCheck("different_channel",
               lambda s: s.bot_channel_id is not None and s.bot_channel_id != s.caller_channel_id),
)

CONNECTION_CHECK = VoiceCheck("no_connection", lambda s: not s.connected)
QUEUE_CHECK = VoiceCheck("queue_empty", lambda s: not s.queue_length)
LAST_TRACK_CHECK = VoiceCheck("last_track", lambda s: not s.queue_length or s.queue_length <= 1)


def build_checks(check_if_connected: bool = False,
                 check_if_queue_exists: bool = False,
                 check_if_last_song: bool = False) -> List[VoiceCheck]:
    """The guard chain for one invocation, in evaluation order."""
    checks = list(BASE_CHECKS)
    if check_if_connected:
        checks.append(CONNECTION_CHECK)
    if check_if_queue_exists:
        checks.append(QUEUE_CHECK)
    if check_if_last_song:
        checks.append(LAST_TRACK_CHECK)
    return checks


def first_failure(session: VoiceSession, checks: Sequence[VoiceCheck]) -> Optional[str]:
    """Name of the first failing check, or None when all pass."""
    for check in checks:
        if check.fails(session):
            return check.name
    return None


class VoiceChecks:
    """Runs the voice and owner guards and sends the refusal reply."""

    def __init__(self, playback: PlaybackState, messages: MessageService,
                 owner_ids: Optional[Sequence] = None):
        self.playback = playback
        self.messages = messages
        self.owner_ids = [str(owner) for owner in (owner_ids or [])]

    async def _refuse(self, ctx, text: str):
        await ctx.respond(embed=self.messages.error_embed(ctx, text), ephemeral=True)

    async def check_voice(self, ctx,
                          check_if_connected: bool = False,
                          check_if_queue_exists: bool = False,
                          check_if_last_song: bool = False) -> bool:
        """
        Return True if the caller may run a voice command.

        On the first failing check, reply ephemerally with its reason and
        return False. Nothing is sent on success.
        """
        session = VoiceSession.from_context(ctx, self.playback)
        checks = build_checks(check_if_connected, check_if_queue_exists, check_if_last_song)

        failed = first_failure(session, checks)
        if failed is None:
            return True

        logger.debug(f"Voice check '{failed}' refused {ctx.author} in guild {session.guild_id}")
        await self._refuse(ctx, config.VOICE_CHECK_MESSAGES[failed])
        return False

    async def check_owner(self, ctx) -> bool:
        """Return True if the caller is a configured owner; otherwise reply and return False."""
        if not self.owner_ids:
            await self._refuse(ctx, config.OWNER_CHECK_MESSAGES["owners_empty"])
            return False
        if str(ctx.author.id) not in self.owner_ids:
            logger.info(f"Owner check refused {ctx.author} ({ctx.author.id})")
            await self._refuse(ctx, config.OWNER_CHECK_MESSAGES["not_owner"])
            return False
        return True

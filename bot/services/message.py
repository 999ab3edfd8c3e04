"""
Message service for building embeds and formatting replies.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Union

import discord

import config

logger = logging.getLogger(__name__)

Timestamp = Union[datetime, int, float, str]


def parse_hex_color(value: Optional[str]) -> Optional[int]:
    """Turn 'ff0000' / '#ff0000' into an int, or None if it can't be parsed."""
    if not value:
        return None
    try:
        color = int(str(value).lstrip("#"), 16)
    except ValueError:
        return None
    return color if 0 <= color <= 0xFFFFFF else None


class MessageService:
    """
    Builds the embeds and reply strings every command uses.

    Settings default to the values in config.py and can be overridden
    per instance (tests, alternate branding).
    """

    def __init__(self, hex_color: str = config.EMBED_HEX_COLOR,
                 show_author: bool = config.EMBED_SHOW_AUTHOR,
                 set_timestamp: bool = config.EMBED_SET_TIMESTAMP,
                 emojis: Optional[dict] = None):
        self.hex_color = hex_color
        self.show_author = show_author
        self.set_timestamp = set_timestamp
        self.emojis = dict(config.EMOJIS, **(emojis or {}))

    def emoji(self, name: str) -> str:
        return self.emojis.get(name, "")

    def build_embed(self, ctx, color: Optional[str] = None) -> discord.Embed:
        """
        Return a pre-formatted embed for a command invocation.

        Args:
            ctx: The application context (or interaction) being answered
            color: Optional HEX override, e.g. the guild's stored embed color
        """
        if ctx is None:
            raise ValueError("Expected a context to build an embed for")

        value = parse_hex_color(color)
        if value is None:
            value = parse_hex_color(self.hex_color)
        if value is None:
            logger.warning(f"Invalid embed color {self.hex_color!r}, using fallback")
            value = config.EMBED_FALLBACK_COLOR

        embed = discord.Embed(color=discord.Colour(value))
        if self.set_timestamp:
            embed.timestamp = discord.utils.utcnow()

        author = getattr(ctx, "author", None) or getattr(ctx, "user", None)
        if self.show_author and author is not None:
            embed.set_footer(text=str(author), icon_url=author.display_avatar.url)
        return embed

    @staticmethod
    def format_reply(content: str, emoji: str) -> str:
        """Prefix a reply with an emoji: ':x: | Something went wrong'."""
        return f"{emoji} | {content}"

    def reply_embed(self, ctx, message: str, emoji: str = "check_mark",
                    color: Optional[str] = None) -> discord.Embed:
        """Embed whose description is a formatted reply."""
        embed = self.build_embed(ctx, color=color)
        embed.description = self.format_reply(message, self.emoji(emoji))
        return embed

    def error_embed(self, ctx, message: str) -> discord.Embed:
        """Embed used for every refused action."""
        return self.reply_embed(ctx, message, emoji="cross_mark")

    @staticmethod
    def format_time(timestamp: Timestamp, style: str = "f") -> str:
        """
        Return Discord timestamp markup (<t:unix:style>).

        Accepts datetimes, unix seconds, unix milliseconds and ISO strings.
        """
        if not timestamp:
            raise ValueError("time isn't provided")

        if isinstance(timestamp, datetime):
            moment = timestamp
        elif isinstance(timestamp, (int, float)):
            seconds = timestamp / 1000 if timestamp > 10**11 else timestamp
            moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
        else:
            try:
                moment = datetime.fromisoformat(str(timestamp))
            except ValueError as e:
                raise ValueError(f"time isn't parsable: {timestamp!r}") from e

        return discord.utils.format_dt(moment, style=style)

    @staticmethod
    def capitalize(text: str) -> str:
        """Uppercase the first letter and leave the rest alone."""
        return text[:1].upper() + text[1:]

    @staticmethod
    def escape_md(text) -> str:
        """Escape markdown, including code blocks, inline code and spoilers."""
        return discord.utils.escape_markdown(str(text))

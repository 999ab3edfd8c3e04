import logging
import sys

import discord

from bot.commands import EXTENSIONS
from bot.core import Bot
from bot.database import Database
from bot.environment import Environment
from bot.logger import setup_logging
from bot.services.message import MessageService
from bot.services.record_store import RecordStore

logger = logging.getLogger(__name__)


def create_bot(env: Environment) -> Bot:
    """Wire the database, services and cogs into a ready-to-run bot."""
    Database(env.database_path)

    intents = discord.Intents(guilds=True, voice_states=True, members=True)
    bot = Bot(
        intents=intents,
        token=env.bot_token,
        store=RecordStore(),
        messages=MessageService(),
        owner_ids=env.owner_ids,
    )
    for extension in EXTENSIONS:
        bot.load_extension(extension)
    return bot


def main():
    setup_logging()
    env = Environment()
    if not env.bot_token:
        logger.error("DISCORD_BOT_TOKEN not found.")
        sys.exit(1)
    if not env.owner_ids:
        logger.warning("OWNER_IDS is empty, owner commands will refuse everyone.")

    create_bot(env).run_bot()


if __name__ == "__main__":
    main()

"""
Discord command cogs for the Aurora bot.

Cogs are loaded as extensions by run.py; each module exposes setup(bot).
"""

EXTENSIONS = [
    "bot.commands.settings",
    "bot.commands.info",
    "bot.commands.music",
    "bot.commands.admin",
    "bot.commands.events",
]

__all__ = ["EXTENSIONS"]

"""
Anek commands cog.

Slash commands:
- /start: greeting that explains what the bot does
- /help: usage help
- /anek: post one random anek
- /aneks: pick one of several random aneks from a menu

Throttled callers get no content. Discord still requires every interaction to
be acknowledged, so those requests are closed with an empty ephemeral defer.
"""

import discord
from discord.ext import commands

from anekbot.configuration.app_configuration import app_config
from anekbot.services.content_cache_service import ContentCacheService
from anekbot.ui.anek_picker import AnekPickerView
from anekbot.util.format_utils import clip_message
from anekbot.util.logger import get_logger

logger = get_logger("anek_commands")

DEFAULT_START_MESSAGE = (
    "**Hi!** This bot collects aneks from a set of channels and posts them **right into your chat!** "
    "Use /anek to get a random one, or /aneks to pick from a few. **No admin permissions needed :)**"
)
DEFAULT_HELP_MESSAGE = (
    "**/anek** posts a random anek. **/aneks** shows a menu of random aneks to choose from. "
    "Admin permissions are **not required** :)"
)


class AnekCommandsCog(commands.Cog):
    """Commands that serve cached aneks to users."""

    def __init__(self, discord_bot_instance: discord.Bot, cache_service: ContentCacheService):
        self.discord_bot_instance = discord_bot_instance
        self.cache_service = cache_service
        logger.info("[ANEK CMDS] Anek commands cog loaded")

    @commands.slash_command(name="start", description="What this bot does.")
    async def start(self, ctx: discord.ApplicationContext):
        await ctx.respond(app_config.start_message or DEFAULT_START_MESSAGE)

    @commands.slash_command(name="help", description="How to use this bot.")
    async def help(self, ctx: discord.ApplicationContext):
        await ctx.respond(app_config.help_message or DEFAULT_HELP_MESSAGE)

    @commands.slash_command(name="anek", description="Post a random anek.")
    async def anek(self, ctx: discord.ApplicationContext):
        text = self.cache_service.on_single_request(ctx.author.id)
        if text is None:
            await ctx.defer(ephemeral=True)
            await ctx.delete()
            return
        await ctx.respond(clip_message(text))

    @commands.slash_command(name="aneks", description="Choose one of several random aneks.")
    async def aneks(self, ctx: discord.ApplicationContext):
        results = self.cache_service.on_list_request(ctx.author.id)
        if not results:
            await ctx.defer(ephemeral=True)
            await ctx.delete()
            return
        view = AnekPickerView(results)
        await ctx.respond("Here are a few aneks:", view=view, ephemeral=True)


def setup(discord_bot_instance: discord.Bot, cache_service: ContentCacheService) -> None:
    discord_bot_instance.add_cog(AnekCommandsCog(discord_bot_instance, cache_service))

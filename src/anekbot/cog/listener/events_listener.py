"""Event listener Cog for Anekbot.

Handles two things:
- on_ready: set presence and start the background crawl loop
- on_message: advance the known extent of a configured source when a new
  message is posted there, so the crawler can sample it without re-querying
"""

import discord
from discord.ext import commands

from anekbot.crawler.discord_source_client import DiscordSourceClient
from anekbot.services.content_cache_service import ContentCacheService
from anekbot.util.logger import get_logger

logger = get_logger("events_listener")


class EventsListenerCog(commands.Cog):
    """Bot lifecycle and source message events."""

    def __init__(
        self,
        bot: discord.Bot,
        cache_service: ContentCacheService,
        source_client: DiscordSourceClient,
    ) -> None:
        self.bot = bot
        self._cache_service = cache_service
        self._source_client = source_client
        logger.info("[EVENTS LISTENER] Events listener cog loaded")

    @commands.Cog.listener(name="on_ready")
    async def on_ready(self) -> None:
        if not self.bot.user:
            logger.warning("[EVENTS LISTENER] Bot partially connected — user info not yet available.")
            return

        await self.bot.change_presence(
            status=discord.Status.online,
            activity=discord.Activity(type=discord.ActivityType.listening, name="/anek"),
        )
        logger.info("Bot connected as %s (ID: %s)", self.bot.user, self.bot.user.id)

        # on_ready fires again after reconnects; start() ignores repeat calls
        self._cache_service.start()

    @commands.Cog.listener(name="on_message")
    async def on_message(self, message: discord.Message) -> None:
        if self._cache_service.state_for(message.channel.id) is None:
            return
        self._cache_service.record_new_message(message.channel.id, self._source_client.position_of(message))


def setup(
    bot: discord.Bot,
    cache_service: ContentCacheService,
    source_client: DiscordSourceClient,
) -> None:
    bot.add_cog(EventsListenerCog(bot, cache_service, source_client))

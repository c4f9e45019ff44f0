"""
Discord implementation of the source client.

Discord does not number messages sequentially, so positions are expressed as
offsets into the channel's snowflake range: position ``p`` is the snowflake
``channel.id + p`` and the extent is ``last_message_id - channel.id + 1``.
Fetching a position returns the newest message posted at or before that
snowflake, which keeps sampling roughly uniform over the channel's lifetime.
"""

from __future__ import annotations

import asyncio
from typing import List, Optional, Sequence

import discord

from anekbot.datatypes.content_datatypes import FetchedMessage
from anekbot.exceptions import SourceConfigurationError, TransientFetchError
from anekbot.util.logger import get_logger

logger = get_logger("discord_source_client")

PLAIN_MESSAGE_TYPES = (discord.MessageType.default, discord.MessageType.reply)


def to_fetched_message(message: discord.Message) -> FetchedMessage:
    """Convert a Discord message into the crawler's message type."""
    return FetchedMessage(
        text=message.content or "",
        is_service=message.type not in PLAIN_MESSAGE_TYPES,
        has_media=bool(message.attachments or message.stickers or message.embeds),
    )


class DiscordSourceClient:
    """
    Position-addressable view over Discord text channels.

    Args:
        bot (discord.Bot): Connected bot used for channel lookups and history calls.
    """

    def __init__(self, bot: discord.Bot) -> None:
        self._bot = bot

    @staticmethod
    def _parse_channel_id(identifier: str) -> int:
        try:
            return int(str(identifier).strip())
        except ValueError:
            raise SourceConfigurationError(str(identifier), "source identifiers must be channel ids") from None

    async def resolve_source(self, identifier: str) -> discord.TextChannel:
        """Return the text channel for ``identifier``.

        Raises:
            SourceConfigurationError: The channel is missing, inaccessible or not
                a guild text channel.
            TransientFetchError: Discord could not be reached.
        """
        channel_id = self._parse_channel_id(identifier)
        channel = self._bot.get_channel(channel_id)
        if channel is None:
            try:
                channel = await self._bot.fetch_channel(channel_id)
            except (discord.NotFound, discord.Forbidden) as exc:
                raise SourceConfigurationError(str(identifier), f"channel unavailable ({exc})") from exc
            except (discord.HTTPException, asyncio.TimeoutError) as exc:
                raise TransientFetchError(f"Failed to resolve channel {channel_id}: {exc}") from exc

        if not isinstance(channel, discord.TextChannel):
            raise SourceConfigurationError(
                str(identifier),
                f"{type(channel).__name__} is not a text channel and cannot be sampled by position",
            )
        return channel

    def _unavailable(self, handle: discord.TextChannel, exc: discord.HTTPException) -> SourceConfigurationError:
        return SourceConfigurationError(str(handle.id), f"channel unavailable ({exc})")

    async def get_source_extent(self, handle: discord.TextChannel) -> int:
        """Return the snowflake span between the channel's creation and its newest message.

        The gateway-cached channel is preferred over ``handle`` because only the
        cached object sees ``last_message_id`` advance as messages arrive.
        """
        channel = self._bot.get_channel(handle.id) or handle
        last_message_id = channel.last_message_id
        if last_message_id is None:
            try:
                async for message in handle.history(limit=1):
                    last_message_id = message.id
            except (discord.NotFound, discord.Forbidden) as exc:
                raise self._unavailable(handle, exc) from exc
            except (discord.HTTPException, asyncio.TimeoutError) as exc:
                raise TransientFetchError(f"Failed to read channel {handle.id}: {exc}") from exc

        if last_message_id is None:
            return 0
        return max(0, last_message_id - handle.id + 1)

    def position_of(self, message: discord.Message) -> int:
        """Return the position of a live message within its channel."""
        return message.id - message.channel.id

    async def _fetch_one(self, handle: discord.TextChannel, position: int) -> Optional[FetchedMessage]:
        before = discord.Object(id=handle.id + position + 1)
        async for message in handle.history(limit=1, before=before):
            return to_fetched_message(message)
        return None

    async def fetch_messages(
        self, handle: discord.TextChannel, positions: Sequence[int]
    ) -> List[Optional[FetchedMessage]]:
        """Fetch one message per position, sequentially to keep API load flat.

        A transient failure part-way through ends the batch early and returns
        the messages fetched so far. It is raised only when nothing was fetched.
        """
        results: List[Optional[FetchedMessage]] = []
        for position in positions:
            try:
                results.append(await self._fetch_one(handle, position))
            except (discord.NotFound, discord.Forbidden) as exc:
                raise self._unavailable(handle, exc) from exc
            except (discord.HTTPException, asyncio.TimeoutError) as exc:
                if not results:
                    raise TransientFetchError(f"Failed to fetch history of channel {handle.id}: {exc}") from exc
                logger.warning(
                    "[DISCORD] Fetch from channel %s stopped after %d of %d positions: %s",
                    handle.id,
                    len(results),
                    len(positions),
                    exc,
                )
                break
        return results

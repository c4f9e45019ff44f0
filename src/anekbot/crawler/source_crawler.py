"""Random-sampling crawler that feeds the item pool from one source per run.

Each run draws a batch of random positions below the source's known extent,
fetches the messages at those positions, keeps the plain-text ones that pass
the filter policy and inserts them into the pool as a single batch.
"""

from __future__ import annotations

import random
from typing import List, Literal, Optional

from anekbot.cache.item_pool import ItemPool
from anekbot.crawler.filters import select_items
from anekbot.crawler.source_client import SourceClient
from anekbot.datatypes.content_datatypes import SourceState
from anekbot.util.logger import get_logger

logger = get_logger("source_crawler")

ExtentRefresh = Literal["event", "poll"]

DEFAULT_BATCH_SIZE = 100


class SourceCrawler:
    """
    Runs best-effort random sampling passes against a :class:`SourceClient`.

    Parameters
    ----------
    client:
        History API used to resolve sources and fetch messages.
    pool:
        Destination pool for accepted items.
    batch_size:
        Number of random positions requested per run.
    extent_refresh:
        ``"poll"`` queries the extent on every run. ``"event"`` queries it only
        until it is known and relies on live message events afterwards.
    rng:
        Random source for position draws.
    """

    def __init__(
        self,
        client: SourceClient,
        pool: ItemPool,
        batch_size: int = DEFAULT_BATCH_SIZE,
        extent_refresh: ExtentRefresh = "event",
        rng: Optional[random.Random] = None,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self._client = client
        self._pool = pool
        self.batch_size = batch_size
        self.extent_refresh = extent_refresh
        self._rng = rng or random.Random()

    async def _ensure_extent(self, state: SourceState) -> int:
        if state.handle is None:
            state.handle = await self._client.resolve_source(state.source_id)
            logger.debug("[CRAWLER] Resolved source %s", state.source_id)

        if self.extent_refresh == "poll" or state.extent is None:
            state.update_extent(await self._client.get_source_extent(state.handle))

        return state.extent or 0

    def draw_positions(self, extent: int) -> List[int]:
        """Return ``batch_size`` independent uniform positions in ``[0, extent)``."""
        return [self._rng.randrange(extent) for _ in range(self.batch_size)]

    async def crawl(self, state: SourceState) -> int:
        """Run one sampling pass for ``state`` and return the number of new items.

        Errors raised by the client propagate unchanged; the scheduler decides
        whether the source is retried or disabled.
        """
        state.runs += 1
        extent = await self._ensure_extent(state)
        if extent <= 0:
            logger.debug("[CRAWLER] Source %s has no messages yet", state.source_id)
            return 0

        positions = self.draw_positions(extent)
        messages = await self._client.fetch_messages(state.handle, positions)
        items = select_items(messages)
        added = self._pool.insert_batch(items)

        state.items_added += added
        state.last_error = None
        logger.info(
            "[CRAWLER] %s: %d fetched, %d accepted, %d new (pool size %d)",
            state.source_id,
            sum(1 for message in messages if message is not None),
            len(items),
            added,
            self._pool.size(),
        )
        return added

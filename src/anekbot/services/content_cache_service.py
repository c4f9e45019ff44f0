"""
Owner of all content cache state.

One :class:`ContentCacheService` is built at startup and handed to the cogs.
It owns the item pool, the per-source states, the access throttle, the
crawler, the crawl scheduler and the query server, so nothing lives in module
globals and tests can build isolated instances.
"""

from __future__ import annotations

import random
from typing import Any, Dict, List, Optional

from anekbot.cache.item_pool import ItemPool
from anekbot.configuration.cache_settings import CacheSettings
from anekbot.crawler.source_client import SourceClient
from anekbot.crawler.source_crawler import SourceCrawler
from anekbot.datatypes.content_datatypes import QueryResult, SourceState
from anekbot.scheduler.crawl_scheduler import CrawlScheduler, SleepFunc
from anekbot.services.query_service import QueryServer
from anekbot.throttle.access_throttle import AccessThrottle
from anekbot.util.logger import get_logger

logger = get_logger("content_cache_service")


class ContentCacheService:
    """
    Wire the sampling cache together from settings and a source client.

    Parameters
    ----------
    settings:
        Validated ``content_cache`` configuration.
    client:
        History API implementation used by the crawler.
    rng:
        Optional shared random source for the pool and the crawler.
    sleep:
        Optional sleep replacement for the scheduler.
    """

    def __init__(
        self,
        settings: CacheSettings,
        client: SourceClient,
        rng: Optional[random.Random] = None,
        sleep: Optional[SleepFunc] = None,
    ) -> None:
        self.settings = settings
        self.pool = ItemPool(max_capacity=settings.max_capacity, rng=rng)
        self.throttle = AccessThrottle(
            window_ms=settings.throttle_window_ms,
            max_entries=settings.throttle_max_entries,
        )
        self.states: Dict[str, SourceState] = {
            source_id: SourceState(source_id=source_id) for source_id in settings.sources
        }
        self.crawler = SourceCrawler(
            client,
            self.pool,
            batch_size=settings.batch_size,
            extent_refresh=settings.extent_refresh,  # type: ignore[arg-type]
            rng=rng,
        )
        scheduler_kwargs: Dict[str, Any] = {"sleep": sleep} if sleep is not None else {}
        self.scheduler = CrawlScheduler(
            self.crawler,
            list(self.states.values()),
            inter_source_delay=settings.crawl_inter_source_delay_ms / 1000.0,
            inter_cycle_delay=settings.crawl_inter_cycle_delay_ms / 1000.0,
            **scheduler_kwargs,
        )
        self.query_server = QueryServer(self.pool, self.throttle)

        logger.info(
            "[CONTENT CACHE] Initialized (%d sources, capacity %d, batch %d, extent refresh=%s)",
            len(self.states),
            settings.max_capacity,
            settings.batch_size,
            settings.extent_refresh,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the background crawl loop (no-op when already running)."""
        if self.scheduler.is_running:
            return
        if not self.states:
            logger.warning("[CONTENT CACHE] No sources configured; the pool will stay empty")
        self.scheduler.start()

    async def shutdown(self) -> None:
        await self.scheduler.shutdown()

    # ------------------------------------------------------------------
    # Request surfaces
    # ------------------------------------------------------------------

    def on_single_request(self, caller_id: int) -> Optional[str]:
        return self.query_server.handle_single_request(caller_id)

    def on_list_request(self, caller_id: int) -> List[QueryResult]:
        return self.query_server.handle_list_request(caller_id, self.settings.list_max_results)

    # ------------------------------------------------------------------
    # Source tracking
    # ------------------------------------------------------------------

    def state_for(self, source_id: Any) -> Optional[SourceState]:
        return self.states.get(str(source_id))

    def record_new_message(self, source_id: Any, position: Optional[int] = None) -> None:
        """Advance the extent of a configured source after a live message event."""
        state = self.state_for(source_id)
        if state is None or state.disabled:
            return
        extent = state.record_new_message(position)
        logger.debug("[CONTENT CACHE] Source %s extent now %s", state.source_id, extent)

    def snapshot(self) -> Dict[str, Any]:
        """Return a status summary for the console."""
        return {
            "pool_size": self.pool.size(),
            "max_capacity": self.pool.max_capacity,
            "crawler_running": self.scheduler.is_running,
            "cycles": self.scheduler.cycles,
            "tracked_callers": len(self.throttle),
            "sources": [
                {
                    "source_id": state.source_id,
                    "extent": state.extent,
                    "disabled": state.disabled,
                    "disabled_reason": state.disabled_reason,
                    "runs": state.runs,
                    "items_added": state.items_added,
                    "last_error": state.last_error,
                }
                for state in self.states.values()
            ],
        }

"""Round-robin crawl loop over all configured sources.

Sources are crawled one after another with a fixed pause between sources and
another pause between full passes. A failing source never stops the others:
configuration errors disable it, transient errors are retried next pass.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Sequence

from anekbot.crawler.source_crawler import SourceCrawler
from anekbot.datatypes.content_datatypes import SourceState
from anekbot.exceptions import SourceConfigurationError, TransientFetchError
from anekbot.util.logger import get_logger

logger = get_logger("crawl_scheduler")

SleepFunc = Callable[[float], Awaitable[None]]


class CrawlScheduler:
    """
    Sequential background driver for :class:`SourceCrawler`.

    Args:
        crawler: Crawler executing one pass per source.
        states: Per-source state, in crawl order.
        inter_source_delay: Seconds to wait after each source.
        inter_cycle_delay: Seconds to wait after each full pass.
        sleep: Awaitable sleep, replaced in tests.
    """

    def __init__(
        self,
        crawler: SourceCrawler,
        states: Sequence[SourceState],
        inter_source_delay: float,
        inter_cycle_delay: float,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self._crawler = crawler
        self._states = list(states)
        self.inter_source_delay = inter_source_delay
        self.inter_cycle_delay = inter_cycle_delay
        self._sleep = sleep
        self._task: asyncio.Task | None = None
        self.cycles = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _crawl_source(self, state: SourceState) -> None:
        try:
            await self._crawler.crawl(state)
        except asyncio.CancelledError:
            raise
        except SourceConfigurationError as exc:
            state.disable(exc.reason)
            state.last_error = str(exc)
            logger.error("[SCHEDULER] Disabling source %s: %s", state.source_id, exc.reason)
        except TransientFetchError as exc:
            state.last_error = str(exc)
            logger.warning("[SCHEDULER] Transient failure for %s, retrying next cycle: %s", state.source_id, exc)
        except Exception as exc:
            state.last_error = str(exc)
            logger.exception("[SCHEDULER] Unexpected error while crawling %s: %s", state.source_id, exc)

    async def run_cycle(self) -> None:
        """Crawl every enabled source once, pausing after each one."""
        active = [state for state in self._states if not state.disabled]
        if not active:
            logger.warning("[SCHEDULER] No enabled sources to crawl")

        for state in active:
            await self._crawl_source(state)
            await self._sleep(self.inter_source_delay)
        self.cycles += 1

    async def run_forever(self) -> None:
        """Repeat crawl cycles until cancelled."""
        logger.info(
            "[SCHEDULER] Crawling %d sources (source delay=%.1fs, cycle delay=%.1fs)",
            len(self._states),
            self.inter_source_delay,
            self.inter_cycle_delay,
        )
        try:
            while True:
                await self.run_cycle()
                await self._sleep(self.inter_cycle_delay)
        except asyncio.CancelledError:
            logger.info("[SCHEDULER] Crawl loop cancelled")
            raise

    def start(self) -> None:
        """Start the background crawl task if not already running."""
        if self.is_running:
            logger.warning("[SCHEDULER] Crawl task already running")
            return
        self._task = asyncio.create_task(self.run_forever())

    async def shutdown(self) -> None:
        """Cancel the crawl task and wait for it to finish."""
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info("[SCHEDULER] Scheduler shutdown complete")

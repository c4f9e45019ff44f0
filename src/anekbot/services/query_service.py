"""Request-side access to the item pool.

Both request surfaces go through :class:`QueryServer`: a throttled caller or an
empty pool produces "no content" instead of an error.
"""

from __future__ import annotations

from typing import List, Optional

from anekbot.cache.item_pool import ItemPool
from anekbot.datatypes.content_datatypes import QueryResult
from anekbot.exceptions import EmptyPoolError, ThrottledError
from anekbot.throttle.access_throttle import AccessThrottle
from anekbot.util.logger import get_logger

logger = get_logger("query_service")

DEFAULT_MAX_RESULTS = 10


class QueryServer:
    """Serve random items to callers, one at a time or as a short list."""

    def __init__(self, pool: ItemPool, throttle: AccessThrottle) -> None:
        self._pool = pool
        self._throttle = throttle

    def handle_single_request(self, caller_id: int) -> Optional[str]:
        """Return one random item, or None when throttled or nothing is cached yet."""
        try:
            self._throttle.enforce(caller_id)
            return self._pool.sample_one()
        except ThrottledError:
            logger.debug("[QUERY] Dropped single request from throttled caller %s", caller_id)
        except EmptyPoolError:
            logger.info("[QUERY] Single request from %s found an empty pool", caller_id)
        return None

    def handle_list_request(self, caller_id: int, max_results: int = DEFAULT_MAX_RESULTS) -> List[QueryResult]:
        """Return up to ``max_results`` distinct items with request-scoped ids."""
        try:
            self._throttle.enforce(caller_id)
        except ThrottledError:
            logger.debug("[QUERY] Dropped list request from throttled caller %s", caller_id)
            return []

        items = self._pool.sample_distinct(max_results)
        if not items:
            logger.info("[QUERY] List request from %s found an empty pool", caller_id)
        return [QueryResult(result_id=str(index), text=item) for index, item in enumerate(items)]

"""Bounded, deduplicated pool of text items with oldest-first eviction.

Items are kept in an insertion-ordered sequence backed by a membership set.
Eviction always drops the items that were first inserted earliest, and
uniform sampling indexes straight into the live part of the sequence.
"""

from __future__ import annotations

import random
import threading
from typing import Iterable, List, Optional, Set

from anekbot.crawler.filters import is_eligible_text
from anekbot.exceptions import EmptyPoolError
from anekbot.util.logger import get_logger

logger = get_logger("item_pool")

DEFAULT_MAX_CAPACITY = 100_000

# Dead slots at the head of the sequence are compacted away past this count
_COMPACT_THRESHOLD = 1024

# sample_distinct gives up after k * this many draws
_DISTINCT_ATTEMPT_FACTOR = 10


class ItemPool:
    """
    Size-bounded set of text items shared by the crawler and request handlers.

    Parameters
    ----------
    max_capacity:
        Maximum number of items retained once an insert returns.
    rng:
        Random source for sampling. Defaults to a private ``random.Random``.
    """

    def __init__(self, max_capacity: int = DEFAULT_MAX_CAPACITY, rng: Optional[random.Random] = None) -> None:
        if max_capacity < 1:
            raise ValueError("max_capacity must be at least 1")
        self.max_capacity = max_capacity
        self._rng = rng or random.Random()
        self._lock = threading.Lock()
        self._items: List[str] = []
        self._head = 0
        self._members: Set[str] = set()

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def insert_batch(self, items: Iterable[str]) -> int:
        """Add every eligible item not already present, then evict down to capacity.

        Blank texts and texts containing a mention marker are skipped.

        Returns
        -------
        int
            Number of items that were new to the pool (evicted ones included).
        """
        with self._lock:
            added = 0
            for item in items:
                if item in self._members or not is_eligible_text(item):
                    continue
                self._members.add(item)
                self._items.append(item)
                added += 1

            overflow = len(self._members) - self.max_capacity
            if overflow > 0:
                self._evict_oldest(overflow)
                logger.debug("[ITEM POOL] Evicted %d items (capacity %d)", overflow, self.max_capacity)

            return added

    def _evict_oldest(self, count: int) -> None:
        for _ in range(count):
            self._members.discard(self._items[self._head])
            self._head += 1

        if self._head > _COMPACT_THRESHOLD and self._head * 2 > len(self._items):
            del self._items[: self._head]
            self._head = 0

    def clear(self) -> None:
        with self._lock:
            self._items.clear()
            self._members.clear()
            self._head = 0

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def sample_one(self) -> str:
        """Return one item chosen uniformly at random.

        Raises
        ------
        EmptyPoolError
            If the pool holds no items.
        """
        with self._lock:
            if not self._members:
                raise EmptyPoolError("The item pool is empty")
            return self._items[self._rng.randrange(self._head, len(self._items))]

    def sample_distinct(self, k: int) -> List[str]:
        """Return up to ``k`` distinct items.

        When the pool holds ``k`` items or fewer all of them are returned.
        Otherwise items are drawn uniformly with duplicates rejected; the number
        of draws is capped, so the result may be shorter than ``k``.
        """
        if k <= 0:
            return []

        with self._lock:
            live = len(self._items) - self._head
            if live <= k:
                return self._items[self._head:]

            chosen: List[str] = []
            seen: Set[str] = set()
            attempts = k * _DISTINCT_ATTEMPT_FACTOR
            while len(chosen) < k and attempts > 0:
                attempts -= 1
                item = self._items[self._rng.randrange(self._head, len(self._items))]
                if item in seen:
                    continue
                seen.add(item)
                chosen.append(item)
            return chosen

    def size(self) -> int:
        with self._lock:
            return len(self._members)

    def snapshot(self) -> List[str]:
        """Return the current items, oldest first."""
        with self._lock:
            return self._items[self._head:]

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, item: object) -> bool:
        with self._lock:
            return item in self._members

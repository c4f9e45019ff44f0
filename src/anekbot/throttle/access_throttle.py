"""Per-caller cooldown limiter guarding read access to the item pool."""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from typing import Callable

from anekbot.exceptions import ThrottledError
from anekbot.util.logger import get_logger

logger = get_logger("access_throttle")

DEFAULT_WINDOW_MS = 1000
DEFAULT_MAX_ENTRIES = 10_000


class AccessThrottle:
    """
    Admit at most one request per caller per cooldown window.

    There is no burst allowance: a request is accepted only when at least
    ``window_ms`` milliseconds have passed since that caller's last accepted
    request. Rejected requests leave the caller's state untouched.

    Memory stays bounded. Once more than ``max_entries`` callers are tracked,
    entries whose cooldown has already expired are swept, since forgetting them
    cannot change any future decision. If the map is still too large the
    least-recently-accepted callers are dropped.

    Parameters
    ----------
    window_ms:
        Cooldown window in milliseconds.
    max_entries:
        Soft cap on the number of tracked callers.
    clock:
        Monotonic clock returning seconds. Injected by tests.
    """

    def __init__(
        self,
        window_ms: int = DEFAULT_WINDOW_MS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.window = max(0, window_ms) / 1000.0
        self.max_entries = max_entries
        self._clock = clock
        self._lock = threading.Lock()
        self._last_access: OrderedDict[int, float] = OrderedDict()

    def check(self, caller_id: int) -> bool:
        """Return True and record the access if ``caller_id`` is outside its cooldown."""
        with self._lock:
            now = self._clock()
            last = self._last_access.get(caller_id)
            if last is not None and now - last < self.window:
                return False

            self._last_access[caller_id] = now
            self._last_access.move_to_end(caller_id)
            if len(self._last_access) > self.max_entries:
                self._shrink(now)
            return True

    def enforce(self, caller_id: int) -> None:
        """Like :meth:`check` but raise :class:`ThrottledError` on rejection."""
        if not self.check(caller_id):
            raise ThrottledError(caller_id)

    def _shrink(self, now: float) -> None:
        # Entries are ordered by last accepted access, oldest first
        expired = 0
        while self._last_access:
            caller_id, last = next(iter(self._last_access.items()))
            if now - last < self.window:
                break
            del self._last_access[caller_id]
            expired += 1

        dropped = 0
        while len(self._last_access) > self.max_entries:
            self._last_access.popitem(last=False)
            dropped += 1

        if dropped:
            logger.warning("[THROTTLE] Dropped %d active callers over the %d entry cap", dropped, self.max_entries)
        else:
            logger.debug("[THROTTLE] Swept %d expired callers", expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._last_access)

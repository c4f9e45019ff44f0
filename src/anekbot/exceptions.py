"""Error taxonomy for the content cache.

- ``SourceConfigurationError``: a source cannot be sampled by position (not a
  broadcast-style text channel, missing, or inaccessible). Fatal for that source.
- ``TransientFetchError``: network, timeout or rate-limit failure while talking
  to the history API. The next scheduled crawl retries naturally.
- ``EmptyPoolError``: nothing to sample yet.
- ``ThrottledError``: a caller exceeded the access rate.
"""

from __future__ import annotations


class AnekbotError(Exception):
    """Base class for all errors raised by the content cache."""


class SourceConfigurationError(AnekbotError):
    """Raised when a configured source cannot be crawled at all."""

    def __init__(self, source_id: str, reason: str) -> None:
        super().__init__(f"Source {source_id!r} is not usable: {reason}")
        self.source_id = source_id
        self.reason = reason


class TransientFetchError(AnekbotError):
    """Raised when fetching from a source failed for a recoverable reason."""


class EmptyPoolError(AnekbotError):
    """Raised when sampling from a pool that holds no items."""


class ThrottledError(AnekbotError):
    """Raised when a caller issues requests faster than the cooldown window allows."""

    def __init__(self, caller_id: int) -> None:
        super().__init__(f"Caller {caller_id} is throttled")
        self.caller_id = caller_id

"""
Core data types shared by the crawler, the cache service and the cogs.

- ``FetchedMessage``: what the history API returned for one position.
- ``SourceState``: per-source cursor (known extent, cached handle, status).
- ``QueryResult``: one selectable entry produced by a list request.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

# Stored items are plain strings; identity is the exact text.
Item = str


@dataclass(frozen=True, slots=True)
class FetchedMessage:
    """A message returned by a source client.

    Attributes:
        text: Message text (empty string when the message has none).
        is_service: True for join/pin/system style messages.
        has_media: True when the message carries attachments, stickers or embeds.
    """

    text: str
    is_service: bool = False
    has_media: bool = False


@dataclass
class SourceState:
    """
    Mutable cursor data for a single configured source.

    ``extent`` is the exclusive upper bound on fetch positions. It is ``None``
    until the first metadata lookup and afterwards only grows through
    :meth:`record_new_message` or :meth:`update_extent`.
    """

    source_id: str
    extent: Optional[int] = None
    handle: Any = None
    disabled: bool = False
    disabled_reason: Optional[str] = None
    runs: int = 0
    items_added: int = 0
    last_error: Optional[str] = None
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False, compare=False)

    def update_extent(self, extent: int) -> None:
        """Replace the extent with a freshly queried value."""
        with self._lock:
            self.extent = max(0, int(extent))

    def record_new_message(self, position: Optional[int] = None) -> Optional[int]:
        """Advance the extent for a newly posted message.

        Without a position the extent grows by one. With a position the extent
        becomes ``position + 1`` unless it is already larger. Nothing happens
        while the extent is still unknown, the first crawl fetches it.

        Returns:
            The extent after the update.
        """
        with self._lock:
            if self.extent is None:
                return None
            if position is None:
                self.extent += 1
            else:
                self.extent = max(self.extent, position + 1)
            return self.extent

    def disable(self, reason: str) -> None:
        self.disabled = True
        self.disabled_reason = reason


@dataclass(frozen=True, slots=True)
class QueryResult:
    """One entry of a list response: a request-scoped id and the item text."""

    result_id: str
    text: Item

    def __iter__(self) -> Iterator[str]:
        yield self.result_id
        yield self.text

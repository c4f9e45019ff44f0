"""Interface to the remote message-history API used by the crawler."""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from anekbot.datatypes.content_datatypes import FetchedMessage


class SourceClient(Protocol):
    """
    Position-addressable access to the history of a source.

    Implementations raise :class:`~anekbot.exceptions.SourceConfigurationError`
    when a source cannot be sampled by position and
    :class:`~anekbot.exceptions.TransientFetchError` for recoverable failures.
    """

    async def resolve_source(self, identifier: str) -> Any:
        """Return an opaque handle for ``identifier``."""
        ...

    async def get_source_extent(self, handle: Any) -> int:
        """Return the exclusive upper bound on valid positions."""
        ...

    async def fetch_messages(self, handle: Any, positions: Sequence[int]) -> Sequence[Optional[FetchedMessage]]:
        """Fetch one message per position, ``None`` where nothing exists."""
        ...

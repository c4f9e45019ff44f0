from typing import Any, Dict, List

from anekbot.util.logger import get_logger

logger = get_logger("cache_settings")

DEFAULTS: Dict[str, Any] = {
    "sources": [],
    "batch_size": 100,
    "max_capacity": 100_000,
    "crawl_inter_source_delay_ms": 30_000,
    "crawl_inter_cycle_delay_ms": 1_000,
    "throttle_window_ms": 1_000,
    "throttle_max_entries": 10_000,
    "list_max_results": 10,
    "extent_refresh": "event",
}

EXTENT_REFRESH_MODES = ("event", "poll")


class CacheSettings:
    """Typed accessors for the ``content_cache`` configuration section.

    Unknown or malformed values fall back to the defaults above with a warning
    rather than failing startup.
    """

    def __init__(self, data: Dict[str, Any] | None = None) -> None:
        self.data: Dict[str, Any] = data or {}

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def as_dict(self) -> Dict[str, Any]:
        """Return every setting with defaults applied."""
        return {key: getattr(self, key) for key in DEFAULTS}

    def _int(self, key: str, minimum: int) -> int:
        raw = self.data.get(key, DEFAULTS[key])
        try:
            value = int(raw)
        except (TypeError, ValueError):
            logger.warning("[CACHE SETTINGS] %s=%r is not an integer; using %s", key, raw, DEFAULTS[key])
            return DEFAULTS[key]
        if value < minimum:
            logger.warning("[CACHE SETTINGS] %s=%d is below %d; using %s", key, value, minimum, DEFAULTS[key])
            return DEFAULTS[key]
        return value

    @property
    def sources(self) -> List[str]:
        raw = self.data.get("sources") or []
        if not isinstance(raw, list):
            logger.warning("[CACHE SETTINGS] sources must be a list, got %r", raw)
            return []
        # Duplicates would get crawled twice per pass
        return list(dict.fromkeys(str(source).strip() for source in raw if str(source).strip()))

    @property
    def batch_size(self) -> int:
        return self._int("batch_size", 1)

    @property
    def max_capacity(self) -> int:
        return self._int("max_capacity", 1)

    @property
    def crawl_inter_source_delay_ms(self) -> int:
        return self._int("crawl_inter_source_delay_ms", 0)

    @property
    def crawl_inter_cycle_delay_ms(self) -> int:
        return self._int("crawl_inter_cycle_delay_ms", 0)

    @property
    def throttle_window_ms(self) -> int:
        return self._int("throttle_window_ms", 0)

    @property
    def throttle_max_entries(self) -> int:
        return self._int("throttle_max_entries", 1)

    @property
    def list_max_results(self) -> int:
        # Discord select menus hold at most 25 options
        return min(self._int("list_max_results", 1), 25)

    @property
    def extent_refresh(self) -> str:
        value = str(self.data.get("extent_refresh", DEFAULTS["extent_refresh"])).lower()
        if value not in EXTENT_REFRESH_MODES:
            logger.warning("[CACHE SETTINGS] Unknown extent_refresh %r; using 'event'", value)
            return "event"
        return value

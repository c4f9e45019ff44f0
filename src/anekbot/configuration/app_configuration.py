from __future__ import annotations
from pathlib import Path
import fcntl
from typing import Any, Dict
import yaml

from anekbot.configuration.cache_settings import CacheSettings
from anekbot.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path("./config/app_config.yml").resolve()


class AppConfig:
    """Accessor around the YAML application configuration.

    Caches the contents of ``./config/app_config.yml`` and resolves the content
    cache section through :class:`CacheSettings`. Reads take a shared ``fcntl``
    lock so an editor saving the file never yields a half-written mapping.
    """

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                try:
                    data = yaml.safe_load(f)
                finally:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except FileNotFoundError:
            logger.error("[APP CONFIGURATION] Config file %s not found.", self.config_path)
            return {}
        except (OSError, yaml.YAMLError) as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
            return {}

        if not isinstance(data, dict):
            if data is not None:
                logger.error("[APP CONFIGURATION] Config %s must be a mapping.", self.config_path)
            return {}
        return data

    def reload(self) -> Dict[str, Any]:
        """Re-read the YAML file and return the new mapping (empty on error)."""
        self._data = self.load_from_disk()
        return self._data

    @property
    def data(self) -> Dict[str, Any]:
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    @property
    def cache_settings(self) -> CacheSettings:
        """Return the ``content_cache`` section wrapped in :class:`CacheSettings`."""
        section = self._data.get("content_cache", {})
        if not isinstance(section, dict):
            section = {}
        return CacheSettings(section)

    @property
    def start_message(self) -> str:
        return str(self._data.get("start_message") or "")

    @property
    def help_message(self) -> str:
        return str(self._data.get("help_message") or "")


# Shared application-wide configuration instance
app_config = AppConfig(CONFIG_PATH)

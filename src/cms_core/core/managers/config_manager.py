# src/cms_core/core/managers/config_manager.py
import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from cms_core.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)


def deep_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Returns a copy of `base` with `overrides` applied section by section.
    Nested dicts are merged, every other value replaces the default.
    """
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _read_settings(path: Path) -> Optional[Dict[str, Any]]:
    """A settings document, or None when it is absent or unreadable."""
    if not path.exists():
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error("Failed to load %s: %s", path, e, exc_info=True)
        return None
    if not isinstance(data, dict):
        logger.error("Ignoring %s: settings must be a JSON object.", path)
        return None
    return data


class ConfigManager:
    """
    A singleton holding the CMS configuration.

    The packaged settings.json provides the defaults. A site can override
    any part of it with a cms_settings.json in its working directory; only
    the keys present there replace the defaults. Runtime changes made with
    `set_nested` are in-memory only and are dropped by `reset`.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        self._config: Dict[str, Any] = {}
        self.sources: List[Path] = []
        self.reset()
        logger.debug("ConfigManager initialized.")

    def get_all(self) -> Dict[str, Any]:
        """Returns the entire current configuration dictionary."""
        return self._config

    def get_nested(self, key_path: str, default: Optional[Any] = None) -> Any:
        """
        Retrieves a value by dotted path, e.g. 'renderer.main_content_id'.
        Missing keys and None values yield the default.
        """
        value = self._config
        for key in key_path.split('.'):
            if isinstance(value, dict):
                value = value.get(key)
            else:
                return default
        return value if value is not None else default

    def set_nested(self, key_path: str, value: Any) -> bool:
        """
        Sets a value in memory. An existing value keeps its type: strings
        from the command line are cast, and 'false'/'no'/'0' become False.
        """
        keys = key_path.split('.')
        d = self._config
        for key in keys[:-1]:
            d = d.setdefault(key, {})
            if not isinstance(d, dict):
                logger.error("Cannot set value: '%s' is not a dictionary.", key)
                return False

        current = d.get(keys[-1])
        if current is not None:
            if isinstance(current, bool) and isinstance(value, str):
                value = value.strip().lower() in ("1", "true", "yes", "on")
            else:
                try:
                    value = type(current)(value)
                except (ValueError, TypeError):
                    logger.warning(
                        "Could not cast new value for '%s' to type %s. Storing as given.",
                        key_path, type(current).__name__
                    )

        d[keys[-1]] = value
        logger.info("Configuration updated: %s = %s", key_path, value)
        return True

    def reset(self):
        """Rebuilds the configuration from the packaged defaults and the site overrides."""
        defaults_path = PathUtils.get_settings_file()
        defaults = _read_settings(defaults_path)
        if defaults is None:
            logger.warning("settings.json not found or invalid at %s. Using empty defaults.", defaults_path)
            defaults = {}
        self.sources = [defaults_path] if defaults else []

        site_path = PathUtils.get_site_settings_file()
        overrides = _read_settings(site_path)
        if overrides:
            defaults = deep_merge(defaults, overrides)
            self.sources.append(site_path)
            logger.debug("Site settings applied from %s.", site_path)

        self._config = defaults


# The global singleton instance used throughout the application.
config_manager = ConfigManager()

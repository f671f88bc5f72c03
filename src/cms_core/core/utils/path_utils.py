# src/cms_core/core/utils/path_utils.py
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving package and cache paths.
    """

    # --- Package specific paths

    @staticmethod
    def get_core_package_root() -> Path:
        """Directory of the cms_core package (holds settings.json)."""
        return Path(__file__).resolve().parents[2]

    @staticmethod
    def get_settings_file() -> Path:
        return PathUtils.get_core_package_root() / "settings.json"

    # --- Working directory paths

    @staticmethod
    def get_cache_root() -> Path:
        """
        Returns the cache directory in the current working directory.
        (e.g., /path/to/site/.cms_cache)
        """
        return Path.cwd() / ".cms_cache"

    @staticmethod
    def get_site_settings_file() -> Path:
        """Per-site overrides of the packaged settings (e.g. /path/to/site/cms_settings.json)."""
        return Path.cwd() / "cms_settings.json"

    @staticmethod
    def get_database_path(configured: Optional[str] = None) -> Path:
        """
        Returns the SQLite database file. An empty configured path means
        '<cache root>/cms.db'. The parent directory is created if missing.
        """
        path = Path(configured).expanduser() if configured else PathUtils.get_cache_root() / "cms.db"
        path.parent.mkdir(parents=True, exist_ok=True)
        return path

"""
Steam App Cache.

Local cache of Steam games and DLC with fuzzy lookup and on-demand
achievement and DLC enrichment.
"""

from steam_app_cache.config import Settings, get_settings
from steam_app_cache.logger import get_logger, setup_logging
from steam_app_cache.models import AppCategory, ApplicationRecord, DlcEntry
from steam_app_cache.service import SteamAppService

__version__ = "0.1.0"

__all__ = [
    "AppCategory",
    "ApplicationRecord",
    "DlcEntry",
    "Settings",
    "SteamAppService",
    "get_logger",
    "get_settings",
    "setup_logging",
    "__version__",
]

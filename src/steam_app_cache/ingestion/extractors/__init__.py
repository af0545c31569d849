"""
Remote sources for the application cache.

All extractors share a common base with retry logic and
structured logging.
"""

from steam_app_cache.ingestion.extractors.achievements import AchievementExtractor
from steam_app_cache.ingestion.extractors.app_list import (
    CatalogExtractor,
    CatalogFetch,
    CatalogSource,
    default_catalog_sources,
)
from steam_app_cache.ingestion.extractors.base import (
    APIError,
    BaseExtractor,
    ExtractionError,
    RateLimitError,
    ServerError,
    ValidationError,
)
from steam_app_cache.ingestion.extractors.steamdb import SteamDbDlcSource
from steam_app_cache.ingestion.extractors.store_details import StoreDetailsExtractor

__all__ = [
    # Base classes and errors
    "APIError",
    "BaseExtractor",
    "ExtractionError",
    "RateLimitError",
    "ServerError",
    "ValidationError",
    # Extractors
    "AchievementExtractor",
    "CatalogExtractor",
    "CatalogFetch",
    "CatalogSource",
    "SteamDbDlcSource",
    "StoreDetailsExtractor",
    "default_catalog_sources",
]

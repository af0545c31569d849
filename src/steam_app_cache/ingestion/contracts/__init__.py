"""
Data contracts for Steam API responses.

Pydantic models describing the catalog, achievement schema and
storefront payloads consumed by the extractors.
"""

from steam_app_cache.ingestion.contracts.achievements import (
    AchievementDefinition,
    AvailableGameStats,
    GameSchema,
    GameSchemaResponse,
)
from steam_app_cache.ingestion.contracts.app_list import (
    CatalogApp,
    CatalogDecodeError,
    CatalogPage,
    LegacyAppListResponse,
    StoreServiceResponse,
    decode_catalog_page,
)
from steam_app_cache.ingestion.contracts.store_details import (
    STORE_TYPE_GAME,
    AppId,
    StoreAppDetails,
    StoreAppDetailsEnvelope,
)

__all__ = [
    "AchievementDefinition",
    "AppId",
    "AvailableGameStats",
    "CatalogApp",
    "CatalogDecodeError",
    "CatalogPage",
    "GameSchema",
    "GameSchemaResponse",
    "LegacyAppListResponse",
    "STORE_TYPE_GAME",
    "StoreAppDetails",
    "StoreAppDetailsEnvelope",
    "StoreServiceResponse",
    "decode_catalog_page",
]

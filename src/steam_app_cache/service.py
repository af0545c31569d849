"""
Steam application service.

Single entry point for the surrounding tool: initializes the cache,
answers lookups and enriches records with achievements and DLC.
"""

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

import httpx

from steam_app_cache.catalog import AppLookup, CatalogSynchronizer, DlcReconciler, SyncReport
from steam_app_cache.catalog.synchronizer import utcnow
from steam_app_cache.config import Settings, get_settings
from steam_app_cache.ingestion.contracts import AchievementDefinition
from steam_app_cache.ingestion.extractors import (
    AchievementExtractor,
    CatalogExtractor,
    CatalogSource,
    SteamDbDlcSource,
    StoreDetailsExtractor,
    default_catalog_sources,
)
from steam_app_cache.logger import get_logger
from steam_app_cache.models import ApplicationRecord, DlcEntry
from steam_app_cache.storage import RecordStore


class SteamAppService:
    """
    Facade over the record store, synchronizer and enrichment sources.

    All extractors share one HTTP client, closed with the service.

    Example:
        >>> async with SteamAppService() as service:
        ...     await service.initialize()
        ...     game = await service.get_app_by_name("Half-Life 2")
        ...     dlc = await service.get_dlc(game, use_secondary_source=True)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        store: RecordStore | None = None,
        client: httpx.AsyncClient | None = None,
        catalog_sources: list[CatalogSource] | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """
        Args:
            settings: Application settings (loaded from environment if None)
            store: Record store (opened at CACHE_DATABASE_PATH if None)
            client: Shared HTTP client (created and owned if None)
            catalog_sources: Catalog configuration table
            clock: Returns the current UTC time, used for staleness
        """
        self._settings = settings or get_settings()
        self._logger = get_logger(__name__, component="service")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(self._settings.steam.timeout_seconds),
            follow_redirects=True,
            headers={"User-Agent": self._settings.steam.user_agent},
        )

        self.store = store or RecordStore(self._settings.cache.database_path)

        shared: dict[str, Any] = {"settings": self._settings, "client": self._client}
        self._catalog = CatalogExtractor(**shared)
        self._achievements = AchievementExtractor(**shared)
        self._details = StoreDetailsExtractor(**shared)
        self._steamdb = SteamDbDlcSource(**shared)

        self._synchronizer = CatalogSynchronizer(
            self.store,
            self._catalog,
            sources=catalog_sources or default_catalog_sources(self._settings.cache),
            max_age=timedelta(hours=self._settings.cache.max_age_hours),
            clock=clock,
        )
        self._lookup = AppLookup(self.store)
        self._dlc = DlcReconciler(self.store, self._details, self._steamdb)

    async def initialize(self, *, force: bool = False) -> SyncReport:
        """
        Create the schema and refresh the catalog if it is stale.

        Safe to call repeatedly. Category failures are reported in the
        returned SyncReport rather than raised.
        """
        await self.store.create_schema()
        report = await self._synchronizer.sync(force=force)
        self._logger.info(
            "Cache initialized",
            refreshed=report.refreshed,
            success=report.success,
        )
        return report

    async def search_by_name(self, query: str) -> list[ApplicationRecord]:
        """Base games whose name contains every token of ``query``."""
        return await self._lookup.search_by_name(query)

    async def get_app_by_name(self, name: str) -> ApplicationRecord | None:
        """Base game matching ``name`` after normalization."""
        return await self._lookup.find_by_name(name)

    async def get_app_by_id(self, app_id: int) -> ApplicationRecord | None:
        """Base game with ``app_id``."""
        return await self._lookup.find_by_id(app_id)

    async def get_achievements(
        self, record: ApplicationRecord | None
    ) -> list[AchievementDefinition]:
        """
        Achievement definitions of ``record``.

        Raises:
            ExtractionError: If the schema cannot be fetched or parsed
        """
        return await self._achievements.fetch_achievements(record)

    async def get_dlc(
        self,
        record: ApplicationRecord | None,
        use_secondary_source: bool = False,
    ) -> list[DlcEntry]:
        """DLC of ``record``, optionally completed from SteamDB."""
        return await self._dlc.fetch_dlc(record, use_secondary_source)

    async def close(self) -> None:
        """Close the shared HTTP client if the service created it."""
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "SteamAppService":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

"""
Catalog synchronizer.

Decides whether the local cache is stale and, if so, refetches every
configured catalog category and bulk-loads it into the record store.
"""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, Field

from steam_app_cache.ingestion.extractors import (
    CatalogExtractor,
    CatalogSource,
    ExtractionError,
    default_catalog_sources,
)
from steam_app_cache.logger import get_logger
from steam_app_cache.models import AppCategory, ApplicationRecord
from steam_app_cache.storage import RecordStore

DEFAULT_MAX_AGE = timedelta(hours=24)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CategorySyncResult(BaseModel):
    """Outcome of refreshing one catalog category."""

    category: AppCategory
    success: bool
    fetched: int = 0
    inserted: int = 0
    pages: int = 0
    error_message: str | None = None


class SyncReport(BaseModel):
    """Outcome of a synchronization run."""

    refreshed: bool
    reason: str | None = None
    results: list[CategorySyncResult] = Field(default_factory=list)
    checked_at: datetime = Field(default_factory=utcnow)

    @property
    def success(self) -> bool:
        """True when no category failed."""
        return all(r.success for r in self.results)

    @property
    def failures(self) -> list[CategorySyncResult]:
        """Categories whose refresh was aborted."""
        return [r for r in self.results if not r.success]


class CatalogSynchronizer:
    """
    Keeps the record store in step with the remote catalog.

    A refresh is due when the store file is older than ``max_age`` or
    when any configured category has no records.
    """

    def __init__(
        self,
        store: RecordStore,
        extractor: CatalogExtractor,
        *,
        sources: list[CatalogSource] | None = None,
        max_age: timedelta = DEFAULT_MAX_AGE,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """
        Args:
            store: Destination for fetched records
            extractor: Catalog page fetcher
            sources: Category configuration table (base games and DLC if None)
            max_age: Age after which the store is considered stale
            clock: Returns the current UTC time
        """
        self._store = store
        self._extractor = extractor
        self._sources = sources if sources is not None else default_catalog_sources()
        self._max_age = max_age
        self._clock = clock
        self._logger = get_logger(__name__, component="synchronizer")

    async def staleness_reason(self) -> str | None:
        """Why a refresh is due, or None if the cache is fresh."""
        last_modified = await self._store.last_modified()
        if last_modified is None:
            return "cache file missing"

        age = self._clock() - last_modified
        if age > self._max_age:
            return f"cache is {age.total_seconds() / 3600:.1f}h old"

        for source in self._sources:
            if await self._store.count(source.category) == 0:
                return f"no {source.category.value} records cached"

        return None

    async def is_stale(self) -> bool:
        """Whether ``sync()`` would refresh."""
        return await self.staleness_reason() is not None

    async def refresh_category(self, source: CatalogSource) -> CategorySyncResult:
        """
        Fetch one category and store it.

        A failure on any page discards the whole category.
        """
        category = source.category
        self._logger.info("Updating cache", category=category.value)

        try:
            fetch = await self._extractor.fetch_all(source)
        except ExtractionError as e:
            self._logger.error(
                "Catalog refresh failed",
                category=category.value,
                error=str(e),
                status_code=e.status_code,
            )
            return CategorySyncResult(
                category=category,
                success=False,
                error_message=str(e),
            )

        records = [ApplicationRecord.create(app.appid, app.name, category) for app in fetch.apps]
        inserted = await self._store.bulk_upsert_ignore(records)

        return CategorySyncResult(
            category=category,
            success=True,
            fetched=len(records),
            inserted=inserted,
            pages=fetch.pages,
        )

    async def sync(self, *, force: bool = False) -> SyncReport:
        """
        Refresh every category if the cache is stale.

        Args:
            force: Refresh regardless of staleness

        Returns:
            SyncReport: ``refreshed`` is False when nothing was due
        """
        reason = "forced" if force else await self.staleness_reason()
        if reason is None:
            self._logger.info("Cache is fresh, skipping refresh")
            return SyncReport(refreshed=False)

        self._logger.info("Refreshing catalog", reason=reason)
        previous = await self._store.last_modified()
        results = [await self.refresh_category(source) for source in self._sources]
        report = SyncReport(refreshed=True, reason=reason, results=results)

        if report.success:
            await self._store.mark_refreshed()
        else:
            self._logger.warning(
                "Catalog refresh incomplete",
                failed=[r.category.value for r in report.failures],
            )
            if previous is not None:
                await self._store.restore_last_modified(previous)
        return report

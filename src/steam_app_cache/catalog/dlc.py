"""
DLC reconciliation.

The storefront's DLC id list is authoritative for membership and
order; cached DLC records supply names. SteamDB can optionally fill in
names the cache lacks and DLC the store does not list.
"""

import asyncio
from collections.abc import Iterable
from typing import Protocol

from steam_app_cache.ingestion.extractors import ExtractionError, StoreDetailsExtractor
from steam_app_cache.logger import get_logger
from steam_app_cache.models import AppCategory, ApplicationRecord, DlcEntry
from steam_app_cache.storage import RecordStore


class SecondaryDlcSource(Protocol):
    """Best-effort provider of (dlc_id, name) pairs; None means unavailable."""

    async def fetch_dlc_names(self, app_id: int) -> list[tuple[int, str]] | None: ...


def merge_secondary_dlc(
    entries: list[DlcEntry], scraped: Iterable[tuple[int, str]]
) -> list[DlcEntry]:
    """
    Merge scraped (id, name) pairs into ``entries``.

    A placeholder entry with a scraped id takes the scraped name, a named
    entry is kept as is, and an id not present yet is appended.
    """
    merged = list(entries)
    for dlc_id, name in scraped:
        scraped_entry = DlcEntry(app_id=dlc_id, name=name)
        index = next((i for i, e in enumerate(merged) if e.app_id == dlc_id), None)
        if index is None:
            merged.append(scraped_entry)
        elif merged[index].is_placeholder:
            merged[index] = scraped_entry
    return merged


class DlcReconciler:
    """
    Builds the DLC list of a base game.

    Example:
        >>> reconciler = DlcReconciler(store, details, steamdb)
        >>> dlc = await reconciler.fetch_dlc(record, use_secondary_source=True)
    """

    def __init__(
        self,
        store: RecordStore,
        details: StoreDetailsExtractor,
        secondary: SecondaryDlcSource | None = None,
    ) -> None:
        self._store = store
        self._details = details
        self._secondary = secondary
        self._logger = get_logger(__name__, component="dlc_reconciler")

    async def _resolve(self, dlc_id: int) -> DlcEntry:
        record = await self._store.find_by_id(AppCategory.DLC, dlc_id)
        entry = DlcEntry.from_record(record) if record is not None else DlcEntry.placeholder(dlc_id)
        self._logger.debug("Resolved DLC", app_id=entry.app_id, name=entry.name)
        return entry

    async def resolve_dlc_ids(self, dlc_ids: list[int]) -> list[DlcEntry]:
        """
        Name each id from the cache, keeping order and duplicates.

        Unknown ids get a placeholder entry.
        """
        return list(await asyncio.gather(*(self._resolve(dlc_id) for dlc_id in dlc_ids)))

    async def fetch_dlc(
        self,
        record: ApplicationRecord | None,
        use_secondary_source: bool = False,
    ) -> list[DlcEntry]:
        """
        DLC of ``record``.

        Returns an empty list when ``record`` is None, the storefront
        cannot be reached, or the app is not a base game. SteamDB is only
        contacted when ``use_secondary_source`` is set, and its failures
        leave the storefront result unchanged.
        """
        if record is None:
            self._logger.error("Could not get DLC: invalid app")
            return []

        self._logger.info("Get DLC for app", app_id=record.app_id, app=str(record))

        try:
            details = await self._details.fetch_details(record.app_id)
        except ExtractionError as e:
            self._logger.error(
                "Could not get DLC: store details unavailable",
                app_id=record.app_id,
                error=str(e),
            )
            return []

        if details is None or not details.is_game:
            self._logger.error(
                'Could not get DLC: app is not of type "game"',
                app_id=record.app_id,
                type=details.type if details is not None else None,
            )
            return []

        entries = await self.resolve_dlc_ids(details.dlc)
        self._logger.info("Got DLC successfully", app_id=record.app_id, count=len(entries))

        if not use_secondary_source or self._secondary is None:
            return entries

        try:
            scraped = await self._secondary.fetch_dlc_names(record.app_id)
        except Exception:
            self._logger.exception("Secondary DLC source failed, skipping", app_id=record.app_id)
            return entries
        if scraped is None:
            return entries

        merged = merge_secondary_dlc(entries, scraped)
        self._logger.info(
            "Merged DLC from secondary source",
            app_id=record.app_id,
            added=len(merged) - len(entries),
            total=len(merged),
        )
        return merged

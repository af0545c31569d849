"""
Name and id lookups over the cached base-game records.
"""

from steam_app_cache.logger import get_logger
from steam_app_cache.models import AppCategory, ApplicationRecord, comparable_name_of
from steam_app_cache.storage import RecordStore


def matches_all_tokens(name: str, tokens: list[str]) -> bool:
    """Whether ``name`` contains every token, ignoring case."""
    folded = name.casefold()
    return all(token.casefold() in folded for token in tokens)


class AppLookup:
    """
    Fuzzy and exact lookups, scoped to base games.

    Example:
        >>> lookup = AppLookup(store)
        >>> [r.name for r in await lookup.search_by_name("half life")]
        ['Half-Life', 'Half-Life 2']
    """

    def __init__(self, store: RecordStore) -> None:
        self._store = store
        self._logger = get_logger(__name__, component="lookup")

    async def search_by_name(self, query: str) -> list[ApplicationRecord]:
        """
        Base games whose name contains every whitespace-separated token.

        Matching is case-insensitive and locale-independent; results keep
        store order. A query without tokens matches nothing.
        """
        tokens = query.split()
        if not tokens:
            return []

        candidates = await self._store.all_of(AppCategory.BASE)
        matches = [record for record in candidates if matches_all_tokens(record.name, tokens)]
        self._logger.debug("Searched by name", query=query, matches=len(matches))
        return matches

    async def find_by_name(self, name: str) -> ApplicationRecord | None:
        """Base game whose comparable name equals that of ``name``."""
        self._logger.info("Trying to get app", name=name)
        record = await self._store.find_by_comparable_name(
            AppCategory.BASE, comparable_name_of(name)
        )
        if record is not None:
            self._logger.info("Successfully got app", app=str(record))
        return record

    async def find_by_id(self, app_id: int) -> ApplicationRecord | None:
        """Base game with ``app_id``."""
        self._logger.info("Trying to get app", app_id=app_id)
        record = await self._store.find_by_id(AppCategory.BASE, app_id)
        if record is not None:
            self._logger.info("Successfully got app", app=str(record))
        return record

"""
SQLite-backed store of application records.

Every call opens its own short-lived connection and runs in a worker
thread, so reads can be issued concurrently from the event loop. Only
one bulk insert may run at a time.
"""

import asyncio
import os
import sqlite3
import threading
from collections.abc import Iterable, Iterator
from contextlib import closing, contextmanager
from datetime import datetime, timezone
from pathlib import Path

from steam_app_cache.logger import get_logger
from steam_app_cache.models import AppCategory, ApplicationRecord

__all__ = ["RecordStore"]

_SCHEMA = """
CREATE TABLE IF NOT EXISTS apps (
    app_id          INTEGER NOT NULL,
    category        TEXT    NOT NULL,
    name            TEXT    NOT NULL,
    comparable_name TEXT    NOT NULL,
    PRIMARY KEY (category, app_id)
);
CREATE INDEX IF NOT EXISTS idx_apps_comparable_name
    ON apps (category, comparable_name);
"""

_INSERT_IGNORE = (
    "INSERT OR IGNORE INTO apps (app_id, category, name, comparable_name) "
    "VALUES (?, ?, ?, ?)"
)

_SELECT = "SELECT app_id, category, name, comparable_name FROM apps"


def _to_record(row: sqlite3.Row) -> ApplicationRecord:
    return ApplicationRecord(
        app_id=row["app_id"],
        name=row["name"],
        comparable_name=row["comparable_name"],
        category=AppCategory(row["category"]),
    )


class RecordStore:
    """
    Persistent table of games and DLC keyed by (category, app_id).

    The modification time of the database file doubles as the
    staleness clock of the catalog.
    """

    def __init__(self, database_path: Path | str) -> None:
        """
        Args:
            database_path: Path to the SQLite file (created on demand)
        """
        self.database_path = Path(database_path)
        self._logger = get_logger(__name__, component="record_store")
        self._write_lock = threading.Lock()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection that commits on success and always closes."""
        with closing(sqlite3.connect(str(self.database_path))) as conn:
            conn.row_factory = sqlite3.Row
            with conn:
                yield conn

    # -- schema --------------------------------------------------------------

    def _create_schema(self) -> None:
        self.database_path.parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.executescript(_SCHEMA)

    async def create_schema(self) -> None:
        """Create the table and index if they do not exist yet."""
        await asyncio.to_thread(self._create_schema)

    # -- writes --------------------------------------------------------------

    def _bulk_upsert_ignore(self, records: list[ApplicationRecord]) -> int:
        inserted = 0
        failed = 0
        with self._write_lock, self._connect() as conn:
            for record in records:
                try:
                    cursor = conn.execute(
                        _INSERT_IGNORE,
                        (
                            record.app_id,
                            record.category.value,
                            record.name,
                            record.comparable_name,
                        ),
                    )
                except (sqlite3.Error, OverflowError) as e:
                    failed += 1
                    self._logger.debug("Skipping record", record=repr(record), error=str(e))
                    continue
                inserted += cursor.rowcount

        if failed:
            self._logger.warning("Some records could not be stored", failed=failed)
        self._logger.info(
            "Stored records",
            submitted=len(records),
            inserted=inserted,
            ignored=len(records) - inserted - failed,
        )
        return inserted

    async def bulk_upsert_ignore(self, records: Iterable[ApplicationRecord]) -> int:
        """
        Insert records whose key is not stored yet.

        Existing rows are left untouched. A row that fails to insert is
        logged and skipped; the rest of the batch is still committed.

        Returns:
            Number of rows actually inserted
        """
        return await asyncio.to_thread(self._bulk_upsert_ignore, list(records))

    def _touch(self) -> None:
        self.database_path.touch()

    async def mark_refreshed(self) -> None:
        """Reset the staleness clock to now."""
        await asyncio.to_thread(self._touch)

    def _set_mtime(self, when: datetime) -> None:
        timestamp = when.timestamp()
        os.utime(self.database_path, (timestamp, timestamp))

    async def restore_last_modified(self, when: datetime) -> None:
        """
        Wind the staleness clock back to ``when``.

        Inserts move the file's modification time; an incomplete refresh
        calls this so the cache still reads as stale afterwards.
        """
        await asyncio.to_thread(self._set_mtime, when)

    # -- reads ---------------------------------------------------------------

    def _count(self, category: AppCategory) -> int:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT COUNT(*) FROM apps WHERE category = ?", (category.value,)
            ).fetchone()
        return int(row[0])

    async def count(self, category: AppCategory) -> int:
        """Number of stored records in ``category``."""
        return await asyncio.to_thread(self._count, category)

    def _find_one(self, where: str, params: tuple[object, ...]) -> ApplicationRecord | None:
        with self._connect() as conn:
            row = conn.execute(
                f"{_SELECT} WHERE {where} ORDER BY rowid LIMIT 1", params
            ).fetchone()
        return _to_record(row) if row is not None else None

    async def find_by_id(self, category: AppCategory, app_id: int) -> ApplicationRecord | None:
        """Record with ``app_id`` in ``category``, or None."""
        return await asyncio.to_thread(
            self._find_one, "category = ? AND app_id = ?", (category.value, app_id)
        )

    async def find_by_comparable_name(
        self, category: AppCategory, comparable_name: str
    ) -> ApplicationRecord | None:
        """First record in ``category`` whose comparable name equals ``comparable_name``."""
        return await asyncio.to_thread(
            self._find_one,
            "category = ? AND comparable_name = ?",
            (category.value, comparable_name),
        )

    def _all_of(self, category: AppCategory) -> list[ApplicationRecord]:
        with self._connect() as conn:
            rows = conn.execute(
                f"{_SELECT} WHERE category = ? ORDER BY rowid", (category.value,)
            ).fetchall()
        return [_to_record(row) for row in rows]

    async def all_of(self, category: AppCategory) -> list[ApplicationRecord]:
        """Every record in ``category`` in insertion order."""
        return await asyncio.to_thread(self._all_of, category)

    def _last_modified(self) -> datetime | None:
        try:
            mtime = self.database_path.stat().st_mtime
        except FileNotFoundError:
            return None
        return datetime.fromtimestamp(mtime, tz=timezone.utc)

    async def last_modified(self) -> datetime | None:
        """Modification time of the database file, None if it does not exist."""
        return await asyncio.to_thread(self._last_modified)

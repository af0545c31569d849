"""Shared fixtures for the test suite."""

import json
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any, cast

import pytest
import pytest_asyncio
from steam_app_cache.config import CacheConfig, RetryConfig, Settings, SteamAPIConfig
from steam_app_cache.models import AppCategory, ApplicationRecord
from steam_app_cache.storage import RecordStore

FIXTURES_DIR = Path(__file__).parent / "fixtures"

STEAM_API = "https://api.steampowered.com"
APP_LIST_URL = f"{STEAM_API}/IStoreService/GetAppList/v1/"
GAME_SCHEMA_URL = f"{STEAM_API}/ISteamUserStats/GetSchemaForGame/v2/"
APP_DETAILS_URL = "https://store.steampowered.com/api/appdetails"
STEAMDB_URL = "https://steamdb.info"


def load_fixture(name: str) -> dict[str, Any]:
    """Load a JSON fixture file."""
    with (FIXTURES_DIR / name).open(encoding="utf-8") as f:
        return cast(dict[str, Any], json.load(f))


def load_text_fixture(name: str) -> str:
    """Load a text fixture file."""
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a temporary cache, without retry delays."""
    return Settings(
        steam=SteamAPIConfig(api_key="test_api_key_123"),
        cache=CacheConfig(database_path=tmp_path / "steamapps.cache"),
        retry=RetryConfig(max_attempts=1, base_delay_seconds=0.0, max_delay_seconds=0.0),
    )


@pytest_asyncio.fixture
async def store(settings: Settings) -> AsyncIterator[RecordStore]:
    """Empty record store with its schema created."""
    record_store = RecordStore(settings.cache.database_path)
    await record_store.create_schema()
    yield record_store


@pytest_asyncio.fixture
async def populated_store(store: RecordStore) -> RecordStore:
    """Store holding a few games and DLC."""
    await store.bulk_upsert_ignore(
        [
            ApplicationRecord.create(70, "Half-Life", AppCategory.BASE),
            ApplicationRecord.create(220, "Half-Life 2", AppCategory.BASE),
            ApplicationRecord.create(620, "Portal 2", AppCategory.BASE),
            ApplicationRecord.create(2, "Pack", AppCategory.DLC),
            ApplicationRecord.create(323180, "Portal 2 - Soundtrack", AppCategory.DLC),
        ]
    )
    return store

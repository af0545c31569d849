"""Integration tests for DLC reconciliation."""

import httpx
import pytest
import respx
from conftest import APP_DETAILS_URL, STEAMDB_URL, load_fixture, load_text_fixture

from steam_app_cache.catalog import DlcReconciler
from steam_app_cache.config import Settings
from steam_app_cache.ingestion.extractors import SteamDbDlcSource, StoreDetailsExtractor
from steam_app_cache.models import AppCategory, ApplicationRecord, DlcEntry
from steam_app_cache.storage import RecordStore

PORTAL_2 = ApplicationRecord.create(620, "Portal 2", AppCategory.BASE)
STEAMDB_PAGE_URL = f"{STEAMDB_URL}/app/620/dlc/"


def details_response(app_type: str, dlc: list[int]) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "620": {
                "success": True,
                "data": {"steam_appid": 620, "name": "Portal 2", "type": app_type, "dlc": dlc},
            }
        },
    )


class FailingSource:
    """Secondary source that raises instead of reporting unavailability."""

    async def fetch_dlc_names(self, app_id: int) -> list[tuple[int, str]] | None:
        raise RuntimeError("selector changed")


@pytest.fixture
def reconciler(populated_store: RecordStore, settings: Settings) -> DlcReconciler:
    return DlcReconciler(
        populated_store,
        StoreDetailsExtractor(settings=settings),
        SteamDbDlcSource(settings=settings),
    )


class TestDlcReconciler:
    """Tests for DlcReconciler.fetch_dlc."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_resolves_names_from_cache(self, reconciler: DlcReconciler) -> None:
        """Test cached DLC are named and unknown ids get placeholders."""
        respx.get(APP_DETAILS_URL).mock(
            return_value=httpx.Response(200, json=load_fixture("store_details_response.json"))
        )

        entries = await reconciler.fetch_dlc(PORTAL_2, use_secondary_source=False)

        assert entries == [DlcEntry.placeholder(1), DlcEntry(app_id=2, name="Pack")]

    @respx.mock
    @pytest.mark.asyncio
    async def test_secondary_source_not_called_when_disabled(
        self, reconciler: DlcReconciler
    ) -> None:
        """Test SteamDB is never requested without the flag."""
        respx.get(APP_DETAILS_URL).mock(return_value=details_response("game", [1, 2]))
        steamdb = respx.get(STEAMDB_PAGE_URL).mock(
            return_value=httpx.Response(200, text=load_text_fixture("steamdb_dlc_page.html"))
        )

        await reconciler.fetch_dlc(PORTAL_2, use_secondary_source=False)

        assert steamdb.called is False

    @respx.mock
    @pytest.mark.asyncio
    async def test_merges_secondary_source(self, reconciler: DlcReconciler) -> None:
        """Test placeholders are filled and new DLC appended."""
        respx.get(APP_DETAILS_URL).mock(return_value=details_response("game", [1, 2]))
        respx.get(STEAMDB_PAGE_URL).mock(
            return_value=httpx.Response(200, text=load_text_fixture("steamdb_dlc_page.html"))
        )

        entries = await reconciler.fetch_dlc(PORTAL_2, use_secondary_source=True)

        assert entries == [
            DlcEntry(app_id=1, name="Real Pack"),
            DlcEntry(app_id=2, name="Pack"),
            DlcEntry(app_id=3, name="New Pack"),
        ]

    @respx.mock
    @pytest.mark.asyncio
    @pytest.mark.parametrize("app_type", ["dlc", "demo", "music"])
    async def test_non_game_returns_empty(self, reconciler: DlcReconciler, app_type: str) -> None:
        """Test DLC lists are only built for base games."""
        respx.get(APP_DETAILS_URL).mock(return_value=details_response(app_type, [1, 2, 3]))
        steamdb = respx.get(STEAMDB_PAGE_URL).mock(return_value=httpx.Response(200))

        assert await reconciler.fetch_dlc(PORTAL_2, use_secondary_source=True) == []
        assert steamdb.called is False

    @respx.mock
    @pytest.mark.asyncio
    async def test_none_record(self, reconciler: DlcReconciler) -> None:
        """Test an absent record returns nothing without requests."""
        details = respx.get(APP_DETAILS_URL).mock(return_value=details_response("game", [1]))

        assert await reconciler.fetch_dlc(None, use_secondary_source=True) == []
        assert details.called is False

    @respx.mock
    @pytest.mark.asyncio
    async def test_store_failure_returns_empty(self, reconciler: DlcReconciler) -> None:
        """Test an unreachable storefront is a soft failure."""
        respx.get(APP_DETAILS_URL).mock(return_value=httpx.Response(500))

        assert await reconciler.fetch_dlc(PORTAL_2) == []

    @respx.mock
    @pytest.mark.asyncio
    async def test_unknown_app_returns_empty(self, reconciler: DlcReconciler) -> None:
        """Test success=false from the store."""
        respx.get(APP_DETAILS_URL).mock(
            return_value=httpx.Response(200, json={"620": {"success": False}})
        )

        assert await reconciler.fetch_dlc(PORTAL_2) == []

    @respx.mock
    @pytest.mark.asyncio
    async def test_secondary_unavailable_keeps_primary(self, reconciler: DlcReconciler) -> None:
        """Test a page without the DLC section leaves the store result."""
        respx.get(APP_DETAILS_URL).mock(return_value=details_response("game", [1, 2]))
        respx.get(STEAMDB_PAGE_URL).mock(
            return_value=httpx.Response(200, text=load_text_fixture("steamdb_challenge_page.html"))
        )

        entries = await reconciler.fetch_dlc(PORTAL_2, use_secondary_source=True)

        assert entries == [DlcEntry.placeholder(1), DlcEntry(app_id=2, name="Pack")]

    @respx.mock
    @pytest.mark.asyncio
    async def test_secondary_exception_keeps_primary(
        self, populated_store: RecordStore, settings: Settings
    ) -> None:
        """Test an exception from the secondary source is contained."""
        respx.get(APP_DETAILS_URL).mock(return_value=details_response("game", [2]))
        reconciler = DlcReconciler(
            populated_store, StoreDetailsExtractor(settings=settings), FailingSource()
        )

        entries = await reconciler.fetch_dlc(PORTAL_2, use_secondary_source=True)

        assert entries == [DlcEntry(app_id=2, name="Pack")]

    @respx.mock
    @pytest.mark.asyncio
    async def test_duplicate_ids_are_preserved(self, reconciler: DlcReconciler) -> None:
        """Test the store's id list is reproduced as given."""
        respx.get(APP_DETAILS_URL).mock(return_value=details_response("game", [2, 9, 2]))

        entries = await reconciler.fetch_dlc(PORTAL_2)

        assert [e.app_id for e in entries] == [2, 9, 2]
        assert entries[1] == DlcEntry.placeholder(9)

    @respx.mock
    @pytest.mark.asyncio
    async def test_game_without_dlc(self, reconciler: DlcReconciler) -> None:
        """Test a game with no DLC ids."""
        respx.get(APP_DETAILS_URL).mock(return_value=details_response("game", []))

        assert await reconciler.fetch_dlc(PORTAL_2) == []

"""End-to-end tests for SteamAppService with mocked Steam endpoints."""

import httpx
import pytest
import respx
from conftest import APP_DETAILS_URL, APP_LIST_URL, GAME_SCHEMA_URL, load_fixture

from steam_app_cache import SteamAppService
from steam_app_cache.config import Settings
from steam_app_cache.ingestion.extractors import ExtractionError
from steam_app_cache.models import DlcEntry

DLC_PAGE = {"response": {"apps": [{"appid": 2, "name": "Pack"}]}}


def mock_catalog() -> respx.Route:
    def respond(request: httpx.Request) -> httpx.Response:
        if request.url.params.get("include_dlc") == "1":
            return httpx.Response(200, json=DLC_PAGE)
        if "last_appid" in request.url.params:
            return httpx.Response(200, json=load_fixture("catalog_page_2.json"))
        return httpx.Response(200, json=load_fixture("catalog_page_1.json"))

    return respx.get(APP_LIST_URL).mock(side_effect=respond)


class TestSteamAppService:
    """Tests for the public interface."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self, settings: Settings) -> None:
        """Test the second initialization finds a fresh cache."""
        route = mock_catalog()

        async with SteamAppService(settings) as service:
            first = await service.initialize()
            second = await service.initialize()

        assert first.refreshed is True
        assert first.success is True
        assert second.refreshed is False
        assert route.call_count == 3

    @respx.mock
    @pytest.mark.asyncio
    async def test_lookups_after_initialize(self, settings: Settings) -> None:
        """Test search, name and id lookups over the synced catalog."""
        mock_catalog()

        async with SteamAppService(settings) as service:
            await service.initialize()
            found = await service.search_by_name("portal")
            by_name = await service.get_app_by_name("PORTAL-2")
            by_id = await service.get_app_by_id(220)
            dlc_by_id = await service.get_app_by_id(2)

        assert [r.name for r in found] == ["Portal", "Portal 2"]
        assert by_name is not None and by_name.app_id == 620
        assert by_id is not None and by_id.name == "Half-Life 2"
        assert dlc_by_id is None

    @respx.mock
    @pytest.mark.asyncio
    async def test_initialize_reports_failures(self, settings: Settings) -> None:
        """Test catalog failures are reported, not raised."""
        respx.get(APP_LIST_URL).mock(side_effect=httpx.ConnectError("offline"))

        async with SteamAppService(settings) as service:
            report = await service.initialize()
            results = await service.search_by_name("portal")

        assert report.success is False
        assert len(report.failures) == 2
        assert results == []

    @respx.mock
    @pytest.mark.asyncio
    async def test_enrichment(self, settings: Settings) -> None:
        """Test achievements and DLC for a looked-up game."""
        mock_catalog()
        respx.get(GAME_SCHEMA_URL).mock(
            return_value=httpx.Response(200, json=load_fixture("game_schema_response.json"))
        )
        respx.get(APP_DETAILS_URL).mock(
            return_value=httpx.Response(200, json=load_fixture("store_details_response.json"))
        )

        async with SteamAppService(settings) as service:
            await service.initialize()
            game = await service.get_app_by_id(620)
            achievements = await service.get_achievements(game)
            dlc = await service.get_dlc(game)

        assert len(achievements) == 2
        assert dlc == [DlcEntry.placeholder(1), DlcEntry(app_id=2, name="Pack")]

    @respx.mock
    @pytest.mark.asyncio
    async def test_achievement_failure_propagates(self, settings: Settings) -> None:
        """Test achievement errors reach the caller."""
        mock_catalog()
        respx.get(GAME_SCHEMA_URL).mock(return_value=httpx.Response(200, json={}))

        async with SteamAppService(settings) as service:
            await service.initialize()
            game = await service.get_app_by_id(620)
            with pytest.raises(ExtractionError):
                await service.get_achievements(game)

    @pytest.mark.asyncio
    async def test_shared_client_left_open(self, settings: Settings) -> None:
        """Test a caller-provided client is not closed by the service."""
        async with httpx.AsyncClient() as client:
            async with SteamAppService(settings, client=client):
                pass

            assert client.is_closed is False

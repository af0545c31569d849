"""
Steam App List Extractor.

Pages through IStoreService/GetAppList/v1 for one catalog category,
following the ``last_appid`` cursor until the endpoint reports no
more results.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from steam_app_cache.config import CacheConfig, Settings
from steam_app_cache.ingestion.contracts import (
    CatalogApp,
    CatalogDecodeError,
    CatalogPage,
    decode_catalog_page,
)
from steam_app_cache.ingestion.extractors.base import BaseExtractor, ValidationError
from steam_app_cache.models import AppCategory

STORE_SERVICE_APP_LIST_PATH = "/IStoreService/GetAppList/v1/"


@dataclass(frozen=True)
class CatalogSource:
    """
    How to fetch one category of the catalog.

    Attributes:
        category: Category the fetched apps are stored under
        params: Fixed query parameters for the catalog endpoint
        path: Endpoint path relative to the Steam Web API base URL
        decoder: Turns a JSON payload into a CatalogPage
    """

    category: AppCategory
    params: dict[str, Any] = field(default_factory=dict)
    path: str = STORE_SERVICE_APP_LIST_PATH
    decoder: Callable[[Any], CatalogPage] = decode_catalog_page


def default_catalog_sources(cache: CacheConfig | None = None) -> list[CatalogSource]:
    """Base games first, then DLC."""
    page_size = cache.page_size if cache else CacheConfig().page_size
    return [
        CatalogSource(
            category=AppCategory.BASE,
            params={"max_results": page_size, "include_games": 1},
        ),
        CatalogSource(
            category=AppCategory.DLC,
            params={"max_results": page_size, "include_games": 0, "include_dlc": 1},
        ),
    ]


@dataclass
class CatalogFetch:
    """All apps of one category, deduplicated by id."""

    category: AppCategory
    apps: list[CatalogApp]
    pages: int


class CatalogExtractor(BaseExtractor):
    """
    Fetches a whole catalog category page by page.

    Example:
        >>> async with CatalogExtractor() as extractor:
        ...     fetch = await extractor.fetch_all(default_catalog_sources()[0])
        ...     print(len(fetch.apps))
    """

    def __init__(self, *, settings: Settings | None = None, **kwargs: Any) -> None:
        super().__init__(settings=settings, **kwargs)
        self._base_url = self._settings.steam.base_url.rstrip("/")
        self._api_key = self._settings.steam.api_key.get_secret_value()

    @property
    def source_name(self) -> str:
        """Return source identifier."""
        return "steam_app_list_api"

    async def fetch_page(self, source: CatalogSource, last_appid: int = 0) -> CatalogPage:
        """
        Fetch and decode one page.

        Args:
            source: Category configuration
            last_appid: Cursor from the previous page (0 for the first page)

        Raises:
            ExtractionError: On network failure or error response
            ValidationError: If the payload matches no known shape
        """
        url = f"{self._base_url}{source.path}"
        params: dict[str, Any] = {**source.params, "key": self._api_key}
        if last_appid > 0:
            params["last_appid"] = last_appid

        raw_data = await self._get_json(url, params=params)
        try:
            return source.decoder(raw_data)
        except CatalogDecodeError as e:
            raise ValidationError(
                str(e),
                source=self.source_name,
                endpoint=url,
                original_error=e,
            ) from e

    async def fetch_all(self, source: CatalogSource) -> CatalogFetch:
        """
        Fetch every page of a category.

        Apps are deduplicated by id, keeping the first occurrence.
        Any page failure propagates, so a partial catalog is never
        returned.
        """
        self._logger.info("Fetching catalog", category=source.category.value)

        apps: dict[int, CatalogApp] = {}
        last_appid = 0
        pages = 0

        while True:
            page = await self.fetch_page(source, last_appid)
            pages += 1
            for app in page.apps:
                apps.setdefault(app.appid, app)

            self._logger.debug(
                "Fetched catalog page",
                category=source.category.value,
                page=pages,
                page_size=len(page.apps),
                total=len(apps),
            )

            if not page.have_more_results:
                break
            if page.last_appid <= last_appid:
                raise ValidationError(
                    f"Catalog cursor did not advance past {last_appid}",
                    source=self.source_name,
                    endpoint=f"{self._base_url}{source.path}",
                )
            last_appid = page.last_appid

        self._logger.info(
            "Catalog fetch complete",
            category=source.category.value,
            pages=pages,
            total_apps=len(apps),
        )
        return CatalogFetch(category=source.category, apps=list(apps.values()), pages=pages)

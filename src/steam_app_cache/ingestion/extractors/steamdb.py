"""
SteamDB DLC page scraper.

Best-effort secondary source for DLC names. The page layout is not an
API, so every failure (network, Cloudflare challenge, missing ``#dlc``
section) is reported as "unavailable" by returning None instead of
raising.
"""

from typing import Any

from bs4 import BeautifulSoup
from bs4.element import Tag

from steam_app_cache.config import Settings
from steam_app_cache.ingestion.contracts import AppId
from steam_app_cache.ingestion.extractors.base import BaseExtractor, ExtractionError
from steam_app_cache.models import placeholder_dlc_name

DLC_SECTION_SELECTOR = "#dlc"
DLC_ROW_SELECTOR = ".app"
DLC_ID_ATTRIBUTE = "data-appid"


class SteamDbDlcSource(BaseExtractor):
    """
    Scrapes the DLC table of ``/app/{id}/dlc/``.

    Example:
        >>> async with SteamDbDlcSource() as source:
        ...     names = await source.fetch_dlc_names(1091500)
        ...     if names is None:
        ...         print("SteamDB unavailable")
    """

    accept = "text/html,application/xhtml+xml"

    def __init__(self, *, settings: Settings | None = None, **kwargs: Any) -> None:
        super().__init__(settings=settings, **kwargs)
        self._base_url = self._settings.steamdb.base_url.rstrip("/")
        if "timeout" not in kwargs:
            self._timeout = self._settings.steamdb.timeout_seconds

    @property
    def source_name(self) -> str:
        """Return source identifier."""
        return "steamdb_dlc_page"

    def _parse_row(self, row: Tag) -> tuple[int, str] | None:
        raw_id = row.get(DLC_ID_ATTRIBUTE)
        if isinstance(raw_id, list):
            raw_id = raw_id[0] if raw_id else None
        raw_id = raw_id.strip() if raw_id is not None else ""
        if not (raw_id.isascii() and raw_id.isdigit()):
            self._logger.warning("Skipping DLC row with non-numeric id", raw_id=raw_id)
            return None

        dlc_id = int(raw_id)
        cells = row.find_all("td")
        if len(cells) > 1:
            name = cells[1].get_text().replace("\n", "").strip()
        else:
            name = ""
        return dlc_id, name or placeholder_dlc_name(dlc_id)

    def parse_dlc_page(self, html: str) -> list[tuple[int, str]] | None:
        """
        Extract (id, name) pairs from a DLC page.

        Returns:
            Rows in page order, or None if the ``#dlc`` section is absent
        """
        soup = BeautifulSoup(html, "html.parser")
        section = soup.select_one(DLC_SECTION_SELECTOR)
        if section is None:
            return None

        entries: list[tuple[int, str]] = []
        for row in section.select(DLC_ROW_SELECTOR):
            parsed = self._parse_row(row)
            if parsed is not None:
                entries.append(parsed)
        return entries

    async def fetch_dlc_names(self, app_id: AppId) -> list[tuple[int, str]] | None:
        """
        Fetch DLC ids and names for ``app_id``.

        Returns:
            list of (dlc_id, name), or None if the source is unavailable
        """
        url = f"{self._base_url}/app/{app_id}/dlc/"
        self._logger.info("Getting SteamDB app", app_id=app_id)

        try:
            response = await self._make_request("GET", url)
            entries = self.parse_dlc_page(response.text)
        except ExtractionError as e:
            self._logger.error(
                "Could not get DLC from SteamDB, skipping",
                app_id=app_id,
                error=str(e),
                status_code=e.status_code,
            )
            return None
        except Exception:
            self._logger.exception("Could not parse SteamDB DLC page, skipping", app_id=app_id)
            return None

        if entries is None:
            self._logger.error("Could not get DLC from SteamDB: no DLC section", app_id=app_id)
            return None

        self._logger.info("Got DLC from SteamDB", app_id=app_id, count=len(entries))
        return entries

"""
Steam achievement schema extractor.

Fetches achievement definitions from ISteamUserStats/GetSchemaForGame.
Requires a Steam API key.
"""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from steam_app_cache.config import Settings
from steam_app_cache.ingestion.contracts import AchievementDefinition, GameSchemaResponse
from steam_app_cache.ingestion.extractors.base import BaseExtractor, ValidationError
from steam_app_cache.models import ApplicationRecord

GAME_SCHEMA_PATH = "/ISteamUserStats/GetSchemaForGame/v2/"


class AchievementExtractor(BaseExtractor):
    """
    Extractor for a game's achievement schema.

    Example:
        >>> async with AchievementExtractor() as extractor:
        ...     achievements = await extractor.fetch_achievements(record)
        ...     print([a.display_name for a in achievements])
    """

    def __init__(self, *, settings: Settings | None = None, **kwargs: Any) -> None:
        super().__init__(settings=settings, **kwargs)
        self._base_url = self._settings.steam.base_url.rstrip("/")
        self._api_key = self._settings.steam.api_key.get_secret_value()
        self._language = self._settings.steam.language

    @property
    def source_name(self) -> str:
        """Return source identifier."""
        return "steam_game_schema_api"

    def _parse_response(self, raw_data: Any, endpoint: str) -> list[AchievementDefinition]:
        """
        Read game.availableGameStats.achievements.

        Raises:
            ValidationError: If the path is missing or an entry is malformed
        """
        try:
            schema = GameSchemaResponse.model_validate(raw_data)
        except PydanticValidationError as e:
            raise ValidationError(
                f"Response validation failed: {e}",
                source=self.source_name,
                endpoint=endpoint,
                original_error=e,
            ) from e
        return schema.game.available_game_stats.achievements

    async def fetch_achievements(
        self, record: ApplicationRecord | None
    ) -> list[AchievementDefinition]:
        """
        Fetch the achievement definitions of ``record``.

        Args:
            record: Resolved application; None yields an empty list
                without contacting the API

        Returns:
            list[AchievementDefinition]: Definitions in schema order

        Raises:
            ExtractionError: On network failure, error responses or an
                unexpected payload
        """
        if record is None:
            return []

        self._logger.info("Getting achievements", app_id=record.app_id, app=str(record))

        url = f"{self._base_url}{GAME_SCHEMA_PATH}"
        raw_data = await self._get_json(
            url,
            params={
                "key": self._api_key,
                "appid": record.app_id,
                "l": self._language,
            },
        )
        achievements = self._parse_response(raw_data, url)

        self._logger.info(
            "Got achievements",
            app_id=record.app_id,
            count=len(achievements),
        )
        return achievements

"""
Steam Store API extractor.

Fetches ``appdetails`` for a single app: its store type and the
ordered list of DLC ids the store associates with it.
"""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from steam_app_cache.config import Settings
from steam_app_cache.ingestion.contracts import AppId, StoreAppDetails, StoreAppDetailsEnvelope
from steam_app_cache.ingestion.extractors.base import BaseExtractor, ValidationError
from steam_app_cache.ingestion.utils.rate_limiter import RateLimiter, RateLimiterConfig


class StoreDetailsExtractor(BaseExtractor):
    """
    Extractor for Steam Store API app details.

    Handles rate limiting, retries, and response validation.

    Example:
        >>> async with StoreDetailsExtractor() as extractor:
        ...     details = await extractor.fetch_details(app_id=1091500)
        ...     if details is not None:
        ...         print(details.type, details.dlc)
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        rate_limiter: RateLimiter | None = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize Steam Store extractor.

        Args:
            settings: Application settings
            rate_limiter: Custom rate limiter (creates default if None)
            **kwargs: Arguments passed to BaseExtractor
        """
        super().__init__(settings=settings, **kwargs)
        self._store_url = self._settings.steam.store_url.rstrip("/")
        self._rate_limiter = rate_limiter or RateLimiter(
            RateLimiterConfig(
                requests_per_minute=self._settings.steam.requests_per_minute,
            )
        )

    @property
    def source_name(self) -> str:
        """Return source identifier."""
        return "steam_store_api"

    def _parse_response(self, raw_data: Any, app_id: AppId, endpoint: str) -> StoreAppDetails | None:
        """
        Unwrap {app_id: {success, data}}.

        Returns None when the store reports success=false.
        """
        if not isinstance(raw_data, dict) or str(app_id) not in raw_data:
            raise ValidationError(
                f"Response has no entry for app_id={app_id}",
                source=self.source_name,
                endpoint=endpoint,
            )
        try:
            envelope = StoreAppDetailsEnvelope.model_validate(raw_data[str(app_id)])
        except PydanticValidationError as e:
            raise ValidationError(
                f"Response validation failed: {e}",
                source=self.source_name,
                endpoint=endpoint,
                original_error=e,
            ) from e

        if not envelope.success:
            return None
        if envelope.data is None:
            raise ValidationError(
                f"Response for app_id={app_id} has success=true but no data",
                source=self.source_name,
                endpoint=endpoint,
            )
        return envelope.data

    async def fetch_details(self, app_id: AppId) -> StoreAppDetails | None:
        """
        Fetch store details for ``app_id``.

        Returns:
            StoreAppDetails, or None if the store does not know the app

        Raises:
            ExtractionError: On network failure or an unexpected payload
        """
        url = f"{self._store_url}/appdetails"

        await self._rate_limiter.acquire()
        raw_data = await self._get_json(url, params={"appids": app_id})
        details = self._parse_response(raw_data, app_id, f"{url}?appids={app_id}")

        if details is None:
            self._logger.warning("API returned success=false", app_id=app_id)
        else:
            self._logger.debug(
                "Got store details",
                app_id=app_id,
                type=details.type,
                dlc_count=len(details.dlc),
            )
        return details

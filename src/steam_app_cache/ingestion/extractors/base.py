"""
Base extractor with retry logic and error handling.

Provides the HTTP plumbing shared by every remote source: client
management, exponential backoff on transient failures, mapping of
status codes onto the extraction error hierarchy, and structured
logging.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from steam_app_cache.config import RetryConfig, Settings, get_settings
from steam_app_cache.logger import get_logger


class ExtractionError(Exception):
    """Base exception for extraction errors."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        endpoint: str | None = None,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.endpoint = endpoint
        self.status_code = status_code
        self.original_error = original_error
        self.timestamp = datetime.now(timezone.utc)


class APIError(ExtractionError):
    """Raised when API returns an error response."""

    pass


class RateLimitError(APIError):
    """Raised when rate limit is exceeded."""

    pass


class ServerError(APIError):
    """Raised on 5xx responses."""

    pass


class ValidationError(ExtractionError):
    """Raised when response validation fails."""

    pass


class BaseExtractor(ABC):
    """
    Abstract base class for all remote sources.

    Subclasses provide ``source_name`` and use ``_make_request`` or
    ``_get_json`` to talk to their endpoint. A client passed in by the
    caller is shared and left open on ``close()``; otherwise the
    extractor creates and owns its own.
    """

    accept: str = "application/json"

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
        retry_config: RetryConfig | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Initialize the extractor.

        Args:
            settings: Application settings (loaded from environment if None)
            client: Shared HTTP client (a private one is created if None)
            retry_config: Custom retry configuration (uses settings if None)
            timeout: HTTP request timeout in seconds
        """
        self._settings = settings or get_settings()
        self._retry_config = retry_config or self._settings.retry
        self._timeout = timeout or self._settings.steam.timeout_seconds
        self._logger = get_logger(
            self.__class__.__name__,
            component="extractor",
            source=self.source_name,
        )
        self._client = client
        self._owns_client = client is None

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Return identifier for this data source."""
        ...

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
                headers={"User-Agent": self._settings.steam.user_agent},
            )
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this extractor created it."""
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "BaseExtractor":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def _create_retry_decorator(self) -> Any:
        """Create retry decorator with current configuration."""
        return retry(
            retry=retry_if_exception_type(
                (httpx.TransportError, RateLimitError, ServerError)
            ),
            stop=stop_after_attempt(self._retry_config.max_attempts),
            wait=wait_exponential(
                multiplier=self._retry_config.base_delay_seconds,
                max=self._retry_config.max_delay_seconds,
                exp_base=self._retry_config.exponential_base,
            ),
            before_sleep=self._log_retry_attempt,
            reraise=True,
        )

    def _log_retry_attempt(self, retry_state: Any) -> None:
        """Log retry attempts for observability."""
        self._logger.warning(
            "Retrying request",
            attempt=retry_state.attempt_number,
            wait_seconds=retry_state.next_action.sleep if retry_state.next_action else 0,
            exception=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def _make_request(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make HTTP request with retry logic.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Request URL
            **kwargs: Additional arguments passed to httpx

        Returns:
            httpx.Response: Successful response

        Raises:
            RateLimitError: If rate limit still exceeded after retries
            APIError: If API returns an error response
            ExtractionError: For transport failures
        """
        retry_decorator = self._create_retry_decorator()
        kwargs.setdefault("headers", {"Accept": self.accept})
        kwargs.setdefault("timeout", self._timeout)

        @retry_decorator
        async def _request() -> httpx.Response:
            self._logger.debug("Making request", method=method, url=url)

            response = await self.client.request(method, url, **kwargs)

            if response.status_code == 429:
                retry_after = response.headers.get("Retry-After", "60")
                raise RateLimitError(
                    f"Rate limit exceeded. Retry after {retry_after}s",
                    source=self.source_name,
                    endpoint=url,
                    status_code=429,
                )

            if response.status_code >= 500:
                raise ServerError(
                    f"API error: {response.status_code}",
                    source=self.source_name,
                    endpoint=url,
                    status_code=response.status_code,
                )

            if response.status_code >= 400:
                raise APIError(
                    f"API error: {response.status_code}",
                    source=self.source_name,
                    endpoint=url,
                    status_code=response.status_code,
                )

            return response

        try:
            return await _request()  # type: ignore[no-any-return]
        except httpx.HTTPError as e:
            self._logger.error(
                "Request failed after retries",
                url=url,
                attempts=self._retry_config.max_attempts,
                error=str(e),
            )
            raise ExtractionError(
                f"Request to {url} failed: {e}",
                source=self.source_name,
                endpoint=url,
                original_error=e,
            ) from e

    async def _get_json(self, url: str, **kwargs: Any) -> Any:
        """
        GET ``url`` and decode the body as JSON.

        Raises:
            ValidationError: If the body is not valid JSON
        """
        response = await self._make_request("GET", url, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            raise ValidationError(
                f"Malformed JSON from {url}: {e}",
                source=self.source_name,
                endpoint=url,
                status_code=response.status_code,
                original_error=e,
            ) from e

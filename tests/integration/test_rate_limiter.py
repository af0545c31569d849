"""Tests for the storefront rate limiter."""

import asyncio
import time

import httpx
import pytest
import respx
from conftest import APP_DETAILS_URL, load_fixture

from steam_app_cache.config import Settings
from steam_app_cache.ingestion.extractors import StoreDetailsExtractor
from steam_app_cache.ingestion.utils import RateLimiter, RateLimiterConfig


class TestRateLimiter:
    """Tests for RateLimiter."""

    @pytest.mark.asyncio
    async def test_burst_is_immediate(self) -> None:
        """Test the bucket starts full."""
        limiter = RateLimiter(RateLimiterConfig(requests_per_minute=60, burst_size=4))

        start = time.perf_counter()
        await asyncio.gather(*(limiter.acquire() for _ in range(4)))

        assert time.perf_counter() - start < 0.5
        assert limiter.available_tokens < 1

    @pytest.mark.asyncio
    async def test_throttles_after_burst(self) -> None:
        """Test an empty bucket waits for a refill."""
        limiter = RateLimiter(RateLimiterConfig(requests_per_minute=120, burst_size=1))
        await limiter.acquire()

        start = time.perf_counter()
        async with limiter:
            pass

        assert time.perf_counter() - start >= 0.3

    @pytest.mark.asyncio
    async def test_refill_is_capped_at_burst(self) -> None:
        """Test idle time never accumulates more than the burst size."""
        limiter = RateLimiter(RateLimiterConfig(requests_per_minute=600, burst_size=2))

        await asyncio.sleep(0.5)

        assert limiter.available_tokens == pytest.approx(2.0)

    def test_default_config(self) -> None:
        """Test the default bucket."""
        limiter = RateLimiter()

        assert limiter.config.requests_per_minute == 40
        assert limiter.config.burst_size == 10


class TestStoreDetailsThrottling:
    """Tests for the limiter wired into StoreDetailsExtractor."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_each_lookup_takes_a_token(self, settings: Settings) -> None:
        """Test detail lookups consume from the shared bucket."""
        respx.get(APP_DETAILS_URL).mock(
            return_value=httpx.Response(200, json=load_fixture("store_details_response.json"))
        )
        limiter = RateLimiter(RateLimiterConfig(requests_per_minute=1, burst_size=3))

        async with StoreDetailsExtractor(settings=settings, rate_limiter=limiter) as extractor:
            await extractor.fetch_details(620)
            await extractor.fetch_details(620)

        assert limiter.available_tokens == pytest.approx(1.0, abs=0.05)

"""
Utility modules for ingestion.
"""

from steam_app_cache.ingestion.utils.rate_limiter import (
    RateLimiter,
    RateLimiterConfig,
)

__all__ = [
    "RateLimiter",
    "RateLimiterConfig",
]

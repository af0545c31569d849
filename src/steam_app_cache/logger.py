"""
Structured logging for the cache, its sync runs and the CLI.

Every component logs through structlog with a bound ``component`` key
and event fields such as ``app_id``, ``category`` and insert counts.
Output goes to stderr so the CLI's JSON envelope on stdout stays
parseable. httpx request logging is held at WARNING below DEBUG
because Web API URLs carry the Steam API key in their query string.
"""

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from structlog.types import Processor

from steam_app_cache.config import LoggingConfig, get_settings

QUIET_LIBRARIES = ("httpx", "httpcore")


def _renderer(config: LoggingConfig) -> "Processor":
    if config.format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stderr.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def setup_logging(config: LoggingConfig | None = None) -> None:
    """
    Configure structlog and the standard library root logger.

    Args:
        config: Logging section to apply (loaded from settings if None)
    """
    config = config or get_settings().logging
    level = getattr(logging, config.level)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if config.include_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))
    processors.append(_renderer(config))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    library_level = level if level <= logging.DEBUG else max(level, logging.WARNING)
    for name in QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(library_level)


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """
    Get a logger, optionally with context already bound.

    Example:
        >>> logger = get_logger(__name__, component="record_store")
        >>> logger.info("Stored records", category="dlc", inserted=120)
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger

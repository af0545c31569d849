"""
Command-line interface for the Steam application cache.

Provides commands to build the cache and query it manually.
"""

import asyncio
import json
import sys
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from steam_app_cache.config import get_settings
from steam_app_cache.logger import get_logger, setup_logging
from steam_app_cache.models import ApplicationRecord
from steam_app_cache.service import SteamAppService

logger = get_logger(__name__, component="cli")


class CLIOutput(BaseModel):
    """Structured output for CLI commands."""

    success: bool
    command: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    data: dict[str, Any] | list[Any] | None = None
    error: str | None = None


def print_json(output: CLIOutput) -> None:
    """Print output as formatted JSON."""
    print(json.dumps(output.model_dump(mode="json"), indent=2, default=str))


def record_to_dict(record: ApplicationRecord) -> dict[str, Any]:
    """Serialize a record for output."""
    return {
        "app_id": record.app_id,
        "name": record.name,
        "category": record.category.value,
    }


async def _resolve(service: SteamAppService, name_or_id: str) -> ApplicationRecord | None:
    """Look up a base game by id if numeric, by name otherwise."""
    if name_or_id.isdigit():
        return await service.get_app_by_id(int(name_or_id))
    return await service.get_app_by_name(name_or_id)


async def cmd_init(force: bool = False) -> CLIOutput:
    """Create the cache and refresh it if stale."""
    async with SteamAppService() as service:
        report = await service.initialize(force=force)

    return CLIOutput(
        success=report.success,
        command="init",
        data=report.model_dump(mode="json"),
        error="; ".join(f"{r.category.value}: {r.error_message}" for r in report.failures)
        or None,
    )


async def cmd_search(query: str) -> CLIOutput:
    """Fuzzy search base games by name."""
    async with SteamAppService() as service:
        await service.initialize()
        records = await service.search_by_name(query)

    return CLIOutput(
        success=True,
        command="search",
        data=[record_to_dict(r) for r in records],
    )


async def cmd_get(name_or_id: str) -> CLIOutput:
    """Get a single base game by exact name or id."""
    async with SteamAppService() as service:
        await service.initialize()
        record = await _resolve(service, name_or_id)

    return CLIOutput(
        success=record is not None,
        command="get",
        data=record_to_dict(record) if record else None,
        error=None if record else f"No app found for '{name_or_id}'",
    )


async def cmd_achievements(name_or_id: str) -> CLIOutput:
    """List achievement definitions of a game."""
    async with SteamAppService() as service:
        await service.initialize()
        record = await _resolve(service, name_or_id)
        achievements = await service.get_achievements(record)

    return CLIOutput(
        success=record is not None,
        command="achievements",
        data=[a.model_dump(by_alias=True) for a in achievements],
        error=None if record else f"No app found for '{name_or_id}'",
    )


async def cmd_dlc(name_or_id: str, use_steamdb: bool = False) -> CLIOutput:
    """List DLC of a game."""
    async with SteamAppService() as service:
        await service.initialize()
        record = await _resolve(service, name_or_id)
        dlc = await service.get_dlc(record, use_secondary_source=use_steamdb)

    return CLIOutput(
        success=record is not None,
        command="dlc",
        data=[entry.model_dump() for entry in dlc],
        error=None if record else f"No app found for '{name_or_id}'",
    )


async def cmd_test_config() -> CLIOutput:
    """Test configuration loading."""
    settings = get_settings()

    return CLIOutput(
        success=True,
        command="test-config",
        data={
            "steam_base_url": settings.steam.base_url,
            "steam_store_url": settings.steam.store_url,
            "steamdb_base_url": settings.steamdb.base_url,
            "database_path": str(settings.cache.database_path),
            "max_age_hours": settings.cache.max_age_hours,
            "api_key_configured": bool(settings.steam.api_key.get_secret_value()),
        },
    )


def print_usage() -> None:
    """Print CLI usage information."""
    usage = """
Steam App Cache CLI
===================

Usage: steam-app-cache <command> [arguments]

Commands:
  test-config                 Test configuration loading
  init [--force]              Create the cache, refreshing it if stale
  search <query>              Find games whose name contains every word
  get <name|app_id>           Get a game by exact name or app id
  achievements <name|app_id>  List achievement definitions
  dlc <name|app_id>           List DLC

Options:
  --steamdb                   (dlc) Fill gaps from SteamDB

Examples:
  steam-app-cache search half life
  steam-app-cache dlc 1091500 --steamdb
"""
    print(usage)


def _build_command(argv: list[str]) -> Callable[[], Awaitable[CLIOutput]] | None:
    """Map argv onto a command coroutine factory, None if invalid."""
    command = argv[0]
    flags = {a for a in argv[1:] if a.startswith("--")}
    args = [a for a in argv[1:] if not a.startswith("--")]

    if command == "test-config":
        return cmd_test_config
    if command == "init":
        return lambda: cmd_init(force="--force" in flags)
    if not args:
        print(f"Error: {command} requires an argument")
        return None
    if command == "search":
        return lambda: cmd_search(" ".join(args))
    if command == "get":
        return lambda: cmd_get(" ".join(args))
    if command == "achievements":
        return lambda: cmd_achievements(" ".join(args))
    if command == "dlc":
        return lambda: cmd_dlc(" ".join(args), use_steamdb="--steamdb" in flags)

    print(f"Unknown command: {command}")
    return None


def main() -> None:
    """Main CLI entry point."""
    if len(sys.argv) < 2 or sys.argv[1] in ("help", "--help", "-h"):
        print_usage()
        sys.exit(0 if len(sys.argv) >= 2 else 1)

    command = sys.argv[1]

    try:
        setup_logging()
        factory = _build_command(sys.argv[1:])
        if factory is None:
            print_usage()
            sys.exit(1)

        output = asyncio.run(factory())
        print_json(output)
        if not output.success:
            sys.exit(1)

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.exception("CLI error", error=str(e))
        print_json(CLIOutput(success=False, command=command, error=str(e)))
        sys.exit(1)


if __name__ == "__main__":
    main()

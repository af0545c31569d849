"""
Domain models for the application cache.

ApplicationRecord is the persisted identity of a game or DLC;
DlcEntry is the request-scoped result of DLC reconciliation.
"""

import re
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field

_NON_ALPHANUMERIC = re.compile(r"[^0-9A-Za-z]+")

PLACEHOLDER_DLC_PREFIX = "Unknown DLC"


class AppCategory(str, Enum):
    """Catalog category of an application record."""

    BASE = "game"
    DLC = "dlc"


def comparable_name_of(name: str) -> str:
    """
    Normalize a display name into its lookup key.

    Strips everything except ASCII letters and digits and lower-cases
    the rest, so "Half-Life 2" becomes "halflife2".
    """
    return _NON_ALPHANUMERIC.sub("", name).lower()


@dataclass(frozen=True)
class ApplicationRecord:
    """A cached game or DLC identity."""

    app_id: int
    name: str
    comparable_name: str
    category: AppCategory

    @classmethod
    def create(cls, app_id: int, name: str, category: AppCategory) -> "ApplicationRecord":
        """Build a record with its comparable name derived from ``name``."""
        return cls(
            app_id=app_id,
            name=name,
            comparable_name=comparable_name_of(name),
            category=category,
        )

    def __str__(self) -> str:
        return f"{self.app_id}={self.name}"


def placeholder_dlc_name(app_id: int) -> str:
    """Name used for a DLC id that no source could resolve."""
    return f"{PLACEHOLDER_DLC_PREFIX} {app_id}"


class DlcEntry(BaseModel):
    """
    A DLC belonging to a base game, as returned by reconciliation.

    ``is_placeholder`` matches only the exact name ``Unknown DLC {app_id}``
    generated for this entry's own id. A real title that merely contains
    "Unknown DLC", or a placeholder carrying another id, counts as named
    and is never overwritten by a scraped name.
    """

    app_id: int = Field(..., description="Steam app ID of the DLC")
    name: str = Field(..., description="Display name or placeholder")

    @classmethod
    def placeholder(cls, app_id: int) -> "DlcEntry":
        """Entry for a DLC id whose name is unknown."""
        return cls(app_id=app_id, name=placeholder_dlc_name(app_id))

    @classmethod
    def from_record(cls, record: ApplicationRecord) -> "DlcEntry":
        """Entry carrying a cached record's id and display name."""
        return cls(app_id=record.app_id, name=record.name)

    @property
    def is_placeholder(self) -> bool:
        """Whether the name is the unresolved placeholder for this id."""
        return self.name == placeholder_dlc_name(self.app_id)

"""
Data contracts for the Steam app catalog endpoints.

Two response shapes are accepted:

- IStoreService/GetAppList/v1 wraps a page of apps together with
  ``have_more_results`` and ``last_appid`` under ``response``.
- ISteamApps/GetAppList/v2 returns the whole catalog under
  ``applist.apps`` with no paging metadata.

Both are normalized into a CatalogPage right after decoding so the
pagination loop never sees the difference.
"""

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError


class CatalogApp(BaseModel):
    """A single app as listed by the catalog."""

    model_config = ConfigDict(extra="ignore")

    appid: int = Field(..., gt=0, description="Steam application ID")
    name: str = Field(..., description="Display name")


class StoreServiceAppList(BaseModel):
    """Paging body of IStoreService/GetAppList/v1."""

    apps: list[CatalogApp] = Field(default_factory=list)
    have_more_results: bool = Field(default=False)
    last_appid: int = Field(default=0, ge=0)


class StoreServiceResponse(BaseModel):
    """Envelope of IStoreService/GetAppList/v1."""

    response: StoreServiceAppList


class LegacyAppList(BaseModel):
    """Body of ISteamApps/GetAppList/v2."""

    apps: list[CatalogApp] = Field(default_factory=list)


class LegacyAppListResponse(BaseModel):
    """Envelope of ISteamApps/GetAppList/v2."""

    applist: LegacyAppList


@dataclass
class CatalogPage:
    """One decoded page of the catalog, independent of the wire shape."""

    apps: list[CatalogApp] = field(default_factory=list)
    have_more_results: bool = False
    last_appid: int = 0


class CatalogDecodeError(ValueError):
    """Raised when a payload matches none of the known catalog shapes."""


def decode_catalog_page(raw_data: Any) -> CatalogPage:
    """
    Decode a catalog payload, trying the paged shape before the legacy one.

    Raises:
        CatalogDecodeError: If neither shape validates
    """
    try:
        current = StoreServiceResponse.model_validate(raw_data)
    except PydanticValidationError as current_error:
        try:
            legacy = LegacyAppListResponse.model_validate(raw_data)
        except PydanticValidationError:
            raise CatalogDecodeError(
                f"Unrecognized catalog response: {current_error}"
            ) from current_error
        return CatalogPage(apps=legacy.applist.apps)

    body = current.response
    return CatalogPage(
        apps=body.apps,
        have_more_results=body.have_more_results,
        last_appid=body.last_appid,
    )

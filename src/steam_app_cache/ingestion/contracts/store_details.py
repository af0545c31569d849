"""
Data contracts for Steam Store API ``appdetails`` responses.

Only the fields needed to reconcile DLC are modelled.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

STORE_TYPE_GAME = "game"


class StoreAppDetails(BaseModel):
    """Subset of the /appdetails ``data`` object."""

    model_config = ConfigDict(extra="ignore")

    steam_appid: int = Field(..., description="Steam application ID")
    name: str = Field(default="", description="Store name")
    type: str = Field(..., description="Type: game, dlc, demo, etc.")
    dlc: list[int] = Field(default_factory=list, description="DLC app IDs, store order")

    @property
    def is_game(self) -> bool:
        """Whether the app is a base game."""
        return self.type == STORE_TYPE_GAME


class StoreAppDetailsEnvelope(BaseModel):
    """
    Per-app wrapper of the Store API response.

    The API returns {app_id: {success: bool, data: {...}}}
    """

    success: bool
    data: StoreAppDetails | None = None


AppId = Annotated[int, Field(gt=0, description="Steam App ID")]

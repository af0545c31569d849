"""
Data contracts for ISteamUserStats/GetSchemaForGame/v2.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AchievementDefinition(BaseModel):
    """
    One achievement from a game's stats schema.

    Field names follow Python conventions; the Web API JSON keys are
    kept as aliases so ``model_dump(by_alias=True)`` reproduces them.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(..., description="Internal API name")
    display_name: str = Field(default="", alias="displayName")
    description: str = Field(default="")
    hidden: bool = Field(default=False)
    default_value: int = Field(default=0, alias="defaultvalue")
    icon: str = Field(default="", description="Icon URL when unlocked")
    icon_gray: str = Field(default="", alias="icongray", description="Icon URL when locked")

    @field_validator("hidden", mode="before")
    @classmethod
    def coerce_hidden(cls, v: Any) -> bool:
        """The API reports hidden as 0 or 1."""
        if isinstance(v, str):
            return v.strip() not in ("", "0")
        return bool(v)


class AvailableGameStats(BaseModel):
    """Stats section of the schema."""

    achievements: list[AchievementDefinition]


class GameSchema(BaseModel):
    """Game section of the schema."""

    model_config = ConfigDict(populate_by_name=True)

    game_name: str = Field(default="", alias="gameName")
    available_game_stats: AvailableGameStats = Field(..., alias="availableGameStats")


class GameSchemaResponse(BaseModel):
    """
    Envelope of GetSchemaForGame.

    Path: game.availableGameStats.achievements
    """

    game: GameSchema

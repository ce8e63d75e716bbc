"""Pydantic request models for the HTTP API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MenuRecordPayload(BaseModel):
    """Menu record body; nutrition keys beyond ITEM and CATEGORY pass through."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    item: str | None = Field(default=None, alias="ITEM")
    category: str | None = Field(default=None, alias="CATEGORY")

    def to_record(self) -> dict[str, object]:
        return self.model_dump(by_alias=True, exclude_none=True)


class PlannerPayload(BaseModel):
    """Active planner auto-save body."""

    items: list[dict[str, Any]] | None = None
    meal_name: str | None = Field(default=None, alias="mealName")
    total_nutrition: dict[str, Any] | None = Field(
        default=None, alias="totalNutrition"
    )
    session_id: str | None = Field(default=None, alias="sessionId")


class SavedMealPayload(BaseModel):
    """Explicit save body."""

    items: list[dict[str, Any]] | None = None
    meal_name: str | None = Field(default=None, alias="mealName")
    total_nutrition: dict[str, Any] | None = Field(
        default=None, alias="totalNutrition"
    )

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, conint, constr, field_validator


class RecipeRecord(BaseModel):
    id: int
    title: constr(min_length=1)
    readyInMinutes: conint(ge=0)
    servings: conint(ge=1)
    summary: str
    instructions: str
    image: str
    dishTypes: List[str] = []


class DietaryPreferences(BaseModel):
    vegetarian: bool = True
    vegan: bool = True
    glutenFree: bool = True
    dairyFree: bool = True


class RecipeQuery(BaseModel):
    """Body of the recipe endpoints."""

    ingredients: Optional[List[str]] = []
    dietary: Optional[DietaryPreferences] = None

    @field_validator("ingredients", mode="after")
    @classmethod
    def _null_means_empty(cls, value):
        return value if value is not None else []

import math

from pydantic import Field, field_validator

from longevity_chef.schemas.common import CamelModel
from longevity_chef.schemas.profile import UserProfile


class Ingredient(CamelModel):
    name: str
    amount: str = ""
    quantity: float = 0
    unit: str = ""
    category: str | None = None


class Macros(CamelModel):
    protein: float = 0
    carbs: float = 0
    fats: float = 0
    fiber: float | None = None


class Recipe(CamelModel):
    # Blank id / servings mean "not provided"; the generation client backfills them.
    id: str = ""
    title: str
    description: str = ""
    ingredients: list[Ingredient] = []
    instructions: list[str] = []
    prep_time_minutes: int = 0
    cook_time_minutes: int = 0
    servings: int | None = None
    calories: float = 0
    macros: Macros = Field(default_factory=Macros)
    health_tags: list[str] = []
    reasoning: str = ""

    @field_validator("prep_time_minutes", "cook_time_minutes", "servings", mode="before")
    @classmethod
    def _round_counts(cls, v):
        if isinstance(v, float):
            if not math.isfinite(v):
                raise ValueError("must be a finite number")
            return round(v)
        return v

    @property
    def total_time_minutes(self) -> int:
        return self.prep_time_minutes + self.cook_time_minutes


# ── API request schemas ──────────────────────────────────────────

class GenerateRecipesRequest(CamelModel):
    profile: UserProfile = Field(default_factory=UserProfile)
    count: int = Field(1, ge=1, le=14)
    servings: int = Field(2, ge=1)
    ingredients_to_use_up: str | None = None
    max_cooking_minutes: int | None = Field(None, ge=1)


class CustomizeRecipeRequest(CamelModel):
    recipe: Recipe
    instruction: str = Field(min_length=1)
    profile: UserProfile = Field(default_factory=UserProfile)


class CustomizeRecipeResponse(CamelModel):
    recipe: Recipe | None = None


class ScaleRecipeRequest(CamelModel):
    recipe: Recipe
    servings: int = Field(ge=1)

from pydantic import Field

from longevity_chef.schemas.common import CamelModel
from longevity_chef.schemas.meal_plan import DAYS_OF_WEEK, WeeklyPlan
from longevity_chef.schemas.profile import UserProfile
from longevity_chef.schemas.recipe import Recipe
from longevity_chef.schemas.shopping import ShoppingItem


class KitchenStateResponse(CamelModel):
    profile: UserProfile
    favorites: list[Recipe]
    plan: WeeklyPlan
    shopping_list: list[ShoppingItem]
    pantry_items: str


class PantryUpdate(CamelModel):
    pantry_items: str = ""


class MoveRecipeRequest(CamelModel):
    from_day: str
    to_day: str
    recipe: Recipe


class SessionCustomizeRequest(CamelModel):
    recipe: Recipe
    instruction: str = Field(min_length=1)


class RecipeResult(CamelModel):
    recipe: Recipe | None = None


class FavoriteToggleResponse(CamelModel):
    favorite: bool


class AutoPlanRequest(CamelModel):
    favorite_count: int = Field(0, ge=0)
    ingredients_to_use_up: str = ""
    servings: int = Field(2, ge=1)
    selected_days: list[str] = Field(default_factory=lambda: list(DAYS_OF_WEEK))
    max_time: int | None = Field(45, ge=1)


class AddShoppingItemRequest(CamelModel):
    name: str
    amount: str


class ShoppingItemResult(CamelModel):
    item: ShoppingItem | None = None

from pydantic import Field

from longevity_chef.schemas.common import CamelModel
from longevity_chef.schemas.recipe import Recipe

SHOPPING_CATEGORIES = [
    "Produce",
    "Meat & Seafood",
    "Pantry",
    "Spices",
    "Dairy & Eggs",
    "Frozen",
    "Bakery",
    "Other",
]

DEFAULT_CATEGORY = "Other"


class ShoppingItem(CamelModel):
    name: str
    amount: str = ""
    category: str = DEFAULT_CATEGORY
    checked: bool = False
    already_have: bool = False
    note: str | None = None


# ── API request schemas ──────────────────────────────────────────

class GenerateShoppingListRequest(CamelModel):
    recipes: list[Recipe] = []
    pantry_items: str | None = None


class CategorizeRequest(CamelModel):
    item_name: str = Field(min_length=1)


class CategorizeResponse(CamelModel):
    category: str

from longevity_chef.schemas.profile import HealthGoal, UserProfile
from longevity_chef.schemas.recipe import Ingredient, Macros, Recipe
from longevity_chef.schemas.shopping import ShoppingItem, SHOPPING_CATEGORIES, DEFAULT_CATEGORY
from longevity_chef.schemas.meal_plan import DAYS_OF_WEEK, WeeklyPlan, empty_plan

__all__ = [
    "HealthGoal", "UserProfile",
    "Ingredient", "Macros", "Recipe",
    "ShoppingItem", "SHOPPING_CATEGORIES", "DEFAULT_CATEGORY",
    "DAYS_OF_WEEK", "WeeklyPlan", "empty_plan",
]

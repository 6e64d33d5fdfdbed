"""
Pytest configuration and fixtures for the Longevity Chef tests.

No test talks to the real model: KitchenAI tests swap the Anthropic client for a
MagicMock, and everything above KitchenAI uses StubKitchenAI.
"""

import asyncio
import os

import pytest

# Never pick up a developer's real key or state file
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["STATE_FILE"] = "./test_kitchen_state.json"

from longevity_chef.schemas.profile import HealthGoal, UserProfile  # noqa: E402
from longevity_chef.schemas.recipe import Ingredient, Macros, Recipe  # noqa: E402
from longevity_chef.schemas.shopping import ShoppingItem  # noqa: E402


class StubKitchenAI:
    """
    Stands in for KitchenAI above the model boundary.

    Records every call. generate_recipes makes `count` distinct recipes unless
    `generate_results` holds canned batches; use-up batches can be delayed to
    check that result order does not depend on completion order.
    """

    def __init__(self):
        self.calls = []
        self.generate_results = None
        self.use_up_delay = 0.0
        self.customized = None
        self.shopping = []
        self.category = "Produce"
        self._counter = 0

    async def generate_recipes(self, profile, count, servings, use_up=None, max_minutes=None):
        self.calls.append(("generate", count, servings, use_up, max_minutes))
        if use_up:
            await asyncio.sleep(self.use_up_delay)
        if self.generate_results is not None:
            return self.generate_results.pop(0) if self.generate_results else []
        label = "Use-up Recipe" if use_up else "New Recipe"
        recipes = []
        for _ in range(count):
            self._counter += 1
            recipes.append(Recipe(id=f"new-{self._counter}", title=f"{label} {self._counter}", servings=servings))
        return recipes

    async def customize_recipe(self, recipe, instruction, profile):
        self.calls.append(("customize", recipe.id, instruction))
        return self.customized

    async def generate_shopping_list(self, recipes, pantry=None):
        self.calls.append(("shopping", [r.id for r in recipes], pantry))
        return self.shopping

    async def categorize_item(self, item_name):
        self.calls.append(("categorize", item_name))
        return self.category


def run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio needed)."""
    return asyncio.run(coro)


@pytest.fixture
def stub_ai():
    return StubKitchenAI()


@pytest.fixture
def profile():
    return UserProfile(
        name="Ana",
        health_goals=[HealthGoal.LONGEVITY, HealthGoal.HEART_HEALTH],
        nutritional_focus=["High Fiber", "Limit Saturated Fats"],
        dietary_restrictions=["No Red Meat"],
        max_cooking_minutes=45,
        cooking_appliances=["Air Fryer"],
    )


@pytest.fixture
def salmon_recipe():
    return Recipe(
        id="salmon-1",
        title="Sheet Pan Salmon",
        description="Salmon with roasted broccoli",
        ingredients=[
            Ingredient(name="salmon fillet", amount="12 oz", quantity=12, unit="oz", category="Meat & Seafood"),
            Ingredient(name="broccoli", amount="2 cup", quantity=2, unit="cup", category="Produce"),
            Ingredient(name="olive oil", amount="1.5 tbsp", quantity=1.5, unit="tbsp"),
            Ingredient(name="salt", amount="to taste", quantity=0, unit=""),
        ],
        instructions=["Heat oven to 425F.", "Roast everything for 15 minutes."],
        prep_time_minutes=10,
        cook_time_minutes=15,
        servings=2,
        calories=480,
        macros=Macros(protein=36, carbs=12, fats=30, fiber=5),
        health_tags=["Omega-3 Rich"],
        reasoning="Fatty fish supports heart health.",
    )


@pytest.fixture
def lentil_recipe():
    return Recipe(
        id="lentil-1",
        title="Lentil Stew",
        ingredients=[
            Ingredient(name="lentils", amount="1 cup", quantity=1, unit="cup"),
            Ingredient(name="onion", amount="1", quantity=1, unit=""),
        ],
        servings=4,
        calories=350,
        macros=Macros(protein=18, carbs=50, fats=6),
    )


@pytest.fixture
def shopping_items():
    return [
        ShoppingItem(name="broccoli", amount="2 cups", category="Produce"),
        ShoppingItem(name="salmon", amount="12 oz", category="Meat & Seafood"),
    ]

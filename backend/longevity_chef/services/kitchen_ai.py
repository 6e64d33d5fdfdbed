"""
KitchenAI: Claude API integration service.

All AI features are routed through this class. Every public method is total: transport
errors and unparseable replies are logged and turned into a degraded result (empty
batch, no change, unmerged list, "Other"), never raised to the caller.
"""

import logging
import random
import re
import uuid
from functools import lru_cache

from pydantic import ValidationError

from longevity_chef.config import get_settings
from longevity_chef.schemas.profile import UserProfile
from longevity_chef.schemas.recipe import Recipe
from longevity_chef.schemas.shopping import DEFAULT_CATEGORY, SHOPPING_CATEGORIES, ShoppingItem
from longevity_chef.services.json_recovery import Shape, recover_json
from longevity_chef.services.prompts import (
    PromptSpec,
    build_categorization_prompt,
    build_customization_prompt,
    build_recipe_generation_prompt,
    build_shopping_list_prompt,
)

logger = logging.getLogger(__name__)

_CATEGORY_LOOKUP = {c.lower(): c for c in SHOPPING_CATEGORIES}

# Per-item failures that drop one generated item, not the whole reply
_ITEM_ERRORS = (ValidationError, ValueError, ArithmeticError)


def _describe(error: Exception) -> str:
    """First field error with its location, e.g. "ingredients.0.name: Field required"."""
    if isinstance(error, ValidationError) and error.error_count():
        first = error.errors()[0]
        loc = ".".join(str(part) for part in first["loc"]) or "<root>"
        return f"{loc}: {first['msg']} ({error.error_count()} errors)"
    return f"{type(error).__name__}: {error}"


def normalize_category(raw: str | None) -> str:
    """Map free model text onto one of the fixed shopping categories."""
    if not raw:
        return DEFAULT_CATEGORY
    cleaned = re.sub(r"^[\s\"'`*]+|[\s\"'`*.]+$", "", raw).lower()
    return _CATEGORY_LOOKUP.get(cleaned, DEFAULT_CATEGORY)


def fallback_shopping_list(recipes: list[Recipe]) -> list[ShoppingItem]:
    """One unmerged item per ingredient, used when aggregation fails."""
    return [
        ShoppingItem(name=i.name, amount=i.amount, category=DEFAULT_CATEGORY)
        for r in recipes
        for i in r.ingredients
    ]


class KitchenAI:
    """All AI features powered by the Anthropic Claude API."""

    def __init__(self, rng: random.Random | None = None):
        settings = get_settings()
        self.model = settings.CLAUDE_MODEL
        self.api_key = settings.ANTHROPIC_API_KEY
        self.rng = rng or random.Random()
        self._client = None

    @property
    def client(self):
        if self._client is None and self.api_key:
            import anthropic
            # Failed calls degrade immediately; the SDK must not retry behind our back.
            self._client = anthropic.AsyncAnthropic(api_key=self.api_key, max_retries=0)
        return self._client

    async def _invoke(self, prompt: PromptSpec) -> str:
        """Make a call to the Claude API. Returns the text response."""
        if not self.client:
            raise RuntimeError("Anthropic API key not configured")
        kwargs = {
            "model": self.model,
            "max_tokens": prompt.max_tokens,
            "messages": [{"role": "user", "content": prompt.user}],
        }
        system = prompt.system_with_schema()
        if system:
            kwargs["system"] = system
        response = await self.client.messages.create(**kwargs)
        if getattr(response, "stop_reason", None) == "max_tokens":
            logger.warning(f"Model reply hit the {prompt.max_tokens} token cap and is truncated")
        return response.content[0].text if response.content else ""

    def _new_id(self, taken: set[str]) -> str:
        while True:
            new_id = str(uuid.UUID(int=self.rng.getrandbits(128), version=4))
            if new_id not in taken:
                return new_id

    # ── Recipe generation ────────────────────────────────────────────

    async def generate_recipes(
        self,
        profile: UserProfile,
        count: int,
        servings: int,
        use_up: str | None = None,
        max_minutes: int | None = None,
    ) -> list[Recipe]:
        """Generate `count` personalized dinner recipes. Returns [] on failure."""
        prompt = build_recipe_generation_prompt(profile, count, servings, use_up, max_minutes)
        try:
            text = await self._invoke(prompt)
            raw_items = recover_json(text, Shape.ARRAY)
        except Exception as e:
            logger.error(f"Error generating recipes: {e}")
            return []

        recipes: list[Recipe] = []
        taken: set[str] = set()
        for index, item in enumerate(raw_items):
            if not isinstance(item, dict):
                logger.warning(f"Skipping generated recipe #{index}: not an object")
                continue
            try:
                recipe = Recipe.model_validate(item)
            except _ITEM_ERRORS as e:
                logger.warning(f"Skipping generated recipe #{index}: {_describe(e)}")
                continue

            updates = {}
            if not recipe.id or recipe.id in taken:
                updates["id"] = self._new_id(taken)
            if not recipe.servings:
                updates["servings"] = servings
            if updates:
                recipe = recipe.model_copy(update=updates)

            taken.add(recipe.id)
            recipes.append(recipe)

        if len(recipes) < count:
            logger.info(f"Requested {count} recipes, received {len(recipes)}")
        return recipes

    # ── Recipe customization ─────────────────────────────────────────

    async def customize_recipe(
        self, recipe: Recipe, instruction: str, profile: UserProfile
    ) -> Recipe | None:
        """Modify a recipe per a free-text instruction. Returns None on failure."""
        prompt = build_customization_prompt(recipe, instruction, profile)
        try:
            text = await self._invoke(prompt)
            updated = Recipe.model_validate(recover_json(text, Shape.OBJECT))
        except Exception as e:
            logger.error(f"Error customizing recipe {recipe.id}: {e}")
            return None

        if not updated.id:
            updated = updated.model_copy(update={"id": recipe.id})
        return updated

    # ── Shopping list ────────────────────────────────────────────────

    async def generate_shopping_list(
        self, recipes: list[Recipe], pantry: str | None = None
    ) -> list[ShoppingItem]:
        """Aggregate the ingredients of all recipes into a categorized shopping list."""
        if not recipes:
            return []

        prompt = build_shopping_list_prompt(recipes, pantry)
        try:
            text = await self._invoke(prompt)
            raw_items = recover_json(text, Shape.ARRAY)
        except Exception as e:
            logger.error(f"Error generating shopping list, falling back to plain list: {e}")
            return fallback_shopping_list(recipes)

        items: list[ShoppingItem] = []
        for item in raw_items:
            if not isinstance(item, dict):
                continue
            try:
                parsed = ShoppingItem.model_validate(item)
            except _ITEM_ERRORS as e:
                logger.warning(f"Skipping shopping item {item.get('name', '?')!r}: {_describe(e)}")
                continue
            items.append(parsed.model_copy(update={
                "category": normalize_category(parsed.category),
                "checked": False,
                "already_have": False,
            }))
        return items

    # ── Item categorization ──────────────────────────────────────────

    async def categorize_item(self, item_name: str) -> str:
        """Pick a shopping category for a single item. Returns "Other" on failure."""
        try:
            text = await self._invoke(build_categorization_prompt(item_name))
        except Exception as e:
            logger.error(f"Error categorizing item {item_name!r}: {e}")
            return DEFAULT_CATEGORY
        return normalize_category(text)


@lru_cache
def get_kitchen_ai() -> KitchenAI:
    return KitchenAI()

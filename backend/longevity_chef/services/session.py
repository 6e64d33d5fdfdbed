"""
KitchenSession: the single owner of one user's kitchen state.

Holds the profile, favorites, weekly plan, shopping list and pantry text, and
persists each piece to the key/value store right after it changes. Recipes enter the
plan and favorites as copies, so changing one occurrence never leaks into another;
the only propagation is customize_recipe, which replaces every occurrence of the
customized id on purpose.
"""

import logging

from pydantic import TypeAdapter, ValidationError

from longevity_chef.schemas.meal_plan import DAYS_OF_WEEK, WeeklyPlan, empty_plan
from longevity_chef.schemas.profile import UserProfile
from longevity_chef.schemas.recipe import Recipe
from longevity_chef.schemas.shopping import ShoppingItem
from longevity_chef.services.kitchen_ai import KitchenAI
from longevity_chef.services.week_planner import WeekPlanner, clamp_favorite_count, normalize_days
from longevity_chef.storage import (
    FAVORITES_KEY, PANTRY_KEY, PLAN_KEY, PROFILE_KEY, SHOPPING_KEY,
    KeyValueStore, get_store,
)

logger = logging.getLogger(__name__)

_recipes_adapter = TypeAdapter(list[Recipe])
_plan_adapter = TypeAdapter(WeeklyPlan)
_shopping_adapter = TypeAdapter(list[ShoppingItem])


def _load_blob(store: KeyValueStore, key: str, adapter: TypeAdapter, default):
    raw = store.get(key)
    if not raw:
        return default
    try:
        return adapter.validate_json(raw)
    except ValidationError as e:
        logger.warning(f"Discarding unreadable {key} from local storage: {e.error_count()} errors")
        return default


class KitchenSession:
    def __init__(
        self,
        store: KeyValueStore,
        profile: UserProfile | None = None,
        favorites: list[Recipe] | None = None,
        plan: WeeklyPlan | None = None,
        shopping_list: list[ShoppingItem] | None = None,
        pantry: str = "",
    ):
        self.store = store
        self.profile = profile or UserProfile()
        self.favorites = favorites or []
        self.plan = {**empty_plan(), **(plan or {})}
        self.shopping_list = shopping_list or []
        self.pantry = pantry

    @classmethod
    def load(cls, store: KeyValueStore | None = None) -> "KitchenSession":
        store = store or get_store()
        profile = _load_blob(store, PROFILE_KEY, TypeAdapter(UserProfile), None)
        return cls(
            store,
            profile=profile,
            favorites=_load_blob(store, FAVORITES_KEY, _recipes_adapter, []),
            plan=_load_blob(store, PLAN_KEY, _plan_adapter, {}),
            shopping_list=_load_blob(store, SHOPPING_KEY, _shopping_adapter, []),
            pantry=store.get(PANTRY_KEY) or "",
        )

    # ── Persistence ──────────────────────────────────────────────────

    def save_profile(self):
        self.store.set(PROFILE_KEY, self.profile.model_dump_json(by_alias=True))

    def save_favorites(self):
        self.store.set(FAVORITES_KEY, _recipes_adapter.dump_json(self.favorites, by_alias=True).decode())

    def save_plan(self):
        self.store.set(PLAN_KEY, _plan_adapter.dump_json(self.plan, by_alias=True).decode())

    def save_shopping_list(self):
        self.store.set(SHOPPING_KEY, _shopping_adapter.dump_json(self.shopping_list, by_alias=True).decode())

    def save_pantry(self):
        self.store.set(PANTRY_KEY, self.pantry)

    def save(self):
        self.save_profile()
        self.save_favorites()
        self.save_plan()
        self.save_shopping_list()
        self.save_pantry()

    # ── Profile & pantry ─────────────────────────────────────────────

    def update_profile(self, profile: UserProfile):
        self.profile = profile
        self.save_profile()

    def set_pantry(self, text: str):
        self.pantry = text
        self.save_pantry()

    # ── Weekly plan ──────────────────────────────────────────────────

    def _check_day(self, day: str):
        if day not in DAYS_OF_WEEK:
            raise ValueError(f"Unknown day: {day!r}")

    def add_to_plan(self, day: str, recipe: Recipe):
        self._check_day(day)
        self.plan[day] = [*self.plan[day], recipe.model_copy(deep=True)]
        self.save_plan()

    def remove_from_plan(self, day: str, recipe_id: str):
        self._check_day(day)
        self.plan[day] = [r for r in self.plan[day] if r.id != recipe_id]
        self.save_plan()

    def move_recipe(self, from_day: str, to_day: str, recipe: Recipe):
        if from_day == to_day:
            return
        self._check_day(from_day)
        self._check_day(to_day)
        self.plan[from_day] = [r for r in self.plan[from_day] if r.id != recipe.id]
        self.plan[to_day] = [*self.plan[to_day], recipe]
        self.save_plan()

    async def regenerate_recipe(self, ai: KitchenAI, day: str, recipe: Recipe) -> Recipe | None:
        """Swap one planned recipe for a freshly generated one at the same servings."""
        self._check_day(day)
        new_recipes = await ai.generate_recipes(self.profile, 1, recipe.servings or 1)
        if not new_recipes:
            return None
        replacement = new_recipes[0]
        self.plan[day] = [replacement if r.id == recipe.id else r for r in self.plan[day]]
        self.save_plan()
        return replacement

    def clear_plan(self):
        """Start a new week: empties the plan, the shopping list and the pantry text."""
        self.plan = empty_plan()
        self.shopping_list = []
        self.pantry = ""
        self.save_plan()
        self.save_shopping_list()
        self.save_pantry()

    def is_in_plan(self, recipe_id: str) -> bool:
        return any(r.id == recipe_id for recipes in self.plan.values() for r in recipes)

    async def auto_plan_week(
        self,
        planner: WeekPlanner,
        favorite_count: int,
        use_up: str,
        servings: int,
        selected_days: list[str],
        max_minutes: int | None = None,
    ) -> WeeklyPlan | None:
        """Replace the plan with an auto-generated one. No-op when no day is selected."""
        days = normalize_days(selected_days)
        if not days:
            return None
        self.set_pantry(use_up)
        favorite_count = clamp_favorite_count(favorite_count, len(self.favorites), len(days))
        plan = await planner.plan_week(
            self.profile, self.favorites, favorite_count, use_up, servings, days, max_minutes,
        )
        if plan is None:
            return None
        self.plan = plan
        self.save_plan()
        return plan

    # ── Favorites ────────────────────────────────────────────────────

    def is_favorite(self, recipe_id: str) -> bool:
        return any(f.id == recipe_id for f in self.favorites)

    def toggle_favorite(self, recipe: Recipe) -> bool:
        """Add or remove a favorite. Returns True when the recipe is now a favorite."""
        if self.is_favorite(recipe.id):
            self.favorites = [f for f in self.favorites if f.id != recipe.id]
            now_favorite = False
        else:
            self.favorites = [*self.favorites, recipe.model_copy(deep=True)]
            now_favorite = True
        self.save_favorites()
        return now_favorite

    async def customize_recipe(self, ai: KitchenAI, recipe: Recipe, instruction: str) -> Recipe | None:
        """Customize a recipe and replace it everywhere it appears (favorites and plan)."""
        updated = await ai.customize_recipe(recipe, instruction, self.profile)
        if updated is None:
            return None

        def replace(recipes: list[Recipe]) -> list[Recipe]:
            return [updated.model_copy(deep=True) if r.id == recipe.id else r for r in recipes]

        self.favorites = replace(self.favorites)
        self.plan = {day: replace(recipes) for day, recipes in self.plan.items()}
        self.save_favorites()
        self.save_plan()
        return updated

    # ── Shopping list ────────────────────────────────────────────────

    def planned_recipes(self) -> list[Recipe]:
        return [r for day in DAYS_OF_WEEK for r in self.plan.get(day, [])]

    async def generate_shopping_list(self, ai: KitchenAI) -> list[ShoppingItem]:
        self.shopping_list = await ai.generate_shopping_list(self.planned_recipes(), self.pantry)
        self.save_shopping_list()
        return self.shopping_list

    async def add_shopping_item(self, ai: KitchenAI, name: str, amount: str) -> ShoppingItem | None:
        if not name.strip() or not amount.strip():
            return None
        category = await ai.categorize_item(name)
        item = ShoppingItem(name=name, amount=amount, category=category)
        self.shopping_list = [*self.shopping_list, item]
        self.save_shopping_list()
        return item

    def toggle_checked(self, index: int):
        item = self.shopping_list[index]
        self.shopping_list[index] = item.model_copy(update={"checked": not item.checked})
        self.save_shopping_list()

    def toggle_already_have(self, index: int):
        item = self.shopping_list[index]
        self.shopping_list[index] = item.model_copy(update={"already_have": not item.already_have})
        self.save_shopping_list()

    def remove_shopping_item(self, index: int):
        del self.shopping_list[index]
        self.save_shopping_list()

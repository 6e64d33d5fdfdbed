"""
Weekly auto-planner.

Fills the selected days with a mix of freshly generated recipes and sampled
favorites, one dinner per day. The generated part is split so that at most two
recipes are asked to use up pantry items; the rest are generated without that
constraint, which keeps the week from turning into variations on the same leftovers.
"""

import asyncio
import logging
import random

from longevity_chef.schemas.meal_plan import DAYS_OF_WEEK, WeeklyPlan, empty_plan
from longevity_chef.schemas.profile import UserProfile
from longevity_chef.schemas.recipe import Recipe
from longevity_chef.services.kitchen_ai import KitchenAI

logger = logging.getLogger(__name__)

USE_UP_BATCH_SIZE = 2


def normalize_days(selected_days: list[str]) -> list[str]:
    """Selected days in calendar order, unknown names and duplicates dropped."""
    chosen = set(selected_days)
    return [day for day in DAYS_OF_WEEK if day in chosen]


def clamp_favorite_count(favorite_count: int, favorites_available: int, day_count: int) -> int:
    return max(0, min(favorite_count, favorites_available, day_count))


def split_batches(new_count: int, use_up: str | None) -> list[tuple[int, str | None]]:
    """
    Generation calls needed for `new_count` new recipes, as (count, use_up) pairs
    in the order their results are concatenated.
    """
    if new_count <= 0:
        return []
    if not use_up or not use_up.strip():
        return [(new_count, None)]

    use_up_count = min(new_count, USE_UP_BATCH_SIZE)
    batches = [(use_up_count, use_up)]
    remainder = new_count - use_up_count
    if remainder > 0:
        batches.append((remainder, None))
    return batches


def distribute(pool: list[Recipe], selected_days: list[str]) -> WeeklyPlan:
    """Assign pool items to selected days in calendar order, one per day."""
    plan = empty_plan()
    chosen = set(selected_days)
    index = 0
    for day in DAYS_OF_WEEK:
        if day not in chosen:
            continue
        if index >= len(pool):
            break
        plan[day] = [pool[index]]
        index += 1
    return plan


class WeekPlanner:
    def __init__(self, ai: KitchenAI, rng: random.Random | None = None):
        self.ai = ai
        self.rng = rng or random.Random()

    def sample_favorites(self, favorites: list[Recipe], count: int, servings: int) -> list[Recipe]:
        """Uniformly sample `count` favorites as copies stamped with `servings`."""
        if count <= 0 or not favorites:
            return []
        picked = self.rng.sample(favorites, min(count, len(favorites)))
        return [r.model_copy(deep=True, update={"servings": servings}) for r in picked]

    async def plan_week(
        self,
        profile: UserProfile,
        favorites: list[Recipe],
        favorite_count: int,
        use_up: str | None,
        servings: int,
        selected_days: list[str],
        max_minutes: int | None = None,
    ) -> WeeklyPlan | None:
        """
        Build a plan for the selected days. Returns None when no day is selected.

        `favorite_count` is expected to be clamped already (see clamp_favorite_count).
        Never raises: failed generation just leaves fewer days filled.
        """
        days = normalize_days(selected_days)
        if not days:
            return None

        new_count = len(days) - favorite_count
        batches = split_batches(new_count, use_up)

        # Batches are independent; gather keeps results in batch order.
        results = await asyncio.gather(*(
            self.ai.generate_recipes(profile, count, servings, batch_use_up, max_minutes)
            for count, batch_use_up in batches
        ))
        generated = [recipe for batch in results for recipe in batch]

        selected_favorites = self.sample_favorites(favorites, favorite_count, servings)

        pool = generated + selected_favorites
        if len(pool) < len(days):
            logger.warning(f"Auto-plan filled {len(pool)} of {len(days)} selected days")
        return distribute(pool, days)

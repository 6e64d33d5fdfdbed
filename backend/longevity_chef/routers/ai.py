"""
AI router: all AI-powered endpoints.

Endpoints:
  POST /recipes/generate: batch of personalized dinner recipes
  POST /recipes/customize: modify one recipe from a free-text instruction
  POST /recipes/scale: rescale a recipe to another serving count
  POST /shopping-list: aggregate recipes into a categorized shopping list
  POST /categorize: shopping category for a single item
  POST /plan-week: auto-generate a weekly dinner plan

The service is stateless: every request carries the profile and recipes it needs.
AI failures never surface as errors here; they come back as empty or degraded results.
"""

from fastapi import APIRouter, Depends

from longevity_chef.schemas.meal_plan import PlanWeekRequest, PlanWeekResponse
from longevity_chef.schemas.recipe import (
    CustomizeRecipeRequest,
    CustomizeRecipeResponse,
    GenerateRecipesRequest,
    Recipe,
    ScaleRecipeRequest,
)
from longevity_chef.schemas.shopping import (
    CategorizeRequest,
    CategorizeResponse,
    GenerateShoppingListRequest,
    ShoppingItem,
)
from longevity_chef.services.kitchen_ai import KitchenAI, get_kitchen_ai
from longevity_chef.services.scaling import scale_recipe
from longevity_chef.services.week_planner import WeekPlanner, clamp_favorite_count, normalize_days

router = APIRouter()


def get_week_planner(ai: KitchenAI = Depends(get_kitchen_ai)) -> WeekPlanner:
    return WeekPlanner(ai)


# ── Recipes ──────────────────────────────────────────────────────

@router.post("/recipes/generate", response_model=list[Recipe])
async def generate_recipes(
    body: GenerateRecipesRequest,
    ai: KitchenAI = Depends(get_kitchen_ai),
):
    return await ai.generate_recipes(
        profile=body.profile,
        count=body.count,
        servings=body.servings,
        use_up=body.ingredients_to_use_up,
        max_minutes=body.max_cooking_minutes,
    )


@router.post("/recipes/customize", response_model=CustomizeRecipeResponse)
async def customize_recipe(
    body: CustomizeRecipeRequest,
    ai: KitchenAI = Depends(get_kitchen_ai),
):
    updated = await ai.customize_recipe(body.recipe, body.instruction, body.profile)
    return CustomizeRecipeResponse(recipe=updated)


@router.post("/recipes/scale", response_model=Recipe)
def scale(body: ScaleRecipeRequest):
    return scale_recipe(body.recipe, body.servings)


# ── Shopping ─────────────────────────────────────────────────────

@router.post("/shopping-list", response_model=list[ShoppingItem])
async def shopping_list(
    body: GenerateShoppingListRequest,
    ai: KitchenAI = Depends(get_kitchen_ai),
):
    return await ai.generate_shopping_list(body.recipes, body.pantry_items)


@router.post("/categorize", response_model=CategorizeResponse)
async def categorize(
    body: CategorizeRequest,
    ai: KitchenAI = Depends(get_kitchen_ai),
):
    return CategorizeResponse(category=await ai.categorize_item(body.item_name))


# ── Weekly plan ──────────────────────────────────────────────────

@router.post("/plan-week", response_model=PlanWeekResponse)
async def plan_week(
    body: PlanWeekRequest,
    planner: WeekPlanner = Depends(get_week_planner),
):
    days = normalize_days(body.selected_days)
    favorite_count = clamp_favorite_count(body.favorite_count, len(body.favorites), len(days))
    plan = await planner.plan_week(
        profile=body.profile,
        favorites=body.favorites,
        favorite_count=favorite_count,
        use_up=body.ingredients_to_use_up,
        servings=body.servings,
        selected_days=days,
        max_minutes=body.max_time,
    )
    return PlanWeekResponse(plan=plan)

"""
Kitchen router: the saved per-user state.

Every request loads the session from the local store (STATE_FILE); each mutation is
persisted by KitchenSession itself before the response is sent.
"""

from fastapi import APIRouter, Depends, HTTPException

from longevity_chef.routers.ai import get_week_planner
from longevity_chef.schemas.kitchen import (
    AddShoppingItemRequest,
    AutoPlanRequest,
    FavoriteToggleResponse,
    KitchenStateResponse,
    MoveRecipeRequest,
    PantryUpdate,
    RecipeResult,
    SessionCustomizeRequest,
    ShoppingItemResult,
)
from longevity_chef.schemas.meal_plan import DAYS_OF_WEEK, PlanWeekResponse, WeeklyPlan
from longevity_chef.schemas.profile import UserProfile
from longevity_chef.schemas.recipe import Recipe
from longevity_chef.schemas.shopping import ShoppingItem
from longevity_chef.services.kitchen_ai import KitchenAI, get_kitchen_ai
from longevity_chef.services.session import KitchenSession
from longevity_chef.services.week_planner import WeekPlanner

router = APIRouter()


def get_session() -> KitchenSession:
    return KitchenSession.load()


def _check_day(day: str):
    if day not in DAYS_OF_WEEK:
        raise HTTPException(status_code=404, detail=f"Unknown day: {day}")


def _check_index(session: KitchenSession, index: int):
    if not 0 <= index < len(session.shopping_list):
        raise HTTPException(status_code=404, detail="Shopping item not found")


def _state(session: KitchenSession) -> KitchenStateResponse:
    return KitchenStateResponse(
        profile=session.profile,
        favorites=session.favorites,
        plan=session.plan,
        shopping_list=session.shopping_list,
        pantry_items=session.pantry,
    )


@router.get("/state", response_model=KitchenStateResponse)
def get_state(session: KitchenSession = Depends(get_session)):
    return _state(session)


# ── Profile & pantry ─────────────────────────────────────────────

@router.put("/profile", response_model=UserProfile)
def update_profile(body: UserProfile, session: KitchenSession = Depends(get_session)):
    session.update_profile(body)
    return session.profile


@router.put("/pantry", response_model=PantryUpdate)
def update_pantry(body: PantryUpdate, session: KitchenSession = Depends(get_session)):
    session.set_pantry(body.pantry_items)
    return PantryUpdate(pantry_items=session.pantry)


# ── Weekly plan ──────────────────────────────────────────────────

@router.post("/plan/auto", response_model=PlanWeekResponse)
async def auto_plan(
    body: AutoPlanRequest,
    session: KitchenSession = Depends(get_session),
    planner: WeekPlanner = Depends(get_week_planner),
):
    plan = await session.auto_plan_week(
        planner,
        favorite_count=body.favorite_count,
        use_up=body.ingredients_to_use_up,
        servings=body.servings,
        selected_days=body.selected_days,
        max_minutes=body.max_time,
    )
    return PlanWeekResponse(plan=plan)


@router.post("/plan/move", response_model=WeeklyPlan)
def move_recipe(body: MoveRecipeRequest, session: KitchenSession = Depends(get_session)):
    _check_day(body.from_day)
    _check_day(body.to_day)
    session.move_recipe(body.from_day, body.to_day, body.recipe)
    return session.plan


@router.delete("/plan", response_model=KitchenStateResponse)
def clear_plan(session: KitchenSession = Depends(get_session)):
    session.clear_plan()
    return _state(session)


@router.post("/plan/{day}", response_model=WeeklyPlan, status_code=201)
def add_to_plan(day: str, body: Recipe, session: KitchenSession = Depends(get_session)):
    _check_day(day)
    session.add_to_plan(day, body)
    return session.plan


@router.delete("/plan/{day}/{recipe_id}", response_model=WeeklyPlan)
def remove_from_plan(day: str, recipe_id: str, session: KitchenSession = Depends(get_session)):
    _check_day(day)
    session.remove_from_plan(day, recipe_id)
    return session.plan


@router.post("/plan/{day}/regenerate", response_model=RecipeResult)
async def regenerate_recipe(
    day: str,
    body: Recipe,
    session: KitchenSession = Depends(get_session),
    ai: KitchenAI = Depends(get_kitchen_ai),
):
    _check_day(day)
    return RecipeResult(recipe=await session.regenerate_recipe(ai, day, body))


# ── Favorites ────────────────────────────────────────────────────

@router.post("/favorites/toggle", response_model=FavoriteToggleResponse)
def toggle_favorite(body: Recipe, session: KitchenSession = Depends(get_session)):
    return FavoriteToggleResponse(favorite=session.toggle_favorite(body))


@router.post("/recipes/customize", response_model=RecipeResult)
async def customize_recipe(
    body: SessionCustomizeRequest,
    session: KitchenSession = Depends(get_session),
    ai: KitchenAI = Depends(get_kitchen_ai),
):
    return RecipeResult(recipe=await session.customize_recipe(ai, body.recipe, body.instruction))


# ── Shopping list ────────────────────────────────────────────────

@router.post("/shopping-list/generate", response_model=list[ShoppingItem])
async def generate_shopping_list(
    session: KitchenSession = Depends(get_session),
    ai: KitchenAI = Depends(get_kitchen_ai),
):
    return await session.generate_shopping_list(ai)


@router.post("/shopping-list/items", response_model=ShoppingItemResult)
async def add_shopping_item(
    body: AddShoppingItemRequest,
    session: KitchenSession = Depends(get_session),
    ai: KitchenAI = Depends(get_kitchen_ai),
):
    return ShoppingItemResult(item=await session.add_shopping_item(ai, body.name, body.amount))


@router.post("/shopping-list/{index}/checked", response_model=ShoppingItem)
def toggle_checked(index: int, session: KitchenSession = Depends(get_session)):
    _check_index(session, index)
    session.toggle_checked(index)
    return session.shopping_list[index]


@router.post("/shopping-list/{index}/already-have", response_model=ShoppingItem)
def toggle_already_have(index: int, session: KitchenSession = Depends(get_session)):
    _check_index(session, index)
    session.toggle_already_have(index)
    return session.shopping_list[index]


@router.delete("/shopping-list/{index}", response_model=list[ShoppingItem])
def remove_shopping_item(index: int, session: KitchenSession = Depends(get_session)):
    _check_index(session, index)
    session.remove_shopping_item(index)
    return session.shopping_list

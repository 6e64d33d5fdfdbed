from pydantic import Field

from longevity_chef.schemas.common import CamelModel
from longevity_chef.schemas.profile import UserProfile
from longevity_chef.schemas.recipe import Recipe

DAYS_OF_WEEK = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

# Day name -> recipes for that day. Every day key is always present.
WeeklyPlan = dict[str, list[Recipe]]


def empty_plan() -> WeeklyPlan:
    return {day: [] for day in DAYS_OF_WEEK}


class PlanWeekRequest(CamelModel):
    profile: UserProfile = Field(default_factory=UserProfile)
    favorites: list[Recipe] = []
    favorite_count: int = Field(0, ge=0)
    ingredients_to_use_up: str = ""
    servings: int = Field(2, ge=1)
    selected_days: list[str] = Field(default_factory=lambda: list(DAYS_OF_WEEK))
    max_time: int | None = Field(45, ge=1)


class PlanWeekResponse(CamelModel):
    plan: WeeklyPlan | None = None

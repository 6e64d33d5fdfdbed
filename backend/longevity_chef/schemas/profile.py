from enum import Enum

from longevity_chef.schemas.common import CamelModel


class HealthGoal(str, Enum):
    LONGEVITY = "Longevity"
    HEART_HEALTH = "Heart Health"
    WEIGHT_LOSS = "Weight Loss"
    MUSCLE_GAIN = "Muscle Gain"
    BRAIN_HEALTH = "Brain Health"
    BLOOD_SUGAR_CONTROL = "Blood Sugar Control"


class UserProfile(CamelModel):
    name: str = "Guest User"
    health_goals: list[HealthGoal] = []
    nutritional_focus: list[str] = []
    dietary_restrictions: list[str] = []
    max_cooking_minutes: int | None = 60
    cooking_appliances: list[str] = []

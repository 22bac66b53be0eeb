"""User profile domain models."""

from dataclasses import dataclass
from enum import StrEnum


class Sex(StrEnum):
    """Sex used by the BMR equation."""

    MALE = "male"
    FEMALE = "female"


class Goal(StrEnum):
    """Body-weight goal."""

    LOSE = "lose"
    MAINTAIN = "maintain"
    GAIN = "gain"


@dataclass(frozen=True)
class UserProfile:
    """Physical profile and insulin settings of a user."""

    weight_kg: float
    height_cm: float
    age: int
    sex: Sex = Sex.MALE
    activity_factor: float = 1.375
    is_on_insulin_therapy: bool = False
    carb_ratio: float | None = None
    goal: Goal = Goal.MAINTAIN


@dataclass(frozen=True)
class NutritionTargets:
    """Daily intake targets derived from a profile."""

    daily_calories: int
    protein_g: int

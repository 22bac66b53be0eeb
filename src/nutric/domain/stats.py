"""Domain models for statistics."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DailyTotals:
    """Daily totals over every logged meal."""

    day: date
    carbs: float
    protein: float
    calories: float
    glycemic_load: float
    meal_count: int

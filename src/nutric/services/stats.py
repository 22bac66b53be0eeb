"""Daily totals over logged meals."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from uuid import UUID
from zoneinfo import ZoneInfo

from nutric.domain.meals import MealRecord
from nutric.domain.stats import DailyTotals
from nutric.services.meals import MealRepository


@dataclass
class StatsService:
    """Service for computing per-day totals by timezone."""

    repository: MealRepository

    def get_today(
        self, user_id: UUID, timezone_name: str
    ) -> tuple[DailyTotals, list[MealRecord]]:
        """Return today's totals and meals in the user's timezone."""
        tz = ZoneInfo(timezone_name)
        return self.get_day(user_id, datetime.now(tz=tz).date(), timezone_name)

    def get_day(
        self, user_id: UUID, day: date, timezone_name: str
    ) -> tuple[DailyTotals, list[MealRecord]]:
        """Return totals and meals for a calendar day."""
        tz = ZoneInfo(timezone_name)
        start = datetime.combine(day, time.min, tzinfo=tz)
        end = start + timedelta(days=1)
        meals = self.repository.list_meals(
            user_id, start.astimezone(UTC), end.astimezone(UTC)
        )
        meals = [meal for meal in meals if meal.logged_at.astimezone(tz).date() == day]
        return _aggregate_day(day, meals), meals


def _aggregate_day(day: date, meals: list[MealRecord]) -> DailyTotals:
    return DailyTotals(
        day=day,
        carbs=sum(meal.totals.carbs for meal in meals),
        protein=sum(meal.totals.protein for meal in meals),
        calories=sum(meal.totals.calories for meal in meals),
        glycemic_load=sum(meal.totals.glycemic_load for meal in meals),
        meal_count=len(meals),
    )

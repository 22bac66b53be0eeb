"""Supabase repository for logged meals."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from nutric.domain.meals import ConsumedItem, MealRecord, MealTotals, MealType
from nutric.services.meals import MealRepository

_MEAL_COLUMNS = (
    "id, user_id, meal_type, items, total_carbs, total_protein, total_calories, "
    "total_glycemic_load, suggested_insulin_dose, logged_at"
)


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meals."""

    client: Client

    def create_meal(self, record: MealRecord) -> MealRecord:
        """Insert a meal row and return the record with its id."""
        response = (
            self.client.table("meals")
            .insert(
                {
                    "user_id": str(record.user_id),
                    "meal_type": record.meal_type.value,
                    "items": [item.to_dict() for item in record.items],
                    "total_carbs": record.totals.carbs,
                    "total_protein": record.totals.protein,
                    "total_calories": record.totals.calories,
                    "total_glycemic_load": record.totals.glycemic_load,
                    "suggested_insulin_dose": record.suggested_insulin_dose,
                    "logged_at": record.logged_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal")
        return MealRecord(
            id=UUID(str(response.data[0]["id"])),
            user_id=record.user_id,
            meal_type=record.meal_type,
            items=record.items,
            totals=record.totals,
            suggested_insulin_dose=record.suggested_insulin_dose,
            logged_at=record.logged_at,
        )

    def list_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return meals logged in the time range, oldest first."""
        response = (
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("logged_at", start.isoformat())
            .lt("logged_at", end.isoformat())
            .order("logged_at", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> MealRecord:
    items = row.get("items")
    dose = row.get("suggested_insulin_dose")
    return MealRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        meal_type=MealType(str(row.get("meal_type", MealType.BREAKFAST.value))),
        items=[
            ConsumedItem.from_dict(item)
            for item in (items if isinstance(items, list) else [])
            if isinstance(item, dict)
        ],
        totals=MealTotals(
            carbs=float(row.get("total_carbs") or 0.0),
            protein=float(row.get("total_protein") or 0.0),
            calories=float(row.get("total_calories") or 0.0),
            glycemic_load=float(row.get("total_glycemic_load") or 0.0),
        ),
        suggested_insulin_dose=float(dose) if dose is not None else None,
        logged_at=datetime.fromisoformat(str(row["logged_at"])),
    )

"""Domain models for meal composition."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from nutric.domain.records import CanonicalFoodRecord


class MealType(StrEnum):
    """Meal slots of a logging day."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    SNACK = "snack"
    DINNER = "dinner"


@dataclass(frozen=True)
class ConsumedItem:
    """A record scaled to the quantity actually eaten."""

    record: CanonicalFoodRecord
    quantity_grams: float
    resolved_glycemic_index: int
    glycemic_index_confirmed: bool
    carbs: float
    protein: float
    calories: float
    glycemic_load: float

    def to_dict(self) -> dict[str, object]:
        """Serialize the item as a persistence snapshot."""
        return {
            "record": self.record.to_dict(),
            "quantity_grams": self.quantity_grams,
            "resolved_glycemic_index": self.resolved_glycemic_index,
            "glycemic_index_confirmed": self.glycemic_index_confirmed,
            "carbs": self.carbs,
            "protein": self.protein,
            "calories": self.calories,
            "glycemic_load": self.glycemic_load,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "ConsumedItem":
        """Rebuild an item from a persistence snapshot."""
        record_data = data.get("record")
        return cls(
            record=CanonicalFoodRecord.from_dict(
                record_data if isinstance(record_data, dict) else {}
            ),
            quantity_grams=float(data.get("quantity_grams", 0.0)),
            resolved_glycemic_index=int(data.get("resolved_glycemic_index", 0)),
            glycemic_index_confirmed=bool(data.get("glycemic_index_confirmed", False)),
            carbs=float(data.get("carbs", 0.0)),
            protein=float(data.get("protein", 0.0)),
            calories=float(data.get("calories", 0.0)),
            glycemic_load=float(data.get("glycemic_load", 0.0)),
        )


@dataclass(frozen=True)
class MealTotals:
    """Summed nutrition of a set of consumed items."""

    carbs: float = 0.0
    protein: float = 0.0
    calories: float = 0.0
    glycemic_load: float = 0.0


@dataclass
class MealDraft:
    """In-progress meal that has not been handed to storage yet."""

    meal_type: MealType = MealType.BREAKFAST
    items: list[ConsumedItem] = field(default_factory=list)

    def clear(self) -> None:
        """Drop every item after a successful save."""
        self.items.clear()


@dataclass(frozen=True)
class MealRecord:
    """Finalized meal as stored for a user."""

    user_id: UUID
    meal_type: MealType
    items: list[ConsumedItem]
    totals: MealTotals
    suggested_insulin_dose: float | None
    logged_at: datetime
    id: UUID | None = None

"""Curated local food table with clinically verified glycemic indexes."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from nutric.domain.records import CanonicalFoodRecord, Origin

CURATED_FOODS: tuple[dict[str, object], ...] = (
    {
        "name": "Arroz Blanco (Cocido)",
        "carbs": 28,
        "protein": 2.7,
        "calories": 130,
        "glycemic_index": 73,
        "category": "Cereal",
    },
    {
        "name": "Arroz Integral",
        "carbs": 23,
        "protein": 2.6,
        "calories": 111,
        "glycemic_index": 68,
        "category": "Cereal",
    },
    {
        "name": "Manzana (con piel)",
        "carbs": 14,
        "protein": 0.3,
        "calories": 52,
        "glycemic_index": 36,
        "category": "Fruta",
    },
    {
        "name": "Pechuga de Pollo",
        "carbs": 0,
        "protein": 31,
        "calories": 165,
        "glycemic_index": 0,
        "category": "Proteína",
    },
    {
        "name": "Huevo Cocido",
        "carbs": 1.1,
        "protein": 13,
        "calories": 155,
        "glycemic_index": 0,
        "category": "Proteína",
    },
)


class CuratedFoodRepository(Protocol):
    """Lookup interface for the curated food table."""

    def search(self, query: str) -> list[CanonicalFoodRecord]:
        """Return curated foods whose name contains the query."""


def curated_record(row: dict[str, object]) -> CanonicalFoodRecord:
    """Build a curated record from a table row."""
    density = row.get("density")
    category = row.get("category")
    return CanonicalFoodRecord(
        name=str(row["name"]),
        carbs_per_100=float(row.get("carbs", 0.0)),
        protein_per_100=float(row.get("protein", 0.0)),
        calories_per_100=float(row.get("calories", 0.0)),
        glycemic_index=int(row.get("glycemic_index", 0)),
        origin=Origin.CURATED,
        density_g_per_ml=float(density) if isinstance(density, int | float) else None,
        categories=(str(category),) if category else (),
    )


@dataclass
class InMemoryCuratedFoodRepository(CuratedFoodRepository):
    """Curated table held in memory, seeded with the default foods."""

    records: list[CanonicalFoodRecord] = field(
        default_factory=lambda: [curated_record(row) for row in CURATED_FOODS]
    )

    @classmethod
    def from_rows(
        cls, rows: Iterable[dict[str, object]]
    ) -> "InMemoryCuratedFoodRepository":
        """Build a table from raw rows."""
        return cls(records=[curated_record(row) for row in rows])

    def search(self, query: str) -> list[CanonicalFoodRecord]:
        """Case-insensitive substring match over names, in table order."""
        needle = query.lower()
        return [record for record in self.records if needle in record.name.lower()]

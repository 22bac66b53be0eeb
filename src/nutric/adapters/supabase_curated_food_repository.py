"""Supabase repository for the curated food table."""

from dataclasses import dataclass

from supabase import Client

from nutric.domain.records import CanonicalFoodRecord
from nutric.services.local_foods import CuratedFoodRepository, curated_record


@dataclass
class SupabaseCuratedFoodRepository(CuratedFoodRepository):
    """Supabase implementation of curated food lookups."""

    client: Client
    limit: int = 50

    def search(self, query: str) -> list[CanonicalFoodRecord]:
        """Return curated foods whose name contains the query."""
        pattern = query.replace("%", "").replace("_", "")
        response = (
            self.client.table("curated_foods")
            .select("name, carbs, protein, calories, glycemic_index, category, density")
            .ilike("name", f"%{pattern}%")
            .order("name", desc=False)
            .limit(self.limit)
            .execute()
        )
        return [curated_record(row) for row in response.data or []]

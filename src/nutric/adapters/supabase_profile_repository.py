"""Supabase repository for user profiles."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from nutric.domain.profile import Goal, Sex, UserProfile
from nutric.services.profile import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for user profiles."""

    client: Client

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the stored profile for a user."""
        response = (
            self.client.table("profiles")
            .select(
                "weight_kg, height_cm, age, sex, activity_factor, "
                "is_on_insulin_therapy, carb_ratio, goal"
            )
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def save_profile(self, user_id: UUID, profile: UserProfile) -> UserProfile:
        """Insert or update the profile row keyed by user id."""
        response = (
            self.client.table("profiles")
            .upsert(
                {
                    "user_id": str(user_id),
                    "weight_kg": profile.weight_kg,
                    "height_cm": profile.height_cm,
                    "age": profile.age,
                    "sex": profile.sex.value,
                    "activity_factor": profile.activity_factor,
                    "is_on_insulin_therapy": profile.is_on_insulin_therapy,
                    "carb_ratio": profile.carb_ratio,
                    "goal": profile.goal.value,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="user_id",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save profile")
        return _parse_row(response.data[0])


def _parse_row(row: dict[str, object]) -> UserProfile:
    carb_ratio = row.get("carb_ratio")
    return UserProfile(
        weight_kg=float(row.get("weight_kg") or 0.0),
        height_cm=float(row.get("height_cm") or 0.0),
        age=int(row.get("age") or 0),
        sex=Sex(str(row.get("sex") or Sex.MALE.value)),
        activity_factor=float(row.get("activity_factor") or 1.375),
        is_on_insulin_therapy=bool(row.get("is_on_insulin_therapy", False)),
        carb_ratio=float(carb_ratio) if carb_ratio is not None else None,
        goal=Goal(str(row.get("goal") or Goal.MAINTAIN.value)),
    )

"""User profile and daily targets."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from nutric.domain.profile import Goal, NutritionTargets, Sex, UserProfile
from nutric.domain.rounding import round_to_int

_SEX_OFFSET = {Sex.MALE: 5.0, Sex.FEMALE: -161.0}
_GOAL_CALORIE_ADJUSTMENT = {Goal.LOSE: -500.0, Goal.MAINTAIN: 0.0, Goal.GAIN: 300.0}
_GOAL_PROTEIN_FACTOR = {Goal.LOSE: 1.8, Goal.MAINTAIN: 1.2, Goal.GAIN: 1.8}
_INSULIN_THERAPY_PROTEIN_FACTOR = 1.0


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the stored profile for a user."""

    def save_profile(self, user_id: UUID, profile: UserProfile) -> UserProfile:
        """Insert or update a user's profile."""


def compute_targets(profile: UserProfile) -> NutritionTargets:
    """Mifflin-St Jeor energy target and a goal-based protein target."""
    bmr = (
        10 * profile.weight_kg
        + 6.25 * profile.height_cm
        - 5 * profile.age
        + _SEX_OFFSET[profile.sex]
    )
    calories = bmr * profile.activity_factor + _GOAL_CALORIE_ADJUSTMENT[profile.goal]
    protein_factor = (
        _INSULIN_THERAPY_PROTEIN_FACTOR
        if profile.is_on_insulin_therapy
        else _GOAL_PROTEIN_FACTOR[profile.goal]
    )
    return NutritionTargets(
        daily_calories=round_to_int(calories),
        protein_g=round_to_int(profile.weight_kg * protein_factor),
    )


@dataclass
class ProfileService:
    """Service for user profiles."""

    repository: ProfileRepository

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        return self.repository.get_profile(user_id)

    def save_profile(self, user_id: UUID, profile: UserProfile) -> UserProfile:
        return self.repository.save_profile(user_id, profile)

    def get_targets(self, user_id: UUID) -> NutritionTargets | None:
        """Return targets for the stored profile, or None without one."""
        profile = self.repository.get_profile(user_id)
        if profile is None:
            return None
        return compute_targets(profile)

"""Tests for profile targets."""

from uuid import uuid4

from nutric.domain.profile import Goal, Sex, UserProfile
from nutric.services.profile import ProfileService, compute_targets
from tests.conftest import InMemoryProfileRepository


def test_compute_targets_for_maintenance() -> None:
    profile = UserProfile(weight_kg=70, height_cm=175, age=30, sex=Sex.MALE)

    targets = compute_targets(profile)

    # BMR 1648.75 * 1.375
    assert targets.daily_calories == 2267
    assert targets.protein_g == 84


def test_goal_adjusts_calories_and_protein() -> None:
    base = UserProfile(
        weight_kg=60, height_cm=165, age=40, sex=Sex.FEMALE, activity_factor=1.2
    )
    lose = UserProfile(**{**base.__dict__, "goal": Goal.LOSE})
    gain = UserProfile(**{**base.__dict__, "goal": Goal.GAIN})

    # BMR 1270.25 * 1.2 = 1524.3
    assert compute_targets(base).daily_calories == 1524
    assert compute_targets(lose).daily_calories == 1024
    assert compute_targets(lose).protein_g == 108
    assert compute_targets(gain).daily_calories == 1824
    assert compute_targets(base).protein_g == 72


def test_insulin_therapy_uses_lower_protein_factor() -> None:
    profile = UserProfile(
        weight_kg=80,
        height_cm=180,
        age=50,
        goal=Goal.GAIN,
        is_on_insulin_therapy=True,
    )

    assert compute_targets(profile).protein_g == 80


def test_profile_service_targets() -> None:
    user_id = uuid4()
    service = ProfileService(InMemoryProfileRepository())

    assert service.get_targets(user_id) is None

    service.save_profile(user_id, UserProfile(weight_kg=70, height_cm=175, age=30))

    assert service.get_profile(user_id) is not None
    targets = service.get_targets(user_id)
    assert targets is not None
    assert targets.daily_calories == 2267

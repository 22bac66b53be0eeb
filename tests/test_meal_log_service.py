"""Tests for meal logging."""

from dataclasses import replace
from uuid import uuid4

import pytest

from nutric.domain.meals import MealDraft, MealType
from nutric.domain.profile import UserProfile
from nutric.domain.records import Origin
from nutric.services.local_foods import (
    CURATED_FOODS,
    InMemoryCuratedFoodRepository,
    curated_record,
)
from nutric.services.meals import MealLogService, UnknownCuratedFoodError
from tests.conftest import InMemoryMealRepository, external_record


def test_save_meal_persists_and_clears_draft() -> None:
    user_id = uuid4()
    repository = InMemoryMealRepository()
    service = MealLogService(repository)
    draft = MealDraft(meal_type=MealType.LUNCH)
    service.composer.add_item(draft, curated_record(CURATED_FOODS[0]), 150)
    profile = UserProfile(weight_kg=70, height_cm=175, age=30, carb_ratio=10)

    saved = service.save_meal(user_id, draft, profile)

    assert saved is not None
    assert saved.id is not None
    assert saved.meal_type == MealType.LUNCH
    assert saved.totals.carbs == 42.0
    assert saved.suggested_insulin_dose == 4.2
    assert saved.logged_at.tzinfo is not None
    assert draft.items == []
    assert repository.meals == [saved]


def test_save_meal_stores_no_dose_for_unconfirmed_items() -> None:
    repository = InMemoryMealRepository()
    service = MealLogService(repository)
    draft = MealDraft()
    service.composer.add_item(draft, external_record(), 50)
    profile = UserProfile(
        weight_kg=70,
        height_cm=175,
        age=30,
        is_on_insulin_therapy=True,
        carb_ratio=10,
    )

    saved = service.save_meal(uuid4(), draft, profile)

    assert saved is not None
    assert saved.suggested_insulin_dose is None


def test_save_empty_draft_is_noop() -> None:
    repository = InMemoryMealRepository()
    service = MealLogService(repository)

    assert service.save_meal(uuid4(), MealDraft(), None) is None
    assert repository.meals == []


def test_preview_does_not_persist() -> None:
    repository = InMemoryMealRepository()
    service = MealLogService(repository)
    draft = MealDraft()
    service.composer.add_item(draft, curated_record(CURATED_FOODS[2]), 200)

    totals, dose = service.preview(draft, None)

    assert totals.carbs == 28.0
    assert dose is None
    assert repository.meals == []
    assert len(draft.items) == 1


def _service_with_table() -> MealLogService:
    return MealLogService(
        InMemoryMealRepository(), curated_repository=InMemoryCuratedFoodRepository()
    )


def test_resolve_record_takes_curated_values_from_table() -> None:
    rice = curated_record(CURATED_FOODS[0])
    tampered = replace(rice, name="arroz blanco (cocido)", carbs_per_100=1.0)

    resolved = _service_with_table().resolve_record(tampered)

    assert resolved == rice


def test_resolve_record_passes_catalog_records_through() -> None:
    record = external_record()

    assert _service_with_table().resolve_record(record) is record


@pytest.mark.parametrize(
    "record",
    [
        replace(external_record(), origin=Origin.CURATED),
        replace(curated_record(CURATED_FOODS[0]), external_id="8410000000001"),
        replace(curated_record(CURATED_FOODS[0]), name="Arroz Frito"),
    ],
)
def test_resolve_record_refuses_unverified_curated_labels(record) -> None:
    with pytest.raises(UnknownCuratedFoodError):
        _service_with_table().resolve_record(record)


def test_resolve_record_without_table_refuses_curated_labels() -> None:
    service = MealLogService(InMemoryMealRepository())

    with pytest.raises(UnknownCuratedFoodError):
        service.resolve_record(curated_record(CURATED_FOODS[0]))

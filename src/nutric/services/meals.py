"""Meal composition and meal logging."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from nutric.domain.meals import ConsumedItem, MealDraft, MealRecord, MealTotals
from nutric.domain.profile import UserProfile
from nutric.domain.records import CanonicalFoodRecord, Origin
from nutric.domain.rounding import round_half_up, round_to_int
from nutric.services.local_foods import CuratedFoodRepository

_logger = logging.getLogger(__name__)


class MealCompositionError(ValueError):
    """Raised when an item cannot be added to a meal."""


class UnconfirmedGlycemicIndexError(MealCompositionError):
    """Raised when an estimated glycemic index needs confirmation first."""


class UnknownCuratedFoodError(MealCompositionError):
    """Raised when a record labelled curated is not in the curated table."""


class MealRepository(Protocol):
    """Persistence interface for finalized meals."""

    def create_meal(self, record: MealRecord) -> MealRecord:
        """Persist a meal and return it with its id."""

    def list_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return meals logged within a time range."""


def compose_item(
    record: CanonicalFoodRecord,
    quantity_grams: float,
    glycemic_index: int | None = None,
) -> ConsumedItem | None:
    """Scale a record to the eaten quantity.

    Curated records keep their verified glycemic index. Catalog records use
    ``glycemic_index`` when the user confirmed or overrode it, otherwise the
    estimate is kept and the item is flagged as unconfirmed.
    """
    if quantity_grams <= 0:
        return None

    if record.origin == Origin.CURATED:
        resolved = record.glycemic_index or 0
        confirmed = True
    elif glycemic_index is not None:
        resolved = glycemic_index
        confirmed = True
    else:
        resolved = record.glycemic_index or 0
        confirmed = False

    factor = quantity_grams / 100
    carbs = round_half_up(record.carbs_per_100 * factor, 1)
    return ConsumedItem(
        record=record,
        quantity_grams=quantity_grams,
        resolved_glycemic_index=resolved,
        glycemic_index_confirmed=confirmed,
        carbs=carbs,
        protein=round_half_up(record.protein_per_100 * factor, 1),
        calories=float(round_to_int(record.calories_per_100 * factor)),
        glycemic_load=round_half_up(resolved * carbs / 100, 1),
    )


def meal_totals(items: list[ConsumedItem]) -> MealTotals:
    """Sum item contributions; rounding is left to display."""
    return MealTotals(
        carbs=sum(item.carbs for item in items),
        protein=sum(item.protein for item in items),
        calories=sum(item.calories for item in items),
        glycemic_load=sum(item.glycemic_load for item in items),
    )


def suggested_insulin_dose(
    totals: MealTotals, carb_ratio: float | None
) -> float | None:
    """Return carbs divided by the carb ratio, or None when undefined."""
    if not carb_ratio or carb_ratio <= 0 or totals.carbs <= 0:
        return None
    return round_half_up(totals.carbs / carb_ratio, 1)


@dataclass
class MealComposer:
    """Operations on an in-progress meal draft."""

    def add_item(
        self,
        draft: MealDraft,
        record: CanonicalFoodRecord,
        quantity_grams: float,
        glycemic_index: int | None = None,
        profile: UserProfile | None = None,
    ) -> ConsumedItem | None:
        """Append a scaled item; returns None for non-positive quantities."""
        item = compose_item(record, quantity_grams, glycemic_index)
        if item is None:
            return None
        if (
            profile is not None
            and profile.is_on_insulin_therapy
            and not item.glycemic_index_confirmed
        ):
            raise UnconfirmedGlycemicIndexError(
                f"Confirm the glycemic index of {record.name} before adding it"
            )
        draft.items.append(item)
        return item

    def remove_item(self, draft: MealDraft, index: int) -> ConsumedItem | None:
        """Remove the item at ``index``; out-of-range indexes are ignored."""
        if index < 0 or index >= len(draft.items):
            return None
        return draft.items.pop(index)

    def totals(self, draft: MealDraft) -> MealTotals:
        """Return the draft totals."""
        return meal_totals(draft.items)

    def suggested_dose(
        self, draft: MealDraft, profile: UserProfile | None
    ) -> float | None:
        """Return the insulin suggestion for the draft, if any."""
        if profile is None:
            return None
        if profile.is_on_insulin_therapy and any(
            not item.glycemic_index_confirmed for item in draft.items
        ):
            return None
        return suggested_insulin_dose(self.totals(draft), profile.carb_ratio)


@dataclass
class MealLogService:
    """Service that finalizes drafts and persists meals."""

    repository: MealRepository
    composer: MealComposer = field(default_factory=MealComposer)
    curated_repository: CuratedFoodRepository | None = None

    def resolve_record(self, record: CanonicalFoodRecord) -> CanonicalFoodRecord:
        """Return the trusted form of a record supplied by a client.

        A record labelled curated is replaced by the curated table entry of
        the same name, so its macros and glycemic index come from the table.
        Curated labels carrying a catalog id or naming no table entry are
        refused. Catalog records pass through unchanged.
        """
        if record.origin != Origin.CURATED:
            return record
        if record.external_id:
            raise UnknownCuratedFoodError(
                f"{record.name} has a catalog id and cannot be curated"
            )
        match = None
        if self.curated_repository is not None:
            wanted = record.name.casefold()
            match = next(
                (
                    candidate
                    for candidate in self.curated_repository.search(record.name)
                    if candidate.name.casefold() == wanted
                ),
                None,
            )
        if match is None:
            _logger.warning("Unknown curated food submitted: name=%s", record.name)
            raise UnknownCuratedFoodError(f"{record.name} is not a curated food")
        return match

    def preview(
        self, draft: MealDraft, profile: UserProfile | None
    ) -> tuple[MealTotals, float | None]:
        """Compute totals and the dose suggestion without persisting."""
        return self.composer.totals(draft), self.composer.suggested_dose(
            draft, profile
        )

    def save_meal(
        self, user_id: UUID, draft: MealDraft, profile: UserProfile | None
    ) -> MealRecord | None:
        """Persist the draft as a meal and clear it."""
        if not draft.items:
            return None
        totals, dose = self.preview(draft, profile)
        record = MealRecord(
            user_id=user_id,
            meal_type=draft.meal_type,
            items=list(draft.items),
            totals=totals,
            suggested_insulin_dose=dose,
            logged_at=datetime.now(tz=UTC),
        )
        saved = self.repository.create_meal(record)
        _logger.info(
            "Meal saved: user_id=%s meal_type=%s items=%s carbs=%s",
            user_id,
            draft.meal_type.value,
            len(record.items),
            totals.carbs,
        )
        draft.clear()
        return saved

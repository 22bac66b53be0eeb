"""Pydantic models for the HTTP surface."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from nutric.domain.meals import ConsumedItem, MealRecord, MealTotals, MealType
from nutric.domain.profile import Goal, NutritionTargets, Sex, UserProfile
from nutric.domain.records import CanonicalFoodRecord, Origin
from nutric.domain.search import SearchSession
from nutric.domain.stats import DailyTotals


class FoodRecordModel(BaseModel):
    """Canonical food record payload."""

    name: str = Field(min_length=1)
    carbs_per_100: float = Field(ge=0)
    protein_per_100: float = Field(ge=0)
    calories_per_100: float = Field(ge=0)
    glycemic_index: int | None = Field(default=None, ge=0, le=100)
    origin: Origin
    density_g_per_ml: float | None = Field(default=None, gt=0)
    external_id: str | None = None
    brand: str | None = None
    nutri_score: str | None = None
    image_url: str | None = None
    image_thumb_url: str | None = None
    categories: list[str] = Field(default_factory=list)
    is_liquid: bool = False
    needs_glycemic_confirmation: bool = False

    @classmethod
    def from_record(cls, record: CanonicalFoodRecord) -> "FoodRecordModel":
        return cls(
            **record.to_dict(),
            is_liquid=record.is_liquid,
            needs_glycemic_confirmation=record.needs_glycemic_confirmation,
        )

    def to_record(self) -> CanonicalFoodRecord:
        return CanonicalFoodRecord.from_dict(
            self.model_dump(exclude={"is_liquid", "needs_glycemic_confirmation"})
        )


class SearchQueryRequest(BaseModel):
    """Query submitted to a search session."""

    query: str
    is_new_query: bool = True


class SearchSessionResponse(BaseModel):
    """Snapshot of a search session."""

    session_id: UUID
    query: str
    page: int
    results: list[FoodRecordModel]
    local_count: int
    external_count: int
    has_more_pages: bool
    total_count: int
    is_loading: bool

    @classmethod
    def from_session(
        cls, session_id: UUID, session: SearchSession
    ) -> "SearchSessionResponse":
        return cls(
            session_id=session_id,
            query=session.query,
            page=session.page,
            results=[FoodRecordModel.from_record(record) for record in session.results],
            local_count=len(session.local_results),
            external_count=len(session.external_results),
            has_more_pages=session.has_more_pages,
            total_count=session.total_count,
            is_loading=session.is_loading,
        )


class SuggestionsResponse(BaseModel):
    suggestions: list[str]


class PopularProductsResponse(BaseModel):
    products: list[FoodRecordModel]


class ProfileModel(BaseModel):
    """User profile payload."""

    weight_kg: float = Field(gt=0)
    height_cm: float = Field(gt=0)
    age: int = Field(gt=0)
    sex: Sex = Sex.MALE
    activity_factor: float = Field(default=1.375, gt=0)
    is_on_insulin_therapy: bool = False
    carb_ratio: float | None = Field(default=None, gt=0)
    goal: Goal = Goal.MAINTAIN

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "ProfileModel":
        return cls(
            weight_kg=profile.weight_kg,
            height_cm=profile.height_cm,
            age=profile.age,
            sex=profile.sex,
            activity_factor=profile.activity_factor,
            is_on_insulin_therapy=profile.is_on_insulin_therapy,
            carb_ratio=profile.carb_ratio,
            goal=profile.goal,
        )

    def to_profile(self) -> UserProfile:
        return UserProfile(**self.model_dump())


class TargetsResponse(BaseModel):
    daily_calories: int
    protein_g: int

    @classmethod
    def from_targets(cls, targets: NutritionTargets) -> "TargetsResponse":
        return cls(daily_calories=targets.daily_calories, protein_g=targets.protein_g)


class MealItemRequest(BaseModel):
    """A record and the quantity eaten, with an optional confirmed GI."""

    record: FoodRecordModel
    quantity_grams: float = Field(gt=0)
    glycemic_index: int | None = Field(default=None, ge=0, le=100)


class MealRequest(BaseModel):
    meal_type: MealType = MealType.BREAKFAST
    items: list[MealItemRequest] = Field(min_length=1)


class ConsumedItemModel(BaseModel):
    record: FoodRecordModel
    quantity_grams: float
    resolved_glycemic_index: int
    glycemic_index_confirmed: bool
    carbs: float
    protein: float
    calories: float
    glycemic_load: float

    @classmethod
    def from_item(cls, item: ConsumedItem) -> "ConsumedItemModel":
        return cls(
            record=FoodRecordModel.from_record(item.record),
            quantity_grams=item.quantity_grams,
            resolved_glycemic_index=item.resolved_glycemic_index,
            glycemic_index_confirmed=item.glycemic_index_confirmed,
            carbs=item.carbs,
            protein=item.protein,
            calories=item.calories,
            glycemic_load=item.glycemic_load,
        )


class MealTotalsModel(BaseModel):
    carbs: float
    protein: float
    calories: float
    glycemic_load: float

    @classmethod
    def from_totals(cls, totals: MealTotals) -> "MealTotalsModel":
        return cls(
            carbs=totals.carbs,
            protein=totals.protein,
            calories=totals.calories,
            glycemic_load=totals.glycemic_load,
        )


class MealPreviewResponse(BaseModel):
    meal_type: MealType
    items: list[ConsumedItemModel]
    totals: MealTotalsModel
    suggested_insulin_dose: float | None
    requires_glycemic_confirmation: bool


class MealResponse(BaseModel):
    id: UUID | None
    meal_type: MealType
    logged_at: datetime
    items: list[ConsumedItemModel]
    totals: MealTotalsModel
    suggested_insulin_dose: float | None

    @classmethod
    def from_meal(cls, meal: MealRecord) -> "MealResponse":
        return cls(
            id=meal.id,
            meal_type=meal.meal_type,
            logged_at=meal.logged_at,
            items=[ConsumedItemModel.from_item(item) for item in meal.items],
            totals=MealTotalsModel.from_totals(meal.totals),
            suggested_insulin_dose=meal.suggested_insulin_dose,
        )


class DailyTotalsResponse(BaseModel):
    """Totals of a day with the meals that make them up."""

    day: date
    carbs: float
    protein: float
    calories: float
    glycemic_load: float
    meal_count: int
    meals: list[MealResponse]

    @classmethod
    def from_totals(
        cls, totals: DailyTotals, meals: list[MealRecord]
    ) -> "DailyTotalsResponse":
        return cls(
            day=totals.day,
            carbs=totals.carbs,
            protein=totals.protein,
            calories=totals.calories,
            glycemic_load=totals.glycemic_load,
            meal_count=totals.meal_count,
            meals=[MealResponse.from_meal(meal) for meal in meals],
        )

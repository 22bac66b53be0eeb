"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID
from zoneinfo import ZoneInfo

from fastapi import FastAPI, HTTPException, Request, status

from nutric.api.schemas import (
    ConsumedItemModel,
    DailyTotalsResponse,
    FoodRecordModel,
    MealPreviewResponse,
    MealRequest,
    MealResponse,
    MealTotalsModel,
    PopularProductsResponse,
    ProfileModel,
    SearchQueryRequest,
    SearchSessionResponse,
    SuggestionsResponse,
    TargetsResponse,
)
from nutric.app_logging import configure_logging
from nutric.containers import AppContainer
from nutric.domain.meals import MealDraft
from nutric.domain.profile import UserProfile
from nutric.domain.search import SearchSession
from nutric.services.barcode import clean_barcode, is_valid_barcode
from nutric.services.catalog import CatalogUnavailableError
from nutric.services.meals import MealCompositionError, MealLogService


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(debug=container.settings.debug)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/search/sessions", status_code=status.HTTP_201_CREATED)
    async def create_search_session(request: Request) -> SearchSessionResponse:
        """Open an empty search session."""
        state_container: AppContainer = request.app.state.container
        session_id, session = state_container.search_sessions.create()
        return SearchSessionResponse.from_session(session_id, session)

    @app.post("/search/sessions/{session_id}/query")
    async def query_search_session(
        session_id: UUID, body: SearchQueryRequest, request: Request
    ) -> SearchSessionResponse:
        """Run a new query, or continue the current one."""
        state_container: AppContainer = request.app.state.container
        session = _require_session(state_container, session_id)
        await state_container.search_service.search(
            session, body.query, is_new_query=body.is_new_query
        )
        return SearchSessionResponse.from_session(session_id, session)

    @app.post("/search/sessions/{session_id}/more")
    async def load_more_results(
        session_id: UUID, request: Request
    ) -> SearchSessionResponse:
        """Fetch the next catalog page of the current query."""
        state_container: AppContainer = request.app.state.container
        session = _require_session(state_container, session_id)
        await state_container.search_service.load_more(session)
        return SearchSessionResponse.from_session(session_id, session)

    @app.delete(
        "/search/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT
    )
    async def close_search_session(session_id: UUID, request: Request) -> None:
        """Discard a search session."""
        state_container: AppContainer = request.app.state.container
        if not state_container.search_sessions.discard(session_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)

    @app.get("/search/suggestions")
    async def search_suggestions(q: str, request: Request) -> SuggestionsResponse:
        """Return type-ahead suggestions."""
        state_container: AppContainer = request.app.state.container
        suggestions = await state_container.search_service.suggestions(q)
        return SuggestionsResponse(suggestions=suggestions)

    @app.get("/search/popular")
    async def popular_products(request: Request) -> PopularProductsResponse:
        """Return the catalog's most scanned products."""
        state_container: AppContainer = request.app.state.container
        records = await state_container.search_service.popular_products()
        return PopularProductsResponse(
            products=[FoodRecordModel.from_record(record) for record in records]
        )

    @app.get("/barcodes/{code}")
    async def resolve_barcode(code: str, request: Request) -> FoodRecordModel:
        """Resolve a scanned barcode to a canonical record."""
        state_container: AppContainer = request.app.state.container
        if not is_valid_barcode(code):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid barcode"
            )
        try:
            record = await state_container.catalog_service.get_by_code(
                clean_barcode(code)
            )
        except CatalogUnavailableError as exc:
            logger.warning("Barcode lookup unavailable: code=%s", code)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Error looking up product",
            ) from exc
        if record is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Product not found"
            )
        return FoodRecordModel.from_record(record)

    @app.get("/users/{user_id}/profile")
    async def get_profile(user_id: UUID, request: Request) -> ProfileModel:
        state_container: AppContainer = request.app.state.container
        profile = state_container.profile_service.get_profile(user_id)
        if profile is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return ProfileModel.from_profile(profile)

    @app.put("/users/{user_id}/profile")
    async def put_profile(
        user_id: UUID, body: ProfileModel, request: Request
    ) -> ProfileModel:
        """Create or replace a user's profile."""
        state_container: AppContainer = request.app.state.container
        saved = state_container.profile_service.save_profile(
            user_id, body.to_profile()
        )
        return ProfileModel.from_profile(saved)

    @app.get("/users/{user_id}/targets")
    async def get_targets(user_id: UUID, request: Request) -> TargetsResponse:
        """Return daily calorie and protein targets."""
        state_container: AppContainer = request.app.state.container
        targets = state_container.profile_service.get_targets(user_id)
        if targets is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return TargetsResponse.from_targets(targets)

    @app.post("/users/{user_id}/meals/preview")
    async def preview_meal(
        user_id: UUID, body: MealRequest, request: Request
    ) -> MealPreviewResponse:
        """Compute item contributions and totals without saving."""
        state_container: AppContainer = request.app.state.container
        profile = state_container.profile_service.get_profile(user_id)
        draft = _build_draft(
            state_container.meal_log_service, body, profile, enforce=False
        )
        totals, dose = state_container.meal_log_service.preview(draft, profile)
        requires_confirmation = bool(
            profile
            and profile.is_on_insulin_therapy
            and any(not item.glycemic_index_confirmed for item in draft.items)
        )
        return MealPreviewResponse(
            meal_type=draft.meal_type,
            items=[ConsumedItemModel.from_item(item) for item in draft.items],
            totals=MealTotalsModel.from_totals(totals),
            suggested_insulin_dose=dose,
            requires_glycemic_confirmation=requires_confirmation,
        )

    @app.post("/users/{user_id}/meals", status_code=status.HTTP_201_CREATED)
    async def save_meal(
        user_id: UUID, body: MealRequest, request: Request
    ) -> MealResponse:
        """Finalize and persist a meal."""
        state_container: AppContainer = request.app.state.container
        profile = state_container.profile_service.get_profile(user_id)
        draft = _build_draft(
            state_container.meal_log_service, body, profile, enforce=True
        )
        meal = state_container.meal_log_service.save_meal(user_id, draft, profile)
        if meal is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Meal has no items"
            )
        return MealResponse.from_meal(meal)

    @app.get("/users/{user_id}/today")
    async def get_today(
        user_id: UUID, request: Request, tz: str = "UTC"
    ) -> DailyTotalsResponse:
        """Return today's totals in the given timezone."""
        state_container: AppContainer = request.app.state.container
        if not _is_valid_timezone(tz):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid timezone"
            )
        totals, meals = state_container.stats_service.get_today(user_id, tz)
        return DailyTotalsResponse.from_totals(totals, meals)

    return app


def _require_session(container: AppContainer, session_id: UUID) -> SearchSession:
    session = container.search_sessions.get(session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Unknown search session"
        )
    return session


def _build_draft(
    meal_log_service: MealLogService,
    body: MealRequest,
    profile: UserProfile | None,
    *,
    enforce: bool,
) -> MealDraft:
    draft = MealDraft(meal_type=body.meal_type)
    for item in body.items:
        try:
            meal_log_service.composer.add_item(
                draft,
                meal_log_service.resolve_record(item.record.to_record()),
                item.quantity_grams,
                glycemic_index=item.glycemic_index,
                profile=profile if enforce else None,
            )
        except MealCompositionError as exc:
            raise HTTPException(
                status_code=422, detail=str(exc)
            ) from exc
    return draft


def _is_valid_timezone(value: str) -> bool:
    try:
        ZoneInfo(value)
    except Exception:
        return False
    return True

"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutric.adapters.off_client import HttpxOpenFoodFactsClient
from nutric.adapters.supabase_curated_food_repository import (
    SupabaseCuratedFoodRepository,
)
from nutric.adapters.supabase_meal_repository import SupabaseMealRepository
from nutric.adapters.supabase_profile_repository import SupabaseProfileRepository
from nutric.config import Settings
from nutric.services.cache import InMemoryCache
from nutric.services.catalog import CatalogService
from nutric.services.local_foods import (
    CuratedFoodRepository,
    InMemoryCuratedFoodRepository,
)
from nutric.services.meals import MealLogService
from nutric.services.profile import ProfileService
from nutric.services.search import SearchService, SearchSessionRegistry
from nutric.services.stats import StatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog_service: CatalogService
    search_service: SearchService
    search_sessions: SearchSessionRegistry
    meal_log_service: MealLogService
    stats_service: StatsService
    profile_service: ProfileService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    curated_repository: CuratedFoodRepository
    if resolved_settings.uses_supabase_curated_foods:
        curated_repository = SupabaseCuratedFoodRepository(supabase_client)
    else:
        curated_repository = InMemoryCuratedFoodRepository()
    off_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.off_base_url,
        user_agent=resolved_settings.off_user_agent,
        countries=resolved_settings.off_countries,
    )
    catalog_service = CatalogService(
        client=off_client,
        cache=InMemoryCache(),
        regional_language=resolved_settings.off_regional_language,
        secondary_language=resolved_settings.off_secondary_language,
        search_ttl_seconds=resolved_settings.catalog_search_ttl_seconds,
        product_ttl_seconds=resolved_settings.catalog_product_ttl_seconds,
        debug=resolved_settings.debug,
        retry_attempts=resolved_settings.catalog_retry_attempts,
    )
    search_service = SearchService(
        curated_repository=curated_repository,
        catalog_service=catalog_service,
        page_size=resolved_settings.search_page_size,
        min_query_length=resolved_settings.search_min_query_length,
    )
    meal_repository = SupabaseMealRepository(supabase_client)
    meal_log_service = MealLogService(
        meal_repository, curated_repository=curated_repository
    )
    stats_service = StatsService(meal_repository)
    profile_service = ProfileService(SupabaseProfileRepository(supabase_client))

    async def close_resources() -> None:
        await off_client.close()

    return AppContainer(
        settings=resolved_settings,
        catalog_service=catalog_service,
        search_service=search_service,
        search_sessions=SearchSessionRegistry(),
        meal_log_service=meal_log_service,
        stats_service=stats_service,
        profile_service=profile_service,
        close_resources=close_resources,
    )

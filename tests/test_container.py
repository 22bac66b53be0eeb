"""Tests for container wiring."""

import asyncio

from nutric.containers import build_container
from nutric.services.local_foods import InMemoryCuratedFoodRepository


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.search_service is not None
    assert isinstance(
        container.search_service.curated_repository, InMemoryCuratedFoodRepository
    )
    assert container.catalog_service.regional_language == "es"
    asyncio.run(container.close_resources())

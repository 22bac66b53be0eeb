"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    off_base_url: str = "https://world.openfoodfacts.org"
    off_user_agent: str = "Nutric/0.1 (nutric@example.com)"
    off_countries: str = "Spain"
    off_regional_language: str = "es"
    off_secondary_language: str = "en"
    curated_foods_source: str = "memory"
    search_page_size: int = 20
    search_min_query_length: int = 2
    catalog_search_ttl_seconds: int = 3600
    catalog_product_ttl_seconds: int = 86400
    catalog_retry_attempts: int = 1
    environment: str = _ENVIRONMENT
    debug: bool = False

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def uses_supabase_curated_foods(self) -> bool:
        """Return True when curated foods are read from the database."""
        return self.curated_foods_source.strip().lower() == "supabase"

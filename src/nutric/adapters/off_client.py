"""Open Food Facts API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

SEARCH_FIELDS = (
    "code,product_name,product_name_es,product_name_en,brands,categories,"
    "categories_tags,nutriments,nutrition_grades,image_front_url,"
    "image_front_small_url,image_url,image_small_url,image_thumb_url"
)


class OpenFoodFactsClient(Protocol):
    """Interface for Open Food Facts API interactions."""

    async def get_product(self, code: str) -> dict[str, object] | None:
        """Fetch a product envelope by barcode, or None when unknown."""

    async def search_products(
        self, query: str, page: int, page_size: int
    ) -> dict[str, object]:
        """Search products by text and return the raw API page."""


@dataclass
class HttpxOpenFoodFactsClient(OpenFoodFactsClient):
    """HTTPX-backed Open Food Facts client."""

    base_url: str
    user_agent: str
    countries: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15

    @classmethod
    def create(
        cls, base_url: str, user_agent: str, countries: str
    ) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            user_agent=user_agent,
            countries=countries,
            http_client=httpx.AsyncClient(),
        )

    async def get_product(self, code: str) -> dict[str, object] | None:
        """Fetch a product by barcode."""
        url = f"{self.base_url}/api/v2/product/{code}.json"
        response = await self.http_client.get(
            url,
            headers={"User-Agent": self.user_agent},
            timeout=self.timeout_seconds,
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        response.raise_for_status()
        return response.json()

    async def search_products(
        self, query: str, page: int, page_size: int
    ) -> dict[str, object]:
        """Search products by free text."""
        params = {
            "search_terms": query,
            "search_simple": "1",
            "action": "process",
            "json": "1",
            "page": str(page),
            "page_size": str(page_size),
            "sort_by": "unique_scans_n",
            "fields": SEARCH_FIELDS,
        }
        if self.countries:
            params["countries"] = self.countries
        response = await self.http_client.get(
            f"{self.base_url}/cgi/search.pl",
            params=params,
            headers={"User-Agent": self.user_agent},
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

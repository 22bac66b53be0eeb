"""Catalog service integrating Open Food Facts."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from nutric.adapters.off_client import OpenFoodFactsClient
from nutric.domain.records import CanonicalFoodRecord
from nutric.domain.search import CatalogPage
from nutric.services.cache import Cache
from nutric.services.normalizer import RawProduct, normalize

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

_logger = logging.getLogger(__name__)

_SUGGESTION_PAGE_SIZE = 10
_MAX_SUGGESTIONS = 5


class CatalogError(Exception):
    """Base error for catalog access."""


class CatalogUnavailableError(CatalogError):
    """Raised when the catalog cannot be reached after retries."""


@dataclass
class CatalogService:
    """Normalized, cached access to the external product catalog."""

    client: OpenFoodFactsClient
    cache: Cache
    regional_language: str = "es"
    secondary_language: str = "en"
    search_ttl_seconds: int = 3600
    product_ttl_seconds: int = 86400
    debug: bool = False
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def get_by_code(self, code: str) -> CanonicalFoodRecord | None:
        """Look up a single product by barcode.

        Returns None when the catalog does not know the code or the product
        has no usable name. Raises CatalogUnavailableError on transport
        failures so scanners can tell "unknown" apart from "unreachable".
        """
        cache_key = f"off:product:{code}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, CanonicalFoodRecord):
            return cached

        try:
            payload = await self._call_with_retry(
                lambda: self.client.get_product(code), action=f"get_product:{code}"
            )
        except Exception as exc:
            _logger.warning("Catalog lookup failed for code=%s: %s", code, exc)
            raise CatalogUnavailableError(str(exc)) from exc

        product = _product_from_envelope(payload)
        if product is None:
            if self.debug:
                _logger.info("Catalog product not found: code=%s", code)
            return None

        record = normalize(
            RawProduct.from_lookup(
                product,
                code,
                regional_language=self.regional_language,
                secondary_language=self.secondary_language,
            )
        )
        if record is not None:
            self.cache.set(cache_key, record, ttl_seconds=self.product_ttl_seconds)
        if self.debug:
            _logger.info("Catalog product: code=%s found=%s", code, record is not None)
        return record

    async def search_by_text(
        self, query: str, page: int = 1, page_size: int = 20
    ) -> CatalogPage:
        """Search the catalog, degrading to an empty page on any failure."""
        cache_key = f"off:search:{query.lower()}:{page}:{page_size}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, CatalogPage):
            return cached

        try:
            payload = await self._call_with_retry(
                lambda: self.client.search_products(query, page, page_size),
                action=f"search:{page}",
            )
        except Exception as exc:
            _logger.warning(
                "Catalog search failed: query=%s page=%s: %s", query, page, exc
            )
            return CatalogPage.empty(page)
        if not isinstance(payload, dict):
            return CatalogPage.empty(page)

        items = payload.get("products")
        records: list[CanonicalFoodRecord] = []
        for item in items if isinstance(items, list) else []:
            if not isinstance(item, dict):
                continue
            record = normalize(
                RawProduct.from_search_item(
                    item,
                    regional_language=self.regional_language,
                    secondary_language=self.secondary_language,
                )
            )
            if record is not None:
                records.append(record)

        result = CatalogPage(
            page=page,
            records=records[:page_size],
            reported_total_count=_to_int(payload.get("count")),
            reported_page_count=_to_int(payload.get("page_count"), default=1),
        )
        self.cache.set(cache_key, result, ttl_seconds=self.search_ttl_seconds)
        if self.debug:
            _logger.info(
                "Catalog search: query=%s page=%s results=%s total=%s",
                query,
                page,
                len(result.records),
                result.reported_total_count,
            )
        return result

    async def suggest_names(self, query: str) -> list[str]:
        """Return distinct product names for type-ahead suggestions."""
        page = await self.search_by_text(query, page=1, page_size=_SUGGESTION_PAGE_SIZE)
        names: list[str] = []
        for record in page.records:
            if record.name not in names:
                names.append(record.name)
        return names[:_MAX_SUGGESTIONS]

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object] | None]]", *, action: str
    ) -> dict[str, object] | None:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                status_code = _status_code_from_exception(exc)
                if self.debug:
                    _logger.warning(
                        "Catalog %s failed (attempt %s/%s, status=%s): %s",
                        action,
                        attempt,
                        self.retry_attempts + 1,
                        status_code,
                        exc,
                    )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _product_from_envelope(
    payload: dict[str, object] | None,
) -> dict[str, object] | None:
    if not payload or payload.get("status") != 1:
        return None
    product = payload.get("product")
    return product if isinstance(product, dict) and product else None


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


def _to_int(value: object, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int | float):
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return default

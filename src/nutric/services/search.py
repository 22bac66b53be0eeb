"""Search aggregation over the curated table and the external catalog."""

import logging
from dataclasses import dataclass, field
from uuid import UUID, uuid4

from nutric.domain.records import CanonicalFoodRecord
from nutric.domain.search import CatalogPage, SearchSession
from nutric.services.catalog import CatalogService
from nutric.services.local_foods import CuratedFoodRepository

_logger = logging.getLogger(__name__)

_LOCAL_SUGGESTIONS = 3
_MAX_SUGGESTIONS = 8
_POPULAR_PAGE_SIZE = 10


@dataclass
class SearchService:
    """Drives one SearchSession through new queries and "load more".

    Every remote request captures the session generation it was issued
    under. A response whose generation no longer matches belongs to a
    superseded query and is dropped without touching the session.
    """

    curated_repository: CuratedFoodRepository
    catalog_service: CatalogService
    page_size: int = 20
    min_query_length: int = 2
    catalog_enabled: bool = True

    async def search(
        self, session: SearchSession, query: str, *, is_new_query: bool = True
    ) -> SearchSession:
        """Run a query against both sources, or continue the current one."""
        trimmed = query.strip()
        if len(trimmed) < self.min_query_length:
            session.reset()
            return session

        if not is_new_query and trimmed == session.query:
            await self.load_more(session)
            return session

        generation = session.begin(trimmed)
        session.local_results = self._search_local(trimmed)
        session.total_count = len(session.local_results)
        await self._fetch_page(session, generation, trimmed, page=1)
        return session

    async def load_more(self, session: SearchSession) -> bool:
        """Fetch the next catalog page; returns False when not allowed."""
        if not session.query or not session.has_more_pages or session.is_loading:
            return False
        session.page += 1
        await self._fetch_page(
            session, session.generation, session.query, page=session.page
        )
        return True

    async def suggestions(self, query: str) -> list[str]:
        """Combine curated and catalog names for type-ahead."""
        trimmed = query.strip()
        if len(trimmed) < self.min_query_length:
            return []
        names = [
            record.name for record in self._search_local(trimmed)[:_LOCAL_SUGGESTIONS]
        ]
        if self.catalog_enabled:
            names.extend(await self.catalog_service.suggest_names(trimmed))
        unique: list[str] = []
        for name in names:
            if name not in unique:
                unique.append(name)
        return unique[:_MAX_SUGGESTIONS]

    async def popular_products(self) -> list[CanonicalFoodRecord]:
        """Return the first catalog page for an empty query."""
        if not self.catalog_enabled:
            return []
        page = await self.catalog_service.search_by_text(
            "", page=1, page_size=_POPULAR_PAGE_SIZE
        )
        return list(page.records)

    def _search_local(self, query: str) -> list[CanonicalFoodRecord]:
        try:
            results = self.curated_repository.search(query)
        except Exception:
            _logger.exception("Curated food search failed: query=%s", query)
            return []
        return results[: self.page_size]

    async def _fetch_page(
        self, session: SearchSession, generation: int, query: str, page: int
    ) -> None:
        if not self.catalog_enabled:
            return
        session.is_loading = True
        result = await self.catalog_service.search_by_text(
            query, page=page, page_size=self.page_size
        )
        if session.generation != generation:
            _logger.debug(
                "Discarding stale catalog page: query=%s page=%s generation=%s",
                query,
                page,
                generation,
            )
            return
        session.pending_pages[page] = result
        _apply_pending_pages(session)


def _apply_pending_pages(session: SearchSession) -> None:
    """Append buffered pages strictly in page order."""
    while session.applied_page + 1 in session.pending_pages:
        result: CatalogPage = session.pending_pages.pop(session.applied_page + 1)
        session.external_results.extend(result.records)
        session.has_more_pages = result.page < result.reported_page_count
        session.total_count = len(session.local_results) + result.reported_total_count
        session.applied_page = result.page
    session.is_loading = bool(session.pending_pages)


@dataclass
class SearchSessionRegistry:
    """Search sessions owned by HTTP clients, keyed by session id."""

    max_sessions: int = 1000
    _sessions: dict[UUID, SearchSession] = field(default_factory=dict)

    def create(self) -> tuple[UUID, SearchSession]:
        """Open an empty session, evicting the oldest one when full."""
        if len(self._sessions) >= self.max_sessions:
            oldest = next(iter(self._sessions))
            del self._sessions[oldest]
            _logger.info("Evicted search session: session_id=%s", oldest)
        session_id = uuid4()
        session = SearchSession()
        self._sessions[session_id] = session
        return session_id, session

    def get(self, session_id: UUID) -> SearchSession | None:
        return self._sessions.get(session_id)

    def discard(self, session_id: UUID) -> bool:
        """Drop a session; returns False when it was not registered."""
        return self._sessions.pop(session_id, None) is not None

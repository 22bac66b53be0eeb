"""Domain models for incremental food search."""

from dataclasses import dataclass, field

from nutric.domain.records import CanonicalFoodRecord


@dataclass(frozen=True)
class CatalogPage:
    """One normalized page of external catalog results."""

    page: int
    records: list[CanonicalFoodRecord]
    reported_total_count: int
    reported_page_count: int

    @classmethod
    def empty(cls, page: int) -> "CatalogPage":
        """Return the page used when a catalog search fails."""
        return cls(page=page, records=[], reported_total_count=0, reported_page_count=0)


@dataclass
class SearchSession:
    """Mutable state owned by one search surface for its active query."""

    query: str = ""
    page: int = 1
    local_results: list[CanonicalFoodRecord] = field(default_factory=list)
    external_results: list[CanonicalFoodRecord] = field(default_factory=list)
    has_more_pages: bool = False
    total_count: int = 0
    generation: int = 0
    is_loading: bool = False
    applied_page: int = 0
    pending_pages: dict[int, CatalogPage] = field(default_factory=dict)

    def begin(self, query: str) -> int:
        """Supersede the current query and return the new generation."""
        self.generation += 1
        self.query = query
        self.page = 1
        self.local_results = []
        self.external_results = []
        self.has_more_pages = False
        self.total_count = 0
        self.is_loading = False
        self.applied_page = 0
        self.pending_pages = {}
        return self.generation

    def reset(self) -> None:
        """Return to the empty session, invalidating in-flight requests."""
        self.begin("")

    @property
    def results(self) -> list[CanonicalFoodRecord]:
        """Curated results first, then catalog results in page order."""
        return [*self.local_results, *self.external_results]

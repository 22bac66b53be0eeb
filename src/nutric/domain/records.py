"""Canonical food record shared by every component."""

from dataclasses import asdict, dataclass, field
from enum import StrEnum

MAX_CATEGORIES = 5
NUTRI_SCORES = frozenset({"A", "B", "C", "D", "E"})


class Origin(StrEnum):
    """Where a food record comes from."""

    CURATED = "CURATED"
    EXTERNAL = "EXTERNAL"


@dataclass(frozen=True)
class CanonicalFoodRecord:
    """Fully resolved food, with nutrients expressed per 100 g."""

    name: str
    carbs_per_100: float
    protein_per_100: float
    calories_per_100: float
    glycemic_index: int | None
    origin: Origin
    density_g_per_ml: float | None = None
    external_id: str | None = None
    brand: str | None = None
    nutri_score: str | None = None
    image_url: str | None = None
    image_thumb_url: str | None = None
    categories: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_liquid(self) -> bool:
        """Return True when quantities should be entered in millilitres."""
        return self.density_g_per_ml is not None

    @property
    def needs_glycemic_confirmation(self) -> bool:
        """Catalog glycemic indexes are estimates and need user confirmation."""
        return self.origin == Origin.EXTERNAL

    def to_dict(self) -> dict[str, object]:
        """Serialize the record for snapshots and API payloads."""
        data = asdict(self)
        data["origin"] = self.origin.value
        data["categories"] = list(self.categories)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "CanonicalFoodRecord":
        """Rebuild a record from :meth:`to_dict` output."""
        density = data.get("density_g_per_ml")
        glycemic_index = data.get("glycemic_index")
        return cls(
            name=str(data["name"]),
            carbs_per_100=float(data.get("carbs_per_100", 0.0)),
            protein_per_100=float(data.get("protein_per_100", 0.0)),
            calories_per_100=float(data.get("calories_per_100", 0.0)),
            glycemic_index=(
                int(glycemic_index) if isinstance(glycemic_index, int | float) else None
            ),
            origin=Origin(str(data.get("origin", Origin.EXTERNAL.value))),
            density_g_per_ml=(
                float(density) if isinstance(density, int | float) else None
            ),
            external_id=_optional_str(data.get("external_id")),
            brand=_optional_str(data.get("brand")),
            nutri_score=_optional_str(data.get("nutri_score")),
            image_url=_optional_str(data.get("image_url")),
            image_thumb_url=_optional_str(data.get("image_thumb_url")),
            categories=tuple(
                str(category) for category in data.get("categories") or []
            )[:MAX_CATEGORIES],
        )


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    return str(value)

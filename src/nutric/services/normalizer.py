"""Normalization of Open Food Facts payloads into canonical records."""

import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from nutric.domain.records import (
    MAX_CATEGORIES,
    NUTRI_SCORES,
    CanonicalFoodRecord,
    Origin,
)
from nutric.domain.rounding import round_half_up, round_to_int
from nutric.services.estimation import estimate_density, estimate_glycemic_index

_logger = logging.getLogger(__name__)

_LANGUAGE_PREFIX = re.compile(r"^[a-z]{2,3}:")


@dataclass(frozen=True)
class RawProduct:
    """Catalog product payload, whatever endpoint it came from.

    Single barcode lookups return the product nested under ``product`` while
    the code lives on the envelope; search results carry the code inline. Both
    shapes share the same field names once unwrapped, so normalization runs on
    this one type.
    """

    fields: Mapping[str, object]
    code: str | None = None
    regional_language: str = "es"
    secondary_language: str = "en"
    nutriments: Mapping[str, object] = field(default_factory=dict)

    @classmethod
    def from_lookup(
        cls,
        product: Mapping[str, object],
        code: str,
        *,
        regional_language: str = "es",
        secondary_language: str = "en",
    ) -> "RawProduct":
        """Wrap the ``product`` object of a single barcode lookup."""
        return cls(
            fields=product,
            code=code or None,
            regional_language=regional_language,
            secondary_language=secondary_language,
            nutriments=_mapping(product.get("nutriments")),
        )

    @classmethod
    def from_search_item(
        cls,
        item: Mapping[str, object],
        *,
        regional_language: str = "es",
        secondary_language: str = "en",
    ) -> "RawProduct":
        """Wrap one element of a search result list."""
        code = item.get("code")
        return cls(
            fields=item,
            code=str(code) if code else None,
            regional_language=regional_language,
            secondary_language=secondary_language,
            nutriments=_mapping(item.get("nutriments")),
        )

    def text(self, key: str) -> str | None:
        """Return a stripped string field, treating blanks as missing."""
        value = self.fields.get(key)
        if not isinstance(value, str):
            return None
        stripped = value.strip()
        return stripped or None

    def nutrient(self, key: str) -> float:
        """Return a per-100 g nutrient, defaulting to 0."""
        return _to_non_negative_float(self.nutriments.get(key))

    def display_name(self) -> str | None:
        """Resolve the product name by language preference."""
        for key in (
            f"product_name_{self.regional_language}",
            "product_name",
            f"product_name_{self.secondary_language}",
        ):
            name = self.text(key)
            if name:
                return name
        return None


def normalize(raw: RawProduct) -> CanonicalFoodRecord | None:
    """Convert a raw catalog product into a canonical record.

    Returns None when no usable name is present; every other missing field
    degrades to 0 or None.
    """
    name = raw.display_name()
    if name is None:
        _logger.debug("Dropping catalog product without a name: code=%s", raw.code)
        return None

    carbs = raw.nutrient("carbohydrates_100g")
    calories = raw.nutrient("energy-kcal_100g")
    protein = raw.nutrient("proteins_100g")
    category_text = _category_text(raw)
    brand = _primary_brand(raw.text("brands"))

    return CanonicalFoodRecord(
        name=_qualified_name(name, brand),
        carbs_per_100=round_half_up(carbs, 1),
        protein_per_100=round_half_up(protein, 1),
        calories_per_100=round_to_int(calories),
        glycemic_index=estimate_glycemic_index(
            category_text,
            name,
            raw.nutrient("sugars_100g"),
            raw.nutrient("fiber_100g"),
            carbs,
        ),
        origin=Origin.EXTERNAL,
        density_g_per_ml=estimate_density(category_text, name),
        external_id=raw.code,
        brand=brand,
        nutri_score=_nutri_score(raw.text("nutrition_grades")),
        image_url=raw.text("image_front_url") or raw.text("image_url"),
        image_thumb_url=(
            raw.text("image_front_small_url")
            or raw.text("image_small_url")
            or raw.text("image_thumb_url")
        ),
        categories=_extract_categories(raw),
    )


def _qualified_name(name: str, brand: str | None) -> str:
    if not brand or brand.lower() in name.lower():
        return name
    return f"{name} ({brand})"


def _primary_brand(brands: str | None) -> str | None:
    if not brands:
        return None
    primary = brands.split(",")[0].strip()
    return primary or None


def _nutri_score(grade: str | None) -> str | None:
    if not grade:
        return None
    upper = grade.upper()
    return upper if upper in NUTRI_SCORES else None


def _category_text(raw: RawProduct) -> str:
    free_text = raw.text("categories")
    if free_text:
        return free_text.lower()
    return ", ".join(_tags(raw)).lower()


def _extract_categories(raw: RawProduct) -> tuple[str, ...]:
    tags = _tags(raw)
    if tags:
        cleaned = [_LANGUAGE_PREFIX.sub("", tag).replace("-", " ") for tag in tags]
        return tuple(cleaned[:MAX_CATEGORIES])
    free_text = raw.text("categories")
    if free_text:
        parts = [part.strip() for part in free_text.split(",")]
        return tuple(part for part in parts if part)[:MAX_CATEGORIES]
    return ()


def _tags(raw: RawProduct) -> list[str]:
    tags = raw.fields.get("categories_tags")
    if not isinstance(tags, list):
        return []
    return [tag for tag in tags if isinstance(tag, str) and tag]


def _mapping(value: object) -> Mapping[str, object]:
    return value if isinstance(value, Mapping) else {}


def _to_non_negative_float(value: object) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return 0.0
    else:
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number

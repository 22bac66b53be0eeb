"""Glycemic index and density estimates from catalog signals.

The catalog rarely carries a clinical glycemic index or a density, so both are
approximated from category text, name keywords and the sugar/fiber profile.
The rules below are evaluated in order and the first match wins; thresholds
are kept exactly as the clinical team defined them so results stay
reproducible across releases.
"""

from collections.abc import Callable
from dataclasses import dataclass

_BEVERAGES = ("beverages", "bebidas")
_FRUIT_BEVERAGE = ("fruit", "fruta")
_FRUITS = ("fruits", "frutas")
_VEGETABLES = ("vegetables", "verduras")
_DAIRY = ("dairy", "lácteos")
_CEREALS = ("cereals", "cereales", "bread", "pan")
_LEGUMES = ("legumes", "legumbres")
_NUTS = ("nuts", "frutos secos")
_SNACKS = ("snacks", "aperitivos")
_SWEETS = ("sweets", "dulces", "chocolate")

# Name keywords are Spanish because catalog searches run in the es product
# locale; English names only reach the liquid branch through category slugs.
_LIQUID_NAMES = ("zumo", "jugo", "refresco", "agua", "leche", "batido")

DENSITY_WATER = 1.0
DENSITY_MILK = 1.03
DENSITY_JUICE = 1.04
DENSITY_SODA = 1.04
DENSITY_LIQUID = 1.02
DENSITY_OIL = 0.91
DENSITY_HONEY = 1.4
DENSITY_SYRUP = 1.3


@dataclass(frozen=True)
class _Signals:
    categories: str
    name: str
    sugars: float
    fiber: float
    carbs: float

    def category(self, keywords: tuple[str, ...]) -> bool:
        return any(keyword in self.categories for keyword in keywords)

    def named(self, keyword: str) -> bool:
        return keyword in self.name


def _beverage(signals: _Signals) -> int | None:
    if not signals.category(_BEVERAGES):
        return None
    if signals.sugars >= 8:
        return 65
    if signals.category(_FRUIT_BEVERAGE):
        return 45
    return 25


def _fruit(signals: _Signals) -> int | None:
    if not (signals.category(_FRUITS) or signals.named("fruta")):
        return None
    return 55 if signals.sugars > 15 else 40


def _vegetable(signals: _Signals) -> int | None:
    if signals.category(_VEGETABLES) or signals.named("verdura"):
        return 15
    return None


def _dairy(signals: _Signals) -> int | None:
    if not (signals.category(_DAIRY) or signals.named("leche")):
        return None
    return 45 if signals.sugars > 8 else 30


def _cereal(signals: _Signals) -> int | None:
    if not signals.category(_CEREALS):
        return None
    if signals.fiber > 5:
        return 50
    if signals.sugars > 10:
        return 75
    return 65


def _legume(signals: _Signals) -> int | None:
    return 30 if signals.category(_LEGUMES) else None


def _nut(signals: _Signals) -> int | None:
    return 15 if signals.category(_NUTS) else None


def _snack(signals: _Signals) -> int | None:
    return 70 if signals.category(_SNACKS) else None


def _sweet(signals: _Signals) -> int | None:
    if signals.category(_SWEETS) or signals.sugars > 20:
        return 70
    return None


_CATEGORY_RULES: tuple[Callable[[_Signals], int | None], ...] = (
    _beverage,
    _fruit,
    _vegetable,
    _dairy,
    _cereal,
    _legume,
    _nut,
    _snack,
    _sweet,
)


def estimate_glycemic_index(
    categories: str,
    name: str,
    sugars_per_100: float,
    fiber_per_100: float,
    carbs_per_100: float,
) -> int:
    """Estimate a glycemic index in [0, 100] for a catalog product."""
    if carbs_per_100 < 1:
        return 0

    signals = _Signals(
        categories=categories.lower(),
        name=name.lower(),
        sugars=sugars_per_100,
        fiber=fiber_per_100,
        carbs=carbs_per_100,
    )
    for rule in _CATEGORY_RULES:
        value = rule(signals)
        if value is not None:
            return value
    return _estimate_from_composition(signals)


def _estimate_from_composition(signals: _Signals) -> int:
    if signals.fiber > 0:
        ratio = signals.sugars / signals.fiber
        if ratio < 2:
            return 40
        if ratio > 10:
            return 65

    sugar_percentage = signals.sugars / signals.carbs * 100
    if sugar_percentage > 80:
        return 70
    if sugar_percentage > 50:
        return 60
    if sugar_percentage < 20:
        return 45
    return 55


def estimate_density(categories: str, name: str) -> float | None:
    """Return a density in g/ml for liquids, or None for solid foods."""
    categories = categories.lower()
    name = name.lower()

    if any(keyword in categories for keyword in _BEVERAGES) or any(
        keyword in name for keyword in _LIQUID_NAMES
    ):
        if "leche" in name:
            return DENSITY_MILK
        if "fruit-juices" in categories or "zumo" in name:
            return DENSITY_JUICE
        if "sodas" in categories or "refresco" in name:
            return DENSITY_SODA
        if "agua" in name:
            return DENSITY_WATER
        return DENSITY_LIQUID

    if "oils" in categories or "aceite" in name:
        return DENSITY_OIL
    if "honey" in categories or "miel" in name:
        return DENSITY_HONEY
    if "syrups" in categories or "sirope" in name:
        return DENSITY_SYRUP
    return None

"""Tests for glycemic index and density heuristics."""

import pytest

from nutric.services.estimation import (
    DENSITY_HONEY,
    DENSITY_JUICE,
    DENSITY_LIQUID,
    DENSITY_MILK,
    DENSITY_OIL,
    DENSITY_SODA,
    DENSITY_SYRUP,
    DENSITY_WATER,
    estimate_density,
    estimate_glycemic_index,
)


def test_low_carb_foods_have_zero_glycemic_index() -> None:
    assert estimate_glycemic_index("sweets", "chocolate", 50, 0, 0.9) == 0
    assert estimate_glycemic_index("beverages", "refresco", 10, 0, 0) == 0


def test_whole_grain_bread_with_fiber() -> None:
    assert estimate_glycemic_index("cereals", "pan integral", 5, 6, 50) == 50


def test_snacks_category() -> None:
    assert estimate_glycemic_index("snacks", "papas fritas", 1, 1, 40) == 70


@pytest.mark.parametrize(
    ("categories", "name", "sugars", "expected"),
    [
        ("beverages, sodas", "cola", 10.6, 65),
        ("beverages", "bebida", 8, 65),
        ("bebidas, fruit juices", "nectar", 7.9, 45),
        ("beverages", "agua con gas", 0, 25),
    ],
)
def test_beverage_rule(
    categories: str, name: str, sugars: float, expected: int
) -> None:
    assert estimate_glycemic_index(categories, name, sugars, 0, 12) == expected


def test_fruit_rule_uses_category_or_name() -> None:
    assert estimate_glycemic_index("frutas", "mango", 16, 1, 17) == 55
    assert estimate_glycemic_index("", "fruta deshidratada", 15, 1, 17) == 40


def test_vegetable_and_dairy_rules() -> None:
    assert estimate_glycemic_index("verduras", "zanahoria", 5, 3, 8) == 15
    assert estimate_glycemic_index("dairy", "yogur", 9, 0, 10) == 45
    assert estimate_glycemic_index("", "leche entera", 4.7, 0, 4.7) == 30


def test_cereal_rule_thresholds() -> None:
    assert estimate_glycemic_index("cereales", "copos", 11, 3, 70) == 75
    assert estimate_glycemic_index("bread", "baguette", 3, 2, 55) == 65


def test_legumes_nuts_and_sweets() -> None:
    assert estimate_glycemic_index("legumbres", "lentejas", 1, 8, 20) == 30
    assert estimate_glycemic_index("frutos secos", "almendras", 4, 12, 9) == 15
    assert estimate_glycemic_index("dulces", "gominolas", 2, 0, 70) == 70
    assert estimate_glycemic_index("", "mermelada", 21, 0, 60) == 70


def test_first_matching_rule_wins() -> None:
    # Beverages precede dairy even for milk drinks.
    assert estimate_glycemic_index("beverages, dairy", "batido", 2, 0, 5) == 25


@pytest.mark.parametrize(
    ("categories", "name", "sugars", "fiber", "carbs", "expected"),
    [
        ("dairy", "yogur", 8, 0, 10, 30),
        ("cereales", "copos", 10, 5, 70, 65),
        ("frutas", "mango", 15, 1, 17, 40),
        ("", "producto", 20, 0, 40, 55),
    ],
)
def test_category_thresholds_are_strict(
    categories: str, name: str, sugars: float, fiber: float, carbs: float, expected: int
) -> None:
    assert estimate_glycemic_index(categories, name, sugars, fiber, carbs) == expected


@pytest.mark.parametrize(
    ("sugars", "fiber", "carbs", "expected"),
    [
        (3, 2, 30, 40),
        (11, 1, 30, 65),
        (9, 0, 10, 70),
        (6, 0, 10, 60),
        (1, 0, 10, 45),
        (4, 0, 10, 55),
        (6, 2, 10, 60),
        (4, 2, 10, 55),
        (10, 1, 40, 55),
        (8, 0, 10, 60),
        (5, 0, 10, 55),
        (2, 0, 10, 55),
    ],
)
def test_composition_fallback(
    sugars: float, fiber: float, carbs: float, expected: int
) -> None:
    assert estimate_glycemic_index("", "producto", sugars, fiber, carbs) == expected


@pytest.mark.parametrize(
    ("categories", "name", "expected"),
    [
        ("beverages", "leche semidesnatada", DENSITY_MILK),
        ("beverages, fruit-juices", "nectar", DENSITY_JUICE),
        ("", "zumo de naranja", DENSITY_JUICE),
        ("beverages, sodas", "cola", DENSITY_SODA),
        ("", "agua mineral", DENSITY_WATER),
        ("bebidas", "bebida isotonica", DENSITY_LIQUID),
        ("oils", "aceite de oliva", DENSITY_OIL),
        ("", "miel de flores", DENSITY_HONEY),
        ("syrups", "sirope de agave", DENSITY_SYRUP),
        ("cereals", "pan", None),
        ("beverages", "agua", DENSITY_WATER),
        ("beverages", "mineral water", DENSITY_LIQUID),
        ("milks", "whole milk", None),
    ],
)
def test_estimate_density(categories: str, name: str, expected: float | None) -> None:
    assert estimate_density(categories, name) == expected

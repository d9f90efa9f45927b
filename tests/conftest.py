"""
doughplan Test Configuration and Fixtures

Provides recipe fixtures shared by the unit and integration suites, and
isolates tests from any config file or environment on the host.
"""

import pytest
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from doughplan.bootstrap.config import EngineConfig, reset_config
from doughplan.core.enums import IngredientCategory, PrefermentType
from doughplan.core.models import Ingredient, PrefermentSettings, Recipe


def ing(
    ing_id: str,
    name: str,
    category: IngredientCategory,
    qty: float,
    pcts: Optional[Dict[str, float]] = None,
    **extra: Any,
) -> Ingredient:
    """
    Shorthand Ingredient builder for tests.

    Usage:
        ing("flour", "Bread Flour", IngredientCategory.FLOUR, 1000)
        ing("water", "Water", IngredientCategory.LIQUID, 700, {"pf": 100})
    """
    return Ingredient(
        id=ing_id,
        name=name,
        category=category,
        base_qty=qty,
        preferment_bakers_pcts=dict(pcts or {}),
        **extra,
    )


def preferment(
    pf_id: str,
    name: str,
    qty: float,
    pf_type: PrefermentType = PrefermentType.CUSTOM,
    pcts: Optional[Dict[str, float]] = None,
    enabled: bool = True,
    **settings: Any,
) -> Ingredient:
    """PREFERMENT ingredient with explicit settings."""
    return Ingredient(
        id=pf_id,
        name=name,
        category=IngredientCategory.PREFERMENT,
        base_qty=qty,
        preferment_bakers_pcts=dict(pcts or {}),
        preferment_settings=PrefermentSettings(enabled=enabled, type=pf_type, **settings),
    )


def recipe_of(ingredients: Iterable[Ingredient], **fields: Any) -> Recipe:
    """Recipe with test defaults around the given ingredients."""
    fields.setdefault("id", "r1")
    fields.setdefault("name", "Test Recipe")
    return Recipe(ingredients=tuple(ingredients), **fields)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Drop cached configuration and DOUGHPLAN_* variables around each test."""
    import os

    for key in list(os.environ):
        if key.startswith("DOUGHPLAN_"):
            monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def engine_config():
    """Default engine configuration."""
    return EngineConfig()


@pytest.fixture
def lean_ingredients():
    """Straight lean dough: 70% hydration, 2% salt, 0.3% yeast."""
    return [
        ing("flour", "Bread Flour", IngredientCategory.FLOUR, 1000),
        ing("water", "Water", IngredientCategory.LIQUID, 700),
        ing("salt", "Salt", IngredientCategory.SEASONING, 20),
        ing("yeast", "Instant Yeast", IngredientCategory.LEAVENING, 3),
    ]


@pytest.fixture
def lean_recipe(lean_ingredients):
    """Lean recipe with 900 g pieces and no losses."""
    return recipe_of(lean_ingredients, yield_per_piece=900)


@pytest.fixture
def poolish_recipe():
    """
    Recipe with a 400 g poolish of equal flour and water.

    Flour and water each declare 100% into the poolish, so the poolish
    holds 200 g of each.
    """
    return recipe_of(
        [
            ing("flour", "Bread Flour", IngredientCategory.FLOUR, 800, {"poolish": 100}),
            ing("water", "Water", IngredientCategory.LIQUID, 500, {"poolish": 100}),
            ing("salt", "Salt", IngredientCategory.SEASONING, 20),
            ing("yeast", "Instant Yeast", IngredientCategory.LEAVENING, 2),
            preferment("poolish", "Poolish", 400, PrefermentType.POOLISH),
        ],
        yield_per_piece=500,
    )


@pytest.fixture
def nested_recipe():
    """
    Levain built from a seed starter.

    The seed starter (100 g, equal flour/water) goes into the levain at
    20%; the levain (300 g) goes into the final dough.
    """
    return recipe_of(
        [
            ing("flour", "Bread Flour", IngredientCategory.FLOUR, 900, {"levain": 100, "seed": 100}),
            ing("water", "Water", IngredientCategory.LIQUID, 650, {"levain": 80, "seed": 100}),
            ing("salt", "Salt", IngredientCategory.SEASONING, 20),
            preferment("seed", "Seed Starter", 100, PrefermentType.LEVAIN, {"levain": 20}),
            preferment("levain", "Levain", 300, PrefermentType.LEVAIN),
        ],
        yield_per_piece=800,
    )


@pytest.fixture
def anchor():
    """Fixed anchor time for timeline tests."""
    return datetime(2026, 3, 14, 8, 0)

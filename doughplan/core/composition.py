"""
core/composition.py - Proportional preferment composition.

A preferment's mass is split over its contributors in proportion to the
baker's percentages they declare into it:

    contributor_qty = (P.mass / sum of declared % into P) * contributor %

Shared by the percentage engine and the mixing classifier so both read
the same internal composition.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence

from .constants import PF_SEED_BAKERS_PCT
from .enums import IngredientCategory
from .models import Ingredient


def declared_pct_total(preferment_id: str, ingredients: Iterable[Ingredient]) -> float:
    """Sum of positive baker's percentages declared into a preferment."""
    return sum(ing.contribution_to(preferment_id) for ing in ingredients)


def preferment_breakdown(preferment: Ingredient, ingredients: Sequence[Ingredient]) -> Dict[str, float]:
    """
    Grams of each contributor inside a preferment.

    Returns an empty mapping for a disabled or zero-mass preferment, or one
    whose declared percentages sum to zero.
    """
    if not preferment.is_enabled_preferment or not preferment.base_qty:
        return {}

    total_pct = declared_pct_total(preferment.id, ingredients)
    if total_pct <= 0:
        return {}

    unit = preferment.base_qty / total_pct
    breakdown: Dict[str, float] = {}
    for ing in ingredients:
        pct = ing.contribution_to(preferment.id)
        if pct > 0:
            breakdown[ing.id] = unit * pct
    return breakdown


def qty_in_preferment(ingredient: Ingredient, preferment: Ingredient, ingredients: Sequence[Ingredient]) -> float:
    """Grams of one ingredient inside a preferment (0 when it declares nothing)."""
    pct = ingredient.contribution_to(preferment.id)
    if pct <= 0 or not preferment.base_qty:
        return 0.0
    total_pct = declared_pct_total(preferment.id, ingredients)
    if total_pct <= 0:
        return 0.0
    return preferment.base_qty / total_pct * pct


def self_inoculation_qty(preferment: Ingredient, ingredients: Sequence[Ingredient]) -> float:
    """Grams of a preferment's own carry-over inside itself."""
    pct = preferment.self_inoculation_pct
    if pct <= 0 or not preferment.is_enabled_preferment or not preferment.base_qty:
        return 0.0
    total_pct = declared_pct_total(preferment.id, ingredients)
    if total_pct <= 0:
        return 0.0
    return preferment.base_qty / total_pct * pct


def category_qty_in_preferment(
    preferment: Ingredient,
    ingredients: Sequence[Ingredient],
    category: IngredientCategory,
) -> Optional[float]:
    """
    Grams of one category inside a preferment.

    Returns None when the preferment has no mass or no percentage data,
    so callers can tell "no data" apart from "none of this category".
    """
    if not preferment.base_qty:
        return None

    total_pct = 0.0
    category_pct = 0.0
    for ing in ingredients:
        pct = ing.contribution_to(preferment.id)
        if pct > 0:
            total_pct += pct
            if ing.category == category:
                category_pct += pct

    if total_pct <= 0:
        return None
    return preferment.base_qty / total_pct * category_pct


def seed_preferment_pcts(preferment: Ingredient, ingredients: Sequence[Ingredient]) -> List[Ingredient]:
    """
    Default baker's percentages for a newly added preferment.

    The first ingredient of each category in PF_SEED_BAKERS_PCT for the
    preferment's type declares the seed percentage into it, unless it
    already declares one. Other ingredients are returned unchanged.

    Args:
        preferment: The PREFERMENT ingredient being added
        ingredients: Current recipe ingredients

    Returns:
        New ingredient list in the same order
    """
    seeds = PF_SEED_BAKERS_PCT.get(preferment.settings.type, {})
    seeded: List[Ingredient] = []
    pending = dict(seeds)
    for ing in ingredients:
        fraction = pending.pop(ing.category, None)
        if fraction is not None and not ing.is_preferment and ing.contribution_to(preferment.id) <= 0:
            pcts = dict(ing.preferment_bakers_pcts)
            pcts[preferment.id] = round(fraction * 100, 6)
            ing = replace(ing, preferment_bakers_pcts=pcts)
        seeded.append(ing)
    return seeded

"""
mixing/classifier.py - Mixing phase classification.

Phase order: AUTOLYSE -> INCORPORATION -> FAT_ADDITION -> MIXIN.

Classification runs in two passes. The initial cascade looks at each
ingredient on its own (category, name heuristics, baker's percentage of
raw flour). The refinement pass revisits liquid preferments left at
AUTOLYSE using whole-formula totals, i.e. flour and water counted
including what sits inside enabled preferments.
"""

from __future__ import annotations
import logging
from typing import Dict, List, Mapping, Optional, Sequence

from ..core.composition import category_qty_in_preferment, qty_in_preferment
from ..core.constants import (
    ENRICHMENT_INCORPORATION_MAX,
    LEVAIN_HIGH_HYDRATION,
    LEVAIN_HIGH_INOCULATION,
    LEVAIN_LOW_INOCULATION,
    LEVAIN_LOW_WATER_RATIO,
    LEVAIN_STIFF_HYDRATION,
    LEVAIN_WHOLE_WHEAT_MAX,
    POOLISH_WATER_THRESHOLD,
    RYE_AUTOLYSE_THRESHOLD,
    SWEETENER_INCORPORATION_MAX,
)
from ..core.enums import IngredientCategory, MixingPhase, PrefermentType
from ..core.models import Ingredient
from ..errors import create_rye_autolyse_warning
from ..utils import safe_divide
from .models import AutolyseSplit, Classification, SplitItem
from .patterns import is_egg, is_oil, is_rye, is_whole_wheat

logger = logging.getLogger(__name__)

LIQUID_PREFERMENT_TYPES = (PrefermentType.POOLISH, PrefermentType.LEVAIN)

INCORPORATION_CATEGORIES = (
    IngredientCategory.LEAVENING,
    IngredientCategory.SEASONING,
    IngredientCategory.FLAVORING,
    IngredientCategory.CONDITIONER,
)


def classify_ingredient(ingredient: Ingredient, total_flour_qty: float) -> Optional[MixingPhase]:
    """
    Initial phase for a single ingredient.

    Args:
        ingredient: Ingredient to classify
        total_flour_qty: Raw (base-mass) flour total for percentage thresholds

    Returns:
        MixingPhase, or None when the ingredient is skipped (zero mass or
        disabled preferment)
    """
    category = ingredient.category

    if not ingredient.base_qty:
        return None
    if category == IngredientCategory.PREFERMENT and not ingredient.settings.enabled:
        return None

    if category in (IngredientCategory.FLOUR, IngredientCategory.LIQUID):
        return MixingPhase.AUTOLYSE
    if category == IngredientCategory.PREFERMENT and ingredient.settings.type in LIQUID_PREFERMENT_TYPES:
        return MixingPhase.AUTOLYSE
    if category == IngredientCategory.MIXIN:
        return MixingPhase.MIXIN

    # Name heuristics win over category and percentage
    if is_egg(ingredient.name):
        return MixingPhase.INCORPORATION
    if is_oil(ingredient.name):
        return MixingPhase.INCORPORATION

    if category == IngredientCategory.PREFERMENT:
        return MixingPhase.INCORPORATION
    if category in INCORPORATION_CATEGORIES:
        return MixingPhase.INCORPORATION

    if category == IngredientCategory.ENRICHMENT:
        bp = safe_divide(ingredient.base_qty, total_flour_qty)
        if bp <= ENRICHMENT_INCORPORATION_MAX:
            return MixingPhase.INCORPORATION
        return MixingPhase.FAT_ADDITION

    if category == IngredientCategory.SWEETENER:
        bp = safe_divide(ingredient.base_qty, total_flour_qty)
        if bp <= SWEETENER_INCORPORATION_MAX:
            return MixingPhase.INCORPORATION
        return MixingPhase.FAT_ADDITION

    return MixingPhase.INCORPORATION


class _FormulaTotals:
    """Whole-formula flour and water totals used by the refinement pass."""

    def __init__(self, ingredients: Sequence[Ingredient]):
        enabled_pfs = [i for i in ingredients if i.is_enabled_preferment and (i.base_qty or 0) > 0]

        self.flour = 0.0
        self.rye = 0.0
        self.whole_wheat = 0.0
        for flour in ingredients:
            if flour.category != IngredientCategory.FLOUR:
                continue
            tfq = flour.base_qty or 0
            for pf in enabled_pfs:
                tfq += qty_in_preferment(flour, pf, ingredients)
            self.flour += tfq
            if is_rye(flour.name):
                self.rye += tfq
            if is_whole_wheat(flour.name):
                self.whole_wheat += tfq

        water = sum(i.base_qty or 0 for i in ingredients if i.category == IngredientCategory.LIQUID)
        for pf in enabled_pfs:
            pf_water = category_qty_in_preferment(pf, ingredients, IngredientCategory.LIQUID)
            if pf_water is not None:
                water += pf_water
        self.water = water

    @property
    def hydration(self) -> float:
        return safe_divide(self.water, self.flour)

    @property
    def rye_pct(self) -> float:
        return safe_divide(self.rye, self.flour)

    @property
    def whole_wheat_pct(self) -> float:
        return safe_divide(self.whole_wheat, self.flour)


def _levain_phase(levain: Ingredient, ingredients: Sequence[Ingredient], totals: _FormulaTotals) -> MixingPhase:
    """Sourdough decision matrix for a levain currently at AUTOLYSE."""
    flour = category_qty_in_preferment(levain, ingredients, IngredientCategory.FLOUR)
    water = category_qty_in_preferment(levain, ingredients, IngredientCategory.LIQUID)

    # No percentage data: keep the default
    if flour is None and water is None:
        return MixingPhase.AUTOLYSE

    flour = flour or 0.0
    water = water or 0.0
    hydration = water / flour if flour > 0 else None
    inoculation = safe_divide(flour, totals.flour)
    water_ratio = safe_divide(water, totals.water)

    # stiff levain
    if hydration is not None and hydration < LEVAIN_STIFF_HYDRATION:
        return MixingPhase.INCORPORATION
    if totals.whole_wheat_pct > LEVAIN_WHOLE_WHEAT_MAX:
        return MixingPhase.INCORPORATION
    if inoculation >= LEVAIN_HIGH_INOCULATION:
        return MixingPhase.AUTOLYSE
    if inoculation < LEVAIN_LOW_INOCULATION and water_ratio < LEVAIN_LOW_WATER_RATIO:
        return MixingPhase.INCORPORATION
    # gray zone: decided by overall dough hydration
    if totals.hydration >= LEVAIN_HIGH_HYDRATION:
        return MixingPhase.AUTOLYSE
    return MixingPhase.INCORPORATION


def classify(ingredients: Sequence[Ingredient]) -> Classification:
    """
    Classify every ingredient of a recipe into a mixing phase.

    Skipped ingredients (zero mass, disabled preferments) are absent from
    the phase map.

    Args:
        ingredients: Recipe ingredients

    Returns:
        Classification with the phase map and advisories
    """
    ingredients = list(ingredients or [])

    # Raw flour drives the per-ingredient enrichment/sweetener thresholds
    raw_flour = sum(i.base_qty or 0 for i in ingredients if i.category == IngredientCategory.FLOUR)

    result = Classification()
    for ing in ingredients:
        phase = classify_ingredient(ing, raw_flour)
        if phase is not None:
            result.phases[ing.id] = phase

    totals = _FormulaTotals(ingredients)

    liquid_pfs = [
        i for i in ingredients
        if i.category == IngredientCategory.PREFERMENT
        and result.phases.get(i.id) == MixingPhase.AUTOLYSE
    ]
    for pf in liquid_pfs:
        pf_type = pf.settings.type
        if pf_type == PrefermentType.POOLISH:
            if totals.water > 0:
                water = category_qty_in_preferment(pf, ingredients, IngredientCategory.LIQUID)
                if water is not None and water / totals.water < POOLISH_WATER_THRESHOLD:
                    result.phases[pf.id] = MixingPhase.INCORPORATION
        elif pf_type == PrefermentType.LEVAIN:
            result.phases[pf.id] = _levain_phase(pf, ingredients, totals)

        if result.phases[pf.id] != MixingPhase.AUTOLYSE:
            logger.debug(f"Preferment {pf.id} ({pf_type.value}) moved to {result.phases[pf.id].name}")

    if totals.rye_pct > RYE_AUTOLYSE_THRESHOLD and MixingPhase.AUTOLYSE in result.phases.values():
        result.warnings.append(create_rye_autolyse_warning())

    return result


def apply_autolyse_overrides(
    phases: Mapping[str, MixingPhase],
    overrides: Optional[Mapping[str, str]],
) -> Dict[str, MixingPhase]:
    """
    Apply baker overrides to a phase map.

    An override only moves an ingredient between AUTOLYSE and
    INCORPORATION; fat-addition and mix-in ingredients keep their phase.
    """
    resolved = dict(phases)
    for ing_id, target in (overrides or {}).items():
        current = resolved.get(ing_id)
        if target == "autolyse" and current == MixingPhase.INCORPORATION:
            resolved[ing_id] = MixingPhase.AUTOLYSE
        elif target == "final" and current == MixingPhase.AUTOLYSE:
            resolved[ing_id] = MixingPhase.INCORPORATION
    return resolved


def group_by_phase(
    ingredients: Sequence[Ingredient],
    phases: Mapping[str, MixingPhase],
) -> Dict[MixingPhase, List[Ingredient]]:
    """
    Partition ingredients by resolved phase.

    Only phases with at least one ingredient appear, in phase order;
    ingredients keep their recipe order within a group.
    """
    groups: Dict[MixingPhase, List[Ingredient]] = {}
    for phase in MixingPhase:
        members = [ing for ing in ingredients if phases.get(ing.id) == phase]
        if members:
            groups[phase] = members
    return groups


def autolyse_split(
    ingredients: Sequence[Ingredient],
    final_dough_qtys: Mapping[str, float],
    duration_min: float = 20,
    overrides: Optional[Mapping[str, str]] = None,
    classification: Optional[Classification] = None,
) -> AutolyseSplit:
    """
    Split final-dough ingredients into autolyse and final-mix lists.

    Every classified ingredient with a positive final-dough quantity lands
    in exactly one list. Overrides resolve through apply_autolyse_overrides,
    as in the step generator.

    Args:
        ingredients: Recipe ingredients
        final_dough_qtys: Final-dough grams per ingredient id
        duration_min: Autolyse rest duration
        overrides: ingredient id -> "autolyse" | "final"
        classification: Precomputed classification (computed when omitted)
    """
    if classification is None:
        classification = classify(ingredients)
    phases = apply_autolyse_overrides(classification.phases, overrides)

    split = AutolyseSplit(autolyse_duration_min=duration_min)
    for ing in ingredients:
        fdq = final_dough_qtys.get(ing.id) or 0.0
        if fdq <= 0:
            continue
        phase = phases.get(ing.id)
        if phase is None:
            continue

        item = SplitItem(id=ing.id, name=ing.name, qty=fdq)
        if phase == MixingPhase.AUTOLYSE:
            split.autolyse_ingredients.append(item)
        else:
            split.final_mix_ingredients.append(item)

    return split

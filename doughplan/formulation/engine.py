"""
formulation/engine.py - Baker's percentage engine.

Three mass views per ingredient:
- total formula quantity (TFQ): everything in the formula, including mass
  locked inside preferments; 0 for PREFERMENT rows
- final dough quantity: what goes into the final mix; PREFERMENT rows are
  pinned to their own mass
- preferment breakdown: a preferment's mass split over its contributors

The calculation is pure: no I/O, no state between calls, and no exception
for a structurally valid recipe. Every division has a defined fallback.
"""

from __future__ import annotations
import logging
from typing import Dict, List, Mapping, Optional, Sequence

from ..bootstrap.config import EngineConfig, get_config
from ..core.composition import preferment_breakdown, self_inoculation_qty
from ..core.enums import IngredientCategory
from ..core.models import Ingredient, Recipe
from ..errors import EngineWarning, create_cycle_warning, create_unknown_reference_warning
from ..mixing.classifier import autolyse_split, classify
from ..production.dag import PrefermentDAG, resolve_preferment_dag
from ..utils import safe_divide
from .models import CalculatedIngredient, CalculationResult, FormulaTotals, PrefermentSummary

logger = logging.getLogger(__name__)


def calc_adjusted_yield(desired: float, process_loss: float, bake_loss: float) -> float:
    """
    Raw dough weight per piece needed to end at the desired finished weight.

    Falls back to the desired yield when the loss fractions leave nothing.
    """
    denom = (1 - process_loss) * (1 - bake_loss)
    if denom <= 0:
        return desired
    return desired / denom


def _correct_self_reference(
    preferments: Sequence[Ingredient],
    ingredients: Sequence[Ingredient],
    tfq: Dict[str, float],
) -> None:
    """Spread each preferment's self-inoculation over its non-preferment contributors."""
    for pf in preferments:
        self_qty = self_inoculation_qty(pf, ingredients)
        if self_qty <= 0:
            continue

        contributors = [
            (ing.id, ing.contribution_to(pf.id))
            for ing in ingredients
            if ing.id != pf.id
            and ing.category != IngredientCategory.PREFERMENT
            and ing.contribution_to(pf.id) > 0
        ]
        total_pct = sum(pct for _, pct in contributors)
        if total_pct <= 0:
            continue
        for ing_id, pct in contributors:
            tfq[ing_id] += self_qty * (pct / total_pct)


def _resolve_nested(
    dag: PrefermentDAG,
    ingredients: Sequence[Ingredient],
    breakdowns: Mapping[str, Dict[str, float]],
    tfq: Dict[str, float],
) -> None:
    """
    Decompose preferment mass held inside preferments into TFQ.

    Each enabled preferment carries an embedded mass: its share inside
    other preferments plus its self-inoculation. Preferments are visited
    dependents-first, so mass handed down from an outer preferment is known
    before the inner one is decomposed. Embedded mass is split over the
    preferment's other contributors; plain ingredients receive TFQ and
    nested preferments pass it further down.
    """
    by_id = {ing.id: ing for ing in ingredients}
    embedded: Dict[str, float] = {
        pf_id: self_inoculation_qty(by_id[pf_id], ingredients) for pf_id in dag.graph.nodes
    }
    for holder_id, breakdown in breakdowns.items():
        for ing_id, qty in breakdown.items():
            if ing_id in embedded and ing_id != holder_id:
                embedded[ing_id] += qty

    # cyclic nodes sit downstream of every resolved node; visit them first
    visit = list(dag.unresolved) + list(reversed(dag.order))
    visited = set()

    for pf_id in visit:
        visited.add(pf_id)
        mass = embedded[pf_id]
        if mass <= 0:
            continue

        contributors = [
            (ing, ing.contribution_to(pf_id))
            for ing in ingredients
            if ing.id != pf_id and ing.contribution_to(pf_id) > 0
        ]
        total_pct = sum(pct for _, pct in contributors)
        if total_pct <= 0:
            continue

        for ing, pct in contributors:
            share = mass * pct / total_pct
            if ing.category != IngredientCategory.PREFERMENT:
                tfq[ing.id] += share
            elif ing.id in embedded and ing.id not in visited:
                embedded[ing.id] += share


def _unknown_references(
    ingredients: Sequence[Ingredient],
    preferment_ids: set,
) -> List[EngineWarning]:
    warnings = []
    for ing in ingredients:
        for pf_id, pct in ing.preferment_bakers_pcts.items():
            if pct and pct > 0 and pf_id not in preferment_ids:
                logger.warning(f"Ingredient {ing.id} references unknown preferment {pf_id}")
                warnings.append(create_unknown_reference_warning(ing.id, pf_id))
    return warnings


def calculate(recipe, config: Optional[EngineConfig] = None) -> CalculationResult:
    """
    Calculate all derived values for a recipe.

    Args:
        recipe: Recipe (or a plain dict accepted by Recipe.from_dict)
        config: EngineConfig; defaults to the loaded configuration

    Returns:
        CalculationResult
    """
    if isinstance(recipe, Mapping):
        recipe = Recipe.from_dict(recipe)
    if config is None:
        config = get_config().engine

    ingredients = list(recipe.ingredients)
    base_cat = recipe.base_ingredient_category
    preferments = [i for i in ingredients if i.category == IngredientCategory.PREFERMENT]
    base_ingredients = [i for i in ingredients if i.category == base_cat]
    base_qty = sum(i.base_qty for i in base_ingredients)

    # Breakdowns in input order; disabled or empty preferments give {}
    breakdowns: Dict[str, Dict[str, float]] = {
        pf.id: preferment_breakdown(pf, ingredients) for pf in preferments
    }

    tfq: Dict[str, float] = {}
    fdq: Dict[str, float] = {}
    for ing in ingredients:
        if ing.category == IngredientCategory.PREFERMENT:
            tfq[ing.id] = 0.0
            fdq[ing.id] = ing.base_qty
            continue
        in_preferments = sum(breakdowns[pf.id].get(ing.id, 0.0) for pf in preferments)
        tfq[ing.id] = ing.base_qty + in_preferments
        enabled_share = sum(
            breakdowns[pf.id].get(ing.id, 0.0) for pf in preferments if pf.settings.enabled
        )
        # TFQ is taken before self-reference correction
        fdq[ing.id] = max(0.0, tfq[ing.id] - enabled_share)

    dag = resolve_preferment_dag(preferments)
    if config.resolve_nested_preferments:
        _resolve_nested(dag, ingredients, breakdowns, tfq)
    else:
        _correct_self_reference(preferments, ingredients, tfq)

    total_formula_base = sum(tfq[i.id] for i in base_ingredients)
    final_dough_base = sum(fdq[i.id] for i in base_ingredients)
    total_final_dough_weight = sum(fdq[i.id] for i in ingredients)
    total_recipe_weight = sum(i.base_qty for i in ingredients)

    process_loss = recipe.process_loss_pct or 0.0
    bake_loss = recipe.bake_loss_pct or 0.0
    raw_yield = calc_adjusted_yield(recipe.yield_per_piece, process_loss, bake_loss)
    scale_factor = safe_divide(raw_yield, recipe.yield_per_piece, 1.0)
    num_pieces = safe_divide(total_recipe_weight, raw_yield)

    calculated: List[CalculatedIngredient] = []
    for ing in ingredients:
        if ing.category == base_cat:
            final_dough_pct = safe_divide(ing.base_qty, base_qty)
        else:
            final_dough_pct = safe_divide(ing.base_qty, final_dough_base)
        per_item = safe_divide(fdq[ing.id] * raw_yield, total_final_dough_weight)

        calculated.append(CalculatedIngredient(
            id=ing.id,
            name=ing.name,
            category=ing.category,
            base_qty=ing.base_qty,
            sort_order=ing.sort_order,
            overall_bakers_pct=safe_divide(tfq[ing.id], total_formula_base),
            total_formula_qty=tfq[ing.id],
            final_dough_bakers_pct=final_dough_pct,
            final_dough_qty=fdq[ing.id],
            per_item_weight=per_item,
            batch_qty=per_item * num_pieces,
            preferment_qtys={pf.id: breakdowns[pf.id].get(ing.id, 0.0) for pf in preferments},
        ))

    by_id = {i.id: i for i in ingredients}
    summaries: List[PrefermentSummary] = []
    for pf in preferments:
        settings = pf.settings
        breakdown = breakdowns[pf.id]

        named: Dict[str, float] = {}
        pf_base = 0.0
        for ing_id, qty in breakdown.items():
            ing = by_id[ing_id]
            named[ing.name] = named.get(ing.name, 0.0) + qty
            if ing.category == base_cat:
                pf_base += qty

        summaries.append(PrefermentSummary(
            id=pf.id,
            name=pf.name,
            type=settings.type,
            enabled=settings.enabled,
            ratio=safe_divide(pf.base_qty, base_qty) if settings.enabled else 0.0,
            total_bakers_pct=sum(i.contribution_to(pf.id) for i in ingredients),
            breakdown=named,
            prefermented_flour_pct=(
                safe_divide(pf_base, total_formula_base) if settings.enabled else 0.0
            ),
        ))

    total_water = sum(tfq[i.id] for i in ingredients if i.category == IngredientCategory.LIQUID)

    totals = FormulaTotals(
        hydration=safe_divide(total_water, total_formula_base),
        total_weight=total_recipe_weight,
        total_flour=base_qty,
        total_formula_flour=total_formula_base,
        total_final_dough_weight=total_final_dough_weight,
        num_pieces=num_pieces,
        total_prefermented_flour_pct=sum(s.prefermented_flour_pct for s in summaries),
        raw_yield_per_piece=raw_yield,
        scale_factor=scale_factor,
        process_loss_pct=process_loss,
        bake_loss_pct=bake_loss,
    )

    result = CalculationResult(
        ingredients=calculated,
        preferments=summaries,
        totals=totals,
        dag_has_cycle=dag.has_cycle,
    )
    result.warnings.extend(_unknown_references(ingredients, set(breakdowns)))
    if dag.has_cycle:
        result.warnings.append(create_cycle_warning(dag.unresolved))

    if recipe.autolyse:
        classification = classify(ingredients)
        result.autolyse = autolyse_split(
            ingredients,
            fdq,
            recipe.autolyse_duration_min or config.default_autolyse_duration_min,
            recipe.autolyse_overrides,
            classification=classification,
        )
        result.warnings.extend(classification.warnings)

    logger.debug(
        f"Calculated recipe {recipe.id}: hydration={totals.hydration:.3f} "
        f"flour={total_formula_base:.1f}g pieces={num_pieces:.2f} "
        f"preferments={len(preferments)} nested={config.resolve_nested_preferments}"
    )
    return result

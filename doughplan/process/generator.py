"""
process/generator.py - Suggested production steps for a recipe.

Specialized dough types and component kinds get a fixed template. Every
other recipe, including unknown or missing dough types, goes through the
bread generator, which builds the mix from the classified ingredient
groups and the post-mix timings from the mix type.
"""

from __future__ import annotations
import logging
from typing import Dict, List, Mapping, Optional, Sequence

from ..core.constants import DEFAULT_AUTOLYSE_DURATION_MIN, DEFAULT_DDT_C
from ..core.enums import DoughType, IngredientCategory, MixingPhase, ProcessStage
from ..core.models import Ingredient, ProcessStep
from ..mixing.classifier import apply_autolyse_overrides, classify, group_by_phase
from ..mixing.mixer import has_second_speed
from ..utils import parse_enum
from .durations import ProcessParams, resolve_process_params
from .templates import get_template, make_step, name_list

logger = logging.getLogger(__name__)

RETARD_MIN = 720
RETARD_TEMP_C = 4
PROOF_TEMP_ENRICHED_C = 27
PROOF_TEMP_LEAN_C = 25

HEARTH_DOUGH_TYPES = (DoughType.PIZZA, DoughType.FLATBREAD)


def suggest_steps(
    ingredients: Sequence[Ingredient],
    has_autolyse: bool = False,
    mix_type=None,
    ddt: Optional[float] = DEFAULT_DDT_C,
    dough_type=None,
    autolyse_overrides: Optional[Mapping[str, str]] = None,
    autolyse_duration_min: float = DEFAULT_AUTOLYSE_DURATION_MIN,
) -> List[ProcessStep]:
    """
    Suggest an ordered list of production steps.

    Args:
        ingredients: Recipe ingredients
        has_autolyse: Whether the recipe autolyses (ignored by templates)
        mix_type: Mix type name or MixType; unknown values use Improved Mix
        ddt: Desired dough temperature, carried by the bulk fermentation steps
        dough_type: DoughType, ComponentType or their names; None, "" and
            unknown names use the bread generator
        autolyse_overrides: ingredient id -> "autolyse" | "final"
        autolyse_duration_min: Autolyse rest length

    Returns:
        Ordered ProcessStep list with no ids and no preferment link
    """
    ingredients = list(ingredients or [])

    template = get_template(dough_type)
    if template is not None:
        steps = template(ingredients, ddt)
        logger.debug(f"Template {dough_type} produced {len(steps)} steps")
        return steps

    return _bread_steps(
        ingredients,
        has_autolyse=has_autolyse,
        mix_type=mix_type,
        ddt=ddt,
        dough_type=parse_enum(DoughType, dough_type),
        autolyse_overrides=autolyse_overrides,
        autolyse_duration_min=autolyse_duration_min or DEFAULT_AUTOLYSE_DURATION_MIN,
    )


def _bread_steps(
    ingredients: List[Ingredient],
    has_autolyse: bool,
    mix_type,
    ddt: Optional[float],
    dough_type: Optional[DoughType],
    autolyse_overrides: Optional[Mapping[str, str]],
    autolyse_duration_min: float,
) -> List[ProcessStep]:
    classification = classify(ingredients)
    phases = apply_autolyse_overrides(classification.phases, autolyse_overrides)
    groups = group_by_phase(ingredients, phases)
    params = resolve_process_params(mix_type, dough_type)

    steps = _mixing_steps(groups, has_autolyse, mix_type, autolyse_duration_min)
    steps += _bulk_steps(params, ddt)

    has_fat_group = MixingPhase.FAT_ADDITION in groups
    if dough_type == DoughType.PIZZA:
        steps += _pizza_finish(params, has_fat_group)
    elif dough_type == DoughType.FLATBREAD:
        steps += _flatbread_finish(params, has_fat_group)
    else:
        steps += _bread_finish(params, has_fat_group)

    logger.debug(
        f"Bread generator: {len(steps)} steps "
        f"(mix_type={mix_type}, dough_type={dough_type}, groups={[p.name for p in groups]})"
    )
    return steps


def _mixing_steps(
    groups: Dict[MixingPhase, List[Ingredient]],
    has_autolyse: bool,
    mix_type,
    autolyse_duration_min: float,
) -> List[ProcessStep]:
    steps: List[ProcessStep] = []
    autolyse_group = groups.get(MixingPhase.AUTOLYSE, [])
    incorporation = groups.get(MixingPhase.INCORPORATION, [])

    if has_autolyse and autolyse_group:
        # a preferment in the rest starts fermentation: fermentolyse
        fermentolyse = any(i.category == IngredientCategory.PREFERMENT for i in autolyse_group)
        stage = ProcessStage.FERMENTOLYSE if fermentolyse else ProcessStage.AUTOLYSE
        label = "Fermentolyse" if fermentolyse else "Autolyse"
        steps.append(make_step(
            stage, f"{label} Mix",
            f"Combine {name_list(autolyse_group)}. Mix on 1st speed until just combined, "
            "no gluten development.",
            duration_min=3, mixer_speed=1,
        ))
        steps.append(make_step(
            stage, f"{label} Rest",
            f"Cover and rest for {autolyse_duration_min:g} minutes while the flour hydrates.",
            duration_min=autolyse_duration_min,
        ))
        steps.append(make_step(
            ProcessStage.MIXING, "Final Mix",
            f"Add {name_list(incorporation)}. Mix on 1st speed until fully incorporated.",
            mixer_speed=1,
        ))
    else:
        steps.append(make_step(
            ProcessStage.MIXING, "Initial Mix",
            f"Combine {name_list(autolyse_group + incorporation)}. Mix on 1st speed until "
            "no dry flour remains.",
            mixer_speed=1,
        ))

    fats = groups.get(MixingPhase.FAT_ADDITION, [])
    if fats and has_second_speed(mix_type):
        steps.append(make_step(
            ProcessStage.MIXING, "Development",
            "Mix on 2nd speed to moderate gluten development before adding fat.",
            mixer_speed=2,
        ))
    if fats:
        steps.append(make_step(
            ProcessStage.MIXING, "Fat & Sugar Addition",
            f"Add {name_list(fats)} gradually on 1st speed, waiting for each addition "
            "to absorb, then develop to a full windowpane.",
            mixer_speed=1,
        ))

    mixins = groups.get(MixingPhase.MIXIN, [])
    if mixins:
        steps.append(make_step(
            ProcessStage.MIXING, "Fold in Mix-ins",
            f"Add {name_list(mixins)} on 1st speed only until evenly distributed.",
            duration_min=2, mixer_speed=1,
        ))
    return steps


def _bulk_steps(params: ProcessParams, ddt: Optional[float]) -> List[ProcessStep]:
    """fold_count intervals, then a final rest that absorbs the remaining bulk time."""
    steps = []
    for n in range(1, params.fold_count + 1):
        steps.append(make_step(
            ProcessStage.FOLD, f"Fold {n}",
            f"Bulk ferment {params.fold_interval_min} minutes, then stretch and fold.",
            duration_min=params.fold_interval_min, temperature=ddt,
        ))
    remainder = max(params.bulk_min - params.fold_count * params.fold_interval_min, 0)
    steps.append(make_step(
        ProcessStage.FOLD, "Bulk Rest",
        f"Leave undisturbed for the remaining {remainder} minutes of bulk fermentation.",
        duration_min=remainder, temperature=ddt,
    ))
    return steps


def _proof_temp(has_fat_group: bool) -> int:
    return PROOF_TEMP_ENRICHED_C if has_fat_group else PROOF_TEMP_LEAN_C


def _bread_finish(params: ProcessParams, has_fat_group: bool) -> List[ProcessStep]:
    if has_fat_group:
        bake = make_step(
            ProcessStage.BAKE, "Bake",
            "Egg wash and bake until deep golden.",
            duration_min=30, temperature=175,
        )
    else:
        bake = make_step(
            ProcessStage.BAKE, "Bake",
            "Score and bake with steam for the first 10 minutes, then vent.",
            duration_min=22, temperature=240,
        )
    return [
        make_step(ProcessStage.PRESHAPE, "Divide & Preshape", "Divide and preshape into loose rounds.", duration_min=5),
        make_step(
            ProcessStage.REST, "Bench Rest", "Rest covered until relaxed.",
            duration_min=params.bench_rest_min,
        ),
        make_step(ProcessStage.SHAPE, "Shape", "Final shape and place in bannetons or tins.", duration_min=10),
        make_step(
            ProcessStage.RETARD, "Retard", "Cover and retard overnight.",
            duration_min=RETARD_MIN, temperature=RETARD_TEMP_C,
        ),
        make_step(
            ProcessStage.PROOF, "Final Proof", "Proof until the dough springs back slowly.",
            duration_min=params.proof_min, temperature=_proof_temp(has_fat_group),
        ),
        bake,
    ]


def _pizza_finish(params: ProcessParams, has_fat_group: bool) -> List[ProcessStep]:
    return [
        make_step(ProcessStage.SHAPE, "Ball", "Divide and shape into tight balls.", duration_min=10),
        make_step(
            ProcessStage.PROOF, "Proof", "Proof the balls covered until airy.",
            duration_min=params.proof_min, temperature=_proof_temp(has_fat_group),
        ),
        make_step(ProcessStage.SHAPE, "Stretch", "Stretch by hand, leaving a rim, and top.", duration_min=5),
        make_step(
            ProcessStage.BAKE, "Bake", "Bake on a preheated stone or steel until blistered.",
            duration_min=8, temperature=280,
        ),
    ]


def _flatbread_finish(params: ProcessParams, has_fat_group: bool) -> List[ProcessStep]:
    return [
        make_step(ProcessStage.DIVIDE, "Divide & Round", "Divide and round into balls.", duration_min=5),
        make_step(
            ProcessStage.REST, "Bench Rest", "Rest covered until relaxed.",
            duration_min=params.bench_rest_min,
        ),
        make_step(ProcessStage.SHAPE, "Roll / Stretch", "Roll or stretch to the final thickness.", duration_min=10),
        make_step(
            ProcessStage.PROOF, "Proof", "Proof briefly until slightly puffy.",
            duration_min=params.proof_min, temperature=_proof_temp(has_fat_group),
        ),
        make_step(
            ProcessStage.BAKE, "Bake", "Bake at high heat until puffed with light char.",
            duration_min=5, temperature=260,
        ),
    ]

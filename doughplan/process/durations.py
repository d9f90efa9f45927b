"""
process/durations.py - Step duration policy.

Both the step generator and the timeline scheduler resolve durations
through this module. Resolution order for a step:

    1. explicit positive duration on the step
    2. PF_FERMENT: the preferment's fermentation override, else its type default
    3. mix-type post-mix value (FOLD interval, PROOF, REST bench rest)
    4. stage default
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..core.constants import effective_fermentation_duration
from ..core.enums import DoughType, MixType, ProcessStage
from ..utils import parse_enum


@dataclass(frozen=True)
class ProcessParams:
    """Post-mix timings (minutes) for bulk fermentation, folds, bench rest and proof."""
    bulk_min: int
    fold_count: int
    fold_interval_min: int
    bench_rest_min: int
    proof_min: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bulk_min": self.bulk_min,
            "fold_count": self.fold_count,
            "fold_interval_min": self.fold_interval_min,
            "bench_rest_min": self.bench_rest_min,
            "proof_min": self.proof_min,
        }


MIX_TYPE_PROCESS: Dict[MixType, ProcessParams] = {
    # less mechanical development needs longer bulk and more folds
    MixType.SHORT_MIX: ProcessParams(210, 3, 45, 20, 90),
    MixType.IMPROVED_MIX: ProcessParams(120, 1, 60, 20, 75),
    MixType.INTENSIVE_MIX: ProcessParams(60, 0, 60, 15, 60),
    MixType.SHORT_IMPROVED: ProcessParams(180, 2, 50, 20, 80),
}

DEFAULT_MIX_TYPE = MixType.IMPROVED_MIX

# Dough types whose post-mix timings ignore the mix type
DOUGH_TYPE_PROCESS_OVERRIDES: Dict[DoughType, ProcessParams] = {
    DoughType.PIZZA: ProcessParams(120, 2, 30, 15, 60),
    DoughType.FLATBREAD: ProcessParams(60, 1, 30, 15, 30),
}

STAGE_DURATION_DEFAULTS: Dict[ProcessStage, int] = {
    ProcessStage.PF_MIX: 5,
    ProcessStage.PF_FEED: 240,
    ProcessStage.PF_FERMENT: 480,
    ProcessStage.AUTOLYSE: 20,
    ProcessStage.FERMENTOLYSE: 30,
    ProcessStage.MIXING: 10,
    ProcessStage.FOLD: 45,
    ProcessStage.DIVIDE: 5,
    ProcessStage.PRESHAPE: 5,
    ProcessStage.REST: 20,
    ProcessStage.SHAPE: 10,
    ProcessStage.PROOF: 75,
    ProcessStage.RETARD: 720,
    ProcessStage.BAKE: 22,
    ProcessStage.COOL: 60,
    ProcessStage.FINISH: 10,
}
DEFAULT_STAGE_DURATION = 10


def resolve_process_params(mix_type=None, dough_type=None) -> ProcessParams:
    """
    Post-mix timings for a recipe.

    A PIZZA or FLATBREAD override wins; otherwise the mix-type table is
    used, and unknown or missing mix types fall back to Improved Mix.
    """
    dt = parse_enum(DoughType, dough_type)
    if dt in DOUGH_TYPE_PROCESS_OVERRIDES:
        return DOUGH_TYPE_PROCESS_OVERRIDES[dt]
    mt = parse_enum(MixType, mix_type, DEFAULT_MIX_TYPE)
    return MIX_TYPE_PROCESS.get(mt, MIX_TYPE_PROCESS[DEFAULT_MIX_TYPE])


def stage_default(stage) -> int:
    st = parse_enum(ProcessStage, stage)
    return STAGE_DURATION_DEFAULTS.get(st, DEFAULT_STAGE_DURATION)


def resolve_step_duration(
    step,
    mix_type=None,
    preferment_settings=None,
    dough_type=None,
) -> float:
    """
    Effective duration (minutes) of a process step.

    Args:
        step: ProcessStep (or anything with stage and duration_min)
        mix_type: Mix type used for FOLD/PROOF/REST values; None skips that level
        preferment_settings: Settings of the preferment the step builds
        dough_type: Dough type, for PIZZA/FLATBREAD post-mix overrides

    Returns:
        Duration in minutes, always positive
    """
    if step.duration_min is not None and step.duration_min > 0:
        return step.duration_min

    stage = parse_enum(ProcessStage, step.stage)

    if stage == ProcessStage.PF_FERMENT and preferment_settings is not None:
        return effective_fermentation_duration(preferment_settings)

    if mix_type is not None or dough_type is not None:
        params = resolve_process_params(mix_type, dough_type)
        if stage == ProcessStage.FOLD:
            return params.fold_interval_min
        if stage == ProcessStage.PROOF:
            return params.proof_min
        if stage == ProcessStage.REST:
            return params.bench_rest_min

    return stage_default(stage)

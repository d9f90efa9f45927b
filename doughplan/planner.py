"""
planner.py - One-call production plan.

Runs the percentage engine, step suggestion and the timeline scheduler for
one recipe, and gathers every advisory they raise into a single report.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .bootstrap.config import EngineConfig, get_config
from .core.dough_types import check_mix_constraint
from .core.enums import MixType
from .core.models import ProcessStep, Recipe
from .errors import ErrorAggregator, ErrorReport
from .formulation import CalculationResult, calculate
from .process import suggest_steps
from .production import Timeline, compute_timeline
from .utils import parse_enum

logger = logging.getLogger(__name__)


@dataclass
class ProductionPlan:
    """Calculation, steps and schedule for one recipe."""

    recipe_id: str
    calculation: CalculationResult
    steps: List[ProcessStep] = field(default_factory=list)
    steps_suggested: bool = False
    timeline: Optional[Timeline] = None
    report: ErrorReport = field(default_factory=ErrorReport)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recipe_id": self.recipe_id,
            "calculation": self.calculation.to_dict(),
            "steps": [s.to_dict() for s in self.steps],
            "steps_suggested": self.steps_suggested,
            "timeline": self.timeline.to_dict() if self.timeline else None,
            "report": self.report.to_dict(),
        }


def plan_production(
    recipe,
    anchor_time: Optional[datetime] = None,
    mode="forward",
    mix_type=None,
    companions: Optional[Iterable] = None,
    config: Optional[EngineConfig] = None,
) -> ProductionPlan:
    """
    Build a production plan.

    Args:
        recipe: Recipe or plain dict
        anchor_time: Mix time (forward) or finish time (reverse); None skips
            the timeline
        mode: Timeline mode
        mix_type: Mix type override; defaults to the recipe's, then the
            configured default
        companions: Companion recipes for the timeline
        config: EngineConfig; defaults to the loaded configuration

    Returns:
        ProductionPlan
    """
    if isinstance(recipe, Mapping):
        recipe = Recipe.from_dict(recipe)
    if config is None:
        config = get_config().engine

    mt = parse_enum(MixType, mix_type) or recipe.mix_type or config.default_mix_type
    aggregator = ErrorAggregator()

    calculation = calculate(recipe, config=config)
    aggregator.add_all(calculation.warnings)

    constraint = check_mix_constraint(recipe.dough_type, mt)
    if constraint is not None:
        aggregator.add(constraint)

    steps = recipe.main_steps
    suggested = not steps
    if suggested:
        steps = suggest_steps(
            recipe.ingredients,
            has_autolyse=recipe.autolyse,
            mix_type=mt,
            ddt=recipe.ddt or config.default_ddt,
            dough_type=recipe.dough_type,
            autolyse_overrides=recipe.autolyse_overrides,
            autolyse_duration_min=recipe.autolyse_duration_min or config.default_autolyse_duration_min,
        )

    timeline = None
    if anchor_time is not None:
        timeline = compute_timeline(
            recipe, anchor_time, mode=mode, mix_type=mt, companions=companions, config=config,
        )

    report = aggregator.generate_report()
    logger.info(f"Planned {recipe.id}: {len(steps)} steps, {report.summary}")

    return ProductionPlan(
        recipe_id=recipe.id,
        calculation=calculation,
        steps=list(steps),
        steps_suggested=suggested,
        timeline=timeline,
        report=report,
    )

"""
doughplan - Bakery formulation and production planning engine.

Computes baker's percentages, preferment decomposition, mixing phases,
process steps and production timelines from a single Recipe snapshot.
"""

from doughplan.core.models import (
    Ingredient,
    PrefermentSettings,
    ProcessStep,
    Recipe,
)
from doughplan.formulation import calculate
from doughplan.mixing import classify
from doughplan.process import suggest_steps
from doughplan.production import compute_timeline
from doughplan.planner import ProductionPlan, plan_production

__version__ = "1.0.0"

__all__ = [
    "Ingredient",
    "PrefermentSettings",
    "ProcessStep",
    "Recipe",
    "calculate",
    "classify",
    "suggest_steps",
    "compute_timeline",
    "ProductionPlan",
    "plan_production",
]

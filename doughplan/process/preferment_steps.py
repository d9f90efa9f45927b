"""
process/preferment_steps.py - Suggested build steps for a preferment.
"""

from __future__ import annotations
from typing import List, Optional

from ..core.constants import effective_ddt
from ..core.enums import PrefermentType, ProcessStage
from ..core.models import Ingredient, ProcessStep
from .templates import make_step


def suggest_preferment_steps(preferment: Ingredient, recipe_ddt: Optional[float] = None) -> List[ProcessStep]:
    """
    Build steps for one preferment's own track.

    A levain is fed before mixing; other types are mixed and fermented.
    The ferment step carries no duration so the scheduler resolves it from
    the preferment's settings.

    Args:
        preferment: PREFERMENT ingredient
        recipe_ddt: Recipe DDT, used when the preferment has no DDT override

    Returns:
        Steps linked to the preferment through preferment_ingredient_id
    """
    settings = preferment.settings
    temp = effective_ddt(settings, recipe_ddt)
    name = preferment.name or "preferment"

    steps: List[ProcessStep] = []
    if settings.type == PrefermentType.LEVAIN:
        steps.append(make_step(
            ProcessStage.PF_FEED, f"Feed {name} Starter",
            "Refresh the starter so it peaks when the levain is built.",
            preferment_ingredient_id=preferment.id,
        ))
    steps.append(make_step(
        ProcessStage.PF_MIX, f"Mix {name}",
        f"Mix the {name} ingredients until no dry flour remains.",
        temperature=temp,
        preferment_ingredient_id=preferment.id,
    ))
    steps.append(make_step(
        ProcessStage.PF_FERMENT, f"Ferment {name}",
        f"Cover and ferment the {name} until ripe.",
        temperature=temp,
        preferment_ingredient_id=preferment.id,
    ))
    return steps

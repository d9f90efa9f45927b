"""
doughplan Domain Constants

Preferment seeding and fermentation defaults shared by the formulation,
process and production layers.
"""

from typing import Dict, Optional

from .enums import IngredientCategory, PrefermentType

# ==================== Preferment Seeding ====================

# Baker's percentages used when a preferment of a given type is first added.
# FLOUR is always the 100% base.
PF_SEED_BAKERS_PCT: Dict[PrefermentType, Dict[IngredientCategory, float]] = {
    PrefermentType.POOLISH: {
        IngredientCategory.FLOUR: 1.0,
        IngredientCategory.LIQUID: 1.0,
        IngredientCategory.LEAVENING: 0.005,
    },
    PrefermentType.BIGA: {
        IngredientCategory.FLOUR: 1.0,
        IngredientCategory.LIQUID: 0.6,
        IngredientCategory.LEAVENING: 0.005,
    },
    PrefermentType.LEVAIN: {
        IngredientCategory.FLOUR: 1.0,
        IngredientCategory.LIQUID: 1.0,
    },
    PrefermentType.PATE_FERMENTEE: {
        IngredientCategory.FLOUR: 1.0,
        IngredientCategory.LIQUID: 0.65,
        IngredientCategory.LEAVENING: 0.005,
    },
    PrefermentType.SPONGE: {
        IngredientCategory.FLOUR: 1.0,
        IngredientCategory.LIQUID: 0.6,
        IngredientCategory.LEAVENING: 0.01,
    },
    PrefermentType.CUSTOM: {},
}

# ==================== Fermentation ====================

# Preferment fermentation time by type (minutes)
FERMENTATION_DEFAULTS: Dict[PrefermentType, int] = {
    PrefermentType.POOLISH: 720,
    PrefermentType.BIGA: 960,
    PrefermentType.LEVAIN: 480,
    PrefermentType.PATE_FERMENTEE: 720,
    PrefermentType.SPONGE: 240,
    PrefermentType.CUSTOM: 480,
}
DEFAULT_FERMENTATION_MIN = 480

# ==================== Recipe Defaults ====================

DEFAULT_DDT_C = 24.0
DEFAULT_AUTOLYSE_DURATION_MIN = 20

# Classifier thresholds (fraction of flour)
ENRICHMENT_INCORPORATION_MAX = 0.04
SWEETENER_INCORPORATION_MAX = 0.12
POOLISH_WATER_THRESHOLD = 0.15
RYE_AUTOLYSE_THRESHOLD = 0.30

# Levain decision matrix
LEVAIN_STIFF_HYDRATION = 0.65
LEVAIN_WHOLE_WHEAT_MAX = 0.40
LEVAIN_HIGH_INOCULATION = 0.25
LEVAIN_LOW_INOCULATION = 0.15
LEVAIN_LOW_WATER_RATIO = 0.20
LEVAIN_HIGH_HYDRATION = 0.75


def effective_fermentation_duration(settings) -> float:
    """Fermentation time for a preferment: explicit override, else its type default."""
    if settings.fermentation_duration_min is not None:
        return settings.fermentation_duration_min
    return FERMENTATION_DEFAULTS.get(settings.type, DEFAULT_FERMENTATION_MIN)


def effective_ddt(settings, recipe_ddt: Optional[float]) -> Optional[float]:
    """Desired temperature for a preferment build, falling back to the recipe's DDT."""
    if settings is not None and settings.ddt is not None:
        return settings.ddt
    return recipe_ddt


def format_duration(minutes: Optional[float]) -> str:
    """
    Format minutes as a compact duration string.

    >>> format_duration(0)
    '0m'
    >>> format_duration(90)
    '1h 30m'
    """
    if minutes is None or minutes <= 0:
        return "0m"
    minutes = int(round(minutes))
    hours, mins = divmod(minutes, 60)
    if hours == 0:
        return f"{mins}m"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"

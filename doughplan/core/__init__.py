"""
core/ - Enumerations, recipe data model and domain constants.

Dough type catalogue and inference live in core.dough_types, imported
directly by callers.
"""

from .enums import (
    IngredientCategory,
    PrefermentType,
    ProcessStage,
    MixingPhase,
    DoughType,
    ComponentType,
    MixType,
    MixerType,
    TimelineMode,
    TrackType,
    CompanionRole,
)

from .models import (
    PrefermentSettings,
    Ingredient,
    ProcessStep,
    Recipe,
)

from .constants import (
    PF_SEED_BAKERS_PCT,
    FERMENTATION_DEFAULTS,
    effective_fermentation_duration,
    effective_ddt,
    format_duration,
)

from .composition import seed_preferment_pcts

__all__ = [
    # Enums
    "IngredientCategory",
    "PrefermentType",
    "ProcessStage",
    "MixingPhase",
    "DoughType",
    "ComponentType",
    "MixType",
    "MixerType",
    "TimelineMode",
    "TrackType",
    "CompanionRole",
    # Models
    "PrefermentSettings",
    "Ingredient",
    "ProcessStep",
    "Recipe",
    # Constants
    "PF_SEED_BAKERS_PCT",
    "FERMENTATION_DEFAULTS",
    "effective_fermentation_duration",
    "effective_ddt",
    "format_duration",
    # Composition
    "seed_preferment_pcts",
]

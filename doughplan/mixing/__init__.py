"""
mixing/ - Mixing phase classification, mixer friction and water temperature.
"""

from .patterns import (
    is_egg,
    is_oil,
    is_rye,
    is_whole_wheat,
    is_yeast,
    is_chemical_leavener,
    is_semolina,
)

from .models import (
    Classification,
    SplitItem,
    AutolyseSplit,
)

from .classifier import (
    classify,
    classify_ingredient,
    apply_autolyse_overrides,
    group_by_phase,
    autolyse_split,
)

from .mixer import (
    MIX_TYPES,
    MIXER_TYPE_DEFAULTS,
    MixTypeSpec,
    Calibration,
    MixerProfile,
    MixDurations,
    has_second_speed,
    effective_friction,
    calc_mix_durations,
    calibrate_friction,
)

from .water_temp import (
    WaterTempResult,
    calc_water_temp,
)

__all__ = [
    # Patterns
    "is_egg",
    "is_oil",
    "is_rye",
    "is_whole_wheat",
    "is_yeast",
    "is_chemical_leavener",
    "is_semolina",
    # Classifier
    "Classification",
    "SplitItem",
    "AutolyseSplit",
    "classify",
    "classify_ingredient",
    "apply_autolyse_overrides",
    "group_by_phase",
    "autolyse_split",
    # Mixer
    "MIX_TYPES",
    "MIXER_TYPE_DEFAULTS",
    "MixTypeSpec",
    "Calibration",
    "MixerProfile",
    "MixDurations",
    "has_second_speed",
    "effective_friction",
    "calc_mix_durations",
    "calibrate_friction",
    # Water temperature
    "WaterTempResult",
    "calc_water_temp",
]

"""
mixing/mixer.py - Mix types, mixer profiles and friction.

Friction is the temperature rise (degC) a mixer adds to the dough. It
scales with the intensity of the chosen mix type.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..core.enums import MixerType, MixType
from ..utils import parse_enum

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MixTypeSpec:
    """Development target for a mix type."""
    target_rounds: int
    friction_mult: float
    has_second_speed: bool


MIX_TYPES: Dict[MixType, MixTypeSpec] = {
    MixType.SHORT_MIX: MixTypeSpec(600, 0.7, False),
    MixType.IMPROVED_MIX: MixTypeSpec(1000, 1.0, True),
    MixType.INTENSIVE_MIX: MixTypeSpec(1600, 1.3, True),
    MixType.SHORT_IMPROVED: MixTypeSpec(400, 0.5, True),
}

# Short Mix develops on first speed only: Improved Mix first-speed rounds plus this
SHORT_MIX_EXTRA_ROUNDS = 600


@dataclass
class Calibration:
    """Measured first-speed rounds for one mix type on a specific mixer."""
    mix_type: MixType
    first_speed_rounds: float

    def to_dict(self) -> Dict[str, Any]:
        return {"mix_type": self.mix_type.value, "first_speed_rounds": self.first_speed_rounds}


@dataclass
class MixerProfile:
    """A bakery's mixer: base friction, speeds and per-mix-type calibrations."""
    mixer_type: MixerType = MixerType.SPIRAL
    friction_factor: float = 14.0
    first_speed_rpm: float = 105.0
    second_speed_rpm: float = 204.0
    calibrations: List[Calibration] = field(default_factory=list)

    def find_calibration(self, mix_type: MixType) -> float:
        """First-speed rounds calibrated for a mix type (0 if uncalibrated)."""
        for cal in self.calibrations:
            if cal.mix_type == mix_type:
                return cal.first_speed_rounds
        return 0.0

    @classmethod
    def default_for(cls, mixer_type) -> "MixerProfile":
        """Profile built from the factory defaults of a mixer family."""
        mt = parse_enum(MixerType, mixer_type, MixerType.SPIRAL)
        defaults = MIXER_TYPE_DEFAULTS[mt]
        return cls(
            mixer_type=mt,
            friction_factor=defaults["friction"],
            first_speed_rpm=defaults["first_speed_rpm"],
            second_speed_rpm=defaults["second_speed_rpm"],
            calibrations=[Calibration(k, v) for k, v in defaults["cal"].items()],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mixer_type": self.mixer_type.value,
            "friction_factor": self.friction_factor,
            "first_speed_rpm": self.first_speed_rpm,
            "second_speed_rpm": self.second_speed_rpm,
            "calibrations": [c.to_dict() for c in self.calibrations],
        }


MIXER_TYPE_DEFAULTS: Dict[MixerType, Dict[str, Any]] = {
    MixerType.SPIRAL: {
        "friction": 14,
        "first_speed_rpm": 105,
        "second_speed_rpm": 204,
        "cal": {MixType.IMPROVED_MIX: 420, MixType.INTENSIVE_MIX: 500, MixType.SHORT_IMPROVED: 500},
    },
    MixerType.PLANETARY: {
        "friction": 8,
        "first_speed_rpm": 80,
        "second_speed_rpm": 160,
        "cal": {MixType.IMPROVED_MIX: 350, MixType.INTENSIVE_MIX: 400, MixType.SHORT_IMPROVED: 400},
    },
    MixerType.FORK: {
        "friction": 5,
        "first_speed_rpm": 40,
        "second_speed_rpm": 80,
        "cal": {MixType.IMPROVED_MIX: 300, MixType.INTENSIVE_MIX: 350, MixType.SHORT_IMPROVED: 350},
    },
    MixerType.HAND: {
        "friction": 2,
        "first_speed_rpm": 0,
        "second_speed_rpm": 0,
        "cal": {},
    },
}


def has_second_speed(mix_type, default: bool = True) -> bool:
    """Whether a mix type develops on second speed (unknown types use the default)."""
    mt = parse_enum(MixType, mix_type)
    if mt is None:
        return default
    return MIX_TYPES[mt].has_second_speed


def effective_friction(friction_factor: float, mix_type) -> float:
    """Base mixer friction scaled by the mix type's multiplier (1.0 when unknown)."""
    mt = parse_enum(MixType, mix_type)
    mult = MIX_TYPES[mt].friction_mult if mt else 1.0
    return friction_factor * mult


@dataclass
class MixDurations:
    """Minutes on each mixer speed."""
    first_speed_min: float = 0.0
    second_speed_min: float = 0.0

    @property
    def total_min(self) -> float:
        return self.first_speed_min + self.second_speed_min

    def to_dict(self) -> Dict[str, float]:
        return {
            "first_speed_min": round(self.first_speed_min, 2),
            "second_speed_min": round(self.second_speed_min, 2),
        }


def calc_mix_durations(profile: MixerProfile, mix_type) -> MixDurations:
    """
    Mixing time on each speed for a mixer and mix type.

    Returns zero durations for an unknown mix type or a mixer without
    speeds (hand mixing).
    """
    mt = parse_enum(MixType, mix_type)
    if mt is None:
        return MixDurations()

    rpm1 = profile.first_speed_rpm
    rpm2 = profile.second_speed_rpm
    if not rpm1 or not rpm2:
        return MixDurations()

    if mt == MixType.SHORT_MIX:
        improved = profile.find_calibration(MixType.IMPROVED_MIX)
        return MixDurations(first_speed_min=(improved + SHORT_MIX_EXTRA_ROUNDS) / rpm1)

    return MixDurations(
        first_speed_min=profile.find_calibration(mt) / rpm1,
        second_speed_min=MIX_TYPES[mt].target_rounds / rpm2,
    )


def calibrate_friction(
    water_temp_used: float,
    flour_temp: float,
    room_temp: float,
    actual_dough_temp: float,
    preferment_temp: Optional[float] = None,
) -> float:
    """
    Back-calculate a mixer's friction factor from a production run.

    friction = actual_dough_temp * n - sum(known temperatures), where n is
    the number of known temperatures (3, or 4 with a preferment).
    """
    temps = [water_temp_used, flour_temp, room_temp]
    if preferment_temp is not None:
        temps.append(preferment_temp)
    friction = actual_dough_temp * len(temps) - sum(temps)
    logger.debug(f"Calibrated friction {friction:.1f} from {len(temps)} factors")
    return friction

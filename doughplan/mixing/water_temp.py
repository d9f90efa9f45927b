"""
mixing/water_temp.py - Water temperature needed to hit the DDT.

3-factor: water = 3*DDT - flour - room - friction
4-factor: water = 4*DDT - flour - room - preferment - friction
Autolyse: flour temperature drifts toward room temperature during the
rest, so the post-autolyse mass temperature replaces the flour term.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..errors import EngineWarning, WarningCode, WarningSeverity

ICE_WATER_BELOW_C = 1.0
YEAST_KILL_ABOVE_C = 43.0


@dataclass
class WaterTempResult:
    """Computed water temperature and the method used."""
    water_temp: float
    method: str                 # "3-factor" | "4-factor" | "3-factor-autolyse"
    warning: Optional[EngineWarning] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "water_temp": round(self.water_temp, 1),
            "method": self.method,
            "warning": self.warning.message if self.warning else None,
        }


def _temperature_warning(temp: float) -> Optional[EngineWarning]:
    if temp < ICE_WATER_BELOW_C:
        return EngineWarning(
            code=WarningCode.WATER_TOO_COLD,
            severity=WarningSeverity.WARNING,
            message="Use ice water. Target unachievable with liquid water alone.",
            source="mixing.water_temp",
        )
    if temp > YEAST_KILL_ABOVE_C:
        return EngineWarning(
            code=WarningCode.WATER_TOO_HOT,
            severity=WarningSeverity.WARNING,
            message=f"Water too hot: yeast dies above {YEAST_KILL_ABOVE_C:.0f}°C.",
            source="mixing.water_temp",
        )
    return None


def calc_water_temp(
    ddt: float,
    flour_temp: float,
    room_temp: float,
    friction_factor: float,
    preferment_temp: Optional[float] = None,
    has_autolyse: bool = False,
    autolyse_duration_min: float = 0,
) -> WaterTempResult:
    """
    Calculate the water temperature required to reach the DDT.

    The autolyse variant takes precedence over the 4-factor formula when
    autolyse is active with a positive duration.

    Args:
        ddt: Desired dough temperature (°C)
        flour_temp: Flour temperature (°C)
        room_temp: Ambient temperature (°C)
        friction_factor: Effective mixer friction (°C)
        preferment_temp: Preferment temperature, enables the 4-factor formula
        has_autolyse: Whether an autolyse rest precedes the final mix
        autolyse_duration_min: Autolyse rest length

    Returns:
        WaterTempResult
    """
    if has_autolyse and autolyse_duration_min > 0:
        initial = (flour_temp + room_temp) / 2
        drift = min(autolyse_duration_min / 60, 1.0)
        post_autolyse = initial + (room_temp - initial) * drift
        water = ddt * 3 - post_autolyse - room_temp - friction_factor
        method = "3-factor-autolyse"
    elif preferment_temp is not None:
        water = ddt * 4 - flour_temp - room_temp - preferment_temp - friction_factor
        method = "4-factor"
    else:
        water = ddt * 3 - flour_temp - room_temp - friction_factor
        method = "3-factor"

    return WaterTempResult(water_temp=water, method=method, warning=_temperature_warning(water))

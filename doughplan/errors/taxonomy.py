"""
errors/taxonomy.py - Exception hierarchy and advisory warnings.

The engine degrades numerically instead of raising. Exceptions are reserved
for structurally invalid input at the boundary and for bad configuration;
everything else is reported as an EngineWarning.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class DoughplanError(Exception):
    """Base exception for doughplan."""
    pass


class InvalidRecipeError(DoughplanError):
    """Raised when a recipe payload cannot be turned into a Recipe."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


class ConfigurationError(DoughplanError):
    """Raised when a configuration value cannot be parsed."""

    def __init__(self, key: str, value: Any):
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration value for {key}: {value!r}")


class WarningSeverity(Enum):
    """Warning severity levels."""
    INFO = "info"
    ADVISORY = "advisory"
    WARNING = "warning"


class WarningCode(Enum):
    """Specific warning codes."""
    RYE_AUTOLYSE = "rye_autolyse"
    PREFERMENT_CYCLE = "preferment_cycle"
    UNKNOWN_PREFERMENT_REFERENCE = "unknown_preferment_reference"
    MIX_TYPE_CONSTRAINT = "mix_type_constraint"
    WATER_TOO_COLD = "water_too_cold"
    WATER_TOO_HOT = "water_too_hot"


@dataclass(frozen=True)
class EngineWarning:
    """Structured advisory produced by an engine component."""

    code: WarningCode
    message: str
    severity: WarningSeverity = WarningSeverity.ADVISORY
    source: str = ""
    ingredient_id: Optional[str] = None

    @property
    def type(self) -> str:
        """Short machine-readable type, same as the code value."""
        return self.code.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.code.value,
            "severity": self.severity.value,
            "message": self.message,
            "source": self.source,
            "ingredient_id": self.ingredient_id,
        }


def create_rye_autolyse_warning() -> EngineWarning:
    """Factory for the high-rye autolyse advisory."""
    return EngineWarning(
        code=WarningCode.RYE_AUTOLYSE,
        message=(
            "Rye flour is >30% of total flour. Autolyse is typically not "
            "beneficial for high-rye doughs: rye lacks the gluten proteins "
            "that autolyse develops. Consider disabling autolyse."
        ),
        source="mixing.classifier",
    )


def create_cycle_warning(preferment_ids) -> EngineWarning:
    """Factory for cyclic preferment dependencies."""
    ids = ", ".join(sorted(preferment_ids))
    return EngineWarning(
        code=WarningCode.PREFERMENT_CYCLE,
        severity=WarningSeverity.WARNING,
        message=f"Preferments form a dependency cycle and cannot be ordered: {ids}",
        source="production.dag",
    )


def create_unknown_reference_warning(ingredient_id: str, preferment_id: str) -> EngineWarning:
    """Factory for percentage-map keys that name no enabled preferment."""
    return EngineWarning(
        code=WarningCode.UNKNOWN_PREFERMENT_REFERENCE,
        severity=WarningSeverity.INFO,
        message=(
            f"Ingredient {ingredient_id} declares a contribution into "
            f"{preferment_id}, which is not a preferment in this recipe; ignored"
        ),
        source="formulation.engine",
        ingredient_id=ingredient_id,
    )

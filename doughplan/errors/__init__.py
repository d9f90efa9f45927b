"""
errors/ - Exceptions and advisory warnings.
"""

from .taxonomy import (
    DoughplanError,
    InvalidRecipeError,
    ConfigurationError,
    WarningSeverity,
    WarningCode,
    EngineWarning,
    create_rye_autolyse_warning,
    create_cycle_warning,
    create_unknown_reference_warning,
)

from .aggregator import (
    ErrorReport,
    ErrorAggregator,
)

__all__ = [
    # Taxonomy
    "DoughplanError",
    "InvalidRecipeError",
    "ConfigurationError",
    "WarningSeverity",
    "WarningCode",
    "EngineWarning",
    "create_rye_autolyse_warning",
    "create_cycle_warning",
    "create_unknown_reference_warning",
    # Aggregator
    "ErrorReport",
    "ErrorAggregator",
]

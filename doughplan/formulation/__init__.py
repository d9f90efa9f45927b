"""
formulation/ - Baker's percentage engine.
"""

from .models import (
    CalculatedIngredient,
    PrefermentSummary,
    FormulaTotals,
    CalculationResult,
)

from .engine import (
    calculate,
    calc_adjusted_yield,
)

__all__ = [
    "CalculatedIngredient",
    "PrefermentSummary",
    "FormulaTotals",
    "CalculationResult",
    "calculate",
    "calc_adjusted_yield",
]

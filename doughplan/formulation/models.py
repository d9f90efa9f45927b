"""
formulation/models.py - Percentage engine result structures.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..core.enums import IngredientCategory, PrefermentType
from ..errors import EngineWarning
from ..mixing.models import AutolyseSplit


@dataclass
class CalculatedIngredient:
    """Derived quantities for one ingredient."""
    id: str
    name: str
    category: IngredientCategory
    base_qty: float
    sort_order: int = 0
    overall_bakers_pct: float = 0.0
    total_formula_qty: float = 0.0
    final_dough_bakers_pct: float = 0.0
    final_dough_qty: float = 0.0
    per_item_weight: float = 0.0
    batch_qty: float = 0.0
    preferment_qtys: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "base_qty": self.base_qty,
            "sort_order": self.sort_order,
            "overall_bakers_pct": self.overall_bakers_pct,
            "total_formula_qty": self.total_formula_qty,
            "final_dough_bakers_pct": self.final_dough_bakers_pct,
            "final_dough_qty": self.final_dough_qty,
            "per_item_weight": self.per_item_weight,
            "batch_qty": self.batch_qty,
            "preferment_qtys": dict(self.preferment_qtys),
        }


@dataclass
class PrefermentSummary:
    """Per-preferment metrics; breakdown is keyed by ingredient name."""
    id: str
    name: str
    type: PrefermentType
    enabled: bool
    ratio: float = 0.0
    total_bakers_pct: float = 0.0
    breakdown: Dict[str, float] = field(default_factory=dict)
    prefermented_flour_pct: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "enabled": self.enabled,
            "ratio": self.ratio,
            "total_bakers_pct": self.total_bakers_pct,
            "breakdown": dict(self.breakdown),
            "prefermented_flour_pct": self.prefermented_flour_pct,
        }


@dataclass
class FormulaTotals:
    """Recipe-level totals."""
    hydration: float = 0.0
    total_weight: float = 0.0
    total_flour: float = 0.0
    total_formula_flour: float = 0.0
    total_final_dough_weight: float = 0.0
    num_pieces: float = 0.0
    total_prefermented_flour_pct: float = 0.0
    raw_yield_per_piece: float = 0.0
    scale_factor: float = 1.0
    process_loss_pct: float = 0.0
    bake_loss_pct: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hydration": self.hydration,
            "total_weight": self.total_weight,
            "total_flour": self.total_flour,
            "total_formula_flour": self.total_formula_flour,
            "total_final_dough_weight": self.total_final_dough_weight,
            "num_pieces": self.num_pieces,
            "total_prefermented_flour_pct": self.total_prefermented_flour_pct,
            "raw_yield_per_piece": self.raw_yield_per_piece,
            "scale_factor": self.scale_factor,
            "process_loss_pct": self.process_loss_pct,
            "bake_loss_pct": self.bake_loss_pct,
        }


@dataclass
class CalculationResult:
    """Complete percentage engine output."""
    ingredients: List[CalculatedIngredient] = field(default_factory=list)
    preferments: List[PrefermentSummary] = field(default_factory=list)
    autolyse: Optional[AutolyseSplit] = None
    totals: FormulaTotals = field(default_factory=FormulaTotals)
    warnings: List[EngineWarning] = field(default_factory=list)
    dag_has_cycle: bool = False

    def get_ingredient(self, ingredient_id: str) -> Optional[CalculatedIngredient]:
        for ing in self.ingredients:
            if ing.id == ingredient_id:
                return ing
        return None

    def get_preferment(self, preferment_id: str) -> Optional[PrefermentSummary]:
        for pf in self.preferments:
            if pf.id == preferment_id:
                return pf
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ingredients": [i.to_dict() for i in self.ingredients],
            "preferments": [p.to_dict() for p in self.preferments],
            "autolyse": self.autolyse.to_dict() if self.autolyse else None,
            "totals": self.totals.to_dict(),
            "warnings": [w.to_dict() for w in self.warnings],
            "dag_has_cycle": self.dag_has_cycle,
        }

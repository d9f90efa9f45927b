"""
mixing/models.py - Mixing classification results.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..core.enums import MixingPhase
from ..errors import EngineWarning


@dataclass
class Classification:
    """Phase per ingredient id plus any advisories raised while classifying."""
    phases: Dict[str, MixingPhase] = field(default_factory=dict)
    warnings: List[EngineWarning] = field(default_factory=list)

    def phase_of(self, ingredient_id: str):
        return self.phases.get(ingredient_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phases": {k: int(v) for k, v in self.phases.items()},
            "warnings": [w.to_dict() for w in self.warnings],
        }


@dataclass
class SplitItem:
    """Ingredient placed into the autolyse or final-mix list."""
    id: str
    name: str
    qty: float

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "qty": round(self.qty, 3)}


@dataclass
class AutolyseSplit:
    """Final-dough ingredients divided between the autolyse and the final mix."""
    autolyse_ingredients: List[SplitItem] = field(default_factory=list)
    final_mix_ingredients: List[SplitItem] = field(default_factory=list)
    autolyse_duration_min: float = 20

    @property
    def autolyse_qty(self) -> float:
        return sum(i.qty for i in self.autolyse_ingredients)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "autolyse_ingredients": [i.to_dict() for i in self.autolyse_ingredients],
            "final_mix_ingredients": [i.to_dict() for i in self.final_mix_ingredients],
            "autolyse_duration_min": self.autolyse_duration_min,
        }

"""
core/dough_types.py - Dough type catalogue, defaults and inference.

Defaults are suggestions applied when a baker picks a dough type; every
field remains editable on the recipe.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from ..errors import EngineWarning, WarningCode, WarningSeverity
from ..mixing.patterns import is_chemical_leavener, is_semolina, is_yeast
from ..utils import parse_enum, safe_divide
from .enums import DoughType, IngredientCategory, MixType, PrefermentType

logger = logging.getLogger(__name__)


DOUGH_TYPE_LABELS: Dict[DoughType, str] = {
    DoughType.LEAN: "Lean",
    DoughType.ENRICHED: "Enriched",
    DoughType.RICH: "Rich",
    DoughType.LAMINATED_YEASTED: "Laminated (Yeasted)",
    DoughType.LAMINATED: "Laminated (Puff)",
    DoughType.SOURDOUGH: "Sourdough",
    DoughType.PIZZA: "Pizza",
    DoughType.FLATBREAD: "Flatbread",
    DoughType.SHORTCRUST: "Shortcrust",
    DoughType.SWEET_PASTRY: "Sweet Pastry",
    DoughType.CHOUX: "Choux",
    DoughType.COOKIE: "Cookie",
    DoughType.PASTA: "Pasta",
}

DOUGH_TYPE_GROUPS: Dict[str, List[DoughType]] = {
    "Bread": [
        DoughType.LEAN,
        DoughType.ENRICHED,
        DoughType.RICH,
        DoughType.LAMINATED_YEASTED,
        DoughType.LAMINATED,
        DoughType.SOURDOUGH,
        DoughType.PIZZA,
        DoughType.FLATBREAD,
    ],
    "Pastry": [
        DoughType.SHORTCRUST,
        DoughType.SWEET_PASTRY,
        DoughType.CHOUX,
        DoughType.COOKIE,
        DoughType.PASTA,
    ],
}


@dataclass(frozen=True)
class DoughTypeDefaults:
    """Recipe parameters suggested for a dough type."""
    ddt: Optional[float]
    autolyse: bool
    autolyse_duration_min: int
    mix_type: MixType
    process_loss_pct: float
    bake_loss_pct: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ddt": self.ddt,
            "autolyse": self.autolyse,
            "autolyse_duration_min": self.autolyse_duration_min,
            "mix_type": self.mix_type.value,
            "process_loss_pct": self.process_loss_pct,
            "bake_loss_pct": self.bake_loss_pct,
        }


DOUGH_TYPE_DEFAULTS: Dict[DoughType, DoughTypeDefaults] = {
    DoughType.LEAN: DoughTypeDefaults(24, True, 20, MixType.SHORT_MIX, 0.03, 0.12),
    DoughType.ENRICHED: DoughTypeDefaults(24, False, 20, MixType.IMPROVED_MIX, 0.02, 0.10),
    DoughType.RICH: DoughTypeDefaults(22, False, 20, MixType.INTENSIVE_MIX, 0.02, 0.08),
    DoughType.LAMINATED_YEASTED: DoughTypeDefaults(22, False, 20, MixType.SHORT_MIX, 0.05, 0.10),
    DoughType.LAMINATED: DoughTypeDefaults(20, False, 20, MixType.SHORT_MIX, 0.05, 0.10),
    DoughType.SOURDOUGH: DoughTypeDefaults(24, True, 30, MixType.SHORT_MIX, 0.03, 0.14),
    DoughType.PIZZA: DoughTypeDefaults(24, False, 20, MixType.INTENSIVE_MIX, 0.02, 0.08),
    DoughType.FLATBREAD: DoughTypeDefaults(24, False, 20, MixType.IMPROVED_MIX, 0.02, 0.08),
    DoughType.SHORTCRUST: DoughTypeDefaults(18, False, 20, MixType.SHORT_MIX, 0.03, 0.05),
    DoughType.SWEET_PASTRY: DoughTypeDefaults(18, False, 20, MixType.SHORT_MIX, 0.03, 0.05),
    # choux is cooked on the stove; no dough temperature target
    DoughType.CHOUX: DoughTypeDefaults(None, False, 20, MixType.SHORT_MIX, 0.05, 0.15),
    DoughType.COOKIE: DoughTypeDefaults(20, False, 20, MixType.SHORT_MIX, 0.02, 0.03),
    DoughType.PASTA: DoughTypeDefaults(22, False, 20, MixType.IMPROVED_MIX, 0.02, 0.0),
}

# Dough types absent here accept every mix type.
DOUGH_TYPE_MIX_CONSTRAINTS: Dict[DoughType, List[MixType]] = {
    DoughType.LAMINATED_YEASTED: [MixType.SHORT_MIX, MixType.SHORT_IMPROVED],
    DoughType.LAMINATED: [MixType.SHORT_MIX, MixType.SHORT_IMPROVED],
    DoughType.SHORTCRUST: [MixType.SHORT_MIX],
    DoughType.SWEET_PASTRY: [MixType.SHORT_MIX],
    DoughType.COOKIE: [MixType.SHORT_MIX],
}


def get_label(dough_type) -> str:
    """Human label for a dough type, or "" when unknown."""
    dt = parse_enum(DoughType, dough_type)
    return DOUGH_TYPE_LABELS.get(dt, "") if dt else ""


def get_defaults(dough_type) -> Optional[DoughTypeDefaults]:
    dt = parse_enum(DoughType, dough_type)
    return DOUGH_TYPE_DEFAULTS.get(dt) if dt else None


def allowed_mix_types(dough_type) -> List[MixType]:
    """Mix types that make sense for a dough type (all of them when unconstrained)."""
    dt = parse_enum(DoughType, dough_type)
    if dt in DOUGH_TYPE_MIX_CONSTRAINTS:
        return list(DOUGH_TYPE_MIX_CONSTRAINTS[dt])
    return list(MixType)


def check_mix_constraint(dough_type, mix_type) -> Optional[EngineWarning]:
    """
    Check a mix type against the soft constraints of a dough type.

    Returns:
        An advisory EngineWarning, or None when the combination is fine
        or either value is unknown.
    """
    dt = parse_enum(DoughType, dough_type)
    mt = parse_enum(MixType, mix_type)
    if dt is None or mt is None:
        return None
    allowed = DOUGH_TYPE_MIX_CONSTRAINTS.get(dt)
    if not allowed or mt in allowed:
        return None
    names = ", ".join(m.value for m in allowed)
    return EngineWarning(
        code=WarningCode.MIX_TYPE_CONSTRAINT,
        severity=WarningSeverity.ADVISORY,
        message=f"{mt.value} is unusual for {DOUGH_TYPE_LABELS[dt]} doughs; typical: {names}",
        source="core.dough_types",
    )


@dataclass(frozen=True)
class DoughTypeSuggestion:
    """Inferred dough type with a confidence label ("high" or "medium")."""
    type: DoughType
    confidence: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "confidence": self.confidence}


def _category_total(ingredients, category: IngredientCategory) -> float:
    return sum(i.base_qty or 0 for i in ingredients if i.category == category)


def infer_dough_type(ingredients: Optional[Iterable]) -> Optional[DoughTypeSuggestion]:
    """
    Infer a dough type from ingredient composition.

    Only strong signals produce a suggestion; laminated, choux, pizza and
    flatbread doughs cannot be told apart by ingredients alone.

    Args:
        ingredients: Recipe ingredients (base masses are used)

    Returns:
        DoughTypeSuggestion or None
    """
    if not ingredients:
        return None
    ingredients = list(ingredients)

    total_flour = _category_total(ingredients, IngredientCategory.FLOUR)
    if total_flour <= 0:
        return None

    fat_bp = safe_divide(_category_total(ingredients, IngredientCategory.ENRICHMENT), total_flour)
    sugar_bp = safe_divide(_category_total(ingredients, IngredientCategory.SWEETENER), total_flour)

    leavening = [i for i in ingredients if i.category == IngredientCategory.LEAVENING]
    has_yeast = any(is_yeast(i.name) for i in leavening)
    has_chemical = any(is_chemical_leavener(i.name) for i in leavening)

    has_levain = any(
        i.is_enabled_preferment and i.settings.type == PrefermentType.LEVAIN
        for i in ingredients
    )

    semolina = sum(
        i.base_qty or 0
        for i in ingredients
        if i.category == IngredientCategory.FLOUR and is_semolina(i.name)
    )
    semolina_pct = safe_divide(semolina, total_flour)

    # Priority-ordered rules
    suggestion = None
    if has_levain:
        suggestion = DoughTypeSuggestion(DoughType.SOURDOUGH, "high")
    elif semolina_pct > 0.5 and not has_yeast:
        suggestion = DoughTypeSuggestion(DoughType.PASTA, "high")
    elif has_chemical and sugar_bp > 0.12 and fat_bp > 0.10:
        suggestion = DoughTypeSuggestion(DoughType.COOKIE, "medium")
    elif fat_bp > 0.12 and has_yeast:
        suggestion = DoughTypeSuggestion(DoughType.RICH, "medium")
    elif fat_bp >= 0.05 and has_yeast:
        suggestion = DoughTypeSuggestion(DoughType.ENRICHED, "medium")
    elif fat_bp < 0.02 and has_yeast and sugar_bp < 0.05:
        suggestion = DoughTypeSuggestion(DoughType.LEAN, "medium")

    if suggestion:
        logger.debug(
            f"Inferred dough type {suggestion.type.value} ({suggestion.confidence}): "
            f"fat={fat_bp:.3f} sugar={sugar_bp:.3f} yeast={has_yeast}"
        )
    return suggestion

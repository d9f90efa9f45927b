"""
core/models.py - Recipe input data structures.

Recipes arrive as immutable snapshots built by the calling layer. Every
type here serializes with to_dict(); input types also accept the caller's
plain-dict payload through from_dict().
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from ..errors import InvalidRecipeError
from ..utils import parse_enum
from .enums import ComponentType, DoughType, IngredientCategory, MixType, PrefermentType, ProcessStage


AUTOLYSE_OVERRIDE_VALUES = ("autolyse", "final")


def _as_bool(value: Any, default: bool = True) -> bool:
    # persistence layers hand over 0/1 integers for flags
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _as_float(value: Any, default: float = 0.0) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_recipe_kind(value: Any) -> Optional[Union[DoughType, ComponentType]]:
    """Dough type, or a component kind (TOPPING, GLAZE, ...) for companion recipes."""
    return parse_enum(DoughType, value) or parse_enum(ComponentType, value)


@dataclass(frozen=True)
class PrefermentSettings:
    """Build settings carried by a PREFERMENT ingredient."""
    enabled: bool = True
    type: PrefermentType = PrefermentType.CUSTOM
    ddt: Optional[float] = None
    fermentation_duration_min: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "type": self.type.value,
            "ddt": self.ddt,
            "fermentation_duration_min": self.fermentation_duration_min,
        }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "PrefermentSettings":
        if not data:
            return cls()
        return cls(
            enabled=_as_bool(data.get("enabled"), True),
            type=parse_enum(PrefermentType, data.get("type"), PrefermentType.CUSTOM),
            ddt=_optional_float(data.get("ddt")),
            fermentation_duration_min=_optional_float(data.get("fermentation_duration_min")),
        )


@dataclass(frozen=True)
class Ingredient:
    """
    A single recipe line.

    base_qty is the mass (grams) the baker entered. preferment_bakers_pcts
    maps a preferment id to this ingredient's baker's percentage inside
    that preferment.
    """
    id: str
    name: str
    category: IngredientCategory
    base_qty: float = 0.0
    sort_order: int = 0
    preferment_bakers_pcts: Dict[str, float] = field(default_factory=dict)
    preferment_settings: Optional[PrefermentSettings] = None

    @property
    def is_preferment(self) -> bool:
        return self.category == IngredientCategory.PREFERMENT

    @property
    def settings(self) -> PrefermentSettings:
        """Preferment settings, defaulting to an enabled CUSTOM build."""
        return self.preferment_settings or PrefermentSettings()

    @property
    def is_enabled_preferment(self) -> bool:
        return self.is_preferment and self.settings.enabled

    @property
    def preferment_type(self) -> Optional[PrefermentType]:
        if not self.is_preferment:
            return None
        return self.settings.type

    def contribution_to(self, preferment_id: str) -> float:
        """Baker's percentage this ingredient declares into a preferment (0 if none)."""
        pct = self.preferment_bakers_pcts.get(preferment_id)
        if pct is None or pct <= 0:
            return 0.0
        return pct

    @property
    def self_inoculation_pct(self) -> float:
        """
        Percentage a preferment declares into itself.

        This is starter carry-over (part of the last build seeding the
        next), not a dependency on another preferment.
        """
        if not self.is_preferment:
            return 0.0
        return self.contribution_to(self.id)

    @property
    def contributions(self) -> Dict[str, float]:
        """Positive contributions into preferments other than itself."""
        return {
            pf_id: pct
            for pf_id, pct in self.preferment_bakers_pcts.items()
            if pf_id != self.id and pct is not None and pct > 0
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "base_qty": self.base_qty,
            "sort_order": self.sort_order,
            "preferment_bakers_pcts": dict(self.preferment_bakers_pcts),
            "preferment_settings": (
                self.preferment_settings.to_dict() if self.preferment_settings else None
            ),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Ingredient":
        if not isinstance(data, Mapping):
            raise InvalidRecipeError(f"expected an object, got {type(data).__name__}", "ingredient")
        if not data.get("id"):
            raise InvalidRecipeError("missing id", "ingredient")
        ing_id = str(data["id"])
        category = parse_enum(IngredientCategory, data.get("category"))
        if category is None:
            raise InvalidRecipeError(
                f"unknown category {data.get('category')!r}", f"ingredient[{ing_id}]"
            )

        pcts: Dict[str, float] = {}
        for pf_id, pct in (data.get("preferment_bakers_pcts") or {}).items():
            value = _optional_float(pct)
            if value is not None:
                pcts[str(pf_id)] = value

        settings = None
        if category == IngredientCategory.PREFERMENT or data.get("preferment_settings"):
            raw = data.get("preferment_settings")
            settings = PrefermentSettings.from_dict(raw) if raw else None

        return cls(
            id=ing_id,
            name=str(data.get("name") or ""),
            category=category,
            base_qty=_as_float(data.get("base_qty")),
            sort_order=int(_as_float(data.get("sort_order"))),
            preferment_bakers_pcts=pcts,
            preferment_settings=settings,
        )


@dataclass(frozen=True)
class ProcessStep:
    """One production step; a set preferment_ingredient_id marks a preferment's own build."""
    stage: ProcessStage
    title: str
    description: str = ""
    duration_min: Optional[float] = None
    temperature: Optional[float] = None
    mixer_speed: Optional[int] = None
    preferment_ingredient_id: Optional[str] = None
    id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        # every field is emitted, nulls included
        return {
            "id": self.id,
            "stage": self.stage.value,
            "title": self.title,
            "description": self.description,
            "duration_min": self.duration_min,
            "temperature": self.temperature,
            "mixer_speed": self.mixer_speed,
            "preferment_ingredient_id": self.preferment_ingredient_id,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProcessStep":
        stage = parse_enum(ProcessStage, data.get("stage"))
        if stage is None:
            raise InvalidRecipeError(f"unknown stage {data.get('stage')!r}", "process_step")
        speed = data.get("mixer_speed")
        return cls(
            id=str(data["id"]) if data.get("id") is not None else None,
            stage=stage,
            title=str(data.get("title") or stage.value),
            description=str(data.get("description") or ""),
            duration_min=_optional_float(data.get("duration_min")),
            temperature=_optional_float(data.get("temperature")),
            mixer_speed=int(speed) if speed is not None else None,
            preferment_ingredient_id=data.get("preferment_ingredient_id") or None,
        )


@dataclass(frozen=True)
class Recipe:
    """Fully-populated recipe snapshot."""
    id: str
    name: str
    yield_per_piece: float = 0.0
    ddt: float = 24.0
    process_loss_pct: float = 0.0
    bake_loss_pct: float = 0.0
    autolyse: bool = False
    autolyse_duration_min: float = 20
    autolyse_overrides: Dict[str, str] = field(default_factory=dict)
    mix_type: Optional[MixType] = None
    dough_type: Optional[Union[DoughType, ComponentType]] = None  # component kinds for companion recipes
    base_ingredient_category: IngredientCategory = IngredientCategory.FLOUR
    ingredients: Tuple[Ingredient, ...] = ()
    process_steps: Tuple[ProcessStep, ...] = ()

    @property
    def preferments(self) -> List[Ingredient]:
        return [i for i in self.ingredients if i.is_preferment]

    @property
    def enabled_preferments(self) -> List[Ingredient]:
        return [i for i in self.ingredients if i.is_enabled_preferment]

    def get_ingredient(self, ingredient_id: str) -> Optional[Ingredient]:
        for ing in self.ingredients:
            if ing.id == ingredient_id:
                return ing
        return None

    @property
    def main_steps(self) -> List[ProcessStep]:
        """Saved steps for the main dough."""
        return [s for s in self.process_steps if not s.preferment_ingredient_id]

    def preferment_steps(self, preferment_id: str) -> List[ProcessStep]:
        """Saved steps for one preferment's own build."""
        return [s for s in self.process_steps if s.preferment_ingredient_id == preferment_id]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "yield_per_piece": self.yield_per_piece,
            "ddt": self.ddt,
            "process_loss_pct": self.process_loss_pct,
            "bake_loss_pct": self.bake_loss_pct,
            "autolyse": self.autolyse,
            "autolyse_duration_min": self.autolyse_duration_min,
            "autolyse_overrides": dict(self.autolyse_overrides),
            "mix_type": self.mix_type.value if self.mix_type else None,
            "dough_type": self.dough_type.value if self.dough_type else None,
            "base_ingredient_category": self.base_ingredient_category.value,
            "ingredients": [i.to_dict() for i in self.ingredients],
            "process_steps": [s.to_dict() for s in self.process_steps],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Recipe":
        """
        Build a Recipe from a plain-dict payload.

        Raises:
            InvalidRecipeError: if the payload is structurally invalid
                (missing id/name, unknown ingredient category or stage).
        """
        if not isinstance(data, Mapping):
            raise InvalidRecipeError(f"expected an object, got {type(data).__name__}", "recipe")
        if not data.get("id"):
            raise InvalidRecipeError("missing id", "recipe")
        if not data.get("name"):
            raise InvalidRecipeError("missing name", "recipe")

        overrides = {
            str(k): v
            for k, v in (data.get("autolyse_overrides") or {}).items()
            if v in AUTOLYSE_OVERRIDE_VALUES
        }
        autolyse_duration = _as_float(data.get("autolyse_duration_min"), 0.0)

        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            yield_per_piece=_as_float(data.get("yield_per_piece")),
            ddt=_as_float(data.get("ddt"), 24.0),
            process_loss_pct=_as_float(data.get("process_loss_pct")),
            bake_loss_pct=_as_float(data.get("bake_loss_pct")),
            autolyse=_as_bool(data.get("autolyse"), False),
            autolyse_duration_min=autolyse_duration or 20,
            autolyse_overrides=overrides,
            mix_type=parse_enum(MixType, data.get("mix_type")),
            dough_type=parse_recipe_kind(data.get("dough_type")),
            base_ingredient_category=parse_enum(
                IngredientCategory,
                data.get("base_ingredient_category"),
                IngredientCategory.FLOUR,
            ),
            ingredients=tuple(Ingredient.from_dict(i) for i in data.get("ingredients") or []),
            process_steps=tuple(ProcessStep.from_dict(s) for s in data.get("process_steps") or []),
        )

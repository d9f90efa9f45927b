"""
doughplan/schemas.py - Pydantic boundary models

Validates recipe payloads arriving from a request layer before they become
immutable Recipe snapshots. The engine itself never needs these: it accepts
any structurally valid Recipe and degrades numerically.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from .core.enums import IngredientCategory, MixType, PrefermentType, ProcessStage
from .core.models import AUTOLYSE_OVERRIDE_VALUES, Recipe, parse_recipe_kind
from .utils import parse_enum


class PrefermentSettingsPayload(BaseModel):
    """Preferment build settings."""

    enabled: bool = True
    type: PrefermentType = PrefermentType.CUSTOM
    ddt: Optional[float] = Field(None, description="Preferment DDT override (°C)")
    fermentation_duration_min: Optional[float] = Field(None, gt=0)


class IngredientPayload(BaseModel):
    """A single recipe line."""

    id: str = Field(..., min_length=1)
    name: str = ""
    category: IngredientCategory
    base_qty: float = Field(default=0.0, ge=0.0, description="Mass in grams")
    sort_order: int = 0
    preferment_bakers_pcts: Dict[str, float] = Field(default_factory=dict)
    preferment_settings: Optional[PrefermentSettingsPayload] = None

    @field_validator('category', mode='before')
    @classmethod
    def validate_category(cls, v):
        category = parse_enum(IngredientCategory, v)
        if category is None:
            raise ValueError(f'Unknown ingredient category: {v}')
        return category

    @field_validator('preferment_bakers_pcts')
    @classmethod
    def validate_pcts(cls, v):
        for pf_id, pct in v.items():
            if pct < 0:
                raise ValueError(f'Negative baker\'s percentage for preferment {pf_id}')
        return v


class ProcessStepPayload(BaseModel):
    """A saved production step."""

    id: Optional[str] = None
    stage: ProcessStage
    title: str = ""
    description: str = ""
    duration_min: Optional[float] = Field(None, ge=0.0)
    temperature: Optional[float] = None
    mixer_speed: Optional[int] = Field(None, ge=1, le=2)
    preferment_ingredient_id: Optional[str] = None


class RecipePayload(BaseModel):
    """Fully-populated recipe as sent by the calling layer."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    yield_per_piece: float = Field(default=0.0, ge=0.0)
    ddt: float = 24.0
    process_loss_pct: float = Field(default=0.0, ge=0.0, le=1.0)
    bake_loss_pct: float = Field(default=0.0, ge=0.0, le=1.0)
    autolyse: bool = False
    autolyse_duration_min: float = Field(default=20, gt=0)
    autolyse_overrides: Dict[str, str] = Field(default_factory=dict)
    mix_type: Optional[MixType] = None
    dough_type: Optional[str] = None
    base_ingredient_category: IngredientCategory = IngredientCategory.FLOUR
    ingredients: List[IngredientPayload] = Field(default_factory=list)
    process_steps: List[ProcessStepPayload] = Field(default_factory=list)

    @field_validator('autolyse_overrides')
    @classmethod
    def validate_overrides(cls, v):
        for ing_id, value in v.items():
            if value not in AUTOLYSE_OVERRIDE_VALUES:
                raise ValueError(
                    f'Invalid autolyse override for {ing_id}: {value}. '
                    f'Valid: {list(AUTOLYSE_OVERRIDE_VALUES)}'
                )
        return v

    @field_validator('mix_type', mode='before')
    @classmethod
    def validate_mix_type(cls, v):
        if v is None or v == "":
            return None
        mix_type = parse_enum(MixType, v)
        if mix_type is None:
            raise ValueError(f'Unknown mix type: {v}')
        return mix_type

    @field_validator('dough_type', mode='before')
    @classmethod
    def validate_dough_type(cls, v):
        if v is None or v == "":
            return None
        kind = parse_recipe_kind(v)
        if kind is None:
            raise ValueError(f'Unknown dough type: {v}')
        return kind.value

    @field_validator('ingredients')
    @classmethod
    def validate_unique_ids(cls, v):
        seen = set()
        for ing in v:
            if ing.id in seen:
                raise ValueError(f'Duplicate ingredient id: {ing.id}')
            seen.add(ing.id)
        return v

    def to_recipe(self) -> Recipe:
        """Immutable Recipe snapshot of this payload."""
        return Recipe.from_dict(self.model_dump(mode='json'))

"""
Unit tests for schemas.py

Tests payload validation at the request boundary and conversion into
Recipe snapshots.
"""

import pytest
from pydantic import ValidationError

from doughplan.core.enums import ComponentType, DoughType, IngredientCategory, MixType, PrefermentType
from doughplan.schemas import IngredientPayload, ProcessStepPayload, RecipePayload


def payload(**overrides):
    data = {
        "id": "r1",
        "name": "Baguette",
        "yield_per_piece": 350,
        "mix_type": "Short Mix",
        "ingredients": [
            {"id": "flour", "name": "T65", "category": "FLOUR", "base_qty": 1000,
             "preferment_bakers_pcts": {"poolish": 100}},
            {"id": "water", "name": "Water", "category": "liquid", "base_qty": 680,
             "preferment_bakers_pcts": {"poolish": 100}},
            {"id": "poolish", "name": "Poolish", "category": "PREFERMENT", "base_qty": 400,
             "preferment_settings": {"type": "POOLISH", "fermentation_duration_min": 720}},
        ],
        "process_steps": [{"stage": "BAKE", "title": "Bake", "duration_min": 24, "temperature": 250}],
    }
    data.update(overrides)
    return data


class TestRecipePayload:
    """Test RecipePayload validation."""

    def test_valid(self):
        """Test a complete payload validates and converts."""
        recipe = RecipePayload(**payload()).to_recipe()
        assert recipe.mix_type == MixType.SHORT_MIX
        assert recipe.ingredients[1].category == IngredientCategory.LIQUID
        pf = recipe.get_ingredient("poolish")
        assert pf.settings.type == PrefermentType.POOLISH
        assert pf.settings.fermentation_duration_min == 720
        assert recipe.process_steps[0].temperature == 250

    def test_dough_type_normalized(self):
        """Test dough types and component kinds accept loose spellings."""
        assert RecipePayload(**payload(dough_type="sweet pastry")).dough_type == "SWEET_PASTRY"
        assert RecipePayload(**payload(dough_type="glaze")).to_recipe().dough_type == ComponentType.GLAZE
        assert RecipePayload(**payload(dough_type="LEAN")).to_recipe().dough_type == DoughType.LEAN

    def test_empty_mix_type_is_unset(self):
        """Test an empty mix type reads as unset."""
        assert RecipePayload(**payload(mix_type="")).mix_type is None

    @pytest.mark.parametrize("field,value", [
        ("mix_type", "Blender Mix"),
        ("dough_type", "brioche"),
        ("process_loss_pct", 1.5),
        ("bake_loss_pct", -0.1),
        ("autolyse_duration_min", 0),
        ("autolyse_overrides", {"flour": "later"}),
        ("name", ""),
    ])
    def test_rejected_values(self, field, value):
        """Test invalid recipe fields are rejected."""
        with pytest.raises(ValidationError):
            RecipePayload(**payload(**{field: value}))

    def test_duplicate_ingredient_ids(self):
        """Test ingredient ids must be unique."""
        data = payload()
        data["ingredients"].append({"id": "flour", "name": "Rye", "category": "FLOUR", "base_qty": 100})
        with pytest.raises(ValidationError, match="Duplicate ingredient id"):
            RecipePayload(**data)

    def test_valid_overrides_kept(self):
        """Test autolyse/final overrides pass through."""
        recipe = RecipePayload(**payload(autolyse=True, autolyse_overrides={"poolish": "final"})).to_recipe()
        assert recipe.autolyse_overrides == {"poolish": "final"}


class TestIngredientPayload:
    """Test IngredientPayload validation."""

    def test_unknown_category(self):
        """Test unknown categories are rejected."""
        with pytest.raises(ValidationError, match="Unknown ingredient category"):
            IngredientPayload(id="x", category="MAGIC")

    def test_negative_values(self):
        """Test negative masses and percentages are rejected."""
        with pytest.raises(ValidationError):
            IngredientPayload(id="x", category="FLOUR", base_qty=-1)
        with pytest.raises(ValidationError):
            IngredientPayload(id="x", category="FLOUR", preferment_bakers_pcts={"pf": -5})

    def test_empty_id(self):
        """Test an empty id is rejected."""
        with pytest.raises(ValidationError):
            IngredientPayload(id="", category="FLOUR")


class TestProcessStepPayload:
    """Test ProcessStepPayload validation."""

    def test_mixer_speed_range(self):
        """Test mixers have two speeds."""
        assert ProcessStepPayload(stage="MIXING", mixer_speed=2).mixer_speed == 2
        with pytest.raises(ValidationError):
            ProcessStepPayload(stage="MIXING", mixer_speed=3)

    def test_negative_duration(self):
        """Test durations cannot be negative."""
        with pytest.raises(ValidationError):
            ProcessStepPayload(stage="FOLD", duration_min=-5)

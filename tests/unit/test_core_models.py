"""
Unit tests for core/models.py, core/composition.py and utils.py
"""

import pytest

from doughplan.core.composition import (
    category_qty_in_preferment,
    preferment_breakdown,
    qty_in_preferment,
    seed_preferment_pcts,
)
from doughplan.core.constants import effective_ddt, effective_fermentation_duration, format_duration
from doughplan.core.enums import (
    ComponentType,
    DoughType,
    IngredientCategory,
    MixType,
    PrefermentType,
    ProcessStage,
)
from doughplan.core.models import Ingredient, PrefermentSettings, ProcessStep, Recipe, parse_recipe_kind
from doughplan.errors import InvalidRecipeError
from doughplan.utils import determinize_dict, parse_enum, safe_divide

from tests.conftest import ing, preferment


def recipe_dict(**overrides):
    data = {
        "id": "r1",
        "name": "Country Loaf",
        "ingredients": [
            {"id": "flour", "name": "Bread Flour", "category": "FLOUR", "base_qty": 1000},
            {"id": "water", "name": "Water", "category": "LIQUID", "base_qty": "700"},
        ],
    }
    data.update(overrides)
    return data


class TestRecipeFromDict:
    """Test Recipe.from_dict."""

    def test_minimal(self):
        """Test defaults for omitted fields."""
        recipe = Recipe.from_dict(recipe_dict())
        assert recipe.ddt == 24.0
        assert recipe.autolyse is False
        assert recipe.autolyse_duration_min == 20
        assert recipe.base_ingredient_category == IngredientCategory.FLOUR
        assert recipe.ingredients[1].base_qty == 700.0

    def test_integer_flags_and_names(self):
        """Test 0/1 flags and enum names from a persistence layer."""
        recipe = Recipe.from_dict(recipe_dict(autolyse=1, mix_type="short mix", dough_type="sourdough"))
        assert recipe.autolyse is True
        assert recipe.mix_type == MixType.SHORT_MIX
        assert recipe.dough_type == DoughType.SOURDOUGH

    def test_component_kind(self):
        """Test companion recipes carry a component kind."""
        assert Recipe.from_dict(recipe_dict(dough_type="GLAZE")).dough_type == ComponentType.GLAZE

    def test_unknown_dough_type_dropped(self):
        """Test unknown dough types read as unset."""
        assert Recipe.from_dict(recipe_dict(dough_type="brioche")).dough_type is None

    def test_invalid_overrides_dropped(self):
        """Test only autolyse/final overrides are kept."""
        recipe = Recipe.from_dict(recipe_dict(autolyse_overrides={"flour": "final", "water": "later"}))
        assert recipe.autolyse_overrides == {"flour": "final"}

    def test_zero_autolyse_duration_defaults(self):
        """Test a zero autolyse duration falls back to 20 minutes."""
        assert Recipe.from_dict(recipe_dict(autolyse_duration_min=0)).autolyse_duration_min == 20

    @pytest.mark.parametrize("data,path", [
        ({"name": "x"}, "recipe"),
        ({"id": "r"}, "recipe"),
        ("not a dict", "recipe"),
    ])
    def test_structural_errors(self, data, path):
        """Test missing identity fields raise with a path."""
        with pytest.raises(InvalidRecipeError) as exc:
            Recipe.from_dict(data)
        assert exc.value.path == path

    def test_unknown_category(self):
        """Test an unknown category names the ingredient."""
        data = recipe_dict(ingredients=[{"id": "x", "name": "X", "category": "MAGIC"}])
        with pytest.raises(InvalidRecipeError, match=r"ingredient\[x\]"):
            Recipe.from_dict(data)

    def test_unknown_stage(self):
        """Test an unknown process stage raises."""
        with pytest.raises(InvalidRecipeError):
            Recipe.from_dict(recipe_dict(process_steps=[{"stage": "LEVITATE"}]))

    def test_round_trip(self):
        """Test to_dict output is accepted by from_dict."""
        recipe = Recipe.from_dict(recipe_dict(
            mix_type="Improved Mix",
            ingredients=[
                {"id": "flour", "name": "Flour", "category": "FLOUR", "base_qty": 900,
                 "preferment_bakers_pcts": {"pf": 100}},
                {"id": "pf", "name": "Poolish", "category": "PREFERMENT", "base_qty": 300,
                 "preferment_settings": {"type": "POOLISH", "enabled": 1, "fermentation_duration_min": "600"}},
            ],
            process_steps=[{"stage": "BAKE", "title": "Bake", "duration_min": 40}],
        ))
        assert Recipe.from_dict(recipe.to_dict()) == recipe

    def test_step_partitions(self):
        """Test saved steps split into main and per-preferment lists."""
        recipe = Recipe.from_dict(recipe_dict(process_steps=[
            {"stage": "PF_MIX", "preferment_ingredient_id": "pf"},
            {"stage": "MIXING", "title": "Mix"},
        ]))
        assert [s.stage for s in recipe.main_steps] == [ProcessStage.MIXING]
        assert [s.stage for s in recipe.preferment_steps("pf")] == [ProcessStage.PF_MIX]
        assert recipe.preferment_steps("pf")[0].title == "PF_MIX"


class TestIngredient:
    """Test Ingredient helpers."""

    def test_contributions_exclude_self(self):
        """Test self-inoculation is reported apart from contributions."""
        lev = preferment("lev", "Levain", 200, PrefermentType.LEVAIN, {"lev": 20, "main": 10, "zero": 0})
        assert lev.self_inoculation_pct == 20
        assert lev.contributions == {"main": 10}

    def test_default_settings(self):
        """Test a preferment without settings is an enabled CUSTOM build."""
        pf = Ingredient("pf", "Starter", IngredientCategory.PREFERMENT, 100)
        assert pf.is_enabled_preferment
        assert pf.preferment_type == PrefermentType.CUSTOM
        assert ing("f", "Flour", IngredientCategory.FLOUR, 1).preferment_type is None

    def test_settings_from_dict(self):
        """Test loose settings values."""
        settings = PrefermentSettings.from_dict({"enabled": "false", "type": "biga", "ddt": ""})
        assert settings.enabled is False
        assert settings.type == PrefermentType.BIGA
        assert settings.ddt is None


class TestComposition:
    """Test proportional preferment composition."""

    @pytest.fixture
    def dough(self):
        return [
            ing("flour", "Flour", IngredientCategory.FLOUR, 800, {"pf": 100}),
            ing("water", "Water", IngredientCategory.LIQUID, 500, {"pf": 100}),
            preferment("pf", "Poolish", 400, PrefermentType.POOLISH),
        ]

    def test_breakdown(self, dough):
        """Test the preferment mass splits by declared percentage."""
        assert preferment_breakdown(dough[2], dough) == {"flour": 200, "water": 200}
        assert qty_in_preferment(dough[0], dough[2], dough) == 200

    def test_category_share(self, dough):
        """Test a missing category reads 0, missing data reads None."""
        assert category_qty_in_preferment(dough[2], dough, IngredientCategory.LIQUID) == 200
        assert category_qty_in_preferment(dough[2], dough, IngredientCategory.LEAVENING) == 0
        orphan = preferment("other", "Other", 100)
        assert category_qty_in_preferment(orphan, dough, IngredientCategory.LIQUID) is None

    def test_disabled_breakdown_empty(self, dough):
        """Test a disabled preferment has no composition."""
        off = preferment("pf", "Poolish", 400, PrefermentType.POOLISH, enabled=False)
        assert preferment_breakdown(off, dough) == {}

    def test_seed_biga(self):
        """Test a new biga seeds the first flour, liquid and leavening lines."""
        lines = [
            ing("flour", "Bread Flour", IngredientCategory.FLOUR, 800),
            ing("rye", "Rye", IngredientCategory.FLOUR, 200),
            ing("water", "Water", IngredientCategory.LIQUID, 700),
            ing("yeast", "Yeast", IngredientCategory.LEAVENING, 3),
            ing("salt", "Salt", IngredientCategory.SEASONING, 20),
        ]
        biga = preferment("biga", "Biga", 300, PrefermentType.BIGA)
        seeded = seed_preferment_pcts(biga, lines)
        assert [i.contribution_to("biga") for i in seeded] == pytest.approx([100, 0, 60, 0.5, 0])
        assert lines[0].preferment_bakers_pcts == {}

    def test_seed_keeps_declared_and_custom(self, dough):
        """Test existing percentages stay and CUSTOM builds seed nothing."""
        seeded = seed_preferment_pcts(dough[2], dough)
        assert [i.preferment_bakers_pcts for i in seeded] == [i.preferment_bakers_pcts for i in dough]
        custom = preferment("c", "Custom", 100)
        assert all(i.contribution_to("c") == 0 for i in seed_preferment_pcts(custom, dough))


class TestConstantsAndUtils:
    """Test shared helpers."""

    def test_fermentation_duration(self):
        """Test override, then type default."""
        assert effective_fermentation_duration(PrefermentSettings(type=PrefermentType.BIGA)) == 960
        assert effective_fermentation_duration(PrefermentSettings(fermentation_duration_min=90)) == 90

    def test_effective_ddt(self):
        """Test the preferment DDT overrides the recipe's."""
        assert effective_ddt(PrefermentSettings(ddt=21), 24) == 21
        assert effective_ddt(PrefermentSettings(), 24) == 24
        assert effective_ddt(None, 24) == 24

    @pytest.mark.parametrize("minutes,expected", [(None, "0m"), (0, "0m"), (45, "45m"), (120, "2h"), (725, "12h 5m")])
    def test_format_duration(self, minutes, expected):
        """Test compact duration strings."""
        assert format_duration(minutes) == expected

    def test_parse_enum(self):
        """Test members, values, names and defaults."""
        assert parse_enum(MixType, MixType.SHORT_MIX) == MixType.SHORT_MIX
        assert parse_enum(MixType, "Intensive Mix") == MixType.INTENSIVE_MIX
        assert parse_enum(MixType, "short_improved") == MixType.SHORT_IMPROVED
        assert parse_enum(MixType, "", MixType.IMPROVED_MIX) == MixType.IMPROVED_MIX
        assert parse_enum(DoughType, 42) is None
        assert parse_recipe_kind("filling") == ComponentType.FILLING

    def test_safe_divide(self):
        """Test division by zero returns the default."""
        assert safe_divide(1, 0) == 0.0
        assert safe_divide(1, 0, 1.0) == 1.0
        assert safe_divide(3, 2) == 1.5

    def test_determinize_dict(self):
        """Test keys are sorted, floats rounded and enums flattened."""
        data = determinize_dict({"b": 1 / 3, "a": MixType.SHORT_MIX, "c": (1, 2)}, precision=3)
        assert list(data) == ["a", "b", "c"]
        assert data == {"a": "Short Mix", "b": 0.333, "c": [1, 2]}

    def test_process_step_to_dict_emits_nulls(self):
        """Test every field is present in the serialized step."""
        data = ProcessStep(ProcessStage.FOLD, "Fold").to_dict()
        assert data["duration_min"] is None
        assert data["preferment_ingredient_id"] is None
        assert data["stage"] == "FOLD"

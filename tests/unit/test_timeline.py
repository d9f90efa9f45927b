"""
Unit tests for production/timeline.py

Tests anchoring, preferment scheduling, companion tracks, milestones
and block ids.
"""

import pytest
from datetime import datetime, timedelta

from doughplan.core.enums import (
    CompanionRole,
    ComponentType,
    DoughType,
    IngredientCategory,
    MixType,
    PrefermentType,
    ProcessStage,
    TimelineMode,
    TrackType,
)
from doughplan.core.models import ProcessStep, Recipe
from doughplan.production import Companion, block_id_sequence, compute_timeline

from tests.conftest import ing, preferment, recipe_of

# Initial Mix 10, Fold 1 60, Bulk Rest 60, Divide & Preshape 5,
# Bench Rest 20, Shape 10, Retard 720, Final Proof 75, Bake 22
LEAN_IMPROVED_MIN = 982


def minutes(delta):
    return delta.total_seconds() / 60


@pytest.fixture
def curd():
    """Filling companion recipe: 15 minutes cooking, 60 cooling."""
    return Recipe(
        id="curd",
        name="Lemon Curd",
        dough_type=ComponentType.FILLING,
        ingredients=(
            ing("lemon", "Lemon Juice", IngredientCategory.LIQUID, 200),
            ing("sugar", "Sugar", IngredientCategory.SWEETENER, 150),
        ),
    )


class TestAnchoring:
    """Test forward and reverse scheduling of the main track."""

    def test_forward(self, lean_recipe, anchor):
        """Test forward mode fixes mix at the anchor."""
        timeline = compute_timeline(lean_recipe, anchor)
        main = timeline.main_track
        assert timeline.mode == TimelineMode.FORWARD
        assert timeline.mix_time == anchor
        assert main.start == anchor
        assert main.end == anchor + timedelta(minutes=LEAN_IMPROVED_MIN)
        assert timeline.computed_finish_time == main.end
        assert timeline.computed_mix_time is None

    def test_reverse(self, lean_recipe, anchor):
        """Test reverse mode fixes the finish at the anchor."""
        timeline = compute_timeline(lean_recipe, anchor, mode="reverse")
        assert timeline.main_track.end == anchor
        assert timeline.mix_time == anchor - timedelta(minutes=LEAN_IMPROVED_MIN)
        assert timeline.computed_mix_time == timeline.mix_time
        assert timeline.computed_finish_time == anchor

    def test_modes_agree(self, lean_recipe, anchor):
        """Test reverse from the forward finish reproduces the forward schedule."""
        forward = compute_timeline(lean_recipe, anchor)
        reverse = compute_timeline(lean_recipe, forward.computed_finish_time, mode=TimelineMode.REVERSE)
        assert reverse.mix_time == anchor
        assert [b.start for b in reverse.main_track.blocks] == [b.start for b in forward.main_track.blocks]

    def test_blocks_are_contiguous(self, lean_recipe, anchor):
        """Test each block starts when the previous one ends."""
        blocks = compute_timeline(lean_recipe, anchor).main_track.blocks
        for prev, nxt in zip(blocks, blocks[1:]):
            assert prev.end == nxt.start
        for block in blocks:
            assert minutes(block.end - block.start) == block.duration_min

    def test_invalid_mode(self, lean_recipe, anchor):
        """Test an unknown mode is rejected."""
        with pytest.raises(ValueError):
            compute_timeline(lean_recipe, anchor, mode="sideways")

    def test_mix_type_changes_bulk(self, lean_recipe, anchor):
        """Test the mix type argument drives the synthesized bulk."""
        timeline = compute_timeline(lean_recipe, anchor, mix_type="Short Mix")
        folds = [b for b in timeline.main_track.blocks if b.stage == ProcessStage.FOLD]
        assert len(folds) == 4
        assert sum(b.duration_min for b in folds) == 210

    def test_suggested_flag(self, lean_recipe, anchor):
        """Test synthesized steps are flagged."""
        blocks = compute_timeline(lean_recipe, anchor).main_track.blocks
        assert all(b.suggested for b in blocks)

    def test_saved_steps_used(self, lean_ingredients, anchor):
        """Test saved main steps replace synthesis, with mix-type fallbacks for open durations."""
        recipe = recipe_of(
            lean_ingredients,
            process_steps=(
                ProcessStep(ProcessStage.MIXING, "Mix", duration_min=12),
                ProcessStep(ProcessStage.FOLD, "Fold"),
                ProcessStep(ProcessStage.PROOF, "Proof"),
                ProcessStep(ProcessStage.BAKE, "Bake", duration_min=40, temperature=230),
            ),
        )
        timeline = compute_timeline(recipe, anchor, mix_type="Short Mix")
        blocks = timeline.main_track.blocks
        assert [b.label for b in blocks] == ["Mix", "Fold", "Proof", "Bake"]
        assert [b.duration_min for b in blocks] == [12, 45, 90, 40]
        assert not any(b.suggested for b in blocks)
        assert blocks[-1].temperature == 230

    def test_recipe_mix_type_used(self, lean_ingredients, anchor):
        """Test the recipe's own mix type applies when none is passed."""
        recipe = recipe_of(lean_ingredients, mix_type=MixType.INTENSIVE_MIX)
        folds = [b for b in compute_timeline(recipe, anchor).main_track.blocks if b.stage == ProcessStage.FOLD]
        assert [b.label for b in folds] == ["Bulk Rest"]

    def test_accepts_dict(self, anchor):
        """Test a plain dict recipe is accepted."""
        timeline = compute_timeline(
            {"id": "r", "name": "R", "ingredients": [{"id": "f", "name": "Flour", "category": "FLOUR", "base_qty": 1}]},
            anchor,
        )
        assert timeline.main_track is not None


class TestMilestones:
    """Test milestone markers."""

    def test_mix_oven_done(self, lean_recipe, anchor):
        """Test the three milestones."""
        timeline = compute_timeline(lean_recipe, anchor)
        assert [m.type for m in timeline.milestones] == ["mix", "oven", "done"]
        assert timeline.get_milestone("mix").time == anchor
        assert timeline.get_milestone("oven").time == timeline.main_track.end - timedelta(minutes=22)
        assert timeline.get_milestone("done").time == timeline.main_track.end

    def test_no_bake_no_oven(self, anchor):
        """Test pasta has no oven milestone."""
        recipe = recipe_of([ing("f", "Semolina", IngredientCategory.FLOUR, 500)], dough_type=DoughType.PASTA)
        timeline = compute_timeline(recipe, anchor)
        assert timeline.get_milestone("oven") is None
        assert timeline.get_milestone("done") is not None


class TestPrefermentTracks:
    """Test preferment scheduling."""

    def test_poolish_ready_by_mix(self, poolish_recipe, anchor):
        """Test a poolish is built backward from the mix time."""
        timeline = compute_timeline(poolish_recipe, anchor)
        track = timeline.get_track("pf-poolish")
        assert track.type == TrackType.PREFERMENT
        assert track.label == "Poolish"
        assert [b.stage for b in track.blocks] == [ProcessStage.PF_MIX, ProcessStage.PF_FERMENT]
        assert track.end == anchor
        assert track.blocks[1].duration_min == 720
        assert track.start == anchor - timedelta(minutes=725)
        assert timeline.earliest_start == track.start

    def test_nested_ready_by_tightened(self, nested_recipe, anchor):
        """Test a preferment feeding another is ready when that one starts."""
        timeline = compute_timeline(nested_recipe, anchor)
        levain = timeline.get_track("pf-levain")
        seed = timeline.get_track("pf-seed")
        assert levain.end == anchor
        assert seed.end == levain.start
        # feed 240 + mix 5 + ferment 480
        assert minutes(levain.end - levain.start) == 725
        assert seed.start == anchor - timedelta(minutes=1450)

    def test_dependents_scheduled_first(self, nested_recipe, anchor):
        """Test tracks are emitted deepest layer first."""
        ids = [t.id for t in compute_timeline(nested_recipe, anchor).tracks]
        assert ids == ["main", "pf-levain", "pf-seed"]

    def test_fermentation_override(self, lean_ingredients, anchor):
        """Test a preferment's fermentation override sets its ferment block."""
        recipe = recipe_of(lean_ingredients + [
            preferment("biga", "Biga", 300, PrefermentType.BIGA, fermentation_duration_min=600),
        ])
        track = compute_timeline(recipe, anchor).get_track("pf-biga")
        assert track.blocks[-1].duration_min == 600

    def test_saved_preferment_steps(self, lean_ingredients, anchor):
        """Test saved steps linked to a preferment are used for its track."""
        recipe = recipe_of(
            lean_ingredients + [preferment("sp", "Sponge", 300, PrefermentType.SPONGE)],
            process_steps=(
                ProcessStep(ProcessStage.PF_MIX, "Mix sponge", duration_min=8, preferment_ingredient_id="sp"),
                ProcessStep(ProcessStage.PF_FERMENT, "Rest sponge", preferment_ingredient_id="sp"),
            ),
        )
        timeline = compute_timeline(recipe, anchor)
        track = timeline.get_track("pf-sp")
        assert [b.label for b in track.blocks] == ["Mix sponge", "Rest sponge"]
        assert [b.duration_min for b in track.blocks] == [8, 240]
        assert not any(b.suggested for b in track.blocks)
        # the only saved steps are the sponge's, so the main track is synthesized
        assert timeline.main_track.blocks[0].suggested

    def test_disabled_preferment_has_no_track(self, lean_ingredients, anchor):
        """Test only enabled preferments get a track."""
        recipe = recipe_of(lean_ingredients + [preferment("p", "Poolish", 300, PrefermentType.POOLISH, enabled=False)])
        timeline = compute_timeline(recipe, anchor)
        assert timeline.get_track("pf-p") is None

    def test_cycle_flagged_and_scheduled(self, lean_ingredients, anchor):
        """Test cyclic preferments are flagged and still get a track."""
        recipe = recipe_of(lean_ingredients + [
            preferment("a", "A", 50, pcts={"b": 20}),
            preferment("b", "B", 50, pcts={"a": 20}),
        ])
        timeline = compute_timeline(recipe, anchor)
        assert timeline.dag_has_cycle is True
        assert timeline.get_track("pf-a").end == anchor
        assert timeline.get_track("pf-b").end == anchor

    def test_feeder_of_cycle_ready_before_consumer(self, lean_ingredients, anchor):
        """Test an ordered preferment feeding a cyclic one ends when its consumer starts."""
        recipe = recipe_of(lean_ingredients + [
            preferment("a", "A", 50, pcts={"c": 20}),
            preferment("c", "C", 50, pcts={"d": 20}),
            preferment("d", "D", 50, pcts={"c": 20}),
        ])
        timeline = compute_timeline(recipe, anchor)
        a = timeline.get_track("pf-a")
        c = timeline.get_track("pf-c")
        assert timeline.dag_has_cycle is True
        assert c.end == anchor
        assert timeline.get_track("pf-d").end == anchor
        assert a.end == c.start


class TestCompanions:
    """Test companion tracks."""

    def test_filling_ready_for_shape(self, lean_recipe, anchor, curd):
        """Test a filling is ready when shaping starts."""
        companion = Companion("curd", "Lemon Curd", CompanionRole.FILLING, curd)
        timeline = compute_timeline(lean_recipe, anchor, companions=[companion])
        track = timeline.get_track("comp-curd")
        shape = timeline.main_track.find_stage(ProcessStage.SHAPE)
        assert track.type == TrackType.COMPANION
        assert track.end == shape.start
        assert minutes(track.end - track.start) == 75
        assert all(b.suggested for b in track.blocks)

    @pytest.mark.parametrize("role", ["glaze", "topping", "sauce"])
    def test_bake_roles(self, lean_recipe, anchor, curd, role):
        """Test glazes, toppings and sauces are ready for the bake."""
        timeline = compute_timeline(lean_recipe, anchor, companions=[Companion("curd", "X", role=CompanionRole(role), recipe=curd)])
        bake = timeline.main_track.find_stage(ProcessStage.BAKE)
        assert timeline.get_track("comp-curd").end == bake.start

    def test_finish_fallback_to_main_end(self, lean_recipe, anchor, curd):
        """Test a garnish falls back to the main end when there is no FINISH step."""
        timeline = compute_timeline(lean_recipe, anchor, companions=[Companion("curd", "G", CompanionRole.GARNISH, curd)])
        assert timeline.get_track("comp-curd").end == timeline.main_track.end

    def test_dict_companion(self, lean_recipe, anchor, curd):
        """Test companions given as dicts."""
        timeline = compute_timeline(lean_recipe, anchor, companions=[{
            "companion_recipe_id": "curd",
            "companion_name": "Curd",
            "role": "filling",
            "recipe": curd.to_dict(),
        }])
        assert timeline.get_track("comp-curd").label == "Curd"

    def test_missing_recipe_skipped(self, lean_recipe, anchor):
        """Test a companion without a recipe gets no track."""
        timeline = compute_timeline(lean_recipe, anchor, companions=[Companion("ghost", "Ghost")])
        assert timeline.get_track("comp-ghost") is None
        assert [t.id for t in timeline.tracks] == ["main"]

    def test_companion_saved_steps(self, lean_recipe, anchor):
        """Test a companion's saved steps are scheduled as is."""
        glaze = Recipe(
            id="g", name="Egg Wash",
            process_steps=(ProcessStep(ProcessStage.MIXING, "Whisk", duration_min=3),),
        )
        timeline = compute_timeline(lean_recipe, anchor, companions=[Companion("g", "", CompanionRole.GLAZE, glaze)])
        track = timeline.get_track("comp-g")
        assert track.label == "Egg Wash"
        assert track.blocks[0].duration_min == 3
        assert not track.blocks[0].suggested

    def test_blank_companion_ids_do_not_collide(self, lean_recipe, anchor, curd):
        """Test companions without an id fall back to the recipe id, then the position."""
        timeline = compute_timeline(lean_recipe, anchor, companions=[
            Companion("", "First", CompanionRole.FILLING, curd),
            Companion("", "Second", CompanionRole.FILLING, curd),
        ])
        assert [t.id for t in timeline.tracks[1:]] == ["comp-curd", "comp-curd-2"]
        assert timeline.get_track("comp-curd-2").label == "Second"


class TestSpanAndIds:
    """Test span fields and block ids."""

    def test_span(self, poolish_recipe, anchor):
        """Test the overall span covers every track."""
        timeline = compute_timeline(poolish_recipe, anchor)
        assert timeline.earliest_start == anchor - timedelta(minutes=725)
        assert timeline.latest_end == timeline.main_track.end
        assert timeline.total_duration_min == minutes(timeline.latest_end - timeline.earliest_start)

    def test_default_ids_per_call(self, lean_recipe, anchor):
        """Test each call numbers its blocks from block-1."""
        first = compute_timeline(lean_recipe, anchor)
        second = compute_timeline(lean_recipe, anchor)
        ids = [b.id for b in first.main_track.blocks]
        assert ids[0] == "block-1"
        assert len(set(ids)) == len(ids)
        assert ids == [b.id for b in second.main_track.blocks]

    def test_injected_id_factory(self, poolish_recipe, anchor):
        """Test ids come from the injected factory."""
        timeline = compute_timeline(poolish_recipe, anchor, id_factory=block_id_sequence("t"))
        ids = [b.id for t in timeline.tracks for b in t.blocks]
        assert ids[0] == "t-1"
        assert len(set(ids)) == len(ids)

    def test_deterministic(self, nested_recipe, anchor):
        """Test identical input gives identical output."""
        assert compute_timeline(nested_recipe, anchor).to_dict() == compute_timeline(nested_recipe, anchor).to_dict()

    def test_to_dict(self, lean_recipe, anchor):
        """Test times serialize as ISO strings."""
        data = compute_timeline(lean_recipe, anchor).to_dict()
        assert data["mode"] == "forward"
        assert data["mix_time"] == "2026-03-14T08:00:00"
        assert data["tracks"][0]["blocks"][0]["start"] == "2026-03-14T08:00:00"
        assert data["tracks"][0]["blocks"][0]["duration_label"] == "10m"
        assert [b["duration_label"] for b in data["tracks"][0]["blocks"] if b["stage"] == "RETARD"] == ["12h"]
        assert data["computed_mix_time"] is None

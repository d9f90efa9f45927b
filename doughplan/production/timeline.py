"""
production/timeline.py - Production timeline scheduler.

Turns a recipe into parallel tracks of time-boxed blocks:

- the main dough, walked forward from the mix time or backward from the
  finish time
- one track per enabled preferment, scheduled backward so it is ready when
  the main mix (or the preferment it feeds) starts
- one track per companion recipe, scheduled backward from the main step
  that needs it

Block ids come from a counter created per call, or from an injected
id_factory, so concurrent calls never share state.
"""

from __future__ import annotations
import itertools
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from ..bootstrap.config import EngineConfig, get_config
from ..core.enums import CompanionRole, MixType, ProcessStage, TimelineMode, TrackType
from ..core.models import PrefermentSettings, ProcessStep, Recipe
from ..process.durations import resolve_step_duration
from ..process.generator import suggest_steps
from ..process.preferment_steps import suggest_preferment_steps
from ..utils import parse_enum
from .dag import resolve_preferment_dag
from .models import Companion, Milestone, Timeline, TimelineBlock, Track

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]

# Main-dough stage a companion must be ready for
COMPANION_NEEDED_BY: Dict[CompanionRole, ProcessStage] = {
    CompanionRole.FILLING: ProcessStage.SHAPE,
    CompanionRole.GLAZE: ProcessStage.BAKE,
    CompanionRole.TOPPING: ProcessStage.BAKE,
    CompanionRole.SAUCE: ProcessStage.BAKE,
    CompanionRole.GARNISH: ProcessStage.FINISH,
    CompanionRole.OTHER: ProcessStage.FINISH,
}


def block_id_sequence(prefix: str = "block") -> IdFactory:
    """Fresh id factory yielding block-1, block-2, ..."""
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


@dataclass(frozen=True)
class _StepContext:
    """Duration inputs shared by every step of one track."""
    mix_type: Optional[MixType] = None
    dough_type: object = None
    preferment_settings: Optional[PrefermentSettings] = None
    suggested: bool = False

    def duration(self, step: ProcessStep) -> float:
        return resolve_step_duration(
            step,
            mix_type=self.mix_type,
            preferment_settings=self.preferment_settings,
            dough_type=self.dough_type,
        )


def _make_block(step: ProcessStep, start: datetime, end: datetime, minutes: float,
                ctx: _StepContext, next_id: IdFactory) -> TimelineBlock:
    return TimelineBlock(
        id=next_id(),
        label=step.title or step.stage.value,
        stage=step.stage,
        start=start,
        end=end,
        duration_min=minutes,
        temperature=step.temperature,
        description=step.description or "",
        suggested=ctx.suggested,
    )


def build_blocks_forward(steps: Sequence[ProcessStep], anchor: datetime,
                         ctx: _StepContext, next_id: IdFactory) -> List[TimelineBlock]:
    """First step starts at anchor; each following step starts when the previous ends."""
    blocks = []
    cursor = anchor
    for step in steps:
        minutes = ctx.duration(step)
        end = cursor + timedelta(minutes=minutes)
        blocks.append(_make_block(step, cursor, end, minutes, ctx, next_id))
        cursor = end
    return blocks


def build_blocks_backward(steps: Sequence[ProcessStep], anchor: datetime,
                          ctx: _StepContext, next_id: IdFactory) -> List[TimelineBlock]:
    """Last step ends at anchor; earlier steps precede it."""
    timed = []
    cursor = anchor
    for step in reversed(steps):
        minutes = ctx.duration(step)
        start = cursor - timedelta(minutes=minutes)
        timed.append((step, start, cursor, minutes))
        cursor = start

    # ids are assigned in chronological order
    return [
        _make_block(step, start, end, minutes, ctx, next_id)
        for step, start, end, minutes in reversed(timed)
    ]


def _main_steps(recipe: Recipe, mix_type: MixType, config: EngineConfig):
    saved = recipe.main_steps
    if saved:
        return saved, False
    steps = suggest_steps(
        recipe.ingredients,
        has_autolyse=recipe.autolyse,
        mix_type=mix_type,
        ddt=recipe.ddt or config.default_ddt,
        dough_type=recipe.dough_type,
        autolyse_overrides=recipe.autolyse_overrides,
        autolyse_duration_min=recipe.autolyse_duration_min or config.default_autolyse_duration_min,
    )
    return steps, True


def _milestones(main_blocks: List[TimelineBlock], mix_time: datetime) -> List[Milestone]:
    milestones = [Milestone("Mix", mix_time, "mix")]
    for block in main_blocks:
        if block.stage == ProcessStage.BAKE:
            milestones.append(Milestone("Oven In", block.start, "oven"))
            break
    if main_blocks:
        milestones.append(Milestone("Done", main_blocks[-1].end, "done"))
    return milestones


def _schedule_preferments(recipe: Recipe, mix_time: datetime, mix_type: MixType,
                          config: EngineConfig, next_id: IdFactory):
    """
    Preferment tracks, dependents first.

    Every preferment starts with a ready-by of the mix time. Once a
    preferment is placed, each preferment feeding it must be ready by its
    first block, so that dependency's ready-by is pulled earlier.

    Unresolved preferments (in or downstream of a cycle) sit downstream of
    every ordered preferment, so they are placed first. They stay ready by
    mix time and never tighten one another; they still tighten the ordered
    preferments that feed them.
    """
    dag = resolve_preferment_dag(recipe.preferments)
    by_id = {pf.id: pf for pf in recipe.enabled_preferments}
    ready_by = {pf_id: mix_time for pf_id in by_id}
    unresolved = set(dag.unresolved)
    tracks: List[Track] = []

    def schedule(pf_id: str) -> None:
        pf = by_id[pf_id]
        saved = recipe.preferment_steps(pf_id)
        steps = saved or suggest_preferment_steps(pf, recipe.ddt or config.default_ddt)
        ctx = _StepContext(
            mix_type=mix_type,
            preferment_settings=pf.settings,
            suggested=not saved,
        )
        blocks = build_blocks_backward(steps, ready_by[pf_id], ctx, next_id)
        if not blocks:
            return
        tracks.append(Track(id=f"pf-{pf_id}", label=pf.name, type=TrackType.PREFERMENT, blocks=blocks))

        first_start = blocks[0].start
        for dep_id in dag.dependencies_of(pf_id):
            if dep_id in unresolved:
                continue
            if dep_id in ready_by and first_start < ready_by[dep_id]:
                ready_by[dep_id] = first_start

    for pf_id in dag.unresolved:
        schedule(pf_id)

    for layer in reversed(dag.layers):
        for pf_id in layer:
            schedule(pf_id)

    return tracks, dag


def _companion_track_id(companion: Companion, index: int, taken: set) -> str:
    """comp-<recipe id>, falling back to the position when the id is blank or taken."""
    base = companion.companion_recipe_id or (companion.recipe.id if companion.recipe else "")
    track_id = f"comp-{base}" if base else f"comp-{index}"
    if track_id in taken:
        track_id = f"{track_id}-{index}"
    taken.add(track_id)
    return track_id


def _schedule_companion(companion: Companion, main_track: Optional[Track], mix_time: datetime,
                        config: EngineConfig, next_id: IdFactory, track_id: str) -> Optional[Track]:
    comp_recipe = companion.recipe
    if comp_recipe is None:
        logger.debug(f"Companion {companion.companion_recipe_id} has no recipe; skipped")
        return None

    needed_by = mix_time
    if main_track is not None and main_track.blocks:
        stage = COMPANION_NEEDED_BY.get(companion.role, ProcessStage.FINISH)
        target = main_track.find_stage(stage)
        needed_by = target.start if target else main_track.end

    mix_type = comp_recipe.mix_type or config.default_companion_mix_type
    saved = comp_recipe.main_steps
    steps = saved or suggest_steps(
        comp_recipe.ingredients,
        has_autolyse=False,
        mix_type=mix_type,
        ddt=comp_recipe.ddt or config.default_ddt,
        dough_type=comp_recipe.dough_type,
    )
    ctx = _StepContext(mix_type=mix_type, dough_type=comp_recipe.dough_type, suggested=not saved)
    blocks = build_blocks_backward(steps, needed_by, ctx, next_id)
    if not blocks:
        return None
    return Track(
        id=track_id,
        label=companion.companion_name or comp_recipe.name or "Companion",
        type=TrackType.COMPANION,
        blocks=blocks,
    )


def compute_timeline(
    recipe,
    anchor_time: datetime,
    mode="forward",
    mix_type=None,
    companions: Optional[Iterable] = None,
    id_factory: Optional[IdFactory] = None,
    config: Optional[EngineConfig] = None,
) -> Timeline:
    """
    Compute a full production timeline.

    Args:
        recipe: Recipe (or a plain dict accepted by Recipe.from_dict)
        anchor_time: Mix time (forward) or finish time (reverse)
        mode: "forward" or "reverse" (or a TimelineMode)
        mix_type: Mix type for post-mix timings; defaults to the recipe's,
            then the configured default
        companions: Companion objects or dicts accepted by Companion.from_dict
        id_factory: Callable returning block ids; defaults to a fresh
            block-1, block-2, ... sequence
        config: EngineConfig; defaults to the loaded configuration

    Returns:
        Timeline

    Raises:
        ValueError: if mode is neither forward nor reverse
    """
    if isinstance(recipe, Mapping):
        recipe = Recipe.from_dict(recipe)
    if config is None:
        config = get_config().engine

    timeline_mode = parse_enum(TimelineMode, mode)
    if timeline_mode is None:
        raise ValueError(f"Unknown timeline mode: {mode!r}")

    next_id = id_factory or block_id_sequence()
    mt = parse_enum(MixType, mix_type) or recipe.mix_type or config.default_mix_type

    steps, synthesized = _main_steps(recipe, mt, config)
    main_ctx = _StepContext(mix_type=mt, dough_type=recipe.dough_type, suggested=synthesized)

    computed_mix_time = None
    if timeline_mode == TimelineMode.FORWARD:
        mix_time = anchor_time
        main_blocks = build_blocks_forward(steps, mix_time, main_ctx, next_id)
        computed_finish_time = main_blocks[-1].end if main_blocks else mix_time
    else:
        main_blocks = build_blocks_backward(steps, anchor_time, main_ctx, next_id)
        mix_time = main_blocks[0].start if main_blocks else anchor_time
        computed_mix_time = mix_time
        computed_finish_time = anchor_time

    tracks: List[Track] = []
    main_track = None
    if main_blocks:
        main_track = Track(id="main", label="Main Dough", type=TrackType.MAIN, blocks=main_blocks)
        tracks.append(main_track)

    pf_tracks, dag = _schedule_preferments(recipe, mix_time, mt, config, next_id)
    tracks.extend(pf_tracks)

    track_ids = set()
    for index, companion in enumerate(companions or [], start=1):
        if isinstance(companion, Mapping):
            companion = Companion.from_dict(companion)
        track_id = _companion_track_id(companion, index, track_ids)
        track = _schedule_companion(companion, main_track, mix_time, config, next_id, track_id)
        if track is not None:
            tracks.append(track)

    all_blocks = [b for t in tracks for b in t.blocks]
    earliest = min((b.start for b in all_blocks), default=mix_time)
    latest = max((b.end for b in all_blocks), default=mix_time)

    timeline = Timeline(
        anchor_time=anchor_time,
        mix_time=mix_time,
        mode=timeline_mode,
        earliest_start=earliest,
        latest_end=latest,
        tracks=tracks,
        milestones=_milestones(main_blocks, mix_time),
        computed_mix_time=computed_mix_time,
        computed_finish_time=computed_finish_time,
        total_duration_min=(latest - earliest).total_seconds() / 60,
        dag_has_cycle=dag.has_cycle,
    )

    logger.debug(
        f"Timeline for {recipe.id}: mode={timeline_mode.value} tracks={len(tracks)} "
        f"span={timeline.total_duration_min:.0f}min cycle={dag.has_cycle}"
    )
    return timeline

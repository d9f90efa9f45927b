"""
production/models.py - Timeline data structures.

A Timeline is computed for rendering only; nothing here is persisted.
Times are datetime objects and serialize as ISO-8601 strings.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from ..core.constants import format_duration
from ..core.enums import CompanionRole, ProcessStage, TimelineMode, TrackType
from ..core.models import Recipe
from ..utils import parse_enum


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass
class TimelineBlock:
    """One time-boxed step on a track."""
    id: str
    label: str
    stage: ProcessStage
    start: datetime
    end: datetime
    duration_min: float
    temperature: Optional[float] = None
    description: str = ""
    suggested: bool = False
    """True when the step was synthesized rather than saved with the recipe."""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "stage": self.stage.value,
            "start": _iso(self.start),
            "end": _iso(self.end),
            "duration_min": self.duration_min,
            "duration_label": format_duration(self.duration_min),
            "temperature": self.temperature,
            "description": self.description,
            "suggested": self.suggested,
        }


@dataclass
class Track:
    """Ordered blocks for the main dough, one preferment or one companion."""
    id: str
    label: str
    type: TrackType
    blocks: List[TimelineBlock] = field(default_factory=list)

    @property
    def start(self) -> Optional[datetime]:
        return self.blocks[0].start if self.blocks else None

    @property
    def end(self) -> Optional[datetime]:
        return self.blocks[-1].end if self.blocks else None

    def find_stage(self, stage: ProcessStage) -> Optional[TimelineBlock]:
        """First block of the given stage."""
        for block in self.blocks:
            if block.stage == stage:
                return block
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "type": self.type.value,
            "blocks": [b.to_dict() for b in self.blocks],
        }


@dataclass
class Milestone:
    label: str
    time: datetime
    type: str

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "time": _iso(self.time), "type": self.type}


@dataclass
class Companion:
    """A linked recipe (filling, glaze, ...) scheduled alongside the main dough."""
    companion_recipe_id: str
    companion_name: str = ""
    role: CompanionRole = CompanionRole.OTHER
    recipe: Optional[Recipe] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Companion":
        recipe = data.get("recipe")
        if recipe is not None and not isinstance(recipe, Recipe):
            recipe = Recipe.from_dict(recipe)
        return cls(
            companion_recipe_id=str(data.get("companion_recipe_id") or ""),
            companion_name=str(data.get("companion_name") or ""),
            role=parse_enum(CompanionRole, data.get("role"), CompanionRole.OTHER),
            recipe=recipe,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "companion_recipe_id": self.companion_recipe_id,
            "companion_name": self.companion_name,
            "role": self.role.value,
            "recipe": self.recipe.to_dict() if self.recipe else None,
        }


@dataclass
class Timeline:
    """Complete production schedule."""
    anchor_time: datetime
    mix_time: datetime
    mode: TimelineMode
    earliest_start: datetime
    latest_end: datetime
    tracks: List[Track] = field(default_factory=list)
    milestones: List[Milestone] = field(default_factory=list)
    computed_mix_time: Optional[datetime] = None
    computed_finish_time: Optional[datetime] = None
    total_duration_min: float = 0.0
    dag_has_cycle: bool = False

    def get_track(self, track_id: str) -> Optional[Track]:
        for track in self.tracks:
            if track.id == track_id:
                return track
        return None

    @property
    def main_track(self) -> Optional[Track]:
        return self.get_track("main")

    def tracks_of_type(self, track_type: TrackType) -> List[Track]:
        return [t for t in self.tracks if t.type == track_type]

    def get_milestone(self, milestone_type: str) -> Optional[Milestone]:
        for m in self.milestones:
            if m.type == milestone_type:
                return m
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tracks": [t.to_dict() for t in self.tracks],
            "milestones": [m.to_dict() for m in self.milestones],
            "earliest_start": _iso(self.earliest_start),
            "latest_end": _iso(self.latest_end),
            "anchor_time": _iso(self.anchor_time),
            "mix_time": _iso(self.mix_time),
            "mode": self.mode.value,
            "computed_mix_time": _iso(self.computed_mix_time),
            "computed_finish_time": _iso(self.computed_finish_time),
            "total_duration_min": self.total_duration_min,
            "dag_has_cycle": self.dag_has_cycle,
        }

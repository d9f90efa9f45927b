"""
production/ - Preferment dependency graph and production timeline.
"""

from .dag import (
    PrefermentDAG,
    build_preferment_graph,
    resolve_preferment_dag,
)

from .models import (
    TimelineBlock,
    Track,
    Milestone,
    Companion,
    Timeline,
)

from .timeline import (
    COMPANION_NEEDED_BY,
    block_id_sequence,
    build_blocks_forward,
    build_blocks_backward,
    compute_timeline,
)

__all__ = [
    # DAG
    "PrefermentDAG",
    "build_preferment_graph",
    "resolve_preferment_dag",
    # Models
    "TimelineBlock",
    "Track",
    "Milestone",
    "Companion",
    "Timeline",
    # Scheduler
    "COMPANION_NEEDED_BY",
    "block_id_sequence",
    "build_blocks_forward",
    "build_blocks_backward",
    "compute_timeline",
]

"""
production/dag.py - Preferment dependency graph.

Edge A -> B when preferment A declares a positive contribution into
preferment B: A is an ingredient of B and must be built first.
Self-references are starter carry-over and never become edges.

The same graph orders preferments for the percentage engine's nested
decomposition and for the timeline scheduler.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

import networkx as nx

from ..core.models import Ingredient

logger = logging.getLogger(__name__)


@dataclass
class PrefermentDAG:
    """Layered build order of preferments."""
    order: List[str] = field(default_factory=list)
    layers: List[List[str]] = field(default_factory=list)
    has_cycle: bool = False
    unresolved: List[str] = field(default_factory=list)
    graph: nx.DiGraph = field(default_factory=nx.DiGraph, repr=False)

    def dependencies_of(self, preferment_id: str) -> List[str]:
        """Preferments that go into the given one."""
        if preferment_id not in self.graph:
            return []
        return list(self.graph.predecessors(preferment_id))

    def dependents_of(self, preferment_id: str) -> List[str]:
        """Preferments the given one goes into."""
        if preferment_id not in self.graph:
            return []
        return list(self.graph.successors(preferment_id))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "order": list(self.order),
            "layers": [list(layer) for layer in self.layers],
            "has_cycle": self.has_cycle,
            "unresolved": list(self.unresolved),
        }


def build_preferment_graph(preferments: Sequence[Ingredient]) -> nx.DiGraph:
    """Directed graph over the given preferments, in input order."""
    graph = nx.DiGraph()
    ids = [pf.id for pf in preferments]
    graph.add_nodes_from(ids)
    known = set(ids)

    for pf in preferments:
        for target_id, pct in pf.contributions.items():
            if target_id in known:
                graph.add_edge(pf.id, target_id, pct=pct)
    return graph


def resolve_preferment_dag(preferments: Sequence[Ingredient]) -> PrefermentDAG:
    """
    Layered topological sort of preferments.

    Only enabled preferments take part. A cycle never raises: the nodes
    that could not be placed are reported in unresolved and has_cycle is set.

    Args:
        preferments: PREFERMENT ingredients (others are ignored)

    Returns:
        PrefermentDAG
    """
    enabled = [pf for pf in preferments if pf.is_enabled_preferment]
    graph = build_preferment_graph(enabled)
    dag = PrefermentDAG(graph=graph)

    try:
        for generation in nx.topological_generations(graph):
            dag.layers.append(list(generation))
            dag.order.extend(generation)
    except nx.NetworkXUnfeasible:
        dag.has_cycle = True

    if len(dag.order) < graph.number_of_nodes():
        placed = set(dag.order)
        dag.has_cycle = True
        dag.unresolved = [n for n in graph.nodes if n not in placed]
        logger.warning(f"Preferment dependency cycle; unresolved: {dag.unresolved}")

    return dag

"""
Dependency graph between generated entities and its topological ordering.

Edges point from an entity to the entities its properties reference, so a
topological order emits every dependency before its dependents. Cycles are
broken at the edge that closes them; the broken edges are reported.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from ...errors import DependencyCycleError

logger = logging.getLogger(__name__)


@dataclass
class SortResult:
    """Outcome of a topological sort."""

    order: list[str] = field(default_factory=list)
    # (dependent, dependency) pairs that were ignored to break a cycle
    broken_edges: list[tuple[str, str]] = field(default_factory=list)


class DependencyGraph:
    """Insertion-ordered adjacency list keyed by entity name."""

    def __init__(self):
        self._edges: dict[str, list[str]] = {}

    def add(self, name: str, dependencies: Iterable[str] = ()) -> None:
        """Add a node (if new) and its outgoing edges, skipping duplicates."""
        targets = self._edges.setdefault(name, [])
        for dependency in dependencies:
            if dependency not in targets:
                targets.append(dependency)

    def dependencies(self, name: str) -> list[str]:
        return list(self._edges.get(name, []))

    @property
    def nodes(self) -> list[str]:
        return list(self._edges)

    def __contains__(self, name: object) -> bool:
        return name in self._edges

    def __len__(self) -> int:
        return len(self._edges)

    def to_dict(self) -> dict[str, list[str]]:
        return {name: list(targets) for name, targets in self._edges.items()}


class TopologicalSorter:
    """Depth-first topological sort with cycle breaking."""

    def __init__(self, strict: bool = False):
        """
        Initialize the sorter.

        Args:
            strict: Raise DependencyCycleError instead of breaking cycles
        """
        self.strict = strict

    def sort(self, graph: DependencyGraph) -> SortResult:
        """
        Order the graph's nodes so dependencies precede dependents.

        Nodes are visited in insertion order and their dependencies in
        declaration order, so the result is deterministic. Edges to names
        outside the graph are ignored.

        Args:
            graph: The dependency graph

        Returns:
            The order and the edges broken to get it

        Raises:
            DependencyCycleError: When strict and the graph has a cycle
        """
        result = SortResult()
        visited: set[str] = set()
        visiting: set[str] = set()

        def visit(name: str) -> None:
            visiting.add(name)
            for dependency in graph.dependencies(name):
                if dependency not in graph or dependency in visited:
                    continue
                if dependency in visiting:
                    result.broken_edges.append((name, dependency))
                    continue
                visit(dependency)
            visiting.discard(name)
            visited.add(name)
            result.order.append(name)

        for name in graph.nodes:
            if name not in visited:
                visit(name)

        if result.broken_edges:
            if self.strict:
                raise DependencyCycleError(result.broken_edges)
            for dependent, dependency in result.broken_edges:
                logger.debug("Broke dependency cycle at %s -> %s", dependent, dependency)

        return result

"""Graph layout data for Neuron Graph.

A layout is the authored topology of one puzzle variant: node ids, the
neighbor references of each node and where each node sits on screen.
Layouts are never mutated at runtime; colour state lives on the nodes the
puzzle generator builds from them.
"""

import dataclasses
import logging
import math
from dataclasses import dataclass
from typing import Iterable

logger = logging.getLogger(__name__)


class LayoutValidationError(ValueError):
    """Raised when a layout asset cannot be read or used."""


@dataclass(frozen=True)
class GraphLayout:
    """Immutable node/edge topology used as a puzzle template.

    neighbors[i] holds the authored references of node_ids[i]. A reference
    of None models an empty slot left behind in the authoring tool.
    Positions are unit-space (0..1) and only matter for presentation.
    """

    name: str
    node_ids: tuple[int, ...]
    neighbors: tuple[tuple[int | None, ...], ...]
    positions: tuple[tuple[float, float], ...] = ()
    variant_id: int = 1
    expected_node_count: int | None = None
    connections_layer: str | None = "connections"

    @classmethod
    def from_edges(
        cls,
        name: str,
        node_count: int,
        edges: Iterable[tuple[int, int]],
        positions: Iterable[tuple[float, float]] = (),
        variant_id: int = 1,
    ) -> "GraphLayout":
        """Build a symmetric layout from an undirected edge list.

        Args:
            name: Layout name.
            node_count: Number of nodes (ids 0..node_count-1).
            edges: Unordered (a, b) pairs.
            positions: Optional unit-space position per node.
            variant_id: Variant number within the tier pool.

        Returns:
            GraphLayout with every edge listed on both endpoints.
        """
        adj: list[set[int]] = [set() for _ in range(node_count)]
        for a, b in edges:
            adj[a].add(b)
            adj[b].add(a)

        return cls(
            name=name,
            node_ids=tuple(range(node_count)),
            neighbors=tuple(tuple(sorted(s)) for s in adj),
            positions=tuple((float(x), float(y)) for x, y in positions),
            variant_id=variant_id,
            expected_node_count=node_count,
        )

    @property
    def node_count(self) -> int:
        return len(self.node_ids)

    def neighbor_ids(self, node_id: int) -> frozenset[int]:
        """Resolved neighbor ids of a node (empty slots and unknown ids dropped)."""
        known = set(self.node_ids)
        index = self.node_ids.index(node_id)
        return frozenset(
            ref for ref in self.neighbors[index] if ref is not None and ref in known and ref != node_id
        )

    def edges(self) -> set[tuple[int, int]]:
        """Set of unordered (low, high) connections, as drawn on screen."""
        result: set[tuple[int, int]] = set()
        for node_id in self.node_ids:
            for other in self.neighbor_ids(node_id):
                result.add((min(node_id, other), max(node_id, other)))
        return result

    def position(self, node_id: int) -> tuple[float, float]:
        """Unit-space position of a node.

        Layouts authored without positions fall back to an even ring.
        """
        index = self.node_ids.index(node_id)
        if index < len(self.positions):
            return self.positions[index]

        angle = -math.pi / 2 + 2 * math.pi * index / max(1, self.node_count)
        return (0.5 + 0.4 * math.cos(angle), 0.5 + 0.4 * math.sin(angle))


def layout_problems(layout: GraphLayout) -> list[str]:
    """Collect every reason a layout cannot back a puzzle.

    Args:
        layout: Layout to check.

    Returns:
        List of human readable problems; empty when the layout is usable.
    """
    problems: list[str] = []

    if layout.node_count == 0:
        problems.append(f"no nodes found in {layout.name}")
        return problems

    if len(layout.neighbors) != layout.node_count:
        problems.append(
            f"{layout.name} lists {len(layout.neighbors)} neighbor sets for {layout.node_count} nodes"
        )
        return problems

    if sorted(layout.node_ids) != list(range(layout.node_count)):
        problems.append(f"node ids in {layout.name} are not dense 0..{layout.node_count - 1}")
        return problems

    known = set(layout.node_ids)
    declared = {node_id: set(refs) for node_id, refs in zip(layout.node_ids, layout.neighbors)}

    for node_id, refs in zip(layout.node_ids, layout.neighbors):
        if len(refs) == 0:
            problems.append(f"node {node_id} has no neighbors")

        for ref in refs:
            if ref is None:
                problems.append(f"node {node_id} has null neighbor reference")
            elif ref not in known:
                problems.append(f"node {node_id} references unknown node {ref}")
            elif ref == node_id:
                problems.append(f"node {node_id} lists itself as a neighbor")
            elif node_id not in declared[ref]:
                problems.append(f"node {node_id} lists {ref} but {ref} does not list {node_id}")

    if layout.connections_layer is None:
        problems.append(f"connections layer is missing on {layout.name}")

    return problems


def validate_layout(layout: GraphLayout) -> bool:
    """Check that a layout can back a puzzle, logging what is wrong.

    Read-only; run it every time a layout is selected.

    Args:
        layout: Layout to check.

    Returns:
        True if the layout is usable.
    """
    if layout.expected_node_count is not None and layout.expected_node_count != layout.node_count:
        logger.warning(
            "Expected %d nodes but found %d in %s",
            layout.expected_node_count,
            layout.node_count,
            layout.name,
        )

    if layout.positions and len(layout.positions) != layout.node_count:
        logger.warning("%s has %d positions for %d nodes", layout.name, len(layout.positions), layout.node_count)

    problems = layout_problems(layout)
    for problem in problems:
        logger.warning("[%s] %s", layout.name, problem)

    if problems:
        logger.error("Layout %s failed validation (%d problems)", layout.name, len(problems))
        return False

    logger.debug("Layout %s is valid", layout.name)
    return True


class LayoutHandle:
    """Acquire/release wrapper around a layout asset.

    A resident handle hands out the one shared layout object and only
    tracks that it is in use. A template handle hands out a fresh copy on
    every acquire.
    """

    def __init__(self, layout: GraphLayout, resident: bool = False, source: str | None = None) -> None:
        """Initialize handle.

        Args:
            layout: The authored layout.
            resident: True if the layout is a shared, already placed object.
            source: Where the layout came from (file path or library name).
        """
        self.layout = layout
        self.resident = resident
        self.source = source or layout.name
        self.active_count = 0

    @property
    def name(self) -> str:
        return self.layout.name

    @property
    def is_active(self) -> bool:
        return self.active_count > 0

    def acquire(self) -> GraphLayout:
        """Take the layout for use by a puzzle instance."""
        self.active_count += 1
        if self.resident:
            logger.debug("Enabled resident layout %s", self.name)
            return self.layout

        logger.debug("Instantiated layout %s from template", self.name)
        return dataclasses.replace(self.layout)

    def release(self) -> None:
        """Give the layout back. Extra releases are ignored."""
        if self.active_count == 0:
            return
        self.active_count -= 1
        logger.debug("Released layout %s (%d still active)", self.name, self.active_count)

    def __repr__(self) -> str:
        kind = "resident" if self.resident else "template"
        return f"LayoutHandle({self.name!r}, {kind}, active={self.active_count})"

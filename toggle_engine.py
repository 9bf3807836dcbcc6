"""Toggle rules for Neuron Graph puzzles.

Activating a node advances its colour and the colour of every neighbor by
one, modulo the puzzle's colour count. A puzzle is solved once every node
shows the target colour. The functions here hold no state of their own;
everything they touch lives on the PuzzleInstance.
"""

from dataclasses import dataclass, field

import numpy as np

from graph_layout import LayoutHandle


class InvalidNodeError(IndexError):
    """Raised when activating a node the puzzle does not have."""


@dataclass
class Node:
    """Runtime state of one graph node."""

    id: int
    color: int
    neighbors: frozenset[int] = field(default_factory=frozenset)


@dataclass
class PuzzleInstance:
    """Live state of one puzzle.

    Attributes:
        target_color: Colour every node must reach.
        color_count: Number of colours nodes cycle through.
        nodes: Node id -> Node.
        move_count: Player activations so far.
        layout: Handle of the layout the nodes were built from.
        shuffle_sequence: Node ids toggled by the generator, in order.
        discarded: True once the puzzle was torn down.
    """

    target_color: int
    color_count: int
    nodes: dict[int, Node]
    move_count: int = 0
    layout: LayoutHandle | None = None
    shuffle_sequence: tuple[int, ...] = ()
    discarded: bool = False

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    def colors(self) -> np.ndarray:
        """Current colours ordered by node id."""
        return np.array([self.nodes[i].color for i in sorted(self.nodes)], dtype=np.int64)

    def mismatch_count(self) -> int:
        """Number of nodes not yet showing the target colour."""
        return int(np.count_nonzero(self.colors() != self.target_color))

    def solution_presses(self) -> np.ndarray:
        """Per-node activation counts that solve the puzzle from its start.

        Toggles commute and add up modulo color_count, so pressing each node
        (-k mod color_count) times undoes a shuffle that pressed it k times.

        Returns:
            Array of press counts indexed by node id.
        """
        counts = np.bincount(
            np.asarray(self.shuffle_sequence, dtype=np.int64), minlength=self.node_count
        )
        return (-counts) % self.color_count

    def discard(self) -> None:
        """Drop node state and release the layout. Safe to call repeatedly."""
        if self.discarded:
            return
        self.discarded = True
        self.nodes.clear()
        if self.layout is not None:
            self.layout.release()


def is_solved(puzzle: PuzzleInstance) -> bool:
    """True iff every node shows the target colour."""
    return all(node.color == puzzle.target_color for node in puzzle.nodes.values())


def toggle(puzzle: PuzzleInstance, node_id: int) -> None:
    """Advance the colour of a node and each of its neighbors.

    Args:
        puzzle: Puzzle to mutate.
        node_id: Node being activated.

    Raises:
        InvalidNodeError: If node_id is not in the puzzle or it was discarded.
    """
    if puzzle.discarded:
        raise InvalidNodeError(f"puzzle was discarded; cannot toggle node {node_id}")
    if node_id not in puzzle.nodes:
        raise InvalidNodeError(f"node {node_id} out of range (puzzle has {puzzle.node_count} nodes)")

    node = puzzle.nodes[node_id]
    node.color = (node.color + 1) % puzzle.color_count
    for neighbor_id in node.neighbors:
        neighbor = puzzle.nodes[neighbor_id]
        neighbor.color = (neighbor.color + 1) % puzzle.color_count


def activate(puzzle: PuzzleInstance, node_id: int) -> bool:
    """Apply a player activation.

    Args:
        puzzle: Puzzle to mutate.
        node_id: Node the player tapped.

    Returns:
        True if the puzzle is solved after the move.

    Raises:
        InvalidNodeError: If node_id is not in the puzzle or it was discarded.
    """
    toggle(puzzle, node_id)
    puzzle.move_count += 1
    return is_solved(puzzle)

"""Puzzle generation for Neuron Graph.

Puzzles start from the solved state (every node on the target colour) and
are scrambled with forward toggles only. Replaying toggles can always undo
them, so every generated puzzle is solvable without running a solver.
"""

import logging
import random

from difficulty import DifficultyConfig
from graph_layout import GraphLayout, LayoutHandle, validate_layout
from toggle_engine import Node, PuzzleInstance, toggle

logger = logging.getLogger(__name__)

# How many previous shuffle picks a new pick must differ from
SHUFFLE_MEMORY = 2


class GenerationError(RuntimeError):
    """Raised when no puzzle can be built from a config."""


class PuzzleGenerator:
    """Builds shuffled-but-solvable puzzles from difficulty configs."""

    def __init__(self, rng: random.Random | None = None) -> None:
        """Initialize generator.

        Args:
            rng: Random source for target colour and shuffle picks.
        """
        self.rng = rng or random.Random()

    def generate(self, config: DifficultyConfig) -> PuzzleInstance:
        """Generate a puzzle for a resolved config.

        Args:
            config: Resolved difficulty config with a selected layout.

        Returns:
            Shuffled PuzzleInstance with move_count 0. With shuffle_moves 0
            the puzzle comes back already solved.

        Raises:
            GenerationError: If the config has no layout or no layout in its
                pool passes validation.
        """
        if config.layout is None:
            raise GenerationError(
                f"no layout assigned for tier {config.tier_name} ({config.node_count} nodes); check layout pools"
            )

        handle, layout = self._acquire_valid_layout(config)

        target_color = self.rng.randrange(config.color_count)
        puzzle = PuzzleInstance(
            target_color=target_color,
            color_count=config.color_count,
            nodes=self._build_nodes(layout, target_color),
            layout=handle,
        )

        puzzle.shuffle_sequence = self._shuffle(puzzle, config.shuffle_moves)

        logger.info(
            "Generated puzzle on %s: target=%d nodes=%d shuffles=%d mismatched=%d",
            layout.name,
            target_color,
            puzzle.node_count,
            len(puzzle.shuffle_sequence),
            puzzle.mismatch_count(),
        )
        return puzzle

    def _acquire_valid_layout(self, config: DifficultyConfig) -> tuple[LayoutHandle, GraphLayout]:
        """Acquire the selected layout, falling back to other pool members.

        Invalid layouts are never repaired, only skipped.

        Returns:
            The handle and the acquired layout.
        """
        others = [h for h in config.layout_pool if h is not config.layout]
        self.rng.shuffle(others)

        for handle in [config.layout, *others]:
            layout = handle.acquire()
            if validate_layout(layout):
                if handle is not config.layout:
                    logger.warning("Layout %s unusable, using %s instead", config.layout.name, handle.name)
                if layout.node_count != config.node_count:
                    logger.warning(
                        "Tier %s expects %d nodes but layout %s has %d",
                        config.tier_name, config.node_count, layout.name, layout.node_count,
                    )
                return handle, layout
            handle.release()

        raise GenerationError(f"no valid layout in pool for tier {config.tier_name}")

    def _build_nodes(self, layout: GraphLayout, color: int) -> dict[int, Node]:
        """Create one node per layout node, all on the given colour."""
        return {
            node_id: Node(id=node_id, color=color, neighbors=layout.neighbor_ids(node_id))
            for node_id in layout.node_ids
        }

    def _shuffle(self, puzzle: PuzzleInstance, moves: int) -> tuple[int, ...]:
        """Apply random forward toggles.

        Each pick differs from the previous SHUFFLE_MEMORY picks, so the
        shuffle never spends moves re-toggling the neighborhood it just
        touched. A two-node layout can only avoid the last pick.

        Returns:
            Node ids toggled, in order.
        """
        node_ids = sorted(puzzle.nodes)
        memory = min(SHUFFLE_MEMORY, len(node_ids) - 1)
        picks: list[int] = []

        for _ in range(moves):
            recent = set(picks[-memory:]) if memory > 0 else set()
            candidates = [node_id for node_id in node_ids if node_id not in recent]
            node_id = self.rng.choice(candidates)
            toggle(puzzle, node_id)
            picks.append(node_id)

        return tuple(picks)

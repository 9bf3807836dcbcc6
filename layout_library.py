"""Built-in layout variants for Neuron Graph.

Provides shape builders and the default per-tier layout pools, so the game
runs without authored layout assets on disk.
"""

import math

from graph_layout import GraphLayout


def _ring_positions(count: int, radius: float = 0.38, phase: float = -math.pi / 2) -> list[tuple[float, float]]:
    """Evenly spaced points on a circle around the view center.

    Args:
        count: Number of points.
        radius: Circle radius in unit space.
        phase: Angle of the first point in radians (default: top).

    Returns:
        List of (x, y) unit-space positions.
    """
    return [
        (0.5 + radius * math.cos(phase + 2 * math.pi * i / count),
         0.5 + radius * math.sin(phase + 2 * math.pi * i / count))
        for i in range(count)
    ]


def ring_layout(count: int, chords: list[tuple[int, int]] | None = None, variant_id: int = 1) -> GraphLayout:
    """Cycle of count nodes, optionally with extra chords."""
    edges = [(i, (i + 1) % count) for i in range(count)]
    edges.extend(chords or [])
    suffix = f"+{len(chords)}" if chords else ""
    return GraphLayout.from_edges(
        f"ring{count}{suffix}", count, edges, _ring_positions(count), variant_id=variant_id
    )


def wheel_layout(count: int, variant_id: int = 1) -> GraphLayout:
    """Hub node 0 linked to a ring of count - 1 rim nodes."""
    rim = count - 1
    edges = [(0, i) for i in range(1, count)]
    edges.extend((1 + i, 1 + (i + 1) % rim) for i in range(rim))
    positions = [(0.5, 0.5)] + _ring_positions(rim)
    return GraphLayout.from_edges(f"wheel{count}", count, edges, positions, variant_id=variant_id)


def star_layout(count: int, variant_id: int = 1) -> GraphLayout:
    """Hub node 0 linked to count - 1 leaves with no rim."""
    edges = [(0, i) for i in range(1, count)]
    positions = [(0.5, 0.5)] + _ring_positions(count - 1)
    return GraphLayout.from_edges(f"star{count}", count, edges, positions, variant_id=variant_id)


def path_layout(count: int, variant_id: int = 1) -> GraphLayout:
    """Nodes linked in a single left-to-right chain."""
    edges = [(i, i + 1) for i in range(count - 1)]
    positions = [(0.1 + 0.8 * i / max(1, count - 1), 0.5 + (0.12 if i % 2 else -0.12)) for i in range(count)]
    return GraphLayout.from_edges(f"path{count}", count, edges, positions, variant_id=variant_id)


def complete_layout(count: int, variant_id: int = 1) -> GraphLayout:
    """Every node linked to every other node."""
    edges = [(a, b) for a in range(count) for b in range(a + 1, count)]
    return GraphLayout.from_edges(f"complete{count}", count, edges, _ring_positions(count), variant_id=variant_id)


def grid_layout(rows: int, cols: int, variant_id: int = 1) -> GraphLayout:
    """Rows x cols lattice with 4-neighbor links."""
    edges: list[tuple[int, int]] = []
    positions: list[tuple[float, float]] = []
    for r in range(rows):
        for c in range(cols):
            node = r * cols + c
            positions.append((0.15 + 0.7 * c / max(1, cols - 1), 0.15 + 0.7 * r / max(1, rows - 1)))
            if c + 1 < cols:
                edges.append((node, node + 1))
            if r + 1 < rows:
                edges.append((node, node + cols))
    return GraphLayout.from_edges(f"grid{rows}x{cols}", rows * cols, edges, positions, variant_id=variant_id)


def house_layout(variant_id: int = 1) -> GraphLayout:
    """Five-node square with a roof peak."""
    edges = [(0, 1), (0, 2), (1, 3), (2, 3), (2, 4), (3, 4)]
    positions = [(0.3, 0.75), (0.7, 0.75), (0.3, 0.45), (0.7, 0.45), (0.5, 0.15)]
    return GraphLayout.from_edges("house5", 5, edges, positions, variant_id=variant_id)


# Tier name -> layout variants; node counts match the default tier table
DEFAULT_LAYOUT_POOLS: dict[str, list[GraphLayout]] = {
    "beginner": [
        complete_layout(3, variant_id=1),
        path_layout(3, variant_id=2),
    ],
    "easy": [
        ring_layout(4, variant_id=1),
        star_layout(4, variant_id=2),
        ring_layout(4, chords=[(0, 2)], variant_id=3),
    ],
    "medium": [
        ring_layout(5, variant_id=1),
        house_layout(variant_id=2),
        wheel_layout(5, variant_id=3),
    ],
    "advanced": [
        wheel_layout(7, variant_id=1),
        ring_layout(7, chords=[(0, 3), (0, 4)], variant_id=2),
    ],
    "hard": [
        grid_layout(3, 3, variant_id=1),
        ring_layout(9, chords=[(0, 4), (2, 6), (5, 8)], variant_id=2),
        wheel_layout(9, variant_id=3),
    ],
}

"""Node selection logic for Neuron Graph.

Lets gamepad and keyboard players move a cursor between nodes, and maps
mouse clicks to the node under the pointer. Works in the layout's unit
space, where +Y points down.
"""

import math

from graph_layout import GraphLayout


def normalize(x: float, y: float) -> tuple[float, float]:
    """Normalize a 2D vector.

    Args:
        x: X component.
        y: Y component.

    Returns:
        Normalized (x, y) tuple, or (0, 0) if magnitude is zero.
    """
    mag = math.sqrt(x * x + y * y)
    if mag < 1e-6:
        return (0.0, 0.0)
    return (x / mag, y / mag)


def dot(a: tuple[float, float], b: tuple[float, float]) -> float:
    return a[0] * b[0] + a[1] * b[1]


class NodeSelection:
    """Tracks the highlighted node and moves it by direction."""

    # Minimum alignment for a neighbor to count as "in that direction"
    SCORE_THRESHOLD = 0.3

    # D-pad jump: higher = stronger preference to stay on axis
    AXIS_PENALTY_K = 2.0

    # Stick repeat timing while held
    DEBOUNCE_INITIAL_MS = 250
    DEBOUNCE_REPEAT_MS = 180

    def __init__(self, layout: GraphLayout) -> None:
        """Initialize selection on the node closest to the center.

        Args:
            layout: Layout whose node positions are navigated.
        """
        self.layout = layout
        self.selected_node: int = self._find_initial_node()

        self._stick_active = False
        self._stick_timer_ms = 0.0

    def _find_initial_node(self) -> int:
        if self.layout.node_count == 0:
            return 0

        def center_distance(node_id: int) -> float:
            x, y = self.layout.position(node_id)
            return (x - 0.5) ** 2 + (y - 0.5) ** 2

        return min(self.layout.node_ids, key=center_distance)

    def select_node(self, node_id: int) -> None:
        if node_id in self.layout.node_ids:
            self.selected_node = node_id

    def node_at(self, x: float, y: float, radius: float) -> int | None:
        """Find the node whose circle contains a unit-space point.

        Args:
            x: Point X in unit space.
            y: Point Y in unit space.
            radius: Node radius in unit space.

        Returns:
            Nearest node id within radius, or None.
        """
        best: tuple[float, int] | None = None
        for node_id in self.layout.node_ids:
            nx, ny = self.layout.position(node_id)
            dist_sq = (nx - x) ** 2 + (ny - y) ** 2
            if dist_sq <= radius * radius and (best is None or dist_sq < best[0]):
                best = (dist_sq, node_id)
        return best[1] if best else None

    def step_along_edge(self, dir_x: float, dir_y: float) -> bool:
        """Move to the connected node best aligned with a direction.

        Candidates are sorted by alignment, then distance.

        Args:
            dir_x: Direction X.
            dir_y: Direction Y.

        Returns:
            True if selection changed.
        """
        d = normalize(dir_x, dir_y)
        if d == (0.0, 0.0):
            return False

        cx, cy = self.layout.position(self.selected_node)
        candidates: list[tuple[float, float, int]] = []

        for neighbor_id in self.layout.neighbor_ids(self.selected_node):
            nx, ny = self.layout.position(neighbor_id)
            v = normalize(nx - cx, ny - cy)
            if v == (0.0, 0.0):
                continue

            score = dot(v, d)
            if score < self.SCORE_THRESHOLD:
                continue
            candidates.append((-score, math.hypot(nx - cx, ny - cy), neighbor_id))

        if not candidates:
            return False

        candidates.sort()
        self.selected_node = candidates[0][2]
        return True

    def update_stick_selection(self, stick_x: float, stick_y: float, dt_ms: float) -> bool:
        """Step along edges while the stick is held, with repeat delay.

        Args:
            stick_x: Stick X axis (-1 to 1), deadzone already applied.
            stick_y: Stick Y axis (-1 to 1); +Y is down, as pygame reports it.
            dt_ms: Delta time in milliseconds.

        Returns:
            True if selection changed.
        """
        if math.hypot(stick_x, stick_y) < 0.1:
            self._stick_active = False
            self._stick_timer_ms = 0.0
            return False

        if self._stick_active:
            self._stick_timer_ms += dt_ms
            if self._stick_timer_ms < self.DEBOUNCE_INITIAL_MS:
                return False
            self._stick_timer_ms = self.DEBOUNCE_INITIAL_MS - self.DEBOUNCE_REPEAT_MS
        else:
            self._stick_active = True
            self._stick_timer_ms = 0.0

        return self.step_along_edge(stick_x, stick_y)

    def handle_dpad(self, dpad_x: int, dpad_y: int) -> bool:
        """Jump to the nearest node in a D-pad direction.

        Args:
            dpad_x: D-pad X (-1, 0, or 1).
            dpad_y: D-pad Y (-1, 0, or 1); pygame reports 1 as up.

        Returns:
            True if selection changed.
        """
        if dpad_x == 0 and dpad_y == 0:
            return False

        # Unit space has +Y down, so invert the hat's Y
        new_node = self._find_quadrant_jump(dpad_x, -dpad_y)
        if new_node is not None and new_node != self.selected_node:
            self.selected_node = new_node
            return True

        return False

    def _find_quadrant_jump(self, dir_x: int, dir_y: int) -> int | None:
        """Nearest node in the given direction.

        Score = abs(primary axis) + k * abs(secondary axis); lowest wins.
        """
        cx, cy = self.layout.position(self.selected_node)
        k = self.AXIS_PENALTY_K
        candidates: list[tuple[float, float, int]] = []

        for node_id in self.layout.node_ids:
            if node_id == self.selected_node:
                continue

            x, y = self.layout.position(node_id)
            dx, dy = x - cx, y - cy

            if dir_x > 0 and dx <= 0:
                continue
            if dir_x < 0 and dx >= 0:
                continue
            if dir_y > 0 and dy <= 0:
                continue
            if dir_y < 0 and dy >= 0:
                continue

            if dir_x != 0:
                score = abs(dx) + k * abs(dy)
            else:
                score = abs(dy) + k * abs(dx)

            candidates.append((score, math.hypot(dx, dy), node_id))

        if not candidates:
            return None

        candidates.sort()
        return candidates[0][2]

"""Tests for node cursor movement and hit testing."""

from layout_library import grid_layout, house_layout, wheel_layout
from selection import NodeSelection, normalize


def test_normalize():
    assert normalize(3.0, 4.0) == (0.6, 0.8)
    assert normalize(0.0, 0.0) == (0.0, 0.0)


def test_starts_on_center_node():
    assert NodeSelection(wheel_layout(5)).selected_node == 0
    assert NodeSelection(grid_layout(3, 3)).selected_node == 4


def test_dpad_moves_on_grid():
    selection = NodeSelection(grid_layout(3, 3))

    assert selection.handle_dpad(1, 0)
    assert selection.selected_node == 5

    # Hat +Y is up, which is toward row 0
    assert selection.handle_dpad(0, 1)
    assert selection.selected_node == 2

    assert not selection.handle_dpad(1, 0)
    assert selection.selected_node == 2


def test_dpad_zero_does_nothing():
    selection = NodeSelection(grid_layout(3, 3))
    assert not selection.handle_dpad(0, 0)


def test_step_along_edge_follows_connections():
    selection = NodeSelection(house_layout())
    selection.select_node(2)

    # Roof peak (node 4) sits up and right of node 2
    assert selection.step_along_edge(0.5, -1.0)
    assert selection.selected_node == 4


def test_node_at_hits_nearest_node():
    layout = grid_layout(3, 3)
    selection = NodeSelection(layout)
    x, y = layout.position(8)

    assert selection.node_at(x + 0.01, y - 0.01, radius=0.05) == 8
    assert selection.node_at(0.0, 0.99, radius=0.05) is None


def test_select_unknown_node_is_ignored():
    selection = NodeSelection(grid_layout(3, 3))
    selection.select_node(42)
    assert selection.selected_node == 4


class TestStickSelection:
    def test_first_push_steps_immediately(self):
        selection = NodeSelection(grid_layout(3, 3))
        selection.select_node(3)

        assert selection.update_stick_selection(1.0, 0.0, 16)
        assert selection.selected_node == 4

    def test_held_stick_repeats_after_delay(self):
        selection = NodeSelection(grid_layout(3, 3))
        selection.select_node(3)
        selection.update_stick_selection(1.0, 0.0, 16)

        assert not selection.update_stick_selection(1.0, 0.0, 100)
        assert selection.selected_node == 4
        assert selection.update_stick_selection(1.0, 0.0, 150)
        assert selection.selected_node == 5

    def test_release_resets_repeat(self):
        selection = NodeSelection(grid_layout(3, 3))
        selection.select_node(3)
        selection.update_stick_selection(1.0, 0.0, 16)

        assert not selection.update_stick_selection(0.0, 0.0, 16)
        assert selection.update_stick_selection(1.0, 0.0, 16)
        assert selection.selected_node == 5

    def test_stick_only_follows_edges(self):
        # Node 5 sits on the right edge; nothing is connected further right
        selection = NodeSelection(grid_layout(3, 3))
        selection.select_node(5)
        assert not selection.update_stick_selection(1.0, 0.0, 16)
        assert selection.selected_node == 5

"""Tests for the toggle rule and the win predicate."""

import numpy as np
import pytest
from hypothesis import given, strategies as st

from graph_layout import LayoutHandle
from layout_library import DEFAULT_LAYOUT_POOLS, path_layout
from toggle_engine import InvalidNodeError, Node, PuzzleInstance, activate, is_solved, toggle

ALL_LAYOUTS = [layout for pool in DEFAULT_LAYOUT_POOLS.values() for layout in pool]


def make_puzzle(layout, colors, color_count=2, target=0, handle=None):
    nodes = {
        node_id: Node(id=node_id, color=colors[node_id], neighbors=layout.neighbor_ids(node_id))
        for node_id in layout.node_ids
    }
    return PuzzleInstance(target_color=target, color_count=color_count, nodes=nodes, layout=handle)


def test_toggle_advances_self_and_neighbors():
    puzzle = make_puzzle(path_layout(3), [0, 0, 0], color_count=3)
    toggle(puzzle, 0)
    assert puzzle.colors().tolist() == [1, 1, 0]
    toggle(puzzle, 1)
    assert puzzle.colors().tolist() == [2, 2, 1]


def test_toggle_wraps_around():
    puzzle = make_puzzle(path_layout(3), [2, 2, 2], color_count=3)
    toggle(puzzle, 2)
    assert puzzle.colors().tolist() == [2, 0, 0]


@given(
    layout=st.sampled_from(ALL_LAYOUTS),
    data=st.data(),
)
def test_two_colors_double_activation_is_identity(layout, data):
    colors = data.draw(st.lists(st.integers(0, 1), min_size=layout.node_count, max_size=layout.node_count))
    node_id = data.draw(st.sampled_from(layout.node_ids))
    puzzle = make_puzzle(layout, colors)

    activate(puzzle, node_id)
    activate(puzzle, node_id)

    assert puzzle.colors().tolist() == colors
    assert puzzle.move_count == 2


@given(
    layout=st.sampled_from(ALL_LAYOUTS),
    color_count=st.integers(2, 4),
    data=st.data(),
)
def test_solved_iff_all_nodes_match_target(layout, color_count, data):
    colors = data.draw(
        st.lists(st.integers(0, color_count - 1), min_size=layout.node_count, max_size=layout.node_count)
    )
    target = data.draw(st.integers(0, color_count - 1))
    puzzle = make_puzzle(layout, colors, color_count=color_count, target=target)

    assert is_solved(puzzle) == all(c == target for c in colors)
    assert puzzle.mismatch_count() == sum(c != target for c in colors)


def test_single_mismatch_is_not_solved():
    puzzle = make_puzzle(path_layout(3), [0, 0, 1])
    assert not is_solved(puzzle)


def test_activate_reports_solve():
    puzzle = make_puzzle(path_layout(3), [0, 1, 1])
    assert activate(puzzle, 2)
    assert puzzle.move_count == 1


def test_out_of_range_node_is_rejected():
    puzzle = make_puzzle(path_layout(3), [0, 0, 0])
    with pytest.raises(InvalidNodeError):
        activate(puzzle, 3)
    with pytest.raises(IndexError):
        activate(puzzle, -1)
    assert puzzle.move_count == 0
    assert puzzle.colors().tolist() == [0, 0, 0]


def test_solution_presses_undo_recorded_shuffle():
    puzzle = make_puzzle(path_layout(3), [0, 0, 0], color_count=3)
    for node_id in (0, 1, 1, 2):
        toggle(puzzle, node_id)
    puzzle.shuffle_sequence = (0, 1, 1, 2)

    presses = puzzle.solution_presses()
    assert presses.tolist() == [2, 1, 2]
    for node_id, count in enumerate(presses.tolist()):
        for _ in range(count):
            toggle(puzzle, node_id)
    assert is_solved(puzzle)


def test_colors_are_numpy_ordered_by_id():
    puzzle = make_puzzle(path_layout(3), [1, 0, 1])
    colors = puzzle.colors()
    assert isinstance(colors, np.ndarray)
    assert colors.tolist() == [1, 0, 1]


class TestDiscard:
    def test_discard_releases_layout_once(self):
        layout = path_layout(3)
        handle = LayoutHandle(layout)
        handle.acquire()
        puzzle = make_puzzle(layout, [0, 0, 0], handle=handle)

        puzzle.discard()
        puzzle.discard()

        assert puzzle.discarded
        assert puzzle.nodes == {}
        assert handle.active_count == 0

    def test_discarded_puzzle_rejects_activation(self):
        puzzle = make_puzzle(path_layout(3), [0, 0, 0])
        puzzle.discard()
        with pytest.raises(InvalidNodeError, match="discarded"):
            activate(puzzle, 0)

"""Shared builders for Neuron Graph tests."""

import pytest

from difficulty import DifficultyConfig, DifficultyTier
from graph_layout import GraphLayout, LayoutHandle
from layout_library import complete_layout, path_layout


class ScriptedRandom:
    """Stand-in for random.Random that returns pre-set picks and target colours."""

    def __init__(self, picks: list[int], target: int = 0) -> None:
        self.picks = list(picks)
        self.target = target

    def choice(self, seq):
        wanted = self.picks.pop(0)
        assert wanted in seq
        return wanted

    def randrange(self, *args, **kwargs):
        return self.target

    def shuffle(self, x, *args, **kwargs):
        pass


def make_tier(**overrides) -> DifficultyTier:
    values = dict(
        name="only",
        min_level=1,
        max_level=10,
        node_count=3,
        color_count=2,
        shuffle_moves=2,
        time_per_puzzle=10.0,
        session_time_limit=30.0,
        solve_score=100,
        wrong_penalty=0,
        combo_threshold=3,
        combo_multiplier=1.5,
    )
    values.update(overrides)
    return DifficultyTier(**values)


def make_config(
    layout: GraphLayout | None,
    pool: list[GraphLayout] | None = None,
    **overrides,
) -> DifficultyConfig:
    """Config whose selected layout is layout and whose pool is pool (+layout)."""
    handle = LayoutHandle(layout) if layout is not None else None
    handles = [handle] if handle is not None else []
    handles.extend(LayoutHandle(other) for other in pool or [])

    values = dict(
        level=1,
        tier_name="only",
        node_count=layout.node_count if layout is not None else 3,
        color_count=2,
        shuffle_moves=2,
        time_per_puzzle=10.0,
        session_time_limit=30.0,
        solve_score=100,
        wrong_penalty=0,
        combo_threshold=3,
        combo_multiplier=1.5,
    )
    values.update(overrides)
    return DifficultyConfig(layout_pool=tuple(handles), layout=handle, **values)


@pytest.fixture
def triangle() -> GraphLayout:
    return complete_layout(3)


@pytest.fixture
def path3() -> GraphLayout:
    return path_layout(3)

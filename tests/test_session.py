"""Tests for the session state machine, scoring and timing."""

import random

import pytest

from conftest import make_tier
from difficulty import DifficultyResolver
from layout_library import path_layout
from layout_loader import LayoutStore
from level_progress import LevelProgress
from puzzle_generator import PuzzleGenerator
from session import SessionController, SessionListener, SessionPhase
from toggle_engine import InvalidNodeError


class RecordingListener(SessionListener):
    def __init__(self):
        self.events = []

    def on_node_activated(self, node_id, solved):
        self.events.append(("activated", node_id, solved))

    def on_puzzle_ready(self, puzzle):
        self.events.append(("ready", puzzle.node_count))

    def on_puzzle_solved(self, earned_score, combo_streak):
        self.events.append(("solved", earned_score, combo_streak))

    def on_timed_out(self):
        self.events.append(("timed_out",))

    def on_session_ended(self, final_score):
        self.events.append(("ended", final_score))

    def names(self):
        return [event[0] for event in self.events]


def make_session(tier=None, layouts=None, seed=0, **kwargs):
    # path3 with two colours and two shuffle moves is never solved at start
    tier = tier or make_tier()
    pool = layouts if layouts is not None else [path_layout(3)]
    store = LayoutStore.from_layouts({tier.name: pool})
    resolver = DifficultyResolver(store, (tier,), rng=random.Random(seed))
    progress = LevelProgress(resolver.total_levels)
    listener = RecordingListener()
    controller = SessionController(
        resolver, PuzzleGenerator(random.Random(seed)), progress, listener=listener, **kwargs
    )
    return controller, listener


def solve_current(controller):
    """Press the recorded solution; True once the puzzle reports solved."""
    presses = controller.puzzle.solution_presses().tolist()
    for node_id, count in enumerate(presses):
        for _ in range(count):
            if controller.on_node_activated(node_id):
                return True
    return False


def run_for(controller, seconds, step=0.5):
    elapsed = 0.0
    while elapsed < seconds:
        controller.update(step)
        elapsed += step


def test_start_session_shows_first_puzzle():
    controller, listener = make_session()
    controller.start_session()

    assert controller.phase == SessionPhase.PUZZLE_ACTIVE
    assert controller.puzzle is not None
    assert controller.remaining_time == 30.0
    assert controller.score == 0
    assert controller.node_colors().shape == (3,)
    assert listener.events == [("ready", 3)]


def test_solve_scores_and_advances_level():
    controller, listener = make_session()
    controller.start_session()

    assert solve_current(controller)
    assert controller.phase == SessionPhase.PUZZLE_SOLVED
    assert controller.score == 100
    assert controller.combo_streak == 1
    assert controller.puzzles_solved == 1
    assert controller.progress.current_level == 2
    assert listener.events[-1] == ("solved", 100, 1)


def test_solved_puzzle_stays_until_next_request():
    controller, _ = make_session()
    controller.start_session()
    solve_current(controller)
    solved = controller.puzzle

    assert controller.on_node_activated(0) is False
    assert controller.puzzle is solved

    assert controller.request_next_puzzle()
    assert controller.phase == SessionPhase.PUZZLE_ACTIVE
    assert controller.puzzle is not solved
    assert solved.discarded


def test_combo_boundary():
    tier = make_tier(solve_score=100, combo_threshold=3, combo_multiplier=1.5)
    controller, listener = make_session(tier)
    controller.start_session()

    earned = []
    for _ in range(4):
        solve_current(controller)
        earned.append(listener.events[-1][1])
        controller.request_next_puzzle()

    assert earned == [100, 100, 150, 150]
    assert controller.score == 500


def test_combo_score_is_rounded():
    tier = make_tier(solve_score=125, combo_threshold=1, combo_multiplier=1.75)
    controller, _ = make_session(tier)
    controller.start_session()
    solve_current(controller)
    assert controller.score == 219


def test_session_ends_after_time_limit():
    controller, listener = make_session(make_tier(session_time_limit=30.0))
    controller.start_session()

    run_for(controller, 29.5)
    assert controller.phase == SessionPhase.PUZZLE_ACTIVE

    run_for(controller, 0.5)
    assert controller.phase == SessionPhase.ENDED
    assert controller.final_score == 0
    assert listener.names()[-2:] == ["timed_out", "ended"]

    assert controller.on_node_activated(0) is False
    assert controller.score == 0
    assert controller.remaining_time == 0.0


def test_final_score_keeps_points_from_solves():
    controller, listener = make_session()
    controller.start_session()
    solve_current(controller)
    controller.request_next_puzzle()

    run_for(controller, 30.0)
    assert controller.final_score == 100
    assert controller.score == 100
    assert listener.events[-1] == ("ended", 100)
    assert controller.progress.best_score == 100


def test_no_new_puzzle_inside_safety_margin():
    controller, _ = make_session(safety_margin=2.0)
    controller.start_session()
    solve_current(controller)

    run_for(controller, 28.5)
    assert controller.request_next_puzzle() is False
    assert controller.puzzle is None
    assert controller.phase == SessionPhase.PUZZLE_SOLVED

    run_for(controller, 1.5)
    assert controller.phase == SessionPhase.ENDED


def test_safety_margin_refusal_logged_once(caplog):
    controller, _ = make_session(safety_margin=2.0)
    controller.start_session()
    solve_current(controller)
    run_for(controller, 28.5)

    caplog.set_level("INFO", logger="session")
    for _ in range(3):
        assert controller.request_next_puzzle() is False

    assert caplog.text.count("not starting another puzzle") == 1


def test_empty_pool_leaves_session_inert():
    controller, listener = make_session(layouts=[])
    controller.start_session()

    assert controller.phase == SessionPhase.PUZZLE_ACTIVE
    assert controller.puzzle is None
    assert "no layout assigned" in controller.last_error
    assert controller.on_node_activated(0) is False
    assert controller.node_colors().size == 0
    assert "ready" not in listener.names()

    run_for(controller, 30.0)
    assert controller.phase == SessionPhase.ENDED


def test_invalid_node_is_rejected():
    controller, _ = make_session()
    controller.start_session()
    with pytest.raises(InvalidNodeError):
        controller.on_node_activated(99)
    assert controller.puzzle.move_count == 0


class TestCountdown:
    def test_countdown_holds_session_time(self):
        controller, _ = make_session(countdown=3.0)
        controller.start_session()

        assert controller.phase == SessionPhase.COUNTDOWN
        assert controller.puzzle is None
        controller.update(2.0)
        assert controller.phase == SessionPhase.COUNTDOWN
        assert controller.remaining_time == 30.0

        controller.update(1.0)
        assert controller.phase == SessionPhase.PUZZLE_ACTIVE
        assert controller.puzzle is not None

    def test_activation_ignored_during_countdown(self):
        controller, _ = make_session(countdown=3.0)
        controller.start_session()
        assert controller.on_node_activated(0) is False

    def test_finish_countdown_early(self):
        controller, _ = make_session(countdown=3.0)
        controller.start_session()
        controller.finish_countdown()
        assert controller.phase == SessionPhase.PUZZLE_ACTIVE


class TestGrace:
    def test_grace_solve_scores_then_ends(self):
        controller, listener = make_session(allow_grace=True)
        controller.start_session()

        run_for(controller, 30.0)
        assert controller.phase == SessionPhase.TIMED_OUT
        assert controller.puzzle is not None

        assert solve_current(controller)
        assert controller.phase == SessionPhase.ENDED
        assert controller.final_score == 100
        assert listener.events[-1] == ("ended", 100)

    def test_grace_can_be_abandoned(self):
        controller, _ = make_session(allow_grace=True)
        controller.start_session()
        run_for(controller, 30.0)

        assert controller.end_session() == 0
        assert controller.phase == SessionPhase.ENDED

    def test_no_grace_during_solved_pause(self):
        controller, _ = make_session(allow_grace=True)
        controller.start_session()
        solve_current(controller)

        run_for(controller, 30.0)
        assert controller.phase == SessionPhase.ENDED


class TestShutdown:
    def test_end_session_is_idempotent(self):
        controller, listener = make_session()
        controller.start_session()
        solve_current(controller)

        assert controller.end_session() == 100
        assert controller.end_session() == 100
        assert listener.names().count("ended") == 1

    def test_teardown_is_silent_and_releases_layout(self):
        controller, listener = make_session()
        controller.start_session()
        handle = controller.puzzle.layout

        controller.teardown()
        controller.teardown()

        assert controller.phase == SessionPhase.IDLE
        assert not handle.is_active
        assert "ended" not in listener.names()
        assert not controller.is_running()

    def test_end_session_releases_layout(self):
        controller, _ = make_session()
        controller.start_session()
        handle = controller.puzzle.layout

        controller.end_session()
        assert not handle.is_active

    def test_restart_resets_counters(self):
        controller, _ = make_session()
        controller.start_session()
        solve_current(controller)
        controller.end_session()

        controller.start_session(start_level=1)
        assert controller.score == 0
        assert controller.combo_streak == 0
        assert controller.progress.current_level == 1


def test_start_level_selects_tier():
    tiers = (make_tier(name="low", max_level=5), make_tier(name="high", min_level=6, max_level=10))
    store = LayoutStore.from_layouts({"low": [path_layout(3)], "high": [path_layout(3)]})
    resolver = DifficultyResolver(store, tiers, rng=random.Random(0))
    controller = SessionController(resolver, PuzzleGenerator(random.Random(0)), LevelProgress(10))

    controller.start_session(start_level=7)
    assert controller.config.tier_name == "high"
    assert controller.config.level == 7

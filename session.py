"""Session control for Neuron Graph.

A session is a timed run of puzzles. The controller owns the session state
(score, combo streak, solved count, remaining time), asks the resolver and
generator for each puzzle and feeds player activations to the toggle
engine. It is fully synchronous: the caller drives time with update() and
decides when the next puzzle may appear with request_next_puzzle().
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto

import numpy as np

from difficulty import DifficultyConfig, DifficultyResolver
from level_progress import LevelProgress
from puzzle_generator import GenerationError, PuzzleGenerator
from toggle_engine import PuzzleInstance, activate

logger = logging.getLogger(__name__)


class SessionPhase(Enum):
    """Where the session is in its lifecycle."""

    IDLE = auto()
    COUNTDOWN = auto()
    PUZZLE_ACTIVE = auto()
    PUZZLE_SOLVED = auto()
    TIMED_OUT = auto()
    ENDED = auto()


@dataclass
class SessionState:
    """Mutable per-session counters."""

    score: int = 0
    combo_streak: int = 0
    puzzles_solved: int = 0
    remaining_time: float = 0.0
    puzzle_elapsed: float = 0.0


class SessionListener:
    """Receives session notifications (audio, HUD, effects).

    Every hook is fire-and-forget; override the ones you need.
    """

    def on_node_activated(self, node_id: int, solved: bool) -> None:
        pass

    def on_puzzle_ready(self, puzzle: PuzzleInstance) -> None:
        pass

    def on_puzzle_solved(self, earned_score: int, combo_streak: int) -> None:
        pass

    def on_timed_out(self) -> None:
        pass

    def on_session_ended(self, final_score: int) -> None:
        pass


class SessionController:
    """Runs a timed sequence of puzzles and keeps score.

    Phases: IDLE -> COUNTDOWN -> PUZZLE_ACTIVE -> PUZZLE_SOLVED ->
    PUZZLE_ACTIVE (next) ... -> TIMED_OUT -> ENDED.
    """

    # Minimum session time left for a new puzzle to be worth starting
    DEFAULT_SAFETY_MARGIN = 2.0

    def __init__(
        self,
        resolver: DifficultyResolver,
        generator: PuzzleGenerator,
        progress: LevelProgress,
        listener: SessionListener | None = None,
        safety_margin: float = DEFAULT_SAFETY_MARGIN,
        countdown: float = 0.0,
        allow_grace: bool = False,
    ) -> None:
        """Initialize controller.

        Args:
            resolver: Level -> difficulty config.
            generator: Builds puzzles from configs.
            progress: Level counter advanced on every solve.
            listener: Optional notification sink.
            safety_margin: Seconds that must remain to start another puzzle.
            countdown: Seconds of countdown before the first puzzle (0 = none).
            allow_grace: Keep the current puzzle playable after the timer
                runs out, until it is solved or end_session() is called.
        """
        self.resolver = resolver
        self.generator = generator
        self.progress = progress
        self.listener = listener or SessionListener()
        self.safety_margin = safety_margin
        self.countdown = countdown
        self.allow_grace = allow_grace

        self.phase = SessionPhase.IDLE
        self.state: SessionState | None = None
        self.config: DifficultyConfig | None = None
        self.puzzle: PuzzleInstance | None = None
        self.countdown_remaining = 0.0
        self.final_score: int | None = None
        self.last_error: str | None = None

    # -- Queries --------------------------------------------------------------

    @property
    def score(self) -> int:
        if self.state is not None:
            return self.state.score
        return self.final_score or 0

    @property
    def combo_streak(self) -> int:
        return self.state.combo_streak if self.state is not None else 0

    @property
    def puzzles_solved(self) -> int:
        return self.state.puzzles_solved if self.state is not None else 0

    @property
    def remaining_time(self) -> float:
        return self.state.remaining_time if self.state is not None else 0.0

    def node_colors(self) -> np.ndarray:
        """Colours of the current puzzle by node id; empty when there is none."""
        if self.puzzle is None:
            return np.zeros(0, dtype=np.int64)
        return self.puzzle.colors()

    def is_running(self) -> bool:
        return self.phase not in (SessionPhase.IDLE, SessionPhase.ENDED)

    # -- Lifecycle ------------------------------------------------------------

    def start_session(self, start_level: int | None = None) -> None:
        """Reset counters and start a new session.

        Args:
            start_level: Level to start at; defaults to the saved current level.
        """
        self.teardown()
        if start_level is not None:
            self.progress.set_current_level(start_level)

        self.state = SessionState()
        self.final_score = None
        self.last_error = None
        self.config = self.resolver.resolve(self.progress.current_level)
        self.state.remaining_time = self.config.session_time_limit

        logger.info(
            "Session started at level %d (%s), %.0fs",
            self.progress.current_level,
            self.config.tier_name,
            self.state.remaining_time,
        )

        if self.countdown > 0:
            self.phase = SessionPhase.COUNTDOWN
            self.countdown_remaining = self.countdown
            return

        self._begin_play()

    def finish_countdown(self) -> None:
        """Leave the countdown and show the first puzzle."""
        if self.phase != SessionPhase.COUNTDOWN:
            return
        self.countdown_remaining = 0.0
        self._begin_play()

    def update(self, dt: float) -> None:
        """Advance countdown or session time by dt seconds."""
        if self.phase == SessionPhase.COUNTDOWN:
            self.countdown_remaining -= dt
            if self.countdown_remaining <= 0:
                self.finish_countdown()
            return

        if self.phase not in (SessionPhase.PUZZLE_ACTIVE, SessionPhase.PUZZLE_SOLVED):
            return

        self.state.remaining_time = max(0.0, self.state.remaining_time - dt)
        if self.phase == SessionPhase.PUZZLE_ACTIVE and self.puzzle is not None:
            self.state.puzzle_elapsed += dt

        if self.state.remaining_time <= 0:
            self.on_session_timer_expired()

    def on_session_timer_expired(self) -> None:
        """Session time is up.

        Without a grace window the session ends immediately. With one, a
        puzzle still on screen stays playable until solved or abandoned.
        """
        if self.phase not in (SessionPhase.COUNTDOWN, SessionPhase.PUZZLE_ACTIVE, SessionPhase.PUZZLE_SOLVED):
            return

        was_playing = self.phase == SessionPhase.PUZZLE_ACTIVE
        self.state.remaining_time = 0.0
        self.phase = SessionPhase.TIMED_OUT
        logger.info("Session timed out with score %d", self.state.score)
        self.listener.on_timed_out()

        if not (self.allow_grace and was_playing and self.puzzle is not None):
            self.end_session()

    def end_session(self) -> int:
        """Finish the session and report the final score.

        Safe to call more than once; later calls return the same score.

        Returns:
            Final score.
        """
        if self.phase == SessionPhase.ENDED:
            return self.final_score or 0
        if self.state is None:
            return 0

        final_score = self.state.score
        self._discard_puzzle()
        self.state = None
        self.config = None
        self.final_score = final_score
        self.phase = SessionPhase.ENDED

        if self.progress.record_score(final_score):
            logger.info("New best score: %d", final_score)
        logger.info("Session ended, final score %d", final_score)
        self.listener.on_session_ended(final_score)
        return final_score

    def teardown(self) -> None:
        """Drop the puzzle and session state without reporting anything.

        Safe at any point and idempotent.
        """
        self._discard_puzzle()
        self.state = None
        self.config = None
        self.countdown_remaining = 0.0
        self.phase = SessionPhase.IDLE

    # -- Play -----------------------------------------------------------------

    def on_node_activated(self, node_id: int) -> bool:
        """Forward a player tap to the toggle engine.

        Taps outside active play (countdown, solved pause, ended session or
        no puzzle available) are ignored.

        Args:
            node_id: Node the player tapped.

        Returns:
            True if this tap solved the puzzle.

        Raises:
            InvalidNodeError: If node_id is not part of the current puzzle.
        """
        if self.puzzle is None:
            return False

        in_grace = self.phase == SessionPhase.TIMED_OUT and self.allow_grace
        if self.phase != SessionPhase.PUZZLE_ACTIVE and not in_grace:
            return False

        solved = activate(self.puzzle, node_id)
        self.listener.on_node_activated(node_id, solved)

        if solved:
            self._on_puzzle_solved()
            if in_grace:
                self.end_session()
        return solved

    def request_next_puzzle(self) -> bool:
        """Move on from a solved puzzle after the caller's presentation pause.

        A new puzzle only starts if more than safety_margin seconds remain;
        otherwise the session waits for its timer to run out.

        Returns:
            True if a new puzzle is now active.
        """
        if self.phase != SessionPhase.PUZZLE_SOLVED:
            return False

        if self.state.remaining_time <= self.safety_margin:
            if self.puzzle is not None:
                logger.info("%.1fs left, not starting another puzzle", self.state.remaining_time)
                self._discard_puzzle()
            return False

        self.config = self.resolver.resolve(self.progress.current_level)
        self.phase = SessionPhase.PUZZLE_ACTIVE
        return self._load_puzzle()

    def _begin_play(self) -> None:
        self.phase = SessionPhase.PUZZLE_ACTIVE
        self._load_puzzle()

    def _load_puzzle(self) -> bool:
        """Replace the current puzzle with a new one for self.config.

        Generation failures leave the session without a puzzle instead of
        raising; the screen stays inert until the timer ends the session.
        """
        self._discard_puzzle()
        self.state.puzzle_elapsed = 0.0

        try:
            self.puzzle = self.generator.generate(self.config)
        except GenerationError as e:
            self.last_error = str(e)
            logger.error("Cannot start puzzle: %s", e)
            return False

        self.listener.on_puzzle_ready(self.puzzle)
        return True

    def _on_puzzle_solved(self) -> None:
        state = self.state
        state.combo_streak += 1
        state.puzzles_solved += 1

        earned = self.config.solve_score
        if state.combo_streak >= self.config.combo_threshold:
            earned = int(round(earned * self.config.combo_multiplier))
        state.score += earned

        self.progress.next_level()
        self.phase = SessionPhase.PUZZLE_SOLVED

        logger.info(
            "Puzzle solved in %d moves: +%d, combo %d, total %d, next level %d",
            self.puzzle.move_count,
            earned,
            state.combo_streak,
            state.score,
            self.progress.current_level,
        )
        self.listener.on_puzzle_solved(earned, state.combo_streak)

    def _discard_puzzle(self) -> None:
        if self.puzzle is not None:
            self.puzzle.discard()
            self.puzzle = None

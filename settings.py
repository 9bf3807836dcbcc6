"""Settings management for Neuron Graph.

Holds the game settings, loads JSON overrides and wires the session
controller together from them.
"""

import json
import logging
import random
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from difficulty import DEFAULT_TIERS, DifficultyResolver, load_tiers_json
from layout_loader import LayoutStore
from level_progress import LevelProgress
from palettes import PALETTE_NAMES
from puzzle_generator import PuzzleGenerator
from save_manager import SaveManager
from session import SessionController, SessionListener

logger = logging.getLogger(__name__)

# Window size presets: name -> (width, height)
WINDOW_PRESETS = {
    "Small": (800, 600),
    "Medium": (1280, 720),
    "Large": (1920, 1080),
}


@dataclass
class GameSettings:
    """Settings for a play session."""

    palette_name: str = "Classic"
    window: str = "Medium"
    fullscreen: bool = False
    countdown: float = 3.0
    solve_delay: float = 0.5  # Pause between a solve and the next puzzle
    safety_margin: float = 2.0
    allow_grace: bool = False
    start_level: int | None = None  # None = continue from saved level
    layouts_dir: str | None = None  # None = built-in layout library
    tiers_file: str | None = None  # None = built-in tier table
    seed: int | None = None  # None = random
    log_level: str = "INFO"

    def get_window_size(self) -> tuple[int, int]:
        return WINDOW_PRESETS.get(self.window, WINDOW_PRESETS["Medium"])


def load_settings(path: Path | None) -> GameSettings:
    """Load settings, overriding defaults with values from a JSON file.

    Missing or unreadable files fall back to defaults; unknown keys are
    reported and ignored.

    Args:
        path: Settings JSON file, or None for defaults.

    Returns:
        GameSettings instance.
    """
    settings = GameSettings()
    if path is None or not path.exists():
        return settings

    try:
        with open(path, "r", encoding="utf-8") as f:
            data: dict[str, Any] = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Failed to read settings %s: %s", path, e)
        return settings

    known = {f.name: f.type for f in fields(GameSettings)}
    for key, value in data.items():
        if key not in known:
            logger.warning("Ignoring unknown setting %r", key)
            continue

        expected = known[key]
        # JSON has no separate int/float; bools are ints to isinstance
        if isinstance(value, int) and not isinstance(value, bool) and isinstance(1.0, expected):
            value = float(value)
        if (isinstance(value, bool) and expected is not bool) or not isinstance(value, expected):
            logger.warning("Ignoring setting %r: expected %s, got %r", key, expected, value)
            continue

        setattr(settings, key, value)

    if settings.palette_name not in PALETTE_NAMES and settings.palette_name != "Random":
        logger.warning("Unknown palette %r, using Classic", settings.palette_name)
        settings.palette_name = "Classic"

    return settings


def build_session(
    settings: GameSettings,
    listener: SessionListener | None = None,
    save_dir: Path | None = None,
) -> SessionController:
    """Create a session controller and its collaborators from settings.

    Args:
        settings: Game settings.
        listener: Notification sink for presentation/audio.
        save_dir: Base directory for progress saves; None disables saving.

    Returns:
        Ready-to-start SessionController.

    Raises:
        ConfigurationError: If the tier table is invalid.
    """
    rng = random.Random(settings.seed)

    if settings.layouts_dir:
        store = LayoutStore.from_directory(Path(settings.layouts_dir))
    else:
        store = LayoutStore.default()

    tiers = load_tiers_json(Path(settings.tiers_file)) if settings.tiers_file else DEFAULT_TIERS
    resolver = DifficultyResolver(store, tiers, rng=rng)

    save_manager = SaveManager(save_dir) if save_dir is not None else None
    progress = LevelProgress(resolver.total_levels, store=save_manager)

    return SessionController(
        resolver,
        PuzzleGenerator(rng),
        progress,
        listener=listener,
        safety_margin=settings.safety_margin,
        countdown=settings.countdown,
        allow_grace=settings.allow_grace,
    )

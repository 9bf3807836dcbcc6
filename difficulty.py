"""Difficulty tiers for Neuron Graph.

Maps a level number to the puzzle parameters of its tier and draws one
layout from the tier's pool.
"""

import json
import logging
import random
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from graph_layout import LayoutHandle
from layout_loader import LayoutStore

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised for tier tables that cannot produce puzzles."""


@dataclass(frozen=True)
class DifficultyTier:
    """One contiguous, inclusive level range and its puzzle parameters."""

    name: str
    min_level: int
    max_level: int
    node_count: int
    color_count: int
    shuffle_moves: int
    time_per_puzzle: float
    session_time_limit: float
    solve_score: int
    wrong_penalty: int
    combo_threshold: int
    combo_multiplier: float


@dataclass(frozen=True)
class DifficultyConfig:
    """Puzzle parameters resolved for one level.

    layout is None when the tier pool is empty; generation must not
    proceed from such a config.
    """

    level: int
    tier_name: str
    node_count: int
    color_count: int
    shuffle_moves: int
    time_per_puzzle: float
    session_time_limit: float
    solve_score: int
    wrong_penalty: int
    combo_threshold: int
    combo_multiplier: float
    layout_pool: tuple[LayoutHandle, ...] = ()
    layout: LayoutHandle | None = None


# Default tier table: (name, min, max, nodes, colors, shuffles, time/puzzle,
# session limit, solve score, wrong penalty, combo threshold, combo multiplier)
_TIER_TABLE = [
    ("beginner", 1, 5, 3, 2, 2, 10.0, 40.0, 100, 0, 3, 1.5),
    ("easy", 6, 12, 4, 2, 4, 8.0, 45.0, 125, 25, 4, 1.75),
    ("medium", 13, 30, 5, 3, 6, 7.0, 50.0, 150, 50, 5, 2.0),
    ("advanced", 31, 45, 7, 3, 10, 6.0, 55.0, 200, 75, 6, 2.25),
    ("hard", 46, 60, 9, 4, 15, 5.0, 60.0, 250, 100, 7, 2.5),
]

DEFAULT_TIERS: tuple[DifficultyTier, ...] = tuple(DifficultyTier(*row) for row in _TIER_TABLE)


_INT_FIELDS = (
    "min_level",
    "max_level",
    "node_count",
    "color_count",
    "shuffle_moves",
    "solve_score",
    "wrong_penalty",
    "combo_threshold",
)
_FLOAT_FIELDS = ("time_per_puzzle", "session_time_limit", "combo_multiplier")


def _check_field_types(tier: DifficultyTier) -> None:
    """Reject tiers whose numbers came in as strings, bools or nulls."""
    for name in _INT_FIELDS:
        value = getattr(tier, name)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigurationError(f"tier {tier.name}: {name} must be an integer, got {value!r}")
    for name in _FLOAT_FIELDS:
        value = getattr(tier, name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigurationError(f"tier {tier.name}: {name} must be a number, got {value!r}")


def validate_tiers(tiers: tuple[DifficultyTier, ...] | list[DifficultyTier]) -> None:
    """Check a tier table for gaps, overlaps and unusable parameters.

    Args:
        tiers: Tiers in ascending level order.

    Raises:
        ConfigurationError: Describing the first problem found.
    """
    if not tiers:
        raise ConfigurationError("at least one difficulty tier is required")

    for tier in tiers:
        _check_field_types(tier)

    if tiers[0].min_level != 1:
        raise ConfigurationError(f"first tier {tiers[0].name} must start at level 1, not {tiers[0].min_level}")

    for tier in tiers:
        if tier.min_level > tier.max_level:
            raise ConfigurationError(f"tier {tier.name}: min_level {tier.min_level} > max_level {tier.max_level}")
        if tier.color_count < 2:
            raise ConfigurationError(f"tier {tier.name}: color_count must be at least 2")
        if tier.shuffle_moves < 0:
            raise ConfigurationError(f"tier {tier.name}: shuffle_moves must not be negative")
        if tier.combo_threshold < 1:
            raise ConfigurationError(f"tier {tier.name}: combo_threshold must be at least 1")

    for prev, tier in zip(tiers, tiers[1:]):
        if tier.min_level != prev.max_level + 1:
            kind = "gap" if tier.min_level > prev.max_level + 1 else "overlap"
            raise ConfigurationError(
                f"{kind} between tier {prev.name} (ends {prev.max_level}) "
                f"and tier {tier.name} (starts {tier.min_level})"
            )


def load_tiers_json(path: Path) -> tuple[DifficultyTier, ...]:
    """Load a tier table from JSON.

    Args:
        path: File holding {"tiers": [{...DifficultyTier fields...}, ...]}.

    Returns:
        Validated tiers.

    Raises:
        ConfigurationError: If the file is unreadable or the table is invalid.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"{path}: cannot read tier table ({e})") from e

    names = {f.name for f in fields(DifficultyTier)}
    try:
        entries = data["tiers"]
        if not isinstance(entries, list) or not all(isinstance(entry, dict) for entry in entries):
            raise TypeError("\"tiers\" must be a list of objects")
        tiers = tuple(
            DifficultyTier(**{k: v for k, v in entry.items() if k in names})
            for entry in entries
        )
    except (KeyError, TypeError) as e:
        raise ConfigurationError(f"{path}: malformed tier table ({e})") from e

    validate_tiers(tiers)
    return tiers


class DifficultyResolver:
    """Resolves level numbers to difficulty configs."""

    def __init__(
        self,
        layout_store: LayoutStore,
        tiers: tuple[DifficultyTier, ...] = DEFAULT_TIERS,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize resolver.

        Args:
            layout_store: Source of the per-tier layout pools.
            tiers: Tier table in ascending level order.
            rng: Random source for layout selection.

        Raises:
            ConfigurationError: If the tier table is invalid.
        """
        validate_tiers(tiers)
        self.tiers = tuple(tiers)
        self.layout_store = layout_store
        self.rng = rng or random.Random()

    @property
    def total_levels(self) -> int:
        return self.tiers[-1].max_level

    def tier_for(self, level: int) -> DifficultyTier:
        """First tier whose upper bound covers level; the last tier beyond that."""
        for tier in self.tiers:
            if level <= tier.max_level:
                return tier
        return self.tiers[-1]

    def difficulty_for(self, level: int) -> str:
        return self.tier_for(level).name

    def level_time(self, level: int) -> float:
        return self.tier_for(level).session_time_limit

    def resolve(self, level: int) -> DifficultyConfig:
        """Resolve the config for a level and pick a layout from its pool.

        Args:
            level: Level number.

        Returns:
            DifficultyConfig; layout is None if the tier pool is empty.
        """
        tier = self.tier_for(level)
        pool = self.layout_store.pool(tier.name)

        layout: LayoutHandle | None = None
        if pool:
            index = self.rng.randrange(len(pool))
            layout = pool[index]
            logger.debug("Selected layout variant %d/%d: %s", index + 1, len(pool), layout.name)
        else:
            logger.warning("No layouts in pool for tier %s (%d nodes)", tier.name, tier.node_count)

        params: dict[str, Any] = {
            f.name: getattr(tier, f.name)
            for f in fields(DifficultyTier)
            if f.name not in ("name", "min_level", "max_level")
        }
        config = DifficultyConfig(
            level=level,
            tier_name=tier.name,
            layout_pool=pool,
            layout=layout,
            **params,
        )

        logger.info(
            "Level %d -> %s: nodes=%d colors=%d shuffles=%d layout=%s",
            level,
            tier.name,
            config.node_count,
            config.color_count,
            config.shuffle_moves,
            layout.name if layout else "NULL",
        )
        return config

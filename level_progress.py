"""Level counter for Neuron Graph.

Tracks the player's current and unlocked level across sessions and keeps
the best session score. Every change is written through the SaveManager
when one is attached.
"""

import logging

from save_manager import ProgressData, SaveManager

logger = logging.getLogger(__name__)


class LevelProgress:
    """Current level, unlocked level and best score."""

    def __init__(self, total_levels: int, current_level: int = 1, store: SaveManager | None = None) -> None:
        """Initialize progress, restoring saved state if the store has any.

        Args:
            total_levels: Highest level number; the counter never goes past it.
            current_level: Starting level when nothing is saved.
            store: Optional save manager for persistence.
        """
        self.total_levels = max(1, total_levels)
        self.store = store
        self.current_level = self._clamp(current_level)
        self.unlocked_level = 1
        self.best_score = 0

        saved = store.load() if store is not None else None
        if saved is not None:
            self.current_level = self._clamp(saved.current_level)
            self.unlocked_level = self._clamp(saved.unlocked_level)
            self.best_score = max(0, saved.best_score)
            logger.info("Restored progress: level %d, unlocked %d", self.current_level, self.unlocked_level)

    def _clamp(self, level: int) -> int:
        return max(1, min(level, self.total_levels))

    def _save(self) -> None:
        if self.store is not None:
            self.store.save(ProgressData(self.current_level, self.unlocked_level, self.best_score))

    def next_level(self) -> int:
        """Advance one level, staying at the last level once reached.

        Returns:
            The new current level.
        """
        if self.current_level >= self.total_levels:
            self.current_level = self.total_levels
            logger.info("Reached max level (%d)", self.total_levels)
        else:
            self.current_level += 1

        self.unlock_next_level()
        self._save()
        return self.current_level

    def set_current_level(self, level: int) -> None:
        self.current_level = self._clamp(level)
        self._save()

    def unlock_next_level(self) -> None:
        """Unlock up to the current level."""
        if self.current_level > self.unlocked_level:
            self.unlocked_level = self.current_level
            logger.info("New level unlocked: %d", self.unlocked_level)
            self._save()

    def record_score(self, score: int) -> bool:
        """Keep score if it beats the best one.

        Returns:
            True if score is a new best.
        """
        if score <= self.best_score:
            return False
        self.best_score = score
        self._save()
        return True

    def reset_progress(self) -> None:
        self.current_level = 1
        self.unlocked_level = 1
        self._save()
        logger.info("Progress reset to level 1")

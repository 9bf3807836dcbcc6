"""Save/load manager for Neuron Graph.

Stores level progress between runs. Puzzle state itself is never saved;
a session always starts on a freshly generated puzzle.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class ProgressData:
    """Data structure for saved level progress."""

    current_level: int = 1
    unlocked_level: int = 1
    best_score: int = 0


class SaveManager:
    """Manages saving and loading level progress.

    Progress is stored as a single JSON file in the saves directory and
    overwritten on every save.
    """

    SAVE_VERSION = 1
    SAVE_DIR = "saves"
    SAVE_FILE = "progress.json"

    def __init__(self, base_path: Path | None = None) -> None:
        """Initialize save manager.

        Args:
            base_path: Base directory for saves. Defaults to script directory.
        """
        if base_path is None:
            base_path = Path(__file__).parent
        self.save_dir = base_path / self.SAVE_DIR
        self.save_dir.mkdir(parents=True, exist_ok=True)

    def _get_save_path(self) -> Path:
        return self.save_dir / self.SAVE_FILE

    def save(self, data: ProgressData) -> bool:
        """Save progress to file.

        Args:
            data: Progress to write.

        Returns:
            True if save succeeded, False otherwise.
        """
        save_dict = {
            "version": self.SAVE_VERSION,
            "current_level": data.current_level,
            "unlocked_level": data.unlocked_level,
            "best_score": data.best_score,
        }

        try:
            with open(self._get_save_path(), "w", encoding="utf-8") as f:
                json.dump(save_dict, f, indent=2)
            return True
        except OSError as e:
            logger.error("Failed to save progress: %s", e)
            return False

    def load(self) -> ProgressData | None:
        """Load progress from file.

        Returns:
            ProgressData if load succeeded, None if no save exists or load failed.
        """
        save_path = self._get_save_path()

        if not save_path.exists():
            return None

        try:
            with open(save_path, "r", encoding="utf-8") as f:
                save_dict = json.load(f)

            version = save_dict.get("version", 0)
            if version != self.SAVE_VERSION:
                logger.warning("Save version mismatch: %s != %s", version, self.SAVE_VERSION)
                return None

            return ProgressData(
                current_level=int(save_dict["current_level"]),
                unlocked_level=int(save_dict.get("unlocked_level", 1)),
                best_score=int(save_dict.get("best_score", 0)),
            )
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error("Failed to load progress: %s", e)
            return None

    def has_save(self) -> bool:
        return self._get_save_path().exists()

    def delete_save(self) -> bool:
        """Delete the save file.

        Returns:
            True if deletion succeeded or file didn't exist.
        """
        save_path = self._get_save_path()
        if save_path.exists():
            try:
                save_path.unlink()
                return True
            except OSError as e:
                logger.error("Failed to delete save: %s", e)
                return False
        return True

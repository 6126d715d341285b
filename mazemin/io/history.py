import json
import logging
import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Set

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 100


@dataclass
class GameResult:
    maze_id: str
    moves: int
    hints_used: int
    slices_used: int
    duration_ms: int
    completed_at: float
    stars: int

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        return {
            "mazeId": data["maze_id"],
            "moves": data["moves"],
            "hintsUsed": data["hints_used"],
            "slicesUsed": data["slices_used"],
            "durationMs": data["duration_ms"],
            "completedAt": data["completed_at"],
            "stars": data["stars"],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameResult":
        return cls(
            maze_id=data["mazeId"],
            moves=data["moves"],
            hints_used=data["hintsUsed"],
            slices_used=data["slicesUsed"],
            duration_ms=data["durationMs"],
            completed_at=data["completedAt"],
            stars=data["stars"],
        )


class HistoryStore:
    """
    Play history and played-puzzle ids in one JSON file.
    Gameplay never depends on it; read/write problems are logged and ignored.
    """

    def __init__(self, path, limit: int = HISTORY_LIMIT):
        self.path = path
        self.limit = limit

    def _read(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {"history": [], "played": []}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError, RecursionError) as exc:
            logger.warning("Failed to read history %s: %s", self.path, exc)
            return {"history": [], "played": []}
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed history file %s", self.path)
            return {"history": [], "played": []}
        played = data.get("played") if isinstance(data.get("played"), list) else []
        return {
            "history": data.get("history") if isinstance(data.get("history"), list) else [],
            "played": [p for p in played if isinstance(p, str)],
        }

    def _write(self, data: Dict[str, Any]):
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f)
        except OSError as exc:
            logger.warning("Failed to persist history %s: %s", self.path, exc)

    def load_history(self) -> List[GameResult]:
        results = []
        for item in self._read()["history"]:
            try:
                results.append(GameResult.from_dict(item))
            except (KeyError, TypeError):
                logger.warning("Skipping malformed history entry: %r", item)
        return results

    def record_result(self, result: GameResult):
        data = self._read()
        data["history"] = [result.to_dict()] + data["history"]
        data["history"] = data["history"][:self.limit]
        self._write(data)

    def played_ids(self) -> Set[str]:
        return set(self._read()["played"])

    def mark_played(self, maze_id: str):
        data = self._read()
        if maze_id in data["played"]:
            return
        data["played"].append(maze_id)
        self._write(data)

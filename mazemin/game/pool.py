import logging
import random
from typing import Iterable, List, Optional, Set

from mazemin.core.errors import FormatError
from mazemin.io.payload import PayloadDecoder
from mazemin.io.record import DecodedPuzzle, PuzzleRecord, decode_record

logger = logging.getLogger(__name__)


class PuzzlePool:
    """Decoded puzzles available for play. Records that fail to decode never enter the pool."""

    def __init__(self, puzzles: List[DecodedPuzzle]):
        self.puzzles = puzzles

    def __len__(self):
        return len(self.puzzles)

    @classmethod
    def from_records(cls, records: Iterable[PuzzleRecord],
                     decoder: Optional[PayloadDecoder] = None) -> "PuzzlePool":
        decoder = decoder or PayloadDecoder()
        puzzles = []
        total = 0
        for record in records:
            total += 1
            try:
                puzzles.append(decode_record(record, decoder=decoder))
            except FormatError as exc:
                logger.warning("Excluding puzzle %s: %s", record.record_id, exc)
        logger.info("Pool holds %d/%d puzzles", len(puzzles), total)
        return cls(puzzles)

    def matching(self, skill_tier: str = None, difficulty: str = None) -> List[DecodedPuzzle]:
        return [
            p for p in self.puzzles
            if (skill_tier is None or p.record.skill_tier == skill_tier)
            and (difficulty is None or p.record.difficulty == difficulty)
        ]

    def pick(self, skill_tier: str = None, difficulty: str = None,
             played: Set[str] = None, rng: random.Random = None) -> Optional[DecodedPuzzle]:
        """
        Random puzzle for the requested tier and difficulty, falling back to the
        whole pool when nothing matches. Unplayed puzzles are preferred.
        """
        if not self.puzzles:
            return None
        rng = rng or random.Random()
        played = played or set()

        candidates = self.matching(skill_tier, difficulty) or self.puzzles
        fresh = [p for p in candidates if p.record.record_id not in played]
        return rng.choice(fresh or candidates)

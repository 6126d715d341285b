import unittest
import sys
import os
import random

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from mazemin.core.grid import Grid
from mazemin.algo.registry import create_generator
from mazemin.io.payload import encode_json_payload
from mazemin.io.record import PuzzleRecord, build_record
from mazemin.game.pool import PuzzlePool

def record_for(skill_tier, difficulty, alg="rb", seed=0):
    grid = Grid(5, 5)
    create_generator(alg, grid, seed=seed).run_all()
    return build_record(grid, alg, skill_tier=skill_tier, difficulty=difficulty)

class TestPuzzlePool(unittest.TestCase):
    def setUp(self):
        self.records = [
            record_for("beginner", "easy", "rb"),
            record_for("beginner", "easy", "hk"),
            record_for("expert", "hard", "wil"),
        ]
        self.pool = PuzzlePool.from_records(self.records)

    def test_broken_records_excluded(self):
        broken = PuzzleRecord(v=1, alg="rb", w=5, h=5, g="abc", p="", L=3)
        with self.assertLogs("mazemin.game.pool", level="WARNING"):
            pool = PuzzlePool.from_records(self.records + [broken])
        self.assertEqual(len(pool), 3)

    def test_oversized_expanded_grid_excluded(self):
        # Too short for the legacy nibble fallback as well
        huge = [[2 ** 70] * 61 for _ in range(61)]
        record = PuzzleRecord(v=2, alg="rb", w=30, h=30, g=encode_json_payload(huge),
                              p=encode_json_payload([[1, 1]]), L=0)
        with self.assertLogs("mazemin", level="WARNING"):
            pool = PuzzlePool.from_records([record])
        self.assertEqual(len(pool), 0)

    def test_pick_matching(self):
        rng = random.Random(1)
        for _ in range(20):
            puzzle = self.pool.pick("expert", "hard", rng=rng)
            self.assertEqual(puzzle.record.alg, "wil")

    def test_pick_falls_back_to_whole_pool(self):
        puzzle = self.pool.pick("intermediate", "medium", rng=random.Random(3))
        self.assertIn(puzzle, self.pool.puzzles)

    def test_pick_prefers_unplayed(self):
        played = {"beginner-easy-rb-1"}
        rng = random.Random(5)
        for _ in range(20):
            puzzle = self.pool.pick("beginner", "easy", played=played, rng=rng)
            self.assertEqual(puzzle.record.alg, "hk")

    def test_pick_replays_when_everything_played(self):
        played = {"beginner-easy-rb-1", "beginner-easy-hk-1"}
        puzzle = self.pool.pick("beginner", "easy", played=played, rng=random.Random(0))
        self.assertEqual(puzzle.record.skill_tier, "beginner")

    def test_empty_pool(self):
        self.assertIsNone(PuzzlePool([]).pick("beginner", "easy"))

if __name__ == '__main__':
    unittest.main()

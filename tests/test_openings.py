import unittest
import sys
import os
import random

import numpy as np

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from mazemin.core.errors import DimensionMismatchError, FormatError
from mazemin.core.grid import Grid
from mazemin.core.openings import (
    EAST, NORTH, SOUTH, WEST,
    expanded_to_openings,
    is_symmetric,
    normalize_openings,
    openings_to_expanded,
    walk_is_open,
)
from mazemin.algo.registry import create_generator

class TestNormalize(unittest.TestCase):
    def test_random_masks_become_symmetric(self):
        rng = random.Random(0)
        for _ in range(200):
            w, h = rng.randint(1, 8), rng.randint(1, 8)
            masks = [rng.randrange(16) for _ in range(w * h)]
            normalized = normalize_openings(masks, w, h)
            self.assertEqual(len(normalized), w * h)
            self.assertTrue(is_symmetric(normalized, w, h))

    def test_boundary_bits_stripped(self):
        # 2x1: every bit set everywhere
        self.assertEqual(normalize_openings([15, 15], 2, 1), [EAST, WEST])

    def test_east_and_south_repairs_both_kept(self):
        # Cell 0 is only opened from its neighbors' side
        masks = [0, WEST, NORTH, 0]
        # Goal had no opening and gets West, mirrored on its neighbor
        self.assertEqual(normalize_openings(masks, 2, 2), [EAST | SOUTH, WEST, NORTH | EAST, WEST])

    def test_isolated_start_and_goal_get_openings(self):
        normalized = normalize_openings([0, 0, 0], 3, 1)
        self.assertEqual(normalized, [EAST, WEST | EAST, WEST])

        column = normalize_openings([0, 0], 1, 2)
        self.assertEqual(column, [SOUTH, NORTH])

    def test_short_input_is_padded(self):
        self.assertEqual(len(normalize_openings([EAST], 2, 2)), 4)

class TestExpandedGrid(unittest.TestCase):
    def test_hand_built_corridor(self):
        # 2x1 maze, single passage between the two cells
        expanded = [
            [0, 1, 0, 0, 0],
            [0, 1, 1, 1, 0],
            [0, 0, 0, 1, 0],
        ]
        self.assertEqual(expanded_to_openings(expanded, 2, 1), [EAST, WEST])

    def test_wall_cell_centre_blocks(self):
        expanded = [
            [0, 0, 0, 0, 0],
            [0, 1, 1, 0, 0],
            [0, 0, 0, 0, 0],
        ]
        self.assertEqual(expanded_to_openings(expanded, 2, 1), [0, 0])

    def test_generated_maze_survives_expansion(self):
        grid = Grid(9, 7)
        create_generator("wil", grid, seed=12).run_all()
        openings = grid.openings()

        expanded = openings_to_expanded(openings, 9, 7)
        self.assertEqual(expanded.shape, (15, 19))
        self.assertEqual(expanded[0, 1], 1)   # entrance
        self.assertEqual(expanded[14, 17], 1) # exit

        expected = list(openings)
        expected[0] &= ~NORTH
        expected[-1] &= ~SOUTH
        self.assertEqual(expanded_to_openings(expanded.tolist(), 9, 7), expected)

    def test_numpy_input_accepted(self):
        expanded = np.ones((3, 3), dtype=np.uint8)
        self.assertEqual(expanded_to_openings(expanded, 1, 1), [0])

    def test_dimension_mismatch(self):
        expanded = [[1] * 5 for _ in range(5)]
        with self.assertRaises(DimensionMismatchError) as ctx:
            expanded_to_openings(expanded, 3, 3)
        self.assertEqual((ctx.exception.rows, ctx.exception.cols), (5, 5))

    def test_ragged_grid_rejected(self):
        with self.assertRaises(FormatError):
            expanded_to_openings([[1, 1, 1], [1, 1]], 1, 1)
        with self.assertRaises(FormatError):
            expanded_to_openings([1, 1, 1], 1, 1)

    def test_oversized_values_rejected(self):
        huge = [[2 ** 70] * 5 for _ in range(5)]
        with self.assertRaises(FormatError):
            expanded_to_openings(huge, 2, 2)

class TestWalk(unittest.TestCase):
    def test_walk_is_open(self):
        masks = [EAST, WEST | SOUTH, 0, NORTH]
        self.assertTrue(walk_is_open(masks, 2, 2, [1, 2]))
        self.assertFalse(walk_is_open(masks, 2, 2, [2]))
        self.assertTrue(walk_is_open(masks, 2, 2, []))

if __name__ == '__main__':
    unittest.main()

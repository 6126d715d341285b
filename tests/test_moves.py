import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from mazemin.core.errors import FormatError
from mazemin.core.grid import Grid
from mazemin.algo.registry import GENERATORS, create_generator
from mazemin.algo.solvers import AStar
from mazemin.io.moves import (
    MOVE_EAST, MOVE_NORTH, MOVE_SOUTH, MOVE_WEST,
    coords_from_moves,
    decode_moves,
    encode_path,
    moves_from_coords,
    moves_from_pairs,
    moves_from_text,
    moves_to_text,
    pack_moves,
    unpack_moves,
)
from mazemin.io.payload import encode_json_payload

class TestPackedMoves(unittest.TestCase):
    def test_two_bits_per_move_lowest_first(self):
        self.assertEqual(pack_moves([MOVE_EAST, MOVE_SOUTH]), "CQ==")
        self.assertEqual(unpack_moves("CQ==", 2), [MOVE_EAST, MOVE_SOUTH])
        self.assertEqual(pack_moves([]), "")

    def test_unpack_truncates(self):
        self.assertEqual(unpack_moves("CQ==", 1), [MOVE_EAST])
        self.assertEqual(unpack_moves("CQ==", 0), [])
        # A byte always carries four moves; padding moves are North
        self.assertEqual(unpack_moves("CQ==", 10), [MOVE_EAST, MOVE_SOUTH, MOVE_NORTH, MOVE_NORTH])

    def test_generated_paths_round_trip(self):
        for code in GENERATORS:
            for seed in range(4):
                grid = Grid(11, 8)
                create_generator(code, grid, seed=seed).run_all()
                path = AStar(grid).run_all()
                moves = moves_from_coords(path)

                decoded = decode_moves(pack_moves(moves), len(path) - 1)
                self.assertEqual(decoded, moves, f"{code} seed {seed}")

class TestCompressedPath(unittest.TestCase):
    def test_cell_pairs(self):
        cells = [(0, 0), (1, 0), (1, 1), (0, 1)]
        self.assertEqual(decode_moves(encode_path(cells), 3), [MOVE_EAST, MOVE_SOUTH, MOVE_WEST])

    def test_expanded_units_keep_odd_pairs_only(self):
        # (0,0) -> (1,0) -> (1,1) given as [row, col] centres and slots of the expanded grid
        pairs = [[1, 1], [1, 2], [1, 3], [2, 3], [3, 3]]
        self.assertEqual(decode_moves(encode_json_payload(pairs), 2), [MOVE_EAST, MOVE_SOUTH])

    def test_non_adjacent_steps_skipped(self):
        self.assertEqual(moves_from_pairs([(0, 0), (0, 2), (0, 3)], 3), [MOVE_EAST])

    def test_truncated_to_max_length(self):
        cells = [(x, 0) for x in range(6)]
        self.assertEqual(decode_moves(encode_path(cells), 5), [MOVE_EAST] * 5)
        self.assertEqual(len(moves_from_pairs([(0, c) for c in range(6)], 5)), 5)

    def test_non_pair_json_falls_back_to_legacy(self):
        payload = encode_json_payload({"not": "pairs"})
        # The Base64 bytes themselves are read as packed moves
        self.assertEqual(len(decode_moves(payload, 3)), 3)

class TestCoords(unittest.TestCase):
    def test_coords_round_trip(self):
        moves = [MOVE_SOUTH, MOVE_EAST, MOVE_NORTH, MOVE_EAST]
        cells = coords_from_moves(moves)
        self.assertEqual(cells, [(0, 0), (0, 1), (1, 1), (1, 0), (2, 0)])
        self.assertEqual(moves_from_coords(cells), moves)

    def test_strict_adjacency(self):
        with self.assertRaises(FormatError):
            moves_from_coords([(0, 0), (1, 1)])

    def test_text(self):
        self.assertEqual(moves_to_text([0, 1, 2, 3]), "NESW")
        self.assertEqual(moves_from_text("e s, s e"), [1, 2, 2, 1])
        with self.assertRaises(FormatError):
            moves_from_text("EX")

if __name__ == '__main__':
    unittest.main()

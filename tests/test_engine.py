import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from mazemin.game.engine import first_divergence, hint_segment, hint_start
from mazemin.core.hints import add_hint, create_default_hints, normalize_hint_steps, remove_hint

class TestDivergence(unittest.TestCase):
    def test_prefix_is_on_track(self):
        self.assertEqual(first_divergence([0, 1, 2], [0, 1, 2, 3]), -1)
        self.assertEqual(first_divergence([], [0, 1]), -1)
        self.assertEqual(first_divergence([0, 1], [0, 1]), -1)

    def test_overshoot_diverges_at_reference_end(self):
        self.assertEqual(first_divergence([0, 1, 2, 3], [0, 1, 2]), 3)

    def test_first_mismatch(self):
        self.assertEqual(first_divergence([0, 2], [0, 1, 2]), 1)
        self.assertEqual(first_divergence([3], [0]), 0)

class TestHintSegment(unittest.TestCase):
    def setUp(self):
        self.ref = [i % 4 for i in range(30)]

    def test_full_window(self):
        segment = hint_segment(self.ref, progress=5, divergence=-1, cap=30)
        self.assertEqual(segment, self.ref[5:25])

    def test_short_window(self):
        segment = hint_segment(self.ref, progress=25, divergence=-1, cap=30)
        self.assertEqual(segment, self.ref[25:30])

    def test_short_window_capped_at_ten(self):
        segment = hint_segment(self.ref, progress=12, divergence=-1, cap=30)
        self.assertEqual(segment, self.ref[12:22])

    def test_divergence_moves_start_forward(self):
        self.assertEqual(hint_start(30, progress=3, divergence=8), 8)
        self.assertEqual(hint_start(30, progress=8, divergence=3), 8)
        self.assertEqual(hint_segment(self.ref, 3, 8, 30), self.ref[8:28])

    def test_cap_clips_reference(self):
        self.assertEqual(hint_segment(self.ref, 0, -1, cap=4), self.ref[:4])
        self.assertEqual(hint_segment(self.ref, 0, -1, cap=0), [])

    def test_nothing_left(self):
        self.assertEqual(hint_segment(self.ref, 30, -1, 30), [])
        self.assertEqual(hint_segment(self.ref, 45, -1, 30), [])
        self.assertEqual(hint_segment([], 0, -1, 10), [])

    def test_negative_progress_clamped(self):
        self.assertEqual(hint_start(10, progress=-4, divergence=-1), 0)
        self.assertEqual(hint_start(10, progress=2, divergence=50), 10)

class TestHintCheckpoints(unittest.TestCase):
    def test_default_checkpoints(self):
        self.assertEqual(create_default_hints(0), [])
        self.assertEqual(create_default_hints(7), [7])
        self.assertEqual(create_default_hints(20), [20])
        self.assertEqual(create_default_hints(41), [20, 40, 41])
        self.assertEqual(create_default_hints(60), [20, 40, 60])

    def test_normalize(self):
        self.assertEqual(normalize_hint_steps([5, 3, 5, 0, 11, 2.0, 2.5, True, "4", None], 10), [2, 3, 5])
        self.assertEqual(normalize_hint_steps([1, 2], 0), [])
        self.assertEqual(normalize_hint_steps(None, 5), [])

    def test_add_and_remove(self):
        hints = add_hint([10, 4], 7, 10)
        self.assertEqual(hints, [4, 7, 10])
        self.assertEqual(add_hint(hints, 7, 10), [4, 7, 10])
        self.assertEqual(remove_hint(hints, 4, 10), [7, 10])
        self.assertEqual(remove_hint(hints, 99, 10), [4, 7, 10])
        with self.assertRaises(ValueError):
            add_hint(hints, 11, 10)

if __name__ == '__main__':
    unittest.main()

import sys
import os
import time

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from mazemin.core.grid import Grid
from mazemin.core.complexity import MazeStats
from mazemin.algo.registry import GENERATORS
from mazemin.algo.solvers import AStar
from mazemin.io.record import build_record


def benchmark_size(width: int, height: int):
    print(f"\n--- Benchmarking {width}x{height} ({width * height:,} cells) ---")
    print(f"{'ALGO':<6} | {'GEN (s)':<9} | {'CELLS/S':<12} | {'SOLVE (s)':<9} | {'LEN':<6} | {'DEAD %':<7} | {'EXPORT (s)':<9}")
    print("-" * 78)

    for code, cls in GENERATORS.items():
        grid = Grid(width, height)

        gen_start = time.time()
        cls(grid, seed=42).run_all()
        gen_time = time.time() - gen_start

        solve_start = time.time()
        solver = AStar(grid)
        solver.run_all()
        solve_time = time.time() - solve_start

        stats = MazeStats.calculate_stats(grid)

        export_start = time.time()
        build_record(grid, code, path=solver.path, hints=solver.hints)
        export_time = time.time() - export_start

        speed = (width * height) / gen_time if gen_time > 0 else float("inf")
        print(f"{code:<6} | {gen_time:<9.4f} | {speed:<12,.0f} | {solve_time:<9.4f} | "
              f"{solver.solution_length:<6} | {stats['dead_end_percent']:<7.1f} | {export_time:<9.4f}")


def run_suite():
    sizes = [
        (10, 10),
        (25, 25),
        (50, 50),
        (100, 100),
    ]

    print("Starting Maze Benchmark Suite...")
    for w, h in sizes:
        benchmark_size(w, h)


if __name__ == "__main__":
    run_suite()

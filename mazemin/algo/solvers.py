import heapq
from abc import ABC, abstractmethod
from collections import deque
from typing import Iterator, List, Optional, Tuple

from mazemin.algo.base import StepDriver
from mazemin.core.errors import UnreachableGoalError
from mazemin.core.grid import Grid
from mazemin.core.hints import create_default_hints, normalize_hint_steps


class Solver(ABC):
    def __init__(self, grid: Grid):
        self.grid = grid
        self.path: List[Tuple[int, int]] = []
        self.hints: List[int] = []
        self.visited_count = 0
        self.active: Optional[Tuple[int, int]] = None

    @abstractmethod
    def run(self, start: Tuple[int, int] = None, end: Tuple[int, int] = None) -> Iterator[str]:
        pass

    def run_all(self, start: Tuple[int, int] = None, end: Tuple[int, int] = None) -> List[Tuple[int, int]]:
        for _ in self.run(start, end):
            pass
        return self.path

    def driver(self, start: Tuple[int, int] = None, end: Tuple[int, int] = None) -> StepDriver:
        return StepDriver(self.run(start, end))

    @property
    def solution_length(self) -> int:
        return max(0, len(self.path) - 1)

    def reconstruct_path(self, start_idx: int, end_idx: int):
        # Follow predecessors back from the goal
        path = []
        idx = end_idx
        while idx != -1:
            path.append(self.grid.get_coords(idx))
            if idx == start_idx:
                break
            idx = self.grid.parents[idx]
        path.reverse()
        self.path = path


class BFS(Solver):
    """Plain breadth-first search. Used to cross-check A* and to derive paths for export."""

    def run(self, start: Tuple[int, int] = None, end: Tuple[int, int] = None) -> Iterator[str]:
        grid = self.grid
        start = start or grid.start
        end = end or grid.goal
        grid.reset_solve()
        self.path = []

        start_idx = grid.get_index(*start)
        end_idx = grid.get_index(*end)
        queue = deque([start_idx])
        grid.distance[start_idx] = 0
        grid.cells[start_idx] |= Grid.SOLVER_VISITED
        self.visited_count = 1

        while queue:
            current = queue.popleft()
            if current == end_idx:
                break

            cx, cy = grid.get_coords(current)
            for nx, ny in grid.get_open_neighbors(cx, cy):
                idx = ny * grid.width + nx
                if grid.cells[idx] & Grid.SOLVER_VISITED:
                    continue
                grid.cells[idx] |= Grid.SOLVER_VISITED
                grid.distance[idx] = grid.distance[current] + 1
                grid.parents[idx] = current
                self.visited_count += 1
                queue.append(idx)

            self.active = (cx, cy)
            yield f"Visited: {self.visited_count}"

        # Empty path when the goal was never reached
        if grid.cells[end_idx] & Grid.SOLVER_VISITED:
            self.reconstruct_path(start_idx, end_idx)
        yield "Solved" if self.path else "No path"


class AStar(Solver):
    """
    A* with unit edge weights and a Manhattan heuristic. Among equal
    distance + heuristic scores, the cell that entered the open set first wins.
    Raises UnreachableGoalError when the open set runs dry.
    """

    def heuristic(self, a: Tuple[int, int], b: Tuple[int, int]) -> int:
        return abs(a[0] - b[0]) + abs(a[1] - b[1])

    def run(self, start: Tuple[int, int] = None, end: Tuple[int, int] = None) -> Iterator[str]:
        grid = self.grid
        start = start or grid.start
        end = end or grid.goal
        grid.reset_solve()
        self.path = []
        self.hints = []
        self.visited_count = 0

        start_idx = grid.get_index(*start)
        end_idx = grid.get_index(*end)

        # Priority Queue: (f_score, first_seen, idx). Stale entries are skipped on pop.
        open_set: List[Tuple[int, int, int]] = []
        first_seen = {}

        def push(idx: int, coords: Tuple[int, int]):
            seq = first_seen.setdefault(idx, len(first_seen))
            grid.cells[idx] |= Grid.OPEN_SET
            heapq.heappush(open_set, (grid.distance[idx] + self.heuristic(coords, end), seq, idx))

        grid.distance[start_idx] = 0
        push(start_idx, start)

        found = False
        while open_set:
            f_score, _, current = heapq.heappop(open_set)
            if grid.cells[current] & Grid.SOLVER_VISITED:
                continue
            cx, cy = grid.get_coords(current)
            if f_score != grid.distance[current] + self.heuristic((cx, cy), end):
                continue

            grid.cells[current] &= ~Grid.OPEN_SET
            grid.cells[current] |= Grid.SOLVER_VISITED
            self.visited_count += 1
            self.active = (cx, cy)
            yield f"Visited: {self.visited_count}"

            if current == end_idx:
                found = True
                break

            tentative = grid.distance[current] + 1
            for nx, ny in grid.get_open_neighbors(cx, cy):
                idx = ny * grid.width + nx
                if grid.cells[idx] & Grid.SOLVER_VISITED:
                    continue
                old = grid.distance[idx]
                if old == -1 or tentative < old:
                    grid.distance[idx] = tentative
                    grid.parents[idx] = current
                    push(idx, (nx, ny))

        self.active = None
        if not found:
            raise UnreachableGoalError(start, end)

        self.reconstruct_path(start_idx, end_idx)
        for px, py in self.path:
            grid.cells[py * grid.width + px] |= Grid.PATH
            self.active = (px, py)
            yield "Tracing"

        self.active = None
        length = self.solution_length
        self.hints = normalize_hint_steps(create_default_hints(length), length)
        yield "Solved"

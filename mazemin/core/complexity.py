from collections import deque

from mazemin.core.grid import Grid


class MazeStats:
    @staticmethod
    def popcount_walls(val: int) -> int:
        c = 0
        if val & Grid.NORTH: c += 1
        if val & Grid.EAST: c += 1
        if val & Grid.SOUTH: c += 1
        if val & Grid.WEST: c += 1
        return c

    @staticmethod
    def passage_count(grid: Grid) -> int:
        """Carved passages between in-bound cells (entrance / exit not counted)."""
        count = 0
        for y in range(grid.height):
            for x in range(grid.width):
                if x < grid.width - 1 and not grid.has_wall(x, y, Grid.EAST):
                    count += 1
                if y < grid.height - 1 and not grid.has_wall(x, y, Grid.SOUTH):
                    count += 1
        return count

    @staticmethod
    def reachable_count(grid: Grid, start=(0, 0)) -> int:
        seen = {start}
        queue = deque([start])
        while queue:
            cx, cy = queue.popleft()
            for n in grid.get_open_neighbors(cx, cy):
                if n not in seen:
                    seen.add(n)
                    queue.append(n)
        return len(seen)

    @staticmethod
    def is_spanning_tree(grid: Grid) -> bool:
        # W*H-1 edges and connected => no cycles
        total = grid.width * grid.height
        return (MazeStats.passage_count(grid) == total - 1
                and MazeStats.reachable_count(grid) == total)

    @staticmethod
    def calculate_stats(grid: Grid):
        dead_ends = 0
        intersections = 0 # 0, 1 walls
        corridors = 0 # 2 walls

        for i in range(grid.width * grid.height):
            walls = MazeStats.popcount_walls(grid.cells[i])
            if walls == 3: dead_ends += 1
            elif walls == 2: corridors += 1
            elif walls <= 1: intersections += 1

        total = grid.width * grid.height
        return {
            "passages": MazeStats.passage_count(grid),
            "dead_ends": dead_ends,
            "corridors": corridors,
            "intersections": intersections,
            "dead_end_percent": (dead_ends / total) * 100 if total > 0 else 0
        }

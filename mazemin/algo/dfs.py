from typing import Iterator, List, Tuple

from mazemin.algo.base import Generator


class RecursiveBacktracker(Generator):
    code = "rb"
    label = "Recursive Backtracker"

    def carve(self) -> Iterator[str]:
        # Start at (0,0)
        start_x, start_y = self.grid.start
        self.grid.set_visited(start_x, start_y)

        # Stack of (x, y)
        stack: List[Tuple[int, int]] = [(start_x, start_y)]
        self.active = (start_x, start_y)
        self.frontier = [(start_x, start_y)]
        yield "Start"

        while stack:
            cx, cy = stack[-1]
            self.active = (cx, cy)

            neighbors = self.unvisited_neighbors(cx, cy)
            if neighbors:
                nx, ny, dir_bit = self.rng.choice(neighbors)

                self.grid.carve_path(cx, cy, dir_bit)
                self.grid.set_visited(nx, ny)

                stack.append((nx, ny))
                self.frontier = [(cx, cy), (nx, ny)]
                yield f"Carving... Stack: {len(stack)}"
            else:
                # Backtrack
                stack.pop()
                self.frontier = [stack[-1]] if stack else []
                yield f"Backtracking... Stack: {len(stack)}"

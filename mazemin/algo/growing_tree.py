from typing import Iterator, List, Tuple

from mazemin.algo.base import Generator
from mazemin.core.grid import Grid


class GrowingTreeEastBiased(Generator):
    """
    Growing tree that mostly extends the newest cell and carves East
    whenever it can, which gives long horizontal corridors.
    """
    code = "gtR"
    label = "Growing Tree (Right Wall)"

    NEWEST_BIAS = 0.75

    def carve(self) -> Iterator[str]:
        start_x, start_y = self.random_cell()
        self.grid.set_visited(start_x, start_y)

        cells: List[Tuple[int, int]] = [(start_x, start_y)]
        self.active = (start_x, start_y)
        self.frontier = [(start_x, start_y)]
        yield "Start"

        while cells:
            if self.rng.random() < self.NEWEST_BIAS:
                index = len(cells) - 1
            else:
                index = self.rng.randrange(len(cells))
            cx, cy = cells[index]
            self.active = (cx, cy)

            neighbors = self.unvisited_neighbors(cx, cy)
            if neighbors:
                east = [n for n in neighbors if n[2] == Grid.EAST]
                if east:
                    neighbors = east
                nx, ny, dir_bit = self.rng.choice(neighbors)

                self.grid.carve_path(cx, cy, dir_bit)
                self.grid.set_visited(nx, ny)
                cells.append((nx, ny))
                self.frontier = [(cx, cy), (nx, ny)]
                yield f"Cells: {len(cells)}"
            else:
                cells.pop(index)
                self.frontier = [cells[-1]] if cells else []
                yield f"Cells: {len(cells)}"

from typing import Iterator, List, Tuple

from mazemin.algo.base import Generator
from mazemin.core.grid import Grid


class SidewinderBidirectional(Generator):
    """
    Sidewinder whose runs alternate direction by row: even rows run East,
    odd rows run West. Each closed run links one of its cells to the row above.
    """
    code = "swB"
    label = "Sidewinder (Bidirectional)"

    CLOSE_PROBABILITY = 1 / 3

    def carve(self) -> Iterator[str]:
        grid = self.grid

        # First row is one unbroken corridor
        grid.set_visited(0, 0)
        self.active = (0, 0)
        self.frontier = [(0, 0)]
        yield "Start"
        for x in range(1, grid.width):
            grid.set_visited(x, 0)
            grid.carve_path(x - 1, 0, Grid.EAST)
            self.active = (x, 0)
            self.frontier = [(x - 1, 0), (x, 0)]
            yield "Top row"

        for y in range(1, grid.height):
            eastward = y % 2 == 0
            if eastward:
                xs = range(grid.width)
                forward, boundary = Grid.EAST, grid.width - 1
            else:
                xs = range(grid.width - 1, -1, -1)
                forward, boundary = Grid.WEST, 0

            run: List[Tuple[int, int]] = []
            for x in xs:
                grid.set_visited(x, y)
                run.append((x, y))
                self.active = (x, y)
                self.frontier = list(run)

                close_out = x == boundary or self.rng.random() < self.CLOSE_PROBABILITY
                if not close_out:
                    grid.carve_path(x, y, forward)
                else:
                    rx, ry = self.rng.choice(run)
                    grid.carve_path(rx, ry, Grid.NORTH)
                    run = []
                yield f"Row {y}"

from typing import Iterator, Optional, Tuple

from mazemin.algo.base import Generator


class HuntAndKill(Generator):
    code = "hk"
    label = "Hunt and Kill"

    def carve(self) -> Iterator[str]:
        cx, cy = self.random_cell()
        self.grid.set_visited(cx, cy)
        self.active = (cx, cy)
        self.frontier = [(cx, cy)]
        yield "Start"

        while True:
            neighbors = self.unvisited_neighbors(cx, cy)
            if neighbors:
                # Kill: random walk into unvisited territory
                nx, ny, dir_bit = self.rng.choice(neighbors)
                self.grid.carve_path(cx, cy, dir_bit)
                self.grid.set_visited(nx, ny)
                self.frontier = [(cx, cy), (nx, ny)]
                cx, cy = nx, ny
                self.active = (cx, cy)
                yield "Walking"
                continue

            found = self.hunt()
            if found is None:
                break
            cx, cy = found
            self.active = (cx, cy)
            yield "Hunted"

    def hunt(self) -> Optional[Tuple[int, int]]:
        """
        Row-major scan for the first unvisited cell touching the visited region;
        connects it to one of its visited neighbors.
        """
        for y in range(self.grid.height):
            for x in range(self.grid.width):
                if self.grid.is_visited(x, y):
                    continue
                visited = self.visited_neighbors(x, y)
                if visited:
                    nx, ny, dir_bit = self.rng.choice(visited)
                    self.grid.carve_path(x, y, dir_bit)
                    self.grid.set_visited(x, y)
                    self.frontier = [(x, y), (nx, ny)]
                    return x, y
        return None

from typing import Dict, Iterator, List, Tuple

from mazemin.algo.base import Generator


class WilsonsAlgorithm(Generator):
    """
    Loop-erased random walks. Each walk starts from a random unvisited cell
    and wanders until it hits the generated tree; any loop it closes on
    itself is erased on the spot, and the surviving walk is carved in.
    """
    code = "wil"
    label = "Wilson's Algorithm"

    def carve(self) -> Iterator[str]:
        grid = self.grid

        # Unvisited set as list + position map: O(1) removal, seedable choice
        unvisited: List[int] = list(range(grid.width * grid.height))
        position: Dict[int, int] = {idx: i for i, idx in enumerate(unvisited)}

        def discard(idx: int):
            pos = position.pop(idx, None)
            if pos is None:
                return
            last = unvisited.pop()
            if last != idx:
                unvisited[pos] = last
                position[last] = pos

        root_x, root_y = self.random_cell()
        grid.set_visited(root_x, root_y)
        discard(grid.get_index(root_x, root_y))
        self.active = (root_x, root_y)
        self.frontier = [(root_x, root_y)]
        yield "Root"

        while unvisited:
            cx, cy = grid.get_coords(self.rng.choice(unvisited))
            walk: List[Tuple[int, int]] = [(cx, cy)]
            in_walk: Dict[Tuple[int, int], int] = {(cx, cy): 0}

            while not grid.is_visited(cx, cy):
                nx, ny, _ = self.rng.choice(list(grid.get_neighbors(cx, cy)))
                seen_at = in_walk.get((nx, ny))
                if seen_at is not None:
                    # Erase the loop back to where the walk first touched this cell
                    for cell in walk[seen_at + 1:]:
                        del in_walk[cell]
                    del walk[seen_at + 1:]
                else:
                    walk.append((nx, ny))
                    in_walk[(nx, ny)] = len(walk) - 1
                cx, cy = nx, ny
                self.active = (cx, cy)
                self.frontier = list(walk)
                yield f"Walking: {len(walk)}"

            first_x, first_y = walk[0]
            grid.set_visited(first_x, first_y)
            discard(grid.get_index(first_x, first_y))
            for (x1, y1), (x2, y2) in zip(walk, walk[1:]):
                grid.carve_between(x1, y1, x2, y2)
                grid.set_visited(x2, y2)
                discard(grid.get_index(x2, y2))
                self.active = (x2, y2)
                self.frontier = [(x1, y1), (x2, y2)]
                yield f"Unvisited: {len(unvisited)}"

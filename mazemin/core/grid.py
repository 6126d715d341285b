from array import array
from typing import Iterator, List, Tuple

class Grid:
    """
    Authoring-side maze arena. Every cell is an integer index (y * width + x)
    into parallel arrays, so walls, generation order, solve distance and
    predecessor links never hold references to other cells.
    """
    # Bitmask Constants (wall present when set)
    NORTH = 0b00000001
    EAST  = 0b00000010
    SOUTH = 0b00000100
    WEST  = 0b00001000

    # Flags
    VISITED        = 0b00010000 # Generated
    PATH           = 0b00100000
    SOLVER_VISITED = 0b01000000
    OPEN_SET       = 0b10000000

    # All walls present by default (N|E|S|W) = 15
    ALL_WALLS = NORTH | EAST | SOUTH | WEST
    SOLVE_FLAGS = PATH | SOLVER_VISITED | OPEN_SET

    # Index in this tuple is the move code (0=N, 1=E, 2=S, 3=W)
    DIRECTIONS = (NORTH, EAST, SOUTH, WEST)

    # Direction Helpers
    DX = {NORTH: 0, SOUTH: 0, EAST: 1, WEST: -1}
    DY = {NORTH: -1, SOUTH: 1, EAST: 0, WEST: 0}
    OPPOSITE = {NORTH: SOUTH, SOUTH: NORTH, EAST: WEST, WEST: EAST}

    __slots__ = ('width', 'height', 'cells', 'order', 'distance', 'parents', 'max_order')

    def __init__(self, width: int, height: int):
        if width < 1 or height < 1:
            raise ValueError(f"Grid must be at least 1x1, got {width}x{height}")
        self.width = width
        self.height = height
        self.reset()

    def reset(self):
        size = self.width * self.height
        # 'B' (unsigned char) -> 1 byte per cell
        self.cells = array('B', [self.ALL_WALLS] * size)
        # -1 = not generated yet
        self.order = array('i', [-1] * size)
        # -1 = infinity / no predecessor
        self.distance = array('i', [-1] * size)
        self.parents = array('i', [-1] * size)
        self.max_order = 0

    @property
    def start(self) -> Tuple[int, int]:
        return (0, 0)

    @property
    def goal(self) -> Tuple[int, int]:
        return (self.width - 1, self.height - 1)

    def get_index(self, x: int, y: int) -> int:
        if 0 <= x < self.width and 0 <= y < self.height:
            return y * self.width + x
        raise IndexError(f"Coordinate ({x}, {y}) out of bounds")

    def get_coords(self, idx: int) -> Tuple[int, int]:
        return idx % self.width, idx // self.width

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def carve_path(self, x1: int, y1: int, dir_bit: int):
        """
        Removes the wall between current cell (x,y) and the neighbor in 'dir_bit'.
        Also removes the OPPOSITE wall from the neighbor.
        """
        x2 = x1 + self.DX[dir_bit]
        y2 = y1 + self.DY[dir_bit]

        if not self.in_bounds(x2, y2):
            return # Cannot carve into void

        # Remove wall from cell 1
        self.cells[y1 * self.width + x1] &= ~dir_bit
        # Remove opposite wall from cell 2
        self.cells[y2 * self.width + x2] &= ~self.OPPOSITE[dir_bit]

    def carve_between(self, x1: int, y1: int, x2: int, y2: int):
        dir_bit = self.direction_to(x1, y1, x2, y2)
        if dir_bit is None:
            raise ValueError(f"Cells ({x1}, {y1}) and ({x2}, {y2}) are not adjacent")
        self.carve_path(x1, y1, dir_bit)

    def direction_to(self, x1: int, y1: int, x2: int, y2: int):
        dx, dy = x2 - x1, y2 - y1
        for dir_bit in self.DIRECTIONS:
            if self.DX[dir_bit] == dx and self.DY[dir_bit] == dy:
                return dir_bit
        return None

    def open_boundary(self, x: int, y: int, dir_bit: int):
        # Entrance / exit openings point outside the grid, so there is no neighbor
        self.cells[self.get_index(x, y)] &= ~dir_bit

    def has_wall(self, x: int, y: int, dir_bit: int) -> bool:
        return (self.cells[y * self.width + x] & dir_bit) != 0

    def set_visited(self, x: int, y: int, visited: bool = True):
        idx = y * self.width + x
        if visited:
            if not (self.cells[idx] & self.VISITED):
                self.cells[idx] |= self.VISITED
                self.order[idx] = self.max_order
                self.max_order += 1
        else:
            self.cells[idx] &= ~self.VISITED
            self.order[idx] = -1

    def is_visited(self, x: int, y: int) -> bool:
        return (self.cells[y * self.width + x] & self.VISITED) != 0

    def get_neighbors(self, x: int, y: int) -> Iterator[Tuple[int, int, int]]:
        """
        Yields (nx, ny, direction_to_neighbor) for all valid grid neighbors,
        in N, E, S, W order. Does NOT check walls (that's for pathfinding).
        """
        if y > 0:
            yield (x, y - 1, self.NORTH)
        if x < self.width - 1:
            yield (x + 1, y, self.EAST)
        if y < self.height - 1:
            yield (x, y + 1, self.SOUTH)
        if x > 0:
            yield (x - 1, y, self.WEST)

    def get_open_neighbors(self, x: int, y: int) -> Iterator[Tuple[int, int]]:
        """
        Yields (nx, ny) for neighbors that are NOT blocked by a wall.
        """
        val = self.cells[y * self.width + x]

        if not (val & self.NORTH) and y > 0:
            yield (x, y - 1)
        if not (val & self.EAST) and x < self.width - 1:
            yield (x + 1, y)
        if not (val & self.SOUTH) and y < self.height - 1:
            yield (x, y + 1)
        if not (val & self.WEST) and x > 0:
            yield (x - 1, y)

    def open_entrances(self):
        sx, sy = self.start
        gx, gy = self.goal
        self.open_boundary(sx, sy, self.NORTH)
        self.set_visited(sx, sy)
        self.open_boundary(gx, gy, self.SOUTH)
        self.set_visited(gx, gy)

    def openings(self) -> List[int]:
        """Per-cell opening masks (bit set = passage open), the wire-format view."""
        return [(~val) & self.ALL_WALLS for val in self.cells]

    def reset_solve(self):
        size = self.width * self.height
        for idx in range(size):
            self.cells[idx] &= ~self.SOLVE_FLAGS
        self.distance = array('i', [-1] * size)
        self.parents = array('i', [-1] * size)

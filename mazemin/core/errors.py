class MazeError(Exception):
    """Base class for everything the maze core raises on purpose."""


class FormatError(MazeError, ValueError):
    """Malformed Base64, JSON or packed payload."""


class DimensionMismatchError(FormatError):
    """Expanded grid does not measure (2h+1) x (2w+1)."""

    def __init__(self, rows: int, cols: int, width: int, height: int):
        super().__init__(
            f"Expanded grid is {rows}x{cols}, expected {2 * height + 1}x{2 * width + 1}"
        )
        self.rows = rows
        self.cols = cols
        self.width = width
        self.height = height


class RecordError(FormatError):
    """Puzzle record is missing a field or carries an out-of-range value."""


class UnreachableGoalError(MazeError, RuntimeError):
    def __init__(self, start, goal):
        super().__init__(f"No path found from {start} to {goal}")
        self.start = start
        self.goal = goal


class InvalidMoveError(MazeError, ValueError):
    def __init__(self, cell, direction: int):
        super().__init__(f"Move {direction} from {cell} is blocked")
        self.cell = cell
        self.direction = direction

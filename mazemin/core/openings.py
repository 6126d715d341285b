from typing import List, Sequence

import numpy as np

from mazemin.core.errors import DimensionMismatchError, FormatError

# Opening masks: bit set = passage open toward that neighbor
NORTH = 1
EAST = 2
SOUTH = 4
WEST = 8
ALL_OPEN = NORTH | EAST | SOUTH | WEST

# Index is the move code (0=N, 1=E, 2=S, 3=W)
DIRECTION_MASKS = (NORTH, EAST, SOUTH, WEST)
DX = (0, 1, 0, -1)
DY = (-1, 0, 1, 0)


def normalize_openings(openings: Sequence[int], width: int, height: int) -> List[int]:
    """
    Makes a mask array safe for gameplay:
      1. bits pointing outside the grid are stripped
      2. every adjacent pair agrees (a set bit on either side is mirrored)
      3. the start cell gets an opening if it has none (East, else South)
      4. the goal cell likewise (West, else North)
    """
    size = width * height
    masks = [int(m) & ALL_OPEN for m in openings[:size]]
    masks.extend([0] * (size - len(masks)))

    for y in range(height):
        for x in range(width):
            idx = y * width + x
            mask = masks[idx]
            if x == 0:
                mask &= ~WEST
            if x == width - 1:
                mask &= ~EAST
            if y == 0:
                mask &= ~NORTH
            if y == height - 1:
                mask &= ~SOUTH

            # east-west
            if x < width - 1:
                right = idx + 1
                if mask & EAST:
                    masks[right] |= WEST
                elif masks[right] & WEST:
                    mask |= EAST
            # north-south
            if y < height - 1:
                down = idx + width
                if mask & SOUTH:
                    masks[down] |= NORTH
                elif masks[down] & NORTH:
                    mask |= SOUTH

            masks[idx] = mask

    start = 0
    if masks[start] == 0:
        if width > 1:
            masks[start] |= EAST
            masks[start + 1] |= WEST
        elif height > 1:
            masks[start] |= SOUTH
            masks[start + width] |= NORTH

    goal = size - 1
    if masks[goal] == 0:
        if width > 1:
            masks[goal] |= WEST
            masks[goal - 1] |= EAST
        elif height > 1:
            masks[goal] |= NORTH
            masks[goal - width] |= SOUTH

    return masks


def _as_expanded_array(expanded, width: int, height: int) -> np.ndarray:
    try:
        grid = np.array(expanded, dtype=np.int64)
    except (ValueError, TypeError, OverflowError) as exc:
        raise FormatError(f"Expanded grid is not a rectangular numeric array: {exc}") from exc

    if grid.ndim != 2:
        raise FormatError(f"Expanded grid must be 2D, got {grid.ndim}D")
    rows, cols = grid.shape
    if rows != 2 * height + 1 or cols != 2 * width + 1:
        raise DimensionMismatchError(rows, cols, width, height)
    return grid != 0


def expanded_to_openings(expanded, width: int, height: int) -> List[int]:
    """
    Converts a (2h+1) x (2w+1) passable/wall grid into per-cell masks.
    Cell (x, y) sits at expanded (2y+1, 2x+1). A direction is open when the
    slot next to the cell and the cell centre beyond it are both passable.
    """
    grid = _as_expanded_array(expanded, width, height)

    centers = grid[1::2, 1::2]
    # Slots between vertically / horizontally adjacent cells
    between_rows = grid[2:-1:2, 1::2]
    between_cols = grid[1::2, 2:-1:2]

    north = np.zeros((height, width), dtype=bool)
    south = np.zeros((height, width), dtype=bool)
    east = np.zeros((height, width), dtype=bool)
    west = np.zeros((height, width), dtype=bool)

    north[1:, :] = between_rows & centers[:-1, :]
    south[:-1, :] = between_rows & centers[1:, :]
    east[:, :-1] = between_cols & centers[:, 1:]
    west[:, 1:] = between_cols & centers[:, :-1]

    masks = (north * NORTH) | (east * EAST) | (south * SOUTH) | (west * WEST)
    masks = np.where(centers, masks, 0)
    return [int(m) for m in masks.ravel()]


def openings_to_expanded(openings: Sequence[int], width: int, height: int) -> np.ndarray:
    """Inverse of expanded_to_openings; also marks the entrance / exit slots."""
    masks = np.array(openings[:width * height], dtype=np.int64).reshape(height, width)
    grid = np.zeros((2 * height + 1, 2 * width + 1), dtype=np.uint8)

    grid[1::2, 1::2] = 1
    if width > 1:
        open_ew = ((masks[:, :-1] & EAST) != 0) | ((masks[:, 1:] & WEST) != 0)
        grid[1::2, 2:-1:2] = open_ew
    if height > 1:
        open_ns = ((masks[:-1, :] & SOUTH) != 0) | ((masks[1:, :] & NORTH) != 0)
        grid[2:-1:2, 1::2] = open_ns

    if masks[0, 0] & NORTH:
        grid[0, 1] = 1
    if masks[height - 1, width - 1] & SOUTH:
        grid[2 * height, 2 * width - 1] = 1
    return grid


def is_symmetric(openings: Sequence[int], width: int, height: int) -> bool:
    for y in range(height):
        for x in range(width):
            mask = openings[y * width + x]
            if x < width - 1 and bool(mask & EAST) != bool(openings[y * width + x + 1] & WEST):
                return False
            if y < height - 1 and bool(mask & SOUTH) != bool(openings[(y + 1) * width + x] & NORTH):
                return False
    return True


def walk_is_open(openings: Sequence[int], width: int, height: int, moves: Sequence[int],
                 start=(0, 0)) -> bool:
    """True when every move leaves through an opening and stays inside the grid."""
    x, y = start
    for move in moves:
        if not openings[y * width + x] & DIRECTION_MASKS[move]:
            return False
        x, y = x + DX[move], y + DY[move]
        if not (0 <= x < width and 0 <= y < height):
            return False
    return True

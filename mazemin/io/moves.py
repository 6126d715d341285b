from typing import List, Optional, Sequence, Tuple

from mazemin.core.errors import FormatError
from mazemin.core.openings import DX, DY
from mazemin.io.base64_codec import decode_base64, encode_base64
from mazemin.io.payload import PayloadDecoder, encode_json_payload

# Move codes
MOVE_NORTH = 0
MOVE_EAST = 1
MOVE_SOUTH = 2
MOVE_WEST = 3

MOVE_LETTERS = "NESW"

# (d_row, d_col) -> move code
_ROW_COL_DELTAS = {(-1, 0): MOVE_NORTH, (0, 1): MOVE_EAST, (1, 0): MOVE_SOUTH, (0, -1): MOVE_WEST}


def _coerce_pairs(parsed) -> Optional[List[Tuple[int, int]]]:
    pairs = []
    for item in parsed:
        if not isinstance(item, (list, tuple)) or len(item) < 2:
            return None
        r, c = item[0], item[1]
        if not isinstance(r, int) or not isinstance(c, int) or isinstance(r, bool) or isinstance(c, bool):
            return None
        pairs.append((r, c))
    return pairs


def moves_from_pairs(pairs: Sequence[Tuple[int, int]], max_length: int) -> List[int]:
    """
    [row, col] coordinates -> move codes. Coordinates larger than max_length
    are taken to be expanded-grid units: odd/odd pairs map back to cells and
    everything else (wall slots) is dropped. Non-adjacent steps emit nothing.
    """
    if not pairs:
        return []
    max_r = max(r for r, _ in pairs)
    max_c = max(c for _, c in pairs)
    if max_r > max_length or max_c > max_length:
        pairs = [((r - 1) // 2, (c - 1) // 2) for r, c in pairs if r % 2 == 1 and c % 2 == 1]

    moves: List[int] = []
    for (r1, c1), (r2, c2) in zip(pairs, pairs[1:]):
        if len(moves) >= max_length:
            break
        move = _ROW_COL_DELTAS.get((r2 - r1, c2 - c1))
        if move is not None:
            moves.append(move)
    return moves


def decode_moves(payload: str, max_length: int,
                 decoder: Optional[PayloadDecoder] = None) -> List[int]:
    """
    Path payload -> at most max_length move codes.

    Preferred: compressed JSON array of [row, col] pairs.
    Fallback: legacy 2-bit packed moves.
    """
    decoder = decoder or PayloadDecoder()
    parsed = decoder.try_decode(payload)

    if isinstance(parsed, list) and parsed:
        pairs = _coerce_pairs(parsed)
        if pairs is not None:
            return moves_from_pairs(pairs, max_length)

    return unpack_moves(payload, max_length)


def unpack_moves(payload: str, max_length: int) -> List[int]:
    # Four moves per byte, lowest bits first
    moves: List[int] = []
    if max_length <= 0:
        return moves
    for byte in decode_base64(payload):
        for shift in (0, 2, 4, 6):
            moves.append((byte >> shift) & 0x03)
            if len(moves) >= max_length:
                return moves
    return moves


def pack_moves(moves: Sequence[int]) -> str:
    if not moves:
        return ""
    packed = bytearray((len(moves) + 3) // 4)
    for index, move in enumerate(moves):
        packed[index // 4] |= (move & 0x03) << ((index % 4) * 2)
    return encode_base64(bytes(packed))


def moves_from_coords(cells: Sequence[Tuple[int, int]]) -> List[int]:
    """(x, y) cells of a walked path -> move codes. Every step must be adjacent."""
    moves = []
    for (x1, y1), (x2, y2) in zip(cells, cells[1:]):
        move = _ROW_COL_DELTAS.get((y2 - y1, x2 - x1))
        if move is None:
            raise FormatError(f"Invalid path coordinates: ({x1}, {y1}) -> ({x2}, {y2}) is not adjacent")
        moves.append(move)
    return moves


def coords_from_moves(moves: Sequence[int], start: Tuple[int, int] = (0, 0)) -> List[Tuple[int, int]]:
    x, y = start
    cells = [(x, y)]
    for move in moves:
        x += DX[move]
        y += DY[move]
        cells.append((x, y))
    return cells


def encode_path(cells: Sequence[Tuple[int, int]], compress: bool = True) -> str:
    """Authoring side: (x, y) cells -> compressed JSON [row, col] pairs."""
    return encode_json_payload([[y, x] for x, y in cells], compress=compress)


def moves_to_text(moves: Sequence[int]) -> str:
    return "".join(MOVE_LETTERS[m] for m in moves)


def moves_from_text(text: str) -> List[int]:
    moves = []
    for ch in text.upper():
        if ch.isspace() or ch == ",":
            continue
        if ch not in MOVE_LETTERS:
            raise FormatError(f"Unknown move letter {ch!r}, expected one of {MOVE_LETTERS}")
        moves.append(MOVE_LETTERS.index(ch))
    return moves

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from mazemin.algo.solvers import BFS
from mazemin.core.errors import FormatError, RecordError, UnreachableGoalError
from mazemin.core.grid import Grid
from mazemin.core.hints import create_default_hints, normalize_hint_steps
from mazemin.io.grid_codec import decode_openings, encode_openings, pack_openings
from mazemin.io.moves import (
    coords_from_moves,
    decode_moves,
    encode_path,
    moves_from_coords,
    pack_moves,
)
from mazemin.io.payload import PayloadDecoder

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1
SKILL_TIERS = ("beginner", "intermediate", "expert")
DIFFICULTIES = ("easy", "medium", "hard")
GRID_FORMATS = ("compressed", "legacy")

BUNDLED_FEED = Path(__file__).resolve().parent.parent / "data" / "puzzles.jsonl"

_REQUIRED = ("v", "alg", "w", "h", "g", "p", "L")


def _int_field(data: Dict[str, Any], key: str, minimum: int) -> int:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise RecordError(f"Field {key!r} must be an integer, got {value!r}")
    if value < minimum:
        raise RecordError(f"Field {key!r} must be >= {minimum}, got {value}")
    return value


@dataclass
class PuzzleRecord:
    v: int
    alg: str
    w: int
    h: int
    g: str
    p: str
    L: int
    hints: List[int] = field(default_factory=list)
    skill_tier: str = "beginner"
    difficulty: str = "easy"
    # Unknown keys (e.g. an "id") survive a load/save round trip
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def record_id(self) -> str:
        return f"{self.skill_tier}-{self.difficulty}-{self.alg}-{self.v}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PuzzleRecord":
        if not isinstance(data, dict):
            raise RecordError(f"Puzzle record must be a JSON object, got {type(data).__name__}")
        missing = [key for key in _REQUIRED if key not in data]
        if missing:
            raise RecordError(f"Puzzle record missing fields: {', '.join(missing)}")

        for key in ("alg", "g", "p"):
            if not isinstance(data[key], str):
                raise RecordError(f"Field {key!r} must be a string")

        skill_tier = data.get("skillTier", "beginner")
        if skill_tier not in SKILL_TIERS:
            raise RecordError(f"Unknown skill tier {skill_tier!r}")
        difficulty = data.get("difficulty", "easy")
        if difficulty not in DIFFICULTIES:
            raise RecordError(f"Unknown difficulty {difficulty!r}")

        hints = data.get("hints") or []
        if not isinstance(hints, list):
            raise RecordError("Field 'hints' must be a list")
        length = _int_field(data, "L", 0)

        known = set(_REQUIRED) | {"hints", "skillTier", "difficulty"}
        return cls(
            v=_int_field(data, "v", 0),
            alg=data["alg"],
            w=_int_field(data, "w", 1),
            h=_int_field(data, "h", 1),
            g=data["g"],
            p=data["p"],
            L=length,
            hints=normalize_hint_steps(hints, length),
            skill_tier=skill_tier,
            difficulty=difficulty,
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "v": self.v,
            "alg": self.alg,
            "w": self.w,
            "h": self.h,
            "g": self.g,
            "p": self.p,
            "L": self.L,
            "hints": list(self.hints),
            "skillTier": self.skill_tier,
            "difficulty": self.difficulty,
        }
        data.update(self.extra)
        return data

    def default_filename(self) -> str:
        return f"maze_{self.alg}_{self.w}x{self.h}_L{self.L}.json"


@dataclass
class DecodedPuzzle:
    record: PuzzleRecord
    openings: List[int]
    moves: List[int]

    @property
    def width(self) -> int:
        return self.record.w

    @property
    def height(self) -> int:
        return self.record.h

    @property
    def goal(self) -> Tuple[int, int]:
        return (self.record.w - 1, self.record.h - 1)

    def solution_cells(self) -> List[Tuple[int, int]]:
        return coords_from_moves(self.moves)


def decode_record(record: PuzzleRecord, decoder: Optional[PayloadDecoder] = None) -> DecodedPuzzle:
    decoder = decoder or PayloadDecoder()
    openings = decode_openings(record.g, record.w, record.h, decoder=decoder)
    moves = decode_moves(record.p, record.L, decoder=decoder)
    return DecodedPuzzle(record, openings, moves)


def split_json_objects(text: str) -> List[str]:
    """
    Splits a feed into top-level {...} objects. Handles one object per line
    as well as pretty-printed multi-line objects; braces inside strings are ignored.
    """
    objects = []
    depth = 0
    in_string = False
    escape = False
    start = -1
    for i, ch in enumerate(text):
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == "{":
            if depth == 0:
                start = i
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                objects.append(text[start:i + 1])
                start = -1
    return objects


def parse_feed(text: str, source: str = "<feed>") -> List[PuzzleRecord]:
    objects = split_json_objects(text)
    records = []
    for n, chunk in enumerate(objects, start=1):
        try:
            records.append(PuzzleRecord.from_dict(json.loads(chunk)))
        except (ValueError, RecordError) as exc:
            logger.warning("Skipping object %d from %s: %s", n, source, exc)
    logger.info("Loaded %d/%d puzzles from %s", len(records), len(objects), source)
    return records


def load_feed(path, fallback=BUNDLED_FEED) -> List[PuzzleRecord]:
    """Reads a feed file; an unreadable or empty primary falls back to `fallback`."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            records = parse_feed(f.read(), source=str(path))
    except OSError as exc:
        logger.warning("Failed to read puzzle feed %s: %s", path, exc)
        records = []

    if not records and fallback is not None and str(fallback) != str(path):
        logger.warning("Falling back to puzzle feed %s", fallback)
        return load_feed(fallback, fallback=None)
    return records


def load_record(path) -> PuzzleRecord:
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except ValueError as exc:
            raise FormatError(f"{path} is not JSON: {exc}") from exc
    return PuzzleRecord.from_dict(data)


def save_record(record: PuzzleRecord, path) -> str:
    """Writes a single-record JSON file. A directory path gets the default file name."""
    if os.path.isdir(path):
        path = os.path.join(path, record.default_filename())
    with open(path, "w", encoding="utf-8") as f:
        json.dump(record.to_dict(), f, separators=(",", ":"))
    return str(path)


def append_to_feed(record: PuzzleRecord, path):
    with open(path, "a", encoding="utf-8") as f:
        f.write(json.dumps(record.to_dict(), separators=(",", ":")))
        f.write("\n")


def build_record(grid: Grid, alg: str, path: Sequence[Tuple[int, int]] = None,
                 hints: Sequence[int] = None, skill_tier: str = "beginner",
                 difficulty: str = "easy", fmt: str = "compressed") -> PuzzleRecord:
    """
    Authoring export of a generated (and ideally solved) maze.
    Without a solved path the route is derived by BFS.
    """
    if fmt not in GRID_FORMATS:
        raise ValueError(f"Unknown format {fmt!r}, expected one of {GRID_FORMATS}")
    if skill_tier not in SKILL_TIERS:
        raise ValueError(f"Unknown skill tier {skill_tier!r}")
    if difficulty not in DIFFICULTIES:
        raise ValueError(f"Unknown difficulty {difficulty!r}")

    if not path or len(path) < 2:
        path = BFS(grid).run_all()
        if not path:
            raise UnreachableGoalError(grid.start, grid.goal)

    moves = moves_from_coords(path)
    length = len(moves)
    hints = normalize_hint_steps(create_default_hints(length) if hints is None else hints, length)

    openings = grid.openings()
    if fmt == "compressed":
        g = encode_openings(openings, grid.width, grid.height)
        p = encode_path(path)
    else:
        g = pack_openings(openings)
        p = pack_moves(moves)

    return PuzzleRecord(
        v=FORMAT_VERSION,
        alg=alg,
        w=grid.width,
        h=grid.height,
        g=g,
        p=p,
        L=length,
        hints=hints,
        skill_tier=skill_tier,
        difficulty=difficulty,
    )

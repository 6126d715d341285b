import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from mazemin.core.errors import InvalidMoveError
from mazemin.core.openings import DIRECTION_MASKS, DX, DY
from mazemin.game.engine import first_divergence, hint_segment, hint_start
from mazemin.io.history import GameResult
from mazemin.io.record import DecodedPuzzle

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]
RewardProvider = Callable[[str], bool]

HINT = "hint"
SLICE = "slice"


@dataclass
class GameConfig:
    resource_bundle: int = 3
    hint_window: int = 20
    short_hint_window: int = 10
    star_time_limit_ms: int = 5 * 60 * 1000
    slice_penalty_threshold: int = 2
    history_limit: int = 100


def compute_stars(elapsed_ms: int, hints_used: int, slices_used: int,
                  config: GameConfig = None) -> int:
    config = config or GameConfig()
    stars = 3
    if elapsed_ms > config.star_time_limit_ms:
        stars -= 1
    if hints_used > 0:
        stars -= 1
    if slices_used > config.slice_penalty_threshold:
        stars -= 1
    return max(1, stars)


def deny_rewards(kind: str) -> bool:
    return False


class ResourceWallet:
    """
    Free hints / slices. When a counter is empty the reward provider
    (an ad, a purchase prompt...) is asked; a grant refills the bundle.
    Pro players never run out.
    """

    def __init__(self, bundle: int = 3, pro: bool = False,
                 reward_provider: Optional[RewardProvider] = None):
        self.bundle = bundle
        self.pro = pro
        self.reward_provider = reward_provider or deny_rewards
        self._available: Dict[str, int] = {HINT: bundle, SLICE: bundle}

    def available(self, kind: str) -> float:
        return float("inf") if self.pro else self._available[kind]

    def set_pro(self, pro: bool):
        self.pro = pro
        if not pro:
            for kind in self._available:
                self._available[kind] = min(self._available[kind], self.bundle)

    def consume(self, kind: str) -> bool:
        if self.pro:
            return True
        if self._available[kind] <= 0:
            if not self.reward_provider(kind):
                logger.debug("Reward for %s denied", kind)
                return False
            self._available[kind] = self.bundle
        self._available[kind] -= 1
        return True


@dataclass
class RunState:
    cells: List[Cell] = field(default_factory=lambda: [(0, 0)])
    moves: List[int] = field(default_factory=list)
    divergence: int = -1
    progress: int = 0
    hints_used: int = 0
    slices_used: int = 0
    started_at: Optional[float] = None
    finished_at: Optional[float] = None
    completed: bool = False
    stars: int = 0

    @property
    def cursor(self) -> Cell:
        return self.cells[-1]


class GameSession:
    """
    One player's run through a decoded puzzle. The puzzle is read-only;
    everything the player changes lives in self.state.
    """

    def __init__(self, puzzle: DecodedPuzzle, config: GameConfig = None,
                 wallet: ResourceWallet = None,
                 on_complete: Optional[Callable[[GameResult], None]] = None,
                 clock: Callable[[], float] = time.time):
        self.puzzle = puzzle
        self.config = config or GameConfig()
        self.wallet = wallet or ResourceWallet(self.config.resource_bundle)
        self.on_complete = on_complete
        self.clock = clock
        self.reference = list(puzzle.moves)
        self.solution_cells = puzzle.solution_cells()
        self.result: Optional[GameResult] = None
        self.hint_cells: List[Cell] = []
        self.reset()

    def reset(self):
        self.state = RunState(started_at=self.clock())
        self.hint_cells = []
        self.result = None

    # --- Movement -------------------------------------------------------

    def can_move(self, direction: int) -> bool:
        if direction not in (0, 1, 2, 3):
            return False
        x, y = self.state.cursor
        nx, ny = x + DX[direction], y + DY[direction]
        if not (0 <= nx < self.puzzle.width and 0 <= ny < self.puzzle.height):
            return False
        return bool(self.puzzle.openings[y * self.puzzle.width + x] & DIRECTION_MASKS[direction])

    def apply_move(self, direction: int):
        if self.state.completed or not self.can_move(direction):
            raise InvalidMoveError(self.state.cursor, direction)

        x, y = self.state.cursor
        self.state.cells.append((x + DX[direction], y + DY[direction]))
        self.state.moves.append(direction)
        self.evaluate()
        self._check_win()

    def move_to(self, target: Cell) -> bool:
        """
        Input boundary for a single cell step. Same-cell, immediate backtrack
        and non-adjacent targets are ignored; blocked moves are rejected.
        """
        cells = self.state.cells
        if target == cells[-1]:
            return False
        if len(cells) > 1 and target == cells[-2]:
            return False

        x, y = cells[-1]
        delta = (target[0] - x, target[1] - y)
        for direction in range(4):
            if (DX[direction], DY[direction]) == delta:
                break
        else:
            return False

        try:
            self.apply_move(direction)
        except InvalidMoveError as exc:
            logger.debug("Rejected move: %s", exc)
            return False
        return True

    def drag_to(self, target: Cell) -> int:
        """Greedy multi-step advance toward target; stops at the first blocked step."""
        applied = 0
        for _ in range(self.puzzle.width + self.puzzle.height):
            x, y = self.state.cursor
            dx, dy = target[0] - x, target[1] - y
            if dx == 0 and dy == 0:
                break
            if abs(dx) >= abs(dy) and dx != 0:
                step = (x + (1 if dx > 0 else -1), y)
            else:
                step = (x, y + (1 if dy > 0 else -1))
            if not self.move_to(step):
                break
            applied += 1
        return applied

    # --- Evaluation -----------------------------------------------------

    def evaluate(self) -> Tuple[int, int]:
        moves = self.state.moves
        if not self.reference:
            self.state.divergence, self.state.progress = -1, 0
            return -1, 0
        divergence = first_divergence(moves, self.reference)
        if divergence == -1:
            progress = min(len(moves), len(self.reference))
        else:
            progress = divergence
        self.state.divergence, self.state.progress = divergence, progress
        return divergence, progress

    def _check_win(self):
        if self.state.cursor == self.puzzle.goal:
            self._complete()
            return
        required = len(self.reference) if self.reference else self.puzzle.record.L
        if self.state.divergence == -1 and self.state.progress >= required:
            self._complete()

    def _complete(self):
        if self.state.completed:
            return
        state = self.state
        state.finished_at = self.clock()
        state.completed = True
        elapsed = self.elapsed_ms
        state.stars = compute_stars(elapsed, state.hints_used, state.slices_used, self.config)
        self.result = GameResult(
            maze_id=self.puzzle.record.record_id,
            moves=len(state.moves),
            hints_used=state.hints_used,
            slices_used=state.slices_used,
            duration_ms=elapsed,
            completed_at=state.finished_at,
            stars=state.stars,
        )
        logger.info("Completed %s in %d ms with %d stars",
                    self.result.maze_id, elapsed, state.stars)
        if self.on_complete is not None:
            self.on_complete(self.result)

    @property
    def elapsed_ms(self) -> int:
        started = self.state.started_at
        if started is None:
            return 0
        finished = self.state.finished_at if self.state.finished_at is not None else self.clock()
        return int((finished - started) * 1000)

    # --- Resources ------------------------------------------------------

    def request_hint(self) -> List[Cell]:
        """
        Spends a hint and returns the cells of the next stretch of the
        reference solution, starting from the furthest correct point.
        """
        if not self.reference or self.state.completed:
            return []
        if not self.wallet.consume(HINT):
            return []
        self.state.hints_used += 1

        segment = hint_segment(self.reference, self.state.progress, self.state.divergence,
                               self.puzzle.record.L, self.config.hint_window,
                               self.config.short_hint_window)
        if not segment:
            self.hint_cells = []
            return []

        start = hint_start(min(len(self.reference), self.puzzle.record.L),
                           self.state.progress, self.state.divergence)
        x, y = self.solution_cells[min(start, len(self.solution_cells) - 1)]
        cells = []
        for move in segment:
            x, y = x + DX[move], y + DY[move]
            cells.append((x, y))
        self.hint_cells = cells
        return cells

    def slice(self, anchor: int = None) -> bool:
        """
        Cuts the player's path back to `anchor` moves (default: the divergence
        point, or the progress when on track). Free when nothing would change.
        """
        state = self.state
        if state.completed:
            return False
        if anchor is None:
            anchor = state.progress if state.divergence == -1 else state.divergence
        if anchor < 0 or anchor >= len(state.moves):
            return False
        if not self.wallet.consume(SLICE):
            return False

        state.moves = state.moves[:anchor]
        state.cells = state.cells[:anchor + 1]
        state.slices_used += 1
        self.evaluate()
        return True


def history_recorder(store) -> Callable[[GameResult], None]:
    """Completion callback that appends the result and marks the puzzle played."""
    def record(result: GameResult):
        store.record_result(result)
        store.mark_played(result.maze_id)
    return record

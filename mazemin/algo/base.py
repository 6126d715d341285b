import random
from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from mazemin.core.grid import Grid


class StepState(Enum):
    MORE = "more"
    DONE = "done"


class StepDriver:
    """
    Advances a generator/solver one atomic grid mutation at a time.
    Pacing belongs to the caller; abandoning a run is just not calling step() again.
    """

    def __init__(self, steps: Iterator[str]):
        self._steps = steps
        self.state = StepState.MORE
        self.status: Optional[str] = None
        self.step_count = 0

    def step(self) -> StepState:
        if self.state is StepState.DONE:
            return self.state
        try:
            self.status = next(self._steps)
            self.step_count += 1
        except StopIteration:
            self.state = StepState.DONE
        return self.state

    def run(self, max_steps: Optional[int] = None) -> StepState:
        taken = 0
        while self.state is StepState.MORE and (max_steps is None or taken < max_steps):
            self.step()
            taken += 1
        return self.state


class Generator(ABC):
    code = ""
    label = ""

    def __init__(self, grid: Grid, seed: int = None):
        self.grid = grid
        self.seed = seed
        self.rng = random.Random(seed)
        self.step_count = 0
        # Highlight state for the preview renderer
        self.active: Optional[Tuple[int, int]] = None
        self.frontier: List[Tuple[int, int]] = []

    @abstractmethod
    def carve(self) -> Iterator[str]:
        """
        Builds the spanning tree, yielding once per grid mutation.
        The actual grid modifications happen in-place on self.grid.
        """
        pass

    def run(self) -> Iterator[str]:
        self.rng = random.Random(self.seed)
        for status in self.carve():
            self.step_count += 1
            yield status

        # Entrance and exit, whatever the algorithm
        self.grid.open_entrances()
        self.active = None
        self.frontier = []
        yield "Done"

    def run_all(self):
        """Helper to run the generator to completion."""
        for _ in self.run():
            pass

    def driver(self) -> StepDriver:
        return StepDriver(self.run())

    def random_cell(self) -> Tuple[int, int]:
        return self.rng.randrange(self.grid.width), self.rng.randrange(self.grid.height)

    def unvisited_neighbors(self, x: int, y: int) -> List[Tuple[int, int, int]]:
        return [(nx, ny, d) for nx, ny, d in self.grid.get_neighbors(x, y)
                if not self.grid.is_visited(nx, ny)]

    def visited_neighbors(self, x: int, y: int) -> List[Tuple[int, int, int]]:
        return [(nx, ny, d) for nx, ny, d in self.grid.get_neighbors(x, y)
                if self.grid.is_visited(nx, ny)]

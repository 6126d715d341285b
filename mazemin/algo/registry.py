from typing import Dict, Type

from mazemin.algo.base import Generator
from mazemin.algo.dfs import RecursiveBacktracker
from mazemin.algo.growing_tree import GrowingTreeEastBiased
from mazemin.algo.hunt_and_kill import HuntAndKill
from mazemin.algo.sidewinder import SidewinderBidirectional
from mazemin.algo.wilson import WilsonsAlgorithm
from mazemin.core.grid import Grid

# Wire-format algorithm code -> generator class
GENERATORS: Dict[str, Type[Generator]] = {
    cls.code: cls
    for cls in (
        RecursiveBacktracker,
        GrowingTreeEastBiased,
        HuntAndKill,
        SidewinderBidirectional,
        WilsonsAlgorithm,
    )
}


def create_generator(code: str, grid: Grid, seed: int = None) -> Generator:
    try:
        cls = GENERATORS[code]
    except KeyError:
        raise ValueError(f"Unknown generation algorithm {code!r}, expected one of {sorted(GENERATORS)}") from None
    return cls(grid, seed=seed)

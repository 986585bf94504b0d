import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional, Tuple

from terrain_maze.algo.prim import PrimsAlgorithm
from terrain_maze.algo.solvers import Strategy
from terrain_maze.core.events import StepListener, emit
from terrain_maze.core.grid import Grid, GridState
from terrain_maze.core.result import RunResult

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]


def generate_maze(rows: int, cols: int, seed: Optional[int] = None,
                  on_step: Optional[StepListener] = None) -> Grid:
    """
    Builds a fresh grid and carves a perfect maze into it.
    Same (rows, cols, seed) always gives the same walls, terrain and endpoints.
    """
    grid = Grid.create(rows, cols)
    with grid.session(GridState.GENERATING):
        generator = PrimsAlgorithm(grid, seed=seed)
        for event in generator.run():
            emit(on_step, event)
    logger.debug(f"Generated {rows}x{cols} maze (seed={seed}), start={grid.start} end={grid.end}")
    return grid


def run_search(grid: Grid, strategy, start: Optional[Coord] = None, end: Optional[Coord] = None,
               on_step: Optional[StepListener] = None) -> RunResult:
    """
    Clears search state and runs one strategy from start to end.
    Raises Busy if the grid is already generating or searching.
    """
    strategy = Strategy.parse(strategy)
    with grid.session(GridState.SEARCHING):
        return _search(grid, strategy, start, end, on_step)


def _search(grid: Grid, strategy: Strategy, start: Optional[Coord], end: Optional[Coord],
            on_step: Optional[StepListener]) -> RunResult:
    start = grid.start if start is None else tuple(start)
    end = grid.end if end is None else tuple(end)
    if start is None or end is None:
        raise ValueError("Grid has no endpoints; generate a maze or pass start and end")
    grid.get_index(*start)
    grid.get_index(*end)
    if grid.is_wall[start]:
        raise ValueError(f"Start {start} is a wall")

    grid.reset_search_state()
    solver = strategy.solver_class(grid)

    logger.debug(f"Running {solver.name} from {start} to {end}")
    # Timed: exploration only, not the path walk-back
    t0 = time.perf_counter()
    for event in solver.search(start, end):
        emit(on_step, event)
    elapsed = time.perf_counter() - t0

    if solver.found:
        for event in solver.reconstruct_path(end):
            emit(on_step, event)

    result = RunResult(
        strategy=solver.name,
        found=solver.found,
        visited_count=grid.visited_count(),
        path_length=len(solver.path),
        path_cost=solver.path_cost,
        elapsed=elapsed,
        path=tuple(solver.path),
    )
    logger.debug(f"{solver.name}: found={result.found} cost={result.path_cost} visited={result.visited_count}")
    return result


class MazeEngine:
    """
    Owns the current maze and serializes work on it.

    Idle -> Generating -> Idle and Idle -> Searching -> Idle are the only
    transitions; anything else raises Busy. Searches can be handed to a
    single worker thread with submit_search().
    """

    def __init__(self, rows: int, cols: int):
        self.rows = rows
        self.cols = cols
        self.grid = Grid.create(rows, cols)
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def state(self) -> GridState:
        return self.grid.state

    def generate(self, seed: Optional[int] = None, on_step: Optional[StepListener] = None) -> Grid:
        current = self.grid
        with current.session(GridState.GENERATING):
            grid = generate_maze(self.rows, self.cols, seed=seed, on_step=on_step)
            self.grid = grid
        logger.info(f"New {self.rows}x{self.cols} maze ready (seed={seed})")
        return grid

    def run_search(self, strategy, on_step: Optional[StepListener] = None) -> RunResult:
        return run_search(self.grid, strategy, on_step=on_step)

    def submit_search(self, strategy, on_step: Optional[StepListener] = None) -> Future:
        """
        Claims the grid now, then searches on the worker thread.
        A second call before the first completes raises Busy immediately.
        """
        strategy = Strategy.parse(strategy)
        grid = self.grid
        grid.begin(GridState.SEARCHING)
        try:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="maze-search")
            return self._executor.submit(self._run_claimed, grid, strategy, on_step)
        except BaseException:
            grid.finish()
            raise

    @staticmethod
    def _run_claimed(grid: Grid, strategy: Strategy, on_step: Optional[StepListener]) -> RunResult:
        try:
            return _search(grid, strategy, None, None, on_step)
        finally:
            grid.finish()

    def close(self):
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

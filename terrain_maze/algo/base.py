from abc import ABC, abstractmethod
from typing import Iterator, List, Optional, Tuple

from terrain_maze.core.events import EVT_PATH_ADD, StepEvent
from terrain_maze.core.grid import Grid

Coord = Tuple[int, int]


class Generator(ABC):
    def __init__(self, grid: Grid, seed: Optional[int] = None):
        self.grid = grid
        self.seed = seed
        self.step_count = 0

    @abstractmethod
    def run(self) -> Iterator[StepEvent]:
        """
        Yields one event per carved cell.
        The actual grid modifications happen in-place on self.grid.
        """
        pass

    def run_all(self):
        """Helper to run the generator to completion."""
        for _ in self.run():
            pass


class Solver(ABC):
    name = "Solver"

    def __init__(self, grid: Grid):
        self.grid = grid
        self.path: List[Coord] = []
        self.found = False

    @abstractmethod
    def search(self, start: Coord, end: Coord) -> Iterator[StepEvent]:
        """
        Explores from start until end is reached or the frontier is empty.
        Sets self.found and yields one event per settled cell.
        """
        pass

    def run(self, start: Coord, end: Coord) -> Iterator[StepEvent]:
        self.path = []
        self.found = False
        yield from self.search(start, end)
        if self.found:
            yield from self.reconstruct_path(end)

    def reconstruct_path(self, end: Coord) -> Iterator[StepEvent]:
        """Follows parent links from end back to the cell with no parent."""
        grid = self.grid
        chain = []
        idx = grid.get_index(*end)
        while idx != Grid.NO_PARENT:
            row, col = grid.get_coord(idx)
            grid.on_path[row, col] = True
            chain.append((row, col))
            yield StepEvent(EVT_PATH_ADD, row, col)
            idx = int(grid.parent[row, col])
        chain.reverse()
        self.path = chain

    @property
    def path_cost(self) -> int:
        return sum(int(self.grid.weight[r, c]) for r, c in self.path)

    def passable(self, row: int, col: int) -> bool:
        return not self.grid.is_wall[row, col]

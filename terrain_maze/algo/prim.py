import logging
import random
from typing import Iterator, List, Optional, Tuple

from terrain_maze.algo.base import Generator
from terrain_maze.core.errors import EmptyGrid
from terrain_maze.core.events import EVT_CARVE, StepEvent
from terrain_maze.core.grid import Grid

logger = logging.getLogger(__name__)


class PrimsAlgorithm(Generator):
    """
    Randomized Prim's over a wall frontier.

    Cells live on odd coordinates, the walls between them on mixed-parity
    coordinates. A wall is knocked down when it separates the carved region
    from a cell that is still solid, so the passages always form a spanning
    tree over the odd cells.
    """

    def run(self) -> Iterator[StepEvent]:
        rng = random.Random(self.seed)
        grid = self.grid

        # Seed cell: uniform over odd coordinates
        start_r = 1 + rng.randrange((grid.rows - 1) // 2) * 2
        start_c = 1 + rng.randrange((grid.cols - 1) // 2) * 2
        grid.carve(start_r, start_c)
        self.step_count = 1
        yield StepEvent(EVT_CARVE, start_r, start_c)

        # Duplicates are allowed; each occurrence is drawn once.
        frontier: List[Tuple[int, int]] = []
        self.add_walls(start_r, start_c, frontier)

        while frontier:
            # Swap remove for O(1)
            idx = rng.randrange(len(frontier))
            wr, wc = frontier[idx]
            frontier[idx] = frontier[-1]
            frontier.pop()

            divided = self.divided_cells(wr, wc)
            if divided is None:
                continue

            _, (fr, fc) = divided
            if not grid.is_wall[fr, fc]:
                continue  # would close a loop

            grid.carve(wr, wc)
            grid.carve(fr, fc)
            self.step_count += 2
            yield StepEvent(EVT_CARVE, wr, wc)
            yield StepEvent(EVT_CARVE, fr, fc)

            self.add_walls(fr, fc, frontier)

        logger.debug(f"Carved {self.step_count} cells (seed cell {start_r},{start_c})")

        self.assign_terrain(rng)
        self.pick_endpoints()
        grid.freeze()

    def add_walls(self, row: int, col: int, frontier: List[Tuple[int, int]]):
        for nr, nc in self.grid.get_neighbors(row, col):
            if self.grid.is_wall[nr, nc]:
                frontier.append((nr, nc))

    def divided_cells(self, row: int, col: int) -> Optional[Tuple[Tuple[int, int], Tuple[int, int]]]:
        """
        Returns (carved side, solid side) along whichever axis has exactly one
        open neighbor, vertical first. None if neither axis qualifies.
        """
        grid = self.grid
        # Vertical
        if grid.is_valid(row - 1, col) and grid.is_valid(row + 1, col):
            top, bottom = (row - 1, col), (row + 1, col)
            if not grid.is_wall[top] and grid.is_wall[bottom]:
                return top, bottom
            if grid.is_wall[top] and not grid.is_wall[bottom]:
                return bottom, top
        # Horizontal
        if grid.is_valid(row, col - 1) and grid.is_valid(row, col + 1):
            left, right = (row, col - 1), (row, col + 1)
            if not grid.is_wall[left] and grid.is_wall[right]:
                return left, right
            if grid.is_wall[left] and not grid.is_wall[right]:
                return right, left
        return None

    def assign_terrain(self, rng: random.Random):
        # One independent draw per walkable cell, row-major
        for row, col in self.grid.walkable_cells():
            chance = rng.randrange(100)
            if chance < Grid.WATER_CHANCE:
                self.grid.set_weight(row, col, Grid.WATER)
            elif chance < Grid.MUD_CHANCE:
                self.grid.set_weight(row, col, Grid.MUD)
            else:
                self.grid.set_weight(row, col, Grid.GRASS)

    def pick_endpoints(self):
        walkable = list(self.grid.walkable_cells())
        if not walkable:
            raise EmptyGrid()
        # First and last in scan order; both forced back to grass
        self.grid.set_endpoints(walkable[0], walkable[-1])

import enum
import logging
import threading
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple

import numpy as np

from terrain_maze.core.errors import Busy, InvalidDimensions

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]


class GridState(enum.Enum):
    IDLE = 0
    GENERATING = 1
    SEARCHING = 2


class Cell:
    """
    Read-only view of one grid position.
    Holds no state of its own; every attribute is looked up on the owning Grid.
    """
    __slots__ = ('grid', 'row', 'col')

    def __init__(self, grid: "Grid", row: int, col: int):
        self.grid = grid
        self.row = row
        self.col = col

    @property
    def coord(self) -> Coord:
        return (self.row, self.col)

    @property
    def is_wall(self) -> bool:
        return bool(self.grid.is_wall[self.row, self.col])

    @property
    def weight(self) -> int:
        return int(self.grid.weight[self.row, self.col])

    @property
    def visited(self) -> bool:
        return bool(self.grid.visited[self.row, self.col])

    @property
    def on_path(self) -> bool:
        return bool(self.grid.on_path[self.row, self.col])

    @property
    def g_cost(self) -> float:
        return float(self.grid.g_cost[self.row, self.col])

    @property
    def h_cost(self) -> float:
        return float(self.grid.h_cost[self.row, self.col])

    @property
    def parent(self) -> Optional["Cell"]:
        idx = int(self.grid.parent[self.row, self.col])
        if idx < 0:
            return None
        return self.grid.cell(*self.grid.get_coord(idx))

    @property
    def is_start(self) -> bool:
        return self.grid.start == self.coord

    @property
    def is_end(self) -> bool:
        return self.grid.end == self.coord

    def neighbors(self) -> List["Cell"]:
        return self.grid.neighbors(self)

    def __eq__(self, other):
        if not isinstance(other, Cell):
            return NotImplemented
        return self.grid is other.grid and self.row == other.row and self.col == other.col

    def __hash__(self):
        return hash((id(self.grid), self.row, self.col))

    def __repr__(self):
        return f"Cell({self.row}, {self.col})"


class Grid:
    # Terrain palette (traversal cost)
    GRASS = 1
    MUD   = 5
    WATER = 10
    TERRAIN = (GRASS, MUD, WATER)

    # Out of 100: [0, 15) water, [15, 35) mud, rest grass
    WATER_CHANCE = 15
    MUD_CHANCE   = 35

    NO_PARENT = -1
    UNREACHED = float('inf')

    # Neighbor order N, S, W, E. Every solver's tie-breaks depend on it.
    DIRECTIONS = ((-1, 0), (1, 0), (0, -1), (0, 1))

    __slots__ = ('rows', 'cols', 'is_wall', 'weight', 'visited', 'on_path',
                 'parent', 'g_cost', 'h_cost', 'start', 'end',
                 '_state', '_state_lock')

    def __init__(self, rows: int, cols: int):
        self.check_dimensions(rows, cols)
        self.rows = rows
        self.cols = cols
        shape = (rows, cols)

        # Structure: all walls, all grass until a generator says otherwise
        self.is_wall = np.ones(shape, dtype=bool)
        self.weight = np.full(shape, self.GRASS, dtype=np.uint8)

        # Search state, cleared by reset_search_state()
        self.visited = np.zeros(shape, dtype=bool)
        self.on_path = np.zeros(shape, dtype=bool)
        self.parent = np.full(shape, self.NO_PARENT, dtype=np.int32)
        self.g_cost = np.full(shape, self.UNREACHED, dtype=np.float64)
        self.h_cost = np.full(shape, self.UNREACHED, dtype=np.float64)

        self.start: Optional[Coord] = None
        self.end: Optional[Coord] = None

        self._state = GridState.IDLE
        self._state_lock = threading.Lock()

    @classmethod
    def create(cls, rows: int, cols: int) -> "Grid":
        """All-wall grid. Dimensions are validated before anything is allocated."""
        cls.check_dimensions(rows, cols)
        return cls(rows, cols)

    @staticmethod
    def check_dimensions(rows: int, cols: int):
        if rows < 3 or cols < 3 or rows % 2 == 0 or cols % 2 == 0:
            raise InvalidDimensions(rows, cols)

    # --- Coordinates ---

    @staticmethod
    def in_bounds(row: int, col: int, rows: int, cols: int) -> bool:
        return 0 <= row < rows and 0 <= col < cols

    def is_valid(self, row: int, col: int) -> bool:
        return self.in_bounds(row, col, self.rows, self.cols)

    def get_index(self, row: int, col: int) -> int:
        if self.is_valid(row, col):
            return row * self.cols + col
        raise IndexError(f"Coordinate ({row}, {col}) out of bounds")

    def get_coord(self, idx: int) -> Coord:
        return divmod(idx, self.cols)

    def cell(self, row: int, col: int) -> Cell:
        if not self.is_valid(row, col):
            raise IndexError(f"Coordinate ({row}, {col}) out of bounds")
        return Cell(self, row, col)

    def get_neighbors(self, row: int, col: int) -> Iterator[Coord]:
        """
        Yields (nrow, ncol) for every in-bounds neighbor, North, South, West, East.
        Does NOT check walls (that's for the caller).
        """
        for dr, dc in self.DIRECTIONS:
            nr, nc = row + dr, col + dc
            if 0 <= nr < self.rows and 0 <= nc < self.cols:
                yield (nr, nc)

    def neighbors(self, cell: Cell) -> List[Cell]:
        return [Cell(self, nr, nc) for nr, nc in self.get_neighbors(cell.row, cell.col)]

    def walkable_cells(self) -> Iterator[Coord]:
        """Walkable coordinates in row-major order."""
        for row, col in zip(*np.nonzero(~self.is_wall)):
            yield (int(row), int(col))

    # --- Structure (generation time only) ---

    def carve(self, row: int, col: int):
        self.is_wall[row, col] = False

    def set_weight(self, row: int, col: int, weight: int):
        if weight not in self.TERRAIN:
            raise ValueError(f"Weight {weight} is not one of {self.TERRAIN}")
        self.weight[row, col] = weight

    def set_endpoints(self, start: Coord, end: Coord):
        for row, col in (start, end):
            self.get_index(row, col)
            self.is_wall[row, col] = False
            self.weight[row, col] = self.GRASS
        self.start = start
        self.end = end

    def freeze(self):
        """Locks walls and terrain. Any later write raises ValueError."""
        self.is_wall.flags.writeable = False
        self.weight.flags.writeable = False

    @property
    def frozen(self) -> bool:
        return not self.is_wall.flags.writeable

    # --- Search state ---

    def reset_search_state(self):
        self.visited.fill(False)
        self.on_path.fill(False)
        self.parent.fill(self.NO_PARENT)
        self.g_cost.fill(self.UNREACHED)
        self.h_cost.fill(self.UNREACHED)

    def visited_count(self) -> int:
        return int(np.count_nonzero(self.visited))

    # --- Run isolation ---

    @property
    def state(self) -> GridState:
        return self._state

    def begin(self, state: GridState):
        with self._state_lock:
            if self._state is not GridState.IDLE:
                logger.warning(f"Rejected {state.name} request, grid is {self._state.name}")
                raise Busy(self._state, state)
            self._state = state

    def finish(self):
        with self._state_lock:
            self._state = GridState.IDLE

    @contextmanager
    def session(self, state: GridState):
        self.begin(state)
        try:
            yield self
        finally:
            self.finish()

    def __repr__(self):
        return f"Grid({self.rows}x{self.cols}, start={self.start}, end={self.end})"

from collections import deque
from typing import Any, Dict, Tuple

import numpy as np

from terrain_maze.core.grid import Grid


def open_degrees(grid: Grid) -> np.ndarray:
    """Number of walkable orthogonal neighbors of every cell."""
    open_cells = np.pad(~grid.is_wall, 1, constant_values=False).astype(np.int8)
    return (open_cells[:-2, 1:-1] + open_cells[2:, 1:-1]
            + open_cells[1:-1, :-2] + open_cells[1:-1, 2:])


def count_passages(grid: Grid) -> int:
    """Open orthogonally-adjacent pairs, each counted once."""
    open_cells = ~grid.is_wall
    vertical = np.count_nonzero(open_cells[:-1, :] & open_cells[1:, :])
    horizontal = np.count_nonzero(open_cells[:, :-1] & open_cells[:, 1:])
    return int(vertical + horizontal)


def count_reachable(grid: Grid, origin: Tuple[int, int]) -> int:
    """
    Walkable cells reachable from origin.
    Uses its own bookkeeping; the grid's search state is left alone.
    """
    if grid.is_wall[origin]:
        return 0
    seen = np.zeros_like(grid.is_wall)
    seen[origin] = True
    queue = deque([origin])
    count = 0
    while queue:
        row, col = queue.popleft()
        count += 1
        for nr, nc in grid.get_neighbors(row, col):
            if not grid.is_wall[nr, nc] and not seen[nr, nc]:
                seen[nr, nc] = True
                queue.append((nr, nc))
    return count


def is_perfect(grid: Grid) -> bool:
    """Connected and acyclic: a spanning tree over the walkable cells."""
    walkable = int(np.count_nonzero(~grid.is_wall))
    if walkable == 0:
        return False
    if walkable - count_passages(grid) != 1:
        return False
    origin = next(grid.walkable_cells())
    return count_reachable(grid, origin) == walkable


def calculate_stats(grid: Grid) -> Dict[str, Any]:
    open_cells = ~grid.is_wall
    degrees = open_degrees(grid)[open_cells]
    walkable = int(np.count_nonzero(open_cells))
    weights = grid.weight[open_cells]

    dead_ends = int(np.count_nonzero(degrees == 1))
    return {
        "walkable": walkable,
        "passages": count_passages(grid),
        "dead_ends": dead_ends,
        "corridors": int(np.count_nonzero(degrees == 2)),
        "junctions": int(np.count_nonzero(degrees >= 3)),
        "grass": int(np.count_nonzero(weights == Grid.GRASS)),
        "mud": int(np.count_nonzero(weights == Grid.MUD)),
        "water": int(np.count_nonzero(weights == Grid.WATER)),
        "dead_end_percent": (dead_ends / walkable) * 100 if walkable > 0 else 0
    }

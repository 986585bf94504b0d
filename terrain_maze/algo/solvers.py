import enum
import heapq
import itertools
from collections import deque
from typing import Iterator, List, Tuple

from terrain_maze.algo.base import Coord, Solver
from terrain_maze.core.events import EVT_SETTLE, StepEvent


class BFS(Solver):
    """Unweighted. Cells are marked visited when enqueued."""
    name = "BFS"

    def search(self, start: Coord, end: Coord) -> Iterator[StepEvent]:
        grid = self.grid
        queue = deque([start])
        grid.visited[start] = True

        while queue:
            current = queue.popleft()
            if current == end:
                self.found = True
                return

            cr, cc = current
            parent_idx = grid.get_index(cr, cc)
            for nr, nc in grid.get_neighbors(cr, cc):
                if not grid.visited[nr, nc] and self.passable(nr, nc):
                    grid.visited[nr, nc] = True
                    grid.parent[nr, nc] = parent_idx
                    queue.append((nr, nc))

            yield StepEvent(EVT_SETTLE, cr, cc)


class DFS(Solver):
    """
    Iterative, with the visited check deferred to pop time.
    A cell may sit on the stack more than once; the first occurrence popped wins.
    """
    name = "DFS"

    def search(self, start: Coord, end: Coord) -> Iterator[StepEvent]:
        grid = self.grid
        stack: List[Coord] = [start]

        while stack:
            current = stack.pop()
            if current == end:
                self.found = True
                return

            if grid.visited[current]:
                continue

            cr, cc = current
            grid.visited[cr, cc] = True
            yield StepEvent(EVT_SETTLE, cr, cc)

            parent_idx = grid.get_index(cr, cc)
            for nr, nc in grid.get_neighbors(cr, cc):
                if not grid.visited[nr, nc] and self.passable(nr, nc):
                    grid.parent[nr, nc] = parent_idx
                    stack.append((nr, nc))


class Dijkstra(Solver):
    """
    Weighted. Entering a cell costs that cell's weight.
    Equal keys pop in insertion order.
    """
    name = "Dijkstra"

    def heuristic(self, a: Coord, b: Coord) -> float:
        return 0

    def search(self, start: Coord, end: Coord) -> Iterator[StepEvent]:
        grid = self.grid
        counter = itertools.count()

        grid.g_cost[start] = 0
        grid.h_cost[start] = self.heuristic(start, end)
        # Priority Queue: (key, insertion order, row, col)
        open_set: List[Tuple[float, int, int, int]] = [
            (grid.h_cost[start], next(counter), start[0], start[1])
        ]

        while open_set:
            _, _, cr, cc = heapq.heappop(open_set)
            if grid.visited[cr, cc]:
                continue  # stale entry

            grid.visited[cr, cc] = True
            yield StepEvent(EVT_SETTLE, cr, cc)

            if (cr, cc) == end:
                self.found = True
                return

            curr_g = grid.g_cost[cr, cc]
            parent_idx = grid.get_index(cr, cc)
            for nr, nc in grid.get_neighbors(cr, cc):
                if grid.visited[nr, nc] or not self.passable(nr, nc):
                    continue
                new_g = curr_g + int(grid.weight[nr, nc])
                if new_g < grid.g_cost[nr, nc]:
                    grid.g_cost[nr, nc] = new_g
                    grid.h_cost[nr, nc] = self.heuristic((nr, nc), end)
                    grid.parent[nr, nc] = parent_idx
                    priority = new_g + grid.h_cost[nr, nc]
                    heapq.heappush(open_set, (priority, next(counter), nr, nc))


class AStar(Dijkstra):
    """ Dijkstra ordered by g + Manhattan distance to the goal. """
    name = "A*"

    def heuristic(self, a: Coord, b: Coord) -> float:
        return abs(a[0] - b[0]) + abs(a[1] - b[1])


class Strategy(enum.Enum):
    BFS = "bfs"
    DFS = "dfs"
    DIJKSTRA = "dijkstra"
    ASTAR = "astar"

    @classmethod
    def parse(cls, value) -> "Strategy":
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        if key in ("a*", "a-star", "a_star"):
            key = "astar"
        try:
            return cls(key)
        except ValueError:
            choices = ", ".join(s.value for s in cls)
            raise ValueError(f"Unknown strategy {value!r} (choose from {choices})") from None

    @property
    def solver_class(self):
        return SOLVERS[self]


SOLVERS = {
    Strategy.BFS: BFS,
    Strategy.DFS: DFS,
    Strategy.DIJKSTRA: Dijkstra,
    Strategy.ASTAR: AStar,
}

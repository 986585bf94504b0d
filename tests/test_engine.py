import unittest
import sys
import os
import threading
import time

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from terrain_maze.algo.solvers import Strategy
from terrain_maze.core.errors import Busy, InvalidDimensions
from terrain_maze.core.events import EVT_PATH_ADD
from terrain_maze.core.grid import GridState
from terrain_maze.engine import MazeEngine, generate_maze, run_search


class TestEngine(unittest.TestCase):
    def setUp(self):
        self.engine = MazeEngine(11, 11)

    def tearDown(self):
        self.engine.close()

    def test_initial_grid_is_solid(self):
        self.assertTrue(self.engine.grid.is_wall.all())
        self.assertIs(self.engine.state, GridState.IDLE)

    def test_generate_replaces_grid(self):
        old = self.engine.grid
        grid = self.engine.generate(seed=1)
        self.assertIsNot(grid, old)
        self.assertIs(self.engine.grid, grid)
        self.assertIs(self.engine.state, GridState.IDLE)
        self.assertIs(old.state, GridState.IDLE)

    def test_run_search(self):
        self.engine.generate(seed=5)
        result = self.engine.run_search("astar")
        self.assertTrue(result.found)
        self.assertEqual(result.strategy, "A*")
        self.assertIs(self.engine.state, GridState.IDLE)

    def test_busy_while_searching(self):
        self.engine.generate(seed=5)
        grid = self.engine.grid
        grid.begin(GridState.SEARCHING)
        try:
            with self.assertRaises(Busy):
                self.engine.run_search(Strategy.BFS)
            with self.assertRaises(Busy):
                self.engine.generate(seed=6)
            with self.assertRaises(Busy):
                self.engine.submit_search(Strategy.BFS)
        finally:
            grid.finish()
        # Nothing was replaced while busy
        self.assertIs(self.engine.grid, grid)

    def test_submit_search_runs_on_worker(self):
        self.engine.generate(seed=3)
        started = threading.Event()
        gate = threading.Event()
        threads = set()

        def listener(event):
            threads.add(threading.current_thread().name)
            started.set()
            gate.wait(5)

        future = self.engine.submit_search("dijkstra", on_step=listener)
        self.assertTrue(started.wait(5))
        self.assertIs(self.engine.state, GridState.SEARCHING)

        with self.assertRaises(Busy):
            self.engine.run_search("bfs")
        with self.assertRaises(Busy):
            self.engine.submit_search("dfs")
        with self.assertRaises(Busy):
            self.engine.generate()

        gate.set()
        result = future.result(timeout=10)
        self.assertTrue(result.found)
        self.assertIs(self.engine.state, GridState.IDLE)
        self.assertNotIn(threading.current_thread().name, threads)

        # Free again once the worker is done
        self.assertTrue(self.engine.run_search("bfs").found)

    def test_listener_error_releases_grid(self):
        self.engine.generate(seed=2)

        def listener(event):
            raise RuntimeError("display went away")

        with self.assertRaises(RuntimeError):
            self.engine.run_search("bfs", on_step=listener)
        self.assertIs(self.engine.state, GridState.IDLE)

        future = self.engine.submit_search("bfs", on_step=listener)
        with self.assertRaises(RuntimeError):
            future.result(timeout=10)
        self.assertIs(self.engine.state, GridState.IDLE)

    def test_elapsed_excludes_path_walk(self):
        grid = generate_maze(9, 9, seed=4)

        def slow_path(event):
            if event.kind == EVT_PATH_ADD:
                time.sleep(0.05)

        result = run_search(grid, "bfs", on_step=slow_path)
        self.assertTrue(result.found)
        self.assertGreaterEqual(result.path_length, 9)
        # 9+ path cells at 50 ms each would be >= 0.45 s
        self.assertLess(result.elapsed, 0.2)
        self.assertTrue(grid.on_path[grid.end])

    def test_invalid_dimensions(self):
        with self.assertRaises(InvalidDimensions):
            MazeEngine(10, 11)
        with self.assertRaises(InvalidDimensions):
            generate_maze(7, 2)

    def test_search_without_endpoints(self):
        with self.assertRaises(ValueError):
            self.engine.run_search("bfs")

    def test_unknown_strategy(self):
        grid = generate_maze(7, 7, seed=0)
        with self.assertRaises(ValueError):
            run_search(grid, "greedy")
        self.assertIs(grid.state, GridState.IDLE)

    def test_strategy_parse(self):
        self.assertIs(Strategy.parse("A*"), Strategy.ASTAR)
        self.assertIs(Strategy.parse(" BFS "), Strategy.BFS)
        self.assertIs(Strategy.parse("Dijkstra"), Strategy.DIJKSTRA)
        self.assertIs(Strategy.parse(Strategy.DFS), Strategy.DFS)

    def test_result_summary(self):
        grid = generate_maze(9, 9, seed=1)
        result = run_search(grid, "dijkstra")
        text = result.summary()
        self.assertIn("Algorithm: Dijkstra", text)
        self.assertIn("Status: Found", text)
        self.assertIn(f"Total Cost: {result.path_cost}", text)
        self.assertEqual(result.to_dict()["path"][0], list(grid.start))

        with self.assertRaises(Exception):
            result.found = False  # frozen


if __name__ == '__main__':
    unittest.main()

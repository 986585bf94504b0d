import sys
import os
import time
import argparse
from typing import Dict, List

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from terrain_maze.algo.solvers import Strategy
from terrain_maze.engine import generate_maze, run_search

# ==========================================
# GLOBAL CONFIGURATION
# Add or remove strategies here to include/exclude them from the race.
# ==========================================
ENABLED_SOLVERS = [
    Strategy.BFS,
    Strategy.DFS,
    Strategy.DIJKSTRA,
    Strategy.ASTAR,
]


def run_benchmark():
    parser = argparse.ArgumentParser(description="Solver Benchmark")
    parser.add_argument("--rows", type=int, default=101, help="Grid rows (odd)")
    parser.add_argument("--cols", type=int, default=101, help="Grid columns (odd)")
    parser.add_argument("--mazes", type=int, default=5, help="Number of mazes to race on")
    parser.add_argument("--seed", type=int, default=0, help="First seed; maze i uses seed + i")
    args = parser.parse_args()

    print(f"=== MAZE SOLVER BENCHMARK ===")
    print(f"Size: {args.rows}x{args.cols} | Mazes: {args.mazes}")
    print(f"Solvers: {', '.join(s.value for s in ENABLED_SOLVERS)}")
    print("-" * 50)

    totals: Dict[Strategy, Dict[str, float]] = {
        s: {"time": 0.0, "cost": 0, "visited": 0, "path": 0} for s in ENABLED_SOLVERS
    }

    for i in range(args.mazes):
        seed = args.seed + i
        t0 = time.time()
        grid = generate_maze(args.rows, args.cols, seed=seed)
        print(f"Maze {i + 1} (seed {seed}) generated in {time.time() - t0:.4f}s")

        for strategy in ENABLED_SOLVERS:
            result = run_search(grid, strategy)
            if not result.found:
                print(f"  {strategy.value.upper()} found no path on seed {seed}")
            entry = totals[strategy]
            entry["time"] += result.elapsed
            entry["cost"] += result.path_cost
            entry["visited"] += result.visited_count
            entry["path"] += result.path_length

    # Leaderboard
    results: List[dict] = []
    for strategy, entry in totals.items():
        results.append({
            "name": strategy.value,
            "time": entry["time"] / args.mazes,
            "cost": entry["cost"] / args.mazes,
            "visited": entry["visited"] / args.mazes,
            "path": entry["path"] / args.mazes,
        })
    results.sort(key=lambda x: x['time'])

    print("=" * 72)
    print(f"{'RANK':<5} | {'ALGORITHM':<10} | {'TIME (s)':<10} | {'COST':<8} | {'PATH':<8} | {'VISITED':<8}")
    print("-" * 72)
    for i, res in enumerate(results):
        print(f"{i+1:<5} | {res['name'].upper():<10} | {res['time']:<10.4f} | {res['cost']:<8.1f} | "
              f"{res['path']:<8.1f} | {res['visited']:<8.1f}")
    print("=" * 72)


if __name__ == "__main__":
    run_benchmark()

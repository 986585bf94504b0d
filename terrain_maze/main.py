import argparse
import json
import logging
import os
import sys

# Ensure project root is in path so we can import 'terrain_maze' package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from terrain_maze.algo.solvers import Strategy
from terrain_maze.core.complexity import calculate_stats
from terrain_maze.core.errors import MazeError
from terrain_maze.core.events import PacedListener
from terrain_maze.engine import generate_maze, run_search

DEFAULT_ROWS = 41
DEFAULT_COLS = 41


def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def add_maze_args(parser: argparse.ArgumentParser):
    parser.add_argument("--rows", type=int, default=DEFAULT_ROWS, help="Grid rows (odd, >= 3)")
    parser.add_argument("--cols", type=int, default=DEFAULT_COLS, help="Grid columns (odd, >= 3)")
    parser.add_argument("--seed", type=int, default=None, help="Random Seed")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Terrain Maze: Prim's mazes with weighted pathfinding")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    gen_parser = subparsers.add_parser("generate", help="Generate a maze and report its shape")
    add_maze_args(gen_parser)

    solve_parser = subparsers.add_parser("solve", help="Generate a maze and solve it")
    add_maze_args(solve_parser)
    solve_parser.add_argument("--algo", type=str, default="dijkstra", choices=[s.value for s in Strategy], help="Search strategy")
    solve_parser.add_argument("--delay", type=float, default=0.0, help="Seconds to pause after each step")
    solve_parser.add_argument("--json", action="store_true", help="Print the result as JSON")

    cmp_parser = subparsers.add_parser("compare", help="Run every strategy on the same maze")
    add_maze_args(cmp_parser)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger("terrain_maze")

    if args.command is None:
        parser.print_help()
        return 0

    logger.info(f"Running command: {args.command}")

    try:
        logger.info(f"Generating {args.rows}x{args.cols} maze (seed={args.seed})...")
        grid = generate_maze(args.rows, args.cols, seed=args.seed)
    except MazeError as e:
        logger.error(str(e))
        return 2

    if args.command == "generate":
        stats = calculate_stats(grid)
        logger.info(f"Start {grid.start}, End {grid.end}")
        logger.info(f"Stats: {stats}")

    elif args.command == "solve":
        on_step = PacedListener(delay=args.delay, path_delay=args.delay / 2) if args.delay > 0 else None
        logger.info(f"Solving with {args.algo.upper()} from {grid.start} to {grid.end}...")
        result = run_search(grid, args.algo, on_step=on_step)
        if args.json:
            print(json.dumps(result.to_dict()))
        else:
            print(result.summary())

    elif args.command == "compare":
        print(f"\n{'ALGORITHM':<10} | {'STATUS':<8} | {'COST':<6} | {'VISITED':<8} | {'PATH LEN':<8} | {'TIME (ms)':<9}")
        print("-" * 64)
        for strategy in Strategy:
            result = run_search(grid, strategy)
            status = "Found" if result.found else "No Path"
            print(f"{result.strategy:<10} | {status:<8} | {result.path_cost:<6} | {result.visited_count:<8} | "
                  f"{result.path_length:<8} | {result.elapsed * 1000:<9.3f}")

    return 0


if __name__ == "__main__":
    sys.exit(main())

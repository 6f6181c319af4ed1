"""Command-line interface for the Tango puzzle system."""

import argparse
import json
import logging
import sys

from .core.board import TangoBoard
from .core.constraints import EdgeConstraints
from .core.validator import is_grid_valid, is_solved, count_solutions
from .errors import GenerationFailure
from .generator import TangoGenerator, GeneratorConfig, Difficulty, render_package
from .solvers import BacktrackingSolver, LogicSolver
from .benchmark import Benchmark
from .benchmark.visualizer import Visualizer


def main(argv=None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Tango (Sun/Moon) Puzzle Generator & Solver",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate 5 hard puzzles
  tango generate --count 5 --difficulty hard

  # Solve a puzzle by deduction only
  tango solve -a logic -p "SS..M. ...... ...... ...... ...... ......" --horizontal "..=../...../...../...../...../....."

  # Benchmark generation with and without the end-pair rules
  tango benchmark --puzzles 10 --output results/
        """
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Generate command
    gen_parser = subparsers.add_parser("generate", help="Generate Tango puzzles")
    gen_parser.add_argument(
        "--count", "-n", type=int, default=1,
        help="Number of puzzles to generate (default: 1)"
    )
    gen_parser.add_argument(
        "--difficulty", "-d",
        choices=["easy", "medium", "hard", "all"],
        default="medium",
        help="Difficulty level (default: medium)"
    )
    gen_parser.add_argument(
        "--size", type=int, default=6,
        help="Board size, even and >= 4 (default: 6)"
    )
    gen_parser.add_argument(
        "--config", "-c", type=str, default=None,
        help="JSON file with generator settings and tier overrides"
    )
    gen_parser.add_argument(
        "--output", "-o", type=str, default=None,
        help="Output file for puzzles (JSON format)"
    )
    gen_parser.add_argument(
        "--seed", "-s", type=int, default=None,
        help="Random seed for reproducibility"
    )
    gen_parser.add_argument(
        "--show-solution", action="store_true",
        help="Print the solution under each puzzle"
    )

    # Solve command
    solve_parser = subparsers.add_parser("solve", help="Solve a Tango puzzle")
    _add_puzzle_arguments(solve_parser)
    solve_parser.add_argument(
        "--algorithm", "-a",
        choices=["backtracking", "logic", "all"],
        default="all",
        help="Solving algorithm to use (default: all)"
    )

    # Check command
    check_parser = subparsers.add_parser("check", help="Check a grid against the rules")
    _add_puzzle_arguments(check_parser)

    # Benchmark command
    bench_parser = subparsers.add_parser("benchmark", help="Benchmark puzzle generation")
    bench_parser.add_argument(
        "--puzzles", "-n", type=int, default=10,
        help="Puzzles per difficulty (default: 10)"
    )
    bench_parser.add_argument(
        "--difficulty", "-d",
        choices=["easy", "medium", "hard", "all"],
        default="all",
        help="Difficulty to benchmark (default: all)"
    )
    bench_parser.add_argument(
        "--output", "-o", type=str, default="results",
        help="Output directory for results (default: results)"
    )
    bench_parser.add_argument(
        "--seed", "-s", type=int, default=42,
        help="Random seed for reproducibility (default: 42)"
    )
    bench_parser.add_argument(
        "--no-uniqueness", action="store_true",
        help="Skip counting completions of each puzzle"
    )
    bench_parser.add_argument(
        "--no-charts", action="store_true",
        help="Skip chart generation"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "generate":
        cmd_generate(args)
    elif args.command == "solve":
        cmd_solve(args)
    elif args.command == "check":
        cmd_check(args)
    elif args.command == "benchmark":
        cmd_benchmark(args)


def _add_puzzle_arguments(sub):
    sub.add_argument(
        "--puzzle", "-p", type=str, required=True,
        help="Puzzle string, row-major: '.' empty, 'S' sun, 'M' moon"
    )
    sub.add_argument(
        "--horizontal", type=str, default="",
        help="Horizontal constraints, rows separated by '/': '.', '=' or 'x'"
    )
    sub.add_argument(
        "--vertical", type=str, default="",
        help="Vertical constraints, rows separated by '/': '.', '=' or 'x'"
    )


def _parse_puzzle(args):
    """Build (board, constraints) from CLI arguments, exiting on bad input."""
    try:
        board = TangoBoard.from_string(args.puzzle)
        if args.horizontal or args.vertical:
            constraints = EdgeConstraints.from_strings(board.size, args.horizontal, args.vertical)
        else:
            constraints = EdgeConstraints(board.size)
    except ValueError as e:
        print(f"Error parsing puzzle: {e}")
        sys.exit(1)
    return board, constraints


def cmd_generate(args):
    """Handle the generate command."""
    config = GeneratorConfig.from_json(args.config) if args.config else GeneratorConfig(size=args.size)
    generator = TangoGenerator(seed=args.seed, config=config)

    if args.difficulty == "all":
        difficulties = list(Difficulty)
    else:
        difficulties = [Difficulty(args.difficulty)]

    all_puzzles = []

    for difficulty in difficulties:
        print(f"\nGenerating {args.count} {difficulty.value} puzzles...")
        try:
            packages = generator.generate_batch(args.count, difficulty)
        except GenerationFailure as e:
            print(f"Error: {e}")
            sys.exit(2)

        for i, package in enumerate(packages, 1):
            all_puzzles.append({"index": i, **package.to_dict()})

            label = difficulty.value.capitalize()
            if package.difficulty != difficulty.value:
                label += f" -> {package.difficulty}"
            print(f"\n--- {label} Puzzle {i} ({package.count_givens()} givens, "
                  f"{package.constraints.count()} constraints) ---")
            print(render_package(package))
            if args.show_solution:
                print("\nSolution:")
                print(render_package(package, show_solution=True))

    if args.output:
        with open(args.output, "w") as f:
            json.dump(all_puzzles, f, indent=2)
        print(f"\nAll puzzles saved to {args.output}")

    print(f"\nTotal puzzles generated: {len(all_puzzles)}")


def cmd_solve(args):
    """Handle the solve command."""
    board, constraints = _parse_puzzle(args)

    print("Input puzzle:")
    print(board)
    print()

    solver_map = {
        "backtracking": ("Backtracking", BacktrackingSolver()),
        "logic": ("Logic", LogicSolver()),
    }
    if args.algorithm == "all":
        solvers = dict(solver_map.values())
    else:
        name, solver = solver_map[args.algorithm]
        solvers = {name: solver}

    for name, solver in solvers.items():
        print(f"Solving with {name}...")
        solution, stats = solver.solve(board, constraints)

        if stats.solved:
            print(f"✓ Solved in {stats.time_seconds:.4f}s")
            if args.verbose:
                print(f"  Iterations: {stats.iterations:,}")
                print(f"  Backtracks: {stats.backtracks:,}")
                print(f"  Memory: {stats.memory_bytes / 1024:.2f} KB")
            print(solution)
        else:
            print("✗ Failed to solve")
            if stats.extra.get("contradiction"):
                print("  Deduction ran into a contradiction")
            elif stats.extra.get("stuck"):
                print("  Deduction got stuck before the board was full")
            if args.verbose:
                print(f"  Time: {stats.time_seconds:.4f}s")
                print(f"  Iterations: {stats.iterations:,}")
        print()


def cmd_check(args):
    """Handle the check command."""
    board, constraints = _parse_puzzle(args)

    print(board)
    valid = is_grid_valid(board, constraints)
    print(f"Valid:  {'yes' if valid else 'no'}")
    print(f"Solved: {'yes' if is_solved(board, constraints) else 'no'}")
    if valid and not board.is_complete():
        completions = count_solutions(board, constraints, limit=2)
        print(f"Completions: {'none' if completions == 0 else 'one' if completions == 1 else 'several'}")
    sys.exit(0 if valid else 1)


def cmd_benchmark(args):
    """Handle the benchmark command."""
    if args.difficulty == "all":
        difficulties = list(Difficulty)
    else:
        difficulties = [Difficulty(args.difficulty)]

    print("=" * 60)
    print("TANGO GENERATION BENCHMARK")
    print("=" * 60)
    print(f"Puzzles per difficulty: {args.puzzles}")
    print(f"Difficulties: {[d.value for d in difficulties]}")
    print(f"Output directory: {args.output}")
    print("=" * 60)

    benchmark = Benchmark(
        puzzles_per_difficulty=args.puzzles,
        difficulties=difficulties,
        check_uniqueness=not args.no_uniqueness,
        seed=args.seed
    )
    results = benchmark.run()
    summary = benchmark.get_summary()

    print("\n" + "=" * 60)
    print("RESULTS SUMMARY")
    print("=" * 60)

    for diff, variants in summary["results_by_difficulty"].items():
        print(f"\n{diff}:")
        for variant, stats in variants.items():
            print(f"  {variant}:")
            print(f"    Avg Givens: {stats['avg_givens']:.1f} (min {stats['min_givens']})")
            print(f"    Avg Constraints: {stats['avg_constraints']:.1f}")
            print(f"    Avg Time: {stats['avg_time_seconds']:.4f}s")
            print(f"    Unique: {stats['unique_rate']:.0f}%")
            print(f"    Solvable without end pairs: {stats['core_rules_solve_rate']:.0f}%")
            print(f"    Fallbacks: {stats['fallbacks']}")

    benchmark.save_results(args.output)

    if not args.no_charts:
        print("\nGenerating charts...")
        visualizer = Visualizer(results, args.output)
        charts = visualizer.generate_all()
        visualizer.generate_summary_table()
        print(f"Charts saved to {args.output}/")
        for chart in charts:
            print(f"  - {chart.split('/')[-1]}")

    print("\n" + "=" * 60)
    print("Benchmark complete!")


if __name__ == "__main__":
    main()

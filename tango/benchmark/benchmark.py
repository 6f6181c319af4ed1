"""Benchmarking framework for Tango puzzle generation."""

from __future__ import annotations
import json
import logging
import os
import time
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from tqdm import tqdm

from ..core.validator import has_unique_solution
from ..generator import TangoGenerator, GeneratorConfig, Difficulty, PuzzlePackage
from ..solvers import BacktrackingSolver, logic_solves_completely

logger = logging.getLogger(__name__)


@dataclass
class BenchmarkResult:
    """Results from generating and analysing a single puzzle."""
    puzzle_id: int
    difficulty: str
    variant: str
    produced: str
    time_seconds: float
    givens: int
    constraints: int
    attempts: int
    removals_reverted: int
    unique: bool
    solvable_without_end_pairs: bool
    backtracking_nodes: int
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "puzzle_id": self.puzzle_id,
            "difficulty": self.difficulty,
            "variant": self.variant,
            "produced": self.produced,
            "time_seconds": self.time_seconds,
            "givens": self.givens,
            "constraints": self.constraints,
            "attempts": self.attempts,
            "removals_reverted": self.removals_reverted,
            "unique": self.unique,
            "solvable_without_end_pairs": self.solvable_without_end_pairs,
            "backtracking_nodes": self.backtracking_nodes,
            **self.extra
        }


class Benchmark:
    """
    Generation benchmark across difficulty tiers.

    Each tier is generated twice with the same seed: once with the
    end-pair rules enabled and once without, so their effect on clue
    counts and on fairness can be compared.
    """

    VARIANTS = {
        "end_pairs": True,
        "core_rules": False,
    }

    def __init__(
        self,
        puzzles_per_difficulty: int = 10,
        difficulties: Optional[List[Difficulty]] = None,
        config: Optional[GeneratorConfig] = None,
        check_uniqueness: bool = True,
        seed: Optional[int] = None
    ):
        """
        Initialize the benchmark.

        Args:
            puzzles_per_difficulty: Number of puzzles to generate per difficulty.
            difficulties: List of difficulties to test (default: all).
            config: Base generator config; use_end_pairs is set per variant.
            check_uniqueness: Count completions of every puzzle (slower).
            seed: Random seed for reproducibility.
        """
        self.puzzles_per_difficulty = puzzles_per_difficulty
        self.difficulties = difficulties or list(Difficulty)
        self.config = config or GeneratorConfig()
        self.check_uniqueness = check_uniqueness
        self.seed = seed

        self.results: List[BenchmarkResult] = []
        self.puzzles: Dict[str, List[PuzzlePackage]] = {}

    def run(self, show_progress: bool = True) -> List[BenchmarkResult]:
        """
        Run the full benchmark suite.

        Returns:
            List of BenchmarkResult objects.
        """
        self.results = []
        self.puzzles = {}

        total_tests = len(self.difficulties) * len(self.VARIANTS) * self.puzzles_per_difficulty
        pbar = tqdm(total=total_tests, desc="Benchmarking", disable=not show_progress)

        for variant, use_end_pairs in self.VARIANTS.items():
            config = replace(self.config, use_end_pairs=use_end_pairs)
            for difficulty in self.difficulties:
                generator = TangoGenerator(seed=self.seed, config=config)
                key = f"{difficulty.value}_{variant}"
                self.puzzles[key] = []
                for puzzle_id in range(self.puzzles_per_difficulty):
                    result = self._run_single(generator, difficulty, variant, puzzle_id)
                    self.results.append(result)
                    pbar.update(1)

        pbar.close()
        return self.results

    def _run_single(
        self,
        generator: TangoGenerator,
        difficulty: Difficulty,
        variant: str,
        puzzle_id: int
    ) -> BenchmarkResult:
        """Generate one puzzle and measure it."""
        start_time = time.perf_counter()
        package = generator.generate(difficulty)
        elapsed = time.perf_counter() - start_time
        self.puzzles[f"{difficulty.value}_{variant}"].append(package)

        report = generator.last_report
        _, stats = BacktrackingSolver().solve(package.puzzle, package.constraints, track_memory=False)
        unique = (
            has_unique_solution(package.puzzle, package.constraints)
            if self.check_uniqueness else False
        )

        return BenchmarkResult(
            puzzle_id=puzzle_id,
            difficulty=difficulty.value,
            variant=variant,
            produced=package.difficulty,
            time_seconds=elapsed,
            givens=package.count_givens(),
            constraints=package.constraints.count(),
            attempts=report.attempts,
            removals_reverted=report.removals_reverted,
            unique=unique,
            solvable_without_end_pairs=logic_solves_completely(
                package.puzzle, package.solution, package.constraints, use_end_pairs=False
            ),
            backtracking_nodes=stats.nodes_explored,
        )

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics from benchmark results."""
        summary = {
            "total_puzzles": len(self.results),
            "variants": list(self.VARIANTS),
            "difficulties": [d.value for d in self.difficulties],
            "results_by_difficulty": {}
        }

        for difficulty in self.difficulties:
            by_variant = {}
            for variant in self.VARIANTS:
                rows = [
                    r for r in self.results
                    if r.difficulty == difficulty.value and r.variant == variant
                ]
                if not rows:
                    continue
                by_variant[variant] = {
                    "avg_time_seconds": sum(r.time_seconds for r in rows) / len(rows),
                    "avg_givens": sum(r.givens for r in rows) / len(rows),
                    "min_givens": min(r.givens for r in rows),
                    "avg_constraints": sum(r.constraints for r in rows) / len(rows),
                    "unique_rate": sum(r.unique for r in rows) / len(rows) * 100,
                    "core_rules_solve_rate": sum(r.solvable_without_end_pairs for r in rows) / len(rows) * 100,
                    "fallbacks": sum(r.produced != r.difficulty for r in rows),
                    "tested": len(rows)
                }
            summary["results_by_difficulty"][difficulty.value] = by_variant

        return summary

    def save_results(self, output_dir: str) -> None:
        """Save benchmark results and generated puzzles to files."""
        os.makedirs(output_dir, exist_ok=True)

        results_file = os.path.join(output_dir, "benchmark_results.json")
        with open(results_file, "w") as f:
            json.dump([r.to_dict() for r in self.results], f, indent=2)

        summary_file = os.path.join(output_dir, "benchmark_summary.json")
        with open(summary_file, "w") as f:
            json.dump(self.get_summary(), f, indent=2)

        puzzles_dir = os.path.join(output_dir, "puzzles")
        for key, packages in self.puzzles.items():
            TangoGenerator.save_to_folder(packages, os.path.join(puzzles_dir, key), prefix=f"puzzle_{key}")

        logger.info("Results and puzzles saved to %s", output_dir)

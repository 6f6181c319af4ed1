"""Visualization utilities for generation benchmark results."""

from __future__ import annotations
import os
from typing import List

import matplotlib.pyplot as plt
import seaborn as sns
import numpy as np

from .benchmark import BenchmarkResult


DIFFICULTY_ORDER = ["easy", "medium", "hard"]


class Visualizer:
    """
    Chart generator for Tango generation benchmark results.

    Compares the end-pair and core-rule variants across difficulties.
    """

    COLORS = {
        "end_pairs": "#3498db",   # Blue
        "core_rules": "#e67e22",  # Orange
    }

    def __init__(self, results: List[BenchmarkResult], output_dir: str = "results"):
        """
        Initialize the visualizer.

        Args:
            results: List of benchmark results.
            output_dir: Directory to save generated charts.
        """
        self.results = results
        self.output_dir = output_dir
        os.makedirs(output_dir, exist_ok=True)

        plt.style.use('seaborn-v0_8-whitegrid')
        sns.set_palette("husl")

    def _difficulties(self) -> List[str]:
        present = set(r.difficulty for r in self.results)
        return [d for d in DIFFICULTY_ORDER if d in present]

    def _variants(self) -> List[str]:
        return sorted(set(r.variant for r in self.results))

    def generate_all(self) -> List[str]:
        """
        Generate all charts.

        Returns:
            List of paths to generated chart files.
        """
        return [
            self.plot_metric_by_difficulty("givens", "Average Givens", "givens_by_difficulty.png"),
            self.plot_metric_by_difficulty("time_seconds", "Average Time (seconds)", "time_by_difficulty.png"),
            self.plot_givens_distribution(),
        ]

    def plot_metric_by_difficulty(self, metric: str, ylabel: str, filename: str) -> str:
        """Create grouped bar chart of a metric by difficulty and variant."""
        fig, ax = plt.subplots(figsize=(10, 6))

        variants = self._variants()
        difficulties = self._difficulties()
        x = np.arange(len(difficulties))
        width = 0.8 / max(len(variants), 1)

        for i, variant in enumerate(variants):
            values = []
            for diff in difficulties:
                rows = [
                    getattr(r, metric) for r in self.results
                    if r.variant == variant and r.difficulty == diff
                ]
                values.append(np.mean(rows) if rows else 0)

            offset = (i - len(variants) / 2 + 0.5) * width
            ax.bar(x + offset, values, width,
                   label=variant,
                   color=self.COLORS.get(variant, "#95a5a6"),
                   edgecolor='black', linewidth=0.5)

        ax.set_xlabel('Difficulty', fontsize=12)
        ax.set_ylabel(ylabel, fontsize=12)
        ax.set_title(f'{ylabel} by Difficulty', fontsize=14, fontweight='bold')
        ax.set_xticks(x)
        ax.set_xticklabels([d.capitalize() for d in difficulties])
        ax.legend(title='Rules')
        ax.set_ylim(bottom=0)

        plt.tight_layout()
        path = os.path.join(self.output_dir, filename)
        plt.savefig(path, dpi=150, bbox_inches='tight')
        plt.close(fig)

        return path

    def plot_givens_distribution(self) -> str:
        """Create box plot of givens per difficulty, split by variant."""
        fig, ax = plt.subplots(figsize=(10, 6))

        data = {
            "difficulty": [r.difficulty for r in self.results],
            "givens": [r.givens for r in self.results],
            "variant": [r.variant for r in self.results],
        }
        sns.boxplot(
            data=data, x="difficulty", y="givens", hue="variant",
            order=self._difficulties(), palette=self.COLORS, ax=ax
        )

        ax.set_xlabel('Difficulty', fontsize=12)
        ax.set_ylabel('Givens', fontsize=12)
        ax.set_title('Givens Distribution', fontsize=14, fontweight='bold')

        plt.tight_layout()
        path = os.path.join(self.output_dir, "givens_distribution.png")
        plt.savefig(path, dpi=150, bbox_inches='tight')
        plt.close(fig)

        return path

    def generate_summary_table(self) -> str:
        """Generate a markdown summary table."""
        lines = [
            "# Generation Benchmark Summary\n",
            "| Difficulty | Rules | Avg Givens | Avg Constraints | Avg Time | Unique | Core Rules Solve |",
            "|------------|-------|------------|-----------------|----------|--------|------------------|"
        ]

        for diff in self._difficulties():
            for variant in self._variants():
                rows = [r for r in self.results if r.difficulty == diff and r.variant == variant]
                if not rows:
                    continue
                unique = sum(r.unique for r in rows) / len(rows) * 100
                core = sum(r.solvable_without_end_pairs for r in rows) / len(rows) * 100
                lines.append(
                    f"| {diff} | {variant} | {np.mean([r.givens for r in rows]):.1f} | "
                    f"{np.mean([r.constraints for r in rows]):.1f} | "
                    f"{np.mean([r.time_seconds for r in rows]):.3f}s | {unique:.0f}% | {core:.0f}% |"
                )

        content = "\n".join(lines)

        path = os.path.join(self.output_dir, "benchmark_summary.md")
        with open(path, "w") as f:
            f.write(content)

        return path

"""Benchmark module for Tango puzzle generation."""

from .benchmark import Benchmark, BenchmarkResult
from .visualizer import Visualizer

__all__ = ["Benchmark", "BenchmarkResult", "Visualizer"]

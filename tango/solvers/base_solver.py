"""Base solver interface and common utilities."""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
import logging
import time
import tracemalloc

from ..core.board import TangoBoard
from ..core.constraints import EdgeConstraints
from ..core.validator import validate_solution

logger = logging.getLogger(__name__)


@dataclass
class SolverStats:
    """
    Statistics from one solve.

    ``iterations`` counts recursive calls for the backtracker and full
    passes for deduction. ``extra`` holds solver-specific values such
    as the per-rule deduction counts.
    """
    solved: bool = False
    time_seconds: float = 0.0
    memory_bytes: int = 0
    iterations: int = 0
    backtracks: int = 0
    nodes_explored: int = 0
    algorithm: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)


class BaseSolver(ABC):
    """Abstract base class for Tango solvers."""

    name: str = "BaseSolver"

    def __init__(self):
        self.stats = SolverStats(algorithm=self.name)

    def solve(
        self,
        board: TangoBoard,
        constraints: Optional[EdgeConstraints] = None,
        track_memory: bool = True
    ) -> tuple[Optional[TangoBoard], SolverStats]:
        """
        Solve a Tango puzzle with timing and memory tracking.

        Args:
            board: The puzzle to solve. Never modified.
            constraints: Edge constraints of the puzzle.
            track_memory: Measure peak memory with tracemalloc.

        Returns:
            Tuple of (solution or None, stats).
        """
        self.stats = SolverStats(algorithm=self.name)
        if constraints is None:
            constraints = EdgeConstraints(board.size)

        if track_memory:
            tracemalloc.start()

        start_time = time.perf_counter()

        try:
            solution = self._solve(board.copy(), constraints)
            self.stats.solved = solution is not None and validate_solution(board, solution, constraints)
        except Exception as e:
            logger.exception("%s failed", self.name)
            self.stats.extra["error"] = str(e)
            solution = None

        self.stats.time_seconds = time.perf_counter() - start_time

        if track_memory:
            _, peak = tracemalloc.get_traced_memory()
            tracemalloc.stop()
            self.stats.memory_bytes = peak

        return solution, self.stats

    @abstractmethod
    def _solve(self, board: TangoBoard, constraints: EdgeConstraints) -> Optional[TangoBoard]:
        """
        Internal solve method to be implemented by subclasses.

        Args:
            board: A copy of the puzzle to solve (can be modified).
            constraints: Edge constraints (read only).

        Returns:
            The solved board, or None if no solution found.
        """

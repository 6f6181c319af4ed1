"""Depth-first backtracking solver with fewest-candidates cell selection."""

from __future__ import annotations
from typing import Optional, List, Tuple

from .base_solver import BaseSolver
from ..core.board import TangoBoard
from ..core.constraints import EdgeConstraints
from ..core.rng import RandomSource
from ..core.validator import is_grid_valid, candidates_for_cell


class BacktrackingSolver(BaseSolver):
    """
    Exhaustive solver using recursive backtracking.

    Features:
    - Minimum Remaining Values (MRV) heuristic for cell selection, with an
      immediate pick when a cell has a single candidate
    - Randomized branch order so repeated runs on an empty board give
      different solutions
    - Whole-board validation after each placement

    Used both to manufacture full solutions and as the "does any
    completion exist" oracle.
    """

    name = "Backtracking"

    def __init__(self, rng: Optional[RandomSource] = None):
        """
        Initialize the backtracking solver.

        Args:
            rng: Source for branch ordering. A fresh unseeded source if None.
        """
        super().__init__()
        self.rng = rng if rng is not None else RandomSource()

    def _solve(self, board: TangoBoard, constraints: EdgeConstraints) -> Optional[TangoBoard]:
        """Solve using DFS with backtracking."""
        self.stats.iterations = 0
        self.stats.backtracks = 0
        self.stats.nodes_explored = 0

        return self._backtrack(board, constraints)

    def _backtrack(self, board: TangoBoard, constraints: EdgeConstraints) -> Optional[TangoBoard]:
        """
        Recursive backtracking algorithm.

        Each branch works on its own copy of the board.

        Returns the completed board, or None if this branch is a dead end.
        """
        self.stats.iterations += 1

        if not is_grid_valid(board, constraints):
            self.stats.backtracks += 1
            return None

        pick = self._select_unassigned_variable(board, constraints)
        if pick is None:
            # No empty cells - solution found!
            return board

        (row, col), candidates = pick
        self.stats.nodes_explored += 1

        if not candidates:
            self.stats.backtracks += 1
            return None

        self.rng.shuffle(candidates)
        for value in candidates:
            child = board.copy()
            child.grid[row, col] = value
            solution = self._backtrack(child, constraints)
            if solution is not None:
                return solution

        self.stats.backtracks += 1
        return None

    def _select_unassigned_variable(
        self,
        board: TangoBoard,
        constraints: EdgeConstraints
    ) -> Optional[Tuple[Tuple[int, int], List[int]]]:
        """
        Select the next empty cell using MRV (Minimum Remaining Values) heuristic.

        Returns:
            ((row, col), candidates), or None when the board is full. A
            cell with no candidates is returned at once so the caller can
            backtrack.
        """
        best_cell = None
        best_candidates: List[int] = []

        for cell in board.get_empty_cells():
            candidates = candidates_for_cell(board, constraints, cell[0], cell[1])

            if not candidates:
                return cell, candidates

            if best_cell is None or len(candidates) < len(best_candidates):
                best_cell = cell
                best_candidates = candidates

                # Forced move
                if len(candidates) == 1:
                    break

        if best_cell is None:
            return None
        return best_cell, best_candidates


def solve_one(
    board: TangoBoard,
    constraints: Optional[EdgeConstraints] = None,
    rng: Optional[RandomSource] = None
) -> Optional[TangoBoard]:
    """
    Find one completion of board, or None if none exists.

    The input board is never modified.
    """
    solver = BacktrackingSolver(rng=rng)
    solution, _ = solver.solve(board, constraints, track_memory=False)
    return solution

"""Validation utilities for Tango puzzles."""

from __future__ import annotations
import numpy as np
from typing import List, Optional, TYPE_CHECKING

from .board import EMPTY, MOON, SUN, SYMBOLS
from .constraints import Relation

if TYPE_CHECKING:
    from .board import TangoBoard
    from .constraints import EdgeConstraints


def line_violates_triples(line: np.ndarray) -> bool:
    """
    Check a row or column for three consecutive equal symbols.

    Args:
        line: One row or column of cell values.

    Returns:
        True if any window of three holds the same non-empty symbol.
    """
    line = np.asarray(line)
    if len(line) < 3:
        return False
    a, b, c = line[:-2], line[1:-1], line[2:]
    return bool(np.any((a != EMPTY) & (a == b) & (b == c)))


def line_violates_half_rule(line: np.ndarray) -> bool:
    """
    Check a row or column against the balance rule.

    Returns:
        True if either symbol appears more than len(line) / 2 times, or
        the line is full and the counts differ.
    """
    line = np.asarray(line)
    half = len(line) // 2
    suns = int(np.sum(line == SUN))
    moons = int(np.sum(line == MOON))
    if suns > half or moons > half:
        return True
    if suns + moons == len(line) and suns != moons:
        return True
    return False


def _table_violates(first: np.ndarray, second: np.ndarray, table: np.ndarray) -> bool:
    filled = (first != EMPTY) & (second != EMPTY)
    broken_eq = (table == Relation.EQUAL) & filled & (first != second)
    broken_neq = (table == Relation.NOT_EQUAL) & filled & (first == second)
    return bool(np.any(broken_eq | broken_neq))


def violates_adjacency(board: TangoBoard, constraints: Optional[EdgeConstraints]) -> bool:
    """
    Check every constrained edge whose two cells are both filled.

    Returns:
        True if an EQUAL edge joins different symbols or a NOT_EQUAL edge
        joins equal ones.
    """
    if constraints is None:
        return False
    g = board.grid
    if _table_violates(g[:, :-1], g[:, 1:], constraints.horizontal):
        return True
    return _table_violates(g[:-1, :], g[1:, :], constraints.vertical)


def is_grid_valid(board: TangoBoard, constraints: Optional[EdgeConstraints] = None) -> bool:
    """
    Check if the board state is valid (no rule is broken).

    Does not check completeness. This is the single correctness check
    used after every speculative placement.

    Args:
        board: The board to validate.
        constraints: Edge constraints, or None for a board without any.
    """
    if violates_adjacency(board, constraints):
        return False

    for line in board.lines():
        if line_violates_triples(line) or line_violates_half_rule(line):
            return False
    return True


def is_solved(board: TangoBoard, constraints: Optional[EdgeConstraints] = None) -> bool:
    """Check if the board is valid and has no empty cells."""
    return board.is_complete() and is_grid_valid(board, constraints)


def candidates_for_cell(
    board: TangoBoard,
    constraints: Optional[EdgeConstraints],
    row: int,
    col: int
) -> List[int]:
    """
    Get the symbols that can be placed at an empty cell without breaking a rule.

    Each symbol is tried in place and checked with :func:`is_grid_valid`;
    the cell is restored afterwards.

    Returns:
        List of valid symbols. Empty if the cell is already filled.
    """
    if not board.is_empty(row, col):
        return []

    out = []
    for value in SYMBOLS:
        board.grid[row, col] = value
        if is_grid_valid(board, constraints):
            out.append(value)
        board.grid[row, col] = EMPTY
    return out


def count_solutions(
    board: TangoBoard,
    constraints: Optional[EdgeConstraints] = None,
    limit: int = 2
) -> int:
    """
    Count the number of completions of a puzzle (up to limit).

    Uses backtracking with the fewest-candidates heuristic and stops
    early once limit is reached.
    """
    work_board = board.copy()
    if not is_grid_valid(work_board, constraints):
        return 0
    count = [0]

    def backtrack() -> bool:
        """Returns True if limit reached."""
        empty_cells = work_board.get_empty_cells()
        if not empty_cells:
            count[0] += 1
            return count[0] >= limit

        best_cell = None
        best_candidates: List[int] = []
        for cell in empty_cells:
            candidates = candidates_for_cell(work_board, constraints, cell[0], cell[1])
            if not candidates:
                return False
            if best_cell is None or len(candidates) < len(best_candidates):
                best_cell = cell
                best_candidates = candidates
                if len(candidates) == 1:
                    break

        row, col = best_cell
        for val in best_candidates:
            work_board.grid[row, col] = val
            if backtrack():
                return True
            work_board.grid[row, col] = EMPTY

        return False

    backtrack()
    return count[0]


def has_unique_solution(board: TangoBoard, constraints: Optional[EdgeConstraints] = None) -> bool:
    """Check if a puzzle has exactly one completion."""
    return count_solutions(board, constraints, limit=2) == 1


def validate_solution(
    puzzle: TangoBoard,
    solution: TangoBoard,
    constraints: Optional[EdgeConstraints] = None
) -> bool:
    """
    Validate that a solution correctly solves the puzzle.

    Returns:
        True if solution is complete, valid and matches every filled
        cell of the puzzle.
    """
    if puzzle.size != solution.size:
        return False

    filled = puzzle.grid != EMPTY
    if not np.array_equal(puzzle.grid[filled], solution.grid[filled]):
        return False

    return is_solved(solution, constraints)

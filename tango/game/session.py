"""Play-state bookkeeping for one puzzle: moves, undo and hints."""

from __future__ import annotations
from typing import List, NamedTuple, Optional, Tuple

from ..core.board import TangoBoard, EMPTY, MOON, SUN
from ..core.rng import RandomSource
from ..core.validator import is_grid_valid, is_solved
from ..errors import InvalidPlacement
from ..generator.package import PuzzlePackage


class Move(NamedTuple):
    """A single edit, kept on the undo stack."""
    row: int
    col: int
    previous: int
    next: int


def next_cycle(value: int) -> int:
    """Tap order: empty -> sun -> moon -> empty."""
    if value == EMPTY:
        return SUN
    if value == SUN:
        return MOON
    return EMPTY


class GameSession:
    """
    A player's working copy of a generated puzzle.

    Given cells can never be edited. Every edit, including hints, is
    pushed on an undo stack.
    """

    def __init__(self, package: PuzzlePackage, rng: Optional[RandomSource] = None):
        self.package = package
        self.board = package.puzzle.copy()
        self.undo_stack: List[Move] = []
        self.rng = rng if rng is not None else RandomSource()

    @property
    def constraints(self):
        return self.package.constraints

    def place(self, row: int, col: int, value: int) -> Optional[Move]:
        """
        Put value (EMPTY, SUN or MOON) at (row, col).

        Returns:
            The recorded Move, or None if the cell already held value.

        Raises:
            InvalidPlacement: The cell is a given or value is not a cell value.
        """
        if self.package.is_given(row, col):
            raise InvalidPlacement(row, col, "cell is a given")
        if value not in (EMPTY, SUN, MOON):
            raise InvalidPlacement(row, col, f"unknown value {value}")

        previous = self.board.get(row, col)
        if previous == value:
            return None

        self.board.set(row, col, value)
        move = Move(row, col, previous, value)
        self.undo_stack.append(move)
        return move

    def cycle(self, row: int, col: int) -> Optional[Move]:
        """Advance a cell to its next value, as a tap would."""
        return self.place(row, col, next_cycle(self.board.get(row, col)))

    def undo(self) -> Optional[Move]:
        """Revert the last move. Returns it, or None if there is nothing to undo."""
        if not self.undo_stack:
            return None
        move = self.undo_stack.pop()
        self.board.set(move.row, move.col, move.previous)
        return move

    def wrong_cells(self) -> List[Tuple[int, int]]:
        """Non-given cells whose value differs from the solution (empty included)."""
        solution = self.package.solution
        return [
            (r, c)
            for r in range(self.board.size)
            for c in range(self.board.size)
            if not self.package.is_given(r, c)
            and self.board.get(r, c) != solution.get(r, c)
        ]

    def hint(self) -> Optional[Move]:
        """
        Set one random wrong or empty cell to its solution value.

        Returns:
            The recorded Move, or None when no hint is needed.
        """
        candidates = self.wrong_cells()
        if not candidates:
            return None
        row, col = self.rng.choice(candidates)
        return self.place(row, col, self.package.solution.get(row, col))

    def is_valid(self) -> bool:
        return is_grid_valid(self.board, self.constraints)

    def is_won(self) -> bool:
        return is_solved(self.board, self.constraints)

    def reset(self) -> None:
        """Go back to the puzzle's starting position and clear the undo stack."""
        self.board = self.package.puzzle.copy()
        self.undo_stack = []

    def current(self) -> TangoBoard:
        return self.board.copy()

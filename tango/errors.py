"""Exception hierarchy for puzzle generation and play."""

from __future__ import annotations
from typing import Optional


class TangoError(Exception):
    """Base class for all errors raised by this package."""


class NoSolutionFound(TangoError):
    """The backtracking solver could not complete a grid within its retry budget."""


class Contradiction(TangoError):
    """Deduction tried to write a value that conflicts with a filled cell."""

    def __init__(self, row: int, col: int, existing: int, attempted: int):
        super().__init__(
            f"Cell ({row}, {col}) holds {existing}, deduction wants {attempted}"
        )
        self.row = row
        self.col = col
        self.existing = existing
        self.attempted = attempted


class GenerationExhausted(TangoError):
    """No acceptable puzzle was produced within the attempt budget for a tier."""

    def __init__(self, difficulty: str, attempts: int):
        super().__init__(
            f"No logic-solvable {difficulty} puzzle after {attempts} attempts"
        )
        self.difficulty = difficulty
        self.attempts = attempts


class GenerationFailure(TangoError):
    """Generation failed at the requested tier and at every fallback tier."""

    def __init__(self, message: str, tried: Optional[list] = None):
        super().__init__(message)
        self.tried = tried or []


class InvalidPlacement(TangoError):
    """A move targeted a given cell or carried an illegal value."""

    def __init__(self, row: int, col: int, reason: str):
        super().__init__(f"Cannot place at ({row}, {col}): {reason}")
        self.row = row
        self.col = col
        self.reason = reason

"""The bundle handed to a front end: puzzle, solution, constraints and givens."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict

import numpy as np

from ..core.board import TangoBoard, EMPTY
from ..core.constraints import EdgeConstraints


@dataclass
class PuzzlePackage:
    """
    A generated puzzle.

    Attributes:
        puzzle: Board holding only the given cells.
        solution: The full board the puzzle was built from.
        constraints: Edge constraints derived from solution.
        given_mask: Boolean (n, n) array, True for clue cells.
        difficulty: Name of the tier that produced the puzzle.
    """
    puzzle: TangoBoard
    solution: TangoBoard
    constraints: EdgeConstraints
    given_mask: np.ndarray
    difficulty: str = "medium"

    @property
    def size(self) -> int:
        return self.solution.size

    @property
    def horizontal(self) -> np.ndarray:
        return self.constraints.horizontal

    @property
    def vertical(self) -> np.ndarray:
        return self.constraints.vertical

    def count_givens(self) -> int:
        return int(np.sum(self.given_mask))

    def is_given(self, row: int, col: int) -> bool:
        return bool(self.given_mask[row, col])

    def to_dict(self) -> Dict[str, Any]:
        horizontal, vertical = self.constraints.to_strings()
        return {
            "difficulty": self.difficulty,
            "size": self.size,
            "puzzle": self.puzzle.to_string(),
            "solution": self.solution.to_string(),
            "horizontal": horizontal,
            "vertical": vertical,
            "givens": self.count_givens(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PuzzlePackage:
        size = int(data["size"])
        puzzle = TangoBoard.from_string(data["puzzle"], size)
        solution = TangoBoard.from_string(data["solution"], size)
        constraints = EdgeConstraints.from_strings(size, data["horizontal"], data["vertical"])
        return cls(
            puzzle=puzzle,
            solution=solution,
            constraints=constraints,
            given_mask=puzzle.grid != EMPTY,
            difficulty=data.get("difficulty", "medium"),
        )

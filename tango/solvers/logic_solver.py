"""Deduction-only solver: forced moves to a fixed point, never a guess."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Tuple
import logging

import numpy as np

from .base_solver import BaseSolver
from ..core.board import TangoBoard, EMPTY, MOON, SUN, opposite
from ..core.constraints import EdgeConstraints, Edge, Relation
from ..core.validator import is_grid_valid, line_violates_triples, line_violates_half_rule
from ..errors import Contradiction

logger = logging.getLogger(__name__)

ADJACENCY = "adjacency"
TRIPLES = "triples"
HALF_RULE = "half_rule"
END_PAIRS = "end_pairs"

RULES = (ADJACENCY, TRIPLES, HALF_RULE, END_PAIRS)

# Maps an index along a line to its (row, col) on the board.
CellOf = Callable[[int], Tuple[int, int]]


@dataclass
class DeductionResult:
    """
    Outcome of running deduction on a board.

    ``ok`` is False when a contradiction was found. ``stuck`` is True when
    empty cells remain (always True on failure).
    """
    ok: bool
    board: TangoBoard
    stuck: bool
    passes: int = 0
    deductions: Dict[str, int] = field(default_factory=dict)
    contradiction: Optional[Contradiction] = None

    @property
    def complete(self) -> bool:
        return self.ok and not self.stuck


def line_completable(line: np.ndarray) -> bool:
    """
    Check if the empty cells of a single line can be filled without
    breaking the triples or half rule.
    """
    work = np.array(line, dtype=np.int8)
    if line_violates_triples(work) or line_violates_half_rule(work):
        return False
    empties = [i for i in range(len(work)) if work[i] == EMPTY]

    def fill(k: int) -> bool:
        if k == len(empties):
            return True
        i = empties[k]
        for value in (SUN, MOON):
            work[i] = value
            if not line_violates_triples(work) and not line_violates_half_rule(work):
                if fill(k + 1):
                    return True
        work[i] = EMPTY
        return False

    return fill(0)


class LogicSolver(BaseSolver):
    """
    Solver that only applies forced inferences.

    Rules, applied in this order on every pass until nothing changes:
    - Adjacency: an edge with one filled end fixes the other end
    - Triples: ``X X _``, ``_ X X`` and ``X _ X`` force the gap to not-X
    - Half rule: a line holding n/2 of one symbol gets the other symbol
      in every remaining cell
    - End pairs: deductions on the outermost cells of a line, committed
      only when the other symbol leaves the line with no valid completion

    A puzzle counts as fair when this solver alone reaches the full
    solution.
    """

    name = "Logic"

    def __init__(self, use_end_pairs: bool = True, max_passes: int = 500):
        """
        Initialize the logic solver.

        Args:
            use_end_pairs: Enable the end-pair rule set.
            max_passes: Safety cap on the number of full passes.
        """
        super().__init__()
        self.use_end_pairs = use_end_pairs
        self.max_passes = max_passes

    def _solve(self, board: TangoBoard, constraints: EdgeConstraints) -> Optional[TangoBoard]:
        result = self.deduce(board, constraints)
        self.stats.iterations = result.passes
        self.stats.extra["deductions"] = dict(result.deductions)
        self.stats.extra["stuck"] = result.stuck
        self.stats.extra["contradiction"] = not result.ok
        if result.complete:
            return result.board
        return None

    def deduce(self, board: TangoBoard, constraints: Optional[EdgeConstraints] = None) -> DeductionResult:
        """
        Run all rules to a fixed point on a copy of board.

        Returns:
            DeductionResult with the working board, whether it is
            complete and how many cells each rule filled.
        """
        if constraints is None:
            constraints = EdgeConstraints(board.size)
        work = board.copy()
        edges = list(constraints.items())
        counts = {rule: 0 for rule in RULES}

        if not is_grid_valid(work, constraints):
            return DeductionResult(False, work, True, 0, counts)

        passes = 0
        try:
            while passes < self.max_passes:
                passes += 1
                changed = self._apply_all_once(work, edges, counts)
                # Safety net after each pass
                if not is_grid_valid(work, constraints):
                    logger.debug("Deduction produced an invalid board after pass %d", passes)
                    return DeductionResult(False, work, True, passes, counts)
                if not changed:
                    break
        except Contradiction as exc:
            logger.debug("Deduction stopped: %s", exc)
            return DeductionResult(False, work, True, passes, counts, exc)

        return DeductionResult(True, work, not work.is_complete(), passes, counts)

    def _apply_all_once(
        self,
        work: TangoBoard,
        edges: List[Tuple[Edge, Relation]],
        counts: Dict[str, int]
    ) -> bool:
        changed = False
        changed |= self._apply_adjacency(work, edges, counts)
        for line, cell_of in self._lines(work):
            changed |= self._apply_triples(work, line, cell_of, counts)
        for line, cell_of in self._lines(work):
            changed |= self._apply_half_rule(work, line, cell_of, counts)
        if self.use_end_pairs:
            for line, cell_of in self._lines(work):
                changed |= self._apply_end_pairs(work, line, cell_of, counts)
        return changed

    @staticmethod
    def _lines(work: TangoBoard) -> Iterator[Tuple[np.ndarray, CellOf]]:
        """Yield (view, index -> cell) for every row, then every column."""
        for r in range(work.size):
            yield work.grid[r, :], (lambda i, r=r: (r, i))
        for c in range(work.size):
            yield work.grid[:, c], (lambda i, c=c: (i, c))

    @staticmethod
    def _set_cell(work: TangoBoard, row: int, col: int, value: int) -> bool:
        """
        Write value if the cell is empty.

        Returns:
            True if the cell changed, False if it already held value.

        Raises:
            Contradiction: The cell holds the other symbol.
        """
        current = int(work.grid[row, col])
        if current == value:
            return False
        if current != EMPTY:
            raise Contradiction(row, col, current, value)
        work.grid[row, col] = value
        return True

    def _force(self, work: TangoBoard, cell: Tuple[int, int], value: int,
               rule: str, counts: Dict[str, int]) -> bool:
        if self._set_cell(work, cell[0], cell[1], value):
            counts[rule] += 1
            return True
        return False

    def _apply_adjacency(
        self,
        work: TangoBoard,
        edges: List[Tuple[Edge, Relation]],
        counts: Dict[str, int]
    ) -> bool:
        changed = False
        for edge, relation in edges:
            first, second = edge.cells()
            a = int(work.grid[first])
            b = int(work.grid[second])
            if a != EMPTY and b == EMPTY:
                value = a if relation == Relation.EQUAL else opposite(a)
                changed |= self._force(work, second, value, ADJACENCY, counts)
            elif a == EMPTY and b != EMPTY:
                value = b if relation == Relation.EQUAL else opposite(b)
                changed |= self._force(work, first, value, ADJACENCY, counts)
        return changed

    def _apply_triples(self, work: TangoBoard, line: np.ndarray,
                       cell_of: CellOf, counts: Dict[str, int]) -> bool:
        changed = False
        for i in range(len(line) - 2):
            a, b, c = int(line[i]), int(line[i + 1]), int(line[i + 2])
            # X X _
            if a != EMPTY and a == b and c == EMPTY:
                changed |= self._force(work, cell_of(i + 2), opposite(a), TRIPLES, counts)
            # _ X X
            elif a == EMPTY and b != EMPTY and b == c:
                changed |= self._force(work, cell_of(i), opposite(b), TRIPLES, counts)
            # X _ X
            elif a != EMPTY and a == c and b == EMPTY:
                changed |= self._force(work, cell_of(i + 1), opposite(a), TRIPLES, counts)
        return changed

    def _apply_half_rule(self, work: TangoBoard, line: np.ndarray,
                         cell_of: CellOf, counts: Dict[str, int]) -> bool:
        half = len(line) // 2
        suns = int(np.sum(line == SUN))
        moons = int(np.sum(line == MOON))
        if suns == half and moons < half:
            fill = MOON
        elif moons == half and suns < half:
            fill = SUN
        else:
            return False

        changed = False
        for i in np.flatnonzero(line == EMPTY):
            changed |= self._force(work, cell_of(int(i)), fill, HALF_RULE, counts)
        return changed

    def _apply_end_pairs(self, work: TangoBoard, line: np.ndarray,
                         cell_of: CellOf, counts: Dict[str, int]) -> bool:
        """
        End-of-line deductions.

        - first == last: the cells next to each end must differ from them
        - first == second-to-last, last empty: last may be forced to differ
        - last == second, first empty: first may be forced to differ

        Each deduction is made only if putting the same symbol there
        leaves the line without a valid completion.
        """
        n = len(line)
        first, last = int(line[0]), int(line[n - 1])
        targets: List[Tuple[int, int]] = []

        if first != EMPTY and first == last:
            targets.append((1, first))
            targets.append((n - 2, first))
        if first != EMPTY and first == int(line[n - 2]):
            targets.append((n - 1, first))
        if last != EMPTY and last == int(line[1]):
            targets.append((0, last))

        changed = False
        for index, same in targets:
            if int(line[index]) != EMPTY:
                continue
            trial = np.array(line, dtype=np.int8)
            trial[index] = same
            if not line_completable(trial):
                changed |= self._force(work, cell_of(index), opposite(same), END_PAIRS, counts)
        return changed


def logic_solve(
    board: TangoBoard,
    constraints: Optional[EdgeConstraints] = None,
    use_end_pairs: bool = True,
    max_passes: int = 500
) -> DeductionResult:
    """Apply deduction to a copy of board and return the result."""
    return LogicSolver(use_end_pairs=use_end_pairs, max_passes=max_passes).deduce(board, constraints)


def logic_solves_completely(
    puzzle: TangoBoard,
    solution: TangoBoard,
    constraints: Optional[EdgeConstraints] = None,
    use_end_pairs: bool = True,
    max_passes: int = 500
) -> bool:
    """
    Check if deduction alone turns puzzle into exactly solution.

    A different valid completion does not count.
    """
    result = logic_solve(puzzle, constraints, use_end_pairs, max_passes)
    return result.complete and result.board == solution

"""Unit tests for the backtracking and logic solvers."""

import numpy as np
import pytest

from tango.core.board import TangoBoard, EMPTY, MOON, SUN
from tango.core.constraints import Edge, EdgeConstraints, Relation
from tango.core.rng import RandomSource
from tango.errors import Contradiction
from tango.solvers import (
    BaseSolver,
    BacktrackingSolver,
    LogicSolver,
    solve_one,
    logic_solve,
    logic_solves_completely,
)
from tango.solvers.logic_solver import line_completable, ADJACENCY, HALF_RULE, END_PAIRS


SOLUTION = (
    "SSMSMM"
    "MMSMSS"
    "SMSMSM"
    "MSMSMS"
    "SMMSSM"
    "MSSMMS"
)


def _board_with(cells, size=6):
    board = TangoBoard(size)
    for (row, col), value in cells.items():
        board.set(row, col, value)
    return board


class TestSolverHarness:
    """Tests for the shared solve() wrapper."""

    def test_error_recorded(self):
        class BrokenSolver(BaseSolver):
            name = "Broken"

            def _solve(self, board, constraints):
                raise RuntimeError("boom")

        solution, stats = BrokenSolver().solve(TangoBoard())
        assert solution is None
        assert not stats.solved
        assert stats.extra["error"] == "boom"
        assert stats.algorithm == "Broken"

    def test_solution_must_keep_givens(self):
        """A valid full board that ignores the puzzle's givens is not a solve."""
        class WrongBoardSolver(BaseSolver):
            def _solve(self, board, constraints):
                return TangoBoard.from_string(SOLUTION)

        puzzle = _board_with({(0, 0): MOON})
        solution, stats = WrongBoardSolver().solve(puzzle, track_memory=False)
        assert solution is not None
        assert not stats.solved

    def test_memory_tracked(self):
        _, stats = BacktrackingSolver(rng=RandomSource(2)).solve(TangoBoard(4))
        assert stats.solved
        assert stats.memory_bytes > 0
        assert stats.time_seconds > 0


class TestBacktrackingSolver:
    """Tests for the backtracking solver."""

    def test_fills_empty_board(self):
        """An empty board gets a complete valid solution."""
        solver = BacktrackingSolver(rng=RandomSource(7))
        solution, stats = solver.solve(TangoBoard())

        assert stats.solved
        assert solution is not None
        assert solution.is_solved()
        assert stats.iterations > 0
        assert stats.nodes_explored > 0

    def test_completion_agrees_with_input(self):
        """Every filled cell of the input survives in the solution."""
        puzzle = TangoBoard.from_string(SOLUTION)
        for row, col in [(0, 0), (1, 3), (2, 2), (3, 5), (4, 1), (5, 4), (5, 5)]:
            puzzle.clear(row, col)

        solution = solve_one(puzzle, EdgeConstraints(6), rng=RandomSource(1))

        assert solution is not None
        assert solution.is_solved(EdgeConstraints(6))
        filled = puzzle.grid != EMPTY
        assert np.array_equal(solution.grid[filled], puzzle.grid[filled])

    def test_input_not_modified(self):
        puzzle = _board_with({(0, 0): SUN})
        before = puzzle.copy()
        solve_one(puzzle, rng=RandomSource(3))
        assert puzzle == before

    def test_respects_constraints(self):
        constraints = EdgeConstraints(6)
        constraints.set(Edge("h", 0, 0), Relation.NOT_EQUAL)
        constraints.set(Edge("v", 3, 3), Relation.EQUAL)

        solution = solve_one(TangoBoard(), constraints, rng=RandomSource(11))

        assert solution is not None
        assert solution.get(0, 0) != solution.get(0, 1)
        assert solution.get(3, 3) == solution.get(4, 3)

    def test_no_completion(self):
        """Two EQUAL edges in a row force a triple, so nothing completes."""
        constraints = EdgeConstraints(6)
        constraints.set(Edge("h", 0, 0), Relation.EQUAL)
        constraints.set(Edge("h", 0, 1), Relation.EQUAL)

        assert solve_one(TangoBoard(), constraints) is None

    def test_invalid_input(self):
        board = _board_with({(0, 0): SUN, (0, 1): SUN, (0, 2): SUN})
        solution, stats = BacktrackingSolver().solve(board)
        assert solution is None
        assert not stats.solved

    def test_different_seeds_vary(self):
        """Randomized branch order gives more than one solution across seeds."""
        seen = {
            solve_one(TangoBoard(), rng=RandomSource(seed)).to_string()
            for seed in range(8)
        }
        assert len(seen) > 1


class TestLogicRules:
    """Tests for each deduction rule."""

    def test_pair_forces_next_cell(self):
        """S S _ becomes S S M."""
        result = logic_solve(_board_with({(0, 0): SUN, (0, 1): SUN}))
        assert result.ok
        assert result.board.get(0, 2) == MOON

    def test_pair_forces_previous_cell(self):
        """_ M M becomes S M M."""
        result = logic_solve(_board_with({(3, 2): MOON, (3, 3): MOON}))
        assert result.board.get(3, 1) == SUN
        assert result.board.get(3, 4) == SUN

    def test_gap_forces_middle(self):
        """S _ S in a column becomes S M S."""
        result = logic_solve(_board_with({(1, 4): SUN, (3, 4): SUN}))
        assert result.board.get(2, 4) == MOON

    def test_half_rule_completion(self):
        """Three suns in a row force moons in every other cell."""
        result = logic_solve(_board_with({(0, 0): SUN, (0, 1): SUN, (0, 3): SUN}))

        assert result.ok
        assert result.board.get_row(0).tolist() == [SUN, SUN, MOON, SUN, MOON, MOON]
        assert result.deductions[HALF_RULE] >= 2

    def test_adjacency_equal(self):
        constraints = EdgeConstraints(6)
        constraints.set(Edge("h", 2, 2), Relation.EQUAL)
        result = logic_solve(_board_with({(2, 2): MOON}), constraints)

        assert result.board.get(2, 3) == MOON
        assert result.deductions[ADJACENCY] == 1

    def test_adjacency_not_equal(self):
        constraints = EdgeConstraints(6)
        constraints.set(Edge("h", 2, 2), Relation.NOT_EQUAL)
        result = logic_solve(_board_with({(2, 2): MOON}), constraints)

        assert result.board.get(2, 3) == SUN

    def test_adjacency_works_backwards(self):
        constraints = EdgeConstraints(6)
        constraints.set(Edge("v", 0, 5), Relation.NOT_EQUAL)
        result = logic_solve(_board_with({(1, 5): SUN}), constraints)

        assert result.board.get(0, 5) == MOON

    def test_end_pairs_matching_ends(self):
        """S _ _ _ _ S forces moons next to both ends."""
        board = _board_with({(0, 0): SUN, (0, 5): SUN})

        with_rule = logic_solve(board)
        assert with_rule.board.get(0, 1) == MOON
        assert with_rule.board.get(0, 4) == MOON
        assert with_rule.deductions[END_PAIRS] == 2

        without_rule = logic_solve(board, use_end_pairs=False)
        assert without_rule.board.get(0, 1) == EMPTY
        assert without_rule.board.get(0, 4) == EMPTY

    def test_end_pairs_first_and_second_to_last(self):
        """M _ _ _ M _ forces a sun in the last cell."""
        board = _board_with({(2, 0): MOON, (2, 4): MOON})

        assert logic_solve(board).board.get(2, 5) == SUN
        assert logic_solve(board, use_end_pairs=False).board.get(2, 5) == EMPTY

    def test_end_pairs_in_column(self):
        """The last cell and the second cell of a column force the first."""
        board = _board_with({(1, 3): MOON, (5, 3): MOON})
        assert logic_solve(board).board.get(0, 3) == SUN

    def test_line_completable(self):
        assert line_completable(np.array([SUN, EMPTY, EMPTY, EMPTY, EMPTY, SUN]))
        assert not line_completable(np.array([SUN, SUN, EMPTY, EMPTY, EMPTY, SUN]))
        assert not line_completable(np.array([SUN, SUN, SUN, EMPTY, EMPTY, EMPTY]))
        assert line_completable(np.array([EMPTY] * 8))


class TestLogicSolver:
    """Tests for the fixed-point driver."""

    def test_set_cell_primitive(self):
        board = _board_with({(0, 0): SUN})
        assert LogicSolver._set_cell(board, 0, 0, SUN) is False
        assert LogicSolver._set_cell(board, 0, 1, MOON) is True
        with pytest.raises(Contradiction):
            LogicSolver._set_cell(board, 0, 0, MOON)

    def test_contradiction_reported(self):
        """An EQUAL edge that completes a triple makes deduction fail."""
        constraints = EdgeConstraints(6)
        constraints.set(Edge("h", 0, 1), Relation.EQUAL)
        board = _board_with({(0, 0): SUN, (0, 1): SUN})

        result = logic_solve(board, constraints)

        assert not result.ok
        assert result.stuck
        assert not result.complete

    def test_invalid_input_fails(self):
        board = _board_with({(0, 0): SUN, (0, 1): SUN, (0, 2): SUN})
        assert not logic_solve(board).ok

    def test_input_not_modified(self):
        board = _board_with({(0, 0): SUN, (0, 1): SUN})
        logic_solve(board)
        assert board.is_empty(0, 2)

    def test_stuck_on_empty_board(self):
        result = logic_solve(TangoBoard())
        assert result.ok
        assert result.stuck
        assert result.board.count_filled() == 0

    def test_solves_nearly_full_board(self):
        solution = TangoBoard.from_string(SOLUTION)
        puzzle = solution.copy()
        for row, col in [(0, 0), (2, 3), (4, 5), (5, 1)]:
            puzzle.clear(row, col)

        assert logic_solves_completely(puzzle, solution)

        found, stats = LogicSolver().solve(puzzle)
        assert stats.solved
        assert found == solution

    def test_exact_match_required(self):
        """Reaching a different full board does not count."""
        solution = TangoBoard.from_string(SOLUTION)
        other = solution.copy()
        other.set(0, 0, MOON)
        assert not logic_solves_completely(solution, other)

    def test_stuck_puzzle_not_solved(self):
        found, stats = LogicSolver().solve(TangoBoard())
        assert found is None
        assert not stats.solved
        assert stats.extra["stuck"]
        assert not stats.extra["contradiction"]

    def test_contradiction_flagged_in_stats(self):
        constraints = EdgeConstraints(6)
        constraints.set(Edge("h", 0, 1), Relation.EQUAL)
        board = _board_with({(0, 0): SUN, (0, 1): SUN})

        found, stats = LogicSolver().solve(board, constraints)

        assert found is None
        assert stats.extra["contradiction"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

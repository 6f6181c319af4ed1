"""Unit tests for the Tango board, edge constraints and validation."""

import numpy as np
import pytest

from tango.core.board import TangoBoard, EMPTY, MOON, SUN, opposite
from tango.core.constraints import Edge, EdgeConstraints, Relation
from tango.core.rng import RandomSource
from tango.core.validator import (
    line_violates_triples,
    line_violates_half_rule,
    violates_adjacency,
    is_grid_valid,
    is_solved,
    candidates_for_cell,
    count_solutions,
    has_unique_solution,
    validate_solution,
)


# Rows come in complementary pairs, so every column alternates pairwise
SOLUTION = (
    "SSMSMM"
    "MMSMSS"
    "SMSMSM"
    "MSMSMS"
    "SMMSSM"
    "MSSMMS"
)

CHECKERBOARD = "SMSMSM" "MSMSMS" * 2 + "SMSMSM" "MSMSMS"


class TestTangoBoard:
    """Tests for TangoBoard class."""

    def test_create_empty_board(self):
        """Test creating an empty 6x6 board."""
        board = TangoBoard()
        assert board.size == 6
        assert board.half == 3
        assert board.count_empty() == 36
        assert board.count_filled() == 0

    def test_rejects_odd_or_tiny_size(self):
        """Sizes must be even and at least 4."""
        with pytest.raises(ValueError):
            TangoBoard(size=5)
        with pytest.raises(ValueError):
            TangoBoard(size=2)

    def test_set_and_get(self):
        """Test setting and getting values."""
        board = TangoBoard()
        board.set(0, 0, SUN)
        assert board.get(0, 0) == SUN
        assert not board.is_empty(0, 0)

        board.clear(0, 0)
        assert board.is_empty(0, 0)

    def test_set_rejects_unknown_value(self):
        board = TangoBoard()
        with pytest.raises(ValueError):
            board.set(0, 0, 7)

    def test_from_string_round_trip(self):
        """Test creating board from string and back."""
        board = TangoBoard.from_string(SOLUTION)
        assert board.size == 6
        assert board.get(0, 0) == SUN
        assert board.get(0, 2) == MOON
        assert board.to_string() == SOLUTION

    def test_from_string_ignores_whitespace(self):
        board = TangoBoard.from_string("S... .... .... ...M")
        assert board.size == 4
        assert board.get(3, 3) == MOON

    def test_from_string_rejects_bad_input(self):
        with pytest.raises(ValueError):
            TangoBoard.from_string("S" * 35, size=6)
        with pytest.raises(ValueError):
            TangoBoard.from_string("X" * 36)

    def test_copy(self):
        """Test board copy."""
        board = TangoBoard()
        board.set(4, 4, MOON)
        copy = board.copy()

        assert copy.get(4, 4) == MOON

        # Modify copy, original should be unchanged
        copy.set(4, 4, SUN)
        assert board.get(4, 4) == MOON

    def test_lines_cover_rows_then_columns(self):
        board = TangoBoard.from_string(SOLUTION)
        lines = list(board.lines())
        assert len(lines) == 12
        assert np.array_equal(lines[0], board.get_row(0))
        assert np.array_equal(lines[6], board.get_col(0))

    def test_opposite(self):
        assert opposite(SUN) == MOON
        assert opposite(MOON) == SUN
        assert opposite(EMPTY) == EMPTY


class TestEdgeConstraints:
    """Tests for the relation tables."""

    def test_table_shapes(self):
        constraints = EdgeConstraints(6)
        assert constraints.horizontal.shape == (6, 5)
        assert constraints.vertical.shape == (5, 6)
        assert constraints.count() == 0

    def test_set_get_and_items(self):
        constraints = EdgeConstraints(6)
        constraints.set(Edge("h", 2, 2), Relation.EQUAL)
        constraints.set(Edge("v", 4, 5), Relation.NOT_EQUAL)

        assert constraints.get(Edge("h", 2, 2)) == Relation.EQUAL
        assert constraints.get(Edge("h", 0, 0)) == Relation.NONE
        assert list(constraints.items()) == [
            (Edge("h", 2, 2), Relation.EQUAL),
            (Edge("v", 4, 5), Relation.NOT_EQUAL),
        ]

    def test_out_of_bounds_edge(self):
        constraints = EdgeConstraints(6)
        with pytest.raises(ValueError):
            constraints.set(Edge("h", 0, 5), Relation.EQUAL)
        with pytest.raises(ValueError):
            constraints.set(Edge("v", 5, 0), Relation.EQUAL)

    def test_edge_cells(self):
        assert Edge("h", 1, 2).cells() == ((1, 2), (1, 3))
        assert Edge("v", 1, 2).cells() == ((1, 2), (2, 2))

    def test_text_and_dict_round_trip(self):
        constraints = EdgeConstraints(4)
        constraints.set(Edge("h", 0, 1), Relation.EQUAL)
        constraints.set(Edge("v", 2, 3), Relation.NOT_EQUAL)

        horizontal, vertical = constraints.to_strings()
        assert horizontal == ".=./.../.../..."
        assert vertical == "..../..../...x"
        assert EdgeConstraints.from_strings(4, horizontal, vertical) == constraints
        assert EdgeConstraints.from_dict(constraints.to_dict()) == constraints

    def test_from_dict_rejects_unknown_relation(self):
        data = EdgeConstraints(4).to_dict()
        data["horizontal"][1][2] = 3
        with pytest.raises(ValueError):
            EdgeConstraints.from_dict(data)

        data = EdgeConstraints(4).to_dict()
        data["vertical"][0][0] = -1
        with pytest.raises(ValueError):
            EdgeConstraints.from_dict(data)


class TestLineRules:
    """Tests for the row/column predicates."""

    def test_triples(self):
        assert line_violates_triples(np.array([SUN, SUN, SUN, MOON, EMPTY, EMPTY]))
        assert line_violates_triples(np.array([SUN, MOON, MOON, MOON, EMPTY, EMPTY]))
        assert not line_violates_triples(np.array([SUN, SUN, MOON, SUN, SUN, MOON]))
        assert not line_violates_triples(np.array([EMPTY] * 6))

    def test_half_rule(self):
        assert line_violates_half_rule(np.array([SUN, SUN, SUN, SUN, EMPTY, EMPTY]))
        assert not line_violates_half_rule(np.array([SUN, SUN, SUN, MOON, MOON, EMPTY]))
        assert not line_violates_half_rule(np.array([SUN, MOON, SUN, MOON, SUN, MOON]))
        assert not line_violates_half_rule(np.array([EMPTY] * 6))


class TestValidator:
    """Tests for whole-board validation."""

    def test_scenario_solved_boards(self):
        """Valid full boards are solved with no constraints."""
        for text in (SOLUTION, CHECKERBOARD):
            board = TangoBoard.from_string(text)
            assert is_solved(board, EdgeConstraints(6))
            assert is_solved(board)
            assert board.is_solved()

    def test_run_of_four_rejected(self):
        """Four suns in one full row are rejected."""
        board = TangoBoard.from_string(SOLUTION)
        board.set(0, 2, SUN)  # row 0 becomes S S S S M M
        assert not is_grid_valid(board)
        assert not is_solved(board)

    def test_unbalanced_full_board_without_triples(self):
        """A full board whose only fault is balance is rejected by the half rule."""
        board = TangoBoard.from_string(SOLUTION)
        board.set(0, 5, SUN)  # row 0 becomes S S M S M S, column 5 S S M S M S

        row, col = board.get_row(0), board.get_col(5)
        for line in board.lines():
            assert not line_violates_triples(line)
        assert line_violates_half_rule(row)
        assert line_violates_half_rule(col)

        assert board.is_complete()
        assert not is_grid_valid(board)
        assert not is_grid_valid(board, EdgeConstraints(6))
        assert not is_solved(board)

    def test_grid_check_agrees_with_line_rules(self):
        """Whole-board validity is exactly the line rules applied to every line."""
        source = RandomSource(17)
        for _ in range(200):
            board = TangoBoard()
            for row in range(6):
                for col in range(6):
                    pick = source.randbelow(3)
                    board.set(row, col, (EMPTY, MOON, SUN)[pick])
            expected = not any(
                line_violates_triples(line) or line_violates_half_rule(line)
                for line in board.lines()
            )
            assert is_grid_valid(board) == expected

    def test_triple_in_column_rejected(self):
        board = TangoBoard()
        for r in range(3):
            board.set(r, 4, MOON)
        assert not is_grid_valid(board)

    def test_empty_board_is_valid_not_solved(self):
        board = TangoBoard()
        assert is_grid_valid(board)
        assert not is_solved(board)

    def test_adjacency(self):
        """EQUAL and NOT_EQUAL edges only bite when both cells are filled."""
        board = TangoBoard()
        constraints = EdgeConstraints(6)
        constraints.set(Edge("h", 0, 0), Relation.EQUAL)
        constraints.set(Edge("v", 2, 3), Relation.NOT_EQUAL)

        board.set(0, 0, SUN)
        assert not violates_adjacency(board, constraints)
        board.set(0, 1, MOON)
        assert violates_adjacency(board, constraints)
        assert not is_grid_valid(board, constraints)

        board.set(0, 1, SUN)
        board.set(2, 3, MOON)
        board.set(3, 3, MOON)
        assert violates_adjacency(board, constraints)
        board.set(3, 3, SUN)
        assert not violates_adjacency(board, constraints)
        assert is_grid_valid(board, constraints)

    def test_invalid_stays_invalid(self):
        """Filling more cells never repairs a broken board."""
        board = TangoBoard()
        board.set(0, 0, SUN)
        board.set(0, 1, SUN)
        board.set(0, 2, SUN)
        assert not is_grid_valid(board)

        for value in (SUN, MOON):
            work = board.copy()
            for row, col in work.get_empty_cells():
                work.set(row, col, value)
                assert not is_grid_valid(work)

    def test_candidates_for_cell(self):
        board = TangoBoard()
        board.set(0, 0, SUN)
        board.set(0, 1, SUN)
        assert candidates_for_cell(board, None, 0, 2) == [MOON]
        assert candidates_for_cell(board, None, 0, 0) == []
        assert sorted(candidates_for_cell(board, None, 5, 5)) == [MOON, SUN]
        # The trial placements are undone
        assert board.is_empty(0, 2)

    def test_count_solutions(self):
        full = TangoBoard.from_string(SOLUTION)
        assert count_solutions(full) == 1
        assert has_unique_solution(full)

        assert count_solutions(TangoBoard(4), limit=2) == 2
        assert not has_unique_solution(TangoBoard(4))

        broken = TangoBoard.from_string("SSS." + "." * 12)
        assert count_solutions(broken) == 0

    def test_validate_solution(self):
        solution = TangoBoard.from_string(SOLUTION)
        puzzle = solution.copy()
        puzzle.clear(0, 0)
        puzzle.clear(3, 4)
        assert validate_solution(puzzle, solution)

        other = TangoBoard.from_string(CHECKERBOARD)
        assert not validate_solution(puzzle, other)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

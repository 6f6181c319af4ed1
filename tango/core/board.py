"""Tango board representation for even-sized Sun/Moon grids."""

from __future__ import annotations
import numpy as np
from typing import List, Tuple, Optional, Iterator, TYPE_CHECKING

if TYPE_CHECKING:
    from .constraints import EdgeConstraints


EMPTY = -1
MOON = 0
SUN = 1

SYMBOLS = (SUN, MOON)

_CHARS = {EMPTY: '.', MOON: 'M', SUN: 'S'}
_PARSE = {'.': EMPTY, '_': EMPTY, 'M': MOON, 'S': SUN}


def opposite(value: int) -> int:
    """Return the other symbol; EMPTY stays EMPTY."""
    if value == SUN:
        return MOON
    if value == MOON:
        return SUN
    return EMPTY


class TangoBoard:
    """
    Represents an n x n Tango board.

    Each cell is EMPTY, SUN or MOON. The size must be even so that every
    completed row and column can hold exactly n/2 of each symbol.
    """

    def __init__(self, size: int = 6, grid: Optional[np.ndarray] = None):
        """
        Initialize a Tango board.

        Args:
            size: Board size. Must be even and at least 4.
            grid: Optional initial grid. If None, creates empty board.
        """
        if size < 4 or size % 2 != 0:
            raise ValueError(f"Size must be an even number >= 4, got {size}")

        self.size = size
        self.half = size // 2

        if grid is not None:
            grid = np.asarray(grid)
            if grid.shape != (size, size):
                raise ValueError(f"Grid shape must be ({size}, {size})")
            if not np.isin(grid, (EMPTY, MOON, SUN)).all():
                raise ValueError("Grid values must be EMPTY, MOON or SUN")
            self.grid = grid.astype(np.int8)
        else:
            self.grid = np.full((size, size), EMPTY, dtype=np.int8)

    def copy(self) -> TangoBoard:
        """Create a deep copy of the board."""
        new_board = TangoBoard(self.size)
        new_board.grid = self.grid.copy()
        return new_board

    def get(self, row: int, col: int) -> int:
        """Get value at position (row, col)."""
        return int(self.grid[row, col])

    def set(self, row: int, col: int, value: int) -> None:
        """Set value at position (row, col). Use EMPTY to clear."""
        if value not in (EMPTY, MOON, SUN):
            raise ValueError(f"Value must be EMPTY, MOON or SUN, got {value}")
        self.grid[row, col] = value

    def clear(self, row: int, col: int) -> None:
        """Clear the cell at position (row, col)."""
        self.grid[row, col] = EMPTY

    def is_empty(self, row: int, col: int) -> bool:
        return self.grid[row, col] == EMPTY

    def get_row(self, row: int) -> np.ndarray:
        """Get all values in a row (a view, do not modify)."""
        return self.grid[row, :]

    def get_col(self, col: int) -> np.ndarray:
        """Get all values in a column (a view, do not modify)."""
        return self.grid[:, col]

    def lines(self) -> Iterator[np.ndarray]:
        """Yield every row followed by every column."""
        for i in range(self.size):
            yield self.grid[i, :]
        for j in range(self.size):
            yield self.grid[:, j]

    def get_empty_cells(self) -> List[Tuple[int, int]]:
        """Get list of all empty cell positions in row-major order."""
        rows, cols = np.nonzero(self.grid == EMPTY)
        return [(int(r), int(c)) for r, c in zip(rows, cols)]

    def count_empty(self) -> int:
        return int(np.sum(self.grid == EMPTY))

    def count_filled(self) -> int:
        return int(np.sum(self.grid != EMPTY))

    def is_complete(self) -> bool:
        """Check if all cells are filled."""
        return self.count_empty() == 0

    def is_valid(self, constraints: Optional[EdgeConstraints] = None) -> bool:
        """Check the board against the line rules and optional edge constraints."""
        from .validator import is_grid_valid
        return is_grid_valid(self, constraints)

    def is_solved(self, constraints: Optional[EdgeConstraints] = None) -> bool:
        """Check if the puzzle is completely and correctly solved."""
        from .validator import is_solved
        return is_solved(self, constraints)

    def to_string(self) -> str:
        """
        Convert board to a compact row-major string.
        Uses '.' for empty cells, 'S' for sun and 'M' for moon.
        """
        return ''.join(_CHARS[int(v)] for v in self.grid.flat)

    @classmethod
    def from_string(cls, s: str, size: Optional[int] = None) -> TangoBoard:
        """
        Create a board from a string representation.

        Args:
            s: String of size*size cells. '.' or '_' for empty,
               'S' for sun, 'M' for moon. Whitespace is ignored.
            size: Board size. Inferred from the string length if omitted.
        """
        s = ''.join(s.split())
        if size is None:
            size = int(round(np.sqrt(len(s))))
        if len(s) != size * size:
            raise ValueError(f"String length must be {size*size}, got {len(s)}")

        grid = np.full((size, size), EMPTY, dtype=np.int8)
        for idx, c in enumerate(s):
            key = c.upper()
            if key not in _PARSE:
                raise ValueError(f"Unknown cell character {c!r}")
            grid[idx // size, idx % size] = _PARSE[key]

        return cls(size, grid)

    @classmethod
    def from_2d_list(cls, data: List[List[int]]) -> TangoBoard:
        """Create a board from a 2D list of EMPTY/MOON/SUN values."""
        arr = np.array(data, dtype=np.int8)
        size = arr.shape[0]
        return cls(size, arr)

    def to_2d_list(self) -> List[List[int]]:
        return self.grid.astype(int).tolist()

    def __str__(self) -> str:
        """Pretty-print the board."""
        horizontal_sep = '+' + '-' * (self.size * 2 + 1) + '+'
        lines = [horizontal_sep]
        for i in range(self.size):
            row_str = '|'
            for j in range(self.size):
                row_str += ' ' + _CHARS[int(self.grid[i, j])]
            lines.append(row_str + ' |')
        lines.append(horizontal_sep)
        return '\n'.join(lines)

    def __repr__(self) -> str:
        return f"TangoBoard(size={self.size}, filled={self.count_filled()})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TangoBoard):
            return False
        return self.size == other.size and np.array_equal(self.grid, other.grid)

    def __hash__(self) -> int:
        return hash(self.to_string())

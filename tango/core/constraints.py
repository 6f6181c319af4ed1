"""Equal / not-equal constraints on the edges between adjacent cells."""

from __future__ import annotations
from enum import IntEnum
from typing import Dict, Any, Iterator, List, NamedTuple, Tuple

import numpy as np


class Relation(IntEnum):
    """Label attached to an edge between two neighbouring cells."""
    NONE = 0
    EQUAL = 1
    NOT_EQUAL = 2

    @property
    def symbol(self) -> str:
        return {Relation.NONE: '.', Relation.EQUAL: '=', Relation.NOT_EQUAL: 'x'}[self]

    @classmethod
    def from_symbol(cls, ch: str) -> Relation:
        for rel in cls:
            if rel.symbol == ch:
                return rel
        raise ValueError(f"Unknown relation symbol {ch!r}")


HORIZONTAL = "h"
VERTICAL = "v"


class Edge(NamedTuple):
    """
    An edge between two grid-adjacent cells.

    Horizontal edges join (row, col) and (row, col + 1); vertical edges
    join (row, col) and (row + 1, col).
    """
    kind: str
    row: int
    col: int

    def cells(self) -> Tuple[Tuple[int, int], Tuple[int, int]]:
        if self.kind == HORIZONTAL:
            return (self.row, self.col), (self.row, self.col + 1)
        return (self.row, self.col), (self.row + 1, self.col)

    def in_bounds(self, size: int) -> bool:
        if self.kind == HORIZONTAL:
            return 0 <= self.row < size and 0 <= self.col < size - 1
        return 0 <= self.row < size - 1 and 0 <= self.col < size


class EdgeConstraints:
    """
    Horizontal and vertical relation tables for an n x n board.

    ``horizontal`` has shape (n, n-1) and ``vertical`` has shape (n-1, n).
    Tables are written once when a puzzle is generated and only read
    afterwards.
    """

    def __init__(self, size: int):
        self.size = size
        self.horizontal = np.zeros((size, size - 1), dtype=np.int8)
        self.vertical = np.zeros((size - 1, size), dtype=np.int8)

    def _table(self, kind: str) -> np.ndarray:
        if kind == HORIZONTAL:
            return self.horizontal
        if kind == VERTICAL:
            return self.vertical
        raise ValueError(f"Unknown edge kind {kind!r}")

    def get(self, edge: Edge) -> Relation:
        return Relation(int(self._table(edge.kind)[edge.row, edge.col]))

    def set(self, edge: Edge, relation: Relation) -> None:
        if not edge.in_bounds(self.size):
            raise ValueError(f"Edge {edge} is outside a {self.size}x{self.size} board")
        self._table(edge.kind)[edge.row, edge.col] = int(relation)

    def items(self) -> Iterator[Tuple[Edge, Relation]]:
        """Yield (edge, relation) for every constrained edge, horizontal first."""
        for kind, table in ((HORIZONTAL, self.horizontal), (VERTICAL, self.vertical)):
            rows, cols = np.nonzero(table)
            for r, c in zip(rows, cols):
                yield Edge(kind, int(r), int(c)), Relation(int(table[r, c]))

    def count(self) -> int:
        """Number of constrained edges."""
        return int(np.count_nonzero(self.horizontal) + np.count_nonzero(self.vertical))

    def copy(self) -> EdgeConstraints:
        new = EdgeConstraints(self.size)
        new.horizontal = self.horizontal.copy()
        new.vertical = self.vertical.copy()
        return new

    def to_dict(self) -> Dict[str, Any]:
        return {
            "size": self.size,
            "horizontal": self.horizontal.astype(int).tolist(),
            "vertical": self.vertical.astype(int).tolist(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> EdgeConstraints:
        new = cls(int(data["size"]))
        horizontal = np.array(data["horizontal"], dtype=np.int8)
        vertical = np.array(data["vertical"], dtype=np.int8)
        if horizontal.shape != new.horizontal.shape or vertical.shape != new.vertical.shape:
            raise ValueError("Constraint table shapes do not match board size")
        known = [int(r) for r in Relation]
        if not (np.isin(horizontal, known).all() and np.isin(vertical, known).all()):
            raise ValueError(f"Constraint values must be one of {known}")
        new.horizontal = horizontal
        new.vertical = vertical
        return new

    def to_strings(self) -> Tuple[str, str]:
        """Compact text form: one '/'-separated string per table using '.', '=', 'x'."""
        def encode(table: np.ndarray) -> str:
            return '/'.join(
                ''.join(Relation(int(v)).symbol for v in row) for row in table
            )
        return encode(self.horizontal), encode(self.vertical)

    @classmethod
    def from_strings(cls, size: int, horizontal: str, vertical: str) -> EdgeConstraints:
        """
        Parse the text form produced by :meth:`to_strings`.

        An empty string leaves that whole table unconstrained.
        """
        new = cls(size)
        for table, text in ((new.horizontal, horizontal), (new.vertical, vertical)):
            if not text:
                continue
            rows: List[str] = text.split('/')
            if len(rows) != table.shape[0] or any(len(r) != table.shape[1] for r in rows):
                raise ValueError(f"Constraint text {text!r} does not fit shape {table.shape}")
            for i, row in enumerate(rows):
                for j, ch in enumerate(row):
                    table[i, j] = int(Relation.from_symbol(ch))
        return new

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EdgeConstraints):
            return False
        return (
            self.size == other.size
            and np.array_equal(self.horizontal, other.horizontal)
            and np.array_equal(self.vertical, other.vertical)
        )

    def __repr__(self) -> str:
        return f"EdgeConstraints(size={self.size}, edges={self.count()})"

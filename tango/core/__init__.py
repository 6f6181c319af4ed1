"""Core module for Tango board representation and validation."""

from .board import TangoBoard, EMPTY, MOON, SUN, opposite
from .constraints import Edge, EdgeConstraints, Relation
from .rng import RandomSource
from .validator import (
    is_grid_valid,
    is_solved,
    line_violates_triples,
    line_violates_half_rule,
    violates_adjacency,
    has_unique_solution,
)

__all__ = [
    "TangoBoard",
    "EMPTY",
    "MOON",
    "SUN",
    "opposite",
    "Edge",
    "EdgeConstraints",
    "Relation",
    "RandomSource",
    "is_grid_valid",
    "is_solved",
    "line_violates_triples",
    "line_violates_half_rule",
    "violates_adjacency",
    "has_unique_solution",
]

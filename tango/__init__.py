"""Tango (Sun/Moon) binary puzzle generator and solvers."""

from .core import TangoBoard, EdgeConstraints, Edge, Relation, EMPTY, MOON, SUN
from .core.validator import is_grid_valid, is_solved
from .solvers import solve_one, logic_solve, logic_solves_completely
from .generator import Difficulty, PuzzlePackage, TangoGenerator, generate_puzzle

__version__ = "1.0.0"

__all__ = [
    "TangoBoard",
    "EdgeConstraints",
    "Edge",
    "Relation",
    "EMPTY",
    "MOON",
    "SUN",
    "is_grid_valid",
    "is_solved",
    "solve_one",
    "logic_solve",
    "logic_solves_completely",
    "Difficulty",
    "PuzzlePackage",
    "TangoGenerator",
    "generate_puzzle",
]

"""Solvers module for Tango puzzles."""

from .base_solver import BaseSolver, SolverStats
from .backtracking_solver import BacktrackingSolver, solve_one
from .logic_solver import (
    LogicSolver,
    DeductionResult,
    logic_solve,
    logic_solves_completely,
)

__all__ = [
    "BaseSolver",
    "SolverStats",
    "BacktrackingSolver",
    "LogicSolver",
    "DeductionResult",
    "solve_one",
    "logic_solve",
    "logic_solves_completely",
]

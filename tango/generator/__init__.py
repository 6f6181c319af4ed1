"""Generator module for creating Tango puzzles."""

from .generator import (
    TangoGenerator,
    Difficulty,
    DifficultySettings,
    GeneratorConfig,
    GenerationReport,
    generate_puzzle,
    render_package,
)
from .package import PuzzlePackage
from .sampler import ConstraintSampler

__all__ = [
    "TangoGenerator",
    "Difficulty",
    "DifficultySettings",
    "GeneratorConfig",
    "GenerationReport",
    "PuzzlePackage",
    "ConstraintSampler",
    "generate_puzzle",
    "render_package",
]

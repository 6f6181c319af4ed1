"""Tango puzzle generator with configurable difficulty levels."""

from __future__ import annotations
import json
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import numpy as np

from .package import PuzzlePackage
from .sampler import ConstraintSampler
from ..core.board import TangoBoard
from ..core.constraints import EdgeConstraints
from ..core.rng import RandomSource, ensure_source
from ..errors import GenerationExhausted, GenerationFailure, NoSolutionFound
from ..solvers.backtracking_solver import BacktrackingSolver
from ..solvers.logic_solver import LogicSolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DifficultySettings:
    """
    Tuning for one difficulty tier.

    ``givens_target`` is where clue removal stops; the logic gate is what
    really decides how many clues remain. Higher values of both fields
    mean an easier puzzle.
    """
    givens_target: int
    edge_density: float

    def __post_init__(self):
        if self.givens_target < 0:
            raise ValueError(f"givens_target must be >= 0, got {self.givens_target}")
        if not 0.0 < self.edge_density <= 1.0:
            raise ValueError(f"edge_density must be in (0, 1], got {self.edge_density}")


class Difficulty(Enum):
    """Difficulty levels for Tango puzzles."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def settings(self) -> DifficultySettings:
        """Default givens target and edge density for this difficulty."""
        defaults = {
            Difficulty.EASY: DifficultySettings(givens_target=8, edge_density=0.15),
            Difficulty.MEDIUM: DifficultySettings(givens_target=6, edge_density=0.12),
            Difficulty.HARD: DifficultySettings(givens_target=3, edge_density=0.07),
        }
        return defaults[self]

    @property
    def fallback(self) -> Optional[Difficulty]:
        """The looser tier tried when this one keeps failing."""
        return {
            Difficulty.HARD: Difficulty.MEDIUM,
            Difficulty.MEDIUM: Difficulty.EASY,
            Difficulty.EASY: None,
        }[self]


@dataclass
class GeneratorConfig:
    """Limits and knobs for :class:`TangoGenerator`."""
    size: int = 6
    max_attempts: int = 80
    max_solution_retries: int = 400
    max_logic_passes: int = 500
    use_end_pairs: bool = True
    reshuffle_probability: float = 0.25
    reshuffle_threshold: int = 10
    min_edges: int = 6
    tiers: Dict[str, DifficultySettings] = field(default_factory=dict)

    def settings_for(self, difficulty: Difficulty) -> DifficultySettings:
        return self.tiers.get(difficulty.value, difficulty.settings)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> GeneratorConfig:
        data = dict(data)
        tiers = {
            name: DifficultySettings(**values)
            for name, values in data.pop("tiers", {}).items()
        }
        for name in tiers:
            Difficulty(name)
        return cls(tiers=tiers, **data)

    @classmethod
    def from_json(cls, path: str) -> GeneratorConfig:
        """Load a config from a JSON file with the dataclass field names as keys."""
        with open(path, "r") as f:
            return cls.from_dict(json.load(f))


class FailureKind(Enum):
    """Why a generation phase did not produce a value."""
    NO_SOLUTION_FOUND = "no_solution_found"
    NOT_LOGIC_SOLVABLE = "not_logic_solvable"
    GENERATION_EXHAUSTED = "generation_exhausted"


@dataclass
class PhaseResult:
    """Tagged result of one generation phase."""
    ok: bool
    value: Any = None
    failure: Optional[FailureKind] = None

    @classmethod
    def success(cls, value: Any) -> PhaseResult:
        return cls(True, value)

    @classmethod
    def fail(cls, kind: FailureKind) -> PhaseResult:
        return cls(False, None, kind)


class Phase(Enum):
    """States of the generation loop."""
    SOLVE = "solve"
    SAMPLE = "sample"
    REDUCE = "reduce"
    VERIFY = "verify"
    FALLBACK = "fallback"


@dataclass
class GenerationReport:
    """What happened during the last call to :meth:`TangoGenerator.generate`."""
    requested: str = ""
    produced: str = ""
    attempts: int = 0
    failures: Dict[str, int] = field(default_factory=dict)
    removals_kept: int = 0
    removals_reverted: int = 0
    contradictions: int = 0
    tiers_tried: List[str] = field(default_factory=list)

    def record(self, kind: FailureKind) -> None:
        self.failures[kind.value] = self.failures.get(kind.value, 0) + 1


class TangoGenerator:
    """
    Generator for logic-solvable Tango puzzles.

    Algorithm:
    1. Solve: fill an empty board with the backtracking solver
    2. Sample: derive a connected set of edge constraints from it
    3. Reduce: clear cells in random order, keeping each removal only if
       deduction still reaches the same solution
    4. Verify: re-check the final puzzle with deduction

    A tier that runs out of attempts falls back to a looser tier.
    """

    def __init__(
        self,
        size: int = 6,
        seed: Optional[int] = None,
        rng: Optional[RandomSource] = None,
        config: Optional[GeneratorConfig] = None
    ):
        """
        Initialize the generator.

        Args:
            size: Board size (default 6). Ignored when config is given.
            seed: Random seed for reproducibility.
            rng: Random source; overrides seed.
            config: Generator limits and tier overrides.
        """
        self.config = config if config is not None else GeneratorConfig(size=size)
        self.size = self.config.size
        if self.size < 4 or self.size % 2 != 0:
            raise ValueError(f"Size must be an even number >= 4, got {self.size}")

        self.rng = ensure_source(rng, seed)
        self.backtracker = BacktrackingSolver(rng=self.rng)
        self.logic = LogicSolver(
            use_end_pairs=self.config.use_end_pairs,
            max_passes=self.config.max_logic_passes,
        )
        self.sampler = ConstraintSampler(
            rng=self.rng,
            reshuffle_probability=self.config.reshuffle_probability,
            reshuffle_threshold=self.config.reshuffle_threshold,
            min_edges=self.config.min_edges,
        )
        self.last_report = GenerationReport()

    def generate(self, difficulty: Union[Difficulty, str] = Difficulty.MEDIUM) -> PuzzlePackage:
        """
        Generate a puzzle with the specified difficulty.

        Args:
            difficulty: Desired difficulty level or its name.

        Returns:
            A PuzzlePackage. Its ``difficulty`` names the tier actually
            used, which differs from the request after a fallback.

        Raises:
            GenerationFailure: The tier and all its fallbacks were exhausted.
        """
        tier = Difficulty(difficulty)
        report = GenerationReport(requested=tier.value, tiers_tried=[tier.value])
        self.last_report = report

        settings = self.config.settings_for(tier)
        attempts = 0
        phase = Phase.SOLVE
        solution = constraints = package = None

        while True:
            if phase is Phase.SOLVE:
                if attempts >= self.config.max_attempts:
                    phase = Phase.FALLBACK
                    continue
                attempts += 1
                report.attempts += 1
                result = self._solve_phase()
                if not result.ok:
                    report.record(result.failure)
                    logger.debug("Attempt %d (%s): no solution found", attempts, tier.value)
                    continue
                solution = result.value
                phase = Phase.SAMPLE

            elif phase is Phase.SAMPLE:
                constraints = self._sample_phase(solution, settings).value
                phase = Phase.REDUCE

            elif phase is Phase.REDUCE:
                package = self._reduce_phase(solution, constraints, settings, tier).value
                phase = Phase.VERIFY

            elif phase is Phase.VERIFY:
                result = self._verify_phase(package)
                if result.ok:
                    report.produced = tier.value
                    logger.info(
                        "Generated %s puzzle: %d givens, %d constraints, attempt %d",
                        tier.value, package.count_givens(), package.constraints.count(), attempts
                    )
                    return package
                report.record(result.failure)
                logger.debug("Attempt %d (%s): puzzle failed verification", attempts, tier.value)
                phase = Phase.SOLVE

            elif phase is Phase.FALLBACK:
                report.record(FailureKind.GENERATION_EXHAUSTED)
                exhausted = GenerationExhausted(tier.value, attempts)
                looser = tier.fallback
                if looser is None:
                    raise GenerationFailure(
                        f"Could not generate a logic-solvable puzzle ({exhausted})",
                        tried=list(report.tiers_tried),
                    ) from exhausted
                logger.warning("%s; falling back to %s", exhausted, looser.value)
                tier = looser
                settings = self.config.settings_for(tier)
                report.tiers_tried.append(tier.value)
                attempts = 0
                phase = Phase.SOLVE

    def generate_batch(self, count: int, difficulty: Union[Difficulty, str] = Difficulty.MEDIUM) -> List[PuzzlePackage]:
        """
        Generate multiple puzzles of the same difficulty.

        Args:
            count: Number of puzzles to generate.
            difficulty: Desired difficulty level.
        """
        return [self.generate(difficulty) for _ in range(count)]

    def _solve_phase(self) -> PhaseResult:
        try:
            return PhaseResult.success(self._fill_solution())
        except NoSolutionFound as exc:
            logger.debug("%s", exc)
            return PhaseResult.fail(FailureKind.NO_SOLUTION_FOUND)

    def _fill_solution(self) -> TangoBoard:
        """
        Fill an empty board, retrying up to max_solution_retries times.

        Raises:
            NoSolutionFound: Every retry came back empty.
        """
        empty = TangoBoard(self.size)
        no_constraints = EdgeConstraints(self.size)
        retries = self.config.max_solution_retries
        for _ in range(retries):
            solution, _ = self.backtracker.solve(empty, no_constraints, track_memory=False)
            if solution is not None:
                return solution
        raise NoSolutionFound(f"No full {self.size}x{self.size} grid after {retries} retries")

    def _sample_phase(self, solution: TangoBoard, settings: DifficultySettings) -> PhaseResult:
        return PhaseResult.success(self.sampler.sample(solution, settings.edge_density))

    def _reduce_phase(
        self,
        solution: TangoBoard,
        constraints: EdgeConstraints,
        settings: DifficultySettings,
        tier: Difficulty
    ) -> PhaseResult:
        """
        Remove givens while deduction still reaches solution.

        Every removal is tried once, in random order, and undone if the
        deduction gets stuck, hits a contradiction or ends on a
        different board.
        """
        puzzle = solution.copy()
        given_mask = np.ones((self.size, self.size), dtype=bool)
        givens = self.size * self.size

        cells = [(r, c) for r in range(self.size) for c in range(self.size)]
        self.rng.shuffle(cells)

        for row, col in cells:
            if givens <= settings.givens_target:
                break

            puzzle.clear(row, col)
            given_mask[row, col] = False

            result = self.logic.deduce(puzzle, constraints)
            if result.complete and result.board == solution:
                givens -= 1
                self.last_report.removals_kept += 1
            else:
                if result.contradiction is not None:
                    self.last_report.contradictions += 1
                self.last_report.removals_reverted += 1
                puzzle.set(row, col, solution.get(row, col))
                given_mask[row, col] = True

        # Some completion must still exist
        safety, _ = self.backtracker.solve(puzzle, constraints, track_memory=False)
        if safety is None:
            logger.warning("Reduced %s puzzle has no completion; keeping every cell given", tier.value)
            puzzle = solution.copy()
            given_mask = np.ones((self.size, self.size), dtype=bool)

        return PhaseResult.success(PuzzlePackage(
            puzzle=puzzle,
            solution=solution,
            constraints=constraints,
            given_mask=given_mask,
            difficulty=tier.value,
        ))

    def _verify_phase(self, package: PuzzlePackage) -> PhaseResult:
        result = self.logic.deduce(package.puzzle, package.constraints)
        if result.complete and result.board == package.solution:
            return PhaseResult.success(package)
        return PhaseResult.fail(FailureKind.NOT_LOGIC_SOLVABLE)

    @staticmethod
    def save_to_folder(packages: List[PuzzlePackage], folder_path: str, prefix: str = "puzzle") -> None:
        """
        Save puzzles to a folder, one JSON file and one text file each.

        Args:
            packages: List of PuzzlePackage objects.
            folder_path: Directory to save the puzzles.
            prefix: Prefix for the filename (default: "puzzle").
        """
        os.makedirs(folder_path, exist_ok=True)

        for i, package in enumerate(packages, 1):
            base = os.path.join(folder_path, f"{prefix}_{i}")
            with open(base + ".json", "w") as f:
                json.dump(package.to_dict(), f, indent=2)
            with open(base + ".txt", "w") as f:
                f.write(render_package(package))
                f.write("\n")


def render_package(package: PuzzlePackage, show_solution: bool = False) -> str:
    """
    Draw a puzzle as text with its edge constraints.

    '=' and 'x' between two cells mark EQUAL and NOT_EQUAL edges.
    """
    board = package.solution if show_solution else package.puzzle
    text = board.to_string()
    n = package.size
    h_rows, v_rows = package.constraints.to_strings()
    h_rows = h_rows.split('/')
    v_rows = v_rows.split('/')

    lines = []
    for r in range(n):
        row = ''
        for c in range(n):
            row += text[r * n + c]
            if c < n - 1:
                mark = h_rows[r][c]
                row += f' {mark if mark != "." else " "} '
        lines.append(row)
        if r < n - 1:
            marks = [m if m != '.' else ' ' for m in v_rows[r]]
            lines.append('   '.join(marks))
    return '\n'.join(lines)


def generate_puzzle(
    difficulty: Union[Difficulty, str] = Difficulty.MEDIUM,
    size: int = 6,
    seed: Optional[int] = None,
    rng: Optional[RandomSource] = None,
    config: Optional[GeneratorConfig] = None
) -> PuzzlePackage:
    """Generate one puzzle; see :meth:`TangoGenerator.generate`."""
    return TangoGenerator(size=size, seed=seed, rng=rng, config=config).generate(difficulty)

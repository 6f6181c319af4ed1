"""Connected sampling of edge constraints from a solved board."""

from __future__ import annotations
import logging
from typing import List, Optional, Set

from ..core.board import TangoBoard
from ..core.constraints import Edge, EdgeConstraints, Relation, HORIZONTAL, VERTICAL
from ..core.rng import RandomSource

logger = logging.getLogger(__name__)


def all_edges(size: int) -> List[Edge]:
    """Every horizontal edge, then every vertical edge, of a size x size board."""
    edges = [Edge(HORIZONTAL, r, c) for r in range(size) for c in range(size - 1)]
    edges += [Edge(VERTICAL, r, c) for r in range(size - 1) for c in range(size)]
    return edges


def edge_neighbors(edge: Edge, size: int) -> List[Edge]:
    """
    Get the edges that touch one of edge's two cells.

    The edge itself is included, as it touches both of its own cells;
    callers skip edges that are already selected.
    """
    out: List[Edge] = []
    seen: Set[Edge] = set()
    for row, col in edge.cells():
        around = (
            Edge(HORIZONTAL, row, col - 1),
            Edge(HORIZONTAL, row, col),
            Edge(VERTICAL, row - 1, col),
            Edge(VERTICAL, row, col),
        )
        for other in around:
            if other in seen or not other.in_bounds(size):
                continue
            seen.add(other)
            out.append(other)
    return out


def target_edge_count(size: int, density: float, min_edges: int = 6) -> int:
    """max(min_edges, floor(total edges * density)), capped at the total."""
    total = 2 * size * (size - 1)
    return min(total, max(min_edges, int(total * density)))


class ConstraintSampler:
    """
    Picks a spatially connected set of edges and labels them from a solution.

    Growth starts from one random edge and keeps a frontier of edges that
    share a cell with the selection. A random frontier edge is taken each
    step. Once the frontier is longer than ``reshuffle_threshold`` it is
    shuffled with probability ``reshuffle_probability`` after each pick so
    the selection does not grow as a single line.
    """

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        reshuffle_probability: float = 0.25,
        reshuffle_threshold: int = 10,
        min_edges: int = 6
    ):
        if not 0.0 <= reshuffle_probability <= 1.0:
            raise ValueError(f"reshuffle_probability must be in [0, 1], got {reshuffle_probability}")
        self.rng = rng if rng is not None else RandomSource()
        self.reshuffle_probability = reshuffle_probability
        self.reshuffle_threshold = reshuffle_threshold
        self.min_edges = min_edges

    def choose_connected_edges(self, size: int, target: int) -> List[Edge]:
        """
        Select target edges, connected where the frontier allows.

        Returns:
            Selected edges in selection order.
        """
        edges = all_edges(size)
        target = min(target, len(edges))
        if target <= 0:
            return []

        seed = edges[self.rng.randbelow(len(edges))]
        chosen = [seed]
        chosen_set = {seed}
        frontier = [e for e in edge_neighbors(seed, size) if e not in chosen_set]

        while len(chosen) < target and frontier:
            edge = frontier.pop(self.rng.randbelow(len(frontier)))
            if edge in chosen_set:
                continue
            chosen.append(edge)
            chosen_set.add(edge)

            for other in edge_neighbors(edge, size):
                if other not in chosen_set:
                    frontier.append(other)

            if len(frontier) > self.reshuffle_threshold and self.rng.random() < self.reshuffle_probability:
                self.rng.shuffle(frontier)

        if len(chosen) < target:
            logger.debug("Frontier exhausted at %d/%d edges, topping up", len(chosen), target)
            self.rng.shuffle(edges)
            for edge in edges:
                if len(chosen) >= target:
                    break
                if edge not in chosen_set:
                    chosen.append(edge)
                    chosen_set.add(edge)

        return chosen

    def sample(self, solution: TangoBoard, density: float) -> EdgeConstraints:
        """
        Build constraints for a solved board.

        Args:
            solution: A completely filled board.
            density: Fraction of all edges to constrain, in (0, 1].

        Returns:
            EdgeConstraints where each selected edge is EQUAL if the
            solution holds the same symbol on both sides, else NOT_EQUAL.
        """
        if not 0.0 < density <= 1.0:
            raise ValueError(f"Edge density must be in (0, 1], got {density}")
        if not solution.is_complete():
            raise ValueError("Constraints can only be sampled from a complete board")

        size = solution.size
        target = target_edge_count(size, density, self.min_edges)
        constraints = EdgeConstraints(size)

        for edge in self.choose_connected_edges(size, target):
            first, second = edge.cells()
            same = solution.grid[first] == solution.grid[second]
            constraints.set(edge, Relation.EQUAL if same else Relation.NOT_EQUAL)

        logger.debug("Sampled %d constraints (density %.2f)", constraints.count(), density)
        return constraints

"""Injectable random source used by the solvers and the generator."""

from __future__ import annotations
import random
from typing import Any, MutableSequence, Optional, Sequence


class RandomSource:
    """
    Thin wrapper around :class:`random.Random`.

    Everything random in generation goes through ``randbelow``,
    ``shuffle`` and ``random`` so tests can swap in a fixed-sequence
    stub with the same three methods. Play hints also use ``choice``.
    """

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None):
        self._rng = rng if rng is not None else random.Random(seed)

    def randbelow(self, n: int) -> int:
        """Uniform index in range(n)."""
        if n <= 0:
            raise ValueError(f"randbelow needs a positive bound, got {n}")
        return self._rng.randrange(n)

    def shuffle(self, seq: MutableSequence[Any]) -> MutableSequence[Any]:
        """Shuffle in place (Fisher-Yates driven by randbelow) and return seq."""
        for i in range(len(seq) - 1, 0, -1):
            j = self.randbelow(i + 1)
            seq[i], seq[j] = seq[j], seq[i]
        return seq

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        return self._rng.random()

    def choice(self, seq: Sequence[Any]) -> Any:
        """Uniform pick from a non-empty sequence."""
        return seq[self.randbelow(len(seq))]


def ensure_source(rng: Optional[RandomSource] = None, seed: Optional[int] = None) -> RandomSource:
    """Return rng, or a new source seeded with seed."""
    return rng if rng is not None else RandomSource(seed)

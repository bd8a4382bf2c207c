"""Injectable random sources for seeded initialization.

Every stochastic step in the engine (K-Means seeding, the power-iteration
start vector, synthetic batches) draws from a `RandomSource` passed in by the
caller instead of global random state.
"""

from __future__ import annotations

from typing import List, Optional, Protocol, Sequence

import numpy as np

_MASK32 = 0xFFFFFFFF
# xorshift32 never leaves the all-zero state, so a zero seed is remapped
_ZERO_SEED_REPLACEMENT = 0x9E3779B9


class RandomSource(Protocol):
    """Anything that yields floats uniformly distributed in [0, 1)."""

    def random(self) -> float:
        ...


class XorShiftRandom:
    """Seeded xorshift32 generator (13/17/5 shift triple)."""

    def __init__(self, seed: int):
        state = seed & _MASK32
        self._state = state or _ZERO_SEED_REPLACEMENT

    def random(self) -> float:
        s = self._state
        s ^= (s << 13) & _MASK32
        s ^= s >> 17
        s ^= (s << 5) & _MASK32
        self._state = s
        return s / 0x100000000


class NumpyRandom:
    """Adapter over numpy's Generator; unseeded when seed is None."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = np.random.default_rng(seed)

    def random(self) -> float:
        return float(self._rng.random())


class SequenceRandom:
    """Replays a fixed list of values, cycling when exhausted. Test helper."""

    def __init__(self, values: Sequence[float]):
        if not values:
            raise ValueError("SequenceRandom needs at least one value")
        for value in values:
            if not 0.0 <= value < 1.0:
                raise ValueError(f"SequenceRandom values must be in [0, 1), got {value}")
        self._values = list(values)
        self._pos = 0

    def random(self) -> float:
        value = self._values[self._pos % len(self._values)]
        self._pos += 1
        return value


def shuffled_indices(source: RandomSource, n: int) -> List[int]:
    """Fisher-Yates permutation of range(n) driven by `source`."""
    order = list(range(n))
    for i in range(n - 1, 0, -1):
        j = min(int(source.random() * (i + 1)), i)
        order[i], order[j] = order[j], order[i]
    return order


def random_vector(source: RandomSource, length: int) -> np.ndarray:
    """Vector of `length` independent draws from `source`."""
    return np.array([source.random() for _ in range(length)], dtype="float64")

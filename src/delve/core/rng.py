"""Deterministic RNG wrapper built on top of random.Random."""
from __future__ import annotations

from random import Random
from typing import MutableSequence, Protocol, Sequence, TypeVar

T_co = TypeVar("T_co")


class RandomSource(Protocol):
    """Anything that yields floats in [0.0, 1.0); all game rolls go through one."""

    def random(self) -> float:
        ...


class RNG:
    """Wrapper around random.Random that provides deterministic helpers."""

    def __init__(self, seed: int) -> None:
        self.seed = seed
        self._random = Random(seed)

    def randint(self, a: int, b: int) -> int:
        """Return a random integer N such that a <= N <= b."""
        return self._random.randint(a, b)

    def random(self) -> float:
        """Return the next random floating point number in the range [0.0, 1.0)."""
        return self._random.random()

    def choice(self, seq: Sequence[T_co]) -> T_co:
        """Return a random element from the non-empty sequence."""
        if not seq:
            raise ValueError("Cannot choose from an empty sequence.")
        return self._random.choice(seq)

    def shuffle(self, seq: MutableSequence[T_co]) -> None:
        """Shuffle the sequence in-place."""
        self._random.shuffle(seq)


def roll_between(low: int, high: int, rng: RandomSource) -> int:
    """Inclusive integer roll that consumes a single draw (none when the range is empty)."""
    if high <= low:
        return low
    return int(low + (high - low + 1) * rng.random())


def pick_index(count: int, rng: RandomSource) -> int:
    """Uniform index in [0, count) from a single draw."""
    if count <= 0:
        raise ValueError("Cannot pick from an empty pool.")
    return min(count - 1, int(rng.random() * count))

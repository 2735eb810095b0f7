"""
Random Source - Pluggable uniform randomness for games and players.

Every stochastic component (players, aleatories, matches, tournaments)
receives its RandomSource explicitly. There is no shared default instance.

Sources are NOT thread-safe. Concurrent decision paths must each use their
own source (see RandomSource.spawn).
"""

from __future__ import annotations
from typing import Any, Iterable, Sequence, TypeVar
import random

T = TypeVar("T")


class RandomSource:
    """
    Uniform random source backed by random.Random.

    Usage:
        rng = RandomSource(seed=42)
        rng.choice(["win", "lose", "pass"])
        rng.weighted_choice([("heads", 0.5), ("tails", 0.5)])
    """

    def __init__(self, seed: int | None = None):
        self.seed = seed
        self.rng = random.Random(seed)

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        return self.rng.random()

    def uniform(self, low: float = 0.0, high: float = 1.0) -> float:
        """Uniform float in [low, high)."""
        n = self.rng.random()
        return (1 - n) * low + n * high

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in [low, high], both inclusive."""
        if high < low:
            raise ValueError(f"Empty integer range [{low}, {high}]")
        return low + int(self.rng.random() * (high - low + 1))

    def choice(self, values: Sequence[T]) -> T:
        """Pick one of the given values uniformly."""
        if not values:
            raise ValueError("Cannot choose from an empty sequence")
        return values[int(self.rng.random() * len(values))]

    def shuffle(self, values: Iterable[T]) -> list[T]:
        """Return a new list with the values in random order."""
        result = list(values)
        for i in range(len(result) - 1, 0, -1):
            j = int(self.rng.random() * (i + 1))
            result[i], result[j] = result[j], result[i]
        return result

    def weighted_choice(self, weighted_values: Iterable[tuple[T, float]]) -> T | None:
        """
        Pick a value with chance proportional to its weight.

        Streaming selection: every entry with a positive weight consumes one
        draw and replaces the current pick with probability
        weight / (weight + sum of the previous weights). Entries with weights
        that are not positive are skipped without drawing.

        Returns None if no entry has a positive weight.
        """
        current: Any = None
        weight_sum = 0.0
        for value, weight in weighted_values:
            if weight > 0:
                chance = self.rng.random()
                if chance <= weight / (weight + weight_sum):
                    current = value
                weight_sum += weight
        return current

    def spawn(self) -> RandomSource:
        """Create an independent source seeded from this one."""
        return RandomSource(seed=self.rng.getrandbits(64))

    def __repr__(self) -> str:
        return f"RandomSource(seed={self.seed!r})"

"""
Aleatory - Finite chance variables (dice, coins, card draws).

An aleatory is an immutable probability mass function: an ordered sequence
of (value, probability) pairs. Probabilities are non-negative and sum to 1.
Raw weights are normalized at construction.

Contingent game states expose their aleatories through
GameState.chance_variables(). The realized value of an aleatory at a
transition is called a hap.
"""

from __future__ import annotations
from typing import Any, Callable, Iterable, Mapping, TYPE_CHECKING
import math

from .errors import InvalidDistribution

if TYPE_CHECKING:
    from .randomness import RandomSource


class Aleatory:
    """
    A chance variable with a finite distribution.

    Duplicate values are merged, keeping the position of their first
    appearance. Values must be hashable.
    """

    def __init__(self, weighted_values: Iterable[tuple[Any, float]], name: str | None = None):
        merged: dict[Any, float] = {}
        for value, weight in weighted_values:
            weight = float(weight)
            if math.isnan(weight) or weight < 0:
                raise InvalidDistribution(f"Invalid weight {weight!r} for value {value!r}")
            merged[value] = merged.get(value, 0.0) + weight
        if not merged:
            raise InvalidDistribution("An aleatory needs at least one value")
        total = sum(merged.values())
        if not total > 0 or math.isinf(total):
            raise InvalidDistribution(f"Weights must add up to a positive number (got {total!r})")
        self._distribution: tuple[tuple[Any, float], ...] = tuple(
            (value, weight / total) for value, weight in merged.items()
        )
        self.name = name

    def distribution(self) -> tuple[tuple[Any, float], ...]:
        """The (value, probability) pairs, in insertion order."""
        return self._distribution

    def values(self) -> list[Any]:
        return [value for value, _ in self._distribution]

    def probability(self, value: Any) -> float:
        """Probability of the given value (0 if it is not possible)."""
        for v, p in self._distribution:
            if v == value:
                return p
        return 0.0

    def sample(self, random: RandomSource) -> Any:
        """Draw a value using the source's streaming weighted choice."""
        return random.weighted_choice(self._distribution)

    def expected(self, function: Callable[[Any], float]) -> float:
        """Probability-weighted sum of function(value)."""
        return sum(p * function(v) for v, p in self._distribution)

    def __len__(self) -> int:
        return len(self._distribution)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Aleatory):
            return NotImplemented
        return self._distribution == other._distribution

    def __hash__(self) -> int:
        return hash(self._distribution)

    def __repr__(self) -> str:
        label = self.name or "Aleatory"
        pairs = ", ".join(f"{v!r}: {p:.4g}" for v, p in self._distribution)
        return f"{label}({pairs})"


def uniform_aleatory(values: Iterable[Any], name: str | None = None) -> Aleatory:
    """All given values with the same probability."""
    return Aleatory(((value, 1.0) for value in values), name=name)


def range_aleatory(low: int, high: int, name: str | None = None) -> Aleatory:
    """Uniform integers from low to high, both inclusive."""
    if high < low:
        raise InvalidDistribution(f"Empty range [{low}, {high}]")
    return uniform_aleatory(range(low, high + 1), name=name or f"Range[{low}..{high}]")


def weighted_aleatory(
    weights: Mapping[Any, float] | Iterable[tuple[Any, float]],
    name: str | None = None,
) -> Aleatory:
    """Values with the given raw weights (normalized)."""
    if isinstance(weights, Mapping):
        weights = weights.items()
    return Aleatory(weights, name=name)


# Common dice
DICE: dict[str, Aleatory] = {
    f"D{sides}": range_aleatory(1, sides, name=f"D{sides}")
    for sides in (2, 4, 6, 8, 10, 12, 20)
}

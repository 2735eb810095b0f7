"""
Tests for random sources and aleatories.

Tests:
- Distributions are normalized and validated
- Weighted sampling consumes draws in the documented order
- Convenience constructors and dice
"""

import math
import random

import pytest

from ..engine_core.aleatory import (
    Aleatory,
    DICE,
    range_aleatory,
    uniform_aleatory,
    weighted_aleatory,
)
from ..engine_core.errors import InvalidDistribution
from ..engine_core.randomness import RandomSource


class TestAleatoryDistribution:
    """Tests for construction and normalization."""

    def test_weights_are_normalized(self):
        aleatory = Aleatory([("a", 1), ("b", 3)])
        assert aleatory.distribution() == (("a", 0.25), ("b", 0.75))

    def test_duplicates_are_merged_in_first_position(self):
        aleatory = Aleatory([("a", 1), ("b", 1), ("a", 2)])
        assert aleatory.values() == ["a", "b"]
        assert aleatory.probability("a") == pytest.approx(0.75)

    @pytest.mark.parametrize("name", sorted(DICE))
    def test_dice_probabilities_add_up_to_one(self, name):
        die = DICE[name]
        assert math.fsum(p for _, p in die.distribution()) == pytest.approx(1.0)

    def test_empty_distribution_is_invalid(self):
        with pytest.raises(InvalidDistribution):
            Aleatory([])

    def test_negative_weight_is_invalid(self):
        with pytest.raises(InvalidDistribution):
            Aleatory([("a", 1), ("b", -1)])

    def test_zero_total_is_invalid(self):
        with pytest.raises(InvalidDistribution):
            Aleatory([("a", 0), ("b", 0)])

    def test_nan_weight_is_invalid(self):
        with pytest.raises(InvalidDistribution):
            Aleatory([("a", float("nan"))])

    def test_range_aleatory(self):
        d6 = range_aleatory(1, 6)
        assert d6.values() == [1, 2, 3, 4, 5, 6]
        assert d6.probability(3) == pytest.approx(1 / 6)
        assert d6.probability(7) == 0.0

    def test_empty_range_is_invalid(self):
        with pytest.raises(InvalidDistribution):
            range_aleatory(3, 2)

    def test_uniform_and_weighted_constructors(self):
        coin = uniform_aleatory(["heads", "tails"])
        assert coin.probability("heads") == pytest.approx(0.5)
        loaded = weighted_aleatory({"heads": 3, "tails": 1})
        assert loaded.probability("heads") == pytest.approx(0.75)
        assert weighted_aleatory([("heads", 3), ("tails", 1)]) == loaded

    def test_expected_value(self):
        assert DICE["D6"].expected(lambda v: v) == pytest.approx(3.5)


class TestSampling:
    """Tests for weighted selection."""

    def test_sample_never_returns_impossible_value(self, rng):
        aleatory = Aleatory([("never", 0), ("always", 1)])
        assert {aleatory.sample(rng) for _ in range(50)} == {"always"}

    def test_sample_only_returns_known_values(self, rng):
        die = DICE["D6"]
        samples = [die.sample(rng) for _ in range(200)]
        assert set(samples) <= set(die.values())
        assert len(set(samples)) == 6

    def test_weighted_choice_draw_order(self):
        """One draw per positive weight, accepting with weight / running total."""
        values = [("x", 1.0), ("skip", 0.0), ("y", 1.0), ("z", 2.0)]
        reference = random.Random(7)
        expected = None
        running = 0.0
        for value, weight in values:
            if weight > 0:
                if reference.random() <= weight / (weight + running):
                    expected = value
                running += weight

        source = RandomSource(seed=7)
        assert source.weighted_choice(values) == expected
        # Exactly three draws were consumed
        assert source.random() == reference.random()

    def test_weighted_choice_without_positive_weights(self, rng):
        assert rng.weighted_choice([("a", 0), ("b", -1)]) is None


class TestRandomSource:
    """Tests for the random source helpers."""

    def test_seeded_sources_repeat(self):
        a, b = RandomSource(seed=3), RandomSource(seed=3)
        assert [a.random() for _ in range(5)] == [b.random() for _ in range(5)]

    def test_randint_is_inclusive(self, rng):
        values = {rng.randint(1, 3) for _ in range(100)}
        assert values == {1, 2, 3}

    def test_randint_empty_range(self, rng):
        with pytest.raises(ValueError):
            rng.randint(2, 1)

    def test_choice_empty(self, rng):
        with pytest.raises(ValueError):
            rng.choice([])

    def test_shuffle_returns_new_permutation(self, rng):
        values = list(range(10))
        shuffled = rng.shuffle(values)
        assert sorted(shuffled) == values
        assert values == list(range(10))

    def test_uniform_bounds(self, rng):
        for _ in range(50):
            assert 2.0 <= rng.uniform(2.0, 3.0) <= 3.0

    def test_spawn_is_deterministic_and_independent(self):
        parent_a, parent_b = RandomSource(seed=11), RandomSource(seed=11)
        child_a, child_b = parent_a.spawn(), parent_b.spawn()
        assert child_a.random() == child_b.random()
        assert child_a is not parent_a

"""
Tests for weighted random selection.

Run with: python -m pytest tests/test_sampler.py -v
"""

import random

import numpy as np
import pytest

from anatomy.errors import PreconditionError
from anatomy.sampler import WeightedSampler, weighted_draw, weighted_index


class FixedRoll:
    """Stand-in generator whose random() always returns the same fraction."""

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.fixture
def rng():
    """Seeded random number generator for deterministic tests."""
    return random.Random(42)


class TestWeightedIndex:
    """Tests for the cumulative scan."""

    @pytest.mark.parametrize("fraction,expected", [
        (0.0, 0),
        (0.24, 0),
        (0.25, 1),
        (0.49, 1),
        (0.5, 2),
        (0.999, 2),
    ])
    def test_roll_maps_to_expected_index(self, fraction, expected):
        """Rolls fall into the slot whose cumulative range contains them."""
        assert weighted_index([1, 1, 2], FixedRoll(fraction)) == expected

    def test_zero_weight_never_drawn(self):
        """A zero-weight item sharing a cumulative value is skipped."""
        # Cumulative weights are 2, 2, 2, 4; a roll of exactly 2 must land on index 3
        assert weighted_index([2, 0, 0, 2], FixedRoll(0.5)) == 3
        assert weighted_index([2, 0, 0, 2], FixedRoll(0.4999)) == 0

    def test_leading_zero_weight_skipped(self):
        assert weighted_index([0, 0, 5], FixedRoll(0.0)) == 2

    def test_single_item(self, rng):
        for _ in range(20):
            assert weighted_index([3.5], rng) == 0

    def test_identical_weights_resolve_to_distinct_indices(self):
        """Items with identical weights are told apart by position, not value."""
        assert weighted_index([1, 1], FixedRoll(0.1)) == 0
        assert weighted_index([1, 1], FixedRoll(0.9)) == 1


class TestPreconditions:
    """Tests for invalid sampler input."""

    def test_empty_weights(self, rng):
        with pytest.raises(PreconditionError):
            weighted_index([], rng)

    def test_negative_weight(self, rng):
        with pytest.raises(PreconditionError):
            weighted_index([1.0, -0.5, 2.0], rng)

    @pytest.mark.parametrize("bad", [float("nan"), float("inf")])
    def test_non_finite_weight(self, rng, bad):
        with pytest.raises(PreconditionError, match="not finite"):
            weighted_index([1.0, bad, 2.0], rng)

    def test_all_zero_weights(self, rng):
        with pytest.raises(PreconditionError):
            weighted_index([0.0, 0.0], rng)

    def test_length_mismatch(self, rng):
        with pytest.raises(PreconditionError):
            weighted_draw(["a", "b"], [1.0], rng)

    def test_precondition_error_is_value_error(self, rng):
        with pytest.raises(ValueError):
            weighted_index([0.0], rng)


class TestFairness:
    """Statistical checks on draw frequencies."""

    def test_frequencies_match_weights(self, rng):
        """Weights [1, 1, 2] should produce roughly [0.25, 0.25, 0.5]."""
        n = 20_000
        draws = [weighted_draw(["a", "b", "c"], [1, 1, 2], rng) for _ in range(n)]
        counts = np.array([draws.count("a"), draws.count("b"), draws.count("c")])
        np.testing.assert_allclose(counts / n, [0.25, 0.25, 0.5], atol=0.02)

    def test_sampler_draw_with_key(self, rng):
        sampler = WeightedSampler(rng)
        items = [("small", 1.0), ("large", 9.0)]
        n = 10_000
        hits = sum(1 for _ in range(n) if sampler.draw(items, key=lambda i: i[1])[0] == "large")
        assert hits / n == pytest.approx(0.9, abs=0.02)


class TestDeterminism:
    """Same seed, same draws."""

    def test_seeded_samplers_agree(self):
        a = WeightedSampler(random.Random(7))
        b = WeightedSampler(random.Random(7))
        weights = [0.5, 3.0, 1.25, 2.0]
        assert [a.draw_index(weights) for _ in range(50)] == [b.draw_index(weights) for _ in range(50)]

    def test_default_generator_created(self):
        sampler = WeightedSampler()
        assert isinstance(sampler.rng, random.Random)
        assert sampler.draw_index([1.0]) == 0

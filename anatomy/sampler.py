"""
Weighted random selection.

Used twice during damage resolution: picking which limb absorbs an attack
(weighted by limb volume) and picking one part per layer of that limb
(weighted by part volume).
"""

from __future__ import annotations

import math
import random
from typing import Callable, Optional, Sequence, TypeVar

from .errors import PreconditionError

T = TypeVar("T")


def weighted_index(weights: Sequence[float], rng: random.Random) -> int:
    """
    Draw an index with probability proportional to its weight.

    Builds the cumulative weights, rolls uniformly in [0, total) and returns
    the first index whose cumulative weight exceeds the roll. The winning
    index is kept during the scan, so equal cumulative values (zero-weight
    entries) can never resolve to the wrong slot.

    Args:
        weights: Non-negative weights, at least one of them positive.
        rng: Random number generator to roll with.

    Returns:
        Index into weights.

    Raises:
        PreconditionError: If weights is empty, holds a negative or non-finite value,
            or sums to zero.
    """
    if len(weights) == 0:
        raise PreconditionError("Cannot draw from an empty set of weights")

    total = 0.0
    for i, weight in enumerate(weights):
        if not math.isfinite(weight):
            raise PreconditionError(f"Weight at index {i} is not finite: {weight}")
        if weight < 0:
            raise PreconditionError(f"Weight at index {i} is negative: {weight}")
        total += weight

    if not total > 0:
        raise PreconditionError("Total weight must be greater than zero")

    roll = rng.random() * total

    cumulative = 0.0
    chosen = None
    for i, weight in enumerate(weights):
        if weight <= 0:
            continue
        cumulative += weight
        chosen = i
        if roll < cumulative:
            return i

    # Float rounding can leave roll == cumulative on the last entry
    return chosen


def weighted_draw(
    items: Sequence[T],
    weights: Sequence[float],
    rng: Optional[random.Random] = None,
) -> T:
    """
    Draw one item with probability weight_i / sum(weights).

    Raises:
        PreconditionError: If items and weights differ in length, or the
            weights cannot be drawn from (see weighted_index).
    """
    if len(items) != len(weights):
        raise PreconditionError(
            f"Got {len(items)} items but {len(weights)} weights"
        )
    if rng is None:
        rng = random.Random()
    return items[weighted_index(weights, rng)]


class WeightedSampler:
    """
    Weighted draws over any sequence, sharing one injectable generator.

    Usage:
        sampler = WeightedSampler(random.Random(42))
        part = sampler.draw(layer, key=lambda p: p.volume)
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def draw_index(self, weights: Sequence[float]) -> int:
        """Draw an index from a weight sequence."""
        return weighted_index(weights, self.rng)

    def draw(self, items: Sequence[T], key: Callable[[T], float]) -> T:
        """
        Draw one item, weighting each by key(item).

        Args:
            items: Candidates to draw from.
            key: Weight extraction function.

        Returns:
            The drawn item.
        """
        return items[self.draw_index([key(item) for item in items])]

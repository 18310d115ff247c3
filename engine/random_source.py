"""Injectable randomness for faction assignment and leader selection.

The engine draws every random choice through a RandomSource, whose one
operation returns an index below a bound. Tests can hand in a fixed
sequence; hosts use NumpyRandomSource, optionally seeded.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence, TypeVar, runtime_checkable

import numpy as np

T = TypeVar("T")


@runtime_checkable
class RandomSource(Protocol):
    """Source of uniform random choices."""

    def next_index(self, upper: int) -> int:
        """Return an integer drawn uniformly from [0, upper)."""
        ...


class NumpyRandomSource:
    """RandomSource backed by a numpy Generator.

    Args:
        seed: Seed for reproducible draws. None draws fresh OS entropy.
    """

    def __init__(self, seed: Optional[int] = None):
        self._rng = np.random.default_rng(seed)

    def next_index(self, upper: int) -> int:
        if upper <= 0:
            raise ValueError(f"Upper bound must be positive, got {upper}")
        return int(self._rng.integers(0, upper))


def shuffled(items: Sequence[T], rng: RandomSource) -> list[T]:
    """Return a uniformly shuffled copy of items (Fisher-Yates).

    Args:
        items: Items to shuffle; not modified.
        rng: Source of random indices.

    Returns:
        A new list holding the items in random order.
    """
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rng.next_index(i + 1)
        result[i], result[j] = result[j], result[i]
    return result


def choose(items: Sequence[T], rng: RandomSource) -> T:
    """Pick one item uniformly.

    Raises:
        ValueError: If items is empty.
    """
    if not items:
        raise ValueError("Cannot choose from an empty sequence")
    return items[rng.next_index(len(items))]

"""
Random Source Module

Injectable sources of uniform random values in [0, 1) used by every
stochastic step (model noise, ECG synthesis, ECG boost multipliers).
"""
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Sequence, Tuple, TypeVar
import threading

import numpy as np

T = TypeVar("T")


class RandomSource(ABC):
    """Uniform random values in [0, 1)."""

    @abstractmethod
    def random(self) -> float:
        """Draw the next value."""

    def integer(self, low: int, span: int) -> int:
        """Draw ``low + round(span * u)``, an integer in [low, low + span]."""
        return low + round_half_up(span * self.random())


class NumpyRandomSource(RandomSource):
    """
    Production source backed by a numpy Generator.

    Draws are serialized with a lock so one instance can be shared by
    concurrent requests.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = np.random.default_rng(seed)
        self._lock = threading.Lock()

    def random(self) -> float:
        with self._lock:
            return float(self._rng.random())


class SequenceRandomSource(RandomSource):
    """
    Scripted source that replays a fixed sequence of draws.

    Args:
        values: Values in [0, 1) returned in order
        cycle: Restart from the first value when exhausted (otherwise raise)
    """

    def __init__(self, values: Iterable[float], cycle: bool = True):
        self._values: List[float] = [float(v) for v in values]
        if not self._values:
            raise ValueError("SequenceRandomSource needs at least one value")
        for v in self._values:
            if not 0.0 <= v < 1.0:
                raise ValueError(f"Random value out of range [0, 1): {v}")
        self._cycle = cycle
        self._index = 0

    @property
    def draws(self) -> int:
        """Number of values consumed so far."""
        return self._index

    def random(self) -> float:
        if self._index >= len(self._values) and not self._cycle:
            raise IndexError(f"SequenceRandomSource exhausted after {self._index} draws")
        value = self._values[self._index % len(self._values)]
        self._index += 1
        return value


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return int(np.floor(value + 0.5))


def weighted_choice(source: RandomSource, options: Sequence[Tuple[T, float]]) -> T:
    """
    Pick a category by cumulative subtraction.

    Draws u in [0, 1) and subtracts the weights in order until the remainder
    is <= 0. If float rounding leaves a positive remainder after the last
    weight, the last category is returned.
    """
    if not options:
        raise ValueError("weighted_choice needs at least one option")
    remainder = source.random()
    for category, weight in options:
        remainder -= weight
        if remainder <= 0:
            return category
    return options[-1][0]

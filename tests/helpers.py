"""Deterministic collaborators shared by the optimizer tests."""
from __future__ import annotations

from itertools import cycle
from typing import Iterable, List

import numpy as np


class ScriptedVariates:
    """Variate source replaying a fixed sequence of samples forever."""

    def __init__(self, values: Iterable[float]) -> None:
        self._values = cycle(list(values))
        self.calls = 0

    def sample(self) -> float:
        self.calls += 1
        return float(next(self._values))


class ConstantCost:
    """Cost function that never improves, so every step is rejected."""

    def __init__(self, dimension: int = 2, value: float = 1.0) -> None:
        self._dimension = dimension
        self.value = value
        self.calls = 0

    def dimension(self) -> int:
        return self._dimension

    def evaluate(self, position) -> float:
        self.calls += 1
        return self.value


class FirstCoordinateCost:
    """``f(x) = x[0]``; useful for steering acceptance in either direction."""

    def __init__(self, dimension: int = 2) -> None:
        self._dimension = dimension
        self.seen: List[np.ndarray] = []

    def dimension(self) -> int:
        return self._dimension

    def evaluate(self, position) -> float:
        vector = np.asarray(position, dtype=float)
        self.seen.append(vector.copy())
        return float(vector[0])

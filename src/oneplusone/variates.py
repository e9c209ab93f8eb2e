"""Seedable standard-normal variate generator."""
from __future__ import annotations

import numpy as np


class NormalVariateGenerator:
    """Instance-scoped N(0, 1) source backed by :func:`numpy.random.default_rng`.

    Two generators created with the same seed produce identical streams, so a
    seeded run of the optimizer is reproducible without touching global RNG state.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._seed = seed
        self._rng = np.random.default_rng(seed)

    @property
    def seed(self) -> int | None:
        return self._seed

    def reseed(self, seed: int | None) -> None:
        self._seed = seed
        self._rng = np.random.default_rng(seed)

    def sample(self) -> float:
        return float(self._rng.standard_normal())


__all__ = ["NormalVariateGenerator"]

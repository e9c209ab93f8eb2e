"""Capabilities the optimizer expects from its collaborators."""
from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np
from numpy.typing import ArrayLike


@runtime_checkable
class CostFunction(Protocol):
    """Scalar cost over a fixed-length parameter vector."""

    def dimension(self) -> int:
        """Return the number of parameters accepted by :meth:`evaluate`."""

    def evaluate(self, position: ArrayLike) -> float:
        """Return the cost at ``position``."""


@runtime_checkable
class NormalVariateSource(Protocol):
    """Source of independent standard-normal samples."""

    def sample(self) -> float:
        """Return one N(0, 1) variate."""


def as_vector(values: ArrayLike) -> np.ndarray:
    """Return ``values`` as a fresh one-dimensional float array."""

    vector = np.array(values, dtype=float, copy=True)
    if vector.ndim == 0:
        vector = vector.reshape(1)
    elif vector.ndim > 1:
        raise ValueError("Parameter vectors must be one-dimensional")
    return vector


__all__ = ["CostFunction", "NormalVariateSource", "as_vector"]

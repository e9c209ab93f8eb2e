"""Base interfaces and utilities for cost function plugins."""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from enum import Enum

import numpy as np
from numpy.typing import ArrayLike

from ..errors import DimensionMismatchError
from ..interfaces import as_vector


class GracefulNaNPolicy(str, Enum):
    """Policies for handling NaN/Inf values returned by a cost function."""

    ERROR = "error"
    COERCE_TO_INF = "coerce_to_inf"


class BaseCostFunction(ABC):
    """Common interface for all cost function implementations.

    Cost functions receive a parameter vector and return a scalar. Concrete
    subclasses implement :meth:`_evaluate_impl` and report their size through
    the ``dimension`` constructor argument. The base class checks the vector
    length, converts the raw value to ``float`` and applies the configured
    :class:`GracefulNaNPolicy` to non-finite results.

    With ``COERCE_TO_INF`` a non-finite cost becomes ``+inf`` (or ``-inf`` when
    ``maximize`` is set), the worst value for the search direction. The
    optimizer never accepts a non-finite candidate cost, and
    :func:`oneplusone.optimization.build_optimizer` keeps ``maximize`` in step
    with the optimizer.
    """

    DEFAULT_NAN_POLICY: GracefulNaNPolicy = GracefulNaNPolicy.ERROR

    def __init__(
        self,
        dimension: int,
        *,
        graceful_nan_policy: GracefulNaNPolicy | str | None = None,
        maximize: bool = False,
    ) -> None:
        dimension = int(dimension)
        if dimension <= 0:
            raise ValueError("cost function dimension must be a positive integer")
        self._dimension = dimension
        self.graceful_nan_policy = self._coerce_nan_policy(graceful_nan_policy)
        self.maximize = bool(maximize)
        self.evaluations = 0

    def dimension(self) -> int:
        return self._dimension

    def evaluate(self, position: ArrayLike) -> float:
        """Return the cost at ``position``.

        Raises
        ------
        DimensionMismatchError
            When ``position`` does not have :meth:`dimension` entries.
        ValueError
            When the raw value is non-finite and the policy is ``ERROR``.
        """

        vector = as_vector(position)
        if vector.shape[0] != self._dimension:
            raise DimensionMismatchError(self._dimension, int(vector.shape[0]))

        self.evaluations += 1
        raw_value = self._evaluate_impl(vector)
        try:
            value = float(raw_value)
        except (TypeError, ValueError) as exc:
            raise TypeError("Cost function result must be convertible to float") from exc

        if math.isnan(value) or math.isinf(value):
            return self._handle_invalid_value(value)
        return value

    def __call__(self, position: ArrayLike) -> float:
        return self.evaluate(position)

    @abstractmethod
    def _evaluate_impl(self, position: np.ndarray) -> float:
        """Return the raw cost for a validated parameter vector."""

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _coerce_nan_policy(
        self, candidate: GracefulNaNPolicy | str | None
    ) -> GracefulNaNPolicy:
        if isinstance(candidate, GracefulNaNPolicy):
            return candidate
        if isinstance(candidate, str):
            try:
                return GracefulNaNPolicy(candidate)
            except ValueError as exc:
                raise ValueError(f"Unknown graceful_nan_policy: {candidate!r}") from exc
        return self.DEFAULT_NAN_POLICY

    def _handle_invalid_value(self, value: float) -> float:
        if self.graceful_nan_policy is GracefulNaNPolicy.ERROR:
            raise ValueError(f"Cost function produced a non-finite value: {value}")
        return float("-inf") if self.maximize else float("inf")


__all__ = ["BaseCostFunction", "GracefulNaNPolicy"]

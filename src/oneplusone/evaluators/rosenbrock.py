"""N-dimensional Rosenbrock valley."""
from __future__ import annotations

from typing import Any, Mapping

import numpy as np

from .base import BaseCostFunction, GracefulNaNPolicy


class RosenbrockCostFunction(BaseCostFunction):
    """Sum of ``100 (x[i+1] - x[i]^2)^2 + (1 - x[i])^2``; minimum 0 at all ones."""

    def __init__(
        self,
        dimension: int = 2,
        *,
        graceful_nan_policy: GracefulNaNPolicy | str | None = None,
    ) -> None:
        if int(dimension) < 2:
            raise ValueError("Rosenbrock requires at least two dimensions")
        super().__init__(dimension, graceful_nan_policy=graceful_nan_policy)

    def _evaluate_impl(self, position: np.ndarray) -> float:
        head = position[:-1]
        tail = position[1:]
        return float(np.sum(100.0 * (tail - head**2) ** 2 + (1.0 - head) ** 2))


def create_rosenbrock(config: Mapping[str, Any]) -> RosenbrockCostFunction:
    return RosenbrockCostFunction(
        int(config.get("dimension", 2)),
        graceful_nan_policy=config.get("graceful_nan_policy"),
    )

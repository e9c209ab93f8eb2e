"""Two-dimensional Branin benchmark."""
from __future__ import annotations

import math
from typing import Any, Mapping

import numpy as np

from .base import BaseCostFunction, GracefulNaNPolicy

BRANIN_MINIMUM = 0.397887
"""Global minimum value, attained at (-pi, 12.275), (pi, 2.275) and (9.42478, 2.475)."""


class BraninCostFunction(BaseCostFunction):
    """f(x1, x2) = a (x2 - b x1^2 + c x1 - r)^2 + s (1 - t) cos(x1) + s"""

    a = 1.0
    b = 5.1 / (4.0 * math.pi**2)
    c = 5.0 / math.pi
    r = 6.0
    s = 10.0
    t = 1.0 / (8.0 * math.pi)

    def __init__(self, *, graceful_nan_policy: GracefulNaNPolicy | str | None = None) -> None:
        super().__init__(2, graceful_nan_policy=graceful_nan_policy)

    def _evaluate_impl(self, position: np.ndarray) -> float:
        x1, x2 = float(position[0]), float(position[1])
        return (
            self.a * (x2 - self.b * x1**2 + self.c * x1 - self.r) ** 2
            + self.s * (1.0 - self.t) * math.cos(x1)
            + self.s
        )


def create_branin(config: Mapping[str, Any]) -> BraninCostFunction:
    return BraninCostFunction(graceful_nan_policy=config.get("graceful_nan_policy"))

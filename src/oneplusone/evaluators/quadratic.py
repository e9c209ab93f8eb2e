"""Separable quadratic bowl centred on a target point."""
from __future__ import annotations

from typing import Any, Mapping, Sequence

import numpy as np

from .base import BaseCostFunction, GracefulNaNPolicy


class QuadraticCostFunction(BaseCostFunction):
    """``f(x) = scale * (x - target) . (x - target)``."""

    def __init__(
        self,
        target: Sequence[float],
        *,
        scale: float = 1.0,
        graceful_nan_policy: GracefulNaNPolicy | str | None = None,
        maximize: bool = False,
    ) -> None:
        target_vector = np.asarray(target, dtype=float).reshape(-1)
        super().__init__(
            target_vector.shape[0],
            graceful_nan_policy=graceful_nan_policy,
            maximize=maximize,
        )
        self.target = target_vector
        self.scale = float(scale)

    def _evaluate_impl(self, position: np.ndarray) -> float:
        offset = position - self.target
        return self.scale * float(offset @ offset)


def create_quadratic(config: Mapping[str, Any]) -> QuadraticCostFunction:
    """Factory helper used by YAML configs."""

    target = config.get("target")
    if target is None:
        dimension = int(config.get("dimension", 2))
        target = [0.0] * dimension
    elif isinstance(target, (str, bytes)) or not isinstance(target, Sequence):
        raise TypeError("cost_function.options.target must be a sequence of numbers")
    return QuadraticCostFunction(
        [float(value) for value in target],
        scale=float(config.get("scale", 1.0)),
        graceful_nan_policy=config.get("graceful_nan_policy"),
        maximize=bool(config.get("maximize", False)),
    )

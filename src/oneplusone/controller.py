"""Step-size and covariance adaptation for the (1+1) evolutionary strategy."""
from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .errors import DimensionMismatchError, InvalidParameterError
from .interfaces import CostFunction, NormalVariateSource, as_vector
from .state import SearchState

DEFAULT_GROWTH_FACTOR = 1.05
"""Radius multiplier applied after a successful step."""


def default_shrink_factor(growth_factor: float) -> float:
    """Shrink factor that balances ``growth_factor`` at a 1-in-5 success rate."""

    return growth_factor ** -0.25


@dataclass(frozen=True)
class StepOutcome:
    accepted: bool
    candidate: np.ndarray
    candidate_cost: float
    displacement: np.ndarray


class AdaptiveStepController:
    """Propose, test and adapt one perturbation of a :class:`SearchState`.

    Each step draws ``z ~ N(0, I)`` from the variate source and moves the
    current position by ``radius * C @ z``. A strictly better, finite candidate
    is kept and grows the radius by ``growth_factor``; anything else, including
    a NaN or infinite cost, shrinks it by ``shrink_factor``.

    On acceptance the covariance ``C`` is blended towards the accepted
    direction ``u = delta / |delta|``::

        beta = 1 - 1 / growth_factor
        C <- (1 - beta) * C + beta * trace(C) * u u^T

    The blend preserves ``trace(C)`` so ``C`` only carries the shape of the
    search distribution while ``radius`` carries its size. Convex combination
    of symmetric positive semi-definite matrices keeps ``C`` in that class.
    """

    def __init__(self) -> None:
        self._initial_radius: float | None = None
        self._growth_factor = DEFAULT_GROWTH_FACTOR
        self._shrink_factor = default_shrink_factor(DEFAULT_GROWTH_FACTOR)

    @property
    def initial_radius(self) -> float | None:
        return self._initial_radius

    @property
    def growth_factor(self) -> float:
        return self._growth_factor

    @property
    def shrink_factor(self) -> float:
        return self._shrink_factor

    @property
    def blend_weight(self) -> float:
        return 1.0 - 1.0 / self._growth_factor

    def configure(
        self,
        initial_radius: float,
        growth: float | None = None,
        shrink: float | None = None,
    ) -> None:
        """Validate and store the adaptation constants.

        ``None`` or a negative value for ``growth``/``shrink`` selects the
        default. Nothing is stored unless every value is valid.
        """

        radius = float(initial_radius)
        if not math.isfinite(radius) or radius <= 0.0:
            raise InvalidParameterError(f"initial radius must be positive, got {initial_radius!r}")

        if _use_default(growth):
            growth_factor = DEFAULT_GROWTH_FACTOR
        else:
            growth_factor = float(growth)  # type: ignore[arg-type]
            if not math.isfinite(growth_factor) or growth_factor <= 1.0:
                raise InvalidParameterError(f"growth factor must be greater than 1, got {growth!r}")

        if _use_default(shrink):
            shrink_factor = default_shrink_factor(growth_factor)
        else:
            shrink_factor = float(shrink)  # type: ignore[arg-type]
            if not 0.0 < shrink_factor < 1.0:
                raise InvalidParameterError(f"shrink factor must lie in (0, 1), got {shrink!r}")

        self._initial_radius = radius
        self._growth_factor = growth_factor
        self._shrink_factor = shrink_factor

    def evaluate(self, cost_function: CostFunction, position: np.ndarray) -> float:
        expected = int(cost_function.dimension())
        if position.shape[0] != expected:
            raise DimensionMismatchError(expected, int(position.shape[0]))
        return float(cost_function.evaluate(position.copy()))

    def step(
        self,
        state: SearchState,
        cost_function: CostFunction,
        variates: NormalVariateSource,
        *,
        maximize: bool,
    ) -> StepOutcome:
        raw = np.array([variates.sample() for _ in range(state.dimension)], dtype=float)
        displacement = state.radius * (state.covariance @ raw)
        candidate = as_vector(state.position + displacement)
        candidate_cost = self.evaluate(cost_function, candidate)

        accepted = _improves(candidate_cost, state.cost, maximize=maximize)
        if accepted:
            state.commit(candidate, candidate_cost)
            state.scale_radius(self._growth_factor)
            self._reshape(state, displacement)
        else:
            state.scale_radius(self._shrink_factor)

        return StepOutcome(
            accepted=accepted,
            candidate=candidate,
            candidate_cost=candidate_cost,
            displacement=displacement,
        )

    def _reshape(self, state: SearchState, displacement: np.ndarray) -> None:
        length = float(np.linalg.norm(displacement))
        if length == 0.0 or not math.isfinite(length):
            return
        direction = displacement / length
        beta = self.blend_weight
        scale = float(np.trace(state.covariance))
        blended = (1.0 - beta) * state.covariance + beta * scale * np.outer(direction, direction)
        state.replace_covariance(blended)


def _use_default(value: float | None) -> bool:
    return value is None or float(value) < 0.0


def _improves(candidate: float, current: float, *, maximize: bool) -> bool:
    if not math.isfinite(candidate):
        return False
    if maximize:
        return candidate > current
    return candidate < current


__all__ = [
    "AdaptiveStepController",
    "DEFAULT_GROWTH_FACTOR",
    "StepOutcome",
    "default_shrink_factor",
]

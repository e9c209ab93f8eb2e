"""Optimization loop and public interface of the (1+1) evolutionary strategy."""
from __future__ import annotations

from typing import Callable, List

import numpy as np
from numpy.typing import ArrayLike

from .controller import AdaptiveStepController
from .errors import InvalidParameterError, NotInitializedError
from .interfaces import CostFunction, NormalVariateSource, as_vector
from .state import IterationRecord, OptimizerState, RunStatus, SearchState

DEFAULT_MAXIMUM_ITERATION = 100
DEFAULT_EPSILON = 1.5e-4

IterationObserver = Callable[[IterationRecord], None]

_STOP_DESCRIPTIONS = {
    OptimizerState.UNINITIALIZED: "Optimizer has not been initialized",
    OptimizerState.INITIALIZED: "Optimizer is initialized and has not run",
    OptimizerState.RUNNING: "Optimization is running",
    OptimizerState.CONVERGED: "Search matrix norm fell below epsilon",
    OptimizerState.ITERATION_LIMIT_REACHED: "Maximum number of iterations reached",
    OptimizerState.STOPPED_BY_REQUEST: "Stop requested by caller",
}


class OnePlusOneEvolutionaryOptimizer:
    """(1+1) evolutionary strategy with adaptive radius and covariance.

    The optimizer keeps one candidate, perturbs it with a random step shaped by
    an adaptive covariance matrix and scaled by a radius, and keeps the
    perturbed point only when it strictly improves the cost. The radius grows
    after a success and shrinks after a failure.

    Typical usage::

        optimizer = OnePlusOneEvolutionaryOptimizer()
        optimizer.set_cost_function(cost)
        optimizer.set_normal_variate_generator(NormalVariateGenerator(seed=0))
        optimizer.set_initial_position([0.0, 0.0])
        optimizer.initialize(1.0)
        optimizer.start_optimization()

    :meth:`start_optimization` blocks until the iteration budget is used up,
    the Frobenius norm of ``radius * covariance`` drops below ``epsilon``, or
    :meth:`stop_optimization` is observed at an iteration boundary. Calling it
    again resumes from the last committed state.
    """

    def __init__(
        self,
        *,
        maximum_iteration: int = DEFAULT_MAXIMUM_ITERATION,
        epsilon: float = DEFAULT_EPSILON,
        maximize: bool = False,
    ) -> None:
        self._controller = AdaptiveStepController()
        self._status = RunStatus()
        self._state = OptimizerState.UNINITIALIZED
        self._search: SearchState | None = None
        self._cost_function: CostFunction | None = None
        self._variates: NormalVariateSource | None = None
        self._initial_position: np.ndarray | None = None
        self._observers: List[IterationObserver] = []
        self._accepted_steps = 0
        self._maximum_iteration = 0
        self._epsilon = DEFAULT_EPSILON
        self._maximize = bool(maximize)
        self.set_maximum_iteration(maximum_iteration)
        self.set_epsilon(epsilon)

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------
    def set_cost_function(self, cost_function: CostFunction) -> None:
        self._cost_function = cost_function

    @property
    def cost_function(self) -> CostFunction | None:
        return self._cost_function

    def set_normal_variate_generator(self, generator: NormalVariateSource) -> None:
        self._variates = generator

    def set_initial_position(self, position: ArrayLike) -> None:
        self._initial_position = as_vector(position)

    @property
    def initial_position(self) -> np.ndarray | None:
        if self._initial_position is None:
            return None
        return self._initial_position.copy()

    def add_observer(self, observer: IterationObserver) -> None:
        self._observers.append(observer)

    def remove_observer(self, observer: IterationObserver) -> None:
        self._observers.remove(observer)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    def maximize_on(self) -> None:
        self._maximize = True

    @property
    def maximize(self) -> bool:
        return self._maximize

    def set_maximum_iteration(self, value: int) -> None:
        value = int(value)
        if value < 0:
            raise InvalidParameterError("maximum iteration must be non-negative")
        self._maximum_iteration = value

    @property
    def maximum_iteration(self) -> int:
        return self._maximum_iteration

    def set_epsilon(self, value: float) -> None:
        value = float(value)
        if not value > 0.0:
            raise InvalidParameterError("epsilon must be positive")
        self._epsilon = value

    @property
    def epsilon(self) -> float:
        return self._epsilon

    @property
    def growth_factor(self) -> float:
        return self._controller.growth_factor

    @property
    def shrink_factor(self) -> float:
        return self._controller.shrink_factor

    @property
    def initial_radius(self) -> float | None:
        return self._controller.initial_radius

    def initialize(
        self,
        initial_radius: float,
        growth: float | None = None,
        shrink: float | None = None,
    ) -> None:
        """Set the search radius and adaptation factors; reset the search state.

        ``growth`` and ``shrink`` fall back to 1.05 and ``growth ** -0.25`` when
        omitted or negative.
        """

        self._controller.configure(initial_radius, growth, shrink)
        self._search = None
        self._accepted_steps = 0
        self._status.current_iteration = 0
        self._status.initialized = True
        self._state = OptimizerState.INITIALIZED

    # ------------------------------------------------------------------
    # Read-only snapshots
    # ------------------------------------------------------------------
    @property
    def state(self) -> OptimizerState:
        return self._state

    @property
    def stop_condition_description(self) -> str:
        return _STOP_DESCRIPTIONS[self._state]

    @property
    def current_iteration(self) -> int:
        return self._status.current_iteration

    @property
    def current_cost(self) -> float:
        if self._search is None:
            return float("nan")
        return self._search.cost

    @property
    def current_position(self) -> np.ndarray | None:
        if self._search is None:
            return self.initial_position
        return self._search.position.copy()

    @property
    def radius(self) -> float | None:
        if self._search is None:
            return self._controller.initial_radius
        return self._search.radius

    @property
    def covariance(self) -> np.ndarray | None:
        if self._search is None:
            return None
        return self._search.covariance.copy()

    @property
    def frobenius_norm(self) -> float | None:
        if self._search is None:
            return None
        return self._search.search_matrix_norm()

    @property
    def accepted_steps(self) -> int:
        return self._accepted_steps

    @property
    def stop_requested(self) -> bool:
        return self._status.stop_requested

    # ------------------------------------------------------------------
    # Run control
    # ------------------------------------------------------------------
    def stop_optimization(self) -> None:
        """Ask the running loop to stop at the next iteration boundary."""

        self._status.stop_requested = True

    def start_optimization(self) -> OptimizerState:
        """Run until a termination condition holds and return the terminal state."""

        if not self._status.initialized:
            raise NotInitializedError("initialize() must be called before start_optimization()")
        if self._cost_function is None:
            raise NotInitializedError("A cost function must be set before start_optimization()")
        if self._variates is None:
            raise NotInitializedError(
                "A normal variate generator must be set before start_optimization()"
            )

        cost_function = self._cost_function
        variates = self._variates
        if self._search is None:
            self._search = self._initial_search_state(cost_function)

        self._status.stop_requested = False
        self._state = OptimizerState.RUNNING
        try:
            while True:
                terminal = self._termination_state(self._search)
                if terminal is not None:
                    self._state = terminal
                    return terminal

                outcome = self._controller.step(
                    self._search,
                    cost_function,
                    variates,
                    maximize=self._maximize,
                )
                if outcome.accepted:
                    self._accepted_steps += 1
                self._status.current_iteration += 1
                self._notify(outcome.accepted, outcome.candidate_cost)
        except Exception:
            self._state = OptimizerState.INITIALIZED
            raise

    def _initial_search_state(self, cost_function: CostFunction) -> SearchState:
        position = self._initial_position
        if position is None:
            position = np.zeros(int(cost_function.dimension()), dtype=float)
        radius = self._controller.initial_radius
        assert radius is not None
        search = SearchState.create(position, radius)
        search.cost = self._controller.evaluate(cost_function, search.position)
        return search

    def _termination_state(self, search: SearchState) -> OptimizerState | None:
        if self._status.current_iteration >= self._maximum_iteration:
            return OptimizerState.ITERATION_LIMIT_REACHED
        if search.search_matrix_norm() < self._epsilon:
            return OptimizerState.CONVERGED
        if self._status.stop_requested:
            return OptimizerState.STOPPED_BY_REQUEST
        return None

    def _notify(self, accepted: bool, candidate_cost: float) -> None:
        if not self._observers or self._search is None:
            return
        record = IterationRecord(
            iteration=self._status.current_iteration,
            accepted=accepted,
            cost=self._search.cost,
            candidate_cost=float(candidate_cost),
            radius=self._search.radius,
            frobenius_norm=self._search.search_matrix_norm(),
            position=[float(value) for value in self._search.position],
        )
        for observer in list(self._observers):
            observer(record)


__all__ = [
    "DEFAULT_EPSILON",
    "DEFAULT_MAXIMUM_ITERATION",
    "IterationObserver",
    "OnePlusOneEvolutionaryOptimizer",
]

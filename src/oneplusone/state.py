"""Mutable search state and run bookkeeping owned by a single optimizer."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

import numpy as np


class OptimizerState(str, Enum):
    """Lifecycle states of an optimizer instance."""

    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    RUNNING = "running"
    CONVERGED = "converged"
    ITERATION_LIMIT_REACHED = "iteration_limit_reached"
    STOPPED_BY_REQUEST = "stopped_by_request"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


TERMINAL_STATES = frozenset(
    {
        OptimizerState.CONVERGED,
        OptimizerState.ITERATION_LIMIT_REACHED,
        OptimizerState.STOPPED_BY_REQUEST,
    }
)


@dataclass
class SearchState:
    """Current best candidate together with the adaptive search distribution.

    ``covariance`` shapes each perturbation and ``radius`` scales it. Arrays are
    owned by the state; accessors on the optimizer hand out copies.
    """

    position: np.ndarray
    cost: float
    covariance: np.ndarray
    radius: float

    @classmethod
    def create(cls, position: np.ndarray, radius: float) -> "SearchState":
        dimension = int(position.shape[0])
        return cls(
            position=np.array(position, dtype=float, copy=True),
            cost=float("nan"),
            covariance=np.eye(dimension),
            radius=float(radius),
        )

    @property
    def dimension(self) -> int:
        return int(self.position.shape[0])

    def commit(self, position: np.ndarray, cost: float) -> None:
        self.position = np.array(position, dtype=float, copy=True)
        self.cost = float(cost)

    def scale_radius(self, factor: float) -> None:
        self.radius *= factor

    def replace_covariance(self, covariance: np.ndarray) -> None:
        self.covariance = 0.5 * (covariance + covariance.T)

    def search_matrix_norm(self) -> float:
        """Frobenius norm of the effective step matrix ``radius * covariance``."""

        return float(abs(self.radius) * np.linalg.norm(self.covariance, ord="fro"))


@dataclass
class RunStatus:
    current_iteration: int = 0
    stop_requested: bool = False
    initialized: bool = False


@dataclass(frozen=True)
class IterationRecord:
    """Snapshot emitted to observers after every step."""

    iteration: int
    accepted: bool
    cost: float
    candidate_cost: float
    radius: float
    frobenius_norm: float
    position: List[float] = field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "iteration": self.iteration,
            "accepted": self.accepted,
            "cost": self.cost,
            "candidate_cost": self.candidate_cost,
            "radius": self.radius,
            "frobenius_norm": self.frobenius_norm,
            "position": list(self.position),
        }


__all__ = [
    "IterationRecord",
    "OptimizerState",
    "RunStatus",
    "SearchState",
    "TERMINAL_STATES",
]

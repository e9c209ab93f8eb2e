"""Config-driven driver that wires a cost function into the optimizer."""
from __future__ import annotations

import importlib
import inspect
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping

from .config import RunConfig
from .evaluators import BaseCostFunction
from .interfaces import CostFunction
from .iteration_log import IterationLogger
from .optimizer import DEFAULT_EPSILON, DEFAULT_MAXIMUM_ITERATION, OnePlusOneEvolutionaryOptimizer
from .state import OptimizerState
from .variates import NormalVariateGenerator


@dataclass
class OptimizationResult:
    """Container for summarising the optimization run."""

    iterations: int
    best_position: List[float]
    best_cost: float
    termination: OptimizerState
    radius: float
    frobenius_norm: float
    accepted_steps: int
    log_path: Path | None = None
    summary_path: Path | None = None

    @property
    def acceptance_rate(self) -> float:
        if self.iterations == 0:
            return 0.0
        return self.accepted_steps / self.iterations

    def to_payload(self) -> Dict[str, Any]:
        return {
            "iterations": self.iterations,
            "best_position": list(self.best_position),
            "best_cost": self.best_cost,
            "termination": self.termination.value,
            "radius": self.radius,
            "frobenius_norm": self.frobenius_norm,
            "accepted_steps": self.accepted_steps,
            "acceptance_rate": self.acceptance_rate,
            "log_path": str(self.log_path) if self.log_path else None,
        }


def load_cost_function(config: Mapping[str, Any]) -> CostFunction:
    """Resolve ``module``/``callable`` into a cost function instance.

    ``callable`` may name a cost function instance, a class constructed with
    ``options`` as keyword arguments, or a factory taking the options mapping.
    """

    module = importlib.import_module(config["module"])
    target = getattr(module, config["callable"])
    options = dict(config.get("options") or {})

    candidate: Any
    if isinstance(target, type):
        candidate = target(**options)
    elif isinstance(target, CostFunction):
        candidate = target
    elif callable(target):
        signature = inspect.signature(target)
        if len(signature.parameters) == 0:
            candidate = target()
        else:
            candidate = target(options)
    else:
        raise TypeError("cost_function.callable must name a factory, class, or cost function")

    if not isinstance(candidate, CostFunction):
        raise TypeError("Cost function factory did not return an object with dimension() and evaluate()")
    return candidate


def build_optimizer(
    config: Mapping[str, Any],
    cost_function: CostFunction,
) -> OnePlusOneEvolutionaryOptimizer:
    optimizer_cfg = config.get("optimizer") or {}
    optimizer = OnePlusOneEvolutionaryOptimizer(
        maximum_iteration=int(optimizer_cfg.get("maximum_iteration", DEFAULT_MAXIMUM_ITERATION)),
        epsilon=float(optimizer_cfg.get("epsilon", DEFAULT_EPSILON)),
    )
    if optimizer_cfg.get("maximize"):
        optimizer.maximize_on()
    if isinstance(cost_function, BaseCostFunction):
        cost_function.maximize = optimizer.maximize
    optimizer.set_cost_function(cost_function)
    optimizer.set_normal_variate_generator(NormalVariateGenerator(config.get("seed")))

    initial_position = config.get("initial_position")
    if initial_position is not None:
        optimizer.set_initial_position(initial_position)

    optimizer.initialize(
        float(optimizer_cfg.get("initial_radius", 1.0)),
        optimizer_cfg.get("growth_factor"),
        optimizer_cfg.get("shrink_factor"),
    )
    return optimizer


def run_optimization(config: Mapping[str, Any] | RunConfig) -> OptimizationResult:
    """Run the optimizer described by ``config`` and return its outcome."""

    if isinstance(config, RunConfig):
        config = config.model_dump(mode="python")
    else:
        config = RunConfig.model_validate(dict(config)).model_dump(mode="python")

    cost_function = load_cost_function(config["cost_function"])
    optimizer = build_optimizer(config, cost_function)

    artifacts = config.get("artifacts") or {}
    log_file = artifacts.get("log_file")
    log_path = Path(log_file) if log_file else None

    logger: IterationLogger | None = None
    if log_path is not None:
        logger = IterationLogger(log_path, cost_function.dimension())
        optimizer.add_observer(logger)
    try:
        termination = optimizer.start_optimization()
    finally:
        if logger is not None:
            optimizer.remove_observer(logger)
            logger.close()

    position = optimizer.current_position
    result = OptimizationResult(
        iterations=optimizer.current_iteration,
        best_position=[float(value) for value in position] if position is not None else [],
        best_cost=optimizer.current_cost,
        termination=termination,
        radius=float(optimizer.radius or 0.0),
        frobenius_norm=float(optimizer.frobenius_norm or 0.0),
        accepted_steps=optimizer.accepted_steps,
        log_path=log_path,
    )

    run_root = artifacts.get("run_root")
    if run_root:
        summary_path = Path(run_root) / "summary.json"
        try:
            summary_path.parent.mkdir(parents=True, exist_ok=True)
            summary_path.write_text(
                json.dumps(
                    {
                        "metadata": config.get("metadata"),
                        "seed": config.get("seed"),
                        "result": result.to_payload(),
                    },
                    indent=2,
                    ensure_ascii=False,
                ),
                encoding="utf-8",
            )
            result.summary_path = summary_path
        except OSError as exc:
            print(f"[warning] Failed to write run summary: {exc}")

    return result


__all__ = [
    "OptimizationResult",
    "build_optimizer",
    "load_cost_function",
    "run_optimization",
]

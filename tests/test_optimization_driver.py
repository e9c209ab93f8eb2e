"""Tests for the config-driven optimization driver."""
from __future__ import annotations

import csv
import json
import math
import tempfile
import unittest
from pathlib import Path

import numpy as np

from oneplusone import optimization
from oneplusone.evaluators import BaseCostFunction, BraninCostFunction, QuadraticCostFunction
from oneplusone.state import OptimizerState

SHARED_QUADRATIC = QuadraticCostFunction([1.0, 1.0])


def zero_argument_factory() -> QuadraticCostFunction:
    return QuadraticCostFunction([2.0])


def not_a_cost_function(options):
    return {"cost": 1.0}


class ScaledLineCost:
    """Plain cost function class configured through keyword options."""

    def __init__(self, *, slope: float = 1.0, dimension: int = 1) -> None:
        self.slope = slope
        self._dimension = dimension

    def dimension(self) -> int:
        return self._dimension

    def evaluate(self, position) -> float:
        return self.slope * float(position[0])


class HalfLineRootCost(BaseCostFunction):
    """``-sqrt(1 - x)``, undefined beyond ``x = 1`` where it peaks at 0."""

    def __init__(self, **kwargs) -> None:
        super().__init__(1, **kwargs)

    def _evaluate_impl(self, position: np.ndarray) -> float:
        if position[0] > 1.0:
            return float("nan")
        return -math.sqrt(1.0 - position[0])


def make_config(tmp: Path | None = None, **overrides) -> dict:
    config = {
        "metadata": {"name": "driver", "description": "driver test"},
        "seed": 17,
        "initial_position": [0.0, 0.0],
        "optimizer": {"initial_radius": 1.0, "maximum_iteration": 200, "epsilon": 1e-8},
        "cost_function": {
            "module": "oneplusone.evaluators.quadratic",
            "callable": "create_quadratic",
            "options": {"target": [3.0, 4.0]},
        },
    }
    if tmp is not None:
        config["artifacts"] = {"run_root": str(tmp / "run"), "log_file": str(tmp / "run" / "log.csv")}
    config.update(overrides)
    return config


class LoadCostFunctionTests(unittest.TestCase):
    def test_factory_receives_options(self) -> None:
        cost = optimization.load_cost_function(
            {"module": "oneplusone.evaluators.quadratic", "callable": "create_quadratic", "options": {"target": [1, 2, 3]}}
        )
        self.assertEqual(cost.dimension(), 3)

    def test_class_is_constructed_from_options(self) -> None:
        cost = optimization.load_cost_function(
            {"module": "oneplusone.evaluators.branin", "callable": "BraninCostFunction"}
        )
        self.assertIsInstance(cost, BraninCostFunction)

    def test_instances_and_zero_argument_factories(self) -> None:
        instance = optimization.load_cost_function({"module": __name__, "callable": "SHARED_QUADRATIC"})
        self.assertIs(instance, SHARED_QUADRATIC)
        built = optimization.load_cost_function({"module": __name__, "callable": "zero_argument_factory"})
        self.assertEqual(built.dimension(), 1)

    def test_plain_classes_receive_options_as_keywords(self) -> None:
        cost = optimization.load_cost_function(
            {"module": __name__, "callable": "ScaledLineCost", "options": {"slope": 3.0, "dimension": 2}}
        )
        self.assertIsInstance(cost, ScaledLineCost)
        self.assertEqual(cost.dimension(), 2)
        self.assertEqual(cost.evaluate([1.0, 0.0]), 3.0)

    def test_factory_must_return_cost_function(self) -> None:
        with self.assertRaises(TypeError):
            optimization.load_cost_function({"module": __name__, "callable": "not_a_cost_function"})


class BuildOptimizerTests(unittest.TestCase):
    def test_applies_configuration(self) -> None:
        config = make_config()
        config["optimizer"].update({"maximize": True, "growth_factor": 1.2, "shrink_factor": 0.9})
        optimizer = optimization.build_optimizer(config, QuadraticCostFunction([0.0, 0.0]))

        self.assertTrue(optimizer.maximize)
        self.assertEqual(optimizer.growth_factor, 1.2)
        self.assertEqual(optimizer.shrink_factor, 0.9)
        self.assertEqual(optimizer.maximum_iteration, 200)
        self.assertEqual(optimizer.epsilon, 1e-8)
        self.assertIs(optimizer.state, OptimizerState.INITIALIZED)
        self.assertEqual(optimizer.initial_position.tolist(), [0.0, 0.0])


    def test_cost_function_follows_optimizer_direction(self) -> None:
        cost = HalfLineRootCost(graceful_nan_policy="coerce_to_inf")
        config = make_config()
        config["optimizer"]["maximize"] = True
        config["initial_position"] = [0.0]
        optimization.build_optimizer(config, cost)

        self.assertTrue(cost.maximize)
        self.assertEqual(cost.evaluate([2.0]), -math.inf)


class RunOptimizationTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_run_improves_and_writes_artifacts(self) -> None:
        result = optimization.run_optimization(make_config(self.tmp))

        self.assertIs(result.termination, OptimizerState.ITERATION_LIMIT_REACHED)
        self.assertEqual(result.iterations, 200)
        self.assertLess(result.best_cost, 25.0)
        self.assertGreater(result.accepted_steps, 0)
        self.assertAlmostEqual(result.acceptance_rate, result.accepted_steps / 200)

        with result.log_path.open("r", encoding="utf-8", newline="") as fh:
            rows = list(csv.DictReader(fh))
        self.assertEqual(len(rows), 200)

        summary = json.loads(result.summary_path.read_text(encoding="utf-8"))
        self.assertEqual(summary["result"]["termination"], "iteration_limit_reached")
        self.assertEqual(summary["result"]["iterations"], 200)
        self.assertEqual(summary["seed"], 17)

    def test_maximizing_never_keeps_an_undefined_point(self) -> None:
        config = make_config(
            seed=0,
            initial_position=[0.0],
            cost_function={
                "module": __name__,
                "callable": "HalfLineRootCost",
                "options": {"graceful_nan_policy": "coerce_to_inf"},
            },
        )
        config["optimizer"]["maximize"] = True

        result = optimization.run_optimization(config)

        self.assertTrue(math.isfinite(result.best_cost))
        self.assertLessEqual(result.best_position[0], 1.0)
        self.assertLessEqual(result.best_cost, 0.0)
        self.assertGreater(result.best_cost, -1.0)

    def test_same_seed_is_reproducible(self) -> None:
        first = optimization.run_optimization(make_config())
        second = optimization.run_optimization(make_config())
        self.assertEqual(first.best_position, second.best_position)
        self.assertEqual(first.best_cost, second.best_cost)
        self.assertIsNone(first.summary_path)
        self.assertIsNone(first.log_path)

    def test_zero_budget_returns_initial_point(self) -> None:
        config = make_config()
        config["optimizer"]["maximum_iteration"] = 0
        result = optimization.run_optimization(config)
        self.assertEqual(result.iterations, 0)
        self.assertEqual(result.best_position, [0.0, 0.0])
        self.assertEqual(result.best_cost, 25.0)
        self.assertEqual(result.acceptance_rate, 0.0)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()

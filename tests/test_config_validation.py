from __future__ import annotations

import unittest

from oneplusone.config import OptimizerConfig, RunConfig, ValidationError


def make_base_config() -> dict:
    return {
        "metadata": {
            "name": "experiment",
            "description": "example",
        },
        "seed": 123,
        "initial_position": [0.0, 0.0],
        "optimizer": {
            "initial_radius": 1.0,
            "maximum_iteration": 50,
            "epsilon": 1e-6,
        },
        "cost_function": {
            "module": "oneplusone.evaluators.quadratic",
            "callable": "create_quadratic",
            "options": {"target": [3.0, 4.0]},
        },
    }


class RunConfigValidationTests(unittest.TestCase):
    def test_valid_configuration_passes(self) -> None:
        config = RunConfig.model_validate(make_base_config())
        self.assertEqual(config.optimizer.maximum_iteration, 50)
        self.assertFalse(config.optimizer.maximize)
        self.assertAlmostEqual(config.optimizer.resolved_growth_factor, 1.05)
        self.assertAlmostEqual(config.optimizer.resolved_shrink_factor, 1.05 ** -0.25)

    def test_optimizer_section_is_optional(self) -> None:
        data = make_base_config()
        data.pop("optimizer")
        config = RunConfig.model_validate(data)
        self.assertEqual(config.optimizer.maximum_iteration, 100)
        self.assertEqual(config.optimizer.epsilon, 1.5e-4)

    def test_unknown_keys_are_rejected(self) -> None:
        data = make_base_config()
        data["optimizer"]["learning_rate"] = 0.1
        with self.assertRaises(ValidationError):
            RunConfig.model_validate(data)

    def test_radius_must_be_positive(self) -> None:
        data = make_base_config()
        data["optimizer"]["initial_radius"] = 0.0
        with self.assertRaises(ValidationError):
            RunConfig.model_validate(data)

    def test_negative_factors_select_defaults(self) -> None:
        config = OptimizerConfig.model_validate({"growth_factor": -1, "shrink_factor": -1})
        self.assertAlmostEqual(config.resolved_growth_factor, 1.05)
        self.assertAlmostEqual(config.resolved_shrink_factor, 1.05 ** -0.25)

    def test_explicit_factors_are_range_checked(self) -> None:
        for overrides in ({"growth_factor": 1.0}, {"growth_factor": 0.5}, {"shrink_factor": 1.0}, {"shrink_factor": 0.0}):
            with self.subTest(overrides=overrides):
                with self.assertRaises(ValidationError):
                    OptimizerConfig.model_validate(overrides)

    def test_shrink_default_follows_explicit_growth(self) -> None:
        config = OptimizerConfig.model_validate({"growth_factor": 1.2})
        self.assertAlmostEqual(config.resolved_shrink_factor, 1.2 ** -0.25)

    def test_epsilon_and_iterations_are_checked(self) -> None:
        with self.assertRaises(ValidationError):
            OptimizerConfig.model_validate({"epsilon": 0.0})
        with self.assertRaises(ValidationError):
            OptimizerConfig.model_validate({"maximum_iteration": -5})
        self.assertEqual(OptimizerConfig.model_validate({"maximum_iteration": 0}).maximum_iteration, 0)

    def test_initial_position_must_be_non_empty(self) -> None:
        data = make_base_config()
        data["initial_position"] = []
        with self.assertRaises(ValidationError):
            RunConfig.model_validate(data)

    def test_cost_function_strings_are_required(self) -> None:
        data = make_base_config()
        data["cost_function"]["module"] = "  "
        with self.assertRaises(ValidationError):
            RunConfig.model_validate(data)

    def test_metadata_name_is_required(self) -> None:
        data = make_base_config()
        data["metadata"]["name"] = ""
        with self.assertRaises(ValidationError):
            RunConfig.model_validate(data)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()

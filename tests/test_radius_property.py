"""Property-based tests for the radius schedule."""
from __future__ import annotations

import math

from hypothesis import given, settings, strategies as st

from helpers import ConstantCost, ScriptedVariates
from oneplusone.optimizer import OnePlusOneEvolutionaryOptimizer


@settings(max_examples=30, deadline=None)
@given(
    initial_radius=st.floats(min_value=0.01, max_value=100.0),
    rejections=st.integers(min_value=0, max_value=60),
    shrink=st.floats(min_value=0.5, max_value=0.99),
)
def test_consecutive_rejections_shrink_radius_geometrically(
    initial_radius: float, rejections: int, shrink: float
) -> None:
    optimizer = OnePlusOneEvolutionaryOptimizer(maximum_iteration=rejections, epsilon=1e-300)
    optimizer.set_cost_function(ConstantCost(dimension=3))
    optimizer.set_normal_variate_generator(ScriptedVariates([0.7, -1.3, 0.2]))
    optimizer.initialize(initial_radius, shrink=shrink)

    optimizer.start_optimization()

    assert optimizer.current_iteration == rejections
    assert math.isclose(optimizer.radius, initial_radius * shrink**rejections, rel_tol=1e-9)

"""Cost function package exports."""

from .base import BaseCostFunction, GracefulNaNPolicy
from .branin import BRANIN_MINIMUM, BraninCostFunction, create_branin
from .quadratic import QuadraticCostFunction, create_quadratic
from .rosenbrock import RosenbrockCostFunction, create_rosenbrock

__all__ = [
    "BaseCostFunction",
    "GracefulNaNPolicy",
    "BRANIN_MINIMUM",
    "BraninCostFunction",
    "QuadraticCostFunction",
    "RosenbrockCostFunction",
    "create_branin",
    "create_quadratic",
    "create_rosenbrock",
]

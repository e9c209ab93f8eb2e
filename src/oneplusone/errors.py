"""Exception hierarchy raised by the optimizer."""
from __future__ import annotations


class OptimizerError(RuntimeError):
    """Base class for configuration and programming errors of an optimizer run."""


class NotInitializedError(OptimizerError):
    """Raised when optimization starts before all collaborators are in place."""


class InvalidParameterError(OptimizerError, ValueError):
    """Raised when a radius, growth or shrink factor is out of range."""


class DimensionMismatchError(OptimizerError, ValueError):
    """Raised when a parameter vector disagrees with the cost function dimension."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"Parameter vector has {actual} entries but the cost function expects {expected}"
        )
        self.expected = expected
        self.actual = actual


__all__ = [
    "DimensionMismatchError",
    "InvalidParameterError",
    "NotInitializedError",
    "OptimizerError",
]

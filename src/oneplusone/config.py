"""Configuration schema and validation for optimizer runs."""

from __future__ import annotations

import math
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .controller import DEFAULT_GROWTH_FACTOR, default_shrink_factor
from .optimizer import DEFAULT_EPSILON, DEFAULT_MAXIMUM_ITERATION


class MetadataConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    description: str = ""

    @model_validator(mode="after")
    def validate_strings(self) -> "MetadataConfig":
        if not self.name.strip():
            raise ValueError("metadata.name must be a non-empty string")
        return self


class OptimizerConfig(BaseModel):
    """Settings applied to :class:`OnePlusOneEvolutionaryOptimizer` before a run.

    ``growth_factor`` and ``shrink_factor`` accept ``None`` or a negative number
    to select the defaults (1.05 and ``growth_factor ** -0.25``).
    """

    model_config = ConfigDict(extra="forbid")

    initial_radius: float = 1.0
    growth_factor: float | None = None
    shrink_factor: float | None = None
    maximum_iteration: int = DEFAULT_MAXIMUM_ITERATION
    epsilon: float = DEFAULT_EPSILON
    maximize: bool = False

    @model_validator(mode="after")
    def validate_numbers(self) -> "OptimizerConfig":
        if not math.isfinite(self.initial_radius) or self.initial_radius <= 0:
            raise ValueError("optimizer.initial_radius must be positive")
        if self.growth_factor is not None and self.growth_factor >= 0 and self.growth_factor <= 1:
            raise ValueError("optimizer.growth_factor must be greater than 1")
        if self.shrink_factor is not None and self.shrink_factor >= 0:
            if not 0 < self.shrink_factor < 1:
                raise ValueError("optimizer.shrink_factor must lie in (0, 1)")
        if self.maximum_iteration < 0:
            raise ValueError("optimizer.maximum_iteration must be non-negative")
        if not self.epsilon > 0:
            raise ValueError("optimizer.epsilon must be positive")
        return self

    @property
    def resolved_growth_factor(self) -> float:
        if self.growth_factor is None or self.growth_factor < 0:
            return DEFAULT_GROWTH_FACTOR
        return self.growth_factor

    @property
    def resolved_shrink_factor(self) -> float:
        if self.shrink_factor is None or self.shrink_factor < 0:
            return default_shrink_factor(self.resolved_growth_factor)
        return self.shrink_factor


class CostFunctionConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    module: str
    callable: str
    options: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_strings(self) -> "CostFunctionConfig":
        if not self.module.strip():
            raise ValueError("cost_function.module must be a non-empty string")
        if not self.callable.strip():
            raise ValueError("cost_function.callable must be a non-empty string")
        return self


class ArtifactsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    run_root: str | None = None
    log_file: str | None = None

    @model_validator(mode="after")
    def validate_paths(self) -> "ArtifactsConfig":
        if self.run_root is not None and not self.run_root.strip():
            raise ValueError("artifacts.run_root must be a non-empty string when provided")
        if self.log_file is not None and not self.log_file.strip():
            raise ValueError("artifacts.log_file must be a non-empty string when provided")
        return self


class RunConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    metadata: MetadataConfig
    seed: int | None = None
    initial_position: List[float] | None = None
    optimizer: OptimizerConfig = Field(default_factory=OptimizerConfig)
    cost_function: CostFunctionConfig
    artifacts: ArtifactsConfig | None = None

    @model_validator(mode="after")
    def validate_all(self) -> "RunConfig":
        if self.initial_position is not None:
            if not self.initial_position:
                raise ValueError("initial_position must contain at least one value")
            if not all(math.isfinite(value) for value in self.initial_position):
                raise ValueError("initial_position entries must be finite numbers")
        return self


__all__ = [
    "ArtifactsConfig",
    "CostFunctionConfig",
    "MetadataConfig",
    "OptimizerConfig",
    "RunConfig",
    "ValidationError",
]

"""Simulation parameters for the savanna-forest boundary model."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, replace
from typing import Any

from .exceptions import InvalidConfigurationError


@dataclass(frozen=True)
class SimulationConfig:
    """All parameters of a single model run.

    Defaults reproduce the reference experiment: a 50 x 200 landscape,
    2500 yearly steps and a fire every 15 years.
    """

    # Grid
    height: int = 50
    width: int = 200

    # Run control
    n_steps: int = 2500
    recurrence_interval: int = 15
    seed: int | None = None

    # Fire
    fire_probability_forest: float = 0.035
    fire_probability_savanna: float = 0.3

    # Soil
    fire_soil_feedback: bool = True
    edaphic_boundary: bool = True
    fire_impact: float = 0.2
    recovery_rate: float = 0.001
    savanna_fertility: float = 5.0
    minimum_fertility: float = 1.0

    # Forest expansion
    base_fire_recovery_time: float = 15
    dispersal_rate: float = 1.0

    # Rendering
    plotting: bool = False

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Reject parameter combinations the model cannot run with."""
        for name in ("height", "width", "n_steps", "recurrence_interval"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise InvalidConfigurationError(f"{name} must be a positive integer, got {value!r}")

        for name in ("fire_probability_forest", "fire_probability_savanna"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise InvalidConfigurationError(f"{name} must lie in [0, 1], got {value!r}")

        for name in (
            "dispersal_rate",
            "fire_impact",
            "recovery_rate",
            "base_fire_recovery_time",
            "savanna_fertility",
            "minimum_fertility",
        ):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise InvalidConfigurationError(f"{name} must be finite and non-negative, got {value!r}")

        if self.minimum_fertility <= 0:
            raise InvalidConfigurationError(
                f"minimum_fertility must be positive, got {self.minimum_fertility!r}"
            )
        if self.savanna_fertility < self.minimum_fertility:
            raise InvalidConfigurationError(
                f"savanna_fertility ({self.savanna_fertility}) is below "
                f"minimum_fertility ({self.minimum_fertility})"
            )

    @property
    def shape(self) -> tuple[int, int]:
        return self.height, self.width

    def with_overrides(self, **overrides: Any) -> "SimulationConfig":
        """Return a validated copy with some parameters replaced."""
        unknown = set(overrides) - set(asdict(self))
        if unknown:
            raise InvalidConfigurationError(f"Unknown parameters: {', '.join(sorted(unknown))}")
        return replace(self, **overrides)


DEFAULT_CONFIG = SimulationConfig()

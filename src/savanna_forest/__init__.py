"""
Savanna-forest boundary simulation.

A stochastic cellular automaton of fire, soil fertility and forest
dispersal used to compare fire-soil feedback with an edaphic boundary
as explanations of forest-savanna transitions.
"""

from .config import SimulationConfig
from .exceptions import EmptyIgnitionPoolError, InvalidConfigurationError, SavannaForestError
from .landscape import Landscape, LandscapeClass
from .model import SavannaForestModel, SimulationResult, StepSnapshot, iter_simulation, run_simulation

__version__ = "0.1.0"

__all__ = [
    "Landscape",
    "LandscapeClass",
    "SimulationConfig",
    "SavannaForestModel",
    "SimulationResult",
    "StepSnapshot",
    "iter_simulation",
    "run_simulation",
    "SavannaForestError",
    "InvalidConfigurationError",
    "EmptyIgnitionPoolError",
]

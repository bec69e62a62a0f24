"""Soil fertility feedback from fire."""

import numpy as np

from .landscape import OPEN_CLASSES, LandscapeClass

DEFAULT_FIRE_IMPACT = 0.2
DEFAULT_RECOVERY_RATE = 0.001


def update_soil_fertility(
    soil_fertility: np.ndarray,
    classes: np.ndarray,
    burning: np.ndarray,
    fire_impact: float = DEFAULT_FIRE_IMPACT,
    recovery_rate: float = DEFAULT_RECOVERY_RATE,
    minimum_fertility: float = 1.0,
) -> np.ndarray:
    """Apply one step of fire-driven fertility change, in place.

    Burnt savanna (colonised or not) gains ``fire_impact``. Unburnt forest
    relaxes by ``recovery_rate`` but never below ``minimum_fertility``.
    Every other cell is left as it is.
    """
    burnt_open = burning & np.isin(classes, OPEN_CLASSES)
    recovering = (classes == LandscapeClass.Forest) & ~burning

    soil_fertility[burnt_open] += fire_impact
    soil_fertility[recovering] = np.maximum(
        minimum_fertility, soil_fertility[recovering] - recovery_rate
    )
    return soil_fertility

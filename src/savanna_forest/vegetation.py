"""Vegetation change: fire damage, maturation of colonised cells and seed dispersal."""

from __future__ import annotations

import numpy as np

from .landscape import WOODY_CLASSES, LandscapeClass

DEFAULT_BASE_FIRE_RECOVERY_TIME = 15
DEFAULT_DISPERSAL_RATE = 1.0


def update_landscape(classes: np.ndarray, burning: np.ndarray) -> np.ndarray:
    """Turn burnt forest and burnt colonised savanna back into savanna, in place."""
    burnt_woody = burning & np.isin(classes, WOODY_CLASSES)
    classes[burnt_woody] = LandscapeClass.Savanna
    return classes


def mature_colonised_cells(
    classes: np.ndarray,
    colonisation_age: np.ndarray,
    soil_fertility: np.ndarray,
    base_fire_recovery_time: float = DEFAULT_BASE_FIRE_RECOVERY_TIME,
) -> np.ndarray:
    """Age every colonised cell by one step and promote the old enough ones to forest.

    A cell needs ``base_fire_recovery_time * soil_fertility`` steps to mature.

    Returns:
        Boolean mask of the cells that became forest.
    """
    colonised = classes == LandscapeClass.ColonisedSavanna
    colonisation_age[colonised] += 1

    required = base_fire_recovery_time * soil_fertility
    matured = colonised & (colonisation_age >= required)
    classes[matured] = LandscapeClass.Forest
    return matured


def disperse_propagules(
    classes: np.ndarray,
    colonisation_age: np.ndarray,
    rng: np.random.Generator,
    dispersal_rate: float = DEFAULT_DISPERSAL_RATE,
) -> np.ndarray:
    """Let every forest cell throw one propagule.

    Distances are Poisson(``dispersal_rate``) and directions uniform on
    [0, 2*pi). Targets are rounded to the nearest cell (ties to even).
    A propagule landing on savanna colonises it with age 0; landing
    anywhere else, or off the grid, it is lost. Sources are taken in
    row-major order.

    Returns:
        Boolean mask of the newly colonised cells.
    """
    height, width = classes.shape
    sources = np.argwhere(classes == LandscapeClass.Forest)
    colonised = np.zeros(classes.shape, dtype=bool)
    if len(sources) == 0:
        return colonised

    distances = rng.poisson(dispersal_rate, size=len(sources))
    angles = rng.uniform(0.0, 2.0 * np.pi, size=len(sources))

    target_rows = np.rint(sources[:, 0] + distances * np.cos(angles)).astype(np.int64)
    target_cols = np.rint(sources[:, 1] + distances * np.sin(angles)).astype(np.int64)

    inside = (
        (target_rows >= 0) & (target_rows < height)
        & (target_cols >= 0) & (target_cols < width)
    )
    target_rows = target_rows[inside]
    target_cols = target_cols[inside]

    # Dispersal never creates savanna, so the pre-dispersal map decides every landing.
    lands_on_savanna = classes[target_rows, target_cols] == LandscapeClass.Savanna
    colonised[target_rows[lands_on_savanna], target_cols[lands_on_savanna]] = True

    classes[colonised] = LandscapeClass.ColonisedSavanna
    colonisation_age[colonised] = 0
    return colonised


def forest_expansion(
    classes: np.ndarray,
    colonisation_age: np.ndarray,
    soil_fertility: np.ndarray,
    rng: np.random.Generator,
    base_fire_recovery_time: float = DEFAULT_BASE_FIRE_RECOVERY_TIME,
    dispersal_rate: float = DEFAULT_DISPERSAL_RATE,
) -> tuple[np.ndarray, np.ndarray]:
    """Maturation followed by dispersal; both fields are updated in place."""
    mature_colonised_cells(classes, colonisation_age, soil_fertility, base_fire_recovery_time)
    disperse_propagules(classes, colonisation_age, rng, dispersal_rate)
    return classes, colonisation_age

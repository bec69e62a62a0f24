"""Fire ignition and percolation spread."""

import logging

import numpy as np

from .exceptions import EmptyIgnitionPoolError
from .landscape import OPEN_CLASSES, LandscapeClass, moore_neighbours

logger = logging.getLogger(__name__)

DEFAULT_FIRE_PROBABILITY_FOREST = 0.035
DEFAULT_FIRE_PROBABILITY_SAVANNA = 0.3


def ignition_pool(classes: np.ndarray) -> np.ndarray:
    """Cells eligible for ignition, as an (n, 2) array of (row, col).

    Savanna and colonised savanna form the first tier. Forest is used only
    when the first tier is empty.
    """
    open_cells = np.argwhere(np.isin(classes, OPEN_CLASSES))
    if len(open_cells) > 0:
        return open_cells
    return np.argwhere(classes == LandscapeClass.Forest)


def has_ignition_pool(classes: np.ndarray) -> bool:
    return len(ignition_pool(classes)) > 0


def ignite(classes: np.ndarray, burning: np.ndarray, rng: np.random.Generator) -> tuple[int, int]:
    """Set one uniformly chosen cell of the ignition pool burning.

    Returns:
        The (row, col) of the ignited cell.

    Raises:
        EmptyIgnitionPoolError: if no cell can burn.
    """
    pool = ignition_pool(classes)
    if len(pool) == 0:
        raise EmptyIgnitionPoolError("No savanna or forest cell available for ignition")

    row, col = pool[rng.integers(len(pool))]
    burning[row, col] = True
    return int(row), int(col)


def spread_fire(
    classes: np.ndarray,
    burning: np.ndarray,
    rng: np.random.Generator,
    fire_probability_forest: float = DEFAULT_FIRE_PROBABILITY_FOREST,
    fire_probability_savanna: float = DEFAULT_FIRE_PROBABILITY_SAVANNA,
) -> np.ndarray:
    """Propagate fire from the burning cells until no new cell ignites.

    Breadth-first: every cell lit in one round tries each idle Moore
    neighbour once in the next round. A neighbour catches fire with the
    probability of its class. ``burning`` is updated in place and returned.
    """
    for name, p in (
        ("fire_probability_forest", fire_probability_forest),
        ("fire_probability_savanna", fire_probability_savanna),
    ):
        if not 0.0 <= p <= 1.0:
            raise ValueError(f"{name} must lie in [0, 1], got {p}")

    height, width = classes.shape
    is_open = np.isin(classes, OPEN_CLASSES)
    is_forest = classes == LandscapeClass.Forest

    frontier = [(int(r), int(c)) for r, c in np.argwhere(burning)]
    rounds = 0

    while frontier:
        newly_burning = []
        for row, col in frontier:
            for n_row, n_col in moore_neighbours(row, col, height, width):
                if burning[n_row, n_col]:
                    continue
                if is_open[n_row, n_col]:
                    p = fire_probability_savanna
                elif is_forest[n_row, n_col]:
                    p = fire_probability_forest
                else:
                    continue
                if rng.random() < p:
                    burning[n_row, n_col] = True
                    newly_burning.append((n_row, n_col))
        frontier = newly_burning
        rounds += 1

    logger.debug(f"Fire spread finished after {rounds} rounds, {int(burning.sum())} cells burnt")
    return burning

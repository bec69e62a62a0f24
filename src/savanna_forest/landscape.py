"""Landscape grid state shared by every stage of the model."""

from __future__ import annotations

from enum import IntEnum
from typing import Iterator

import numpy as np

from .config import SimulationConfig
from .exceptions import InvalidConfigurationError


class LandscapeClass(IntEnum):
    """Vegetation class of a landscape cell."""
    Savanna = 0
    Forest = 1
    ColonisedSavanna = 3


# Classes that burn with the savanna probability and fuel the soil feedback.
OPEN_CLASSES = (LandscapeClass.Savanna, LandscapeClass.ColonisedSavanna)
# Classes that lose their tree cover when burnt.
WOODY_CLASSES = (LandscapeClass.Forest, LandscapeClass.ColonisedSavanna)

# Moore neighbourhood offsets as (d_row, d_col), row-major.
MOORE_OFFSETS = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
)


class Landscape:
    """Dense per-cell fields of the model, all of shape (height, width).

    Attributes:
        classes: LandscapeClass code of every cell (int8).
        burning: True where a cell burns during the current fire event.
        soil_fertility: Recovery-time multiplier, never below the floor.
        colonisation_age: Steps spent as ColonisedSavanna; only meaningful
            while the cell holds that class.
    """

    def __init__(self, height: int, width: int, minimum_fertility: float = 1.0):
        if height <= 0 or width <= 0:
            raise InvalidConfigurationError(
                f"Landscape dimensions must be positive, got {height} x {width}"
            )
        self.height = height
        self.width = width
        self.minimum_fertility = minimum_fertility

        self.classes = np.full((height, width), LandscapeClass.Savanna, dtype=np.int8)
        self.burning = np.zeros((height, width), dtype=bool)
        self.soil_fertility = np.full((height, width), minimum_fertility, dtype=np.float64)
        self.colonisation_age = np.zeros((height, width), dtype=np.int32)

    @classmethod
    def with_sharp_boundary(
        cls,
        height: int,
        width: int,
        edaphic_boundary: bool = True,
        savanna_fertility: float = 5.0,
        minimum_fertility: float = 1.0,
    ) -> "Landscape":
        """Savanna on the left half, forest on the right half.

        With an edaphic boundary the savanna half starts at
        ``savanna_fertility``; otherwise fertility is uniform.
        """
        landscape = cls(height, width, minimum_fertility)
        boundary = width // 2
        landscape.classes[:, boundary:] = LandscapeClass.Forest
        if edaphic_boundary:
            landscape.soil_fertility[:, :boundary] = savanna_fertility
        return landscape

    @classmethod
    def from_config(cls, config: SimulationConfig) -> "Landscape":
        return cls.with_sharp_boundary(
            config.height,
            config.width,
            edaphic_boundary=config.edaphic_boundary,
            savanna_fertility=config.savanna_fertility,
            minimum_fertility=config.minimum_fertility,
        )

    @classmethod
    def from_classes(cls, classes, soil_fertility=None, minimum_fertility: float = 1.0) -> "Landscape":
        """Build a landscape from an explicit class map (and optional fertility)."""
        array = np.asarray(classes)
        if array.ndim != 2:
            raise InvalidConfigurationError(f"Class map must be 2D, got shape={array.shape}")
        # Checked before the int8 cast, which would wrap large codes onto valid ones.
        if not np.all(np.isin(array, list(LandscapeClass))):
            raise ValueError("Landscape contains unknown class codes")
        landscape = cls(array.shape[0], array.shape[1], minimum_fertility)
        landscape.classes[...] = array
        if soil_fertility is not None:
            fertility = np.asarray(soil_fertility, dtype=np.float64)
            if fertility.shape != array.shape:
                raise InvalidConfigurationError(
                    f"Fertility shape {fertility.shape} does not match class map {array.shape}"
                )
            landscape.soil_fertility[...] = fertility
        landscape.check_invariants()
        return landscape

    @property
    def shape(self) -> tuple[int, int]:
        return self.height, self.width

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def _require_in_bounds(self, row: int, col: int) -> None:
        if not self.in_bounds(row, col):
            raise IndexError(f"Cell ({row}, {col}) outside {self.height} x {self.width} landscape")

    def get_class(self, row: int, col: int) -> LandscapeClass:
        self._require_in_bounds(row, col)
        return LandscapeClass(int(self.classes[row, col]))

    def set_class(self, row: int, col: int, value: LandscapeClass) -> None:
        self._require_in_bounds(row, col)
        self.classes[row, col] = LandscapeClass(value)

    def is_burning(self, row: int, col: int) -> bool:
        self._require_in_bounds(row, col)
        return bool(self.burning[row, col])

    def ignite(self, row: int, col: int) -> None:
        """Mark cell (row, col) as burning."""
        self._require_in_bounds(row, col)
        self.burning[row, col] = True

    def clear_burning(self) -> None:
        self.burning[...] = False

    def get_fertility(self, row: int, col: int) -> float:
        self._require_in_bounds(row, col)
        return float(self.soil_fertility[row, col])

    def set_fertility(self, row: int, col: int, value: float) -> None:
        self._require_in_bounds(row, col)
        if value < self.minimum_fertility:
            raise ValueError(
                f"Fertility {value} is below the minimum of {self.minimum_fertility}"
            )
        self.soil_fertility[row, col] = value

    def get_colonisation_age(self, row: int, col: int) -> int:
        self._require_in_bounds(row, col)
        return int(self.colonisation_age[row, col])

    def neighbours(self, row: int, col: int) -> Iterator[tuple[int, int]]:
        """Yield in-bounds Moore neighbours of (row, col)."""
        yield from moore_neighbours(row, col, self.height, self.width)

    def cells_of(self, *classes: LandscapeClass) -> np.ndarray:
        """(n, 2) array of (row, col) of cells holding any of ``classes``, row-major."""
        return np.argwhere(np.isin(self.classes, classes))

    def count(self, landscape_class: LandscapeClass) -> int:
        return int(np.count_nonzero(self.classes == landscape_class))

    def cover_fraction(self, landscape_class: LandscapeClass) -> float:
        return self.count(landscape_class) / self.classes.size

    def check_invariants(self) -> None:
        """Raise ValueError if a field breaks the model's range invariants."""
        for name in ("classes", "burning", "soil_fertility", "colonisation_age"):
            field = getattr(self, name)
            if field.shape != self.shape:
                raise ValueError(f"{name} has shape {field.shape}, expected {self.shape}")
        if not np.all(np.isin(self.classes, list(LandscapeClass))):
            raise ValueError("Landscape contains unknown class codes")
        if np.any(self.soil_fertility < self.minimum_fertility):
            raise ValueError(f"Soil fertility dropped below {self.minimum_fertility}")
        if np.any(self.colonisation_age < 0):
            raise ValueError("Colonisation age cannot be negative")

    def copy(self) -> "Landscape":
        clone = Landscape(self.height, self.width, self.minimum_fertility)
        clone.classes[...] = self.classes
        clone.burning[...] = self.burning
        clone.soil_fertility[...] = self.soil_fertility
        clone.colonisation_age[...] = self.colonisation_age
        return clone

    def __str__(self) -> str:
        return (
            f"Landscape {self.height}x{self.width}: "
            f"savanna={self.cover_fraction(LandscapeClass.Savanna):.3f}, "
            f"forest={self.cover_fraction(LandscapeClass.Forest):.3f}, "
            f"colonised={self.cover_fraction(LandscapeClass.ColonisedSavanna):.3f}"
        )


def moore_neighbours(row: int, col: int, height: int, width: int) -> Iterator[tuple[int, int]]:
    """Yield the in-bounds 8-connected neighbours of (row, col)."""
    for d_row, d_col in MOORE_OFFSETS:
        n_row, n_col = row + d_row, col + d_col
        if 0 <= n_row < height and 0 <= n_col < width:
            yield n_row, n_col

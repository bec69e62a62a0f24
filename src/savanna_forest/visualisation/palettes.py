from __future__ import annotations

from dataclasses import dataclass

from ..landscape import LandscapeClass


@dataclass(frozen=True)
class ClassColors:
    """Matplotlib colors for each landscape class."""

    savanna: str = "brown"
    forest: str = "green"
    colonised: str = "yellow"

    def mapping(self) -> dict[LandscapeClass, str]:
        return {
            LandscapeClass.Savanna: self.savanna,
            LandscapeClass.Forest: self.forest,
            LandscapeClass.ColonisedSavanna: self.colonised,
        }


@dataclass(frozen=True)
class BurnColors:
    """Colors for the burning map of a fire event."""

    idle: str = "white"
    burning: str = "red"


@dataclass(frozen=True)
class FertilitySpec:
    """Defaults for soil fertility heatmaps."""

    cmap: str = "YlOrBr"
    vmin: float | None = 1.0
    vmax: float | None = None


DEFAULT_CLASS_COLORS = ClassColors()
DEFAULT_BURN_COLORS = BurnColors()
DEFAULT_FERTILITY = FertilitySpec()

from __future__ import annotations

from typing import Any

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib.colors import ListedColormap
from matplotlib.patches import Patch

from ..landscape import LandscapeClass
from .palettes import (
    DEFAULT_BURN_COLORS,
    DEFAULT_CLASS_COLORS,
    DEFAULT_FERTILITY,
    BurnColors,
    ClassColors,
    FertilitySpec,
)

CLASS_NAMES = {
    LandscapeClass.Savanna: "Savanna",
    LandscapeClass.Forest: "Forest",
    LandscapeClass.ColonisedSavanna: "Colonised savanna",
}


def as_2d_numpy_grid(grid: Any, *, name: str = "grid") -> np.ndarray:
    """Coerce input to a 2D numpy array."""

    array = np.asarray(grid)
    if array.ndim != 2:
        raise ValueError(f"{name} must be a 2D array (H x W). Got shape={array.shape}.")
    return array


def class_index(classes: Any) -> np.ndarray:
    """Map class codes to consecutive indices 0..2 in LandscapeClass order."""

    codes = as_2d_numpy_grid(classes, name="classes")
    index = np.zeros(codes.shape, dtype=np.int8)
    for i, landscape_class in enumerate(LandscapeClass):
        index[codes == landscape_class] = i
    return index


class LandscapePlotter:
    """Matplotlib renderer for model states.

    Used as the model's renderer it redraws a single figure after every
    fire spread and every step, pausing ``delay`` seconds so the run can be
    watched. ``plot_state`` and ``plot_cover`` produce standalone figures
    for saving.
    """

    def __init__(
        self,
        *,
        delay: float = 0.05,
        show: bool = True,
        class_colors: ClassColors = DEFAULT_CLASS_COLORS,
        burn_colors: BurnColors = DEFAULT_BURN_COLORS,
        figsize: tuple[float, float] = (10, 3),
    ) -> None:
        self.delay = delay
        self.show = show
        self.class_colors = class_colors
        self.burn_colors = burn_colors
        self.figsize = figsize

        self.class_cmap = ListedColormap([class_colors.mapping()[c] for c in LandscapeClass])
        self.burn_cmap = ListedColormap([burn_colors.idle, burn_colors.burning])

        self.fig = None
        self._ax = None
        self._image = None

    def render_landscape(self, classes: np.ndarray, step: int) -> None:
        self._draw(class_index(classes), self.class_cmap, len(LandscapeClass) - 1, f"Landscape, step {step}")

    def render_burning(self, burning: np.ndarray, step: int) -> None:
        burnt = as_2d_numpy_grid(burning, name="burning").astype(np.int8)
        self._draw(burnt, self.burn_cmap, 1, f"Fire, step {step}")

    def _draw(self, values: np.ndarray, cmap: ListedColormap, vmax: int, title: str) -> None:
        if self._ax is None:
            self.fig, self._ax = plt.subplots(1, 1, figsize=self.figsize)
            self._image = self._ax.imshow(values, cmap=cmap, vmin=0, vmax=vmax, interpolation="nearest")
            self._ax.set_xticks([])
            self._ax.set_yticks([])
        else:
            self._image.set_data(values)
            self._image.set_cmap(cmap)
            self._image.set_clim(0, vmax)
        self._ax.set_title(title)

        if self.show:
            plt.pause(self.delay)
        else:
            self.fig.canvas.draw_idle()

    def plot_state(
        self,
        classes: Any,
        soil_fertility: Any,
        *,
        title: str = "Final state",
        spec: FertilitySpec = DEFAULT_FERTILITY,
    ) -> Any:
        """Class map with legend next to a soil fertility heatmap."""

        index = class_index(classes)
        fertility = as_2d_numpy_grid(soil_fertility, name="soil_fertility").astype(float)
        if fertility.shape != index.shape:
            raise ValueError(f"soil_fertility shape must match classes. Got {fertility.shape} vs {index.shape}.")

        fig, axes = plt.subplots(1, 2, figsize=(12, 4))

        axes[0].imshow(index, cmap=self.class_cmap, vmin=0, vmax=len(LandscapeClass) - 1, interpolation="nearest")
        axes[0].set_title("Vegetation")
        axes[0].legend(
            handles=[Patch(color=color, label=CLASS_NAMES[c]) for c, color in self.class_colors.mapping().items()],
            loc="lower center",
            bbox_to_anchor=(0.5, -0.35),
            ncol=3,
            fontsize=8,
        )

        im = axes[1].imshow(fertility, cmap=spec.cmap, vmin=spec.vmin, vmax=spec.vmax, interpolation="nearest")
        axes[1].set_title("Soil fertility")
        fig.colorbar(im, ax=axes[1], fraction=0.046, pad=0.04)

        for ax in axes:
            ax.set_xticks([])
            ax.set_yticks([])
        fig.suptitle(title)
        return fig

    def plot_cover(self, cover: pd.DataFrame, *, ax: Any | None = None) -> Any:
        """Cover fractions of each class over time."""

        if ax is None:
            _, ax = plt.subplots(1, 1, figsize=(8, 4))
        colors = self.class_colors.mapping()
        for landscape_class in LandscapeClass:
            column = landscape_class.name
            if column in cover:
                ax.plot(cover.index, cover[column], color=colors[landscape_class], label=CLASS_NAMES[landscape_class])
        ax.set_xlabel("Step")
        ax.set_ylabel("Cover fraction")
        ax.set_ylim(0.0, 1.0)
        ax.legend()
        return ax

    def save(self, fig: Any, path: str, *, dpi: int = 150) -> None:
        """Save a Matplotlib figure to disk."""

        fig.savefig(path, dpi=dpi, bbox_inches="tight")

    def close(self) -> None:
        if self.fig is not None:
            plt.close(self.fig)
        self.fig = None
        self._ax = None
        self._image = None

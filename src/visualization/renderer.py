"""Grid rendering functionality for the savanna-forest simulation.

This module provides the GridRenderer class which handles drawing the
landscape grid with proper colors for each landscape class.
"""

from typing import Optional

import numpy as np
import pygame

from savanna_forest.landscape import LandscapeClass
from .colors import (
    BLACK,
    BURNING_COLOR,
    COLONISED_COLOR,
    FOREST_COLOR,
    SAVANNA_COLOR,
    Color,
)


class GridRenderer:
    """Renders the landscape grid onto a Pygame surface.

    Each cell is colored by its landscape class; cells burnt by the most
    recent fire can be overlaid in the burning color.

    Attributes:
        cell_size: Size of each cell in pixels.
    """

    CLASS_COLORS = {
        LandscapeClass.Savanna: SAVANNA_COLOR,
        LandscapeClass.Forest: FOREST_COLOR,
        LandscapeClass.ColonisedSavanna: COLONISED_COLOR,
    }

    def __init__(self, cell_size: int) -> None:
        """Initialize the grid renderer.

        Args:
            cell_size: Size of each cell in pixels.
        """
        self.cell_size = cell_size

    def get_cell_color(self, landscape_class: int, burning: bool = False) -> Color:
        """Get the RGB color for a single cell.

        Args:
            landscape_class: LandscapeClass code of the cell.
            burning: Whether the cell burnt in the last fire.

        Returns:
            RGB color tuple for the given cell.
        """
        if burning:
            return BURNING_COLOR
        try:
            return self.CLASS_COLORS[LandscapeClass(int(landscape_class))]
        except ValueError:
            return BLACK

    def color_array(self, classes: np.ndarray, burning: Optional[np.ndarray] = None) -> np.ndarray:
        """Build an (H, W, 3) uint8 RGB image of the landscape."""
        rgb = np.zeros(classes.shape + (3,), dtype=np.uint8)
        for landscape_class, color in self.CLASS_COLORS.items():
            rgb[classes == landscape_class] = color
        if burning is not None:
            rgb[burning] = BURNING_COLOR
        return rgb

    def draw_base(
        self,
        screen: pygame.Surface,
        classes: np.ndarray,
        burning: Optional[np.ndarray] = None,
        offset_x: int = 0,
        offset_y: int = 0,
    ) -> None:
        """Draw the landscape, row 0 at the top."""
        height, width = classes.shape
        rgb = self.color_array(classes, burning)
        # surfarray expects (x, y) = (col, row)
        surface = pygame.surfarray.make_surface(rgb.transpose(1, 0, 2))
        surface = pygame.transform.scale(surface, (width * self.cell_size, height * self.cell_size))
        screen.blit(surface, (offset_x, offset_y))

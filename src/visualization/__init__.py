"""Pygame visualization of the savanna-forest model."""

from .colors import *
from .renderer import GridRenderer
from .ui import InfoPanel, SpeedSlider

__all__ = [
    # Renderer and UI components
    'GridRenderer',
    'InfoPanel',
    'SpeedSlider',

    # Landscape colors
    'SAVANNA_COLOR',
    'FOREST_COLOR',
    'COLONISED_COLOR',
    'BURNING_COLOR',

    # UI colors
    'BLACK',
    'WHITE',
    'PANEL_COLOR',

    # Default parameters
    'DEFAULT_CELL_SIZE',
    'DEFAULT_FPS',
    'PANEL_HEIGHT',

    # FPS limits
    'MIN_FPS',
    'MAX_FPS',
]

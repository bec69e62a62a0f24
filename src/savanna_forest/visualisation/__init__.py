"""Matplotlib rendering of landscape states.

Nothing in the model imports this package unless plotting is requested.
"""

from .grid_viz import LandscapePlotter

__all__ = ["LandscapePlotter"]

"""Color definitions and constants for the savanna-forest visualization.

This module contains all RGB color tuples and default configuration values
used throughout the Pygame visualization.
"""

from typing import Tuple

# Type alias for RGB color tuples
Color = Tuple[int, int, int]

# ============================================================================
# LANDSCAPE CLASS COLORS
# ============================================================================

SAVANNA_COLOR: Color = (165, 42, 42)                # brown
FOREST_COLOR: Color = (2, 168, 2)                   # green
COLONISED_COLOR: Color = (255, 255, 0)              # yellow

# ============================================================================
# FIRE COLORS
# ============================================================================

BURNING_COLOR: Color = (255, 0, 0)                  # red (on fire)

# ============================================================================
# UI COLORS
# ============================================================================

BLACK: Color = (0, 0, 0)                            # Grid lines, text
WHITE: Color = (255, 255, 255)                      # Background
PANEL_COLOR: Color = (60, 40, 0)                    # Info panel background

# ============================================================================
# DEFAULT VIEW PARAMETERS
# ============================================================================

DEFAULT_CELL_SIZE: int = 5                          # Cell size in pixels
DEFAULT_FPS: int = 10                               # Default frames per second
PANEL_HEIGHT: int = 140                             # Space below the grid for UI

# ============================================================================
# FPS SLIDER LIMITS
# ============================================================================

MIN_FPS: int = 1                                    # Minimum simulation speed
MAX_FPS: int = 60                                   # Maximum simulation speed

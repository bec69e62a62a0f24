"""UI components for the savanna-forest visualization.

This module contains the info panel showing simulation status and the
speed control slider.
"""

from typing import TYPE_CHECKING, Optional

import pygame

from savanna_forest.landscape import LandscapeClass
from .colors import COLONISED_COLOR, FOREST_COLOR, PANEL_COLOR, SAVANNA_COLOR, WHITE

if TYPE_CHECKING:
    from savanna_forest.model import SavannaForestModel


class InfoPanel:
    """Displays simulation information beneath the grid.

    Shows the current step, cover of each landscape class, the size of the
    last fire, pause status, keyboard shortcuts and the FPS setting.

    Attributes:
        font: Main font for primary information.
        small_font: Smaller font for secondary information.
    """

    COVER_ROWS = (
        ("Savanna", LandscapeClass.Savanna, SAVANNA_COLOR),
        ("Forest", LandscapeClass.Forest, FOREST_COLOR),
        ("Colonised", LandscapeClass.ColonisedSavanna, COLONISED_COLOR),
    )

    def __init__(self) -> None:
        """Initialize the info panel with fonts."""
        self.font = pygame.font.Font(None, 28)
        self.small_font = pygame.font.Font(None, 22)

    def draw(
        self,
        screen: pygame.Surface,
        model: "SavannaForestModel",
        paused: bool,
        fps: int,
        panel_y: int,
        window_width: int,
    ) -> None:
        """Draw the panel starting at ``panel_y``."""
        padding = 15
        panel_rect = pygame.Rect(0, panel_y, window_width, screen.get_height() - panel_y)
        pygame.draw.rect(screen, PANEL_COLOR, panel_rect)

        step_text = self.font.render(f"Step: {model.steps} / {model.config.n_steps}", True, WHITE)
        screen.blit(step_text, (padding, panel_y + padding))

        status = "PAUSED" if paused else ("FINISHED" if not model.running else "RUNNING")
        status_text = self.font.render(status, True, WHITE)
        screen.blit(status_text, (window_width // 2 - status_text.get_width() // 2, panel_y + padding))

        for i, (label, landscape_class, color) in enumerate(self.COVER_ROWS):
            y = panel_y + 45 + i * 22
            pygame.draw.rect(screen, color, (padding, y + 2, 12, 12))
            cover = model.landscape.cover_fraction(landscape_class)
            text = self.small_font.render(f"{label}: {cover:6.1%}", True, WHITE)
            screen.blit(text, (padding + 20, y))

        fire_text = self.small_font.render(f"Last fire: {model.burnt_cells} cells", True, WHITE)
        screen.blit(fire_text, (window_width // 2 - fire_text.get_width() // 2, panel_y + 45))

        fps_text = self.small_font.render(f"Speed: {fps} FPS", True, WHITE)
        screen.blit(fps_text, (window_width // 2 - fps_text.get_width() // 2, panel_y + 70))

        for i, line in enumerate(("SPACE = Pause / Resume", "R = Reset", "ESC = Quit")):
            inst = self.small_font.render(line, True, WHITE)
            screen.blit(inst, (window_width - inst.get_width() - padding, panel_y + padding + i * 22))


class SpeedSlider:
    """Interactive slider for controlling simulation speed.

    Allows the user to adjust the FPS (frames per second) by clicking
    and dragging a handle along a horizontal bar.

    Attributes:
        x: X coordinate of the slider's left edge.
        y: Y coordinate of the slider's top edge.
        width: Width of the slider bar in pixels.
        height: Height of the slider bar in pixels.
        min_val: Minimum value (FPS).
        max_val: Maximum value (FPS).
    """

    def __init__(
        self,
        x: int,
        y: int,
        width: int,
        height: int,
        min_val: int,
        max_val: int
    ) -> None:
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.min_val = min_val
        self.max_val = max_val

    @staticmethod
    def draw_fire_icon(screen, x, y, scale=1.0):
        """Draw small fire-shaped icon centered at (x, y)."""
        pts = [
            (x, y - 12 * scale),
            (x + 6 * scale, y - 4 * scale),
            (x + 4 * scale, y + 6 * scale),
            (x, y + 10 * scale),
            (x - 4 * scale, y + 6 * scale),
            (x - 6 * scale, y - 4 * scale)
        ]

        pygame.draw.polygon(screen, (255, 80, 0), pts)
        pygame.draw.polygon(screen, (255, 150, 0), pts, 2)

    def value_at(self, mouse_x: int) -> int:
        """FPS corresponding to a horizontal mouse position, clamped to the limits."""
        ratio = (mouse_x - self.x) / self.width
        new_val = self.min_val + ratio * (self.max_val - self.min_val)
        return max(self.min_val, min(self.max_val, int(new_val)))

    def draw(self, screen: pygame.Surface, current_val: int) -> None:
        bar_rect = pygame.Rect(self.x, self.y, self.width, self.height)
        pygame.draw.rect(screen, (20, 20, 20), bar_rect, border_radius=6)
        pygame.draw.rect(screen, (70, 70, 70), bar_rect, 2, border_radius=6)

        ratio = (current_val - self.min_val) / (self.max_val - self.min_val)
        handle_x = self.x + int(ratio * self.width)
        handle_y = self.y + self.height // 2
        self.draw_fire_icon(screen, handle_x, handle_y, scale=1.0)

    def handle_click(self, mouse_x: int, mouse_y: int) -> Optional[int]:
        """FPS for a click or drag inside the grab area, else None."""
        grab_margin = 20
        if not (self.x - grab_margin <= mouse_x <= self.x + self.width + grab_margin):
            return None
        if not (self.y - grab_margin <= mouse_y <= self.y + self.height + grab_margin):
            return None
        return self.value_at(mouse_x)

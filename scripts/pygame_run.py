#!/usr/bin/env python3
"""Pygame visualization launcher for the savanna-forest simulation.

Runs the model one step per frame and draws the landscape, flashing the
cells burnt by each fire.

Usage:
    python scripts/pygame_run.py
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import numpy as np
import pygame

# Add the src directory to the Python path
project_root = Path(__file__).parent.parent
src_path = project_root / "src"
sys.path.insert(0, str(src_path))

from savanna_forest import SavannaForestModel, SimulationConfig

from visualization import (
    GridRenderer,
    InfoPanel,
    SpeedSlider,
    BLACK,
    DEFAULT_CELL_SIZE,
    DEFAULT_FPS,
    MIN_FPS,
    MAX_FPS,
    PANEL_HEIGHT,
)

# ---- User-configurable parameters ----
CONFIG = {
    "height": 50,
    "width": 200,
    "n_steps": 2500,
    "recurrence_interval": 15,
    "fire_soil_feedback": True,
    "edaphic_boundary": False,
    "seed": None,
    # Feeds each fire to the overlay
    "plotting": True,
}


class FireOverlay:
    """Model renderer that keeps the burning map of the latest fire."""

    def __init__(self) -> None:
        self.burning: Optional[np.ndarray] = None

    def render_burning(self, burning: np.ndarray, step: int) -> None:
        self.burning = burning

    def render_landscape(self, classes: np.ndarray, step: int) -> None:
        pass

    def take(self) -> Optional[np.ndarray]:
        burning, self.burning = self.burning, None
        return burning


class SimulationRunner:
    """Main simulation runner with Pygame visualization.

    Attributes:
        model: The savanna-forest model.
        screen: Pygame display surface.
        clock: Pygame clock for FPS control.
        renderer: Grid renderer for drawing cells.
        info_panel: UI panel for displaying simulation info.
        slider: Speed control slider.
        paused: Whether the simulation is paused.
        current_fps: Current frames per second setting.
        dragging_slider: Whether the user is dragging the speed slider.
    """

    def __init__(self, config: SimulationConfig, cell_size: int) -> None:
        self.config = config
        self.cell_size = cell_size
        self.window_width = config.width * cell_size
        self.grid_pixel_height = config.height * cell_size
        window_height = self.grid_pixel_height + PANEL_HEIGHT

        pygame.init()
        self.screen = pygame.display.set_mode((self.window_width, window_height))
        pygame.display.set_caption("Savanna-forest boundary")
        self.clock = pygame.time.Clock()

        self.overlay = FireOverlay()
        self.model = self._new_model()
        self.last_fire: Optional[np.ndarray] = None

        self.renderer = GridRenderer(cell_size)
        self.info_panel = InfoPanel()
        self.slider = SpeedSlider(
            x=self.window_width // 2 - 100,
            y=self.grid_pixel_height + 100,
            width=200,
            height=16,
            min_val=MIN_FPS,
            max_val=MAX_FPS
        )

        self.paused = False
        self.current_fps = DEFAULT_FPS
        self.dragging_slider = False

    def _new_model(self) -> SavannaForestModel:
        return SavannaForestModel(self.config, renderer=self.overlay)

    def _handle_keyboard_events(self, event: pygame.event.Event) -> bool:
        """Handle keyboard input; return False if the runner should quit."""
        if event.key == pygame.K_ESCAPE:
            return False

        elif event.key == pygame.K_SPACE:
            self.paused = not self.paused

        elif event.key == pygame.K_r:
            self.model = self._new_model()
            self.last_fire = None
            self.paused = False

        return True

    def _handle_slider_events(self, event: pygame.event.Event) -> None:
        if event.type == pygame.MOUSEBUTTONDOWN:
            if event.button == 1:
                new_fps = self.slider.handle_click(*event.pos)
                if new_fps is not None:
                    self.dragging_slider = True
                    self.current_fps = new_fps

        elif event.type == pygame.MOUSEBUTTONUP:
            if event.button == 1:
                self.dragging_slider = False

        elif event.type == pygame.MOUSEMOTION:
            if self.dragging_slider:
                self.current_fps = self.slider.value_at(event.pos[0])

    def _update_simulation(self) -> None:
        """Advance the model by one step if not paused."""
        if self.paused or not self.model.running:
            return
        self.model.step()
        self.last_fire = self.overlay.take()

    def _render(self) -> None:
        self.screen.fill(BLACK)
        self.renderer.draw_base(self.screen, self.model.landscape.classes, self.last_fire)
        self.info_panel.draw(
            self.screen,
            self.model,
            self.paused,
            self.current_fps,
            self.grid_pixel_height,
            self.window_width,
        )
        self.slider.draw(self.screen, self.current_fps)
        pygame.display.flip()

    def run(self) -> None:
        """Run the main loop until the user quits."""
        running = True

        while running:
            self._render()

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False

                elif event.type == pygame.KEYDOWN:
                    if not self._handle_keyboard_events(event):
                        running = False

                else:
                    self._handle_slider_events(event)

            self._update_simulation()
            self.clock.tick(self.current_fps)

        pygame.quit()


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )
    config = SimulationConfig(**CONFIG)
    SimulationRunner(config, DEFAULT_CELL_SIZE).run()


if __name__ == "__main__":
    main()

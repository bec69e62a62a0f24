"""Savanna-forest boundary model driver."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Protocol

import numpy as np
import pandas as pd
from mesa import DataCollector, Model

from .config import DEFAULT_CONFIG, SimulationConfig
from .exceptions import InvalidConfigurationError
from .fire import has_ignition_pool, ignite, spread_fire
from .landscape import Landscape, LandscapeClass
from .soil import update_soil_fertility
from .vegetation import forest_expansion, update_landscape

logger = logging.getLogger(__name__)


class LandscapeRenderer(Protocol):
    """Anything that can draw model state; called by the model, never required."""

    def render_landscape(self, classes: np.ndarray, step: int) -> None: ...

    def render_burning(self, burning: np.ndarray, step: int) -> None: ...


@dataclass(frozen=True)
class StepSnapshot:
    """State emitted after one completed step."""

    step: int
    fire_event: bool
    ignition: tuple[int, int] | None
    burnt_cells: int
    landscape: np.ndarray
    soil_fertility: np.ndarray


@dataclass(frozen=True)
class SimulationResult:
    """Final fields of a run plus the per-step cover time series."""

    final_landscape: np.ndarray
    soil_fertility: np.ndarray
    cover: pd.DataFrame


def check_landscape(landscape: Landscape, config: SimulationConfig) -> None:
    """Reject a starting landscape that disagrees with the configuration."""
    if landscape.shape != config.shape:
        raise InvalidConfigurationError(
            f"Landscape shape {landscape.shape} does not match configured {config.shape}"
        )
    if landscape.minimum_fertility != config.minimum_fertility:
        raise InvalidConfigurationError(
            f"Landscape fertility floor {landscape.minimum_fertility} does not match "
            f"configured minimum_fertility {config.minimum_fertility}"
        )
    if landscape.soil_fertility.min() < config.minimum_fertility:
        raise InvalidConfigurationError(
            f"Landscape soil fertility falls below minimum_fertility {config.minimum_fertility}"
        )


class SavannaForestModel(Model):
    """Fire, soil and dispersal dynamics on a savanna-forest landscape.

    Every ``recurrence_interval`` steps a fire is ignited and spread. Each
    step then applies the soil feedback (if enabled), converts burnt woody
    cells to savanna, and lets forest mature and disperse.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        landscape: Landscape | None = None,
        renderer: LandscapeRenderer | None = None,
    ):
        """
        Initialize the model.

        Args:
            config: Simulation parameters, validated on construction.
            landscape: Optional starting landscape. Defaults to the sharp
                savanna/forest boundary described by ``config``.
            renderer: Collaborator receiving every burning map and every
                landscape state while ``config.plotting`` is set. Defaults to a
                matplotlib ``LandscapePlotter`` in that case.
        """
        config = config or DEFAULT_CONFIG
        if landscape is not None:
            check_landscape(landscape, config)
        self.owns_renderer = config.plotting and renderer is None
        if self.owns_renderer:
            from .visualisation import LandscapePlotter

            renderer = LandscapePlotter()

        super().__init__(rng=config.seed)
        self.config = config
        self.landscape = landscape if landscape is not None else Landscape.from_config(config)
        self.renderer = renderer

        self.burnt_cells = 0
        self.last_ignition: tuple[int, int] | None = None
        self.last_snapshot: StepSnapshot | None = None

        self.datacollector = DataCollector(
            model_reporters={
                "Savanna": lambda m: m.landscape.cover_fraction(LandscapeClass.Savanna),
                "Forest": lambda m: m.landscape.cover_fraction(LandscapeClass.Forest),
                "ColonisedSavanna": lambda m: m.landscape.cover_fraction(LandscapeClass.ColonisedSavanna),
                "MeanFertility": lambda m: float(m.landscape.soil_fertility.mean()),
                "BurntCells": "burnt_cells",
            }
        )
        self.datacollector.collect(self)

    @property
    def rendering(self) -> bool:
        """Whether the renderer is called; false whenever plotting is off."""
        return self.config.plotting and self.renderer is not None

    def is_fire_step(self, step: int) -> bool:
        return step % self.config.recurrence_interval == 0

    def step(self):
        """
        Execute one step of the simulation.

        ``self.steps`` is advanced by mesa before this runs, so the first
        step is 1.
        """
        cfg = self.config
        land = self.landscape
        step = self.steps
        fire_event = self.is_fire_step(step)

        self.burnt_cells = 0
        self.last_ignition = None
        if fire_event:
            self._run_fire_event(step)

        if cfg.fire_soil_feedback:
            update_soil_fertility(
                land.soil_fertility,
                land.classes,
                land.burning,
                fire_impact=cfg.fire_impact,
                recovery_rate=cfg.recovery_rate,
                minimum_fertility=cfg.minimum_fertility,
            )

        update_landscape(land.classes, land.burning)

        forest_expansion(
            land.classes,
            land.colonisation_age,
            land.soil_fertility,
            self.rng,
            base_fire_recovery_time=cfg.base_fire_recovery_time,
            dispersal_rate=cfg.dispersal_rate,
        )

        if fire_event:
            land.clear_burning()

        self.last_snapshot = self.snapshot(fire_event)
        self.datacollector.collect(self)
        if self.rendering:
            self._notify(self.renderer.render_landscape, land.classes, step)
        logger.debug(f"Step {step} done")

        if step >= cfg.n_steps:
            self.running = False

    def _run_fire_event(self, step: int) -> None:
        land = self.landscape
        land.clear_burning()
        if not has_ignition_pool(land.classes):
            logger.warning(f"Step {step}: no cell can ignite, skipping fire event")
            return

        self.last_ignition = ignite(land.classes, land.burning, self.rng)
        spread_fire(
            land.classes,
            land.burning,
            self.rng,
            fire_probability_forest=self.config.fire_probability_forest,
            fire_probability_savanna=self.config.fire_probability_savanna,
        )
        self.burnt_cells = int(np.count_nonzero(land.burning))
        logger.debug(f"Step {step}: fire ignited at {self.last_ignition}, {self.burnt_cells} cells burnt")

        if self.rendering:
            self._notify(self.renderer.render_burning, land.burning, step)

    def _notify(self, callback: Callable[..., Any], field: np.ndarray, step: int) -> None:
        try:
            callback(field.copy(), step)
        except Exception:
            logger.warning(f"Renderer failed at step {step}, continuing without it", exc_info=True)

    def snapshot(self, fire_event: bool = False) -> StepSnapshot:
        return StepSnapshot(
            step=self.steps,
            fire_event=fire_event,
            ignition=self.last_ignition,
            burnt_cells=self.burnt_cells,
            landscape=self.landscape.classes.copy(),
            soil_fertility=self.landscape.soil_fertility.copy(),
        )

    def close(self) -> None:
        """Close the renderer if the model created it."""
        if self.owns_renderer and self.renderer is not None:
            self.renderer.close()

    def cover(self) -> pd.DataFrame:
        """Cover fractions and mean fertility per step; row 0 is the initial state."""
        return self.datacollector.get_model_vars_dataframe()


def iter_simulation(
    config: SimulationConfig | None = None,
    landscape: Landscape | None = None,
    renderer: LandscapeRenderer | None = None,
) -> Iterator[StepSnapshot]:
    """Run a model to completion, yielding the state after every step."""
    model = SavannaForestModel(config, landscape=landscape, renderer=renderer)
    try:
        while model.running:
            model.step()
            yield model.last_snapshot
    finally:
        model.close()


def run_simulation(
    n_steps: int = 2500,
    recurrence_interval: int = 15,
    base_fire_recovery_time: float = 15,
    dispersal_rate: float = 1.0,
    fire_soil_feedback: bool = True,
    edaphic_boundary: bool = True,
    plotting: bool = False,
    *,
    seed: int | None = None,
    renderer: LandscapeRenderer | None = None,
    **overrides: Any,
) -> SimulationResult:
    """Run the full model and return its final landscape and soil fertility.

    Extra keyword arguments override any other ``SimulationConfig`` field
    (grid size, fire probabilities, soil parameters).
    """
    config = DEFAULT_CONFIG.with_overrides(
        n_steps=n_steps,
        recurrence_interval=recurrence_interval,
        base_fire_recovery_time=base_fire_recovery_time,
        dispersal_rate=dispersal_rate,
        fire_soil_feedback=fire_soil_feedback,
        edaphic_boundary=edaphic_boundary,
        plotting=plotting,
        seed=seed,
        **overrides,
    )

    logger.info(
        f"Starting run: {config.height}x{config.width} grid, {config.n_steps} steps, "
        f"fire every {config.recurrence_interval} steps, seed={config.seed}"
    )
    model = SavannaForestModel(config, renderer=renderer)
    try:
        while model.running:
            model.step()
    finally:
        model.close()
    logger.info(f"Run finished after {model.steps} steps. {model.landscape}")

    return SimulationResult(
        final_landscape=model.landscape.classes.copy(),
        soil_fertility=model.landscape.soil_fertility.copy(),
        cover=model.cover(),
    )

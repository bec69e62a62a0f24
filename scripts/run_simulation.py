#!/usr/bin/env python3
"""Headless runner comparing fire-soil feedback with an edaphic boundary.

Edit the CONFIG and SCENARIOS blocks to tweak the runs. Each scenario is
run with the same seed; final cover is logged and, if ``output_dir`` is
set, the final state and cover time series are saved as PNG files.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Dict

# Ensure src/ is on path when running from repo root
REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from savanna_forest import LandscapeClass, run_simulation

logger = logging.getLogger(__name__)


# ---- User-configurable parameters ----
CONFIG: Dict[str, Any] = {
    # Grid
    "height": 50,
    "width": 200,

    # Run control
    "n_steps": 2500,
    "recurrence_interval": 15,
    "seed": 42,

    # Forest expansion
    "base_fire_recovery_time": 15,
    "dispersal_rate": 1,

    # Live matplotlib animation (slow)
    "plotting": False,
}

SCENARIOS: Dict[str, Dict[str, Any]] = {
    "fire_soil_feedback": {"fire_soil_feedback": True, "edaphic_boundary": False},
    "edaphic_boundary": {"fire_soil_feedback": False, "edaphic_boundary": True},
    "feedback_and_edaphic": {"fire_soil_feedback": True, "edaphic_boundary": True},
}

OUTPUT_DIR: Path | None = REPO_ROOT / "output"


def save_figures(name: str, result) -> None:
    from savanna_forest.visualisation import LandscapePlotter

    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    plotter = LandscapePlotter(show=False)

    fig = plotter.plot_state(result.final_landscape, result.soil_fertility, title=name)
    plotter.save(fig, str(OUTPUT_DIR / f"{name}_state.png"))

    ax = plotter.plot_cover(result.cover)
    plotter.save(ax.figure, str(OUTPUT_DIR / f"{name}_cover.png"))
    logger.info(f"Saved figures for {name} to {OUTPUT_DIR}")


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    for name, overrides in SCENARIOS.items():
        logger.info(f"=== Scenario: {name} ===")
        result = run_simulation(**{**CONFIG, **overrides})

        final = result.cover.iloc[-1]
        logger.info(
            f"{name}: savanna={final[LandscapeClass.Savanna.name]:.3f} "
            f"forest={final[LandscapeClass.Forest.name]:.3f} "
            f"colonised={final[LandscapeClass.ColonisedSavanna.name]:.3f} "
            f"mean fertility={final['MeanFertility']:.3f}"
        )

        if OUTPUT_DIR is not None:
            save_figures(name, result)


if __name__ == "__main__":
    main()

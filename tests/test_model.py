"""Unit tests for the SavannaForestModel driver and run entry points."""

import logging

import numpy as np
import pytest

from savanna_forest import model as model_module
from savanna_forest import visualisation
from savanna_forest.config import SimulationConfig
from savanna_forest.exceptions import InvalidConfigurationError
from savanna_forest.landscape import Landscape, LandscapeClass
from savanna_forest.model import SavannaForestModel, iter_simulation, run_simulation

S = LandscapeClass.Savanna
F = LandscapeClass.Forest
C = LandscapeClass.ColonisedSavanna


class RecordingRenderer:
    """Renderer that remembers what it was given."""

    def __init__(self):
        self.landscapes = []
        self.fires = []

    def render_landscape(self, classes, step):
        self.landscapes.append((step, classes))

    def render_burning(self, burning, step):
        self.fires.append((step, burning))


class BrokenRenderer:
    """Renderer that always fails."""

    def render_landscape(self, classes, step):
        raise RuntimeError("display lost")

    def render_burning(self, burning, step):
        raise RuntimeError("display lost")


@pytest.fixture
def small_config():
    return SimulationConfig(height=12, width=24, n_steps=60, recurrence_interval=5, seed=2024)


@pytest.fixture
def plotting_config(small_config):
    return small_config.with_overrides(plotting=True)


class TestSavannaForestModel:
    """Test cases for model construction and stepping."""

    def test_model_creation(self):
        """Test the default initial landscape."""
        model = SavannaForestModel(SimulationConfig(seed=1))
        land = model.landscape
        assert land.shape == (50, 200)
        assert np.all(land.classes[:, :100] == S)
        assert np.all(land.classes[:, 100:] == F)
        assert np.all(land.soil_fertility[:, :100] == 5.0)
        assert np.all(land.soil_fertility[:, 100:] == 1.0)
        assert model.running

    def test_landscape_shape_must_match_config(self):
        """Test that a custom landscape must fit the configured grid."""
        with pytest.raises(InvalidConfigurationError):
            SavannaForestModel(SimulationConfig(height=3, width=3), landscape=Landscape(4, 4))

    def test_steps_start_at_one_and_stop_after_n(self, small_config):
        """Test step numbering and the terminal condition."""
        model = SavannaForestModel(small_config)
        model.step()
        assert model.steps == 1
        assert model.last_snapshot.step == 1
        while model.running:
            model.step()
        assert model.steps == small_config.n_steps

    def test_fire_events_follow_recurrence_interval(self, small_config):
        """Test that fires happen exactly on multiples of the interval."""
        snapshots = list(iter_simulation(small_config))
        assert len(snapshots) == small_config.n_steps
        for snap in snapshots:
            expected = snap.step % small_config.recurrence_interval == 0
            assert snap.fire_event == expected
            assert (snap.ignition is not None) == expected
            if not expected:
                assert snap.burnt_cells == 0
            else:
                assert snap.burnt_cells >= 1

    def test_burning_cleared_after_every_step(self, small_config):
        """Test that no cell is left burning between steps."""
        model = SavannaForestModel(small_config)
        while model.running:
            model.step()
            assert not model.landscape.burning.any()

    def test_bounds_invariant(self):
        """Test classes and fertility stay in range for a long run."""
        cfg = SimulationConfig(height=15, width=30, n_steps=300, recurrence_interval=7, seed=5)
        allowed = [c.value for c in LandscapeClass]
        for snap in iter_simulation(cfg):
            assert np.all(np.isin(snap.landscape, allowed))
            assert snap.soil_fertility.min() >= 1.0

    def test_no_fire_run_never_reverts_to_savanna(self):
        """Test that without fire woody cells never turn back into savanna."""
        cfg = SimulationConfig(height=10, width=20, n_steps=150, recurrence_interval=1000, seed=3)
        previous = Landscape.from_config(cfg).classes
        for snap in iter_simulation(cfg):
            assert not snap.fire_event
            woody_before = np.isin(previous, [F, C])
            assert not np.any(woody_before & (snap.landscape == S))
            previous = snap.landscape

    def test_colonisation_age_monotonic_without_fire(self):
        """Test that colonised cells age by one per step and new colonists start at 0."""
        cfg = SimulationConfig(height=10, width=20, n_steps=80, recurrence_interval=1000, seed=11)
        model = SavannaForestModel(cfg)
        while model.running:
            classes_before = model.landscape.classes.copy()
            age_before = model.landscape.colonisation_age.copy()
            model.step()
            classes_after = model.landscape.classes
            age_after = model.landscape.colonisation_age

            stayed = (classes_before == C) & (classes_after == C)
            assert np.array_equal(age_after[stayed], age_before[stayed] + 1)
            new = (classes_before == S) & (classes_after == C)
            assert np.all(age_after[new] == 0)

    def test_landscape_fertility_floor_must_match_config(self):
        """Test that a landscape built with another fertility floor is rejected."""
        land = Landscape.from_classes(np.full((2, 2), F, dtype=np.int8))
        cfg = SimulationConfig(height=2, width=2, minimum_fertility=1.5, savanna_fertility=5.0)
        with pytest.raises(InvalidConfigurationError):
            SavannaForestModel(cfg, landscape=land)

    def test_landscape_fertility_below_config_floor_rejected(self):
        """Test that starting fertility cannot lie under the configured floor."""
        land = Landscape.from_classes(np.full((2, 2), F, dtype=np.int8))
        land.soil_fertility[0, 0] = 0.5
        with pytest.raises(InvalidConfigurationError):
            SavannaForestModel(SimulationConfig(height=2, width=2), landscape=land)

    def test_step_progress_logged_at_debug(self, small_config, caplog):
        """Test that each completed step is reported at DEBUG level."""
        model = SavannaForestModel(small_config.with_overrides(n_steps=3))
        with caplog.at_level(logging.DEBUG, logger="savanna_forest.model"):
            while model.running:
                model.step()
        for step in (1, 2, 3):
            assert f"Step {step} done" in caplog.text

    def test_skips_fire_when_pool_empty(self, small_config, monkeypatch, caplog):
        """Test that the driver skips ignition instead of failing."""
        monkeypatch.setattr(model_module, "has_ignition_pool", lambda classes: False)
        model = SavannaForestModel(small_config.with_overrides(n_steps=5))
        with caplog.at_level(logging.WARNING, logger="savanna_forest.model"):
            while model.running:
                model.step()
        assert model.last_snapshot.fire_event
        assert model.last_snapshot.ignition is None
        assert model.last_snapshot.burnt_cells == 0
        assert "skipping fire event" in caplog.text

    def test_cover_collected_every_step(self, small_config):
        """Test that the data collector has one row per step plus the initial state."""
        model = SavannaForestModel(small_config)
        while model.running:
            model.step()
        cover = model.cover()
        assert len(cover) == small_config.n_steps + 1
        for column in ("Savanna", "Forest", "ColonisedSavanna", "MeanFertility", "BurntCells"):
            assert column in cover.columns
        totals = cover["Savanna"] + cover["Forest"] + cover["ColonisedSavanna"]
        assert np.allclose(totals, 1.0)
        assert cover["Savanna"].iloc[0] == 0.5


class TestRenderer:
    """Test cases for the rendering collaborator contract."""

    def test_renderer_receives_every_state(self, plotting_config):
        """Test that the renderer sees every step and every fire."""
        renderer = RecordingRenderer()
        list(iter_simulation(plotting_config, renderer=renderer))
        assert [step for step, _ in renderer.landscapes] == list(range(1, plotting_config.n_steps + 1))
        fire_steps = [step for step, _ in renderer.fires]
        assert fire_steps == list(range(5, plotting_config.n_steps + 1, 5))
        for _, burning in renderer.fires:
            assert burning.any()

    def test_renderer_gets_copies(self, plotting_config):
        """Test that renderer snapshots are not live views of the model."""
        renderer = RecordingRenderer()
        model = SavannaForestModel(plotting_config, renderer=renderer)
        model.step()
        _, classes = renderer.landscapes[0]
        assert classes is not model.landscape.classes

    def test_broken_renderer_does_not_stop_run(self, plotting_config, caplog):
        """Test that renderer failures are logged and the run completes."""
        with caplog.at_level(logging.WARNING, logger="savanna_forest.model"):
            snapshots = list(iter_simulation(plotting_config, renderer=BrokenRenderer()))
        assert len(snapshots) == plotting_config.n_steps
        assert "Renderer failed" in caplog.text


    def test_plotting_off_never_calls_renderer(self, small_config):
        """Test that an explicit renderer stays idle while plotting is off."""
        renderer = RecordingRenderer()
        list(iter_simulation(small_config, renderer=renderer))
        assert renderer.landscapes == []
        assert renderer.fires == []

    def test_default_plotter_created_and_closed(self, monkeypatch):
        """Test that plotting without a renderer uses a LandscapePlotter and closes it."""
        created = []

        class FakePlotter(RecordingRenderer):
            def __init__(self):
                super().__init__()
                self.closed = False
                created.append(self)

            def close(self):
                self.closed = True

        monkeypatch.setattr(visualisation, "LandscapePlotter", FakePlotter)
        run_simulation(n_steps=6, recurrence_interval=3, seed=1, height=4, width=6, plotting=True)
        assert len(created) == 1
        assert len(created[0].landscapes) == 6
        assert created[0].closed

    def test_explicit_renderer_not_closed(self, plotting_config):
        """Test that a caller-supplied renderer is left open."""
        renderer = RecordingRenderer()
        renderer.closed = False

        def close():
            renderer.closed = True

        renderer.close = close
        list(iter_simulation(plotting_config.with_overrides(n_steps=2), renderer=renderer))
        assert len(renderer.landscapes) == 2
        assert not renderer.closed


class TestScenarios:
    """Scenario tests for characteristic model behaviour."""

    def test_zero_dispersal_never_colonises(self):
        """Test a 3x3 savanna with a central forest cell and no dispersal distance."""
        classes = np.full((3, 3), S, dtype=np.int8)
        classes[1, 1] = F
        land = Landscape.from_classes(classes)
        cfg = SimulationConfig(
            height=3, width=3, n_steps=100, recurrence_interval=1000, dispersal_rate=0, seed=8
        )
        for snap in iter_simulation(cfg, landscape=land):
            assert not np.any(snap.landscape == C)
        assert land.get_class(1, 1) == F

    def test_certain_forest_fire_clears_whole_grid(self):
        """Test that a fully flammable forest burns and becomes savanna."""
        land = Landscape.from_classes(np.full((10, 10), F, dtype=np.int8))
        cfg = SimulationConfig(
            height=10, width=10, n_steps=1, recurrence_interval=1,
            fire_probability_forest=1.0, seed=4, plotting=True,
        )
        renderer = RecordingRenderer()
        snapshots = list(iter_simulation(cfg, landscape=land, renderer=renderer))
        assert snapshots[0].burnt_cells == 100
        assert renderer.fires[0][1].all()
        assert np.all(snapshots[0].landscape == S)

    def test_edaphic_fertility_constant_without_feedback(self):
        """Test that fertility never changes when the soil feedback is off."""
        cfg = SimulationConfig(
            height=5, width=2, n_steps=300, recurrence_interval=3,
            edaphic_boundary=True, fire_soil_feedback=False, seed=21,
        )
        for snap in iter_simulation(cfg):
            assert np.all(snap.soil_fertility[:, 0] == 5.0)
            assert np.all(snap.soil_fertility[:, 1] == 1.0)

    def test_feedback_raises_burnt_savanna_fertility(self):
        """Test that fires on savanna enrich the soil when the feedback is on."""
        cfg = SimulationConfig(
            height=10, width=20, n_steps=30, recurrence_interval=5,
            edaphic_boundary=False, fire_soil_feedback=True, seed=6,
        )
        final = list(iter_simulation(cfg))[-1]
        assert final.soil_fertility.max() > 1.0


class TestRunSimulation:
    """Test cases for the function entry point."""

    def test_returns_final_fields(self):
        """Test the result of a short run."""
        result = run_simulation(n_steps=20, seed=1, height=8, width=16)
        assert result.final_landscape.shape == (8, 16)
        assert result.soil_fertility.shape == (8, 16)
        assert len(result.cover) == 21

    def test_same_seed_is_deterministic(self):
        """Test that a fixed seed reproduces a run bit for bit."""
        kwargs = dict(n_steps=120, recurrence_interval=6, seed=77, height=15, width=30)
        first = run_simulation(**kwargs)
        second = run_simulation(**kwargs)
        assert np.array_equal(first.final_landscape, second.final_landscape)
        assert np.array_equal(first.soil_fertility, second.soil_fertility)

    @pytest.mark.parametrize("kwargs", [
        {"n_steps": 0},
        {"recurrence_interval": 0},
        {"height": 0},
        {"width": -2},
    ])
    def test_invalid_configuration_rejected(self, kwargs):
        """Test that bad parameters fail before any state is built."""
        with pytest.raises(InvalidConfigurationError):
            run_simulation(**kwargs)

    def test_unknown_option_rejected(self):
        """Test that misspelled options are reported."""
        with pytest.raises(InvalidConfigurationError):
            run_simulation(n_steps=1, dispersal=2)

    def test_custom_renderer_used(self):
        """Test that an explicit renderer is called by run_simulation."""
        renderer = RecordingRenderer()
        run_simulation(
            n_steps=4, recurrence_interval=2, seed=3, height=5, width=6, plotting=True, renderer=renderer
        )
        assert len(renderer.landscapes) == 4
        assert len(renderer.fires) == 2

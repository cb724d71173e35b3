"""
Integration tests for the full hop maneuver.

Flies the phase sequencer against the point-mass simulated vehicle,
exercising frames, controllers and actuation together without kRPC.
"""

import numpy as np
import pytest
from numpy.testing import assert_array_almost_equal
from typer.testing import CliRunner

from skyhop.cli import app
from skyhop.config.schema import FlightPlan, SimulationConfig, SiteConfig
from skyhop.control.sequencer import Phase, PhaseSequencer
from skyhop.sim.simulated import SimulatedVehicle

BUDGET = 20000


def make_plan(mode: str = "direct", offset_north: float = 20.0) -> FlightPlan:
    """Plan with a coarse tick and generous budgets per phase."""
    return FlightPlan(
        tick_period_s=0.02,
        mode=mode,
        ascend={"max_ticks": BUDGET},
        translate={"offset_north": offset_north, "max_ticks": BUDGET},
        descend={"max_ticks": BUDGET},
    )


class TestSimulatedVehicle:
    """Tests for the simulated vehicle itself."""

    def test_rests_at_site_origin(self) -> None:
        """Test the vehicle starts at the anchor frame origin."""
        vehicle = SimulatedVehicle(SimulationConfig(), SiteConfig())
        assert_array_almost_equal(
            vehicle.position(vehicle.site_frame), (0.0, 0.0, 0.0), decimal=6
        )
        assert vehicle.surface_altitude() == 0.0

    def test_ground_contact(self) -> None:
        """Test the vehicle cannot sink below the surface."""
        vehicle = SimulatedVehicle()
        vehicle.set_throttle(0.0)
        vehicle.advance(1.0)
        assert vehicle.surface_altitude() == 0.0
        assert vehicle.vertical_speed() == 0.0

    def test_full_throttle_climbs(self) -> None:
        """Test thrust above gravity lifts off."""
        vehicle = SimulatedVehicle()
        vehicle.set_throttle(1.0)
        vehicle.advance(1.0)
        assert vehicle.surface_altitude() > 0.0
        assert vehicle.vertical_speed() > 0.0

    def test_position_in_body_frame(self) -> None:
        """Test position in the body frame sits on the surface."""
        vehicle = SimulatedVehicle()
        radius = float(np.linalg.norm(vehicle.position(vehicle.body_reference_frame())))
        assert radius == pytest.approx(600070.0, abs=1e-3)


class TestSimulatedFlight:
    """End-to-end maneuver against the simulated vehicle."""

    @pytest.mark.parametrize("mode", ["direct", "incremental"])
    def test_hop_completes(self, mode: str) -> None:
        """Test the maneuver reaches COMPLETE in both actuation modes."""
        vehicle = SimulatedVehicle()
        sequencer = PhaseSequencer(vehicle, make_plan(mode), sleep=vehicle.advance)

        result = sequencer.run()

        assert result.phase == Phase.COMPLETE
        assert result.gear_deployed
        assert vehicle.inputs.gear
        assert vehicle.inputs.throttle == 0.0
        assert vehicle.inputs.sas and vehicle.inputs.rcs
        assert vehicle.inputs.stage == 1
        assert vehicle.surface_altitude() <= 10.0

    def test_vehicle_moves_toward_target(self) -> None:
        """Test the lateral phase moves the vehicle north."""
        vehicle = SimulatedVehicle()
        sequencer = PhaseSequencer(vehicle, make_plan(), sleep=vehicle.advance)

        result = sequencer.run()

        north_target, east_target = result.translate_target
        _, north, east = vehicle.position(sequencer.frame)
        assert north_target == pytest.approx(20.0, abs=1e-3)
        assert east_target == pytest.approx(0.0, abs=1e-3)
        assert north > 10.0
        assert abs(east) < 1.0

    def test_ascend_captures_hover(self) -> None:
        """Test the captured position is near the hover altitude."""
        vehicle = SimulatedVehicle()
        sequencer = PhaseSequencer(vehicle, make_plan(), sleep=vehicle.advance)

        result = sequencer.run()

        up, _, _ = result.captured_position
        assert up == pytest.approx(100.0, abs=1.0)
        assert set(result.phase_ticks) == {"ASCEND", "TRANSLATE", "DESCEND"}


class TestCli:
    """Tests for the command-line interface."""

    @pytest.fixture(autouse=True)
    def _keep_logging(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Leave global logging untouched by CLI runs."""
        monkeypatch.setattr(
            "skyhop.logging.setup.configure_logging", lambda *args, **kwargs: None
        )

    def test_version(self) -> None:
        """Test version command."""
        result = CliRunner().invoke(app, ["version"])
        assert result.exit_code == 0
        assert "Skyhop" in result.stdout

    def test_diagnostics_defaults(self) -> None:
        """Test diagnostics with default configuration."""
        result = CliRunner().invoke(app, ["diagnostics"])
        assert result.exit_code == 0
        assert "direct" in result.stdout

    def test_simulate(self) -> None:
        """Test the simulate command flies to completion."""
        result = CliRunner().invoke(app, ["simulate", "--tick-period", "0.02"])
        assert result.exit_code == 0
        assert "COMPLETE" in result.stdout

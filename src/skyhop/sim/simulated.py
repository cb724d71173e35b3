"""
Simulated vehicle for Skyhop.

Point-mass hopper on a spherical body. Physics advance only when the
control loop sleeps, which keeps runs deterministic and fast.
"""

from dataclasses import dataclass, field
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from skyhop.config.schema import SimulationConfig, SiteConfig
from skyhop.frames.geodetic import ReferenceFrame, Vector3, build_frame
from skyhop.logging.setup import get_logger
from skyhop.session.interface import VehicleSession
from skyhop.utils.math3d import clamp

logger = get_logger(__name__)

ROLL_RATE_DEG_S = 30.0
LATERAL_DRAG = 0.8


@dataclass
class SimulatedBody:
    """Spherical body with uniform terrain height."""

    equatorial_radius: float = 600000.0
    terrain_height: float = 70.0

    def surface_height(self, latitude: float, longitude: float) -> float:
        return self.terrain_height


@dataclass
class VehicleState:
    """
    Simulated vehicle state in the site frame (x up, y north, z east).

    Attributes:
        position: Position relative to the launch site.
        velocity: Velocity in the site frame.
        roll_deg: Roll angle.
        time_s: Simulated time.
    """

    position: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    velocity: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    roll_deg: float = 0.0
    time_s: float = 0.0


@dataclass
class ControlInputs:
    """Latest actuator commands."""

    throttle: float = 0.0
    pitch: float = 0.0
    yaw: float = 0.0
    roll: float = 0.0
    right: float = 0.0
    up: float = 0.0
    gear: bool = False
    sas: bool = False
    rcs: bool = False
    stage: int = 0


class SimulatedVehicle(VehicleSession):
    """
    Vehicle session backed by a simple point-mass model.

    Pass advance() as the sequencer's sleep function so simulated time
    moves by one tick period per control tick.
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        site: Optional[SiteConfig] = None,
    ) -> None:
        """
        Initialize simulated vehicle resting on the launch site.

        Args:
            config: Physical parameters.
            site: Launch site location.
        """
        self._config = config or SimulationConfig()
        self._site = site or SiteConfig()
        self._body = SimulatedBody(
            equatorial_radius=self._config.body_radius,
            terrain_height=self._config.surface_height,
        )
        self._body_frame = ReferenceFrame.root("body")
        self._site_frame = build_frame(
            self._body,
            self._body_frame,
            self._site.latitude_deg,
            self._site.longitude_deg,
        )
        self.state = VehicleState()
        self.inputs = ControlInputs()

    @property
    def site_frame(self) -> ReferenceFrame:
        """Frame anchored at the launch site."""
        return self._site_frame

    def advance(self, seconds: float) -> None:
        """Integrate physics forward by the given duration."""
        remaining = seconds
        while remaining > 1e-12:
            step = min(self._config.sim_step_s, remaining)
            self._integrate(step)
            remaining -= step

    def _integrate(self, dt: float) -> None:
        cfg = self._config
        state = self.state
        inputs = self.inputs

        accel = np.zeros(3)
        accel[0] = clamp(inputs.throttle, 0.0, 1.0) * cfg.max_thrust_accel - cfg.gravity

        north_cmd = clamp(inputs.right + inputs.yaw, -1.0, 1.0)
        east_cmd = clamp(-inputs.up - inputs.pitch, -1.0, 1.0)
        accel[1] = north_cmd * cfg.lateral_accel - LATERAL_DRAG * state.velocity[1]
        accel[2] = east_cmd * cfg.lateral_accel - LATERAL_DRAG * state.velocity[2]

        state.velocity = state.velocity + accel * dt
        state.position = state.position + state.velocity * dt
        state.roll_deg += clamp(inputs.roll, -1.0, 1.0) * ROLL_RATE_DEG_S * dt
        state.time_s += dt

        if state.position[0] <= 0.0:
            state.position[0] = 0.0
            state.velocity = np.zeros(3)

    # VehicleSession -----------------------------------------------------

    def body(self) -> SimulatedBody:
        return self._body

    def body_reference_frame(self) -> ReferenceFrame:
        return self._body_frame

    def surface_altitude(self) -> float:
        return float(self.state.position[0])

    def vertical_speed(self) -> float:
        return float(self.state.velocity[0])

    def position(self, frame: ReferenceFrame) -> Vector3:
        body_point = self._site_frame.from_local(self.state.position)
        x, y, z = frame.to_local(body_point)
        return float(x), float(y), float(z)

    def roll(self) -> float:
        return float(self.state.roll_deg)

    def set_throttle(self, value: float) -> None:
        self.inputs.throttle = float(value)

    def set_pitch(self, value: float) -> None:
        self.inputs.pitch = float(value)

    def set_yaw(self, value: float) -> None:
        self.inputs.yaw = float(value)

    def set_roll(self, value: float) -> None:
        self.inputs.roll = float(value)

    def set_right(self, value: float) -> None:
        self.inputs.right = float(value)

    def set_up(self, value: float) -> None:
        self.inputs.up = float(value)

    def set_gear(self, deployed: bool) -> None:
        self.inputs.gear = bool(deployed)

    def set_sas(self, enabled: bool) -> None:
        self.inputs.sas = bool(enabled)

    def set_rcs(self, enabled: bool) -> None:
        self.inputs.rcs = bool(enabled)

    def activate_next_stage(self) -> None:
        self.inputs.stage += 1
        logger.info("sim_stage_activated", stage=self.inputs.stage)

"""
Shared pytest fixtures for Skyhop tests.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

import pytest

from skyhop.config.schema import FlightPlan
from skyhop.errors import SessionError
from skyhop.frames.geodetic import ReferenceFrame
from skyhop.session.interface import VehicleSession

TELEMETRY_CALLS = {
    "body",
    "body_reference_frame",
    "surface_altitude",
    "vertical_speed",
    "position",
    "roll",
}


@dataclass
class FakeBody:
    """Body with fixed geometry."""

    equatorial_radius: float = 600000.0
    height: float = 70.0

    def surface_height(self, latitude: float, longitude: float) -> float:
        return self.height


class ScriptedSession(VehicleSession):
    """
    Vehicle session driven by scripted telemetry.

    Telemetry values are functions of n, the number of altitude reads so
    far (one per control tick). Every call is logged in self.calls.
    """

    def __init__(
        self,
        altitude: Callable[[int], float],
        position: Optional[Callable[[int], tuple[float, float, float]]] = None,
        vertical_speed: Optional[Callable[[int], float]] = None,
        roll: Optional[Callable[[int], float]] = None,
        fail_at_read: Optional[int] = None,
        fail_throttle_on_abort: bool = False,
    ) -> None:
        self._altitude = altitude
        self._position = position or (lambda n: (altitude(n), 0.0, 0.0))
        self._vertical_speed = vertical_speed or (lambda n: 0.0)
        self._roll = roll or (lambda n: 0.0)
        self._fail_at_read = fail_at_read
        self._fail_throttle_on_abort = fail_throttle_on_abort
        self._failed = False
        self.reads = 0
        self.calls: list[tuple[str, Any]] = []
        self.body_obj = FakeBody()
        self.body_frame = ReferenceFrame.root("body")

    def _log(self, name: str, value: Any = None) -> None:
        self.calls.append((name, value))

    def calls_named(self, name: str) -> list[Any]:
        return [value for call, value in self.calls if call == name]

    def body(self) -> FakeBody:
        self._log("body")
        return self.body_obj

    def body_reference_frame(self) -> ReferenceFrame:
        self._log("body_reference_frame")
        return self.body_frame

    def surface_altitude(self) -> float:
        self.reads += 1
        if self._fail_at_read is not None and self.reads >= self._fail_at_read:
            self._failed = True
            self._log("surface_altitude", "error")
            raise SessionError("link lost")
        value = self._altitude(self.reads)
        self._log("surface_altitude", value)
        return value

    def vertical_speed(self) -> float:
        value = self._vertical_speed(self.reads)
        self._log("vertical_speed", value)
        return value

    def position(self, frame: Any) -> tuple[float, float, float]:
        value = self._position(self.reads)
        self._log("position", value)
        return value

    def roll(self) -> float:
        value = self._roll(self.reads)
        self._log("roll", value)
        return value

    def set_throttle(self, value: float) -> None:
        if self._failed and self._fail_throttle_on_abort:
            raise SessionError("actuation unreachable")
        self._log("set_throttle", value)

    def set_pitch(self, value: float) -> None:
        self._log("set_pitch", value)

    def set_yaw(self, value: float) -> None:
        self._log("set_yaw", value)

    def set_roll(self, value: float) -> None:
        self._log("set_roll", value)

    def set_right(self, value: float) -> None:
        self._log("set_right", value)

    def set_up(self, value: float) -> None:
        self._log("set_up", value)

    def set_gear(self, deployed: bool) -> None:
        self._log("set_gear", deployed)

    def set_sas(self, enabled: bool) -> None:
        self._log("set_sas", enabled)

    def set_rcs(self, enabled: bool) -> None:
        self._log("set_rcs", enabled)

    def activate_next_stage(self) -> None:
        self._log("activate_next_stage")


@pytest.fixture
def fake_body() -> FakeBody:
    """Create body with 600 km radius and 70 m terrain."""
    return FakeBody()


@pytest.fixture
def root_frame() -> ReferenceFrame:
    """Create body-fixed root frame."""
    return ReferenceFrame.root("body")


@pytest.fixture
def plan() -> FlightPlan:
    """Create reference flight plan with a 10 ms tick."""
    return FlightPlan(tick_period_s=0.01)


@pytest.fixture
def sleeps() -> list[float]:
    """Collect sleep durations instead of sleeping."""
    return []


@pytest.fixture
def scripted_session() -> type[ScriptedSession]:
    """Factory for scripted vehicle sessions."""
    return ScriptedSession

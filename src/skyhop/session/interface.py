"""
Telemetry/actuation interface for Skyhop.

Defines the vehicle session the control loop talks to. Implementations
wrap a simulator or an RPC connection; the control loop never assumes how
values are obtained.
"""

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from typing import Any, Callable, Optional, TypeVar

from skyhop.errors import SessionError, SessionTimeoutError
from skyhop.frames.geodetic import CelestialBody, FrameLike, Vector3
from skyhop.logging.setup import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class VehicleSession(ABC):
    """
    Abstract base class for a single-vehicle session.

    All calls are synchronous. Any exception raised by a call is treated
    as fatal for the flight.
    """

    @abstractmethod
    def body(self) -> CelestialBody:
        """Celestial body the vehicle is on."""
        pass

    @abstractmethod
    def body_reference_frame(self) -> FrameLike:
        """Body-fixed reference frame of the celestial body."""
        pass

    @abstractmethod
    def surface_altitude(self) -> float:
        """Altitude above the surface."""
        pass

    @abstractmethod
    def vertical_speed(self) -> float:
        """Vertical speed, positive upward."""
        pass

    @abstractmethod
    def position(self, frame: FrameLike) -> Vector3:
        """Vehicle position expressed in the given frame."""
        pass

    @abstractmethod
    def roll(self) -> float:
        """Roll angle in degrees."""
        pass

    @abstractmethod
    def set_throttle(self, value: float) -> None:
        """Command throttle in [0, 1]."""
        pass

    @abstractmethod
    def set_pitch(self, value: float) -> None:
        """Command pitch input in [-1, 1]."""
        pass

    @abstractmethod
    def set_yaw(self, value: float) -> None:
        """Command yaw input in [-1, 1]."""
        pass

    @abstractmethod
    def set_roll(self, value: float) -> None:
        """Command roll input in [-1, 1]."""
        pass

    @abstractmethod
    def set_right(self, value: float) -> None:
        """Command lateral right translation in [-1, 1]."""
        pass

    @abstractmethod
    def set_up(self, value: float) -> None:
        """Command lateral up translation in [-1, 1]."""
        pass

    @abstractmethod
    def set_gear(self, deployed: bool) -> None:
        """Deploy or retract landing gear. Idempotent."""
        pass

    @abstractmethod
    def set_sas(self, enabled: bool) -> None:
        """Enable or disable attitude hold."""
        pass

    @abstractmethod
    def set_rcs(self, enabled: bool) -> None:
        """Enable or disable reaction control."""
        pass

    @abstractmethod
    def activate_next_stage(self) -> None:
        """Fire the next stage."""
        pass

    def close(self) -> None:
        """Release session resources."""


class DeadlineSession(VehicleSession):
    """
    Session wrapper that bounds every call with an optional deadline.

    With timeout_s=None calls go straight to the wrapped session and block
    as long as it does. With a deadline, each call runs on a single worker
    thread so calls stay serialized; a call that exceeds the deadline
    raises SessionTimeoutError. The stuck worker is then abandoned and
    later calls run on a fresh one, so a follow-up command such as a
    throttle cut is not queued behind the call that timed out.
    """

    def __init__(self, inner: VehicleSession, timeout_s: Optional[float] = None) -> None:
        """
        Initialize wrapper.

        Args:
            inner: Session to wrap.
            timeout_s: Per-call deadline in seconds, None for no deadline.
        """
        if timeout_s is not None and timeout_s <= 0:
            raise ValueError("timeout_s must be positive")

        self._inner = inner
        self._timeout_s = timeout_s
        self._executor: Optional[ThreadPoolExecutor] = (
            self._new_executor() if timeout_s is not None else None
        )

    @staticmethod
    def _new_executor() -> ThreadPoolExecutor:
        return ThreadPoolExecutor(max_workers=1, thread_name_prefix="skyhop-session")

    @property
    def timeout_s(self) -> Optional[float]:
        """Per-call deadline in seconds."""
        return self._timeout_s

    def _call(self, name: str, fn: Callable[..., T], *args: Any) -> T:
        if self._executor is None:
            return fn(*args)

        future = self._executor.submit(fn, *args)
        try:
            return future.result(timeout=self._timeout_s)
        except FutureTimeout as e:
            logger.error("session_call_timeout", call=name, timeout_s=self._timeout_s)
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = self._new_executor()
            raise SessionTimeoutError(
                f"{name} did not complete within {self._timeout_s}s"
            ) from e

    def body(self) -> CelestialBody:
        return self._call("body", self._inner.body)

    def body_reference_frame(self) -> FrameLike:
        return self._call("body_reference_frame", self._inner.body_reference_frame)

    def surface_altitude(self) -> float:
        return self._call("surface_altitude", self._inner.surface_altitude)

    def vertical_speed(self) -> float:
        return self._call("vertical_speed", self._inner.vertical_speed)

    def position(self, frame: FrameLike) -> Vector3:
        return self._call("position", self._inner.position, frame)

    def roll(self) -> float:
        return self._call("roll", self._inner.roll)

    def set_throttle(self, value: float) -> None:
        self._call("set_throttle", self._inner.set_throttle, value)

    def set_pitch(self, value: float) -> None:
        self._call("set_pitch", self._inner.set_pitch, value)

    def set_yaw(self, value: float) -> None:
        self._call("set_yaw", self._inner.set_yaw, value)

    def set_roll(self, value: float) -> None:
        self._call("set_roll", self._inner.set_roll, value)

    def set_right(self, value: float) -> None:
        self._call("set_right", self._inner.set_right, value)

    def set_up(self, value: float) -> None:
        self._call("set_up", self._inner.set_up, value)

    def set_gear(self, deployed: bool) -> None:
        self._call("set_gear", self._inner.set_gear, deployed)

    def set_sas(self, enabled: bool) -> None:
        self._call("set_sas", self._inner.set_sas, enabled)

    def set_rcs(self, enabled: bool) -> None:
        self._call("set_rcs", self._inner.set_rcs, enabled)

    def activate_next_stage(self) -> None:
        self._call("activate_next_stage", self._inner.activate_next_stage)

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None
        self._inner.close()


__all__ = ["DeadlineSession", "SessionError", "SessionTimeoutError", "VehicleSession"]

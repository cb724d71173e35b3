"""
kRPC integration bridge for Skyhop.

Adapts a kRPC connection to the active vessel into a VehicleSession.
"""

from contextlib import contextmanager
from typing import Any, Iterator, Optional

from skyhop.errors import SessionError
from skyhop.frames.geodetic import Quaternion, Vector3
from skyhop.logging.setup import get_logger
from skyhop.session.interface import VehicleSession
from skyhop.utils.math3d import IDENTITY_QUATERNION

logger = get_logger(__name__)


@contextmanager
def _guard(call: str) -> Iterator[None]:
    """Re-raise any kRPC failure as SessionError."""
    try:
        yield
    except SessionError:
        raise
    except Exception as e:
        logger.error("krpc_call_failed", call=call, error=str(e))
        raise SessionError(f"{call} failed: {e}") from e


class KrpcFrame:
    """kRPC reference frame exposing create_relative as an instance method."""

    def __init__(self, space_center: Any, frame: Any) -> None:
        self._space_center = space_center
        self.frame = frame

    def create_relative(
        self,
        position: Vector3 = (0.0, 0.0, 0.0),
        rotation: Quaternion = IDENTITY_QUATERNION,
    ) -> "KrpcFrame":
        """Create a child kRPC frame."""
        with _guard("create_relative"):
            child = self._space_center.ReferenceFrame.create_relative(
                self.frame,
                position=tuple(position),
                rotation=tuple(rotation),
            )
        return KrpcFrame(self._space_center, child)


class KrpcSession(VehicleSession):
    """
    Vehicle session backed by a kRPC server.

    Controls the active vessel. Altitude and vertical speed come from a
    flight object in the body reference frame; roll comes from the vessel
    surface reference frame.
    """

    def __init__(
        self,
        address: str = "127.0.0.1",
        rpc_port: int = 50000,
        stream_port: int = 50001,
        client_name: str = "skyhop",
    ) -> None:
        """
        Initialize kRPC session.

        Args:
            address: kRPC server address.
            rpc_port: RPC port.
            stream_port: Stream port.
            client_name: Name shown in the kRPC server UI.
        """
        self._address = address
        self._rpc_port = rpc_port
        self._stream_port = stream_port
        self._client_name = client_name

        self._conn: Optional[Any] = None
        self._space_center: Optional[Any] = None
        self._vessel: Optional[Any] = None
        self._control: Optional[Any] = None
        self._body: Optional[Any] = None
        self._body_flight: Optional[Any] = None
        self._surface_flight: Optional[Any] = None

    def connect(self) -> None:
        """
        Connect and bind to the active vessel.

        Raises:
            SessionError: If the connection or vessel lookup fails.
        """
        try:
            import krpc
        except ImportError as e:
            logger.error("krpc_not_installed")
            raise SessionError("krpc is not installed (pip install skyhop[krpc])") from e

        with _guard("connect"):
            self._conn = krpc.connect(
                name=self._client_name,
                address=self._address,
                rpc_port=self._rpc_port,
                stream_port=self._stream_port,
            )
            self._space_center = self._conn.space_center
            self._vessel = self._space_center.active_vessel
            self._control = self._vessel.control
            self._body = self._vessel.orbit.body
            self._body_flight = self._vessel.flight(self._body.reference_frame)
            self._surface_flight = self._vessel.flight(
                self._vessel.surface_reference_frame
            )

        override = getattr(
            getattr(self._space_center, "ControlInputMode", None), "override", None
        )
        if override is not None:
            with _guard("set_input_mode"):
                self._control.input_mode = override

        logger.info(
            "krpc_connected",
            address=self._address,
            rpc_port=self._rpc_port,
            vessel=self._vessel.name,
        )

    def _require(self, value: Optional[Any]) -> Any:
        if value is None:
            raise SessionError("kRPC session is not connected")
        return value

    def close(self) -> None:
        """Close the kRPC connection."""
        if self._conn is not None:
            with _guard("close"):
                self._conn.close()
            self._conn = None
            logger.info("krpc_disconnected")

    def body(self) -> Any:
        return self._require(self._body)

    def body_reference_frame(self) -> KrpcFrame:
        body = self._require(self._body)
        with _guard("body_reference_frame"):
            return KrpcFrame(self._space_center, body.reference_frame)

    def surface_altitude(self) -> float:
        flight = self._require(self._body_flight)
        with _guard("surface_altitude"):
            return float(flight.surface_altitude)

    def vertical_speed(self) -> float:
        flight = self._require(self._body_flight)
        with _guard("vertical_speed"):
            return float(flight.vertical_speed)

    def position(self, frame: Any) -> Vector3:
        vessel = self._require(self._vessel)
        raw_frame = frame.frame if isinstance(frame, KrpcFrame) else frame
        with _guard("position"):
            x, y, z = vessel.position(raw_frame)
        return float(x), float(y), float(z)

    def roll(self) -> float:
        flight = self._require(self._surface_flight)
        with _guard("roll"):
            return float(flight.roll)

    def _set(self, attribute: str, value: Any) -> None:
        control = self._require(self._control)
        with _guard(f"set_{attribute}"):
            setattr(control, attribute, value)

    def set_throttle(self, value: float) -> None:
        self._set("throttle", float(value))

    def set_pitch(self, value: float) -> None:
        self._set("pitch", float(value))

    def set_yaw(self, value: float) -> None:
        self._set("yaw", float(value))

    def set_roll(self, value: float) -> None:
        self._set("roll", float(value))

    def set_right(self, value: float) -> None:
        self._set("right", float(value))

    def set_up(self, value: float) -> None:
        self._set("up", float(value))

    def set_gear(self, deployed: bool) -> None:
        self._set("gear", bool(deployed))

    def set_sas(self, enabled: bool) -> None:
        self._set("sas", bool(enabled))

    def set_rcs(self, enabled: bool) -> None:
        self._set("rcs", bool(enabled))

    def activate_next_stage(self) -> None:
        control = self._require(self._control)
        with _guard("activate_next_stage"):
            control.activate_next_stage()

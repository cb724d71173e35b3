"""
Geodetic reference frames for Skyhop.

Provides an immutable reference frame tree and construction of a
surface-anchored frame from a celestial body's native frame.
"""

from dataclasses import dataclass
import math
from typing import Optional, Protocol, Sequence, runtime_checkable

import numpy as np
from numpy.typing import NDArray

from skyhop.logging.setup import get_logger
from skyhop.utils.math3d import (
    IDENTITY_QUATERNION,
    axis_angle_quaternion,
    quaternion_to_rotation_matrix,
    transform_point,
)

logger = get_logger(__name__)

Vector3 = tuple[float, float, float]
Quaternion = tuple[float, float, float, float]


@runtime_checkable
class CelestialBody(Protocol):
    """Body queried for surface geometry."""

    @property
    def equatorial_radius(self) -> float:
        """Equatorial radius of the body."""
        ...

    def surface_height(self, latitude: float, longitude: float) -> float:
        """Surface height above the equatorial radius at a location."""
        ...


@runtime_checkable
class FrameLike(Protocol):
    """Anything that can spawn a child frame by offset and rotation."""

    def create_relative(
        self,
        position: Vector3 = (0.0, 0.0, 0.0),
        rotation: Quaternion = IDENTITY_QUATERNION,
    ) -> "FrameLike":
        """Create a child frame."""
        ...


@dataclass(frozen=True)
class ReferenceFrame:
    """
    Coordinate frame defined relative to a parent frame.

    A point with coordinates p in this frame has coordinates
    position + R(rotation) @ p in the parent frame.

    Attributes:
        position: Origin offset in parent coordinates.
        rotation: Rotation relative to the parent, quaternion (x, y, z, w).
        parent: Parent frame, None for a root frame.
        name: Optional label.
    """

    position: Vector3 = (0.0, 0.0, 0.0)
    rotation: Quaternion = IDENTITY_QUATERNION
    parent: Optional["ReferenceFrame"] = None
    name: str = ""

    @classmethod
    def root(cls, name: str = "root") -> "ReferenceFrame":
        """Create a parentless frame."""
        return cls(name=name)

    def create_relative(
        self,
        position: Vector3 = (0.0, 0.0, 0.0),
        rotation: Quaternion = IDENTITY_QUATERNION,
        name: str = "",
    ) -> "ReferenceFrame":
        """
        Create a child frame.

        Args:
            position: Child origin in this frame's coordinates.
            rotation: Child rotation relative to this frame.
            name: Optional label.

        Returns:
            New ReferenceFrame whose parent is self.
        """
        return ReferenceFrame(
            position=(float(position[0]), float(position[1]), float(position[2])),
            rotation=(
                float(rotation[0]),
                float(rotation[1]),
                float(rotation[2]),
                float(rotation[3]),
            ),
            parent=self,
            name=name,
        )

    def absolute_pose(self) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """
        Compose offsets and rotations up to the root.

        Returns:
            Tuple of (origin, R) where origin is this frame's origin in root
            coordinates and R maps this frame's axes into root axes.
        """
        R_local = quaternion_to_rotation_matrix(self.rotation)
        t_local = np.asarray(self.position, dtype=np.float64)

        if self.parent is None:
            return t_local, R_local

        parent_origin, parent_R = self.parent.absolute_pose()
        origin = transform_point(t_local, parent_R, parent_origin)
        return origin, parent_R @ R_local

    def from_local(self, point: Sequence[float]) -> NDArray[np.float64]:
        """Convert a point in this frame to root coordinates."""
        origin, R = self.absolute_pose()
        return transform_point(np.asarray(point, dtype=np.float64), R, origin)

    def to_local(self, point: Sequence[float]) -> NDArray[np.float64]:
        """Convert a point in root coordinates to this frame."""
        origin, R = self.absolute_pose()
        return R.T @ (np.asarray(point, dtype=np.float64) - origin)


def longitude_rotation(longitude_deg: float) -> Quaternion:
    """Rotation about the polar (y) axis by -longitude."""
    return axis_angle_quaternion(1, -longitude_deg * math.pi / 180.0)


def latitude_rotation(latitude_deg: float) -> Quaternion:
    """Rotation about the z axis by latitude."""
    return axis_angle_quaternion(2, latitude_deg * math.pi / 180.0)


def build_frame(
    body: CelestialBody,
    parent_frame: FrameLike,
    latitude_deg: float,
    longitude_deg: float,
) -> FrameLike:
    """
    Build a frame anchored on the body surface at a geodetic location.

    The parent is rotated about the polar axis by -longitude, then about
    the new z axis by latitude, then translated along the resulting x
    axis by surface height + equatorial radius. In the returned frame
    x points up, y north and z east, and the anchor point reads as zero.

    Errors raised by the body propagate unchanged.

    Args:
        body: Body providing surface height and equatorial radius.
        parent_frame: The body's native (body-fixed) reference frame.
        latitude_deg: Anchor latitude in degrees.
        longitude_deg: Anchor longitude in degrees.

    Returns:
        Surface-anchored frame.
    """
    meridian = parent_frame.create_relative(
        (0.0, 0.0, 0.0), longitude_rotation(longitude_deg)
    )
    tilted = meridian.create_relative(
        (0.0, 0.0, 0.0), latitude_rotation(latitude_deg)
    )

    height = body.surface_height(latitude_deg, longitude_deg)
    height += float(body.equatorial_radius)

    frame = tilted.create_relative((height, 0.0, 0.0), IDENTITY_QUATERNION)

    logger.info(
        "anchor_frame_built",
        latitude=latitude_deg,
        longitude=longitude_deg,
        radius=height,
    )
    return frame

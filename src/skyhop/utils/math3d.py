"""
3D math utilities for Skyhop.

Provides quaternion conversions and rotation helpers. Quaternions are
stored in (x, y, z, w) order, matching the tuples used by reference
frame construction.
"""

import math

import numpy as np
from numpy.typing import NDArray

IDENTITY_QUATERNION: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)


def axis_angle_quaternion(
    axis: int, angle_rad: float
) -> tuple[float, float, float, float]:
    """
    Build a half-angle quaternion rotating about a principal axis.

    Args:
        axis: Axis index (0 = x, 1 = y, 2 = z).
        angle_rad: Rotation angle in radians.

    Returns:
        Quaternion (x, y, z, w).
    """
    if axis not in (0, 1, 2):
        raise ValueError(f"axis must be 0, 1 or 2, got {axis}")

    q = [0.0, 0.0, 0.0, math.cos(angle_rad / 2.0)]
    q[axis] = math.sin(angle_rad / 2.0)
    return q[0], q[1], q[2], q[3]


def quaternion_to_rotation_matrix(
    q: tuple[float, float, float, float],
) -> NDArray[np.float64]:
    """
    Convert quaternion to rotation matrix.

    A zero quaternion is treated as identity.

    Args:
        q: Quaternion (x, y, z, w). Normalized before conversion.

    Returns:
        3x3 rotation matrix.
    """
    v = np.asarray(q, dtype=np.float64)
    norm = np.linalg.norm(v)
    if norm < 1e-12:
        return np.eye(3, dtype=np.float64)
    x, y, z, w = v / norm

    R = np.array(
        [
            [1 - 2 * (y**2 + z**2), 2 * (x * y - z * w), 2 * (x * z + y * w)],
            [2 * (x * y + z * w), 1 - 2 * (x**2 + z**2), 2 * (y * z - x * w)],
            [2 * (x * z - y * w), 2 * (y * z + x * w), 1 - 2 * (x**2 + y**2)],
        ],
        dtype=np.float64,
    )

    return R


def transform_point(
    point: NDArray[np.float64],
    R: NDArray[np.float64],
    t: NDArray[np.float64],
) -> NDArray[np.float64]:
    """
    Apply rigid transform to a point.

    p_out = R @ p_in + t

    Args:
        point: 3D point.
        R: 3x3 rotation matrix.
        t: 3-element translation vector.

    Returns:
        Transformed 3D point.
    """
    return R @ point + t


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value to [low, high]."""
    return min(max(value, low), high)

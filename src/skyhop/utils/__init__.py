"""Utility modules for Skyhop."""

from skyhop.utils.math3d import (
    IDENTITY_QUATERNION,
    axis_angle_quaternion,
    clamp,
    quaternion_to_rotation_matrix,
)

__all__ = [
    "IDENTITY_QUATERNION",
    "axis_angle_quaternion",
    "clamp",
    "quaternion_to_rotation_matrix",
]

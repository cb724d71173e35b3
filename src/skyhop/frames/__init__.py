"""Reference frame module for Skyhop."""

from skyhop.frames.geodetic import (
    CelestialBody,
    FrameLike,
    ReferenceFrame,
    build_frame,
)

__all__ = [
    "CelestialBody",
    "FrameLike",
    "ReferenceFrame",
    "build_frame",
]

"""
Skyhop - Autonomous hop maneuver controller for remotely-controlled vehicles.

This package provides PID feedback control, geodetic reference frame
construction, and a phase-sequencing loop that flies a vehicle through
ascent, lateral translation, and a controlled descent to touchdown.
"""

from skyhop.version import __version__

__all__ = ["__version__"]

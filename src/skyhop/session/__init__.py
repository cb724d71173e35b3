"""Vehicle session module for Skyhop."""

from skyhop.session.interface import DeadlineSession, VehicleSession

__all__ = [
    "DeadlineSession",
    "VehicleSession",
]

"""Control module for Skyhop."""

from skyhop.control.actuation import AttitudeCommand, SlewLimitedCommand
from skyhop.control.pid import PIDController
from skyhop.control.sequencer import FlightResult, Phase, PhaseSequencer

__all__ = [
    "AttitudeCommand",
    "FlightResult",
    "Phase",
    "PhaseSequencer",
    "PIDController",
    "SlewLimitedCommand",
]

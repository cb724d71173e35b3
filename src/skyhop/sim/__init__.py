"""Simulation and vehicle bridge module for Skyhop."""

from skyhop.sim.krpc_bridge import KrpcSession
from skyhop.sim.simulated import SimulatedVehicle

__all__ = [
    "KrpcSession",
    "SimulatedVehicle",
]

"""Logging module for Skyhop."""

from skyhop.logging.setup import configure_logging, get_logger
from skyhop.logging.telemetry import FlightRecorder, TickSample

__all__ = [
    "configure_logging",
    "get_logger",
    "FlightRecorder",
    "TickSample",
]

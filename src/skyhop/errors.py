"""
Exception hierarchy for Skyhop.
"""

from typing import Optional


class SkyhopError(Exception):
    """Base class for all Skyhop errors."""


class ConfigurationError(SkyhopError):
    """Invalid controller, phase, or configuration parameters."""


class SessionError(SkyhopError):
    """Telemetry or actuation call on the vehicle session failed."""


class SessionTimeoutError(SessionError):
    """Session call did not complete before its deadline."""


class PhaseTimeoutError(SkyhopError):
    """Phase exceeded its configured tick budget."""

    def __init__(self, phase: str, ticks: int) -> None:
        super().__init__(f"phase {phase} did not converge within {ticks} ticks")
        self.phase = phase
        self.ticks = ticks


class FlightAbortedError(SkyhopError):
    """
    Flight was aborted before reaching COMPLETE.

    Attributes:
        phase: Name of the phase that was active when the failure occurred.
        cause: Original exception.
        throttle_cut: Whether the zero-throttle safe command was accepted.
    """

    def __init__(
        self,
        phase: str,
        cause: BaseException,
        throttle_cut: bool = False,
    ) -> None:
        super().__init__(f"flight aborted during {phase}: {cause}")
        self.phase = phase
        self.cause: Optional[BaseException] = cause
        self.throttle_cut = throttle_cut

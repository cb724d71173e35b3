"""
Actuation helpers for Skyhop.

Provides slew-limited incremental commands for attitude-anchored lateral
control.
"""

from skyhop.utils.math3d import clamp


class SlewLimitedCommand:
    """
    Running actuator command built from per-tick deltas.

    Each delta is clamped to [-slew_limit, slew_limit] before it is added,
    and the running value is kept within the actuator range.
    """

    def __init__(
        self,
        slew_limit: float = 1.0,
        low: float = -1.0,
        high: float = 1.0,
        initial: float = 0.0,
    ) -> None:
        """
        Initialize command.

        Args:
            slew_limit: Maximum change per tick.
            low: Lower actuator limit.
            high: Upper actuator limit.
            initial: Starting command value.
        """
        if slew_limit <= 0:
            raise ValueError("slew_limit must be positive")
        if low > high:
            raise ValueError("low must not exceed high")

        self._slew_limit = slew_limit
        self._low = low
        self._high = high
        self._value = clamp(initial, low, high)

    def step(self, delta: float) -> float:
        """
        Apply a delta and return the new command.

        Args:
            delta: Requested change for this tick.

        Returns:
            Updated command value.
        """
        applied = clamp(delta, -self._slew_limit, self._slew_limit)
        self._value = clamp(self._value + applied, self._low, self._high)
        return self._value

    @property
    def value(self) -> float:
        """Current command value."""
        return self._value

    @property
    def slew_limit(self) -> float:
        """Maximum change per tick."""
        return self._slew_limit


class AttitudeCommand:
    """Running pitch/yaw/roll commands sharing one slew limit."""

    AXES = ("pitch", "yaw", "roll")

    def __init__(self, slew_limit: float = 1.0) -> None:
        self._axes = {axis: SlewLimitedCommand(slew_limit) for axis in self.AXES}

    def step(self, **deltas: float) -> dict[str, float]:
        """
        Apply deltas for the named axes.

        Returns:
            Updated values for the axes that were stepped.
        """
        unknown = set(deltas) - set(self.AXES)
        if unknown:
            raise KeyError(f"unknown attitude axes: {sorted(unknown)}")
        return {axis: self._axes[axis].step(d) for axis, d in deltas.items()}

    def value(self, axis: str) -> float:
        """Current command for an axis."""
        return self._axes[axis].value

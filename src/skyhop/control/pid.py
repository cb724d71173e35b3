"""
PID feedback controller for Skyhop.

Single-axis controller with integral accumulation, derivative damping,
and output clamping.
"""

import math

from skyhop.errors import ConfigurationError


class PIDController:
    """
    Stateful single-axis PID controller with bounded output.

    The integral and derivative contributions of each call use the state
    left by the previous call; the accumulator and previous error are
    updated only after the raw output is computed. The previous error
    starts at zero, so the first call sees a derivative of error / dt.

    The accumulator keeps growing while the output is saturated unless
    anti_windup is enabled.

    Not safe for concurrent use from multiple threads.
    """

    def __init__(
        self,
        kp: float,
        ki: float,
        kd: float,
        target: float,
        dt: float,
        min_output: float,
        max_output: float,
        anti_windup: bool = False,
    ) -> None:
        """
        Initialize controller.

        Args:
            kp: Proportional gain.
            ki: Integral gain.
            kd: Derivative gain.
            target: Setpoint.
            dt: Sample period in seconds. Must match the polling cadence.
            min_output: Lower output bound (inclusive).
            max_output: Upper output bound (inclusive).
            anti_windup: Skip integration while the output is saturated
                in the direction of the error.

        Raises:
            ConfigurationError: If parameters are invalid.
        """
        for name, value in (
            ("kp", kp),
            ("ki", ki),
            ("kd", kd),
            ("target", target),
            ("dt", dt),
            ("min_output", min_output),
            ("max_output", max_output),
        ):
            if not math.isfinite(value):
                raise ConfigurationError(f"{name} must be finite, got {value}")

        if dt <= 0:
            raise ConfigurationError(f"dt must be positive, got {dt}")
        if min_output > max_output:
            raise ConfigurationError(
                f"min_output ({min_output}) exceeds max_output ({max_output})"
            )

        self._kp = kp
        self._ki = ki
        self._kd = kd
        self._target = target
        self._dt = dt
        self._min_output = min_output
        self._max_output = max_output
        self._anti_windup = anti_windup

        self._integral = 0.0
        self._previous_error = 0.0

    def control(self, current: float) -> float:
        """
        Compute the clamped control output for a new measurement.

        Args:
            current: Latest measured value of the controlled quantity.

        Returns:
            Control output within [min_output, max_output].
        """
        error = self._target - current

        raw = (
            self._kp * error
            + self._ki * (self._integral + error * self._dt)
            + self._kd * (error - self._previous_error) / self._dt
        )

        if not (self._anti_windup and self._winding_up(raw, error)):
            self._integral += error * self._dt
        self._previous_error = error

        return min(max(raw, self._min_output), self._max_output)

    def _winding_up(self, raw: float, error: float) -> bool:
        """Whether raw output is saturated in the direction of the error."""
        return (raw > self._max_output and error > 0) or (
            raw < self._min_output and error < 0
        )

    def saturated(self, output: float) -> bool:
        """Check whether an output returned by control() sits on a bound."""
        return output <= self._min_output or output >= self._max_output

    @property
    def target(self) -> float:
        """Setpoint."""
        return self._target

    @property
    def dt(self) -> float:
        """Sample period in seconds."""
        return self._dt

    @property
    def integral(self) -> float:
        """Accumulated error * dt."""
        return self._integral

    @property
    def previous_error(self) -> float:
        """Error seen by the most recent call (zero before the first call)."""
        return self._previous_error

    @property
    def bounds(self) -> tuple[float, float]:
        """Output bounds (min, max)."""
        return self._min_output, self._max_output

    @property
    def anti_windup(self) -> bool:
        """Whether conditional integration is enabled."""
        return self._anti_windup

    def __repr__(self) -> str:
        return (
            f"PIDController(kp={self._kp}, ki={self._ki}, kd={self._kd}, "
            f"target={self._target}, dt={self._dt}, "
            f"bounds=({self._min_output}, {self._max_output}))"
        )

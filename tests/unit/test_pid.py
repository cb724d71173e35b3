"""Unit tests for the PID controller."""

import math
import random

import pytest

from skyhop.control.pid import PIDController
from skyhop.errors import ConfigurationError


class TestPIDController:
    """Tests for PIDController."""

    def test_pure_proportional(self) -> None:
        """Test Kp=1 returns target - current regardless of history."""
        pid = PIDController(1.0, 0.0, 0.0, target=25.0, dt=0.01,
                            min_output=-1e9, max_output=1e9)

        for x in (0.0, 10.0, -3.5, 25.0, 100.0, 7.25):
            assert pid.control(x) == 25.0 - x

    def test_first_call_derivative(self) -> None:
        """Test previous error defaults to zero on the first call."""
        pid = PIDController(0.0, 0.0, 2.0, target=10.0, dt=0.01,
                            min_output=-5000.0, max_output=5000.0)

        assert pid.control(4.0) == pytest.approx(1200.0)

    def test_first_call_derivative_clamped(self) -> None:
        """Test first-call derivative output is clamped to bounds."""
        pid = PIDController(0.0, 0.0, 2.0, target=10.0, dt=0.01,
                            min_output=0.0, max_output=1.0)

        assert pid.control(4.0) == 1.0

    def test_second_call_derivative_uses_previous_error(self) -> None:
        """Test derivative is (error - previous error) / dt."""
        pid = PIDController(0.0, 0.0, 1.0, target=10.0, dt=0.5,
                            min_output=-100.0, max_output=100.0)

        pid.control(4.0)  # error 6
        assert pid.control(7.0) == pytest.approx((3.0 - 6.0) / 0.5)
        assert pid.previous_error == 3.0

    def test_integral_uses_pre_update_accumulator(self) -> None:
        """Test integral term is Ki * (integral + error * dt) before update."""
        pid = PIDController(0.0, 2.0, 0.0, target=10.0, dt=0.1,
                            min_output=-100.0, max_output=100.0)

        assert pid.control(4.0) == pytest.approx(2.0 * (0.0 + 6.0 * 0.1))
        assert pid.integral == pytest.approx(0.6)

        assert pid.control(8.0) == pytest.approx(2.0 * (0.6 + 2.0 * 0.1))
        assert pid.integral == pytest.approx(0.8)

    def test_integral_grows_monotonically(self) -> None:
        """Test repeated input moves output away from pure proportional."""
        pid = PIDController(1.0, 0.5, 0.0, target=10.0, dt=0.1,
                            min_output=-1e6, max_output=1e6)

        outputs = [pid.control(4.0) for _ in range(10)]
        integrals = []
        for _ in range(5):
            pid.control(4.0)
            integrals.append(pid.integral)

        assert all(b > a for a, b in zip(outputs, outputs[1:]))
        assert all(b > a for a, b in zip(integrals, integrals[1:]))
        assert all(o > 6.0 for o in outputs)

    def test_integral_negative_error(self) -> None:
        """Test negative error drives output downward over time."""
        pid = PIDController(1.0, 0.5, 0.0, target=0.0, dt=0.1,
                            min_output=-1e6, max_output=1e6)

        outputs = [pid.control(3.0) for _ in range(5)]
        assert all(b < a for a, b in zip(outputs, outputs[1:]))

    def test_no_anti_windup_by_default(self) -> None:
        """Test accumulator keeps growing while output is saturated."""
        pid = PIDController(1.0, 1.0, 0.0, target=100.0, dt=0.1,
                            min_output=0.0, max_output=1.0)

        for _ in range(50):
            assert pid.control(0.0) == 1.0

        assert pid.integral == pytest.approx(50 * 100.0 * 0.1)

    def test_anti_windup_opt_in(self) -> None:
        """Test anti-windup freezes the accumulator while saturated."""
        pid = PIDController(1.0, 1.0, 0.0, target=100.0, dt=0.1,
                            min_output=0.0, max_output=1.0, anti_windup=True)

        for _ in range(50):
            pid.control(0.0)

        assert pid.integral == 0.0
        assert pid.anti_windup is True

    @pytest.mark.parametrize("seed", range(5))
    def test_output_always_within_bounds(self, seed: int) -> None:
        """Test output stays in bounds for arbitrary input sequences."""
        rng = random.Random(seed)
        low, high = -0.5, 0.75
        pid = PIDController(
            rng.uniform(-5, 5), rng.uniform(-5, 5), rng.uniform(-5, 5),
            target=rng.uniform(-100, 100), dt=rng.choice([0.001, 0.01, 0.1]),
            min_output=low, max_output=high,
        )

        for _ in range(500):
            out = pid.control(rng.uniform(-1e4, 1e4))
            assert low <= out <= high

    def test_saturated_helper(self) -> None:
        """Test saturation check against bounds."""
        pid = PIDController(1.0, 0.0, 0.0, target=0.0, dt=0.1,
                            min_output=-1.0, max_output=1.0)

        assert pid.saturated(pid.control(-5.0))
        assert not pid.saturated(pid.control(0.5))

    def test_properties(self) -> None:
        """Test read-only accessors."""
        pid = PIDController(0.6, 0.0, 0.6, target=100.0, dt=0.001,
                            min_output=0.0, max_output=1.0)

        assert pid.target == 100.0
        assert pid.dt == 0.001
        assert pid.bounds == (0.0, 1.0)
        assert pid.integral == 0.0
        assert pid.previous_error == 0.0


class TestPIDControllerValidation:
    """Tests for construction-time rejection."""

    @pytest.mark.parametrize("dt", [0.0, -0.01])
    def test_rejects_non_positive_dt(self, dt: float) -> None:
        """Test zero or negative sample period is rejected."""
        with pytest.raises(ConfigurationError):
            PIDController(1.0, 0.0, 0.0, 0.0, dt, -1.0, 1.0)

    def test_rejects_inverted_bounds(self) -> None:
        """Test min_output above max_output is rejected."""
        with pytest.raises(ConfigurationError):
            PIDController(1.0, 0.0, 0.0, 0.0, 0.01, 1.0, -1.0)

    @pytest.mark.parametrize("bad", [math.nan, math.inf])
    def test_rejects_non_finite_gain(self, bad: float) -> None:
        """Test NaN and infinite gains are rejected."""
        with pytest.raises(ConfigurationError):
            PIDController(bad, 0.0, 0.0, 0.0, 0.01, -1.0, 1.0)

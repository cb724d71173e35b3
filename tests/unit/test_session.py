"""Unit tests for the session deadline wrapper."""

import time

import pytest

from skyhop.config.schema import FlightPlan
from skyhop.control.sequencer import PhaseSequencer
from skyhop.errors import FlightAbortedError, SessionTimeoutError
from skyhop.session.interface import DeadlineSession


def slow_altitude(n: int) -> float:
    time.sleep(0.5)
    return 0.0


class TestDeadlineSession:
    """Tests for DeadlineSession."""

    def test_no_deadline_passes_through(self, scripted_session) -> None:
        """Test calls reach the wrapped session unchanged."""
        inner = scripted_session(altitude=lambda n: 42.0)
        session = DeadlineSession(inner)

        assert session.timeout_s is None
        assert session.surface_altitude() == 42.0
        session.set_throttle(0.3)
        session.set_gear(True)
        assert inner.calls == [
            ("surface_altitude", 42.0),
            ("set_throttle", 0.3),
            ("set_gear", True),
        ]

    def test_deadline_met(self, scripted_session) -> None:
        """Test fast calls return normally under a deadline."""
        inner = scripted_session(altitude=lambda n: 7.0)
        session = DeadlineSession(inner, timeout_s=1.0)
        try:
            assert session.surface_altitude() == 7.0
        finally:
            session.close()

    def test_deadline_exceeded(self, scripted_session) -> None:
        """Test slow calls raise SessionTimeoutError."""
        session = DeadlineSession(scripted_session(altitude=slow_altitude), timeout_s=0.05)
        try:
            with pytest.raises(SessionTimeoutError):
                session.surface_altitude()
        finally:
            session.close()

    def test_timeout_aborts_flight(self, scripted_session) -> None:
        """Test a timed-out read aborts the maneuver."""
        inner = scripted_session(altitude=slow_altitude)
        session = DeadlineSession(inner, timeout_s=0.05)
        sequencer = PhaseSequencer(
            session, FlightPlan(tick_period_s=0.01), sleep=lambda s: None
        )
        try:
            with pytest.raises(FlightAbortedError) as exc_info:
                sequencer.run()
        finally:
            session.close()

        assert isinstance(exc_info.value.__cause__, SessionTimeoutError)
        assert exc_info.value.throttle_cut is True
        assert inner.calls_named("set_throttle") == [0.0]

    def test_calls_after_timeout_not_blocked(self, scripted_session) -> None:
        """Test a call after a timeout runs without waiting on the stuck one."""
        inner = scripted_session(altitude=slow_altitude)
        session = DeadlineSession(inner, timeout_s=0.05)
        try:
            with pytest.raises(SessionTimeoutError):
                session.surface_altitude()
            session.set_throttle(0.0)
            assert inner.calls_named("set_throttle") == [0.0]
            assert inner.calls_named("surface_altitude") == []
        finally:
            session.close()

    def test_rejects_non_positive_timeout(self, scripted_session) -> None:
        """Test deadline must be positive."""
        with pytest.raises(ValueError):
            DeadlineSession(scripted_session(altitude=lambda n: 0.0), timeout_s=0.0)

"""
In-memory flight recorder for Skyhop.

Keeps a sliding window of per-tick samples for summaries and inspection.
Nothing is written to disk.
"""

from collections import Counter, deque
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class TickSample:
    """Single control-loop tick."""

    tick: int
    phase: str
    altitude: float
    throttle: Optional[float] = None
    vertical_speed: Optional[float] = None
    north_offset: Optional[float] = None
    east_offset: Optional[float] = None
    lateral: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "tick": self.tick,
            "phase": self.phase,
            "altitude": round(self.altitude, 3),
            "throttle": round(self.throttle, 4) if self.throttle is not None else None,
            "vertical_speed": (
                round(self.vertical_speed, 3)
                if self.vertical_speed is not None
                else None
            ),
            "offset": {
                "north": (
                    round(self.north_offset, 3)
                    if self.north_offset is not None
                    else None
                ),
                "east": (
                    round(self.east_offset, 3) if self.east_offset is not None else None
                ),
            },
            "lateral": {k: round(v, 4) for k, v in self.lateral.items()},
        }


@dataclass
class FlightRecorder:
    """
    Collects control-loop samples.

    Maintains a sliding window of recent samples and a running count of
    ticks per phase that is not bounded by the window.
    """

    window_size: int = 1000
    _samples: deque[TickSample] = field(default_factory=deque)
    _phase_ticks: Counter[str] = field(default_factory=Counter)

    def __post_init__(self) -> None:
        """Initialize deque with correct maxlen."""
        if self.window_size <= 0:
            raise ValueError("window_size must be positive")
        self._samples = deque(maxlen=self.window_size)

    def record(self, sample: TickSample) -> None:
        """Record a tick sample."""
        self._samples.append(sample)
        self._phase_ticks[sample.phase] += 1

    @property
    def samples(self) -> list[TickSample]:
        """Samples currently in the window, oldest first."""
        return list(self._samples)

    @property
    def phase_ticks(self) -> dict[str, int]:
        """Ticks recorded per phase."""
        return dict(self._phase_ticks)

    def last(self) -> Optional[TickSample]:
        """Most recent sample."""
        return self._samples[-1] if self._samples else None

    def get_summary(self) -> dict[str, Any]:
        """
        Get summary of recorded samples.

        Returns:
            Summary dictionary.
        """
        if not self._samples:
            return {"sample_count": 0, "phase_ticks": {}}

        altitudes = [s.altitude for s in self._samples]
        throttles = [s.throttle for s in self._samples if s.throttle is not None]

        return {
            "sample_count": sum(self._phase_ticks.values()),
            "phase_ticks": self.phase_ticks,
            "altitude": {"min": min(altitudes), "max": max(altitudes)},
            "throttle": {
                "mean": sum(throttles) / len(throttles) if throttles else 0.0,
                "max": max(throttles) if throttles else 0.0,
            },
            "latest": self._samples[-1].to_dict(),
        }

    def clear(self) -> None:
        """Clear all recorded data."""
        self._samples.clear()
        self._phase_ticks.clear()

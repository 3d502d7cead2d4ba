"""Rapid-failure circuit breaker and watchdog supervision settings."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta

__all__ = [
    "CircuitBreaker",
    "WatchdogConfig",
    "default_watchdog_config",
]


class CircuitBreaker:
    """Trips when any single worker reaches ``threshold`` rapid failures in ``window``.

    A failure is rapid when the session lived strictly less than ``window``.
    Failures from different workers are never summed. Thread-safe.
    """

    def __init__(self, threshold: int, window: timedelta) -> None:
        self._threshold = threshold
        self._window = window
        self._failures: dict[str, list[datetime]] = {}
        self._tripped = False
        self._lock = threading.Lock()

    def record_failure(self, worker_name: str, session_start: datetime) -> bool:
        """Record a failure for a worker; return whether the breaker is tripped.

        Failures of sessions that lived at least ``window`` are ignored.
        """
        with self._lock:
            now = datetime.now(session_start.tzinfo)
            if now - session_start >= self._window:
                return self._tripped

            self._failures.setdefault(worker_name, []).append(now)

            cutoff = now - self._window
            self._failures = {
                name: recent
                for name, times in self._failures.items()
                if (recent := [t for t in times if t > cutoff])
            }

            if any(len(times) >= self._threshold for times in self._failures.values()):
                self._tripped = True
            return self._tripped

    def tripped(self) -> bool:
        """Whether the breaker is currently tripped."""
        with self._lock:
            return self._tripped

    def reset(self) -> None:
        """Clear the tripped state and all recorded failures."""
        with self._lock:
            self._tripped = False
            self._failures = {}


@dataclass
class WatchdogConfig:
    """Watchdog check interval and circuit-breaker settings."""

    interval: timedelta = field(default_factory=lambda: timedelta(seconds=30))
    cb_threshold: int = 3
    cb_window: timedelta = field(default_factory=lambda: timedelta(seconds=60))


def default_watchdog_config() -> WatchdogConfig:
    """The recommended watchdog configuration."""
    return WatchdogConfig(
        interval=timedelta(seconds=30),
        cb_threshold=3,
        cb_window=timedelta(seconds=60),
    )
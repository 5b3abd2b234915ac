"""Attempt stopwatch with pause support."""

import time
from datetime import timedelta
from enum import Enum
from typing import Callable


class ClockState(str, Enum):
    """Run state of the clock."""

    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"


class Clock:
    """Stopwatch that accumulates only running time.

    Paused and stopped intervals are never counted. Every transition is
    valid from every state, so callers never need to check first.
    """

    def __init__(self, time_source: Callable[[], float] = time.monotonic):
        """Initialize a stopped clock at zero.

        Args:
            time_source: Function returning the current time in seconds
        """
        self._time_source = time_source
        self._state = ClockState.STOPPED
        self._accumulated: float = 0.0
        self._run_started_at: float = 0.0

    @property
    def state(self) -> ClockState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state == ClockState.RUNNING

    def reset(self) -> None:
        """Zero the elapsed time without changing run state."""
        self._accumulated = 0.0
        if self._state == ClockState.RUNNING:
            self._run_started_at = self._time_source()

    def start(self) -> None:
        """Start or resume accumulating. No-op if already running."""
        if self._state == ClockState.RUNNING:
            return
        self._run_started_at = self._time_source()
        self._state = ClockState.RUNNING

    def toggle(self) -> None:
        """Pause a running clock, or start a paused/stopped one."""
        if self._state == ClockState.RUNNING:
            self._freeze()
            self._state = ClockState.PAUSED
        else:
            self.start()

    def stop(self) -> None:
        """Stop the clock, keeping elapsed time until the next reset."""
        if self._state == ClockState.RUNNING:
            self._freeze()
        self._state = ClockState.STOPPED

    def elapsed(self) -> timedelta:
        """Return accumulated running time."""
        return timedelta(seconds=self._elapsed_seconds())

    def elapsed_ms(self) -> int:
        """Return accumulated running time in whole milliseconds."""
        return int(self._elapsed_seconds() * 1000)

    def _elapsed_seconds(self) -> float:
        if self._state == ClockState.RUNNING:
            # Guard against a time source that steps backwards
            return self._accumulated + max(0.0, self._time_source() - self._run_started_at)
        return self._accumulated

    def _freeze(self) -> None:
        self._accumulated = self._elapsed_seconds()

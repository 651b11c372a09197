"""Status loop that fires phase expiry and emits one status line per second."""

from __future__ import annotations

import logging
import sys
import threading
import time
from typing import Optional, TextIO

from pomodoro import PomodoroState

DEFAULT_INTERVAL_SECONDS = 1.0


class StatusLoop:
    """Drives expiry of ``state`` and writes its rendered line to ``output``."""

    def __init__(
        self,
        state: PomodoroState,
        *,
        output: Optional[TextIO] = None,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        logger: Optional[logging.Logger] = None,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be greater than zero")

        self._state = state
        self._output = output if output is not None else sys.stdout
        self._interval_seconds = float(interval_seconds)
        self._logger = logger or logging.getLogger("status_loop")
        self._stop = threading.Event()
        self._next_emit_at: Optional[float] = None
        self._emitted = 0

    @property
    def emitted_lines(self) -> int:
        return self._emitted

    def stop(self) -> None:
        self._stop.set()

    def run(self) -> int:
        """Block until stopped; return a process exit code."""
        self._logger.debug("Status loop started (interval=%.2fs)", self._interval_seconds)
        try:
            while not self._stop.is_set():
                wait_seconds = self.step()
                if self._stop.wait(wait_seconds):
                    break
        except BrokenPipeError:
            self._logger.error("Status output closed; stopping status loop.")
            return 1
        self._logger.debug("Status loop stopped after %d lines", self._emitted)
        return 0

    def step(self) -> float:
        """Apply due expiry, emit when the tick is due, return seconds to sleep."""
        expired = self._state.poll()
        if expired is not None:
            self._logger.debug(
                "Expiry applied: phase=%s remaining=%ss",
                expired.phase,
                expired.remaining_seconds,
            )

        now = time.monotonic()
        if self._next_emit_at is None or now >= self._next_emit_at:
            self._emit(self._state.render())
            if self._next_emit_at is None:
                self._next_emit_at = now
            self._next_emit_at += self._interval_seconds
            if self._next_emit_at <= now:
                # Fell behind (suspend, slow output); realign instead of bursting.
                self._next_emit_at = now + self._interval_seconds

        wait_seconds = self._next_emit_at - now
        until_expiry = self._state.seconds_until_expiry()
        if until_expiry is not None:
            wait_seconds = min(wait_seconds, until_expiry)
        return max(0.0, wait_seconds)

    def _emit(self, line: str) -> None:
        self._output.write(line + "\n")
        self._output.flush()
        self._emitted += 1

"""Thread-safe in-memory work/rest cycle state."""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Literal, Optional

from .constants import (
    COMMAND_INCREMENTS,
    COMMAND_PAUSE,
    COMMAND_TOGGLE,
    DEFAULT_REST_MINUTES,
    DEFAULT_WORK_MINUTES,
    ICON_PAUSED,
    ICON_REST,
    ICON_WORK,
    PHASE_REST,
    PHASE_WORK,
    REASON_PAUSED,
    REASON_RESUMED,
    REASON_SHIFTED,
    REASON_TOGGLED,
    REASON_UNSUPPORTED_ACTION,
)

PomodoroPhase = Literal["work", "rest"]


@dataclass(frozen=True)
class PomodoroConfig:
    """Immutable period lengths fixed at process start."""
    work_seconds: int = DEFAULT_WORK_MINUTES * 60
    rest_seconds: int = DEFAULT_REST_MINUTES * 60

    def __post_init__(self) -> None:
        if self.work_seconds <= 0:
            raise ValueError("work_seconds must be greater than zero")
        if self.rest_seconds <= 0:
            raise ValueError("rest_seconds must be greater than zero")

    @classmethod
    def from_minutes(cls, work_minutes: int, rest_minutes: int) -> "PomodoroConfig":
        return cls(work_seconds=int(work_minutes) * 60, rest_seconds=int(rest_minutes) * 60)

    def duration_for(self, phase: PomodoroPhase) -> int:
        if phase == PHASE_WORK:
            return self.work_seconds
        return self.rest_seconds


@dataclass(frozen=True)
class PomodoroSnapshot:
    """Immutable view of the cycle exposed to the loop and the control server."""
    phase: PomodoroPhase
    paused: bool
    duration_seconds: int
    remaining_seconds: int
    paused_seconds: int = 0

    @property
    def icon(self) -> str:
        if self.paused:
            return ICON_PAUSED
        if self.phase == PHASE_WORK:
            return ICON_WORK
        return ICON_REST


@dataclass(frozen=True)
class PomodoroActionResult:
    """Result envelope returned after applying a control command."""
    action: str
    accepted: bool
    reason: str
    snapshot: PomodoroSnapshot


def format_status(snapshot: PomodoroSnapshot) -> str:
    """Format a snapshot as the `<icon> MM:SS` status line."""
    minutes, seconds = divmod(max(0, snapshot.remaining_seconds), 60)
    return f"{snapshot.icon} {minutes:02d}:{seconds:02d}"


def _round_seconds(value: float) -> int:
    return max(0, int(math.floor(value + 0.5)))


def _other_phase(phase: PomodoroPhase) -> PomodoroPhase:
    return PHASE_REST if phase == PHASE_WORK else PHASE_WORK


class PomodoroState:
    """Work/rest cycle with pause and clock nudges, guarded by a single lock.

    While running, ``period_end`` (a monotonic timestamp) decides expiry.
    While paused, the remaining time captured at pause is frozen and
    ``period_end`` is rebuilt from it on resume, so paused time never counts
    against the phase.
    """

    def __init__(
        self,
        config: Optional[PomodoroConfig] = None,
        *,
        phase: PomodoroPhase = PHASE_WORK,
        paused: bool = False,
        logger: Optional[logging.Logger] = None,
    ):
        if phase not in (PHASE_WORK, PHASE_REST):
            raise ValueError(f"phase must be '{PHASE_WORK}' or '{PHASE_REST}'")

        self._config = config or PomodoroConfig()
        self._logger = logger or logging.getLogger("pomodoro")
        self._lock = threading.Lock()

        now = time.monotonic()
        duration = self._config.duration_for(phase)
        self._phase: PomodoroPhase = phase
        self._paused = bool(paused)
        self._period_end: float = now + duration
        self._frozen_remaining: float = float(duration)
        self._paused_at: Optional[float] = now if self._paused else None

    def toggle(self) -> PomodoroSnapshot:
        with self._lock:
            now = time.monotonic()
            self._toggle_locked(now)
            self._logger.info("Phase switched manually: phase=%s", self._phase)
            return self._snapshot_locked(now)

    def pause(self) -> PomodoroSnapshot:
        with self._lock:
            now = time.monotonic()
            if self._paused:
                paused_for = now - (self._paused_at or now)
                self._period_end = now + self._frozen_remaining
                self._paused = False
                self._paused_at = None
                self._logger.info(
                    "Pomodoro resumed: phase=%s remaining=%ss paused_for=%ss",
                    self._phase,
                    _round_seconds(self._frozen_remaining),
                    _round_seconds(paused_for),
                )
            else:
                self._frozen_remaining = self._period_end - now
                self._paused = True
                self._paused_at = now
                self._logger.info(
                    "Pomodoro paused: phase=%s remaining=%ss",
                    self._phase,
                    _round_seconds(self._frozen_remaining),
                )
            return self._snapshot_locked(now)

    def inc(self, delta_seconds: float) -> PomodoroSnapshot:
        with self._lock:
            now = time.monotonic()
            if self._paused:
                self._frozen_remaining += delta_seconds
            else:
                self._period_end += delta_seconds
            self._logger.debug("Period shifted by %+ds", delta_seconds)
            return self._snapshot_locked(now)

    def render(self) -> str:
        with self._lock:
            return format_status(self._snapshot_locked(time.monotonic()))

    def snapshot(self) -> PomodoroSnapshot:
        with self._lock:
            return self._snapshot_locked(time.monotonic())

    def poll(self) -> Optional[PomodoroSnapshot]:
        """Apply phase expiry when due and return the new snapshot, else None."""
        with self._lock:
            if self._paused:
                return None

            now = time.monotonic()
            if now < self._period_end:
                return None

            previous = self._phase
            self._toggle_locked(now)
            self._logger.info("Phase expired: %s -> %s", previous, self._phase)
            return self._snapshot_locked(now)

    def seconds_until_expiry(self) -> Optional[float]:
        with self._lock:
            if self._paused:
                return None
            return max(0.0, self._period_end - time.monotonic())

    def apply(self, action: str) -> PomodoroActionResult:
        """Run one control command as a single mutation."""
        if action == COMMAND_PAUSE:
            snapshot = self.pause()
            reason = REASON_PAUSED if snapshot.paused else REASON_RESUMED
            return PomodoroActionResult(action, True, reason, snapshot)

        if action == COMMAND_TOGGLE:
            return PomodoroActionResult(action, True, REASON_TOGGLED, self.toggle())

        delta = COMMAND_INCREMENTS.get(action)
        if delta is not None:
            return PomodoroActionResult(action, True, REASON_SHIFTED, self.inc(delta))

        return PomodoroActionResult(
            action,
            False,
            REASON_UNSUPPORTED_ACTION,
            self.snapshot(),
        )

    def _toggle_locked(self, now: float) -> None:
        self._phase = _other_phase(self._phase)
        duration = self._config.duration_for(self._phase)
        if self._paused:
            self._frozen_remaining = float(duration)
        else:
            self._period_end = now + duration

    def _snapshot_locked(self, now: float) -> PomodoroSnapshot:
        if self._paused:
            remaining = self._frozen_remaining
            paused_seconds = _round_seconds(now - (self._paused_at or now))
        else:
            remaining = self._period_end - now
            paused_seconds = 0
        return PomodoroSnapshot(
            phase=self._phase,
            paused=self._paused,
            duration_seconds=self._config.duration_for(self._phase),
            remaining_seconds=_round_seconds(remaining),
            paused_seconds=paused_seconds,
        )

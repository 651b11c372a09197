from .service import (
    PomodoroActionResult,
    PomodoroConfig,
    PomodoroPhase,
    PomodoroSnapshot,
    PomodoroState,
    format_status,
)

__all__ = [
    "PomodoroActionResult",
    "PomodoroConfig",
    "PomodoroPhase",
    "PomodoroSnapshot",
    "PomodoroState",
    "format_status",
]

"""Phase, icon, command, and reason constants used by the pomodoro state."""

from __future__ import annotations

DEFAULT_WORK_MINUTES = 25
DEFAULT_REST_MINUTES = 5

PHASE_WORK = "work"
PHASE_REST = "rest"

ICON_WORK = "\U0001F345"
ICON_REST = "\U0001F3D6"
ICON_PAUSED = "\u23F8"

COMMAND_PAUSE = "pause"
COMMAND_TOGGLE = "toggle"
COMMAND_INC = "inc"
COMMAND_DEC = "dec"

INCREMENT_SECONDS = 5

COMMAND_INCREMENTS: dict[str, int] = {
    COMMAND_INC: +INCREMENT_SECONDS,
    COMMAND_DEC: -INCREMENT_SECONDS,
}

SUPPORTED_COMMANDS: frozenset[str] = frozenset(
    {COMMAND_PAUSE, COMMAND_TOGGLE, COMMAND_INC, COMMAND_DEC}
)

REASON_PAUSED = "paused"
REASON_RESUMED = "resumed"
REASON_TOGGLED = "toggled"
REASON_SHIFTED = "shifted"
REASON_UNSUPPORTED_ACTION = "unsupported_action"

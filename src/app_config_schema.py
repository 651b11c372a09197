"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass

from control.config import DEFAULT_READ_TIMEOUT_SECONDS, DEFAULT_SOCKET_PATH
from pomodoro.constants import DEFAULT_REST_MINUTES, DEFAULT_WORK_MINUTES

DEFAULT_CONFIG_FILE = "config.toml"
DEFAULT_LOG_LEVEL = "INFO"


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class PomodoroSettings:
    """Work/rest cycle settings from `[pomodoro]`."""
    work_minutes: int = DEFAULT_WORK_MINUTES
    rest_minutes: int = DEFAULT_REST_MINUTES
    start_paused: bool = False


@dataclass(frozen=True)
class ControlSettings:
    """Control socket settings from `[control]`."""
    socket_path: str = DEFAULT_SOCKET_PATH
    read_timeout_seconds: float = DEFAULT_READ_TIMEOUT_SECONDS


@dataclass(frozen=True)
class LoggingSettings:
    level: str = DEFAULT_LOG_LEVEL


@dataclass(frozen=True)
class AppConfig:
    pomodoro: PomodoroSettings
    control: ControlSettings
    logging: LoggingSettings
    source_file: str = ""

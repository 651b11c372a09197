"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from app_config_schema import (
    DEFAULT_LOG_LEVEL,
    AppConfig,
    AppConfigurationError,
    ControlSettings,
    LoggingSettings,
    PomodoroSettings,
)
from control.config import DEFAULT_READ_TIMEOUT_SECONDS, DEFAULT_SOCKET_PATH
from pomodoro.constants import DEFAULT_REST_MINUTES, DEFAULT_WORK_MINUTES

_ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source_file: str,
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    return AppConfig(
        pomodoro=_parse_pomodoro_settings(_section(raw, "pomodoro")),
        control=_parse_control_settings(_section(raw, "control"), base_dir=base_dir),
        logging=_parse_logging_settings(_section(raw, "logging")),
        source_file=source_file,
    )


def _parse_pomodoro_settings(section: Mapping[str, Any]) -> PomodoroSettings:
    return PomodoroSettings(
        work_minutes=_as_positive_int(
            section.get("work_minutes", DEFAULT_WORK_MINUTES),
            "pomodoro.work_minutes",
        ),
        rest_minutes=_as_positive_int(
            section.get("rest_minutes", DEFAULT_REST_MINUTES),
            "pomodoro.rest_minutes",
        ),
        start_paused=_as_bool(
            section.get("start_paused", False),
            "pomodoro.start_paused",
        ),
    )


def _parse_control_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> ControlSettings:
    socket_path = _as_str(
        section.get("socket_path", DEFAULT_SOCKET_PATH),
        "control.socket_path",
    )
    read_timeout = _as_float(
        section.get("read_timeout_seconds", DEFAULT_READ_TIMEOUT_SECONDS),
        "control.read_timeout_seconds",
    )
    if read_timeout <= 0:
        raise AppConfigurationError("control.read_timeout_seconds must be positive.")
    return ControlSettings(
        socket_path=_resolve_path(base_dir, socket_path) or DEFAULT_SOCKET_PATH,
        read_timeout_seconds=read_timeout,
    )


def _parse_logging_settings(section: Mapping[str, Any]) -> LoggingSettings:
    level = _as_str(section.get("level", DEFAULT_LOG_LEVEL), "logging.level").upper()
    if level not in _ALLOWED_LOG_LEVELS:
        allowed = ", ".join(sorted(_ALLOWED_LOG_LEVELS))
        raise AppConfigurationError(f"logging.level must be one of: {allowed}")
    return LoggingSettings(level=level)


def log_level_value(settings: LoggingSettings) -> int:
    return logging.getLevelName(settings.level)


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise AppConfigurationError(f"[{name}] must be a table.")
    return raw


def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise AppConfigurationError(f"{field} must be a string.")


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise AppConfigurationError(f"{field} must be a boolean.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip(), 10)
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be an integer.") from error
    raise AppConfigurationError(f"{field} must be an integer.")


def _as_positive_int(value: Any, field: str) -> int:
    number = _as_int(value, field)
    if number <= 0:
        raise AppConfigurationError(f"{field} must be a positive integer.")
    return number


def _as_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be a float.")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be a float.") from error
    raise AppConfigurationError(f"{field} must be a float.")


def _resolve_path(base_dir: Path, raw: str) -> str:
    if not raw:
        return ""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)

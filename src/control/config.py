"""Configuration model for the control socket server."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_SOCKET_PATH = "/tmp/polybar-pomo"
DEFAULT_READ_TIMEOUT_SECONDS = 5.0
READ_BUFFER_BYTES = 128


class ControlServerError(Exception):
    """Raised when the control socket cannot be prepared or bound."""


class ControlConfigurationError(ControlServerError):
    """Raised when control server configuration is invalid."""


@dataclass(frozen=True)
class ControlServerConfig:
    """Validated control server configuration derived from app settings."""
    socket_path: str = DEFAULT_SOCKET_PATH
    read_timeout_seconds: float = DEFAULT_READ_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        if not self.socket_path.strip():
            raise ControlConfigurationError("control.socket_path cannot be empty")

        if self.read_timeout_seconds <= 0:
            raise ControlConfigurationError(
                "control.read_timeout_seconds must be greater than zero, "
                f"got: {self.read_timeout_seconds}"
            )

    @classmethod
    def from_settings(cls, settings) -> "ControlServerConfig":
        socket_path = settings.socket_path.strip() if settings.socket_path else ""
        return cls(
            socket_path=socket_path or DEFAULT_SOCKET_PATH,
            read_timeout_seconds=float(settings.read_timeout_seconds),
        )

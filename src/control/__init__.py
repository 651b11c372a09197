"""Control socket module translating short text commands into timer mutations."""

from .commands import parse_command
from .config import (
    DEFAULT_SOCKET_PATH,
    ControlConfigurationError,
    ControlServerConfig,
    ControlServerError,
)
from .service import ControlServer, remove_stale_endpoint

__all__ = [
    "DEFAULT_SOCKET_PATH",
    "ControlConfigurationError",
    "ControlServer",
    "ControlServerConfig",
    "ControlServerError",
    "parse_command",
    "remove_stale_endpoint",
]

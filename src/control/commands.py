"""Decoding of raw control socket payloads into pomodoro commands."""

from __future__ import annotations

from typing import Optional

from pomodoro.constants import SUPPORTED_COMMANDS


def normalize_command(payload: bytes) -> str:
    return payload.decode("utf-8", errors="replace").strip().lower()


def parse_command(payload: bytes) -> Optional[str]:
    """Return the command carried by ``payload`` or None when unrecognized."""
    command = normalize_command(payload)
    if command in SUPPORTED_COMMANDS:
        return command
    return None

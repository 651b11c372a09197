from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import threading
from typing import Optional, Protocol

from pomodoro import PomodoroActionResult

from .commands import normalize_command, parse_command
from .config import READ_BUFFER_BYTES, ControlServerConfig, ControlServerError


class CommandTarget(Protocol):
    def apply(self, action: str) -> PomodoroActionResult:
        ...


def remove_stale_endpoint(path: str) -> bool:
    """Remove a leftover socket file; return True when something was removed."""
    try:
        os.unlink(path)
    except FileNotFoundError:
        return False
    except OSError as error:
        raise ControlServerError(
            f"Cannot remove stale control socket {path}: {error}"
        ) from error
    return True


class ControlServer:
    """Threaded asyncio Unix socket server applying one command per connection."""

    def __init__(
        self,
        target: CommandTarget,
        config: Optional[ControlServerConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._target = target
        self._config = config or ControlServerConfig()
        self._logger = logger or logging.getLogger("control_server")
        self._thread: Optional[threading.Thread] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._stop_async: Optional[asyncio.Event] = None
        self._started = threading.Event()
        self._startup_error: Optional[Exception] = None
        self._connected_clients: set[asyncio.StreamWriter] = set()
        self._client_tasks: set[asyncio.Task] = set()

    @property
    def socket_path(self) -> str:
        return self._config.socket_path

    @property
    def is_running(self) -> bool:
        return (
            self._thread is not None
            and self._thread.is_alive()
            and self._startup_error is None
        )

    def start(self, timeout_seconds: float = 5.0) -> None:
        if self.is_running:
            self._logger.warning("Control server is already running")
            return

        if remove_stale_endpoint(self._config.socket_path):
            self._logger.info(
                "Removed stale control socket: %s",
                self._config.socket_path,
            )

        self._startup_error = None
        self._started.clear()
        # Created before the thread runs so stop() can always signal it.
        self._loop = asyncio.new_event_loop()
        self._stop_async = asyncio.Event()
        self._thread = threading.Thread(
            target=self._run_loop,
            daemon=True,
            name="control-server",
        )
        self._thread.start()

        if not self._started.wait(timeout_seconds):
            self.stop()
            raise ControlServerError(
                f"Control server did not start within {timeout_seconds:.1f}s"
            )

        if self._startup_error is not None:
            raise ControlServerError(
                f"Control server startup failed: {self._startup_error}"
            )

    def stop(self, timeout_seconds: float = 5.0) -> None:
        if self._thread is None:
            return

        if self._loop and self._stop_async:
            # Loop may already be closed after a serving failure.
            with contextlib.suppress(RuntimeError):
                self._loop.call_soon_threadsafe(self._stop_async.set)

        self._thread.join(timeout=timeout_seconds)
        if self._thread.is_alive():
            self._logger.error(
                "Control server thread did not stop within %.1fs",
                timeout_seconds,
            )

        self._thread = None
        self._loop = None
        self._stop_async = None

        try:
            remove_stale_endpoint(self._config.socket_path)
        except ControlServerError as error:
            self._logger.warning("%s", error)

    def _run_loop(self) -> None:
        loop = self._loop
        stop_event = self._stop_async
        asyncio.set_event_loop(loop)

        try:
            loop.run_until_complete(self._serve(stop_event))
        except Exception as error:
            if self._started.is_set():
                self._logger.error(
                    "Control server stopped unexpectedly; commands are disabled: %s",
                    error,
                    exc_info=True,
                )
            else:
                self._startup_error = error
                self._logger.error("Control server failed: %s", error)
            self._started.set()
        finally:
            pending = asyncio.all_tasks(loop)
            for task in pending:
                task.cancel()
            with contextlib.suppress(Exception):
                loop.run_until_complete(
                    asyncio.gather(*pending, return_exceptions=True)
                )
            loop.close()

    async def _serve(self, stop_event: asyncio.Event) -> None:
        server = await asyncio.start_unix_server(
            self._handle_client,
            path=self._config.socket_path,
        )
        async with server:
            self._logger.info(
                "Control server listening on %s",
                self._config.socket_path,
            )
            self._started.set()
            await stop_event.wait()
            self._close_clients()
            if self._client_tasks:
                await asyncio.gather(*tuple(self._client_tasks), return_exceptions=True)

    async def _handle_client(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        task = asyncio.current_task()
        if task is not None:
            self._client_tasks.add(task)
            task.add_done_callback(self._client_tasks.discard)
        self._connected_clients.add(writer)
        try:
            payload = await asyncio.wait_for(
                reader.read(READ_BUFFER_BYTES),
                timeout=self._config.read_timeout_seconds,
            )
        except asyncio.TimeoutError:
            self._logger.debug(
                "Control client sent nothing within %.1fs",
                self._config.read_timeout_seconds,
            )
            return
        except OSError as error:
            self._logger.warning("Error reading control command: %s", error)
            return
        finally:
            self._connected_clients.discard(writer)
            writer.close()
            with contextlib.suppress(OSError):
                await writer.wait_closed()

        command = parse_command(payload)
        if command is None:
            self._logger.debug(
                "Ignoring unknown control command: %r",
                normalize_command(payload),
            )
            return

        result = self._target.apply(command)
        self._logger.debug(
            "Control command applied: action=%s reason=%s remaining=%ss",
            result.action,
            result.reason,
            result.snapshot.remaining_seconds,
        )

    def _close_clients(self) -> None:
        # Handlers blocked on their read see EOF once the transport closes.
        for writer in tuple(self._connected_clients):
            writer.close()
        self._connected_clients.clear()

import argparse
import logging
import signal
import sys
from dataclasses import replace
from typing import Optional, Sequence

from app_config import AppConfig, AppConfigurationError, load_app_config
from app_config_parser import log_level_value
from control import ControlServer, ControlServerConfig, ControlServerError
from pomodoro import PomodoroConfig, PomodoroState
from runtime import StatusLoop


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application.

    Log records go to stderr; stdout carries only the status lines.
    """
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("polybar_pomo")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="polybar-pomo",
        description="Pomodoro timer for status bars, controlled over a Unix socket",
    )
    parser.add_argument("-w", "--work", type=_positive_int, default=None, help="Work period duration in minutes (default: 25)")
    parser.add_argument("-r", "--rest", type=_positive_int, default=None, help="Rest period duration in minutes (default: 5)")
    parser.add_argument("--socket", default=None, help="Control socket path (default: /tmp/polybar-pomo)")
    parser.add_argument("--config", default=None, help="Config path (default: config.toml or $APP_CONFIG_FILE)")
    parser.add_argument("--paused", action="store_true", default=None, help="Start with the timer paused")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser


def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as error:
        raise argparse.ArgumentTypeError(f"expected an integer, got {raw!r}") from error
    if value <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return value


def apply_cli_overrides(app_config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Return ``app_config`` with values given on the command line taking precedence."""
    pomodoro = app_config.pomodoro
    if args.work is not None:
        pomodoro = replace(pomodoro, work_minutes=args.work)
    if args.rest is not None:
        pomodoro = replace(pomodoro, rest_minutes=args.rest)
    if args.paused:
        pomodoro = replace(pomodoro, start_paused=True)

    control = app_config.control
    if args.socket:
        control = replace(control, socket_path=args.socket)

    logging_settings = app_config.logging
    if args.debug:
        logging_settings = replace(logging_settings, level="DEBUG")

    return replace(
        app_config,
        pomodoro=pomodoro,
        control=control,
        logging=logging_settings,
    )


def setup_signal_handlers(status_loop: StatusLoop, logger: logging.Logger) -> None:
    """Set up graceful shutdown on SIGTERM and SIGINT."""

    def signal_handler(signum: int, frame) -> None:
        del frame
        logger.info("Signal %s received, stopping.", signal.Signals(signum).name)
        status_loop.stop()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the status loop and the control server until interrupted."""
    args = build_arg_parser().parse_args(argv)
    logger = setup_logging(level=logging.DEBUG if args.debug else logging.INFO)

    try:
        app_config = apply_cli_overrides(load_app_config(args.config), args)
        logging.getLogger().setLevel(log_level_value(app_config.logging))
        if app_config.source_file:
            logger.info("Loaded runtime config: %s", app_config.source_file)
        pomodoro_config = PomodoroConfig.from_minutes(
            app_config.pomodoro.work_minutes,
            app_config.pomodoro.rest_minutes,
        )
        control_config = ControlServerConfig.from_settings(app_config.control)
    except (AppConfigurationError, ControlServerError, ValueError) as error:
        logger.error("Configuration error: %s", error)
        return 1

    state = PomodoroState(
        pomodoro_config,
        paused=app_config.pomodoro.start_paused,
        logger=logging.getLogger("pomodoro"),
    )
    control_server = ControlServer(
        state,
        config=control_config,
        logger=logging.getLogger("control_server"),
    )

    try:
        control_server.start(timeout_seconds=5.0)
    except ControlServerError as error:
        logger.error("%s", error)
        return 1

    logger.info(
        "Pomodoro ready: work=%sm rest=%sm paused=%s socket=%s",
        app_config.pomodoro.work_minutes,
        app_config.pomodoro.rest_minutes,
        app_config.pomodoro.start_paused,
        control_server.socket_path,
    )

    status_loop = StatusLoop(state, logger=logging.getLogger("status_loop"))
    setup_signal_handlers(status_loop, logger)

    try:
        return status_loop.run()
    finally:
        control_server.stop()


if __name__ == "__main__":
    raise SystemExit(main())

import logging
import os
import shutil
import signal
import socket
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

import main
from app_config import default_app_config


class CliOverrideTests(unittest.TestCase):
    def test_defaults_leave_config_untouched(self) -> None:
        args = main.build_arg_parser().parse_args([])

        app_config = main.apply_cli_overrides(default_app_config(), args)

        self.assertEqual(default_app_config(), app_config)

    def test_flags_override_config_values(self) -> None:
        args = main.build_arg_parser().parse_args(
            ["-w", "1", "-r", "2", "--socket", "/tmp/other-pomo", "--paused", "--debug"]
        )

        app_config = main.apply_cli_overrides(default_app_config(), args)

        self.assertEqual(1, app_config.pomodoro.work_minutes)
        self.assertEqual(2, app_config.pomodoro.rest_minutes)
        self.assertTrue(app_config.pomodoro.start_paused)
        self.assertEqual("/tmp/other-pomo", app_config.control.socket_path)
        self.assertEqual("DEBUG", app_config.logging.level)

    def test_rejects_non_positive_minutes(self) -> None:
        parser = main.build_arg_parser()
        with patch("sys.stderr"):
            with self.assertRaises(SystemExit):
                parser.parse_args(["-w", "0"])
            with self.assertRaises(SystemExit):
                parser.parse_args(["-r", "soon"])


class MainStartupTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.mkdtemp(prefix="pomo")
        self.addCleanup(shutil.rmtree, self.temp_dir, True)

    def test_missing_explicit_config_exits_with_error(self) -> None:
        missing = os.path.join(self.temp_dir, "absent.toml")

        self.assertEqual(1, main.main(["--config", missing]))

    def test_unbindable_socket_exits_without_running_loop(self) -> None:
        socket_path = os.path.join(self.temp_dir, "missing-dir", "ctl.sock")

        with patch.object(main.StatusLoop, "run") as run:
            exit_code = main.main(["--socket", socket_path])

        self.assertEqual(1, exit_code)
        run.assert_not_called()

    def test_runs_loop_and_removes_socket_on_shutdown(self) -> None:
        socket_path = os.path.join(self.temp_dir, "ctl.sock")
        seen: dict[str, object] = {}

        def fake_run(loop) -> int:
            with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as client:
                client.connect(socket_path)
                client.sendall(b"pause")
            seen["socket_existed"] = Path(socket_path).exists()
            return 0

        with patch.object(main.StatusLoop, "run", autospec=True, side_effect=fake_run):
            with patch.object(main, "setup_signal_handlers"):
                exit_code = main.main(["--socket", socket_path, "-w", "1", "-r", "1"])

        self.assertEqual(0, exit_code)
        self.assertTrue(seen["socket_existed"])
        self.assertFalse(Path(socket_path).exists())

class SignalHandlerTests(unittest.TestCase):
    def test_sigint_and_sigterm_stop_the_status_loop(self) -> None:
        status_loop = MagicMock()
        installed = {}

        def fake_signal(signum, handler):
            installed[signum] = handler

        with patch("main.signal.signal", side_effect=fake_signal):
            main.setup_signal_handlers(status_loop, logging.getLogger("polybar_pomo"))

        self.assertEqual({signal.SIGINT, signal.SIGTERM}, set(installed))
        installed[signal.SIGINT](signal.SIGINT, None)
        status_loop.stop.assert_called_once_with()

        installed[signal.SIGTERM](signal.SIGTERM, None)
        self.assertEqual(2, status_loop.stop.call_count)


if __name__ == "__main__":
    unittest.main()

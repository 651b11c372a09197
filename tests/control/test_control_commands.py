import unittest

from control.commands import normalize_command, parse_command


class ControlCommandParsingTests(unittest.TestCase):
    def test_known_commands_are_case_insensitive_and_trimmed(self) -> None:
        self.assertEqual("pause", parse_command(b"pause"))
        self.assertEqual("toggle", parse_command(b"  TOGGLE\n"))
        self.assertEqual("inc", parse_command(b"Inc\r\n"))
        self.assertEqual("dec", parse_command(b"\tdec "))

    def test_unknown_or_malformed_payloads_are_ignored(self) -> None:
        self.assertIsNone(parse_command(b"foobar"))
        self.assertIsNone(parse_command(b""))
        self.assertIsNone(parse_command(b"pause toggle"))
        self.assertIsNone(parse_command(b"\xff\xfepause"))

    def test_normalize_replaces_invalid_utf8(self) -> None:
        self.assertEqual("\ufffdx", normalize_command(b"\xffx"))


if __name__ == "__main__":
    unittest.main()

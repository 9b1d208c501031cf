"""
Script: tests/test_cli.py
What: Tests for the shared `ci_publish` command dispatcher.
Doing: Checks command-map entries, parser behavior, and command-run paths.
Why: Makes sure workflow command names still point to the right modules.
Goal: Protect the main command entry surface used by workflow steps.
"""

from __future__ import annotations

import io
import unittest
from contextlib import redirect_stderr
from unittest import mock

from ci_publish.cli import build_parser, command_map, main, run_command
from ci_publish.common import CiToolError


class CliTests(unittest.TestCase):
    def test_command_map_contains_expected_entries(self) -> None:
        commands = command_map()
        self.assertEqual(set(commands.keys()), {"compute-image-metadata", "publish-image"})

    def test_parser_passes_command_flags_through(self) -> None:
        parser = build_parser({"demo-command": lambda _args: None})
        args = parser.parse_args(["demo-command", "-u", "user", "-b", "main"])
        self.assertEqual(args.command, "demo-command")
        self.assertEqual(args.args, ["-u", "user", "-b", "main"])

    def test_parser_rejects_unknown_command_with_status_1(self) -> None:
        parser = build_parser({"demo-command": lambda _args: None})
        with redirect_stderr(io.StringIO()) as stderr:
            with self.assertRaises(SystemExit) as ctx:
                parser.parse_args(["other-command"])
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("usage:", stderr.getvalue())

    def test_run_command_calls_target_function(self) -> None:
        received: list[list[str]] = []

        run_command("demo", {"demo": received.append}, ["-t", "abc123"])
        self.assertEqual(received, [["-t", "abc123"]])

    def test_main_turns_tool_error_into_exit_1(self) -> None:
        # Commands report known failures as CiToolError.
        def _fail(_args: list[str]) -> None:
            raise CiToolError("Missing required environment variable: GITHUB_SHA")

        with mock.patch("ci_publish.cli.command_map", return_value={"fail": _fail}):
            with redirect_stderr(io.StringIO()) as stderr:
                with self.assertRaises(SystemExit) as ctx:
                    main(["fail"])
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("GITHUB_SHA", stderr.getvalue())


if __name__ == "__main__":
    unittest.main()

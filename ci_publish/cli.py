from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Mapping

from ci_publish.common import CiToolError, StrictArgumentParser

Command = Callable[[list[str]], None]


def command_map() -> dict[str, Command]:
    """
    Map CLI command names to Python entry functions.

    Each value is a `main(argv)` function from one workflow helper module.
    """
    from ci_publish.compute_image_metadata import main as compute_image_metadata
    from ci_publish.publish_image import main as publish_image

    return {
        "compute-image-metadata": compute_image_metadata,
        "publish-image": publish_image,
    }


def build_parser(commands: Mapping[str, Command]) -> argparse.ArgumentParser:
    """Build argument parser with one positional command choice."""
    parser = StrictArgumentParser(
        prog="python3 -m ci_publish.cli",
        description="Run one workflow helper command.",
    )
    parser.add_argument("command", choices=sorted(commands.keys()))
    # Everything after the command name belongs to that command's own parser.
    parser.add_argument("args", nargs=argparse.REMAINDER)
    return parser


def run_command(command: str, commands: Mapping[str, Command], args: list[str]) -> None:
    """
    Run one registered command.

    `commands` is passed in to keep this function easy to test.
    """
    commands[command](args)


def main(argv: list[str] | None = None) -> None:
    # Build command registry once so parser and dispatcher use the same keys.
    commands = command_map()
    parser = build_parser(commands)
    parsed = parser.parse_args(argv)

    try:
        run_command(parsed.command, commands, parsed.args)
    except CiToolError as exc:
        # Keep failures short and readable in workflow logs.
        print(str(exc), file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()

"""
Script: ci_publish/common.py
What: Shared helper functions used by all `ci_publish` modules.
Doing: Wraps env reads, command execution, docker registry calls, flag parsing, and output writes.
Why: Avoids duplicated helper code.
Goal: Keep behavior consistent across all helper modules.
"""

from __future__ import annotations

import argparse
import os
import subprocess
import sys
from typing import Mapping, NoReturn, Sequence


class CiToolError(RuntimeError):
    """Raised when a workflow helper script hits a known error condition."""


def require_env(name: str) -> str:
    """Return a required environment variable or raise a clear error."""
    value = os.environ.get(name)
    if value is None or value == "":
        raise CiToolError(f"Missing required environment variable: {name}")
    return value


def optional_env(name: str, default: str = "") -> str:
    """Return an environment variable with a fallback default."""
    return os.environ.get(name, default)


def first_env(names: Sequence[str]) -> str:
    """Return the first non-empty value among `names`, or raise if all are empty."""
    for name in names:
        value = os.environ.get(name)
        if value:
            return value
    raise CiToolError(f"Missing required environment variable: one of {', '.join(names)}")


def run_cmd(
    args: Sequence[str],
    *,
    capture_output: bool = True,
    cwd: str | None = None,
    input_text: str | None = None,
) -> str:
    """
    Run a command and return stdout, raising a readable error on failure.

    `input_text` is written to the command's stdin. It is never included in
    error messages, so it is the right channel for passwords.
    """
    try:
        result = subprocess.run(
            list(args),
            check=True,
            text=True,
            capture_output=capture_output,
            cwd=cwd,
            input=input_text,
        )
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or "").strip()
        stdout = (exc.stdout or "").strip()
        details = stderr or stdout or f"exit status {exc.returncode}"
        raise CiToolError(f"Command failed: {' '.join(args)}\n{details}") from exc
    except FileNotFoundError as exc:
        raise CiToolError(f"Command not found: {args[0]}") from exc

    if not capture_output:
        return ""
    return result.stdout


def write_github_outputs(values: Mapping[str, str]) -> None:
    """
    Write step outputs for GitHub Actions.

    GitHub provides a file path in `GITHUB_OUTPUT`; writing `name=value` lines
    there makes that value available to later steps in the same job.
    """
    output_file = require_env("GITHUB_OUTPUT")
    with open(output_file, "a", encoding="utf-8") as handle:
        for key, value in values.items():
            handle.write(f"{key}={value}\n")


class StrictArgumentParser(argparse.ArgumentParser):
    """
    Argument parser that exits with status 1 on a malformed invocation.

    argparse exits with 2 by default; workflow steps expect 1 for a missing
    or unknown flag. Usage still goes to stderr.
    """

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def docker_images() -> None:
    """Print local images so the CI log shows what the build step loaded."""
    run_cmd(["docker", "images"], capture_output=False)


def docker_login(user: str, password: str, *, registry: str = "") -> None:
    """
    Authenticate the docker client against a registry.

    The password goes through `--password-stdin` so it is not visible in the
    process list or in a failure message. An empty `registry` means Docker Hub.
    """
    command = ["docker", "login", "--username", user, "--password-stdin"]
    if registry:
        command.append(registry)
    run_cmd(command, input_text=password)


def docker_push(image_ref: str) -> None:
    """Push one local image reference to its registry."""
    run_cmd(["docker", "push", image_ref], capture_output=False)


def docker_tag(source_ref: str, target_ref: str) -> None:
    """Point `target_ref` at the same local image as `source_ref`."""
    run_cmd(["docker", "tag", source_ref, target_ref])

"""Run the workspace's pre-commit checks, stopping at the first failure."""

from __future__ import annotations

import os
import subprocess
import sys
from typing import Iterable, Mapping, Optional, Sequence, Union

EnvSpec = Union[Mapping[str, str], Iterable[tuple[str, str]], None]

CHECKS: tuple[tuple[str, tuple[str, ...], tuple[tuple[str, str], ...]], ...] = (
    ("cargo", ("check",), ()),
    ("cargo", ("test", "--all"), ()),
    ("cargo", ("fmt", "--check", "--all"), ()),
    (
        "cargo",
        ("doc", "--workspace", "--exclude", "llm-cli"),
        (("RUSTDOCFLAGS", "-Dwarnings"),),
    ),
    ("cargo", ("clippy", "--workspace", "--", "-Dclippy::all"), ()),
)


class CommandFailedError(Exception):
    """A checked command exited unsuccessfully."""

    def __init__(self, cmd: str, args: Sequence[str], returncode: int) -> None:
        self.cmd = cmd
        self.args_list = list(args)
        self.returncode = returncode
        super().__init__(
            f"Failed to run command: {cmd} {_format_args(args)} (exit status {returncode})"
        )


def _format_args(args: Sequence[str]) -> str:
    quoted = ", ".join('"' + a.replace("\\", "\\\\").replace('"', '\\"') + '"' for a in args)
    return f"[{quoted}]"


def run_command(cmd: str, args: Sequence[str], env: EnvSpec = None) -> None:
    """Run ``cmd`` with ``args`` and extra environment variables; raise on failure."""
    args = list(args)
    print(f"=== Running command: {cmd} {_format_args(args)}", flush=True)
    environment = dict(os.environ)
    if env is not None:
        environment.update(dict(env))
    completed = subprocess.run([cmd, *args], env=environment)
    if completed.returncode != 0:
        raise CommandFailedError(cmd, args, completed.returncode)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run every check in order; return 1 if one fails, 0 otherwise."""
    for cmd, args, env in CHECKS:
        try:
            run_command(cmd, args, env)
        except CommandFailedError as err:
            print(err, file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
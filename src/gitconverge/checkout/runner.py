"""Command execution with a fixed search path and optional effective user."""

from __future__ import annotations

import logging
import os
import pwd
import subprocess
from dataclasses import dataclass
from pathlib import Path

from gitconverge.errors import CommandSpawnError

logger = logging.getLogger(__name__)

# Executables are only looked up in the system binary directories.
SAFE_PATH = "/usr/local/sbin:/usr/local/bin:/usr/sbin:/usr/bin:/sbin:/bin"


@dataclass
class CommandResult:
    command: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Combined stdout/stderr for diagnostics."""
        return "\n".join(part.strip() for part in (self.stdout, self.stderr) if part.strip())

    def describe(self) -> str:
        return " ".join(self.command)


def _child_env(user: str | None) -> dict[str, str]:
    if user is None:
        home = os.environ.get("HOME") or pwd.getpwuid(os.getuid()).pw_dir
    else:
        try:
            home = pwd.getpwnam(user).pw_dir
        except KeyError:
            raise CommandSpawnError(f"Unknown user: {user}") from None
    return {
        "PATH": SAFE_PATH,
        "HOME": home,
        "LANG": "C",
        "GIT_TERMINAL_PROMPT": "0",
    }


def run_command(
    command: list[str],
    cwd: Path | str | None = None,
    user: str | None = None,
    timeout: float | None = None,
) -> CommandResult:
    """Run ``command`` and capture its exit status and output.

    A non-zero exit is returned, never raised. A timeout is reported as a
    failed result with ``returncode == -1``.

    Raises:
        CommandSpawnError: If the process cannot be started (missing
            executable, unknown user, permission denied).
    """
    env = _child_env(user)
    logger.debug("run %s (cwd=%s, user=%s)", " ".join(command), cwd, user or "-")
    kwargs = {}
    if user is not None:
        kwargs["user"] = user
    try:
        completed = subprocess.run(
            command,
            cwd=str(cwd) if cwd else None,
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
            **kwargs,
        )
    except subprocess.TimeoutExpired as exc:
        return CommandResult(
            command=list(command),
            returncode=-1,
            stdout=_decode(exc.stdout),
            stderr=f"timed out after {timeout}s",
        )
    except (OSError, KeyError, ValueError) as exc:
        raise CommandSpawnError(f"Cannot run {command[0]}: {exc}") from exc

    return CommandResult(
        command=list(command),
        returncode=completed.returncode,
        stdout=completed.stdout,
        stderr=completed.stderr,
    )


def run_git(
    args: list[str],
    cwd: Path | str | None,
    user: str | None = None,
    timeout: float | None = None,
) -> CommandResult:
    """Run a git command and return the result."""
    return run_command(["git"] + list(args), cwd=cwd, user=user, timeout=timeout)


def _decode(data) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode(errors="replace")
    return data

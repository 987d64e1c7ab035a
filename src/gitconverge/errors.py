"""Error taxonomy. Each class carries the CLI exit code it maps to."""

from __future__ import annotations


class GitConvergeError(Exception):
    """Base error for deterministic CLI exit codes.

    ``result`` carries the failing command's captured output when the error
    came from a subprocess.
    """

    exit_code: int = 1

    def __init__(self, message: str, result=None):
        super().__init__(message)
        self.result = result


class ConfigError(GitConvergeError):
    """Invalid checkout definition or configuration file."""

    exit_code = 2


class CommandSpawnError(GitConvergeError):
    """A command could not be started at all."""

    exit_code = 1


class PresenceCheckError(GitConvergeError):
    """The checkout location could not be inspected or prepared."""

    exit_code = 3


class CloneError(GitConvergeError):
    """Initial clone (or its first checkout) failed."""

    exit_code = 1


class RefResolutionError(GitConvergeError):
    """A ref could not be resolved to a commit."""

    exit_code = 1


class SyncError(GitConvergeError):
    """A fetch, checkout or submodule step failed."""

    exit_code = 1


class StateIOError(GitConvergeError):
    """The state file could not be written."""

    exit_code = 3

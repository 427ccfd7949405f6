"""Exception hierarchy for zorx.

Every component raises a subclass of :class:`ZorxError` so the project
generator can turn any failure into an exit code in one place.  The three
families mirror who has to act on the failure:

* :class:`UserError` -- the invocation itself is wrong (bad name, target
  already exists).  Fix the command line and run again.
* :class:`ZorxEnvironmentError` -- the machine is in the way (permissions,
  missing package manager executable).
* :class:`SubprocessError` -- an external package manager ran and failed.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class ZorxError(Exception):
    """Base class for all zorx failures."""


# ---------------------------------------------------------------------------
# User errors
# ---------------------------------------------------------------------------


class UserError(ZorxError):
    """The request cannot be honoured as given."""


class InvalidRequestError(UserError):
    """A scaffold option has an unusable value."""


class InvalidProjectNameError(InvalidRequestError):
    """The project name is empty or is not a single path segment."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid project name {name!r}: {reason}")


class ProjectExistsError(UserError):
    """The target directory exists and ``--force`` was not given."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            f"Directory {path.name} already exists. Use --force to override it."
        )


class ScaffoldInProgressError(UserError):
    """Another run is already scaffolding the same project name."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            f"Another zorx run is already creating {path.name} "
            f"(staging directory {path} exists)"
        )


# ---------------------------------------------------------------------------
# Environment errors
# ---------------------------------------------------------------------------


class ZorxEnvironmentError(ZorxError):
    """The local machine prevented an operation from completing."""


class CommandNotFoundError(ZorxEnvironmentError):
    """The requested executable is not on ``PATH``."""

    def __init__(self, command: str) -> None:
        self.command = command
        super().__init__(f"Command not found: {command}. Is it installed and on your PATH?")


class ScaffoldFilesystemError(ZorxEnvironmentError):
    """A directory or file could not be created, written or removed."""

    def __init__(self, action: str, path: Path, cause: OSError) -> None:
        self.action = action
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to {action} {path}: {cause.strerror or cause}")


# ---------------------------------------------------------------------------
# Subprocess errors
# ---------------------------------------------------------------------------


class SubprocessError(ZorxError):
    """An external command did not complete successfully."""

    def __init__(self, command: str, message: str) -> None:
        self.command = command
        super().__init__(message)


class CommandFailedError(SubprocessError):
    """An external command exited with a non-zero status."""

    def __init__(self, command: str, args: Sequence[str], exit_code: int) -> None:
        self.args_list = list(args)
        self.exit_code = exit_code
        super().__init__(command, f"{command} failed with exit code {exit_code}")


class CommandTimeoutError(SubprocessError, TimeoutError):
    """An external command ran past its time limit and was killed."""

    def __init__(self, command: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(command, f"{command} timed out after {timeout:g}s and was killed")

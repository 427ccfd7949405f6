"""Data models for a single scaffold run."""

from __future__ import annotations

import errno
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from zorx.errors import InvalidProjectNameError, InvalidRequestError, ScaffoldFilesystemError

DEFAULT_PORT = 3000

_FORBIDDEN_NAME_CHARS = ("/", "\\", "\x00")


class PackageManager(str, Enum):
    """Supported Node.js package managers."""

    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"
    BUN = "bun"

    @property
    def init_args(self) -> list[str]:
        """Arguments that create a manifest without prompting."""
        if self is PackageManager.PNPM:
            return ["init"]
        return ["init", "-y"]

    @property
    def install_subcommand(self) -> str:
        """Subcommand that adds named packages to the manifest."""
        if self is PackageManager.NPM:
            return "install"
        return "add"


class ScaffoldRequest(BaseModel):
    """Everything the user asked for on the ``create`` command line."""

    project_name: str
    force: bool = False
    port: int = DEFAULT_PORT
    skip_install: bool = False
    extra_packages: list[str] = Field(default_factory=list)
    package_manager: PackageManager = PackageManager.NPM

    # Accepted on the command line but not implemented yet.
    typescript: bool = False
    template: str | None = None
    git: bool = False

    @field_validator("project_name")
    @classmethod
    def _single_path_segment(cls, value: str) -> str:
        check_project_name(value)
        return value

    @classmethod
    def build(cls, **kwargs: object) -> "ScaffoldRequest":
        """Validate *kwargs*, raising zorx errors instead of pydantic ones."""
        try:
            return cls(**kwargs)
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in exc.errors()
            )
            raise InvalidRequestError(f"Invalid create options: {problems}") from exc

    @property
    def reserved_options(self) -> list[str]:
        """Flags the user passed that zorx does not support yet."""
        used: list[str] = []
        if self.typescript:
            used.append("--ts")
        if self.template is not None:
            used.append("--template")
        if self.git:
            used.append("--git")
        return used


def check_project_name(name: str) -> None:
    """Reject names that are not exactly one directory below the working dir.

    Raises:
        InvalidProjectNameError: *name* is empty, ``.``/``..``, or contains
            a path separator or NUL byte.
    """
    if not name or not name.strip():
        raise InvalidProjectNameError(name, "name must not be empty")
    if name != name.strip():
        raise InvalidProjectNameError(name, "name must not start or end with whitespace")
    if name in (".", ".."):
        raise InvalidProjectNameError(name, "name must not be a relative path reference")
    if any(ch in name for ch in _FORBIDDEN_NAME_CHARS):
        raise InvalidProjectNameError(name, "name must be a single directory name")


@dataclass
class ProjectTarget:
    """Where the project lands and where it is assembled before that."""

    absolute_path: Path
    existed: bool

    @classmethod
    def resolve(cls, base_dir: Path, project_name: str) -> "ProjectTarget":
        """Locate *project_name* directly below *base_dir*.

        Raises:
            InvalidProjectNameError: The name is not a single path segment or
                is longer than the filesystem allows.
            ScaffoldFilesystemError: The target could not be inspected.
        """
        check_project_name(project_name)
        base = Path(base_dir).resolve()
        path = base / project_name
        if path.parent != base or path.name != project_name:
            raise InvalidProjectNameError(
                project_name, f"name must resolve to a direct child of {base}"
            )
        return cls(absolute_path=path, existed=_entry_exists(path, project_name))

    @property
    def name(self) -> str:
        return self.absolute_path.name

    @property
    def staging_root(self) -> Path:
        """Hidden sibling created exclusively for the duration of one run."""
        return self.absolute_path.with_name(f".{self.absolute_path.name}.zorx-staging")

    @property
    def staging_path(self) -> Path:
        """Directory the project is built in before the final rename.

        Its basename is the project name, since package managers derive the
        package name from it.
        """
        return self.staging_root / self.absolute_path.name


def _entry_exists(path: Path, project_name: str) -> bool:
    """``True`` if anything, including a dangling symlink, sits at *path*."""
    try:
        path.lstat()
    except FileNotFoundError:
        return False
    except OSError as exc:
        if exc.errno == errno.ENAMETOOLONG:
            raise InvalidProjectNameError(project_name, "name is too long") from exc
        raise ScaffoldFilesystemError("inspect", path, exc) from exc
    return True


@dataclass(frozen=True)
class TemplateFile:
    """A generated file: its place in the project and the template behind it."""

    relative_path: str
    template_name: str


@dataclass(frozen=True)
class CommandOutcome:
    """Terminal result of a command; the process exits with ``exit_code``."""

    exit_code: int
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

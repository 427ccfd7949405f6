"""Shared pytest fixtures for the zorx test suite.

Provides reusable fixtures for:
- A logger that records output instead of writing to the terminal
- A fake package manager executor that mimics ``npm init`` / ``npm install``
- Connectivity probe stubs
- Stub package manager executables on ``PATH`` for end-to-end runs
"""

from __future__ import annotations

import io
import os
import stat
import sys
import textwrap
from collections.abc import Sequence
from pathlib import Path

import pytest
from rich.console import Console

from zorx.console import ConsoleLogger, LogLevel
from zorx.errors import CommandFailedError


# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------


class RecordingLogger(ConsoleLogger):
    """ConsoleLogger writing to in-memory buffers."""

    def __init__(self, level: LogLevel = LogLevel.DEBUG) -> None:
        self.out = io.StringIO()
        self.err = io.StringIO()
        super().__init__(
            console=Console(file=self.out, width=1000, color_system=None, force_terminal=False),
            err_console=Console(file=self.err, width=1000, color_system=None, force_terminal=False),
            level=level,
        )

    @property
    def stdout(self) -> str:
        return self.out.getvalue()

    @property
    def stderr(self) -> str:
        return self.err.getvalue()

    @property
    def text(self) -> str:
        return self.stdout + self.stderr


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


# ---------------------------------------------------------------------------
# Fake executor
# ---------------------------------------------------------------------------


class FakeExecutor:
    """Records package manager invocations.

    ``init`` calls write a throwaway ``package.json`` into *cwd* the way a
    real package manager would.  Set ``fail_on`` to a subcommand name to
    make that invocation raise :class:`CommandFailedError`.
    """

    def __init__(self, fail_on: str | None = None, exit_code: int = 1) -> None:
        self.calls: list[tuple[str, list[str], Path | None]] = []
        self.fail_on = fail_on
        self.exit_code = exit_code
        self.write_manifest = True

    async def run(
        self, command: str, args: Sequence[str], cwd: str | Path | None = None
    ) -> None:
        cwd_path = Path(cwd) if cwd is not None else None
        self.calls.append((command, list(args), cwd_path))
        if args and args[0] == self.fail_on:
            raise CommandFailedError(command, args, self.exit_code)
        if args and args[0] == "init" and self.write_manifest and cwd_path is not None:
            (cwd_path / "package.json").write_text(
                '{"name": "generated-by-pm", "version": "0.0.0"}', encoding="utf-8"
            )

    @property
    def commands(self) -> list[list[str]]:
        return [[command, *args] for command, args, _ in self.calls]

    def install_calls(self) -> list[list[str]]:
        return [
            args for _, args, _ in self.calls
            if args and args[0] in ("install", "add")
        ]


@pytest.fixture
def fake_executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def make_executor() -> type[FakeExecutor]:
    """The FakeExecutor class, for tests that need a failing variant."""
    return FakeExecutor


# ---------------------------------------------------------------------------
# Connectivity stubs
# ---------------------------------------------------------------------------


class ConnectivityStub:
    def __init__(self, online: bool) -> None:
        self.online = online
        self.calls = 0

    async def __call__(self) -> bool:
        self.calls += 1
        return self.online


@pytest.fixture
def online() -> ConnectivityStub:
    return ConnectivityStub(True)


@pytest.fixture
def offline() -> ConnectivityStub:
    return ConnectivityStub(False)


# ---------------------------------------------------------------------------
# Stub executables
# ---------------------------------------------------------------------------


_STUB_PM = textwrap.dedent(
    """\
    import json, os, sys
    from pathlib import Path

    log = Path(os.environ["ZORX_STUB_LOG"])
    with log.open("a", encoding="utf-8") as fh:
        fh.write(json.dumps({"argv": sys.argv[1:], "cwd": os.getcwd()}) + "\\n")

    if sys.argv[1:2] == ["init"]:
        name = Path.cwd().name
        if name.startswith((".", "_")):
            print(f'npm error Invalid name: "{name}"', file=sys.stderr)
            sys.exit(1)
        Path("package.json").write_text(json.dumps({"name": name}), encoding="utf-8")
        print("Wrote to package.json")
    else:
        print("added packages")

    sys.exit(int(os.environ.get("ZORX_STUB_EXIT", "0")))
    """
)


@pytest.fixture
def stub_package_manager(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Put a fake ``npm`` on ``PATH`` that logs its argv to a JSON-lines file.

    Like the real one, ``init`` refuses a directory whose name starts with
    ``.`` or ``_``.

    Returns the log file path.  Set ``ZORX_STUB_EXIT`` to make it fail.
    """
    if os.name == "nt":
        pytest.skip("stub executables rely on POSIX shebangs")

    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    script = bin_dir / "npm"
    script.write_text(f"#!{sys.executable}\n{_STUB_PM}", encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    log = tmp_path / "npm-calls.jsonl"
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
    monkeypatch.setenv("ZORX_STUB_LOG", str(log))
    return log


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    """Empty directory projects are generated in."""
    path = tmp_path / "work"
    path.mkdir()
    return path


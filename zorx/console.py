"""Leveled console logger used by every zorx component.

Output goes through Rich so colour handling (``NO_COLOR``, non-TTY output)
follows the terminal.  Instances are constructed explicitly and injected;
tests swap in their own ``Console`` objects that record to a buffer.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any

from rich.console import Console
from rich.rule import Rule
from rich.traceback import Traceback


class LogLevel(IntEnum):
    """Verbosity thresholds.  Lower values are always shown first."""

    ERROR = 0
    WARN = 1
    INFO = 2
    SUCCESS = 3
    NORMAL = 4
    DEBUG = 5


def progress_bar(current: int, total: int, width: int = 20) -> str:
    """Render a fixed-width text progress bar, e.g. ``[████░░░░]``."""
    if total <= 0:
        return "[]"
    completed = round(width * min(max(current, 0), total) / total)
    return f"[{'█' * completed}{'░' * (width - completed)}]"


class ConsoleLogger:
    """Structured, leveled terminal output.

    Args:
        console: Console for regular output.  Defaults to stdout.
        err_console: Console for warnings and errors.  Defaults to stderr.
        level: Initial verbosity threshold.
    """

    def __init__(
        self,
        console: Console | None = None,
        err_console: Console | None = None,
        level: LogLevel = LogLevel.NORMAL,
    ) -> None:
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)
        self.level = level

    # -- Level management --------------------------------------------------

    def set_level(self, level: LogLevel | str) -> None:
        """Change the threshold.  Unknown names leave it unchanged with a warning."""
        if isinstance(level, str):
            try:
                level = LogLevel[level.upper()]
            except KeyError:
                self.warn(f"Invalid log level: {level}. Keeping {self.level.name}")
                return
        self.level = level
        self.debug(f"Log level set to: {level.name}")

    def is_enabled(self, level: LogLevel) -> bool:
        return level <= self.level

    # -- Leveled output ----------------------------------------------------

    def normal(self, *messages: Any) -> None:
        """Plain output, printed verbatim (no markup, no highlighting)."""
        if self.is_enabled(LogLevel.NORMAL):
            self.console.print(_join(messages), markup=False, highlight=False)

    def info(self, *messages: Any) -> None:
        self._emit(LogLevel.INFO, "cyan", "ℹ", messages)

    def success(self, *messages: Any) -> None:
        self._emit(LogLevel.SUCCESS, "green", "✔", messages)

    def warn(self, *messages: Any) -> None:
        self._emit(LogLevel.WARN, "yellow", "⚠", messages)

    def error(self, *messages: Any) -> None:
        self._emit(LogLevel.ERROR, "red", "✖", messages)

    def debug(self, *messages: Any) -> None:
        self._emit(LogLevel.DEBUG, "magenta", "•", messages)

    def header(self, title: str) -> None:
        """Print a section separator."""
        if not self.is_enabled(LogLevel.NORMAL):
            return
        self.console.print()
        self.console.print(Rule(f"[bold blue] {title} [/bold blue]", style="blue"))
        self.console.print()

    def progress(self, message: str, current: int, total: int) -> None:
        """Print a numbered pipeline step with a text progress bar."""
        percentage = round(current / total * 100) if total > 0 else 0
        self._emit(
            LogLevel.INFO,
            "blue",
            "↻",
            (f"{message} {progress_bar(current, total)} ({percentage}%)",),
        )

    def exception(self, error: BaseException) -> None:
        """Print a full Rich traceback for *error* to the error console."""
        self.err_console.print(
            Traceback.from_exception(type(error), error, error.__traceback__)
        )

    def flush(self) -> None:
        for console in (self.console, self.err_console):
            console.file.flush()

    # -- Internals ---------------------------------------------------------

    def _emit(
        self, level: LogLevel, style: str, prefix: str, messages: tuple[Any, ...]
    ) -> None:
        if not self.is_enabled(level):
            return
        target = self.err_console if level <= LogLevel.WARN else self.console
        target.print(f"{prefix} {_join(messages)}", style=style, markup=False, highlight=False)


def _join(messages: tuple[Any, ...]) -> str:
    return " ".join(str(m) for m in messages)

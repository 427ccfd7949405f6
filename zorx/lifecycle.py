"""Process lifecycle management.

The :class:`ProcessManager` is the only place that ends the process.  It
owns the graceful exit primitive, reports fatal errors that escape every
other handler, turns SIGINT/SIGTERM into a clean exit, and gates startup on
the interpreter version.
"""

from __future__ import annotations

import asyncio
import signal
import sys
import time
from collections.abc import Callable
from types import FrameType, TracebackType
from typing import Any, NoReturn

from zorx.config import Settings
from zorx.console import ConsoleLogger, LogLevel

_SIGNAL_MESSAGES: dict[signal.Signals, str] = {
    signal.SIGINT: "Process interrupted (SIGINT)",
    signal.SIGTERM: "Process terminated (SIGTERM)",
}


class ProcessManager:
    """Central exit, signal and fatal-error handling for one invocation.

    Args:
        logger: Where shutdown and fatal-error messages go.
        exit_func: Called with the final status code.  Tests pass a
            recorder instead of ``sys.exit``.
        flush_delay: Seconds to wait after reporting a fatal error so the
            output reaches the terminal before the process ends.
        sleep: Blocking sleep used for *flush_delay*.
    """

    def __init__(
        self,
        logger: ConsoleLogger,
        *,
        exit_func: Callable[[int], Any] = sys.exit,
        flush_delay: float = 0.1,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.logger = logger
        self.exit_func = exit_func
        self.flush_delay = flush_delay
        self.sleep = sleep
        self._previous_excepthook: Callable[..., Any] | None = None
        self._previous_signals: dict[signal.Signals, Any] = {}

    # -- Exit primitives ---------------------------------------------------

    def graceful_shutdown(self, message: str | None = None, code: int = 0) -> NoReturn:
        """Log *message* (green for 0, red otherwise) and exit with *code*."""
        if message:
            if code == 0:
                self.logger.success(message)
            else:
                self.logger.error(message)
        self.logger.debug(f"Process exited with code {code}")
        self.logger.flush()
        self.exit_func(code)
        raise SystemExit(code)

    def handle_fatal_error(self, error: BaseException, source: str) -> NoReturn:
        """Report an unexpected error with its traceback and exit with 1."""
        self._report_fatal(error, source)
        self.exit_func(1)
        raise SystemExit(1)

    # -- Handler installation ---------------------------------------------

    def install(self) -> None:
        """Install the uncaught-exception hook and termination signal handlers."""
        self._previous_excepthook = sys.excepthook
        sys.excepthook = self._excepthook
        for signum in _SIGNAL_MESSAGES:
            self._previous_signals[signum] = signal.getsignal(signum)
            signal.signal(signum, self._on_signal)

    def uninstall(self) -> None:
        """Restore whatever handlers were active before :meth:`install`."""
        if self._previous_excepthook is not None:
            sys.excepthook = self._previous_excepthook
            self._previous_excepthook = None
        for signum, handler in self._previous_signals.items():
            signal.signal(signum, handler)
        self._previous_signals.clear()

    def install_loop_handler(self, loop: asyncio.AbstractEventLoop) -> None:
        """Treat task exceptions nobody retrieved as fatal."""
        loop.set_exception_handler(self._loop_exception_handler)

    # -- Startup checks ----------------------------------------------------

    def validate_python_version(
        self,
        min_version: str,
        current: tuple[int, ...] | None = None,
    ) -> bool:
        """Return ``False`` (after logging) if the interpreter is too old."""
        current = tuple(current or sys.version_info[:3])
        required = tuple(int(part) for part in min_version.split("."))
        if current[: len(required)] < required:
            found = ".".join(str(p) for p in current)
            self.logger.error(
                f"Python {min_version} or higher is required. Current version: {found}"
            )
            return False
        return True

    def setup_development_environment(self, settings: Settings) -> None:
        """Raise verbosity to DEBUG in development mode."""
        if settings.is_development:
            self.logger.set_level(LogLevel.DEBUG)

    # -- Hooks -------------------------------------------------------------

    def _excepthook(
        self,
        exc_type: type[BaseException],
        exc: BaseException,
        tb: TracebackType | None,
    ) -> None:
        # The interpreter exits with status 1 once the hook returns.
        if exc.__traceback__ is None:
            exc = exc.with_traceback(tb)
        self._report_fatal(exc, "uncaught exception")

    def _loop_exception_handler(
        self, loop: asyncio.AbstractEventLoop, context: dict[str, Any]
    ) -> None:
        error = context.get("exception") or RuntimeError(context.get("message", "unknown error"))
        self.handle_fatal_error(error, "unhandled task exception")

    def _on_signal(self, signum: int, frame: FrameType | None) -> None:
        message = _SIGNAL_MESSAGES.get(signal.Signals(signum), f"Received signal {signum}")
        self.graceful_shutdown(message, 0)

    def _report_fatal(self, error: BaseException, source: str) -> None:
        self.logger.error(f"Fatal Error ({source}): {error}")
        self.logger.exception(error)
        self.logger.flush()
        if self.flush_delay > 0:
            self.sleep(self.flush_delay)

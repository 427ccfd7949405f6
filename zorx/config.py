"""zorx runtime configuration.

A small typed settings object built once by the CLI entry point and passed
to the components that need it.  Values come from environment variables so
the tool itself never reads or writes a config file.
"""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, Field

DEVELOPMENT = "development"

_TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Process-wide settings for a single zorx invocation."""

    env: str = Field(default="production", description="Runtime environment name")
    debug: bool = Field(default=False, description="Force debug-level output")
    min_python: str = Field(
        default="3.10", pattern=r"^\d+(\.\d+){0,2}$",
        description="Minimum interpreter version required to run",
    )
    command_timeout: float | None = Field(
        default=600.0, gt=0,
        description="Seconds before a package manager process is killed (None disables)",
    )
    probe_timeout: float = Field(
        default=5.0, gt=0, description="Seconds allowed for the connectivity DNS lookup"
    )
    fatal_flush_delay: float = Field(
        default=0.1, ge=0, description="Pause before exiting on a fatal error"
    )

    @property
    def is_development(self) -> bool:
        """``True`` when verbose development output should be enabled."""
        return self.debug or self.env.lower() == DEVELOPMENT

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            ZORX_ENV, ZORX_DEBUG, ZORX_MIN_PYTHON, ZORX_COMMAND_TIMEOUT,
            ZORX_PROBE_TIMEOUT.

        ``ZORX_COMMAND_TIMEOUT=0`` disables the subprocess timeout.
        """
        env = os.environ if environ is None else environ
        kwargs: dict[str, Any] = {}

        if env.get("ZORX_ENV"):
            kwargs["env"] = env["ZORX_ENV"]
        if env.get("ZORX_DEBUG"):
            kwargs["debug"] = env["ZORX_DEBUG"].strip().lower() in _TRUTHY
        if env.get("ZORX_MIN_PYTHON"):
            kwargs["min_python"] = env["ZORX_MIN_PYTHON"].strip()
        if env.get("ZORX_COMMAND_TIMEOUT"):
            timeout = float(env["ZORX_COMMAND_TIMEOUT"])
            kwargs["command_timeout"] = timeout if timeout > 0 else None
        if env.get("ZORX_PROBE_TIMEOUT"):
            kwargs["probe_timeout"] = float(env["ZORX_PROBE_TIMEOUT"])

        return cls(**kwargs)

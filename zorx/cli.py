"""zorx command-line interface.

Usage::

    zorx create my-api --port 8080 --install "morgan,mongoose"
    zorx create my-api --force --skip-install --pm pnpm
    zorx help create
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Callable, Sequence
from functools import partial
from pathlib import Path
from typing import Any

from zorx import __version__
from zorx.config import Settings
from zorx.console import ConsoleLogger
from zorx.errors import ZorxError
from zorx.help import display_command_help, display_general_help
from zorx.lifecycle import ProcessManager
from zorx.network import has_connectivity
from zorx.runner import ProcessExecutor
from zorx.scaffolder import CommandOutcome, PackageManager, ProjectGenerator, ScaffoldRequest
from zorx.scaffolder.generator import ConnectivityCheck


def _split_packages(value: str) -> list[str]:
    """Parse ``"a, b,,c"`` into ``["a", "b", "c"]``."""
    return [item.strip() for item in value.split(",") if item.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zorx",
        description="A CLI tool for smart project scaffolding and boilerplate code generation",
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"%(prog)s {__version__}"
    )
    commands = parser.add_subparsers(dest="command", metavar="<command>")

    create = commands.add_parser("create", help="Create a new project")
    create.add_argument("project_name", metavar="project-name", help="Name of the project")
    create.add_argument(
        "--force", action="store_true",
        help="Override and recreate the directory if it already exists",
    )
    create.add_argument(
        "--ts", dest="typescript", action="store_true",
        help="Use TypeScript (not yet supported)",
    )
    create.add_argument(
        "--template", default=None, metavar="<template>",
        help="Project template to use (not yet supported)",
    )
    create.add_argument(
        "--git", action="store_true", help="Initialize a git repository (not yet supported)"
    )
    create.add_argument("--port", default="3000", metavar="<port>", help="Server port (default: 3000)")
    create.add_argument(
        "--skip-install", action="store_true", help="Skip dependency installation"
    )
    create.add_argument(
        "--install", type=_split_packages, default=[], metavar="<packages>",
        help="Extra packages (comma separated)",
    )
    create.add_argument(
        "--pm", "--package-manager", dest="package_manager", default=PackageManager.NPM.value,
        choices=[pm.value for pm in PackageManager], metavar="<package-manager>",
        help="Node package manager: npm, yarn, pnpm or bun (default: npm)",
    )

    help_cmd = commands.add_parser("help", help="Display help information for zorx")
    help_cmd.add_argument(
        "topic", nargs="?", default=None, metavar="command",
        help="Specific command to get help for",
    )
    return parser


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


async def _create(
    request: ScaffoldRequest,
    *,
    settings: Settings,
    logger: ConsoleLogger,
    manager: ProcessManager,
    base_dir: Path,
    connectivity: ConnectivityCheck | None,
) -> CommandOutcome:
    manager.install_loop_handler(asyncio.get_running_loop())
    generator = ProjectGenerator(
        request,
        logger=logger,
        executor=ProcessExecutor(logger, timeout=settings.command_timeout),
        base_dir=base_dir,
        connectivity=connectivity or partial(has_connectivity, timeout=settings.probe_timeout),
    )
    return await generator.generate()


def run_create(
    args: argparse.Namespace,
    *,
    settings: Settings,
    logger: ConsoleLogger,
    manager: ProcessManager,
    base_dir: Path,
    connectivity: ConnectivityCheck | None = None,
) -> CommandOutcome:
    """Build the request from parsed arguments and run the pipeline."""
    try:
        request = ScaffoldRequest.build(
            project_name=args.project_name,
            force=args.force,
            port=args.port,
            skip_install=args.skip_install,
            extra_packages=args.install,
            package_manager=args.package_manager,
            typescript=args.typescript,
            template=args.template,
            git=args.git,
        )
    except ZorxError as exc:
        return CommandOutcome(exit_code=1, message=str(exc))

    try:
        return asyncio.run(
            _create(
                request,
                settings=settings,
                logger=logger,
                manager=manager,
                base_dir=base_dir,
                connectivity=connectivity,
            )
        )
    except Exception as exc:
        manager.handle_fatal_error(exc, "create")
        raise


def run_help(args: argparse.Namespace, *, logger: ConsoleLogger) -> CommandOutcome:
    if args.topic:
        display_command_help(logger, args.topic)
    else:
        display_general_help(logger)
    return CommandOutcome(exit_code=0)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(
    argv: Sequence[str] | None = None,
    *,
    logger: ConsoleLogger | None = None,
    environ: dict[str, str] | None = None,
    exit_func: Callable[[int], Any] = sys.exit,
    base_dir: str | Path | None = None,
    connectivity: ConnectivityCheck | None = None,
) -> None:
    """Console-script entry point for ``zorx``.  Always ends via ``exit_func``."""
    logger = logger or ConsoleLogger()
    manager = ProcessManager(logger, exit_func=exit_func)
    manager.install()
    try:
        try:
            settings = Settings.from_env(environ)
        except ValueError as exc:
            manager.graceful_shutdown(f"Invalid environment configuration: {exc}", 1)
        manager.flush_delay = settings.fatal_flush_delay
        manager.setup_development_environment(settings)

        if not manager.validate_python_version(settings.min_python):
            manager.graceful_shutdown(None, 1)

        args = build_parser().parse_args(argv)
        if args.command == "create":
            outcome = run_create(
                args,
                settings=settings,
                logger=logger,
                manager=manager,
                base_dir=Path(base_dir) if base_dir is not None else Path.cwd(),
                connectivity=connectivity,
            )
        elif args.command == "help":
            outcome = run_help(args, logger=logger)
        else:
            display_general_help(logger)
            outcome = CommandOutcome(exit_code=0)

        manager.graceful_shutdown(outcome.message or None, outcome.exit_code)
    finally:
        manager.uninstall()

"""Project generation pipeline.

Turns a :class:`ScaffoldRequest` into a project directory.  The steps run
strictly in order and each one finishes before the next starts:

1. Validate the target (refuse or clear an existing directory).
2. Create the directory skeleton.
3. Create the placeholder source files.
4. Render the templates into them.
5. Initialise the package manager.
6. Replace the generated manifest with zorx's own.
7. Install dependencies (unless skipped or offline).

Steps 2-6 run in ``.<name>.zorx-staging/<name>``, a directory carrying the
project's own name inside a hidden staging root next to the target.  It is
renamed into place only once they all succeed, and never over an existing
entry.  A failure before that point removes the staging root, so the
working directory ends up either untouched or holding a complete project.
Installation runs in the final directory; if it fails the scaffold is kept
and the run still fails.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import os
import shutil
from collections.abc import Awaitable, Callable
from pathlib import Path

from zorx.console import ConsoleLogger
from zorx.errors import (
    ProjectExistsError,
    ScaffoldFilesystemError,
    ScaffoldInProgressError,
    ZorxError,
)
from zorx.network import has_connectivity
from zorx.runner import ProcessExecutor

from .models import CommandOutcome, ProjectTarget, ScaffoldRequest
from .templates import MANIFEST_FILE, TEMPLATE_FILES, TemplateRenderer, manifest_content

# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------

PROJECT_DIRECTORIES: tuple[str, ...] = (
    "src",
    "src/controllers",
    "src/models",
    "src/routes",
    "src/middlewares",
    "src/utils",
    "src/configs",
)

DEFAULT_PACKAGES: tuple[str, ...] = ("express", "cors", "helmet", "dotenv", "nodemon")

TOTAL_STEPS = 6

ConnectivityCheck = Callable[[], Awaitable[bool]]


class ProjectGenerator:
    """Runs the scaffold pipeline for one request.

    Args:
        request: Validated user request.
        logger: Output for progress, warnings and the final summary.
        executor: Runs the package manager.
        base_dir: Directory the project is created in.  Every path the
            pipeline touches is derived from it; the process working
            directory is never changed.
        connectivity: Async probe deciding whether to install dependencies.
        renderer: Template renderer, mostly overridden in tests.
    """

    def __init__(
        self,
        request: ScaffoldRequest,
        *,
        logger: ConsoleLogger,
        executor: ProcessExecutor,
        base_dir: str | Path,
        connectivity: ConnectivityCheck = has_connectivity,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.request = request
        self.logger = logger
        self.executor = executor
        self.base_dir = Path(base_dir)
        self.connectivity = connectivity
        self.renderer = renderer or TemplateRenderer()

    # -- Public API --------------------------------------------------------

    async def generate(self) -> CommandOutcome:
        """Run every step and report how the process should exit.

        Errors raised by zorx components and filesystem errors become an
        exit code 1 outcome.  Anything else is a bug and propagates to the caller.
        """
        name = self.request.project_name
        self.logger.header("Project Creation")
        self.logger.info(f"Creating project: {name}")
        for option in self.request.reserved_options:
            self.logger.warn(f"{option} is not yet supported and will be ignored")

        try:
            target = await self._validate()
            await self._scaffold(target)
            installed = await self._install(target)
        except (ZorxError, OSError) as exc:
            self.logger.error("Project creation failed")
            return CommandOutcome(exit_code=1, message=str(exc))

        self._print_next_steps(target, installed)
        return CommandOutcome(exit_code=0, message=f"Project {name} created successfully! 🎉")

    # -- Steps -------------------------------------------------------------

    async def _validate(self) -> ProjectTarget:
        target = ProjectTarget.resolve(self.base_dir, self.request.project_name)
        if not target.existed:
            return target
        if not self.request.force:
            raise ProjectExistsError(target.absolute_path)

        self.logger.info("Removing existing directory...")
        await asyncio.to_thread(_remove, target.absolute_path)
        return target

    async def _scaffold(self, target: ProjectTarget) -> None:
        root = target.staging_root
        staging = target.staging_path
        try:
            await asyncio.to_thread(root.mkdir)
        except FileExistsError as exc:
            raise ScaffoldInProgressError(root) from exc
        except OSError as exc:
            raise ScaffoldFilesystemError("create directory", root, exc) from exc

        self.logger.debug(f"Staging project in {staging}")
        try:
            try:
                await asyncio.to_thread(staging.mkdir)
            except OSError as exc:
                raise ScaffoldFilesystemError("create directory", staging, exc) from exc

            self.logger.progress("Creating project structure", 1, TOTAL_STEPS)
            await self._create_directories(staging)

            self.logger.progress("Creating project files", 2, TOTAL_STEPS)
            await self._create_files(staging)

            self.logger.progress("Writing template files", 3, TOTAL_STEPS)
            await self._write_templates(staging)

            self.logger.progress("Initializing package manager", 4, TOTAL_STEPS)
            pm = self.request.package_manager
            await self.executor.run(pm.value, pm.init_args, cwd=staging)

            self.logger.progress("Writing package manifest", 5, TOTAL_STEPS)
            await self._patch_manifest(staging)

            await asyncio.to_thread(_commit, staging, target.absolute_path)
        except BaseException:
            self.logger.debug(f"Removing staging directory {root}")
            raise
        finally:
            shutil.rmtree(root, ignore_errors=True)

    async def _create_directories(self, root: Path) -> None:
        for folder in PROJECT_DIRECTORIES:
            path = root / folder
            try:
                await asyncio.to_thread(path.mkdir, parents=True, exist_ok=True)
            except OSError as exc:
                raise ScaffoldFilesystemError("create directory", path, exc) from exc

    async def _create_files(self, root: Path) -> None:
        for template in TEMPLATE_FILES:
            path = root / template.relative_path
            try:
                await asyncio.to_thread(path.touch, exist_ok=True)
            except OSError as exc:
                raise ScaffoldFilesystemError("create file", path, exc) from exc

    async def _write_templates(self, root: Path) -> None:
        context = {"port": self.request.port}
        for template in TEMPLATE_FILES:
            try:
                await self.renderer.render_to_file(template, root, context)
            except OSError as exc:
                raise ScaffoldFilesystemError(
                    "write", root / template.relative_path, exc
                ) from exc

    async def _patch_manifest(self, root: Path) -> None:
        manifest = root / MANIFEST_FILE
        if not manifest.exists():
            self.logger.warn(f"{MANIFEST_FILE} was not created; skipping manifest update")
            return
        content = json.dumps(manifest_content(self.request.project_name), indent=2) + "\n"
        try:
            await asyncio.to_thread(manifest.write_text, content, encoding="utf-8")
        except OSError as exc:
            raise ScaffoldFilesystemError("write", manifest, exc) from exc

    async def _install(self, target: ProjectTarget) -> bool:
        """Install dependencies; return ``False`` when installation was skipped."""
        if self.request.skip_install:
            self.logger.info("Skipping dependency installation")
            return False

        self.logger.progress("Installing dependencies", 6, TOTAL_STEPS)
        if not await self.connectivity():
            self.logger.warn("No internet connection detected")
            self.logger.info("Install dependencies manually when connected")
            return False

        pm = self.request.package_manager
        packages = [*DEFAULT_PACKAGES, *self.request.extra_packages]
        self.logger.info(f"Installing {len(packages)} packages...")
        await self.executor.run(
            pm.value, [pm.install_subcommand, *packages], cwd=target.absolute_path
        )
        return True

    def _print_next_steps(self, target: ProjectTarget, installed: bool) -> None:
        pm = self.request.package_manager.value
        self.logger.header("Next Steps")
        self.logger.normal(f"  cd {target.name}")
        if not installed:
            self.logger.normal(f"  {pm} install")
        self.logger.normal(f"  {pm} run dev")
        self.logger.normal(f"  Open http://localhost:{self.request.port}")


# ---------------------------------------------------------------------------
# Filesystem helpers (run in worker threads)
# ---------------------------------------------------------------------------


def _remove(path: Path) -> None:
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except OSError as exc:
        raise ScaffoldFilesystemError("remove", path, exc) from exc


def _commit(staging: Path, target: Path) -> None:
    """Move the finished staging directory to *target* without replacing anything.

    On POSIX ``rename`` silently replaces an empty directory, so *target* is
    first claimed with an exclusive ``mkdir`` and the rename then replaces
    only that placeholder.  Windows ``rename`` already refuses to replace.
    """
    if os.name == "nt":
        try:
            os.rename(staging, target)
        except FileExistsError as exc:
            raise ProjectExistsError(target) from exc
        except OSError as exc:
            raise ScaffoldFilesystemError("move project into", target, exc) from exc
        return

    try:
        os.mkdir(target)
    except FileExistsError as exc:
        raise ProjectExistsError(target) from exc
    except OSError as exc:
        raise ScaffoldFilesystemError("create directory", target, exc) from exc
    try:
        os.rename(staging, target)
    except OSError as exc:
        with contextlib.suppress(OSError):
            os.rmdir(target)
        raise ScaffoldFilesystemError("move project into", target, exc) from exc

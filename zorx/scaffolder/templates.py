"""Jinja2 rendering of the generated service files.

The template set is fixed: an Express entry file, one router and one
controller, all stored as ``.j2`` files next to this module.  The package
manifest is a plain dict written as JSON by the generator.
"""

from __future__ import annotations

import asyncio
from functools import lru_cache
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .models import TemplateFile

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"

ENTRY_FILE = TemplateFile("app.js", "app.js.j2")
ROUTE_FILE = TemplateFile("src/routes/main.route.js", "main.route.js.j2")
CONTROLLER_FILE = TemplateFile("src/controllers/main.controller.js", "main.controller.js.j2")

TEMPLATE_FILES: tuple[TemplateFile, ...] = (ENTRY_FILE, ROUTE_FILE, CONTROLLER_FILE)

MANIFEST_FILE = "package.json"


class TemplateRenderer:
    """Renders the scaffold's ``.j2`` templates.

    Rendering is plain variable substitution: no autoescaping, undefined
    variables are an error, and trailing newlines are preserved.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        self.template_dir = Path(template_dir or _DEFAULT_TEMPLATE_DIR)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context."""
        return self.env.get_template(template_name).render(**context)

    async def render_to_file(
        self,
        template: TemplateFile,
        project_root: Path,
        context: dict[str, Any],
    ) -> Path:
        """Render *template* and overwrite its file under *project_root*."""
        content = self.render(template.template_name, context)
        out = project_root / template.relative_path
        await asyncio.to_thread(_write_file, out, content)
        return out


@lru_cache(maxsize=1)
def default_renderer() -> TemplateRenderer:
    return TemplateRenderer()


# ---------------------------------------------------------------------------
# Content functions
# ---------------------------------------------------------------------------


def entry_file_content(port: int | str) -> str:
    """Server bootstrap listening on ``process.env.PORT`` or *port*."""
    return default_renderer().render(ENTRY_FILE.template_name, {"port": port})


def route_file_content() -> str:
    """Router exposing ``GET /`` backed by the main controller."""
    return default_renderer().render(ROUTE_FILE.template_name, {})


def controller_file_content() -> str:
    """Handler answering 200 on success and 500 on any error."""
    return default_renderer().render(CONTROLLER_FILE.template_name, {})


def manifest_content(project_name: str) -> dict[str, Any]:
    """The ``package.json`` record that replaces the package manager's own."""
    return {
        "name": project_name,
        "version": "1.0.0",
        "description": "",
        "main": ENTRY_FILE.relative_path,
        "scripts": {
            "start": f"node {ENTRY_FILE.relative_path}",
            "dev": f"node --watch {ENTRY_FILE.relative_path}",
        },
        "keywords": [],
        "author": "",
        "license": "ISC",
        "type": "commonjs",
    }


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")

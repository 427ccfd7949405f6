"""zorx scaffolder -- generates a minimal Express service skeleton.

Quick usage::

    from zorx.scaffolder import ProjectGenerator, ScaffoldRequest

    request = ScaffoldRequest.build(project_name="my-api", port=8080)
    generator = ProjectGenerator(
        request, logger=logger, executor=executor, base_dir=Path.cwd()
    )
    outcome = await generator.generate()
"""

from zorx.scaffolder.generator import DEFAULT_PACKAGES, PROJECT_DIRECTORIES, ProjectGenerator
from zorx.scaffolder.models import (
    CommandOutcome,
    PackageManager,
    ProjectTarget,
    ScaffoldRequest,
    TemplateFile,
)
from zorx.scaffolder.templates import TemplateRenderer

__all__ = [
    "CommandOutcome",
    "DEFAULT_PACKAGES",
    "PROJECT_DIRECTORIES",
    "PackageManager",
    "ProjectGenerator",
    "ProjectTarget",
    "ScaffoldRequest",
    "TemplateFile",
    "TemplateRenderer",
]

"""Creatif project scaffolder.

Downloads the Creatif backend, renders the frontend/backend/Docker templates
and optionally the starter project.

Quick usage::

    from creatif_cli.scaffolder import ProjectGenerator, ProjectOptions

    options = ProjectOptions(app_directory="my-app", project_name="my-app")
    result = await ProjectGenerator(options).create()
    if not result.success:
        print(result.failed_stage.error)
"""

from creatif_cli.scaffolder.generator import ProjectGenerator, ProjectOptions
from creatif_cli.scaffolder.results import ScaffoldResult, StageResult
from creatif_cli.scaffolder.templates import TemplateRenderer

__all__ = [
    "ProjectGenerator",
    "ProjectOptions",
    "ScaffoldResult",
    "StageResult",
    "TemplateRenderer",
]

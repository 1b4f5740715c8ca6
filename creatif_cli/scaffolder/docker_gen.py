"""Docker asset generation for the frontend, the backend and the full stack.

Renders the project-level ``Dockerfile``, ``docker-compose.yml`` and
``.dockerignore`` plus the replacement ``backend/Dockerfile`` (the one that
ships with the backend repository is pruned during relocation).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .templates import TemplateRenderer


class DockerGenerator:
    """Generates Dockerfiles and the Compose file for a scaffolded project."""

    # Template name -> output file name
    _PROJECT_FILES: dict[str, str] = {
        "docker/Dockerfile.j2": "Dockerfile",
        "docker/docker-compose.yml.j2": "docker-compose.yml",
        "docker/dockerignore.j2": ".dockerignore",
    }

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    async def generate_project(
        self,
        output_dir: Path,
        context: dict[str, Any],
    ) -> dict[str, Path]:
        """Generate the frontend Dockerfile, Compose file and ignore file.

        Args:
            output_dir: Project root directory.
            context: Template rendering context.

        Returns:
            Mapping of output file name to written path.
        """
        result: dict[str, Path] = {}
        for template_name, output_name in self._PROJECT_FILES.items():
            result[output_name] = await self.renderer.render_to_file(
                template_name, output_dir / output_name, context
            )
        return result

    async def generate_backend_dockerfile(
        self,
        backend_dir: Path,
        context: dict[str, Any],
    ) -> Path:
        """Generate ``backend/Dockerfile``."""
        return await self.renderer.render_to_file(
            "backend/Dockerfile.j2", backend_dir / "Dockerfile", context
        )

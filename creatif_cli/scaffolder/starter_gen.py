"""Starter project generation.

Renders the ``starter/`` template subtree on top of a prepared project: an
example real-estate app (property and account forms, per-type sub-forms, a
Quill rich text editor), its CSS module, and a web worker that converts files
to base64 on the client.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .templates import TemplateRenderer

STARTER_PREFIX = "starter"


class StarterGenerator:
    """Writes the optional starter project files."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    async def generate(self, project_root: Path, context: dict[str, Any]) -> list[Path]:
        """Render every starter template into *project_root*.

        ``src/App.tsx`` is overwritten with the starter version.

        Returns:
            List of written file paths.
        """
        return await self.renderer.render_tree(STARTER_PREFIX, project_root, context)

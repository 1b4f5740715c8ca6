"""Main scaffolding orchestrator.

Takes ``ProjectOptions`` and produces a Creatif project: a Vite + React
frontend with lint/format configs and Docker assets at the root, and the
companion Go backend unpacked into ``backend/``.

The stages run strictly in order and each returns a ``StageResult``.  The
first failed stage stops the run and triggers a single rollback.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

import httpx
from jinja2 import TemplateError
from pydantic import BaseModel, ConfigDict, Field

from creatif_cli.config import Config
from creatif_cli.utils import console, create_progress, remove_path

from .backend import BackendArchive
from .docker_gen import DockerGenerator
from .passwords import generate_db_password
from .results import ScaffoldResult, StageResult
from .starter_gen import StarterGenerator
from .templates import TemplateRenderer, slugify

BACKEND_DIRNAME = "backend"
DEFAULT_SLUG = "creatif-app"


# ---------------------------------------------------------------------------
# Options model
# ---------------------------------------------------------------------------


class ProjectOptions(BaseModel):
    """What the user asked for.  Captured once, never mutated."""

    model_config = ConfigDict(frozen=True)

    app_directory: str = Field(default="", description="Blank means the current directory")
    project_name: str = Field(..., min_length=1, max_length=200)
    has_starter_project: bool = Field(default=False)


# ---------------------------------------------------------------------------
# Project file catalog
# ---------------------------------------------------------------------------

# Template name -> path relative to the project root
PROJECT_FILES: dict[str, str] = {
    "project/env.j2": ".env",
    "project/gitignore.j2": ".gitignore",
    "project/eslintrc.json.j2": ".eslintrc.json",
    "project/eslintignore.j2": ".eslintignore",
    "project/prettierrc.j2": ".prettierrc",
    "project/prettierignore.j2": ".prettierignore",
    "project/vite.config.mjs.j2": "vite.config.mjs",
    "project/index.html.j2": "index.html",
    "project/package.json.j2": "package.json",
    "project/src/index.tsx.j2": "src/index.tsx",
    "project/src/App.tsx.j2": "src/App.tsx",
    "backend/env.j2": "backend/.env",
}


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Drives the scaffolding stages for one project.

    Stages, in order:
    - ``prepare-directories``: working directory and ``backend/``
    - ``download``: backend zipball
    - ``extract``: unzip into ``backend/``
    - ``relocate``: flatten and prune the extracted tree
    - ``prepare-project``: database secret and every project template
    - ``starter-project``: optional example app
    """

    def __init__(
        self,
        options: ProjectOptions,
        config: Config | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.options = options
        self.config = config or Config()
        self.transport = transport
        self.renderer = TemplateRenderer()
        self.docker_gen = DockerGenerator(self.renderer)
        self.starter_gen = StarterGenerator(self.renderer)

    # -- Public API --------------------------------------------------------

    def resolve_working_directory(self, base_dir: str | Path | None = None) -> Path:
        """Return the directory the project is written into."""
        base = Path(base_dir) if base_dir is not None else Path.cwd()
        app_directory = self.options.app_directory.strip()
        if not app_directory:
            return base.resolve()
        return (base / app_directory).resolve()

    async def create(self, base_dir: str | Path | None = None) -> ScaffoldResult:
        """Scaffold the project.

        Args:
            base_dir: Directory the app directory is resolved against.
                Defaults to the current directory.

        Returns:
            A ``ScaffoldResult``; on failure the run's output has already
            been rolled back.
        """
        root = self.resolve_working_directory(base_dir)
        in_place = not self.options.app_directory.strip()
        result = ScaffoldResult(working_directory=root)

        conflict = self._check_target(root, in_place)
        if conflict is not None:
            result.stages.append(conflict)
            return result

        # an existing (empty) app directory is kept like the current directory
        keep_root = root.is_dir()
        preexisting = {p.name for p in root.iterdir()} if keep_root else set()
        cleanup_root = root if keep_root else _topmost_missing(root)
        backend = BackendArchive(root / BACKEND_DIRNAME, self.config.backend, transport=self.transport)

        stages: list[tuple[str, Callable[[], Awaitable[StageResult]]]] = [
            ("Creating project directories...", lambda: self._prepare_directories(root)),
            ("Downloading backend files...", backend.download),
            ("Extracting backend files...", backend.extract),
            ("Preparing backend directory...", backend.relocate),
            ("Preparing project...", lambda: self._prepare_project(root)),
        ]
        if self.options.has_starter_project:
            stages.append(("Creating starter project...", lambda: self._create_starter_project(root)))

        with create_progress() as progress:
            for description, run_stage in stages:
                task = progress.add_task(description, total=None)
                stage_result = await run_stage()
                progress.remove_task(task)
                result.stages.append(stage_result)

                for warning in stage_result.warnings:
                    console.print(f"  [yellow]![/yellow] {warning}")
                if not stage_result.success:
                    break
                console.print(f"  [green]+[/green] {stage_result.stage}")

        if not result.success:
            result.rolled_back = await asyncio.to_thread(
                self.rollback, cleanup_root, keep_root, preexisting
            )
        return result

    def rollback(self, root: Path, keep_root: bool, preexisting: set[str]) -> bool:
        """Remove what this run created.

        Args:
            root: The topmost directory the run created, or the directory it
                scaffolded into when that already existed.
            keep_root: ``True`` when *root* existed before the run.  Only the
                entries that are not in *preexisting* are removed then.
            preexisting: Entry names found in *root* before the run.

        Returns:
            ``True`` if everything was removed.
        """
        if not keep_root:
            return remove_path(root) is None
        if not root.is_dir():
            return True
        errors = [
            remove_path(entry)
            for entry in root.iterdir()
            if entry.name not in preexisting
        ]
        return not any(errors)

    # -- Context building --------------------------------------------------

    def build_context(self, db_password: str) -> dict[str, Any]:
        """Build the template context shared by every template."""
        db = self.config.database
        server = self.config.server
        return {
            "project_name": self.options.project_name,
            "project_slug": slugify(self.options.project_name) or DEFAULT_SLUG,
            "has_starter_project": self.options.has_starter_project,
            "db_password": db_password,
            "database_user": db.user,
            "database_name": db.name,
            "database_host": db.host,
            "database_port": db.port,
            "database_exposed_port": db.exposed_port,
            "server_host": server.host,
            "server_port": server.port,
            "frontend_port": server.frontend_port,
            "api_host": server.api_host,
            "log_directory": server.log_directory,
            "assets_directory": server.assets_directory,
        }

    # -- Stages ------------------------------------------------------------

    def _check_target(self, root: Path, in_place: bool) -> StageResult | None:
        """Refuse to touch paths this run would not own."""
        if in_place:
            if not root.is_dir():
                return StageResult.failed("prepare-directories", f"{root} is not a directory")
            if (root / BACKEND_DIRNAME).exists():
                return StageResult.failed(
                    "prepare-directories", f"{root / BACKEND_DIRNAME} already exists"
                )
        elif root.exists() and not _is_empty_dir(root):
            return StageResult.failed(
                "prepare-directories", f"{root} already exists and is not an empty directory"
            )
        return None

    async def _prepare_directories(self, root: Path) -> StageResult:
        try:
            await asyncio.to_thread(root.mkdir, parents=True, exist_ok=True)
            await asyncio.to_thread((root / BACKEND_DIRNAME).mkdir)
        except OSError as exc:
            return StageResult.failed(
                "prepare-directories", f"Cannot create required directories: {exc}"
            )
        return StageResult(stage="prepare-directories")

    async def _prepare_project(self, root: Path) -> StageResult:
        try:
            db_password = await generate_db_password(self.config.password)
        except ValueError as exc:
            return StageResult.failed("prepare-project", f"Unable to generate a strong password: {exc}")

        context = self.build_context(db_password)
        written: list[Path] = []
        try:
            await asyncio.to_thread((root / "src").mkdir, exist_ok=True)
            for template_name, output_name in PROJECT_FILES.items():
                written.append(
                    await self.renderer.render_to_file(template_name, root / output_name, context)
                )
            written.extend((await self.docker_gen.generate_project(root, context)).values())
            written.append(
                await self.docker_gen.generate_backend_dockerfile(root / BACKEND_DIRNAME, context)
            )
        except (OSError, TemplateError) as exc:
            return StageResult.failed(
                "prepare-project", f"Failed writing project files: {exc}", written=written
            )
        return StageResult(stage="prepare-project", written=written)

    async def _create_starter_project(self, root: Path) -> StageResult:
        # the secret is only used by the env templates, which this stage does not touch
        context = self.build_context(db_password="")
        try:
            written = await self.starter_gen.generate(root, context)
        except (OSError, TemplateError) as exc:
            return StageResult.failed("starter-project", f"Failed writing starter project: {exc}")
        return StageResult(stage="starter-project", written=written)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _is_empty_dir(path: Path) -> bool:
    return path.is_dir() and not any(path.iterdir())


def _topmost_missing(path: Path) -> Path:
    """Return the highest ancestor of *path* (or *path*) that does not exist."""
    topmost = path
    for parent in path.parents:
        if parent.exists():
            break
        topmost = parent
    return topmost

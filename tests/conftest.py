"""Shared pytest fixtures for the creatif-cli test suite.

Provides reusable fixtures for:
- An in-memory GitHub-style backend zipball
- ``httpx.MockTransport`` instances serving it (or failing)
- A fast ``Config`` (low bcrypt cost) and sample ``ProjectOptions``
"""

from __future__ import annotations

import io
import zipfile
from pathlib import Path

import httpx
import pytest

from creatif_cli.config import Config, PasswordConfig
from creatif_cli.scaffolder import ProjectOptions


ARCHIVE_ROOT = "Creatif-creatif-backend-1a2b3c4"

BACKEND_FILES: dict[str, str] = {
    "go.mod": "module creatif\n\ngo 1.22\n",
    "go.sum": "",
    "main.go": "package main\n\nfunc main() {}\n",
    "README.md": "# creatif-backend\n",
    "app/http/server.go": "package http\n",
    "Dockerfile": "FROM golang:1.22\n",
    "docker-compose.yml": "services: {}\n",
    "pgx_ulid/Dockerfile": "FROM postgres\n",
    "pgx_ulid/src/lib.rs": "// ulid\n",
    "docker-entrypoint-initdb.d/init.sql": "CREATE EXTENSION ulid;\n",
}


def build_zip(files: dict[str, str], root: str | None = ARCHIVE_ROOT) -> bytes:
    """Build a zip archive in memory, optionally nested under *root*."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, content in files.items():
            arcname = f"{root}/{name}" if root else name
            zf.writestr(arcname, content)
    return buffer.getvalue()


def archive_transport(body: bytes, status_code: int = 200) -> httpx.MockTransport:
    """Transport answering every request with *body* and *status_code*."""
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status_code, content=body)

    transport = httpx.MockTransport(handler)
    transport.requests = requests  # type: ignore[attr-defined]
    return transport


# ---------------------------------------------------------------------------
# Archives & transports
# ---------------------------------------------------------------------------

@pytest.fixture
def backend_zip() -> bytes:
    """A zipball shaped like GitHub's: one top-level ``<owner>-<repo>-<sha>/``."""
    return build_zip(BACKEND_FILES)


@pytest.fixture
def zip_transport(backend_zip: bytes) -> httpx.MockTransport:
    """Transport serving the backend zipball with HTTP 200."""
    return archive_transport(backend_zip)


@pytest.fixture
def not_found_transport() -> httpx.MockTransport:
    """Transport answering every request with HTTP 404."""
    return archive_transport(b'{"message": "Not Found"}', status_code=404)


# ---------------------------------------------------------------------------
# Config & options
# ---------------------------------------------------------------------------

@pytest.fixture
def fast_config() -> Config:
    """Default config with the minimum bcrypt cost to keep tests quick."""
    return Config(password=PasswordConfig(rounds=4))


@pytest.fixture
def options() -> ProjectOptions:
    """Options that scaffold into a new ``my-app`` subdirectory."""
    return ProjectOptions(app_directory="my-app", project_name="my-app")


@pytest.fixture
def starter_options() -> ProjectOptions:
    """Like ``options`` but with the starter project enabled."""
    return ProjectOptions(
        app_directory="estate",
        project_name="Estate Manager",
        has_starter_project=True,
    )


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Empty directory that stands in for the user's current directory."""
    ws = tmp_path / "workspace"
    ws.mkdir()
    return ws

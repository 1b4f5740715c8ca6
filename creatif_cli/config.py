"""creatif-cli configuration.

Centralised, typed configuration for the scaffolder. All settings use Pydantic
v2 models so they can be validated at construction time and loaded from JSON
or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_PASSWORD_ALPHABET = (
    "abcdefghijklmnopqrstuvwxyz"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "0123456789"
    "!#%&()*+,-.:;<=>?@[]^_{|}~"
)


class BackendConfig(BaseModel):
    """Where the companion backend repository is fetched from."""

    repository: str = Field(default="Creatif/creatif-backend", description="GitHub owner/name")
    api_url: str = Field(default="https://api.github.com")
    archive_name: str = Field(default="backend.zip")
    timeout: int = Field(default=60, ge=5, description="Download timeout in seconds")
    excluded_paths: list[str] = Field(
        default_factory=lambda: [
            "pgx_ulid",
            "docker-entrypoint-initdb.d",
            "Dockerfile",
            "docker-compose.yml",
        ],
        description="Entries pruned from the extracted repository",
    )
    github_token: str | None = Field(default=None, description="Optional API token (rate limits)")

    @property
    def archive_url(self) -> str:
        """The GitHub API zipball endpoint for :attr:`repository`."""
        return f"{self.api_url.rstrip('/')}/repos/{self.repository}/zipball"


class DatabaseConfig(BaseModel):
    """Database settings written into the generated ``.env`` files."""

    user: str = Field(default="api")
    name: str = Field(default="api")
    host: str = Field(default="db")
    port: int = Field(default=5432, ge=1, le=65535)
    exposed_port: int = Field(default=54333, ge=1, le=65535)


class ServerConfig(BaseModel):
    """Backend/frontend server settings for the generated project."""

    host: str = Field(default="localhost")
    port: int = Field(default=3002, ge=1, le=65535)
    frontend_port: int = Field(default=5173, ge=1, le=65535)
    log_directory: str = Field(default="/app/var/log")
    assets_directory: str = Field(default="/app/assets")

    @property
    def api_host(self) -> str:
        """URL the frontend uses to reach the backend."""
        return f"http://{self.host}:{self.port}"


class PasswordConfig(BaseModel):
    """Database secret generation parameters."""

    length: int = Field(default=20, ge=8, le=256)
    rounds: int = Field(default=10, ge=4, le=31, description="bcrypt cost factor")
    alphabet: str = Field(default=DEFAULT_PASSWORD_ALPHABET, min_length=10)


class Config(BaseModel):
    """Global creatif-cli configuration.

    Instances are created once by the CLI entry point and then passed to the
    ``ProjectGenerator``.
    """

    backend: BackendConfig = Field(default_factory=BackendConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    password: PasswordConfig = Field(default_factory=PasswordConfig)

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a configuration from a JSON file.

        Args:
            path: The JSON file to read.

        Returns:
            A validated ``Config`` instance.
        """
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            CREATIF_BACKEND_REPOSITORY, CREATIF_BACKEND_TIMEOUT,
            CREATIF_PASSWORD_LENGTH, CREATIF_SERVER_PORT,
            CREATIF_FRONTEND_PORT, GH_TOKEN / GITHUB_TOKEN.
        """
        backend_kwargs: dict[str, Any] = {}
        if os.environ.get("CREATIF_BACKEND_REPOSITORY"):
            backend_kwargs["repository"] = os.environ["CREATIF_BACKEND_REPOSITORY"]
        if os.environ.get("CREATIF_BACKEND_TIMEOUT"):
            backend_kwargs["timeout"] = int(os.environ["CREATIF_BACKEND_TIMEOUT"])
        token = (os.environ.get("GH_TOKEN") or os.environ.get("GITHUB_TOKEN") or "").strip()
        if token:
            backend_kwargs["github_token"] = token

        server_kwargs: dict[str, Any] = {}
        if os.environ.get("CREATIF_SERVER_PORT"):
            server_kwargs["port"] = int(os.environ["CREATIF_SERVER_PORT"])
        if os.environ.get("CREATIF_FRONTEND_PORT"):
            server_kwargs["frontend_port"] = int(os.environ["CREATIF_FRONTEND_PORT"])

        password_kwargs: dict[str, Any] = {}
        if os.environ.get("CREATIF_PASSWORD_LENGTH"):
            password_kwargs["length"] = int(os.environ["CREATIF_PASSWORD_LENGTH"])

        return cls(
            backend=BackendConfig(**backend_kwargs),
            server=ServerConfig(**server_kwargs),
            password=PasswordConfig(**password_kwargs),
        )

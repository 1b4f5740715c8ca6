"""Backend repository fetching, extraction and relocation.

The companion backend is pulled as a GitHub zipball, unpacked into the
project's ``backend/`` directory and flattened.  GitHub zipballs contain a
single top-level directory (``<owner>-<repo>-<sha>/``); that layout is
treated as a contract and anything else fails the ``relocate`` stage.

Each public method returns a :class:`StageResult` and never raises for
expected failures (HTTP errors, corrupt archives, file-system errors).
"""

from __future__ import annotations

import asyncio
import shutil
import zipfile
from pathlib import Path

import httpx

from creatif_cli.config import BackendConfig
from creatif_cli.utils import remove_path

from .results import StageResult


class BackendArchive:
    """Downloads and unpacks the backend repository into ``backend_dir``."""

    def __init__(
        self,
        backend_dir: str | Path,
        config: BackendConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.backend_dir = Path(backend_dir)
        self.config = config or BackendConfig()
        self.transport = transport

    @property
    def archive_path(self) -> Path:
        return self.backend_dir / self.config.archive_name

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` with our timeout and auth headers."""
        headers = {"Accept": "application/vnd.github+json"}
        if self.config.github_token:
            headers["Authorization"] = f"Bearer {self.config.github_token}"
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.config.timeout, connect=10.0),
            headers=headers,
            follow_redirects=True,
            transport=self.transport,
        )

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    async def download(self) -> StageResult:
        """Stream the zipball into :attr:`archive_path`."""
        url = self.config.archive_url
        try:
            async with self._client() as client:
                async with client.stream("GET", url) as response:
                    if not response.is_success:
                        return StageResult.failed(
                            "download",
                            f"A {response.status_code} error occurred while fetching "
                            f"the backend repository from {url}",
                        )
                    fh = await asyncio.to_thread(self.archive_path.open, "wb")
                    try:
                        async for chunk in response.aiter_bytes():
                            await asyncio.to_thread(fh.write, chunk)
                    finally:
                        await asyncio.to_thread(fh.close)
        except httpx.ConnectError:
            self._discard_archive()
            return StageResult.failed("download", f"Cannot connect to {url}")
        except httpx.TimeoutException:
            self._discard_archive()
            return StageResult.failed(
                "download", f"Downloading {url} timed out after {self.config.timeout}s"
            )
        except (httpx.HTTPError, OSError) as exc:
            self._discard_archive()
            return StageResult.failed(
                "download", f"An error occurred while fetching the backend repository: {exc}"
            )

        return StageResult(stage="download", written=[self.archive_path])

    async def extract(self) -> StageResult:
        """Unpack the downloaded archive into :attr:`backend_dir`."""
        if not self.archive_path.is_file():
            return StageResult.failed("extract", f"Archive not found: {self.archive_path}")
        try:
            await asyncio.to_thread(_extract_zip, self.archive_path, self.backend_dir)
        except (zipfile.BadZipFile, OSError) as exc:
            return StageResult.failed("extract", f"Cannot extract backend archive: {exc}")
        return StageResult(stage="extract")

    async def relocate(self) -> StageResult:
        """Flatten the extracted tree and prune unwanted entries.

        Removing the archive, the emptied nested directory and the excluded
        entries is best-effort: failures become warnings.  A violated layout
        contract or a failed move is fatal.
        """
        warnings: list[str] = []

        error = remove_path(self.archive_path)
        if error:
            warnings.append(f"Failed to remove the backend archive, remove it manually: {error}")

        top_level = sorted(p for p in self.backend_dir.iterdir() if p.name != self.config.archive_name)
        directories = [p for p in top_level if p.is_dir()]
        if len(top_level) != 1 or len(directories) != 1:
            names = ", ".join(p.name for p in top_level) or "(nothing)"
            return StageResult.failed(
                "relocate",
                f"Expected exactly one top-level directory in the backend archive, found: {names}",
                warnings=warnings,
            )
        extracted = directories[0]

        try:
            await asyncio.to_thread(_move_contents, extracted, self.backend_dir)
        except (OSError, shutil.Error) as exc:
            return StageResult.failed(
                "relocate", f"Failed moving backend project directories: {exc}", warnings=warnings
            )

        error = remove_path(extracted)
        if error:
            warnings.append(f"Failed to remove the unpacked directory, remove it manually: {error}")

        for name in self.config.excluded_paths:
            error = remove_path(self.backend_dir / name)
            if error:
                warnings.append(f"Failed to fully prepare the backend directory: {error}")

        return StageResult(stage="relocate", warnings=warnings)

    # ------------------------------------------------------------------

    def _discard_archive(self) -> None:
        # partial download; the rollback removes the directory anyway
        remove_path(self.archive_path)


def _extract_zip(archive: Path, target: Path) -> None:
    with zipfile.ZipFile(archive) as zf:
        bad = zf.testzip()
        if bad is not None:
            raise zipfile.BadZipFile(f"corrupt member {bad}")
        zf.extractall(target)


def _move_contents(source: Path, target: Path) -> None:
    for item in sorted(source.iterdir()):
        shutil.move(str(item), str(target / item.name))

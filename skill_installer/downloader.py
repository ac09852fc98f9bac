"""Mirror a GitHub repository directory into a local staging tree.

The tree is walked with a worklist drained by a fixed number of worker
tasks, so a large repository never opens more than ``max_concurrency``
connections at once.
"""

from __future__ import annotations

import asyncio
import shutil
import tempfile
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator

from pydantic import ValidationError

from skill_installer.errors import FilesystemError, InvalidApiResponseError, SkillInstallError
from skill_installer.fetcher import Fetcher
from skill_installer.models import GITHUB_API_BASE, GitHubDirectory, ListingEntry
from skill_installer.utils import get_logger

logger = get_logger(__name__)

STAGING_PREFIX = "skill-install-"


@dataclass
class _ListingJob:
    url: str
    target: Path


@dataclass
class _FileJob:
    url: str
    target: Path


def _safe_entry_name(name: str) -> str:
    if not name or name in (".", "..") or "/" in name or "\\" in name or "\x00" in name:
        raise InvalidApiResponseError(f"Refusing unsafe entry name from GitHub API: {name!r}")
    return name


def remove_staging_dir(path: Path, prefix: str = STAGING_PREFIX) -> None:
    """Delete a staging tree created by this installer; failures are ignored."""
    if not path.name.startswith(prefix):
        logger.warning(f"Not removing {path}: not a staging directory")
        return
    shutil.rmtree(path, ignore_errors=True)
    logger.debug(f"Removed staging directory {path}")


class DirectoryDownloader:
    """Download every file below a GitHub directory.

    Example:
        >>> downloader = DirectoryDownloader(fetcher, max_concurrency=8)
        >>> async with downloader.staged(ref) as staging_dir:
        ...     installer.install_directory(staging_dir)
    """

    def __init__(
        self,
        fetcher: Fetcher,
        max_concurrency: int = 8,
        api_base: str = GITHUB_API_BASE,
        staging_prefix: str = STAGING_PREFIX,
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.fetcher = fetcher
        self.max_concurrency = max_concurrency
        self.api_base = api_base
        self.staging_prefix = staging_prefix

    @asynccontextmanager
    async def staged(self, ref: GitHubDirectory) -> AsyncIterator[Path]:
        """Download ``ref`` into a fresh staging directory and yield its path.

        The staging directory is removed when the block exits, whether the
        download, the caller or neither failed.
        """
        try:
            staging_dir = Path(tempfile.mkdtemp(prefix=self.staging_prefix))
        except OSError as e:
            raise FilesystemError(f"Cannot create staging directory: {e}") from e

        try:
            await self.download(ref, staging_dir)
            yield staging_dir
        finally:
            remove_staging_dir(staging_dir, self.staging_prefix)

    async def download(self, ref: GitHubDirectory, target_dir: Path) -> list[Path]:
        """Mirror ``ref`` into ``target_dir``.

        Args:
            ref: Repository directory to fetch.
            target_dir: Existing local directory that receives the tree.

        Returns:
            Paths of the downloaded files, in completion order.

        Raises:
            SkillInstallError: The first listing, download or write failure.
                Outstanding work is abandoned.
        """
        logger.info(f"Downloading from GitHub: {ref.display_name}")

        queue: asyncio.Queue[_ListingJob | _FileJob] = asyncio.Queue()
        errors: list[BaseException] = []
        written: list[Path] = []

        queue.put_nowait(_ListingJob(ref.api_url(self.api_base), target_dir))

        workers = [
            asyncio.create_task(self._worker(queue, errors, written, target_dir))
            for _ in range(self.max_concurrency)
        ]
        try:
            await queue.join()
        finally:
            for worker in workers:
                worker.cancel()
            await asyncio.gather(*workers, return_exceptions=True)

        if errors:
            raise errors[0]
        return written

    async def _worker(
        self,
        queue: asyncio.Queue[_ListingJob | _FileJob],
        errors: list[BaseException],
        written: list[Path],
        root: Path,
    ) -> None:
        while True:
            job = await queue.get()
            try:
                # After the first failure the queue is only drained
                if not errors:
                    if isinstance(job, _ListingJob):
                        await self._list(job, queue)
                    else:
                        written.append(await self._download_file(job, root))
            except SkillInstallError as e:
                errors.append(e)
            except Exception as e:
                logger.exception(f"Unexpected error while downloading {job.url}")
                errors.append(e)
            finally:
                queue.task_done()

    async def _list(self, job: _ListingJob, queue: asyncio.Queue) -> None:
        data = await self.fetcher.fetch_json(job.url, use_auth=True)
        if not isinstance(data, list):
            raise InvalidApiResponseError("Invalid response from GitHub API")

        for raw in data:
            try:
                entry = ListingEntry.model_validate(raw)
            except ValidationError as e:
                raise InvalidApiResponseError(f"Invalid entry in GitHub API listing: {e}") from e

            name = _safe_entry_name(entry.name)
            if entry.type == "file":
                if not entry.download_url:
                    raise InvalidApiResponseError(f"No download_url for file {name}")
                queue.put_nowait(_FileJob(entry.download_url, job.target / name))
            elif entry.type == "dir":
                if not entry.url:
                    raise InvalidApiResponseError(f"No listing url for directory {name}")
                subdir = job.target / name
                try:
                    subdir.mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    raise FilesystemError(f"Cannot create directory {subdir}: {e}") from e
                queue.put_nowait(_ListingJob(entry.url, subdir))
            else:
                logger.debug(f"Skipping {entry.type} entry {name}")

    async def _download_file(self, job: _FileJob, root: Path) -> Path:
        # Pre-signed raw URLs; the token stays with the API host
        content = await self.fetcher.fetch_bytes(job.url)
        try:
            job.target.write_bytes(content)
        except OSError as e:
            raise FilesystemError(f"Cannot write {job.target}: {e}") from e
        logger.info(f"Downloaded: {job.target.relative_to(root).as_posix()}")
        return job.target

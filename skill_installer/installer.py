"""Install skills into the Claude and Codex skill roots."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import TYPE_CHECKING

from skill_installer.downloader import DirectoryDownloader
from skill_installer.errors import FilesystemError, InvalidSkillNameError, MissingSkillFileError
from skill_installer.fetcher import Fetcher
from skill_installer.frontmatter import extract_name
from skill_installer.models import GitHubDirectory, InstallResult
from skill_installer.sources import classify, to_raw_url
from skill_installer.utils import get_logger

if TYPE_CHECKING:
    from skill_installer.config import InstallerConfig

logger = get_logger(__name__)

SKILL_FILE = "SKILL.md"
DEFAULT_SKILL_NAME = "downloaded-skill"


def ensure_dir(path: Path) -> None:
    """Create ``path`` and its parents if missing."""
    if path.is_dir():
        return
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"Cannot create directory {path}: {e}") from e
    logger.info(f"Created directory: {path}")


def validate_skill_name(name: str) -> str:
    """Reject names that would escape or alias the skill root."""
    if not name or name in (".", "..") or "/" in name or "\\" in name or "\x00" in name:
        raise InvalidSkillNameError(f"Invalid skill name: {name!r}")
    return name


def find_skill_file(source_dir: Path) -> Path:
    """Locate SKILL.md (any case) at the top level of ``source_dir``."""
    try:
        entries = sorted(source_dir.iterdir())
    except OSError as e:
        raise FilesystemError(f"Cannot read directory {source_dir}: {e}") from e

    for entry in entries:
        if entry.name.lower() == SKILL_FILE.lower() and entry.is_file():
            return entry
    raise MissingSkillFileError("No SKILL.md file found in the directory")


def copy_tree(src: Path, dest: Path) -> list[str]:
    """Copy ``src`` into ``dest`` file by file, merging with existing content.

    Returns:
        Relative POSIX paths of the copied files.
    """
    try:
        shutil.copytree(src, dest, dirs_exist_ok=True)
    except (OSError, shutil.Error) as e:
        raise FilesystemError(f"Cannot copy {src} to {dest}: {e}") from e
    return sorted(p.relative_to(src).as_posix() for p in src.rglob("*") if p.is_file())


class SkillInstaller:
    """Install a skill from a URL into every destination root.

    Handles:
    - Single skill files (direct links and github.com blob links)
    - GitHub directories, staged locally and copied as a whole

    Destination writes are sequential; a failure on a later root leaves the
    earlier roots written.

    Example:
        >>> async with Fetcher.from_config(cfg) as fetcher:
        ...     installer = SkillInstaller(cfg.destinations.roots, fetcher)
        ...     result = await installer.install("https://github.com/o/r/tree/main/skills/x")
    """

    def __init__(
        self,
        roots: list[Path],
        fetcher: Fetcher,
        downloader: DirectoryDownloader | None = None,
    ):
        self.roots = [Path(root) for root in roots]
        self.fetcher = fetcher
        self.downloader = downloader or DirectoryDownloader(fetcher)

    @classmethod
    def from_config(cls, config: "InstallerConfig", fetcher: Fetcher) -> "SkillInstaller":
        """Create an installer wired to the configured roots and download limits."""
        downloader = DirectoryDownloader(
            fetcher,
            max_concurrency=config.download.max_concurrency,
            api_base=config.github.api_base,
            staging_prefix=config.download.staging_prefix,
        )
        return cls(config.destinations.roots, fetcher, downloader)

    def ensure_roots(self) -> None:
        for root in self.roots:
            ensure_dir(root)

    async def install(self, url: str, skill_name: str | None = None) -> InstallResult:
        """Install the skill at ``url``.

        Args:
            url: Direct file URL, github.com blob URL or github.com tree URL.
            skill_name: Overrides the name declared in the frontmatter.

        Returns:
            Where and under which name the skill was installed.
        """
        self.ensure_roots()

        source = classify(url)
        if isinstance(source, GitHubDirectory):
            async with self.downloader.staged(source) as staging_dir:
                return self.install_directory(staging_dir, skill_name)
        return await self.install_file(url, skill_name)

    async def install_file(self, url: str, skill_name: str | None = None) -> InstallResult:
        """Download one skill file and write it as SKILL.md under every root."""
        logger.info(f"Downloading skill file from: {url}")
        content = await self.fetcher.fetch_bytes(to_raw_url(url))

        name = skill_name or extract_name(
            content.decode("utf-8", errors="replace"), DEFAULT_SKILL_NAME
        )
        validate_skill_name(name)

        destinations = []
        for root in self.roots:
            skill_dir = root / name
            ensure_dir(skill_dir)
            target = skill_dir / SKILL_FILE
            try:
                target.write_bytes(content)
            except OSError as e:
                raise FilesystemError(f"Cannot write {target}: {e}") from e
            destinations.append(skill_dir)

        logger.info(f"Installed skill {name!r} to {', '.join(map(str, destinations))}")
        return InstallResult(name=name, destinations=destinations, files=[SKILL_FILE])

    def install_directory(self, source_dir: Path, skill_name: str | None = None) -> InstallResult:
        """Copy a staged skill directory under every root.

        Raises:
            MissingSkillFileError: No SKILL.md at the top of ``source_dir``;
                nothing is written in that case.
        """
        skill_file = find_skill_file(source_dir)
        try:
            content = skill_file.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise FilesystemError(f"Cannot read {skill_file}: {e}") from e

        name = skill_name or extract_name(content, source_dir.name)
        validate_skill_name(name)

        logger.info("Installing skill directory...")
        destinations = []
        files: list[str] = []
        for root in self.roots:
            skill_dir = root / name
            files = copy_tree(source_dir, skill_dir)
            destinations.append(skill_dir)

        logger.info(f"Installed skill {name!r} to {', '.join(map(str, destinations))}")
        return InstallResult(name=name, destinations=destinations, files=files)

"""Data models for skill sources and install results."""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Union
from urllib.parse import quote

from pydantic import BaseModel, Field

GITHUB_API_BASE = "https://api.github.com"


class DirectFile(BaseModel):
    """A URL that is downloaded as-is."""
    kind: Literal["file"] = "file"
    url: str


class GitHubBlob(BaseModel):
    """A github.com blob page, fetched through raw.githubusercontent.com."""
    kind: Literal["blob"] = "blob"
    url: str
    raw_url: str


class GitHubDirectory(BaseModel):
    """A directory inside a GitHub repository at a given branch."""
    kind: Literal["directory"] = "directory"
    owner: str
    repo: str
    branch: str
    path: str

    def api_url(self, api_base: str = GITHUB_API_BASE) -> str:
        """Contents API URL listing this directory."""
        return (
            f"{api_base.rstrip('/')}/repos/{self.owner}/{self.repo}/contents/"
            f"{quote(self.path)}?ref={quote(self.branch, safe='')}"
        )

    @property
    def display_name(self) -> str:
        return f"{self.owner}/{self.repo}/{self.path}"


SourceReference = Union[DirectFile, GitHubBlob, GitHubDirectory]


class ListingEntry(BaseModel):
    """One element of a GitHub contents API directory listing.

    Unknown keys (sha, size, html_url, ...) are ignored.
    """
    type: str
    name: str
    download_url: str | None = None
    url: str | None = None


class InstallResult(BaseModel):
    """Outcome of a successful install."""
    name: str
    destinations: list[Path] = Field(default_factory=list)
    files: list[str] = Field(default_factory=list)

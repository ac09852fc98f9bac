"""Classify skill URLs into direct files, GitHub blobs and GitHub directories."""

from __future__ import annotations

import re
from urllib.parse import unquote, urlsplit, urlunsplit

from skill_installer.errors import InvalidUrlError
from skill_installer.models import DirectFile, GitHubBlob, GitHubDirectory, SourceReference

GITHUB_HOST = "github.com"
GITHUB_WEB_HOSTS = ("github.com", "www.github.com")
RAW_HOST = "raw.githubusercontent.com"

# github.com/OWNER/REPO/tree/BRANCH/PATH, PATH may contain slashes
TREE_RE = re.compile(r"github\.com/([^/]+)/([^/]+)/tree/([^/]+)/(.+)")


def is_github_directory(url: str) -> bool:
    """True when the URL looks like a GitHub tree view."""
    return GITHUB_HOST in url and "/tree/" in url


def is_github_blob(url: str) -> bool:
    """True when the URL is a github.com blob page rather than raw content."""
    parts = urlsplit(url)
    return parts.hostname in GITHUB_WEB_HOSTS and "/blob/" in parts.path


def to_raw_url(url: str) -> str:
    """Rewrite a github.com blob URL to its raw.githubusercontent.com form.

    Raw and non-GitHub URLs are returned unchanged, so the rewrite is
    idempotent.
    """
    if not is_github_blob(url):
        return url
    parts = urlsplit(url)
    return urlunsplit(parts._replace(netloc=RAW_HOST, path=parts.path.replace("/blob/", "/", 1)))


def parse_github_directory(url: str) -> GitHubDirectory:
    """Split a tree URL into owner, repo, branch and path.

    Raises:
        InvalidUrlError: The URL does not have the tree shape.
    """
    # Drop query string and fragment; scheme-less inputs have no netloc
    parts = urlsplit(url)
    if parts.netloc:
        target = f"{parts.netloc}{parts.path}"
    else:
        target = url.split("?", 1)[0].split("#", 1)[0]
    match = TREE_RE.search(target.rstrip("/"))
    if not match:
        raise InvalidUrlError(f"Invalid GitHub directory URL: {url}")

    owner, repo, branch, path = match.groups()
    return GitHubDirectory(
        owner=owner,
        repo=repo,
        branch=unquote(branch),
        path=unquote(path),
    )


def classify(url: str) -> SourceReference:
    """Decide how a skill URL should be fetched.

    Every URL resolves to exactly one source kind; anything that is not a
    GitHub tree or blob link is a direct file.
    """
    if is_github_directory(url):
        return parse_github_directory(url)
    if is_github_blob(url):
        return GitHubBlob(url=url, raw_url=to_raw_url(url))
    return DirectFile(url=url)

"""Exceptions raised while installing a skill.

Every error derives from :class:`SkillInstallError` so the CLI can report any
failure with a single handler.
"""

from __future__ import annotations


class SkillInstallError(Exception):
    """Base class for all installer errors."""


class NetworkError(SkillInstallError):
    """Connection, DNS, TLS or timeout failure."""


class HttpStatusError(SkillInstallError):
    """Server answered with a status other than 200 or a followed redirect."""

    def __init__(
        self,
        status_code: int,
        reason: str = "",
        url: str | None = None,
        message: str | None = None,
    ):
        self.status_code = status_code
        self.reason = reason
        self.url = url
        super().__init__(message or f"Failed to download: {status_code} {reason}".rstrip())


class RateLimitError(HttpStatusError):
    """403 from the GitHub API, usually an exhausted anonymous rate limit."""

    def __init__(self, url: str | None = None):
        super().__init__(
            403,
            "Forbidden",
            url,
            message=(
                "GitHub API rate limit exceeded. Set GITHUB_TOKEN environment "
                "variable or try again later."
            ),
        )


class TooManyRedirectsError(SkillInstallError):
    """Redirect chain exceeded the configured hop limit."""


class InvalidUrlError(SkillInstallError):
    """URL cannot be used as a skill source."""


class InvalidApiResponseError(SkillInstallError):
    """Directory listing response did not have the expected shape."""


class MissingSkillFileError(SkillInstallError):
    """Source directory has no SKILL.md at its top level."""


class InvalidSkillNameError(SkillInstallError):
    """Resolved skill name is not usable as a directory name."""


class FilesystemError(SkillInstallError):
    """Reading, writing or creating a local path failed."""

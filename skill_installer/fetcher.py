"""HTTP retrieval with manual redirect handling and scoped API auth.

Usage::

    async with Fetcher.from_config(cfg) as fetcher:
        listing = await fetcher.fetch_json(api_url, use_auth=True)
        body = await fetcher.fetch_bytes(download_url)
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import httpx

from skill_installer.errors import (
    HttpStatusError,
    InvalidApiResponseError,
    InvalidUrlError,
    NetworkError,
    RateLimitError,
    TooManyRedirectsError,
)
from skill_installer.utils import get_logger

if TYPE_CHECKING:
    from skill_installer.config import InstallerConfig

logger = get_logger(__name__)

REDIRECT_STATUSES = (301, 302)


class Fetcher:
    """GET requests against file hosts and the GitHub contents API.

    Redirects are followed by hand so the bearer token can be restricted to
    the API host, and so every chain is bounded by ``max_redirects``.

    Args:
        client: Shared async HTTP client. Its own redirect following is
            bypassed per request.
        token: Optional GitHub token, attached only to ``use_auth`` requests
            whose host is ``api_host``.
        api_host: Host that may receive the token.
        user_agent: Value of the User-Agent header.
        max_redirects: Maximum number of 301/302 hops per fetch.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: str = "",
        api_host: str = "api.github.com",
        user_agent: str = "Claude-Skill-Installer",
        max_redirects: int = 10,
    ) -> None:
        self._client = client
        self._token = token
        self._api_host = api_host
        self._user_agent = user_agent
        self._max_redirects = max_redirects

    @classmethod
    def from_config(cls, config: "InstallerConfig") -> "Fetcher":
        """Build a fetcher owning its own client from an InstallerConfig."""
        client = httpx.AsyncClient(
            timeout=httpx.Timeout(config.http.timeout_seconds),
            follow_redirects=False,
        )
        return cls(
            client,
            token=config.github.token,
            api_host=config.github.api_host,
            user_agent=config.github.user_agent,
            max_redirects=config.http.max_redirects,
        )

    async def __aenter__(self) -> "Fetcher":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self, url: httpx.URL, use_auth: bool) -> dict[str, str]:
        headers = {"User-Agent": self._user_agent}
        if use_auth and url.host == self._api_host:
            headers["Accept"] = "application/vnd.github+json"
            if self._token:
                headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def fetch_bytes(self, url: str, use_auth: bool = False) -> bytes:
        """GET ``url`` and return the body of the final 200 response.

        Args:
            url: Absolute http(s) URL.
            use_auth: The request targets the GitHub API; enables the token
                and turns a 403 into RateLimitError.

        Raises:
            InvalidUrlError: URL cannot be parsed or has no usable scheme.
            NetworkError: Transport-level or body decoding failure.
            RateLimitError: 403 on an authenticated API request.
            HttpStatusError: Any other status besides 200/301/302.
            TooManyRedirectsError: More than ``max_redirects`` hops.
        """
        try:
            current = httpx.URL(url)
        except httpx.InvalidURL as e:
            raise InvalidUrlError(f"Invalid URL {url!r}: {e}") from e

        for _ in range(self._max_redirects + 1):
            response = await self._get(current, use_auth)

            if response.status_code in REDIRECT_STATUSES:
                location = response.headers.get("location")
                if not location:
                    raise HttpStatusError(
                        response.status_code, response.reason_phrase, str(current),
                        message=f"Redirect without Location header from {current}",
                    )
                next_url = current.join(location)
                logger.debug(f"Redirect {response.status_code}: {current} -> {next_url}")
                current = next_url
                continue

            if response.status_code == 403 and use_auth:
                raise RateLimitError(str(current))

            if response.status_code != 200:
                raise HttpStatusError(
                    response.status_code, response.reason_phrase, str(current)
                )

            return response.content

        raise TooManyRedirectsError(
            f"Too many redirects (more than {self._max_redirects}) fetching {url}"
        )

    async def _get(self, url: httpx.URL, use_auth: bool) -> httpx.Response:
        if url.scheme not in ("http", "https"):
            raise InvalidUrlError(f"Unsupported URL scheme: {url}")
        try:
            return await self._client.get(
                url, headers=self._headers(url, use_auth), follow_redirects=False
            )
        except httpx.RequestError as e:
            # TransportError plus body decoding failures
            raise NetworkError(f"Request to {url} failed: {e}") from e
        except httpx.InvalidURL as e:
            raise InvalidUrlError(f"Invalid URL {url}: {e}") from e

    async def fetch_text(self, url: str, use_auth: bool = False) -> str:
        """Like :meth:`fetch_bytes`, decoded as UTF-8."""
        content = await self.fetch_bytes(url, use_auth=use_auth)
        return content.decode("utf-8", errors="replace")

    async def fetch_json(self, url: str, use_auth: bool = False) -> Any:
        """Like :meth:`fetch_text`, parsed as JSON.

        Raises:
            InvalidApiResponseError: Body is not valid JSON.
        """
        text = await self.fetch_text(url, use_auth=use_auth)
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidApiResponseError(f"Invalid response from GitHub API: {e}") from e

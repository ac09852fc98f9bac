"""Shared fixtures: a fake GitHub served through httpx.MockTransport."""

from __future__ import annotations

import json
import tempfile
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest
import pytest_asyncio

from skill_installer.fetcher import Fetcher

Route = Callable[[httpx.Request], httpx.Response]


class FakeWeb:
    """Maps full URLs to canned responses and records every request."""

    def __init__(self) -> None:
        self.routes: dict[str, Route] = {}
        self.requests: list[httpx.Request] = []

    def add(self, url: str, body: bytes | str = b"", status: int = 200, headers: dict | None = None) -> None:
        content = body.encode() if isinstance(body, str) else body
        self.routes[url] = lambda request: httpx.Response(status, content=content, headers=headers)

    def add_json(self, url: str, data: Any, status: int = 200) -> None:
        self.add(url, json.dumps(data), status=status, headers={"content-type": "application/json"})

    def redirect(self, url: str, location: str, status: int = 302) -> None:
        self.add(url, status=status, headers={"location": location})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(str(request.url))
        if route is None:
            return httpx.Response(404)
        return route(request)

    def requested(self, url: str) -> list[httpx.Request]:
        return [r for r in self.requests if str(r.url) == url]


@pytest.fixture
def web() -> FakeWeb:
    return FakeWeb()


@pytest_asyncio.fixture
async def fetcher(web: FakeWeb):
    client = httpx.AsyncClient(transport=httpx.MockTransport(web.handler))
    async with Fetcher(client, token="secret-token") as f:
        yield f


@pytest.fixture
def roots(tmp_path: Path) -> list[Path]:
    return [tmp_path / "home" / ".claude" / "skills", tmp_path / "home" / ".codex" / "skills"]


def listing_entry(kind: str, name: str, download_url: str | None = None, url: str | None = None) -> dict:
    return {
        "type": kind,
        "name": name,
        "path": name,
        "sha": "0" * 40,
        "download_url": download_url,
        "url": url,
    }


@pytest.fixture
def staging_root(tmp_path: Path, monkeypatch) -> Path:
    """Point tempfile at an isolated directory so staging dirs can be inspected."""
    root = tmp_path / "tmp"
    root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(root))
    return root

"""Shared pytest fixtures for autotypings tests — no network access needed."""

from __future__ import annotations

import asyncio
import gzip
import io
import tarfile
import zlib
from typing import Any

import httpx
import pytest

from autotypings.core.http import RegistryHttpClient
from autotypings.models import DependencyTypes


def _make_tgz(files: dict[str, str | bytes], *, gzip_header: bool = True) -> bytes:
    """Build a compressed tarball from ``{path: content}``."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w") as tar:
        for path, content in files.items():
            data = content.encode("utf-8") if isinstance(content, str) else content
            info = tarfile.TarInfo(path)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    raw = buf.getvalue()
    return gzip.compress(raw) if gzip_header else zlib.compress(raw)


class FakeRegistry:
    """In-memory HTTP routes served through ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Any] = {}
        self.requests: list[httpx.Request] = []

    @staticmethod
    def _key(url: str | httpx.URL) -> tuple[str, str]:
        url = httpx.URL(url)
        return url.host, url.path

    def add_json(self, url: str, data: Any, status: int = 200) -> None:
        self.routes[self._key(url)] = httpx.Response(status, json=data)

    def add_bytes(self, url: str, data: bytes, status: int = 200) -> None:
        self.routes[self._key(url)] = httpx.Response(status, content=data)

    def add_error(self, url: str, exc_factory) -> None:
        self.routes[self._key(url)] = exc_factory

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(self._key(request.url))
        if route is None:
            return httpx.Response(404, json={"error": "Not found"})
        if isinstance(route, httpx.Response):
            return route
        raise route(request)

    def client(self, timeout: float = 30.0) -> RegistryHttpClient:
        transport = httpx.MockTransport(self.handler)
        return RegistryHttpClient(timeout=timeout, client=httpx.AsyncClient(transport=transport))


class FakeRegistryClient:
    """Stand-in for a registry client that records calls and concurrency."""

    def __init__(self, registry: str, results: dict[str, Any] | None = None) -> None:
        self.registry = registry
        self.results = results or {}
        self.calls: list[tuple[str, str]] = []
        self.active = 0
        self.max_active = 0

    async def resolve(self, name: str, version: str = "") -> DependencyTypes:
        self.calls.append((name, version))
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(0)
            result = self.results.get(name)
            if isinstance(result, Exception):
                raise result
            return result or DependencyTypes()
        finally:
            self.active -= 1


class FakeFactory:
    def __init__(self, npm: FakeRegistryClient, jsr: FakeRegistryClient) -> None:
        self.npm = npm
        self.jsr = jsr

    def get(self, tag: str) -> FakeRegistryClient:
        return self.jsr if tag.lower() == "jsr" else self.npm


@pytest.fixture
def make_tgz():
    return _make_tgz


@pytest.fixture
def fake_registry():
    return FakeRegistry()


@pytest.fixture
def npm_client():
    return FakeRegistryClient("npm")


@pytest.fixture
def jsr_client():
    return FakeRegistryClient("jsr")


@pytest.fixture
def fake_factory(npm_client, jsr_client):
    return FakeFactory(npm_client, jsr_client)

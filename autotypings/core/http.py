"""Async HTTP client shared by the registry clients."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from autotypings.core.config import REQUEST_TIMEOUT
from autotypings.exceptions import FetchTimeoutError, RegistryError

log = structlog.get_logger("autotypings.http")


class RegistryHttpClient:
    """Thin async wrapper around ``httpx.AsyncClient`` with a fixed deadline.

    Every request is bounded by *timeout*; there is no retry. Failures are
    mapped onto the :class:`~autotypings.exceptions.ResolutionError` family so
    the manager can contain them per dependency.
    """

    def __init__(
        self,
        timeout: float = REQUEST_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.timeout = timeout
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            headers={"Accept": "application/json, application/octet-stream"},
        )

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> RegistryHttpClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── public ─────────────────────────────────────────────────────────────

    async def get_json(self, url: str) -> Any:
        """GET *url* and return the decoded JSON body."""
        response = await self._get(url)
        try:
            return response.json()
        except ValueError as exc:
            raise RegistryError(f"invalid JSON from {url}: {exc}") from exc

    async def get_bytes(self, url: str) -> bytes:
        """GET *url* and return the raw body."""
        response = await self._get(url)
        return response.content

    # ── internal ───────────────────────────────────────────────────────────

    async def _get(self, url: str) -> httpx.Response:
        log.debug("registry.fetch", url=url)
        try:
            response = await self._client.get(url, timeout=self.timeout)
        except httpx.TimeoutException as exc:
            raise FetchTimeoutError(url, self.timeout) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise RegistryError(f"request to {url} failed: {exc}") from exc

        if not response.is_success:
            raise RegistryError(
                f"HTTP request failed: {response.status_code} {response.reason_phrase} ({url})",
                status_code=response.status_code,
            )
        return response

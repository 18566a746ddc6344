"""Scope-based registry client (jsr.io protocol)."""

from __future__ import annotations

import structlog

from autotypings.core.config import JSR_META_URL, JSR_NPM_URL
from autotypings.core.http import RegistryHttpClient
from autotypings.engines.registry.archive import filter_declarations, unpack
from autotypings.exceptions import RegistryError, ValidationError
from autotypings.models import DependencyTypes

log = structlog.get_logger("autotypings.registry")


def mangle_scoped_name(name: str) -> str:
    """``@scope/name`` -> ``scope__name``."""
    return name.replace("@", "", 1).replace("/", "__", 1)


class JsrRegistryClient:
    """Resolves JSR packages through their npm-compatible tarballs.

    JSR publishes no types entry; every declaration file is treated as
    self-contained.
    """

    registry = "jsr"

    def __init__(
        self,
        http: RegistryHttpClient,
        meta_url: str = JSR_META_URL,
        npm_url: str = JSR_NPM_URL,
    ) -> None:
        self._http = http
        self.meta_url = meta_url.rstrip("/")
        self.npm_url = npm_url.rstrip("/")

    def archive_url(self, name: str, version: str) -> str:
        return f"{self.npm_url}/~/11/@jsr/{mangle_scoped_name(name)}/{version}.tgz"

    async def latest_version(self, name: str) -> str:
        data = await self._http.get_json(f"{self.meta_url}/{name}/meta.json")
        latest = data.get("latest") if isinstance(data, dict) else None
        if not latest or not isinstance(latest, str):
            raise RegistryError(f"unable to get the latest version of {name}")
        return latest

    async def resolve(self, name: str, version: str = "") -> DependencyTypes:
        if not name:
            raise ValidationError("package name cannot be empty")

        if not version:
            version = await self.latest_version(name)

        archive = await self._http.get_bytes(self.archive_url(name, version))
        files = filter_declarations(unpack(archive))
        log.debug(
            "registry.resolved",
            registry=self.registry,
            package=name,
            version=version,
            declarations=len(files),
        )
        return DependencyTypes(entry="", files=files)

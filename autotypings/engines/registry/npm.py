"""General package registry client (registry.npmjs.org protocol)."""

from __future__ import annotations

from urllib.parse import quote

import structlog

from autotypings.core.config import DEFAULT_REGISTRY
from autotypings.core.http import RegistryHttpClient
from autotypings.engines.registry.archive import filter_declarations, unpack
from autotypings.exceptions import ValidationError
from autotypings.models import DependencyTypes, PackageMetadata

log = structlog.get_logger("autotypings.registry")


class NpmRegistryClient:
    registry = "npm"

    def __init__(self, http: RegistryHttpClient, base_url: str = DEFAULT_REGISTRY) -> None:
        self._http = http
        self.base_url = base_url.rstrip("/")

    def metadata_url(self, name: str, version: str = "") -> str:
        return f"{self.base_url}/{quote(name, safe='')}/{quote(version or 'latest', safe='')}"

    async def fetch_metadata(self, name: str, version: str = "") -> PackageMetadata:
        data = await self._http.get_json(self.metadata_url(name, version))
        return PackageMetadata.from_json(data)

    async def resolve(self, name: str, version: str = "") -> DependencyTypes:
        """Fetch metadata + tarball for *name* and keep its ``.d.ts`` files."""
        if not name:
            raise ValidationError("package name cannot be empty")

        metadata = await self.fetch_metadata(name, version)
        archive = await self._http.get_bytes(metadata.tarball)
        files = filter_declarations(unpack(archive))
        log.debug(
            "registry.resolved",
            registry=self.registry,
            package=name,
            version=metadata.version or version or "latest",
            declarations=len(files),
        )
        return DependencyTypes(entry=metadata.types_entry, files=files)

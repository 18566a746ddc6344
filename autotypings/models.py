"""Data models shared by the autotypings pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from autotypings.exceptions import RegistryError, ValidationError

DECLARATION_SUFFIX = ".d.ts"


@dataclass
class Dependency:
    """An external package referenced from source text.

    ``name`` keeps the ``@scope/`` prefix for scoped packages.
    """

    registry: str
    name: str
    version: str = ""

    @property
    def key(self) -> str:
        """Types cache key: ``name[@version]``."""
        return f"{self.name}@{self.version}" if self.version else self.name

    @property
    def module_key(self) -> str:
        """Ambient module name: ``[registry:]name[@version]``."""
        return f"{self.registry}:{self.key}" if self.registry else self.key

    def validate(self) -> None:
        if not self.name:
            raise ValidationError("dependency name cannot be empty")


@dataclass
class PackageMetadata:
    """General-registry record for one (name, version)."""

    tarball: str
    types_entry: str = ""
    name: str = ""
    version: str = ""

    @classmethod
    def from_json(cls, data: Any) -> PackageMetadata:
        if not data or not isinstance(data, dict):
            raise RegistryError("package metadata is empty")
        if data.get("error"):
            raise RegistryError(f"package metadata error: {data['error']}")

        dist = data.get("dist") or {}
        tarball = dist.get("tarball") if isinstance(dist, dict) else None
        if not tarball:
            raise RegistryError("missing tarball download URL in package metadata")
        if not isinstance(tarball, str):
            raise RegistryError(f"malformed tarball URL in package metadata: {tarball!r}")

        types_entry = data.get("types") or data.get("typings") or ""
        if not isinstance(types_entry, str):
            raise RegistryError(f"malformed types entry in package metadata: {types_entry!r}")

        return cls(
            tarball=tarball,
            types_entry=types_entry,
            name=_str_field(data, "name"),
            version=_str_field(data, "version"),
        )


def _str_field(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


@dataclass(frozen=True)
class ArchiveFile:
    """A regular file unpacked from a distribution archive."""

    path: str  # full path inside the archive, usually rooted at "package/"
    data: bytes

    def text(self) -> str:
        return self.data.decode("utf-8", errors="replace")


@dataclass
class DependencyTypes:
    """Declaration payload resolved for one dependency."""

    entry: str = ""
    files: list[ArchiveFile] = field(default_factory=list)


@dataclass(frozen=True)
class ExtraLib:
    """One ambient declaration document handed to the host."""

    filepath: str
    content: str


@dataclass(frozen=True)
class CacheStats:
    resolved: int
    in_flight: int

"""Registry client capability shared by the npm and JSR clients."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from autotypings.models import DependencyTypes


@runtime_checkable
class RegistryClient(Protocol):
    """Interface that every registry client must satisfy."""

    registry: str

    async def resolve(self, name: str, version: str = "") -> DependencyTypes: ...

"""Registry selection by tag."""

from __future__ import annotations

from autotypings.core.config import DEFAULT_REGISTRY
from autotypings.core.http import RegistryHttpClient
from autotypings.engines.registry.base import RegistryClient
from autotypings.engines.registry.jsr import JsrRegistryClient, mangle_scoped_name
from autotypings.engines.registry.npm import NpmRegistryClient

TYPES_SCOPE = "@types/"


def types_package_name(name: str) -> str:
    """Name of the DefinitelyTyped package for *name* (``a/b`` -> ``@types/a__b``)."""
    return TYPES_SCOPE + mangle_scoped_name(name)


class RegistryFactory:
    """Hands out one client per registry tag.

    ``"jsr"`` selects the JSR client; every other tag, including ``""`` and
    ``"npm"``, selects the general registry at *npm_registry_url*.
    """

    def __init__(self, http: RegistryHttpClient, npm_registry_url: str = DEFAULT_REGISTRY) -> None:
        self._npm = NpmRegistryClient(http, npm_registry_url)
        self._jsr = JsrRegistryClient(http)

    @property
    def npm(self) -> NpmRegistryClient:
        return self._npm

    @property
    def jsr(self) -> JsrRegistryClient:
        return self._jsr

    def get(self, tag: str) -> RegistryClient:
        if tag.lower() == "jsr":
            return self._jsr
        return self._npm

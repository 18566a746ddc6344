"""Registry clients — resolve packages to their declaration files."""

from autotypings.engines.registry.archive import filter_declarations, unpack
from autotypings.engines.registry.base import RegistryClient
from autotypings.engines.registry.factory import RegistryFactory, types_package_name
from autotypings.engines.registry.jsr import JsrRegistryClient
from autotypings.engines.registry.npm import NpmRegistryClient

__all__ = [
    "JsrRegistryClient",
    "NpmRegistryClient",
    "RegistryClient",
    "RegistryFactory",
    "filter_declarations",
    "types_package_name",
    "unpack",
]

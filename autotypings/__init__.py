"""autotypings: ambient type declarations for the imports of a source snippet."""

__version__ = "0.1.0"

from autotypings.cache import TypesCache
from autotypings.core.config import AutoTypingsOptions
from autotypings.engines.dependency_parser import (
    analyze_dependencies,
    classify,
    extract_import_specifiers,
)
from autotypings.engines.registry import RegistryFactory
from autotypings.engines.types_generator import TypesGenerator
from autotypings.exceptions import (
    AutoTypingsError,
    ExtractionError,
    FetchTimeoutError,
    RegistryError,
    ResolutionError,
    ValidationError,
)
from autotypings.manager import TypesManager
from autotypings.models import Dependency, DependencyTypes, ExtraLib

__all__ = [
    "AutoTypingsError",
    "AutoTypingsOptions",
    "Dependency",
    "DependencyTypes",
    "ExtraLib",
    "ExtractionError",
    "FetchTimeoutError",
    "RegistryError",
    "RegistryFactory",
    "ResolutionError",
    "TypesCache",
    "TypesGenerator",
    "TypesManager",
    "ValidationError",
    "analyze_dependencies",
    "classify",
    "extract_import_specifiers",
]

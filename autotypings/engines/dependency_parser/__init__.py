"""Dependency parser engine — source text to external package dependencies."""

from autotypings.engines.dependency_parser.builtins import is_builtin_module
from autotypings.engines.dependency_parser.classifier import (
    classify,
    is_local_import,
    parse_specifier,
)
from autotypings.engines.dependency_parser.source import (
    extract_import_specifiers,
    extract_reference_paths,
)
from autotypings.models import Dependency


def analyze_dependencies(source_text: str) -> list[Dependency]:
    """Extract and classify the external dependencies of *source_text*."""
    return classify(extract_import_specifiers(source_text))


__all__ = [
    "analyze_dependencies",
    "classify",
    "extract_import_specifiers",
    "extract_reference_paths",
    "is_builtin_module",
    "is_local_import",
    "parse_specifier",
]

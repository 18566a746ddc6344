"""Dependency classifier — specifiers to structured package coordinates."""

from __future__ import annotations

import re
from collections.abc import Iterable

from autotypings.engines.dependency_parser.builtins import is_builtin_module
from autotypings.models import Dependency

# registry:@scope/name/sub/path@version
_DEPENDENCY_RE = re.compile(
    r"^(?:(?P<registry>\w+):)?"
    r"(?P<scope>@[\w\-.]+/)?"
    r"(?P<path>[\w\-./]+?)"
    r"(?:@(?P<version>[\w\-.^~]+))?$"
)

_LOCAL_PREFIXES = (".", "/", "\\")


def is_local_import(specifier: str) -> bool:
    return specifier.startswith(_LOCAL_PREFIXES)


def parse_specifier(specifier: str) -> Dependency | None:
    """Parse one specifier; ``None`` for built-ins, local paths and garbage."""
    if not specifier or is_builtin_module(specifier) or is_local_import(specifier):
        return None

    m = _DEPENDENCY_RE.match(specifier)
    if not m:
        return None

    package = m.group("path").split("/", 1)[0]
    if not package:
        return None

    scope = m.group("scope") or ""
    return Dependency(
        registry=(m.group("registry") or "").lower(),
        name=f"{scope}{package}",
        version=m.group("version") or "",
    )


def classify(specifiers: Iterable[str]) -> list[Dependency]:
    """Turn import specifiers into dependencies, skipping anything unfetchable."""
    deps: list[Dependency] = []
    for spec in specifiers:
        dep = parse_specifier(spec)
        if dep is not None:
            deps.append(dep)
    return deps

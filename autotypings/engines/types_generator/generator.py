"""Types generator — raw declaration files to ambient module documents."""

from __future__ import annotations

import posixpath
import re

import structlog

from autotypings.engines.dependency_parser.source import extract_reference_paths
from autotypings.models import (
    DECLARATION_SUFFIX,
    ArchiveFile,
    Dependency,
    DependencyTypes,
    ExtraLib,
)

log = structlog.get_logger("autotypings.generator")

PACKAGE_ROOT = "package"
DEFAULT_ENTRY = "index.d.ts"
SIDECAR_FILENAME = "__types__.d.ts"

_NON_IDENT_RE = re.compile(r"[^A-Za-z0-9]")


def wrap_module(module_key: str, body: str) -> str:
    return f"declare module '{module_key}' {{\n{body}\n}}"


def sanitize_identifier(name: str) -> str:
    """``@scope/pkg-name`` -> ``_scope_pkg_name``."""
    ident = _NON_IDENT_RE.sub("_", name)
    if not ident or ident[0].isdigit():
        ident = f"_{ident}"
    return ident


def declare_module_pattern(name: str) -> re.Pattern[str]:
    """Matches ``declare module "<name>"`` with any quote style."""
    return re.compile(rf"declare\s+module\s+(['\"`]){re.escape(name)}\1")


def entry_candidates(dependency: Dependency, entry: str) -> list[str]:
    entry = entry or DEFAULT_ENTRY
    if entry.startswith("./"):
        entry = entry[2:]
    return [entry, f"{PACKAGE_ROOT}/{entry}", f"{dependency.name}/{entry}"]


def document_root(dependency: Dependency) -> str:
    """Directory that namespaces one dependency's documents: ``[registry/]name[@version]``."""
    return f"{dependency.registry}/{dependency.key}" if dependency.registry else dependency.key


def document_path(dependency: Dependency, archive_path: str) -> str:
    """Map an archive path under the dependency's document root.

    The archive's own root segment (``package/`` or ``<name>/``) is replaced,
    so two packages shipping ``package/index.d.ts`` never share a filepath.
    """
    relative = archive_path
    for prefix in (f"{PACKAGE_ROOT}/", f"{dependency.name}/"):
        if archive_path.startswith(prefix):
            relative = archive_path[len(prefix):]
            break
    return f"{document_root(dependency)}/{relative}"


class TypesGenerator:
    """Builds the :class:`ExtraLib` documents for one resolved dependency.

    Every document is addressable under the dependency's canonical module key
    (``[registry:]name[@version]``) so different versions and registries of
    the same package name do not collide. Filepaths are namespaced the same
    way by :func:`document_path`.
    """

    def generate(self, dependency: Dependency, types: DependencyTypes) -> list[ExtraLib]:
        dependency.validate()
        if not types.files:
            return []
        if dependency.registry == "jsr":
            return self._generate_self_contained(dependency, types.files)
        return self._generate_from_entry(dependency, types)

    def generate_builtin(self, package: str, types: DependencyTypes) -> list[ExtraLib]:
        """Builtin packages are loaded as-is, namespaced under the package name."""
        libs: list[ExtraLib] = []
        for file in types.files:
            content = file.text().strip()
            if not content:
                continue
            libs.append(ExtraLib(filepath=f"{package}/{file.path}", content=content))
        return libs

    # ── scope-based registry ───────────────────────────────────────────────

    def _generate_self_contained(
        self, dependency: Dependency, files: list[ArchiveFile]
    ) -> list[ExtraLib]:
        module_key = dependency.module_key
        libs: list[ExtraLib] = []
        for file in files:
            content = file.text()
            if not content.strip():
                log.debug("generator.empty_file", path=file.path)
                continue
            libs.append(
                ExtraLib(
                    filepath=document_path(dependency, file.path),
                    content=wrap_module(module_key, content),
                )
            )
        return libs

    # ── general registry ───────────────────────────────────────────────────

    def _generate_from_entry(
        self, dependency: Dependency, types: DependencyTypes
    ) -> list[ExtraLib]:
        entry = self.select_entry(dependency, types)
        if entry is None:
            log.info(
                "generator.no_entry",
                package=dependency.name,
                entry=types.entry or DEFAULT_ENTRY,
            )
            return []

        entry_text = entry.text()
        libs = [
            ExtraLib(filepath=document_path(dependency, ref.path), content=ref.text())
            for ref in self.resolve_references(entry, entry_text, types.files)
        ]

        entry_path = document_path(dependency, entry.path)
        pattern = declare_module_pattern(dependency.name)
        if pattern.search(entry_text):
            rewritten = pattern.sub(f"declare module '{dependency.module_key}'", entry_text)
            libs.append(ExtraLib(filepath=entry_path, content=rewritten))
        else:
            libs.append(ExtraLib(filepath=entry_path, content=entry_text))
            libs.append(self._sidecar(dependency, entry_path))
        return libs

    def select_entry(self, dependency: Dependency, types: DependencyTypes) -> ArchiveFile | None:
        candidates = set(entry_candidates(dependency, types.entry))
        return next((f for f in types.files if f.path in candidates), None)

    def resolve_references(
        self, entry: ArchiveFile, entry_text: str, files: list[ArchiveFile]
    ) -> list[ArchiveFile]:
        """Archive files named by the entry's reference directives, in order."""
        by_path = {f.path: f for f in files}
        base_dir = posixpath.dirname(entry.path)
        refs: list[ArchiveFile] = []
        seen: set[str] = set()
        for ref in extract_reference_paths(entry_text):
            target = posixpath.normpath(posixpath.join(base_dir, ref))
            ref_file = by_path.get(target)
            if ref_file is None or target in seen or target == entry.path:
                continue
            seen.add(target)
            refs.append(ref_file)
        return refs

    def _sidecar(self, dependency: Dependency, entry_path: str) -> ExtraLib:
        ident = sanitize_identifier(dependency.name)
        target = entry_path.removesuffix(DECLARATION_SUFFIX)
        body = f'import {ident} from "{target}";\nexport = {ident};'
        return ExtraLib(
            filepath=f"{document_root(dependency)}/{SIDECAR_FILENAME}",
            content=wrap_module(dependency.module_key, body),
        )

"""TypesManager — orchestrates parse -> cache filter -> fetch -> generate."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import Any

import structlog

from autotypings.cache import TypesCache
from autotypings.core.batching import batch
from autotypings.core.config import BUILTIN_PACKAGES, AutoTypingsOptions
from autotypings.core.http import RegistryHttpClient
from autotypings.engines.dependency_parser import analyze_dependencies
from autotypings.engines.registry import RegistryFactory, types_package_name
from autotypings.engines.registry.factory import TYPES_SCOPE
from autotypings.engines.types_generator import TypesGenerator
from autotypings.exceptions import ResolutionError, ValidationError
from autotypings.models import CacheStats, Dependency, DependencyTypes, ExtraLib


class TypesManager:
    """Resolves ambient declaration documents for the imports of a source text.

    The host calls :meth:`resolve_extra_libs` on whatever schedule it likes and
    registers the returned documents with its language service. Results of
    separate calls are independent; ordering between them is the host's
    concern.
    """

    def __init__(
        self,
        options: AutoTypingsOptions | None = None,
        *,
        cache: TypesCache | None = None,
        factory: RegistryFactory | None = None,
        http: RegistryHttpClient | None = None,
        generator: TypesGenerator | None = None,
        logger: Any = None,
    ) -> None:
        self.options = options or AutoTypingsOptions()
        self.cache = cache if cache is not None else TypesCache()
        self._http: RegistryHttpClient | None = None
        if factory is None:
            self._owns_http = http is None
            self._http = http or RegistryHttpClient(timeout=self.options.request_timeout)
            factory = RegistryFactory(self._http, self.options.registry)
        else:
            self._owns_http = False
        self.factory = factory
        self.generator = generator or TypesGenerator()
        self.log = logger or structlog.get_logger("autotypings.manager")

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def close(self) -> None:
        if self._owns_http and self._http is not None:
            await self._http.close()

    async def __aenter__(self) -> TypesManager:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── public ─────────────────────────────────────────────────────────────

    async def resolve_extra_libs(self, source_text: str) -> list[ExtraLib]:
        """Source text -> declaration documents for its external imports."""
        dependencies = analyze_dependencies(source_text)
        return await self.resolve_dependencies(dependencies)

    async def resolve_dependencies(self, dependencies: Iterable[Dependency]) -> list[ExtraLib]:
        """Fetch and generate declarations for every not-yet-dispatched dependency.

        Work proceeds in waves of ``max_concurrency``; a wave is awaited fully
        before the next starts. Output order follows input order.
        """
        pending: list[Dependency] = []
        seen: set[str] = set()
        for dep in dependencies:
            key = dep.key
            if key in seen or self.cache.has_resolved(key) or self.cache.is_in_flight(key):
                continue
            seen.add(key)
            pending.append(dep)

        if not pending:
            self.log.info("manager.nothing_pending")
            return []

        self.log.info("manager.dependencies", names=[d.name for d in pending])

        libs: list[ExtraLib] = []
        for wave in batch(pending, self.options.max_concurrency):
            results = await asyncio.gather(*(self._load_one(dep) for dep in wave))
            for result in results:
                libs.extend(result)
        return libs

    async def resolve_builtins(self, selected: Iterable[str]) -> list[ExtraLib]:
        """Declarations of always-available packages (``node``, ``typescript``, ...)."""
        tags = sorted(set(selected))
        for tag in tags:
            if not tag:
                raise ValidationError("builtin module tag cannot be empty")

        libs: list[ExtraLib] = []
        for wave in batch(tags, self.options.max_concurrency):
            results = await asyncio.gather(*(self._load_builtin(tag) for tag in wave))
            for result in results:
                libs.extend(result)
        return libs

    async def resolve_configured_builtins(self) -> list[ExtraLib]:
        return await self.resolve_builtins(self.options.enabled_builtins)

    async def fetch_dependency_types(self, dependency: Dependency) -> list[ExtraLib]:
        """Resolve and generate one dependency; registry failures propagate."""
        dependency.validate()
        types = await self._fetch_types(dependency)
        if not types.files:
            self.log.warning("manager.no_declarations", package=dependency.name)
            return []
        return self.generator.generate(dependency, types)

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()

    def reset_cache(self) -> None:
        self.cache.reset()

    # ── internal ───────────────────────────────────────────────────────────

    async def _load_one(self, dependency: Dependency) -> list[ExtraLib]:
        key = dependency.key
        # No await may precede try_acquire: it is the duplicate-work gate.
        if not self.cache.try_acquire(key):
            return []

        try:
            self.log.info("manager.loading", package=dependency.name, key=key)
            libs = await self.fetch_dependency_types(dependency)
            if libs:
                self.log.info("manager.loaded", package=dependency.name, documents=len(libs))
            return libs
        except ResolutionError as exc:
            self.log.warning(
                "manager.dependency_failed",
                package=dependency.name,
                key=key,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return []
        except ValidationError:
            raise
        except Exception as exc:
            self.log.warning(
                "manager.dependency_failed",
                package=dependency.name,
                key=key,
                error_type=type(exc).__name__,
                error=str(exc),
                exc_info=True,
            )
            return []
        finally:
            self.cache.clear_in_flight(key)

    async def _fetch_types(self, dependency: Dependency) -> DependencyTypes:
        client = self.factory.get(dependency.registry)
        types = await client.resolve(dependency.name, dependency.version)

        if dependency.registry.lower() == "jsr" or types.files:
            return types
        if dependency.name.startswith(TYPES_SCOPE) or dependency.name.startswith("@"):
            return types

        fallback = types_package_name(dependency.name)
        self.log.info("manager.types_fallback", package=dependency.name, fallback=fallback)
        try:
            return await client.resolve(fallback, dependency.version)
        except ResolutionError as exc:
            self.log.warning(
                "manager.types_fallback_failed",
                package=dependency.name,
                fallback=fallback,
                error=str(exc),
            )
            return DependencyTypes()

    async def _load_builtin(self, tag: str) -> list[ExtraLib]:
        package = BUILTIN_PACKAGES.get(tag, f"{TYPES_SCOPE}{tag}")
        try:
            self.log.info("manager.loading_builtin", builtin=tag, package=package)
            types = await self.factory.npm.resolve(package, "")
            libs = self.generator.generate_builtin(package, types)
        except ValidationError:
            raise
        except Exception as exc:
            self.log.warning(
                "manager.builtin_failed",
                builtin=tag,
                package=package,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return []

        if not libs:
            self.log.warning("manager.no_builtin_declarations", builtin=tag, package=package)
        return libs

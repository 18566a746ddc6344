"""Runtime options for the types manager."""

from __future__ import annotations

import os
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator

DEFAULT_REGISTRY = "https://registry.npmjs.org"
JSR_META_URL = "https://jsr.io"
JSR_NPM_URL = "https://npm.jsr.io"
REQUEST_TIMEOUT = 30.0

# Builtin tag -> npm package carrying its declarations
BUILTIN_PACKAGES: dict[str, str] = {
    "typescript": "typescript",
    "node": "@types/node",
    "deno": "@types/deno",
    "bun": "bun-types",
}

_TRUTHY = {"1", "true", "yes", "on"}


def _default_builtins() -> dict[str, bool]:
    return {"typescript": True, "node": True, "deno": False, "bun": False}


class AutoTypingsOptions(BaseModel):
    registry: str = DEFAULT_REGISTRY
    max_concurrency: int = Field(default=5, ge=1, le=20)
    request_timeout: float = Field(default=REQUEST_TIMEOUT, gt=0)
    builtins: dict[str, bool] = Field(default_factory=_default_builtins)
    verbose: bool = False

    @field_validator("registry", mode="before")
    @classmethod
    def _check_registry(cls, v: str) -> str:
        if not isinstance(v, str):
            raise ValueError("registry must be a string")
        v = v.strip().rstrip("/")
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"registry must be a valid URL: {v!r}")
        return v

    @property
    def enabled_builtins(self) -> set[str]:
        return {tag for tag, enabled in self.builtins.items() if enabled}

    @classmethod
    def from_env(cls, **overrides: object) -> AutoTypingsOptions:
        """Build options from ``AUTOTYPINGS_*`` environment variables.

        Explicit *overrides* (e.g. CLI flags) win over the environment;
        ``None`` overrides are ignored.
        """
        values: dict[str, object] = {}
        if registry := os.environ.get("AUTOTYPINGS_REGISTRY"):
            values["registry"] = registry
        if concurrency := os.environ.get("AUTOTYPINGS_MAX_CONCURRENCY"):
            values["max_concurrency"] = concurrency
        if timeout := os.environ.get("AUTOTYPINGS_REQUEST_TIMEOUT"):
            values["request_timeout"] = timeout
        if verbose := os.environ.get("AUTOTYPINGS_VERBOSE"):
            values["verbose"] = verbose.strip().lower() in _TRUTHY
        builtins = os.environ.get("AUTOTYPINGS_BUILTINS")
        if builtins is not None:
            enabled = {t.strip() for t in builtins.split(",") if t.strip()}
            values["builtins"] = {tag: tag in enabled for tag in set(BUILTIN_PACKAGES) | enabled}

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

"""Custom exceptions for autotypings."""

from __future__ import annotations


class AutoTypingsError(Exception):
    """Base exception for all autotypings errors."""


class ValidationError(AutoTypingsError):
    """Raised on caller contract violations (empty dependency name, empty builtin tag)."""


class ResolutionError(AutoTypingsError):
    """Raised when declarations for one dependency cannot be resolved.

    The manager catches these per dependency; they never abort a batch.
    """


class RegistryError(ResolutionError):
    """Raised on a failed or malformed package registry response."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class ExtractionError(ResolutionError):
    """Raised when a distribution archive cannot be decompressed or unpacked."""


class FetchTimeoutError(ResolutionError):
    """Raised when a registry request exceeds its deadline."""

    def __init__(self, url: str, timeout: float):
        self.url = url
        self.timeout = timeout
        super().__init__(f"request to {url} timed out after {timeout}s")

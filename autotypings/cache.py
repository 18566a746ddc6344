"""Types cache — which dependency keys are resolved or being resolved."""

from __future__ import annotations

from autotypings.models import CacheStats


class TypesCache:
    """Process-lifetime record of dispatched dependency keys.

    A key enters *in-flight* and *resolved* together at dispatch and only
    leaves *resolved* on :meth:`reset`, so a failed resolution is not retried
    until then. All methods are synchronous; callers must not await between a
    check and the matching mark.
    """

    def __init__(self) -> None:
        self._resolved: set[str] = set()
        self._in_flight: set[str] = set()

    def has_resolved(self, key: str) -> bool:
        return key in self._resolved

    def is_in_flight(self, key: str) -> bool:
        return key in self._in_flight

    def mark_in_flight(self, key: str) -> None:
        self._in_flight.add(key)

    def clear_in_flight(self, key: str) -> None:
        self._in_flight.discard(key)

    def mark_resolved(self, key: str) -> None:
        self._resolved.add(key)

    def try_acquire(self, key: str) -> bool:
        """Check-and-mark in one step; False if *key* was already dispatched."""
        if self.has_resolved(key) or self.is_in_flight(key):
            return False
        self.mark_in_flight(key)
        self.mark_resolved(key)
        return True

    def reset(self) -> None:
        self._resolved.clear()
        self._in_flight.clear()

    def stats(self) -> CacheStats:
        return CacheStats(resolved=len(self._resolved), in_flight=len(self._in_flight))

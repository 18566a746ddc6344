"""Fixed-size wave partitioning for bounded concurrency."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def batch(items: Sequence[T], size: int) -> list[list[T]]:
    """Split *items* into consecutive chunks of at most *size*, keeping order.

    The caller awaits one chunk fully before starting the next, so *size*
    bounds the number of simultaneous fetches.
    """
    if size < 1:
        raise ValueError(f"batch size must be >= 1, got {size}")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]

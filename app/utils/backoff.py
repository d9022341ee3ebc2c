"""Retry delay helpers.

The GraphQL transport waits linearly (``base * attempt``); the whole-mutation
retry in the cached query facade waits exponentially with a cap. Both live
here so the two policies are visible side by side.
"""
from __future__ import annotations

from typing import Optional

from app.config import MUTATION_SETTINGS, TRANSPORT_RETRY_POLICY


def linear_backoff_seconds(attempt: int, *, base: Optional[float] = None) -> float:
    """Delay before retrying after failed attempt number ``attempt`` (1-based)."""
    if attempt < 1:
        attempt = 1
    base = float(base if base is not None else TRANSPORT_RETRY_POLICY["base_delay_seconds"])
    return max(base * attempt, 0.0)


def exponential_backoff_seconds(attempt_index: int, *, base: float = 1.0, max_seconds: Optional[float] = None) -> float:
    """``min(base * 2**attempt_index, max_seconds)`` with a 0-based attempt index."""
    if attempt_index < 0:
        attempt_index = 0
    max_seconds = float(max_seconds if max_seconds is not None else MUTATION_SETTINGS["retry_max_seconds"])
    return min(base * (2 ** attempt_index), max_seconds)


__all__ = ["linear_backoff_seconds", "exponential_backoff_seconds"]

"""Over-fetch window pagination.

One remote call fetches every record from the first page up to one past the
requested page (capped at ``max_fetch``); the requested page is then sliced
out in memory. Nothing is persisted between calls.

Known limit: once more than ``max_fetch`` posts are published, pages past
what ``max_fetch`` records cover come back empty with ``has_next_page``
False.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, List, Optional, Sequence, TypeVar

from app.config import PAGINATION_SETTINGS

T = TypeVar("T")


@dataclass(frozen=True)
class PageWindow(Generic[T]):
    items: List[T]
    has_next_page: bool
    has_previous_page: bool


def compute_fetch_size(page: int, page_size: int, *, max_fetch: Optional[int] = None) -> int:
    """``min(page_size * page + 1, max_fetch)``."""
    if page < 1 or page_size < 1:
        raise ValueError("page and page_size must be positive integers")
    ceiling = int(max_fetch if max_fetch is not None else PAGINATION_SETTINGS["max_fetch"])
    return min(page_size * page + 1, ceiling)


def slice_page(fetched: Sequence[T], page: int, page_size: int) -> PageWindow[T]:
    """Cut page ``page`` out of an over-fetched, already ordered sequence."""
    if page < 1 or page_size < 1:
        raise ValueError("page and page_size must be positive integers")
    start = (page - 1) * page_size
    end = start + page_size
    return PageWindow(
        items=list(fetched[start:end]),
        has_next_page=len(fetched) > end,
        has_previous_page=page > 1,
    )


__all__ = ["PageWindow", "compute_fetch_size", "slice_page"]

"""Pagination helpers for in-memory result lists, with a hard page-size cap."""

from __future__ import annotations

import os
from typing import Optional, Sequence, TypeVar

from fastapi import Response

T = TypeVar("T")

DEFAULT_MAX_PAGE_SIZE = 200


def max_page_size() -> int:
    try:
        val = int(os.getenv("API_MAX_PAGE_SIZE", str(DEFAULT_MAX_PAGE_SIZE)))
    except ValueError:
        return DEFAULT_MAX_PAGE_SIZE
    return val if val >= 1 else DEFAULT_MAX_PAGE_SIZE


def clamp_page_size(page_size: int) -> int:
    return max(1, min(page_size, max_page_size()))


def page_of(
    items: Sequence[T],
    *,
    page: int,
    page_size: int,
    response: Optional[Response] = None,
) -> list[T]:
    """Slice one page out of ``items`` and describe it in X-Total-Count / X-Page headers."""
    page_size = clamp_page_size(page_size)
    start = (max(page, 1) - 1) * page_size
    if response is not None:
        response.headers["X-Total-Count"] = str(len(items))
        response.headers["X-Page"] = str(page)
        response.headers["X-Page-Size"] = str(page_size)
    return list(items[start:start + page_size])

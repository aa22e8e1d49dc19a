"""Application search – SearchResult generic container and Pagination."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")

__all__ = ["Pagination", "SearchResult"]


@dataclass(frozen=True)
class Pagination:
    """Zero-indexed page summary derived from an engine response."""

    page_size: int
    page_number: int
    total_pages: int
    total_size: int

    @classmethod
    def of(cls, total: int, page_number: int, page_size: int) -> "Pagination":
        if page_size <= 0 or total <= 0:
            total_pages = 0
        else:
            total_pages = math.ceil(total / page_size)
        return cls(
            page_size=page_size,
            page_number=page_number,
            total_pages=total_pages,
            total_size=total,
        )

    @property
    def has_next(self) -> bool:
        return self.page_number + 1 < self.total_pages

    @property
    def offset(self) -> int:
        return self.page_number * self.page_size


@dataclass
class SearchResult(Generic[T]):
    search_text: str | None
    items: list[T] = field(default_factory=list)
    pagination: Pagination | None = None
    took_ms: int = 0

    @property
    def total(self) -> int:
        if self.pagination is None:
            return len(self.items)
        return self.pagination.total_size

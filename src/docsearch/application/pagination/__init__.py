"""Application pagination – sort primitives."""
from docsearch.application.pagination.sort import Sort, SortDirection

__all__ = ["Sort", "SortDirection"]

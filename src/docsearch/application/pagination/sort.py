"""Application pagination – Sort, SortDirection."""
from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Iterable, Mapping


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


@dataclasses.dataclass(frozen=True)
class Sort:
    """Single sort criterion."""
    field: str
    direction: SortDirection = SortDirection.ASC

    @classmethod
    def desc(cls, field: str) -> "Sort":
        return cls(field, SortDirection.DESC)

    @classmethod
    def from_mapping(cls, sorts: Mapping[str, SortDirection | str] | Iterable["Sort"] | None) -> tuple["Sort", ...]:
        """Normalise ``{"field": "DESC"}`` or an iterable of :class:`Sort` into a tuple."""
        if not sorts:
            return ()
        if isinstance(sorts, Mapping):
            return tuple(
                cls(name, d if isinstance(d, SortDirection) else SortDirection(d.upper()))
                for name, d in sorts.items()
            )
        return tuple(sorts)


__all__ = ["Sort", "SortDirection"]

"""Config settings – Settings base class."""
from __future__ import annotations

import dataclasses
from typing import ClassVar


@dataclasses.dataclass
class Settings:
    """Base class for 12-factor settings.

    Subclasses set ``_prefix``; field ``host`` of a class prefixed
    ``OPENSEARCH`` is read from ``OPENSEARCH_HOST``.
    """

    _prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    @classmethod
    def env_key(cls, field_name: str) -> str:
        return f"{cls._prefix}_{field_name}".upper().lstrip("_")

    def _validate(self) -> None:
        """Override to add cross-field validation."""


__all__ = ["Settings"]

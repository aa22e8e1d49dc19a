"""Kernel security – Principal."""
from __future__ import annotations

import dataclasses
from typing import Any


@dataclasses.dataclass(frozen=True)
class Principal:
    """Authenticated caller, as extracted by the authentication layer.

    ``subject`` is the caller identity used to scope owner-restricted
    searches.
    """
    subject: str
    name: str = ""
    email: str = ""
    picture: str = ""
    claims: dict[str, Any] = dataclasses.field(default_factory=dict)


__all__ = ["Principal"]

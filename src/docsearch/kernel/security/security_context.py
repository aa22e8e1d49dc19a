"""Kernel security – SecurityContext using contextvars."""

from __future__ import annotations

import contextlib
import contextvars
from typing import Iterator

from docsearch.kernel.errors import UnauthorizedError
from docsearch.kernel.security.principal import Principal

_VAR: contextvars.ContextVar[Principal | None] = contextvars.ContextVar(
    "_docsearch_security_context", default=None
)


class SecurityContext:
    """Store and retrieve the current authenticated :class:`Principal` via
    :mod:`contextvars` so each asyncio task has its own isolated context."""

    @staticmethod
    def get_current() -> Principal | None:
        """Return the current principal, or ``None`` if absent."""
        return _VAR.get()

    @staticmethod
    def set_current(principal: Principal) -> contextvars.Token[Principal | None]:
        """Set the current principal and return a reset token."""
        return _VAR.set(principal)

    @staticmethod
    def reset(token: contextvars.Token[Principal | None]) -> None:
        _VAR.reset(token)

    @staticmethod
    def clear() -> None:
        """Remove the current principal from context."""
        _VAR.set(None)

    @staticmethod
    def require() -> Principal:
        """Return the current principal or raise ``UnauthorizedError``."""
        principal = _VAR.get()
        if principal is None:
            raise UnauthorizedError("No authenticated principal in context")
        return principal

    @staticmethod
    def require_user_id() -> str:
        """Shorthand for ``SecurityContext.require().subject``."""
        return SecurityContext.require().subject

    @staticmethod
    @contextlib.contextmanager
    def scoped(principal: Principal) -> Iterator[Principal]:
        """Set *principal* for the duration of the block, restoring the previous one.

        Example::

            with SecurityContext.scoped(Principal("user-1")):
                result = await service.search(criteria)
        """
        token = _VAR.set(principal)
        try:
            yield principal
        finally:
            _VAR.reset(token)


__all__ = ["SecurityContext"]

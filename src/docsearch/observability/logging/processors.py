"""Observability – structlog processors and get_logger helper."""
from __future__ import annotations

from typing import Any

import structlog

from docsearch.kernel.security import SecurityContext


class CallerProcessor:
    """structlog processor that injects the caller identity into log events.

    Adds ``user_id`` when a :class:`~docsearch.kernel.security.Principal` is
    set in :class:`SecurityContext`; events that already carry ``user_id``
    are left untouched.

    Usage::

        structlog.configure(processors=[CallerProcessor(), ...])
    """

    def __call__(
        self,
        logger: Any,           # noqa: ARG002
        method_name: str,      # noqa: ARG002
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        principal = SecurityContext.get_current()
        if principal is not None:
            event_dict.setdefault("user_id", principal.subject)
        return event_dict


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a bound structlog logger.

    Parameters
    ----------
    name:
        Logger name (typically ``__name__`` of the calling module).
    **initial_values:
        Key-value pairs to bind on the returned logger.
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


__all__ = ["CallerProcessor", "get_logger"]

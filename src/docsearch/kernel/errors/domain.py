"""Domain errors – invalid search input, missing and conflicting documents."""

from __future__ import annotations

from typing import Any

from docsearch.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when a domain rule is violated."""

    default_code = "domain_error"


class ValidationError(DomainError):
    """Input data does not meet validation rules.

    ``errors`` is a list of field-level validation failures.
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[dict[str, Any]] = errors or []

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base


class InvalidClauseError(ValidationError):
    """A query clause is structurally invalid for its operator."""

    default_code = "invalid_clause"

    def __init__(self, lhs: str, operator: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            f"Invalid clause '{lhs} {operator}': {reason}",
            errors=[{"field": lhs, "operator": operator, "reason": reason}],
            **kwargs,
        )
        self.lhs = lhs
        self.operator = operator
        self.reason = reason


class UnsupportedOperatorError(DomainError):
    """An operator value outside the closed operator enums was encountered."""

    default_code = "unsupported_operator"

    def __init__(self, operator: Any, **kwargs: Any) -> None:
        super().__init__(f"Unsupported operator {operator!r}", **kwargs)
        self.operator = operator


class NotFoundError(DomainError):
    """The requested resource does not exist."""

    default_code = "not_found"

    def __init__(
        self,
        resource: str,
        identifier: Any = None,
        **kwargs: Any,
    ) -> None:
        msg = f"{resource} not found"
        if identifier is not None:
            msg = f"{resource} '{identifier}' not found"
        super().__init__(msg, **kwargs)
        self.resource = resource
        self.identifier = identifier


class ConflictError(DomainError):
    """The operation conflicts with existing state."""

    default_code = "conflict"


class AlreadyExistsError(ConflictError):
    """A create-only write collided with an existing document id."""

    default_code = "already_exists"

    def __init__(self, resource: str, identifier: Any, **kwargs: Any) -> None:
        super().__init__(f"{resource} '{identifier}' already exists", **kwargs)
        self.resource = resource
        self.identifier = identifier


__all__ = [
    "AlreadyExistsError",
    "ConflictError",
    "DomainError",
    "InvalidClauseError",
    "NotFoundError",
    "UnsupportedOperatorError",
    "ValidationError",
]

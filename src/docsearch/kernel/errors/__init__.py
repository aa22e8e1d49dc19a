"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError                  (domain.py)
    │   ├── ValidationError
    │   │   └── InvalidClauseError
    │   ├── UnsupportedOperatorError
    │   ├── NotFoundError
    │   └── ConflictError
    │       └── AlreadyExistsError
    ├── ApplicationError             (application.py)
    │   └── UnauthorizedError
    └── InfrastructureError          (infrastructure.py)
        ├── EngineUnavailableError
        └── ExternalServiceError
"""

from docsearch.kernel.errors.application import ApplicationError, UnauthorizedError
from docsearch.kernel.errors.base import BaseError
from docsearch.kernel.errors.domain import (
    AlreadyExistsError,
    ConflictError,
    DomainError,
    InvalidClauseError,
    NotFoundError,
    UnsupportedOperatorError,
    ValidationError,
)
from docsearch.kernel.errors.infrastructure import (
    EngineUnavailableError,
    ExternalServiceError,
    InfrastructureError,
)

__all__ = [
    "AlreadyExistsError",
    "ApplicationError",
    "BaseError",
    "ConflictError",
    "DomainError",
    "EngineUnavailableError",
    "ExternalServiceError",
    "InfrastructureError",
    "InvalidClauseError",
    "NotFoundError",
    "UnauthorizedError",
    "UnsupportedOperatorError",
    "ValidationError",
]

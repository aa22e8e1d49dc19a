"""Observability – structured logging helpers."""
from docsearch.observability.logging.filters import DEFAULT_SENSITIVE_FIELDS, SensitiveFieldsFilter
from docsearch.observability.logging.factory import JsonLoggerFactory
from docsearch.observability.logging.processors import CallerProcessor, get_logger

__all__ = [
    "CallerProcessor",
    "DEFAULT_SENSITIVE_FIELDS",
    "JsonLoggerFactory",
    "SensitiveFieldsFilter",
    "get_logger",
]

"""Observability – structured logging."""
from docsearch.observability.logging import CallerProcessor, JsonLoggerFactory, SensitiveFieldsFilter, get_logger

__all__ = ["CallerProcessor", "JsonLoggerFactory", "SensitiveFieldsFilter", "get_logger"]

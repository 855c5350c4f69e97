"""Observability – structured logging helpers."""
from authz_core.observability.logging.filters import DEFAULT_SENSITIVE_FIELDS, SensitiveFieldsFilter
from authz_core.observability.logging.factory import JsonLoggerFactory
from authz_core.observability.logging.processors import RedactingProcessor, get_logger

__all__ = [
    "DEFAULT_SENSITIVE_FIELDS",
    "JsonLoggerFactory",
    "RedactingProcessor",
    "SensitiveFieldsFilter",
    "get_logger",
]

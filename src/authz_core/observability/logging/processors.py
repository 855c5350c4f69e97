"""structlog glue: the redaction processor and the module logger accessor."""
from __future__ import annotations

from typing import Any

import structlog

from authz_core.observability.logging.filters import SensitiveFieldsFilter


class RedactingProcessor:
    """Processor that runs every event dict through :class:`SensitiveFieldsFilter`.

    Placed before the renderer so nothing downstream sees a token.
    """

    def __init__(self, sensitive_fields: frozenset[str] | None = None) -> None:
        self._filter = SensitiveFieldsFilter(sensitive_fields)

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:  # noqa: ARG002
        return self._filter.redact_deep(event_dict)


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """``structlog.get_logger(name)``, with *initial_values* bound when given."""
    logger = structlog.get_logger(name)
    return logger.bind(**initial_values) if initial_values else logger


__all__ = ["RedactingProcessor", "get_logger"]

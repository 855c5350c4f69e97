"""Observability – process-wide structlog setup.

Every authz-core logger goes through stdlib :mod:`logging`, so the host
application's handlers and levels apply. Redaction runs first, before any
processor can copy a secret into another key.
"""
from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog

from authz_core.observability.logging.processors import RedactingProcessor

LOG_FORMATS = ("json", "console")


def resolve_level(level: int | str) -> int:
    """Numeric level for *level*; unknown names fall back to ``INFO``."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


class JsonLoggerFactory:
    @staticmethod
    def configure(
        level: int | str = logging.INFO,
        sensitive_fields: frozenset[str] | None = None,
        *,
        fmt: str = "json",
        stream: TextIO | None = None,
    ) -> None:
        """Install structlog processors and a single root handler.

        *fmt* is ``"json"`` (one object per line) or ``"console"`` for
        human-readable development output.
        """
        if fmt not in LOG_FORMATS:
            raise ValueError(f"Unknown log format {fmt!r}; expected one of {LOG_FORMATS}")

        pre_chain: list[Any] = [
            RedactingProcessor(sensitive_fields),
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
        ]
        renderer: Any = (
            structlog.processors.JSONRenderer()
            if fmt == "json"
            else structlog.dev.ConsoleRenderer(colors=False)
        )
        structlog.configure(
            processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
            )
        )
        root = logging.getLogger()
        root.handlers[:] = [handler]
        root.setLevel(resolve_level(level))


__all__ = ["JsonLoggerFactory", "LOG_FORMATS", "resolve_level"]

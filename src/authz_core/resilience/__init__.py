"""Resilience – reconnect backoff."""

from authz_core.resilience.retry import (
    BackoffStrategy,
    ConstantBackoff,
    ExponentialBackoff,
    backoff_for,
)

__all__ = ["BackoffStrategy", "ConstantBackoff", "ExponentialBackoff", "backoff_for"]

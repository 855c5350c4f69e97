"""Resilience – backoff strategies."""
from authz_core.resilience.retry.backoff import (
    BackoffStrategy,
    ConstantBackoff,
    ExponentialBackoff,
    backoff_for,
)

__all__ = ["BackoffStrategy", "ConstantBackoff", "ExponentialBackoff", "backoff_for"]

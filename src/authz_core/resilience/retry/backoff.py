"""Delays between reconnect attempts of the invalidation channel.

``attempt`` counts consecutive failures and starts at 1; a successful
subscription resets it.
"""
from __future__ import annotations

import abc


class BackoffStrategy(abc.ABC):
    @abc.abstractmethod
    def compute(self, attempt: int) -> float:
        """Seconds to wait before retrying after failure number *attempt*."""


class ConstantBackoff(BackoffStrategy):
    """Same pause every time; five seconds unless told otherwise."""

    def __init__(self, delay: float = 5.0) -> None:
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self.delay = delay

    def compute(self, attempt: int) -> float:  # noqa: ARG002
        return self.delay


class ExponentialBackoff(BackoffStrategy):
    """Doubles from *base_delay* on each failure until it reaches *max_delay*."""

    def __init__(self, base_delay: float = 0.5, max_delay: float = 30.0) -> None:
        if base_delay < 0 or max_delay < base_delay:
            raise ValueError("expected 0 <= base_delay <= max_delay")
        self.base_delay = base_delay
        self.max_delay = max_delay

    def compute(self, attempt: int) -> float:
        exponent = max(attempt, 1) - 1
        return min(self.base_delay * 2**exponent, self.max_delay)


def backoff_for(delay: float, max_delay: float | None = None) -> BackoffStrategy:
    """Constant *delay*, or exponential growth from it when *max_delay* exceeds it."""
    if max_delay is not None and max_delay > delay:
        return ExponentialBackoff(base_delay=delay, max_delay=max_delay)
    return ConstantBackoff(delay)


__all__ = ["BackoffStrategy", "ConstantBackoff", "ExponentialBackoff", "backoff_for"]

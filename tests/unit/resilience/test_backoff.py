"""Unit tests for reconnect backoff strategies."""

from __future__ import annotations

import pytest

from authz_core.resilience.retry import BackoffStrategy, ConstantBackoff, ExponentialBackoff, backoff_for


class TestConstantBackoff:
    def test_default_is_five_seconds(self) -> None:
        backoff = ConstantBackoff()
        assert backoff.delay == 5.0
        assert [backoff.compute(n) for n in (1, 2, 10)] == [5.0, 5.0, 5.0]

    def test_zero_allowed(self) -> None:
        assert ConstantBackoff(0).compute(3) == 0

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError):
            ConstantBackoff(-1)

    def test_is_strategy(self) -> None:
        assert isinstance(ConstantBackoff(), BackoffStrategy)


class TestExponentialBackoff:
    def test_doubles(self) -> None:
        backoff = ExponentialBackoff(base_delay=1.0, max_delay=100.0)
        assert [backoff.compute(n) for n in (1, 2, 3, 4)] == [1.0, 2.0, 4.0, 8.0]

    def test_capped(self) -> None:
        assert ExponentialBackoff(base_delay=1.0, max_delay=5.0).compute(10) == 5.0

    def test_attempt_zero_uses_base(self) -> None:
        assert ExponentialBackoff(base_delay=0.5).compute(0) == 0.5

    def test_rejects_ceiling_below_base(self) -> None:
        with pytest.raises(ValueError):
            ExponentialBackoff(base_delay=5.0, max_delay=1.0)


class TestBackoffFor:
    def test_constant_without_ceiling(self) -> None:
        backoff = backoff_for(5.0)
        assert isinstance(backoff, ConstantBackoff)
        assert backoff.compute(4) == 5.0

    def test_ceiling_not_above_delay_stays_constant(self) -> None:
        assert isinstance(backoff_for(5.0, 5.0), ConstantBackoff)

    def test_exponential_with_ceiling(self) -> None:
        backoff = backoff_for(1.0, 8.0)
        assert isinstance(backoff, ExponentialBackoff)
        assert [backoff.compute(n) for n in (1, 2, 3, 4, 5)] == [1.0, 2.0, 4.0, 8.0, 8.0]

"""
Unit tests for TokenBucket and RateLimiter.
"""

import pytest

from messager.infrastructure.rate_limiting import RateLimiter, TokenBucket


class FakeMonotonic:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def ticks() -> FakeMonotonic:
    return FakeMonotonic()


class TestTokenBucket:
    """Unit tests for TokenBucket."""

    def test_burst_then_empty(self, ticks):
        """Test a full bucket allows `capacity` requests, then refuses."""
        bucket = TokenBucket(capacity=3, tokens_per_second=1.0, clock=ticks)

        assert [bucket.try_acquire() for _ in range(4)] == [True, True, True, False]

    def test_refills_over_time(self, ticks):
        """Test tokens come back at the configured rate, capped at capacity."""
        bucket = TokenBucket(capacity=2, tokens_per_second=0.5, clock=ticks)
        bucket.try_acquire()
        bucket.try_acquire()

        ticks.now += 1.0
        assert bucket.try_acquire() is False
        ticks.now += 1.0
        assert bucket.try_acquire() is True

        ticks.now += 100.0
        assert bucket.available_tokens == 2.0

    def test_seconds_until(self, ticks):
        """Test the wait for the next token."""
        bucket = TokenBucket(capacity=1, tokens_per_second=0.25, clock=ticks)

        assert bucket.seconds_until() == 0.0
        bucket.try_acquire()
        assert bucket.seconds_until() == pytest.approx(4.0)


class TestRateLimiter:
    """Unit tests for RateLimiter."""

    def test_limit_per_identifier(self, ticks):
        """Test each identifier has its own budget."""
        limiter = RateLimiter(limit=2, window_seconds=60, clock=ticks)

        assert limiter.check_rate_limit("10.0.0.1:/api/auth/login")
        assert limiter.check_rate_limit("10.0.0.1:/api/auth/login")
        assert not limiter.check_rate_limit("10.0.0.1:/api/auth/login")
        assert limiter.check_rate_limit("10.0.0.2:/api/auth/login")

    def test_retry_after(self, ticks):
        """Test Retry-After is the whole seconds until one request refills."""
        limiter = RateLimiter(limit=2, window_seconds=64, clock=ticks)
        key = "10.0.0.1:/api/auth/signup"
        limiter.check_rate_limit(key)
        limiter.check_rate_limit(key)

        assert limiter.get_retry_after_seconds(key) == 32

        ticks.now += 31.5
        assert limiter.get_retry_after_seconds(key) == 1

        ticks.now += 0.5
        assert limiter.get_retry_after_seconds(key) == 0
        assert limiter.check_rate_limit(key)

    def test_full_buckets_pruned_when_over_capacity(self, ticks):
        """Test idle identifiers are forgotten once max_tracked is reached."""
        limiter = RateLimiter(limit=1, window_seconds=10, max_tracked=2, clock=ticks)
        limiter.check_rate_limit("a")
        limiter.check_rate_limit("b")

        ticks.now += 20.0
        limiter.check_rate_limit("c")

        assert limiter.tracked == 1

    def test_busy_buckets_survive_pruning(self, ticks):
        """Test a bucket that has not refilled is kept."""
        limiter = RateLimiter(limit=1, window_seconds=10, max_tracked=1, clock=ticks)
        limiter.check_rate_limit("a")

        limiter.check_rate_limit("b")

        assert limiter.tracked == 2
        assert not limiter.check_rate_limit("a")

    @pytest.mark.parametrize("limit,window", [(0, 60), (5, 0)])
    def test_rejects_non_positive_config(self, limit, window):
        """Test limit and window must be positive."""
        with pytest.raises(ValueError):
            RateLimiter(limit=limit, window_seconds=window)

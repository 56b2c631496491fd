"""
Token bucket rate limiting, keyed per client.

A bucket holds up to `limit` tokens and refills at limit / window_seconds
tokens per second, so a client may burst `limit` requests and is then
held to the average rate.
"""

import math
import time
from typing import Callable, Dict


class TokenBucket:
    """
    Single token bucket.

    Attributes:
        capacity: Maximum tokens (burst size)
        tokens_per_second: Refill rate
    """

    def __init__(
        self,
        capacity: int,
        tokens_per_second: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.capacity = capacity
        self.tokens_per_second = tokens_per_second
        self._clock = clock
        self._tokens = float(capacity)
        self._last_update = clock()

    def _refill(self) -> None:
        now = self._clock()
        elapsed = now - self._last_update
        self._tokens = min(
            self._tokens + elapsed * self.tokens_per_second, float(self.capacity)
        )
        self._last_update = now

    @property
    def available_tokens(self) -> float:
        self._refill()
        return self._tokens

    @property
    def is_full(self) -> bool:
        return self.available_tokens >= self.capacity

    def try_acquire(self, tokens: float = 1.0) -> bool:
        """
        Take tokens without waiting.

        Returns:
            True if the tokens were taken, False if rate limited
        """
        self._refill()
        if self._tokens >= tokens:
            self._tokens -= tokens
            return True
        return False

    def seconds_until(self, tokens: float = 1.0) -> float:
        """Seconds until `tokens` are available (0 if available now)."""
        missing = tokens - self.available_tokens
        if missing <= 0:
            return 0.0
        return missing / self.tokens_per_second


class RateLimiter:
    """
    Per-identifier rate limiter.

    One bucket per identifier (for example "<client ip>:<path>"),
    created on first use. Once more than max_tracked identifiers are
    held, buckets that have refilled completely are dropped; a full
    bucket behaves exactly like a new one.
    """

    def __init__(
        self,
        limit: int = 20,
        window_seconds: int = 60,
        max_tracked: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            limit: Requests allowed per window (also the burst size)
            window_seconds: Window length in seconds
            max_tracked: Identifier count above which full buckets are pruned
            clock: Monotonic clock in seconds
        """
        if limit < 1 or window_seconds < 1:
            raise ValueError("limit and window_seconds must be positive")
        self.limit = limit
        self.window_seconds = window_seconds
        self.max_tracked = max_tracked
        self._clock = clock
        self._buckets: Dict[str, TokenBucket] = {}

    def _get_bucket(self, identifier: str) -> TokenBucket:
        bucket = self._buckets.get(identifier)
        if bucket is None:
            if len(self._buckets) >= self.max_tracked:
                self.prune()
            bucket = TokenBucket(
                capacity=self.limit,
                tokens_per_second=self.limit / self.window_seconds,
                clock=self._clock,
            )
            self._buckets[identifier] = bucket
        return bucket

    def check_rate_limit(self, identifier: str) -> bool:
        """
        Count one request for identifier.

        Returns:
            True if allowed, False if rate limited
        """
        return self._get_bucket(identifier).try_acquire()

    def get_retry_after_seconds(self, identifier: str) -> int:
        """Whole seconds until identifier may make another request."""
        return math.ceil(self._get_bucket(identifier).seconds_until(1.0))

    def prune(self) -> int:
        """
        Drop buckets that have refilled completely.

        Returns:
            Number of buckets removed
        """
        full = [key for key, bucket in self._buckets.items() if bucket.is_full]
        for key in full:
            del self._buckets[key]
        return len(full)

    @property
    def tracked(self) -> int:
        return len(self._buckets)

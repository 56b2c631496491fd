"""
Request rate limiting.
"""

from messager.infrastructure.rate_limiting.rate_limiter import RateLimiter, TokenBucket

__all__ = ["RateLimiter", "TokenBucket"]

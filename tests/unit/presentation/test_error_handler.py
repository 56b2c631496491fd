"""
Unit tests for the domain exception to HTTP status mapping.
"""

import importlib
import warnings

import pytest

from messager.domain.exceptions import (
    ConfigError,
    MessagerError,
    PayloadTooLargeError,
    RateLimitExceededError,
    TokenExpiredError,
    ValidationError,
)
from messager.presentation.api import error_handler
from messager.presentation.api.error_handler import status_for


class TestStatusFor:
    """Unit tests for status_for."""

    @pytest.mark.parametrize(
        "exc,expected",
        [
            (ValidationError("bad"), 400),
            (TokenExpiredError(), 401),
            (PayloadTooLargeError(size=2048, limit=1024), 413),
            (RateLimitExceededError(retry_after=3), 429),
            (ConfigError("missing secret"), 500),
            (MessagerError("odd", code="SOMETHING_NEW"), 500),
        ],
    )
    def test_codes(self, exc, expected):
        """Test each error code maps to its HTTP status."""
        assert status_for(exc) == expected

    def test_map_uses_no_deprecated_status_names(self):
        """Test building the status map raises no deprecation warnings."""
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            importlib.reload(error_handler)

"""Errors raised when the upstream events API cannot be used."""
from typing import Any, Optional


class UpstreamUnavailable(Exception):
    """Upstream call failed: error response, transport failure or bad payload."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitedError(UpstreamUnavailable):
    """Upstream answered with a rate-limit status."""

    def __init__(self, message: str, payload: Any = None):
        super().__init__(message, status_code=429)
        self.payload = payload

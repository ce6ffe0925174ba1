"""Failures raised by the remote gateway.

Every gateway call either returns a typed result or raises one of these.
The controller catches them at its boundary; nothing else should.
"""

from __future__ import annotations


class GatewayError(Exception):
    """Base error for remote tracker failures."""

    def __init__(self, message: str, *, target: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.target = target


class AuthFailure(GatewayError):
    """Credentials were rejected (HTTP 401/403)."""


class NotFound(GatewayError):
    """The issue, board or sprint no longer exists (HTTP 404)."""


class RateLimited(GatewayError):
    """The server asked us to slow down (HTTP 429)."""

    def __init__(
        self, message: str, *, target: str | None = None, retry_after: float | None = None
    ) -> None:
        super().__init__(message, target=target)
        self.retry_after = retry_after


class NetworkError(GatewayError):
    """Transport failure, timeout or server-side (5xx) error."""


class MalformedResponse(GatewayError):
    """The response could not be interpreted."""

"""
Exception hierarchy for the Beamable SDK.

Every error raised by the SDK itself derives from ``BeamableError``. Network
failures (connection refused, DNS, timeouts) are not wrapped: they surface as
the ``httpx.HTTPError`` subclass raised by the transport.

Example:
    try:
        await ctx.stats.get_stats(object_id)
    except APIError as e:
        print(f"API error {e.status_code}: {e.detail}")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class BeamableError(Exception):
    """Base class for all SDK errors."""


class NotConfiguredError(BeamableError, RuntimeError):
    """Raised when the SDK is used before ``configure()`` was called."""


class ValidationError(BeamableError, ValueError):
    """Raised for malformed caller input, before any network call is made."""


class ContentNotFoundError(BeamableError, LookupError):
    """Raised when a content id is not listed in the public manifest."""


@dataclass
class APIError(BeamableError):
    """
    Exception raised when the API answers with a non-2xx status.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code from the response.
        payload: Parsed JSON error body, or ``{"status": status_code}`` when
                 the body was not valid JSON.

    Example:
        try:
            await ctx.auth.login_user("player@example.com", "wrong")
        except APIError as e:
            print(e.payload)
    """

    message: str
    status_code: int = 0
    payload: dict[str, Any] = field(default_factory=dict)

    @property
    def detail(self) -> str:
        """Best-effort error description pulled from the payload."""
        for key in ("message", "error", "detail"):
            value = self.payload.get(key)
            if value:
                return str(value)
        return ""

    def __str__(self) -> str:
        """Return a formatted error message."""
        if self.detail:
            return f"{self.message} ({self.status_code}): {self.detail}"
        return f"{self.message} ({self.status_code})"

"""
Bearer-token storage shared between session cores.

A login performed through a standalone ``AuthModule`` (before the default
``BeamContext`` exists) must be visible to the context created afterwards.
Cores therefore do not own their tokens: they are handed a ``CredentialStore``
at construction, and unless told otherwise all of them receive the same
process-wide instance from ``shared_credentials()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple


class TokenPair(NamedTuple):
    """Snapshot of the stored tokens."""

    access_token: str | None
    refresh_token: str | None


@dataclass
class CredentialStore:
    """
    Mutable holder for the current access and refresh tokens.

    Attributes:
        access_token: Bearer token attached to authenticated client requests.
        refresh_token: Token exchanged for a new access token on refresh.

    Example:
        store = CredentialStore()
        store.set("access", "refresh")
        store.set("new-access")        # refresh token is kept
        print(store.snapshot())        # TokenPair("new-access", "refresh")
    """

    access_token: str | None = None
    refresh_token: str | None = None

    @property
    def has_access_token(self) -> bool:
        return bool(self.access_token)

    def set(self, access_token: str, refresh_token: str | None = None) -> None:
        """Store a new access token; the refresh token only changes when one is given."""
        self.access_token = access_token
        if refresh_token:
            self.refresh_token = refresh_token

    def snapshot(self) -> TokenPair:
        return TokenPair(self.access_token, self.refresh_token)

    def clear(self) -> None:
        """Forget both tokens."""
        self.access_token = None
        self.refresh_token = None


_shared = CredentialStore()


def shared_credentials() -> CredentialStore:
    """Return the process-wide store used by cores built without an explicit one."""
    return _shared

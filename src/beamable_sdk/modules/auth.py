"""
Authentication and account operations.

Every login-style call (guest, password, external, device, refresh and
third-party) posts a grant to ``/basic/auth/token`` and stores the returned
tokens in the core's shared credential store. When the module belongs to a
``BeamContext``, the context then refetches the current account so
``ctx.player_id`` follows the latest login.

An ``AuthModule`` can also be used on its own, before any context exists:

    core = BeamableCore()
    await AuthModule(core).login_user("player@example.com", "secret")
    ctx = await BeamContext.default()   # reuses the stored tokens
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from beamable_sdk.core.client import BeamableCore, RequestOptions
from beamable_sdk.errors import APIError, ValidationError

if TYPE_CHECKING:
    from beamable_sdk.core.context import BeamContext

logger = logging.getLogger(__name__)

TOKEN_PATH = "/basic/auth/token"
ACCOUNT_ME_PATH = "/basic/accounts/me"

GUEST_GRANT: dict[str, Any] = {"grant_type": "guest"}

_AUTH = RequestOptions(auth=True)


class AuthThirdParty(str, Enum):
    """Third-party identity providers supported by the token endpoint."""

    GOOGLE = "Google"
    APPLE = "Apple"
    STEAM = "Steam"
    FACEBOOK = "Facebook"


@dataclass(frozen=True)
class ExternalIdentity:
    """A federated identity to associate with the current account."""

    provider_service: str
    provider_namespace: str
    user_id: str

    def to_payload(self) -> dict[str, str]:
        return {
            "providerService": self.provider_service,
            "providerNamespace": self.provider_namespace,
            "userId": self.user_id,
        }


@dataclass
class UpdateAccountOptions:
    """
    Fields for ``PUT /basic/accounts/me``. Only fields that are set are sent.

    Attributes:
        third_party: Provider name to attach (with ``token``).
        token: Provider token proving ownership.
        device_id: Device id to attach.
        external: Federated identities to attach.
        gamer_tag_assoc: Gamer tag association object.
        username: New username.
        country: Country code.
        language: Language code.
        extra: Additional raw fields merged into the payload.
    """

    third_party: str | None = None
    token: str | None = None
    device_id: str | None = None
    external: list[ExternalIdentity] | None = None
    gamer_tag_assoc: Any = None
    username: str | None = None
    country: str | None = None
    language: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "thirdParty": self.third_party,
            "token": self.token,
            "deviceId": self.device_id,
            "gamerTagAssoc": self.gamer_tag_assoc,
            "username": self.username,
            "country": self.country,
            "language": self.language,
        }
        if self.external is not None:
            payload["external"] = [identity.to_payload() for identity in self.external]
        payload = {key: value for key, value in payload.items() if value is not None}
        payload.update(self.extra)
        return payload


def _require(**values: str) -> None:
    for name, value in values.items():
        if not value:
            raise ValidationError(f"{name} cannot be empty")


class AuthModule:
    """
    Login, registration and account management.

    Attributes:
        core: Gateway used for all requests.
    """

    def __init__(self, core: BeamableCore, context: BeamContext | None = None) -> None:
        self.core = core
        self._context = context

    # -------------------------------------------------------------------------
    # Token Grants
    # -------------------------------------------------------------------------

    async def exchange_token(self, grant: dict[str, Any]) -> dict[str, Any]:
        """
        Post a grant to the token endpoint and store the returned tokens.

        Unlike the login methods this never touches the owning context.

        Raises:
            APIError: If the grant is rejected or no access token is returned.
        """
        response = await self.core.request("POST", TOKEN_PATH, grant)
        access_token = response.get("access_token") if isinstance(response, dict) else None
        if not access_token:
            raise APIError(
                message="Token response did not include an access token",
                status_code=200,
                payload=response if isinstance(response, dict) else {},
            )
        self.core.set_tokens(access_token, response.get("refresh_token"))
        logger.debug("Stored tokens for grant %s", grant.get("grant_type"))
        return dict(response)

    async def _login(self, grant: dict[str, Any]) -> dict[str, Any]:
        if self._context is None:
            return await self.exchange_token(grant)

        async with self._context.login_lock:
            response = await self.exchange_token(grant)
            await self._context.refresh_identity()
        return response

    async def guest_login(self) -> dict[str, Any]:
        """Create an anonymous guest session."""
        return await self._login(dict(GUEST_GRANT))

    async def login_user(self, username_or_email: str, password: str) -> dict[str, Any]:
        """
        Log in with a username or email and password.

        Returns:
            dict: The token response (``access_token``, ``refresh_token``,
                  ``expires_in``, ``token_type``).
        """
        _require(username_or_email=username_or_email, password=password)
        return await self._login(
            {"grant_type": "password", "username": username_or_email, "password": password}
        )

    async def login_with_external(
        self, provider_service: str, provider_namespace: str, external_token: str
    ) -> dict[str, Any]:
        """Federated login through an external identity provider."""
        _require(external_token=external_token)
        return await self._login(
            {
                "grant_type": "external",
                "provider_service": provider_service,
                "provider_namespace": provider_namespace,
                "external_token": external_token,
            }
        )

    async def login_with_device_id(self, device_id: str) -> dict[str, Any]:
        _require(device_id=device_id)
        return await self._login({"grant_type": "device", "client_id": device_id})

    async def refresh_token(self, refresh_token: str) -> dict[str, Any]:
        """Exchange a refresh token for a new access token."""
        _require(refresh_token=refresh_token)
        return await self._login({"grant_type": "refresh_token", "refresh_token": refresh_token})

    async def login_with_third_party(
        self, third_party: AuthThirdParty | str, external_token: str
    ) -> dict[str, Any]:
        """Log in with a Google, Apple, Steam or Facebook token."""
        _require(external_token=external_token)
        return await self._login(
            {
                "grant_type": "third_party",
                "third_party": AuthThirdParty(third_party).value,
                "external_token": external_token,
            }
        )

    # -------------------------------------------------------------------------
    # Registration & Availability
    # -------------------------------------------------------------------------

    async def register_user(self, username_or_email: str, password: str) -> dict[str, Any]:
        """Attach an email and password to the current (guest) account."""
        _require(username_or_email=username_or_email, password=password)
        return await self.core.request(
            "POST",
            "/basic/accounts/register",
            {"email": username_or_email, "password": password},
            _AUTH,
        )

    async def is_third_party_available(
        self, third_party: AuthThirdParty | str, external_token: str
    ) -> dict[str, Any]:
        query = urlencode(
            {"third_party": AuthThirdParty(third_party).value, "external_token": external_token}
        )
        return await self.core.request("GET", f"/basic/accounts/available/third-party?{query}")

    async def is_email_available(self, email: str) -> dict[str, Any]:
        """Check whether an email is not yet registered. Returns ``{"available": bool}``."""
        _require(email=email)
        query = urlencode({"email": email})
        return await self.core.request("GET", f"/basic/accounts/available?{query}")

    # -------------------------------------------------------------------------
    # Password & Email Updates
    # -------------------------------------------------------------------------

    async def password_update_init(self, email: str) -> dict[str, Any]:
        """Send a password reset code to ``email``."""
        return await self.core.request(
            "POST", "/basic/accounts/password-update/init", {"email": email}
        )

    async def password_update_confirm(
        self, email: str, code: str, new_password: str
    ) -> dict[str, Any]:
        _require(code=code, new_password=new_password)
        return await self.core.request(
            "POST",
            "/basic/accounts/password-update/confirm",
            {"email": email, "code": code, "password": new_password},
        )

    async def email_update_init(self, new_email: str) -> dict[str, Any]:
        """Send a confirmation code to ``new_email``."""
        return await self.core.request(
            "POST", "/basic/accounts/email-update/init", {"newEmail": new_email}
        )

    async def email_update_confirm(self, code: str, password: str) -> dict[str, Any]:
        return await self.core.request(
            "POST",
            "/basic/accounts/email-update/confirm",
            {"code": code, "password": password},
        )

    # -------------------------------------------------------------------------
    # Current Account
    # -------------------------------------------------------------------------

    async def get_current_account(self) -> dict[str, Any]:
        """
        Get the account of the logged-in player.

        Returns:
            dict: Account info including ``id``, ``email``, ``scopes``,
                  ``thirdPartyAppAssociations`` and ``deviceIds``.
        """
        return await self.core.request("GET", ACCOUNT_ME_PATH, opts=_AUTH)

    async def update_account(self, options: UpdateAccountOptions) -> dict[str, Any]:
        return await self.core.request("PUT", ACCOUNT_ME_PATH, options.to_payload(), _AUTH)

    async def register_third_party(self, third_party: str, token: str) -> dict[str, Any]:
        """Attach a third-party credential to the current account."""
        _require(third_party=third_party, token=token)
        return await self.update_account(UpdateAccountOptions(third_party=third_party, token=token))

    async def register_device(self, device_id: str) -> dict[str, Any]:
        """Attach a device id to the current account."""
        _require(device_id=device_id)
        return await self.update_account(UpdateAccountOptions(device_id=device_id))

    async def remove_third_party_association(
        self, provider: AuthThirdParty | str
    ) -> dict[str, Any]:
        return await self.core.request(
            "DELETE",
            f"{ACCOUNT_ME_PATH}/third-party",
            {"provider": AuthThirdParty(provider).value},
        )

    # -------------------------------------------------------------------------
    # Server-only
    # -------------------------------------------------------------------------

    async def search_accounts(
        self, query: str = "", page: int = 0, page_size: int = 10
    ) -> dict[str, Any]:
        """Search accounts by email, id or username. Requires server mode."""
        params = urlencode({"query": query, "page": page, "pagesize": page_size})
        return await self.core.request("GET", f"/basic/accounts/search?{params}")

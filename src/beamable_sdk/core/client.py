"""
HTTP gateway for the Beamable REST API.

``BeamableCore`` is the only place that talks to the network. Every feature
module builds a path and calls ``request()``; the core then:

    - Builds the URL (direct, or routed through a microservice slug)
    - Adds the tenant scope header to every request
    - Client mode: attaches the bearer token when the call requires auth
    - Server mode: signs the request with the realm secret instead
    - Adds the impersonation (gamertag) header when asked to
    - Converts non-2xx responses into ``APIError``

There are no retries and no caching. Network failures propagate as the
``httpx.HTTPError`` raised by the transport.

Example:
    core = BeamableCore()  # uses the global configuration
    stats = await core.request(
        "GET",
        "/object/stats/client.public.player.42/",
        opts=RequestOptions(auth=True),
    )
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from beamable_sdk.config import BeamableConfig, get_global_config
from beamable_sdk.core.credentials import CredentialStore, TokenPair, shared_credentials
from beamable_sdk.core.signing import calculate_signature
from beamable_sdk.errors import APIError, ValidationError

logger = logging.getLogger(__name__)

# =============================================================================
# WIRE CONSTANTS
# =============================================================================

CONTENT_TYPE = "application/json"
SCOPE_HEADER = "X-BEAM-SCOPE"
SIGNATURE_HEADER = "X-BEAM-SIGNATURE"
GAMERTAG_HEADER = "X-BEAM-GAMERTAG"

# Service used when a request targets "the" microservice without naming one.
DEFAULT_MICROSERVICE = "CoreService"


@dataclass(frozen=True)
class RequestOptions:
    """
    Per-request flags for ``BeamableCore.request``.

    Attributes:
        auth: Attach the bearer token (client mode only). Default False.
        microservice: Route through a microservice. ``True`` targets
                      ``CoreService``; a string names the service. Default False.
        gamertag: Player id to impersonate via ``X-BEAM-GAMERTAG``. Only the
                  server honours it for signed (server-mode) requests.
    """

    auth: bool = False
    microservice: bool | str = False
    gamertag: str | None = None


# =============================================================================
# SESSION CORE
# =============================================================================


class BeamableCore:
    """
    Async gateway for every call to the Beamable API.

    Tokens live in a ``CredentialStore`` rather than on the core, so cores
    constructed independently (for example one used to log in before the
    default context exists) share them.

    Attributes:
        config: Configuration captured at construction.
        credentials: Token store shared with other cores.

    Example:
        async with BeamableCore() as core:
            manifest = await core.request("GET", "/basic/content/manifest/public/json")
    """

    def __init__(
        self,
        config: BeamableConfig | None = None,
        credentials: CredentialStore | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Args:
            config: Configuration to use. Defaults to the global configuration.
            credentials: Token store. Defaults to the process-wide store.
            http_client: Caller-owned client to reuse. Without one, each
                         request opens a short-lived client unless the core is
                         used as an async context manager.

        Raises:
            NotConfiguredError: If no config is given and none is installed.
        """
        self.config = config if config is not None else get_global_config()
        self.credentials = credentials if credentials is not None else shared_credentials()
        self._http_client = http_client
        self._owns_client = False

    # -------------------------------------------------------------------------
    # Context Manager Protocol
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> BeamableCore:
        """Open a pooled client for the lifetime of the ``async with`` block."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.config.timeout)
            self._owns_client = True
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Close the pooled client if this core created it."""
        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
            self._owns_client = False

    # -------------------------------------------------------------------------
    # Tokens
    # -------------------------------------------------------------------------

    def set_tokens(self, access_token: str, refresh_token: str | None = None) -> None:
        """Store tokens in the shared credential store."""
        self.credentials.set(access_token, refresh_token)

    def get_tokens(self) -> TokenPair:
        return self.credentials.snapshot()

    # -------------------------------------------------------------------------
    # Request Building
    # -------------------------------------------------------------------------

    def build_url(self, path: str, microservice: bool | str = False) -> str:
        """
        Resolve a request path to an absolute URL.

        Microservice routes go through ``/basic/{cid}.{pid}.{hash}micro_{name}``.
        """
        if microservice:
            name = microservice if isinstance(microservice, str) else DEFAULT_MICROSERVICE
            slug = f"/basic/{self.config.cid}.{self.config.pid}.{self.config.hash}micro_{name}"
            return f"{self.config.api_url}{slug}{path}"
        return f"{self.config.api_url}{path}"

    def build_headers(
        self,
        method: str,
        path: str,
        body: str | None,
        opts: RequestOptions,
    ) -> dict[str, str]:
        """
        Build the header set for one request.

        Args:
            method: Upper-cased HTTP method.
            path: Path and query string, as signed.
            body: Serialized body exactly as sent, or None.
            opts: Request flags.
        """
        headers = {
            "Content-Type": CONTENT_TYPE,
            SCOPE_HEADER: self.config.scope,
        }

        if self.config.is_server:
            # Server mode never sends a bearer token, even if one is stored
            headers[SIGNATURE_HEADER] = calculate_signature(
                self.config.secret or "",
                self.config.pid,
                path,
                body,
                method,
            )
        elif opts.auth and self.credentials.access_token:
            headers["Authorization"] = f"Bearer {self.credentials.access_token}"

        if opts.gamertag:
            headers[GAMERTAG_HEADER] = str(opts.gamertag)

        return headers

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    async def request(
        self,
        method: str,
        path: str,
        data: Any = None,
        opts: RequestOptions | None = None,
    ) -> Any:
        """
        Make a REST API call to Beamable.

        Args:
            method: HTTP method.
            path: API path including any query string. Must start with ``/``.
            data: JSON-serializable body. Never sent with GET.
            opts: Request flags, see ``RequestOptions``.

        Returns:
            The parsed JSON response, or None for an empty body.

        Raises:
            ValidationError: If ``path`` does not start with ``/``.
            APIError: If the server answers with a non-2xx status.
            httpx.HTTPError: If the request could not be completed.
        """
        if not path.startswith("/"):
            raise ValidationError(f"path must start with '/': {path!r}")

        opts = opts or RequestOptions()
        method = method.upper()

        body: str | None = None
        if data is not None and method != "GET":
            body = json.dumps(data, separators=(",", ":"))

        url = self.build_url(path, opts.microservice)
        headers = self.build_headers(method, path, body, opts)

        logger.debug("%s %s (mode=%s)", method, url, self.config.mode.value)
        response = await self._send(method, url, headers=headers, content=body)
        return self._handle_response(response, method, path)

    async def request_microservice(
        self,
        method: str,
        ms_name: str,
        path: str,
        data: Any = None,
        opts: RequestOptions | None = None,
    ) -> Any:
        """Same as ``request`` but routed to the named microservice."""
        opts = opts or RequestOptions()
        return await self.request(
            method,
            path,
            data,
            RequestOptions(auth=opts.auth, microservice=ms_name, gamertag=opts.gamertag),
        )

    async def download(self, url: str) -> Any:
        """
        GET an absolute URL (such as a content CDN link) and parse it as JSON.

        No scope, auth or signature headers are sent.

        Raises:
            APIError: If the server answers with a non-2xx status.
            httpx.HTTPError: If the request could not be completed.
        """
        logger.debug("GET %s (download)", url)
        response = await self._send("GET", url)
        return self._handle_response(response, "GET", url)

    async def _send(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        content: str | None = None,
    ) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.request(method, url, headers=headers, content=content)
        async with httpx.AsyncClient(timeout=self.config.timeout) as client:
            return await client.request(method, url, headers=headers, content=content)

    @staticmethod
    def _handle_response(response: httpx.Response, method: str, path: str) -> Any:
        if not response.is_success:
            try:
                payload = response.json()
            except ValueError:
                payload = {"status": response.status_code}
            if not isinstance(payload, dict):
                payload = {"status": response.status_code, "body": payload}
            logger.debug("%s %s failed with status %d", method, path, response.status_code)
            raise APIError(
                message=f"{method} {path} failed",
                status_code=response.status_code,
                payload=payload,
            )

        if not response.content:
            return None
        return response.json()

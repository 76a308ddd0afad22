"""
Configuration management for the Beamable SDK.

The SDK is configured once per process, before the first session is created:

    from beamable_sdk import BeamableConfig, configure

    configure(BeamableConfig(cid="1234", pid="DE_5678", api_url="https://api.beamable.com"))

Server (admin) mode additionally needs the realm secret, which is only ever
used to sign requests and is never transmitted:

    configure(BeamableConfig(cid=..., pid=..., api_url=..., secret="...", mode="server"))

Configuration can also be built from environment variables with
``BeamableConfig.from_env()``. Precedence (highest to lowest):

1. The ``environ`` mapping passed to ``from_env`` (defaults to ``os.environ``)
2. Default values

The configuration object is immutable once created. Every ``BeamableCore``
captures the object it was built with, so calling ``configure()`` again only
affects sessions created afterwards.

Environment Variable Mapping:
    BEAMABLE_CID       -> cid
    BEAMABLE_PID       -> pid
    BEAMABLE_API_URL   -> api_url
    BEAMABLE_HASH      -> hash
    BEAMABLE_SECRET    -> secret
    BEAMABLE_MODE      -> mode ("client" or "server")
    BEAMABLE_TIMEOUT   -> timeout (seconds)
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from beamable_sdk.errors import NotConfiguredError

logger = logging.getLogger(__name__)

# =============================================================================
# DEFAULT CONFIGURATION VALUES
# =============================================================================

DEFAULT_API_URL = "https://api.beamable.com"

ENV_CID = "BEAMABLE_CID"
ENV_PID = "BEAMABLE_PID"
ENV_API_URL = "BEAMABLE_API_URL"
ENV_HASH = "BEAMABLE_HASH"
ENV_SECRET = "BEAMABLE_SECRET"
ENV_MODE = "BEAMABLE_MODE"
ENV_TIMEOUT = "BEAMABLE_TIMEOUT"


class Mode(str, Enum):
    """Authorization strategy used by every request."""

    CLIENT = "client"
    SERVER = "server"


# =============================================================================
# CONFIGURATION DATACLASS
# =============================================================================


@dataclass(frozen=True)
class BeamableConfig:
    """
    Immutable configuration container for the SDK.

    Attributes:
        cid: Customer id. Combined with ``pid`` into the ``X-BEAM-SCOPE`` header.
        pid: Project (realm) id.
        api_url: Base URL of the Beamable API. A trailing slash is removed.
        hash: Content hash used when routing to microservices.
        secret: Realm secret. Required in server mode, used only for signing.
        mode: ``Mode.CLIENT`` (bearer tokens) or ``Mode.SERVER`` (signed requests).
        timeout: HTTP timeout in seconds. ``None`` disables timeouts entirely.

    Example:
        config = BeamableConfig(cid="1234", pid="DE_5678", api_url="https://api.beamable.com")
    """

    cid: str
    pid: str
    api_url: str = DEFAULT_API_URL
    hash: str = ""
    secret: str | None = None
    mode: Mode = Mode.CLIENT
    timeout: float | None = None

    def __post_init__(self) -> None:
        """
        Normalize and validate configuration values.

        Raises:
            ValueError: If a required value is empty, the mode is unknown,
                the timeout is not positive, or server mode lacks a secret.
        """
        if not self.cid:
            raise ValueError("cid cannot be empty")
        if not self.pid:
            raise ValueError("pid cannot be empty")
        if not self.api_url:
            raise ValueError("api_url cannot be empty")

        # Frozen dataclass: normalized values go through object.__setattr__
        object.__setattr__(self, "api_url", self.api_url.rstrip("/"))
        object.__setattr__(self, "mode", Mode(self.mode))

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be a positive number")
        if self.mode is Mode.SERVER and not self.secret:
            raise ValueError("secret is required in server mode")

    @property
    def is_server(self) -> bool:
        """True when requests are signed with the realm secret."""
        return self.mode is Mode.SERVER

    @property
    def scope(self) -> str:
        """Tenant scope sent with every request (``cid.pid``)."""
        return f"{self.cid}.{self.pid}"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BeamableConfig:
        """
        Create a configuration from environment variables.

        Args:
            environ: Mapping to read from. If None, uses ``os.environ``.

        Returns:
            BeamableConfig: A fully populated configuration object.

        Raises:
            NotConfiguredError: If the customer or project id is missing.
            ValueError: If any value fails validation.
        """
        env = os.environ if environ is None else environ

        cid = env.get(ENV_CID, "")
        pid = env.get(ENV_PID, "")
        if not cid or not pid:
            raise NotConfiguredError(f"{ENV_CID} and {ENV_PID} must be set to configure Beamable")

        timeout_raw = env.get(ENV_TIMEOUT)
        return cls(
            cid=cid,
            pid=pid,
            api_url=env.get(ENV_API_URL) or DEFAULT_API_URL,
            hash=env.get(ENV_HASH, ""),
            secret=env.get(ENV_SECRET) or None,
            mode=Mode((env.get(ENV_MODE) or Mode.CLIENT.value).lower()),
            timeout=float(timeout_raw) if timeout_raw else None,
        )


# =============================================================================
# PROCESS-WIDE CONFIGURATION
# =============================================================================

_global_config: BeamableConfig | None = None


def configure(config: BeamableConfig) -> None:
    """Install the process-wide configuration used by sessions created afterwards."""
    global _global_config
    _global_config = config
    logger.debug("Beamable configured for scope %s in %s mode", config.scope, config.mode.value)


def get_global_config() -> BeamableConfig:
    """
    Return the process-wide configuration.

    Raises:
        NotConfiguredError: If ``configure()`` has not been called.
    """
    if _global_config is None:
        raise NotConfiguredError(
            "Beamable is not configured. Call configure(BeamableConfig(cid=..., pid=..., "
            "api_url=...)) before using the SDK."
        )
    return _global_config


def reset_global_config() -> None:
    """Forget the process-wide configuration (test isolation)."""
    global _global_config
    _global_config = None

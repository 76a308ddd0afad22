"""Beamable SDK: an async Python client for the Beamable game backend.

Configure once, then work through the default context:

    from beamable_sdk import BeamableConfig, BeamContext, configure

    configure(BeamableConfig(cid="1234", pid="DE_5678"))
    ctx = await BeamContext.default()
    await ctx.on_ready()
    stats = await ctx.stats.get_stats(ctx.stats.build_player_object_id(ctx.player_id))

Version Management
------------------
``__version__`` is read from the installed package metadata at import time.
The single source of truth is the ``version`` field in ``pyproject.toml``.
"""

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError, version

from beamable_sdk.config import BeamableConfig, Mode, configure, get_global_config
from beamable_sdk.core.client import BeamableCore, RequestOptions
from beamable_sdk.core.context import BeamContext
from beamable_sdk.core.credentials import CredentialStore, shared_credentials
from beamable_sdk.errors import (
    APIError,
    BeamableError,
    ContentNotFoundError,
    NotConfiguredError,
    ValidationError,
)
from beamable_sdk.modules.auth import AuthModule, AuthThirdParty
from beamable_sdk.modules.content import ContentModule
from beamable_sdk.modules.inventory import InventoryModule
from beamable_sdk.modules.stats import StatsModule

try:
    __version__: str = version("beamable-sdk")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

# Applications decide where SDK log output goes.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "APIError",
    "AuthModule",
    "AuthThirdParty",
    "BeamContext",
    "BeamableConfig",
    "BeamableCore",
    "BeamableError",
    "ContentModule",
    "ContentNotFoundError",
    "CredentialStore",
    "InventoryModule",
    "Mode",
    "NotConfiguredError",
    "RequestOptions",
    "StatsModule",
    "ValidationError",
    "configure",
    "get_global_config",
    "shared_credentials",
]

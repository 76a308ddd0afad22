"""
Session bootstrap and the default ``BeamContext``.

``BeamContext`` bundles a ``BeamableCore`` with the feature modules and tracks
who the current player is. Most applications use the process-wide default:

    configure(BeamableConfig(cid=..., pid=..., api_url=...))
    ctx = await BeamContext.default()
    await ctx.on_ready()
    print(ctx.player_id)

Bootstrap
---------
The default context is built once, on first access:

- Server mode: ready immediately. Server callers act on behalf of players
  per call (``gamertag``), so there is no session to establish.
- Client mode: if the shared credential store already holds an access token
  (the caller logged in through a standalone ``AuthModule``), that session is
  reused. Otherwise a guest session is created. Either way the current
  account is fetched once to populate ``player_id``.

A failed account fetch is logged and leaves ``player_id`` unset; the context
still becomes ready. A failed guest login propagates to every awaiter.

Readiness vs. identity
----------------------
``on_ready()`` is a one-shot signal: it fires once, when bootstrap finishes.
``player_id`` is separate and is reassigned after every successful login made
through ``ctx.auth``, and cleared when the account fetch after a login
fails. Logins on one context are serialized by
``login_lock``, so the token exchange, token storage and account fetch of one
login never interleave with another's.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

import httpx

from beamable_sdk.config import get_global_config
from beamable_sdk.core.client import BeamableCore
from beamable_sdk.errors import APIError
from beamable_sdk.modules.auth import GUEST_GRANT, AuthModule
from beamable_sdk.modules.content import ContentModule
from beamable_sdk.modules.inventory import InventoryModule
from beamable_sdk.modules.stats import StatsModule

logger = logging.getLogger(__name__)


class BeamContext:
    """
    A bootstrapped session with its feature modules.

    Attributes:
        core: The HTTP gateway shared by all modules.
        auth: Authentication and account operations.
        stats: Player and game stats.
        inventory: Player inventory.
        content: Public content catalog.
        player_id: Id of the current account, or None if unknown.
        login_lock: Serializes login-style calls made through ``auth``.
    """

    def __init__(self, core: BeamableCore) -> None:
        self.core = core
        self.player_id: int | None = None
        self.login_lock = asyncio.Lock()
        self._ready = asyncio.Event()

        self.auth = AuthModule(core, self)
        self.inventory = InventoryModule(core)
        self.stats = StatsModule(core)
        self.content = ContentModule(core)

    # -------------------------------------------------------------------------
    # Default Context
    # -------------------------------------------------------------------------

    @classmethod
    async def default(cls) -> BeamContext:
        """
        Return the process-wide context, bootstrapping it on first access.

        Concurrent callers share the same in-flight bootstrap. Cancelling one
        caller does not cancel the bootstrap for the others.

        Raises:
            NotConfiguredError: If ``configure()`` has not been called.
            APIError: If the guest login fails during bootstrap.
        """
        # Checked outside the task so the error is never memoized
        get_global_config()
        return await asyncio.shield(_default_provider.get())

    @classmethod
    def reset_default(cls) -> None:
        """Drop the memoized default context (test isolation)."""
        _default_provider.reset()

    @classmethod
    async def create(cls, core: BeamableCore | None = None) -> BeamContext:
        """
        Build and bootstrap a new context.

        Args:
            core: Gateway to use. Defaults to a core built from the global
                  configuration and the shared credential store.
        """
        context = cls(core if core is not None else BeamableCore())
        await context._bootstrap()
        return context

    # -------------------------------------------------------------------------
    # Readiness
    # -------------------------------------------------------------------------

    @property
    def is_ready(self) -> bool:
        return self._ready.is_set()

    async def on_ready(self) -> None:
        """Wait until the initial bootstrap has completed."""
        await self._ready.wait()

    async def refresh_identity(self) -> None:
        """
        Refetch the current account after a login, then mark the context ready.

        Called by ``AuthModule`` after every successful login-style call.
        """
        self.player_id = None
        await self._fetch_player_info()
        self._ready.set()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _bootstrap(self) -> None:
        if self.core.config.is_server:
            logger.debug("Server mode: skipping guest session and account fetch")
        else:
            if self.core.credentials.has_access_token:
                logger.debug("Reusing stored access token")
            else:
                await self.auth.exchange_token(GUEST_GRANT)
            await self._fetch_player_info()
        self._ready.set()

    async def _fetch_player_info(self) -> None:
        try:
            account = await self.auth.get_current_account()
        except (APIError, httpx.HTTPError) as e:
            logger.warning("Failed to fetch player info: %s", e)
            return

        player_id = account.get("id") if isinstance(account, dict) else None
        if player_id is None:
            logger.warning("Account response did not include an id")
            return
        try:
            self.player_id = int(player_id)
        except (TypeError, ValueError):
            logger.warning("Account response had a non-integer id: %r", player_id)


class ContextProvider:
    """
    Lazily builds a context exactly once and hands the same task to every caller.

    The task belongs to the event loop that was running on first access;
    ``reset()`` must be called before reusing the provider from another loop.
    """

    def __init__(self, factory: Callable[[], Awaitable[BeamContext]]) -> None:
        self._factory = factory
        self._task: asyncio.Task[BeamContext] | None = None

    def get(self) -> asyncio.Task[BeamContext]:
        """
        Return the bootstrap task, starting it on first call.

        Raises:
            RuntimeError: If called without a running event loop.
        """
        if self._task is None:
            loop = asyncio.get_running_loop()
            self._task = loop.create_task(self._build())
        return self._task

    def reset(self) -> None:
        self._task = None

    async def _build(self) -> BeamContext:
        return await self._factory()


_default_provider = ContextProvider(BeamContext.create)

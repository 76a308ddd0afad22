"""
Player and game stats.

Stats are stored per object id, built from a domain (``client`` or
``game``), an access level (``public`` or ``private``) and the player id:

    object_id = StatsModule.build_player_object_id(ctx.player_id)
    await ctx.stats.set_stats(object_id, {"alias": "Gob"})

In server mode pass ``gamertag`` to act on behalf of a player.
"""

from __future__ import annotations

from numbers import Real
from typing import Any

from beamable_sdk.core.client import BeamableCore, RequestOptions
from beamable_sdk.errors import ValidationError

DOMAINS = ("client", "game")
ACCESS_LEVELS = ("public", "private")


class StatsModule:
    def __init__(self, core: BeamableCore) -> None:
        self.core = core

    @staticmethod
    def build_player_object_id(
        player_id: int | str, domain: str = "client", access: str = "public"
    ) -> str:
        """
        Build a player stats object id, e.g. ``client.public.player.42``.

        Raises:
            ValidationError: If the domain or access level is unknown.
        """
        if domain not in DOMAINS:
            raise ValidationError(f"domain must be one of {DOMAINS}, got {domain!r}")
        if access not in ACCESS_LEVELS:
            raise ValidationError(f"access must be one of {ACCESS_LEVELS}, got {access!r}")
        return f"{domain}.{access}.player.{player_id}"

    async def get_stats(self, object_id: str, gamertag: str | None = None) -> dict[str, Any]:
        return await self.core.request(
            "GET", _path(object_id), opts=RequestOptions(auth=True, gamertag=gamertag)
        )

    async def set_stats(
        self, object_id: str, stats: dict[str, Any], gamertag: str | None = None
    ) -> dict[str, Any]:
        """Set stats (key-value pairs) on ``object_id``."""
        return await self.core.request(
            "POST", _path(object_id), stats, RequestOptions(auth=True, gamertag=gamertag)
        )

    async def increment_stats(
        self, object_id: str, increments: dict[str, Any], gamertag: str | None = None
    ) -> dict[str, Any]:
        """
        Add numeric deltas to existing stats.

        Raises:
            ValidationError: If any delta is not a number.
        """
        for key, value in increments.items():
            if isinstance(value, bool) or not isinstance(value, Real):
                raise ValidationError(f"increment for {key!r} must be a number, got {value!r}")
        return await self.core.request(
            "POST",
            _path(object_id),
            {"add": increments},
            RequestOptions(auth=True, gamertag=gamertag),
        )

    async def delete_stats(
        self, object_id: str, keys: list[str], gamertag: str | None = None
    ) -> dict[str, Any]:
        return await self.core.request(
            "DELETE",
            _path(object_id),
            {"stats": keys},
            RequestOptions(auth=True, gamertag=gamertag),
        )

    async def get_player_stats(self, object_id: str, gamertag: str | None = None) -> dict[str, Any]:
        """Read stats through the client-safe ``/client`` endpoint."""
        return await self.core.request(
            "GET", _path(object_id, "client"), opts=RequestOptions(auth=True, gamertag=gamertag)
        )

    async def set_player_stats(
        self, object_id: str, stats: dict[str, Any], gamertag: str | None = None
    ) -> dict[str, Any]:
        """Write stats through the client-safe ``/client`` endpoint."""
        return await self.core.request(
            "POST",
            _path(object_id, "client"),
            stats,
            RequestOptions(auth=True, gamertag=gamertag),
        )


def _path(object_id: str, suffix: str = "") -> str:
    if not object_id:
        raise ValidationError("object_id cannot be empty")
    return f"/object/stats/{object_id}/{suffix}"

"""Player inventory (currencies and items)."""

from __future__ import annotations

from typing import Any

from beamable_sdk.core.client import BeamableCore, RequestOptions
from beamable_sdk.errors import ValidationError


class InventoryModule:
    def __init__(self, core: BeamableCore) -> None:
        self.core = core

    async def get_inventory(
        self, player_id: int | str, gamertag: str | None = None
    ) -> dict[str, Any]:
        """
        Get the inventory of a player.

        Returns:
            dict: ``currencies`` (id, amount, properties) and ``items``.
        """
        if player_id in (None, ""):
            raise ValidationError("player_id cannot be empty")
        return await self.core.request(
            "GET",
            f"/object/inventory/{player_id}/",
            opts=RequestOptions(auth=True, gamertag=gamertag),
        )

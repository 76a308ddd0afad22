"""
Public content catalog.

Content is listed in the public manifest; each entry points at a JSON
document on the content CDN:

    manifest = await ctx.content.get_public_manifest()
    goblin = await ctx.content.get_content("Minions.GoblinBlue")
    minions = await ctx.content.get_content_by_type("Minions")
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from beamable_sdk.core.client import BeamableCore, RequestOptions
from beamable_sdk.errors import APIError, ContentNotFoundError

logger = logging.getLogger(__name__)

MANIFEST_PATH = "/basic/content/manifest/public/json"


def _entry_id(entry: dict[str, Any]) -> str:
    return str(entry.get("contentId") or entry.get("id") or "")


def manifest_entries(manifest: dict[str, Any]) -> list[dict[str, Any]]:
    """Return the entry list, whether nested under ``manifest`` or at the top level."""
    nested = manifest.get("manifest")
    if isinstance(nested, dict) and nested.get("entries"):
        return list(nested["entries"])
    return list(manifest.get("entries") or [])


class ContentModule:
    def __init__(self, core: BeamableCore) -> None:
        self.core = core

    async def get_public_manifest(self, gamertag: str | None = None) -> dict[str, Any]:
        """Fetch the public content manifest."""
        return await self.core.request(
            "GET", MANIFEST_PATH, opts=RequestOptions(gamertag=gamertag)
        )

    async def get_content(self, content_id: str) -> Any:
        """
        Fetch a single content document by id.

        Raises:
            ContentNotFoundError: If the manifest has no entry for ``content_id``
                or the entry has no uri.
            APIError: If the manifest or the document cannot be fetched.
        """
        entries = manifest_entries(await self.get_public_manifest())
        for entry in entries:
            if _entry_id(entry) == content_id:
                uri = entry.get("uri")
                if not uri:
                    raise ContentNotFoundError(f"Content has no uri: {content_id}")
                return await self.core.download(uri)
        raise ContentNotFoundError(f"Content not found: {content_id}")

    async def get_content_by_type(self, content_type: str) -> list[Any]:
        """
        Fetch every content document whose id starts with ``{content_type}.``.

        Documents are downloaded concurrently. A document that fails to
        download, or has no uri, is logged and left out of the result.
        """
        prefix = f"{content_type}."
        entries = [
            entry
            for entry in manifest_entries(await self.get_public_manifest())
            if _entry_id(entry).startswith(prefix)
        ]
        if not entries:
            return []

        results = await asyncio.gather(*(self._download_entry(entry) for entry in entries))
        return [result for result in results if result is not None]

    async def _download_entry(self, entry: dict[str, Any]) -> Any:
        uri = entry.get("uri")
        if not uri:
            logger.warning("Content %s has no uri", _entry_id(entry))
            return None
        try:
            return await self.core.download(uri)
        except (APIError, httpx.HTTPError) as e:
            logger.warning("Failed to fetch content %s: %s", _entry_id(entry), e)
            return None

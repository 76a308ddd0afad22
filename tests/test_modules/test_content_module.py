"""
Tests for ContentModule.

The manifest endpoint and the content CDN are both mocked with respx.
"""

import logging

import httpx
import pytest
import respx
from httpx import Response

from beamable_sdk.core.client import GAMERTAG_HEADER, BeamableCore
from beamable_sdk.errors import APIError, ContentNotFoundError
from beamable_sdk.modules.content import ContentModule, manifest_entries
from tests.constants import API_URL, CDN_URL

MANIFEST_URL = f"{API_URL}/basic/content/manifest/public/json"

MANIFEST = {
    "id": "global",
    "entries": [
        {"contentId": "Minions.GoblinBlue", "uri": f"{CDN_URL}/minions/goblin_blue.json"},
        {"contentId": "Minions.GoblinRed", "uri": f"{CDN_URL}/minions/goblin_red.json"},
        {"contentId": "currency.gems", "uri": f"{CDN_URL}/currency/gems.json"},
    ],
}


@pytest.fixture
def content(core: BeamableCore) -> ContentModule:
    return ContentModule(core)


# =============================================================================
# MANIFEST TESTS
# =============================================================================


class TestManifest:
    """Tests for the public manifest."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_public_manifest(self, content: ContentModule):
        """Test the manifest is fetched without auth."""
        route = respx.get(MANIFEST_URL).mock(return_value=Response(200, json=MANIFEST))

        manifest = await content.get_public_manifest()

        assert len(manifest["entries"]) == 3
        assert "Authorization" not in route.calls.last.request.headers

    @pytest.mark.asyncio
    @respx.mock
    async def test_manifest_as_player(self, server_core: BeamableCore):
        """Test server mode forwards the gamertag."""
        route = respx.get(MANIFEST_URL).mock(return_value=Response(200, json=MANIFEST))

        await ContentModule(server_core).get_public_manifest(gamertag="42")

        assert route.calls.last.request.headers[GAMERTAG_HEADER] == "42"

    def test_nested_entries(self):
        """Test entries nested under "manifest" are found."""
        nested = {"manifest": {"entries": [{"id": "a.b", "uri": "x"}]}}

        assert manifest_entries(nested) == [{"id": "a.b", "uri": "x"}]

    def test_missing_entries(self):
        """Test a manifest without entries yields an empty list."""
        assert manifest_entries({}) == []


# =============================================================================
# CONTENT DOWNLOAD TESTS
# =============================================================================


class TestGetContent:
    """Tests for get_content()."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_content(self, content: ContentModule):
        """Test the matching entry's document is downloaded."""
        respx.get(MANIFEST_URL).mock(return_value=Response(200, json=MANIFEST))
        respx.get(f"{CDN_URL}/minions/goblin_blue.json").mock(
            return_value=Response(200, json={"id": "Minions.GoblinBlue", "version": "1"})
        )

        goblin = await content.get_content("Minions.GoblinBlue")

        assert goblin["id"] == "Minions.GoblinBlue"

    @pytest.mark.asyncio
    @respx.mock
    async def test_matches_plain_id(self, content: ContentModule):
        """Test entries keyed by "id" instead of "contentId" are matched."""
        respx.get(MANIFEST_URL).mock(
            return_value=Response(
                200, json={"entries": [{"id": "items.sword", "uri": f"{CDN_URL}/sword.json"}]}
            )
        )
        respx.get(f"{CDN_URL}/sword.json").mock(return_value=Response(200, json={"id": "sword"}))

        assert await content.get_content("items.sword") == {"id": "sword"}

    @pytest.mark.asyncio
    @respx.mock
    async def test_unknown_content(self, content: ContentModule):
        """Test an unknown id raises ContentNotFoundError."""
        respx.get(MANIFEST_URL).mock(return_value=Response(200, json=MANIFEST))

        with pytest.raises(ContentNotFoundError, match="Minions.Dragon"):
            await content.get_content("Minions.Dragon")

    @pytest.mark.asyncio
    @respx.mock
    async def test_entry_without_uri(self, content: ContentModule):
        """Test an entry with no uri raises ContentNotFoundError."""
        respx.get(MANIFEST_URL).mock(
            return_value=Response(200, json={"entries": [{"contentId": "Minions.Ghost"}]})
        )

        with pytest.raises(ContentNotFoundError, match="no uri"):
            await content.get_content("Minions.Ghost")

    @pytest.mark.asyncio
    @respx.mock
    async def test_download_failure_raises(self, content: ContentModule):
        """Test a failing CDN download propagates for a single document."""
        respx.get(MANIFEST_URL).mock(return_value=Response(200, json=MANIFEST))
        respx.get(f"{CDN_URL}/currency/gems.json").mock(return_value=Response(404))

        with pytest.raises(APIError):
            await content.get_content("currency.gems")


class TestGetContentByType:
    """Tests for get_content_by_type()."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_all_of_type(self, content: ContentModule):
        """Test every entry with the type prefix is downloaded."""
        respx.get(MANIFEST_URL).mock(return_value=Response(200, json=MANIFEST))
        respx.get(f"{CDN_URL}/minions/goblin_blue.json").mock(
            return_value=Response(200, json={"id": "Minions.GoblinBlue"})
        )
        respx.get(f"{CDN_URL}/minions/goblin_red.json").mock(
            return_value=Response(200, json={"id": "Minions.GoblinRed"})
        )

        minions = await content.get_content_by_type("Minions")

        assert [m["id"] for m in minions] == ["Minions.GoblinBlue", "Minions.GoblinRed"]

    @pytest.mark.asyncio
    @respx.mock
    async def test_no_entries_of_type(self, content: ContentModule):
        """Test an unknown type returns an empty list."""
        respx.get(MANIFEST_URL).mock(return_value=Response(200, json=MANIFEST))

        assert await content.get_content_by_type("AbilityMaps") == []

    @pytest.mark.asyncio
    @respx.mock
    async def test_failed_downloads_skipped(
        self, content: ContentModule, caplog: pytest.LogCaptureFixture
    ):
        """Test documents that fail to download are logged and left out."""
        caplog.set_level(logging.WARNING)
        respx.get(MANIFEST_URL).mock(return_value=Response(200, json=MANIFEST))
        respx.get(f"{CDN_URL}/minions/goblin_blue.json").mock(side_effect=httpx.ConnectError)
        respx.get(f"{CDN_URL}/minions/goblin_red.json").mock(
            return_value=Response(200, json={"id": "Minions.GoblinRed"})
        )

        minions = await content.get_content_by_type("Minions")

        assert minions == [{"id": "Minions.GoblinRed"}]
        assert "Minions.GoblinBlue" in caplog.text

    @pytest.mark.asyncio
    @respx.mock
    async def test_entries_without_uri_skipped(
        self, content: ContentModule, caplog: pytest.LogCaptureFixture
    ):
        """Test a manifest entry with no uri is logged and left out."""
        caplog.set_level(logging.WARNING)
        respx.get(MANIFEST_URL).mock(
            return_value=Response(
                200,
                json={
                    "entries": [
                        {"contentId": "Minions.Ghost"},
                        {"contentId": "Minions.GoblinRed", "uri": f"{CDN_URL}/red.json"},
                    ]
                },
            )
        )
        respx.get(f"{CDN_URL}/red.json").mock(
            return_value=Response(200, json={"id": "Minions.GoblinRed"})
        )

        minions = await content.get_content_by_type("Minions")

        assert minions == [{"id": "Minions.GoblinRed"}]
        assert "Minions.Ghost has no uri" in caplog.text

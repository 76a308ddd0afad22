"""Tests for the shared credential store."""

import pytest

from beamable_sdk.config import BeamableConfig
from beamable_sdk.core.client import BeamableCore
from beamable_sdk.core.credentials import CredentialStore, TokenPair, shared_credentials


@pytest.mark.unit
class TestCredentialStore:
    """Tests for CredentialStore."""

    def test_initially_empty(self):
        """Test that a new store holds no tokens."""
        store = CredentialStore()

        assert store.snapshot() == TokenPair(None, None)
        assert store.has_access_token is False

    def test_set_both_tokens(self):
        """Test storing an access and refresh token."""
        store = CredentialStore()

        store.set("access", "refresh")

        assert store.snapshot() == TokenPair("access", "refresh")
        assert store.has_access_token is True

    def test_set_access_only_keeps_refresh(self):
        """Test that omitting the refresh token leaves the old one in place."""
        store = CredentialStore()
        store.set("access", "refresh")

        store.set("new-access")

        assert store.access_token == "new-access"
        assert store.refresh_token == "refresh"

    def test_clear(self):
        """Test clearing both tokens."""
        store = CredentialStore(access_token="a", refresh_token="r")

        store.clear()

        assert store.snapshot() == TokenPair(None, None)


@pytest.mark.unit
class TestSharedCredentials:
    """Tests for token sharing between independently built cores."""

    def test_shared_store_is_process_wide(self):
        """Test shared_credentials() always returns the same store."""
        assert shared_credentials() is shared_credentials()

    def test_tokens_visible_across_cores(self, client_config: BeamableConfig):
        """Test set_tokens on one core is visible from another."""
        first = BeamableCore(client_config)
        second = BeamableCore(client_config)

        first.set_tokens("access", "refresh")

        assert second.get_tokens() == TokenPair("access", "refresh")

    def test_injected_store_is_isolated(self, client_config: BeamableConfig):
        """Test that a core with its own store does not touch the shared one."""
        isolated = BeamableCore(client_config, credentials=CredentialStore())

        isolated.set_tokens("private")

        assert shared_credentials().access_token is None
        assert isolated.get_tokens().access_token == "private"

"""
Shared pytest fixtures for the Beamable SDK test suite.

The SDK keeps three pieces of process-wide state: the global configuration,
the shared credential store and the memoized default context. The autouse
``isolate_globals`` fixture clears all three around every test so tests never
observe each other's logins.

HTTP traffic is mocked with respx; no test touches the network.
"""

from collections.abc import Generator

import pytest

from beamable_sdk.config import BeamableConfig, Mode, configure, reset_global_config
from beamable_sdk.core.client import BeamableCore
from beamable_sdk.core.context import BeamContext
from beamable_sdk.core.credentials import shared_credentials
from tests.constants import API_URL, CID, PID, SECRET

# ============================================================================
# GLOBAL STATE
# ============================================================================


@pytest.fixture(autouse=True)
def isolate_globals() -> Generator[None, None, None]:
    """Reset configuration, shared tokens and the default context."""
    reset_global_config()
    shared_credentials().clear()
    BeamContext.reset_default()
    yield
    reset_global_config()
    shared_credentials().clear()
    BeamContext.reset_default()


# ============================================================================
# CONFIGURATION FIXTURES
# ============================================================================


@pytest.fixture
def client_config() -> BeamableConfig:
    """Client-mode configuration pointing at the mocked API."""
    return BeamableConfig(cid=CID, pid=PID, api_url=API_URL)


@pytest.fixture
def server_config() -> BeamableConfig:
    """Server-mode configuration with a realm secret."""
    return BeamableConfig(cid=CID, pid=PID, api_url=API_URL, secret=SECRET, mode=Mode.SERVER)


@pytest.fixture
def client_mode(client_config: BeamableConfig) -> BeamableConfig:
    """Install the client-mode configuration globally."""
    configure(client_config)
    return client_config


@pytest.fixture
def server_mode(server_config: BeamableConfig) -> BeamableConfig:
    """Install the server-mode configuration globally."""
    configure(server_config)
    return server_config


# ============================================================================
# CORE FIXTURES
# ============================================================================


@pytest.fixture
def core(client_mode: BeamableConfig) -> BeamableCore:
    """Client-mode core using the shared credential store."""
    return BeamableCore()


@pytest.fixture
def server_core(server_mode: BeamableConfig) -> BeamableCore:
    """Server-mode core using the shared credential store."""
    return BeamableCore()

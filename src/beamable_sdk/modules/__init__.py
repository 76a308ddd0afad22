"""
Feature modules. Each wraps a group of endpoints and calls
``BeamableCore.request`` with fixed paths.
"""

from beamable_sdk.modules.auth import AuthModule, AuthThirdParty, UpdateAccountOptions
from beamable_sdk.modules.content import ContentModule
from beamable_sdk.modules.inventory import InventoryModule
from beamable_sdk.modules.stats import StatsModule

__all__ = [
    "AuthModule",
    "AuthThirdParty",
    "ContentModule",
    "InventoryModule",
    "StatsModule",
    "UpdateAccountOptions",
]

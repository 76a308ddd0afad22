"""
Request gateway, signing and shared credential state.

``BeamableCore`` is the single HTTP gateway; ``BeamContext`` (in
``beamable_sdk.core.context``) bootstraps a session on top of it.
"""

from beamable_sdk.core.client import BeamableCore, RequestOptions
from beamable_sdk.core.credentials import CredentialStore, TokenPair, shared_credentials
from beamable_sdk.core.signing import calculate_signature

__all__ = [
    "BeamableCore",
    "CredentialStore",
    "RequestOptions",
    "TokenPair",
    "calculate_signature",
    "shared_credentials",
]

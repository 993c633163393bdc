"""
VoiceLink Core

Manage AI voice agents and calls across Retell, Vapi and Bland through one
interface.

Quick Start:

    from voicelink_core import AgencyCredentials, get_agency_providers

    credentials = AgencyCredentials(vapi_api_key="...")
    for handle in get_agency_providers(credentials):
        calls = await handle.client.list_calls()

    # Keep Retell agents emitting live transcript events
    from voicelink_core.providers.retell import RetellClient
    from voicelink_core.webhooks import reconcile_all_agents

    patched = await reconcile_all_agents(RetellClient(api_key="..."))
"""

__version__ = "1.0.0"

from .config import ProviderSettings, get_settings
from .exceptions import (
    AuthenticationError,
    DecodeError,
    MissingAPIKeyError,
    NotFoundError,
    ProviderError,
    RateLimitError,
    ServerError,
    TransportError,
    UnsupportedProviderError,
    VendorAPIError,
)
from .logging_config import configure_logging
from .providers import (
    AgencyCredentials,
    CallStatus,
    NormalizedAgent,
    NormalizedCall,
    ProviderHandle,
    VoiceProvider,
    VoiceProviderClient,
    get_agency_providers,
    get_provider_client,
)

__all__ = [
    "__version__",
    "ProviderSettings",
    "get_settings",
    "configure_logging",
    # Errors
    "ProviderError",
    "TransportError",
    "DecodeError",
    "VendorAPIError",
    "AuthenticationError",
    "NotFoundError",
    "RateLimitError",
    "ServerError",
    "UnsupportedProviderError",
    "MissingAPIKeyError",
    # Providers
    "VoiceProvider",
    "CallStatus",
    "NormalizedAgent",
    "NormalizedCall",
    "VoiceProviderClient",
    "AgencyCredentials",
    "ProviderHandle",
    "get_provider_client",
    "get_agency_providers",
]

"""
Voice Providers Package

One uniform interface over the supported voice-AI vendors, plus the
vendor-native clients underneath it.

Supported Providers:
- Retell: agents backed by a Retell LLM, knowledge bases
- Vapi: assistants and phone numbers
- Bland: pathways used as agents

Example usage:

    from voicelink_core.providers import AgencyCredentials, get_agency_providers

    credentials = AgencyCredentials.from_mapping(agency_row)
    for handle in get_agency_providers(credentials):
        agents = await handle.client.list_agents()
"""

from .base import (
    AgentDraft,
    AgentPatch,
    CallDirection,
    CallFilters,
    CallStatus,
    NormalizedAgent,
    NormalizedCall,
    VoiceProvider,
    VoiceProviderClient,
)
from .bland.provider import BlandProviderClient
from .factory import (
    PROVIDER_CLIENTS,
    AgencyCredentials,
    ProviderHandle,
    get_agency_providers,
    get_provider_client,
    list_providers,
)
from .keys import (
    ResolvedApiKeys,
    auto_select_provider,
    get_provider_key,
    resolve_provider_api_keys,
)
from .normalization import dedupe_agents
from .retell.provider import RetellProviderClient
from .vapi.provider import VapiProviderClient

__all__ = [
    # Canonical model
    "VoiceProvider",
    "CallStatus",
    "CallDirection",
    "NormalizedAgent",
    "NormalizedCall",
    "AgentDraft",
    "AgentPatch",
    "CallFilters",
    "VoiceProviderClient",
    # Providers
    "RetellProviderClient",
    "VapiProviderClient",
    "BlandProviderClient",
    # Factory
    "PROVIDER_CLIENTS",
    "get_provider_client",
    "list_providers",
    "AgencyCredentials",
    "ProviderHandle",
    "get_agency_providers",
    # Keys
    "ResolvedApiKeys",
    "resolve_provider_api_keys",
    "get_provider_key",
    "auto_select_provider",
    "dedupe_agents",
]

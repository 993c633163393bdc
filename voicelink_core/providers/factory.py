"""
Provider factory and agency directory.

Maps a vendor tag plus API key to a ready ``VoiceProviderClient``, and lists
the vendors an agency has credentials for.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Type, Union

import structlog

from ..config import ProviderSettings
from ..exceptions import MissingAPIKeyError, UnsupportedProviderError
from ..transport import HTTPTransport
from .base import VoiceProvider, VoiceProviderClient
from .bland.provider import BlandProviderClient
from .retell.provider import RetellProviderClient
from .vapi.provider import VapiProviderClient

logger = structlog.get_logger(__name__)


# Registry of available voice providers, in directory order
PROVIDER_CLIENTS: Dict[str, Type[VoiceProviderClient]] = {
    VoiceProvider.RETELL.value: RetellProviderClient,
    VoiceProvider.VAPI.value: VapiProviderClient,
    VoiceProvider.BLAND.value: BlandProviderClient,
}

PROVIDER_CAPABILITIES = [
    "list_agents",
    "get_agent",
    "create_agent",
    "update_agent",
    "delete_agent",
    "list_calls",
    "get_call",
]


def get_provider_client(
    provider: Union[str, VoiceProvider],
    api_key: str,
    settings: Optional[ProviderSettings] = None,
    transport: Optional[HTTPTransport] = None,
) -> VoiceProviderClient:
    """
    Factory function to create a provider client.

    Args:
        provider: Vendor tag (retell, vapi, bland)
        api_key: Vendor API key
        settings: Optional provider settings
        transport: Optional shared HTTP transport

    Returns:
        Client bound to ``api_key``

    Raises:
        UnsupportedProviderError: If the vendor is not supported
        MissingAPIKeyError: If ``api_key`` is empty
    """
    name = provider.value if isinstance(provider, VoiceProvider) else str(provider).lower()
    provider_class = PROVIDER_CLIENTS.get(name)
    if not provider_class:
        raise UnsupportedProviderError(name, list(PROVIDER_CLIENTS.keys()))

    if not api_key:
        raise MissingAPIKeyError(name)

    return provider_class(api_key, settings=settings, transport=transport)


def list_providers() -> Dict[str, Dict[str, Any]]:
    """
    List all available voice providers with their metadata.

    Returns:
        Dictionary of provider information
    """
    providers = {}
    for name, provider_class in PROVIDER_CLIENTS.items():
        providers[name] = {
            "name": name,
            "client": provider_class.__name__,
            "capabilities": list(PROVIDER_CAPABILITIES),
        }
    return providers


@dataclass
class AgencyCredentials:
    """An agency's vendor API keys. Missing keys are ``None``."""

    retell_api_key: Optional[str] = None
    vapi_api_key: Optional[str] = None
    bland_api_key: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "AgencyCredentials":
        return cls(
            retell_api_key=data.get("retell_api_key") or None,
            vapi_api_key=data.get("vapi_api_key") or None,
            bland_api_key=data.get("bland_api_key") or None,
        )

    def key_for(self, provider: Union[str, VoiceProvider]) -> Optional[str]:
        name = provider.value if isinstance(provider, VoiceProvider) else provider
        return getattr(self, f"{name}_api_key", None)


@dataclass
class ProviderHandle:
    """A configured vendor and its client."""

    provider: VoiceProvider
    client: VoiceProviderClient


def get_agency_providers(
    credentials: AgencyCredentials,
    settings: Optional[ProviderSettings] = None,
    transport: Optional[HTTPTransport] = None,
) -> List[ProviderHandle]:
    """
    Build clients for every vendor the agency has a key for.

    Order is Retell, Vapi, Bland. Vendors without a key are skipped without
    constructing a client.
    """
    handles: List[ProviderHandle] = []
    for provider in VoiceProvider:
        api_key = credentials.key_for(provider)
        if not api_key:
            continue
        client = get_provider_client(provider, api_key, settings=settings, transport=transport)
        handles.append(ProviderHandle(provider=provider, client=client))

    logger.debug(
        "agency_providers_resolved",
        providers=[h.provider.value for h in handles],
    )
    return handles

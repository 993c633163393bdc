"""
Per-client API key resolution.

An agency's client may bring its own vendor workspace. For each vendor the
client's key wins over the agency's; with neither, the vendor is
unavailable. Where each key came from is kept for diagnostics.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .base import VoiceProvider

SOURCE_CLIENT = "client"
SOURCE_AGENCY = "agency"

# Auto-selection order
PROVIDER_PRIORITY = (VoiceProvider.RETELL, VoiceProvider.VAPI, VoiceProvider.BLAND)


@dataclass
class ResolvedApiKeys:
    retell_api_key: Optional[str] = None
    vapi_api_key: Optional[str] = None
    bland_api_key: Optional[str] = None
    # vendor -> "client" | "agency" | None
    source: Dict[str, Optional[str]] = field(default_factory=dict)


def _resolve(client_key: Optional[str], agency_key: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    if client_key:
        return client_key, SOURCE_CLIENT
    if agency_key:
        return agency_key, SOURCE_AGENCY
    return None, None


def resolve_provider_api_keys(
    agency_keys: Mapping[str, Any],
    client_keys: Optional[Mapping[str, Any]] = None,
) -> ResolvedApiKeys:
    """
    Resolve vendor keys with client-level override.

    Priority: client key > agency key > none. Empty strings count as
    missing.

    Args:
        agency_keys: Mapping with ``<vendor>_api_key`` entries
        client_keys: Same shape for the client, or ``None`` for agency-only
    """
    client_keys = client_keys or {}
    resolved = ResolvedApiKeys()
    for provider in VoiceProvider:
        name = f"{provider.value}_api_key"
        key, source = _resolve(client_keys.get(name), agency_keys.get(name))
        setattr(resolved, name, key)
        resolved.source[provider.value] = source
    return resolved


def get_provider_key(keys: ResolvedApiKeys, provider: Union[str, VoiceProvider]) -> Optional[str]:
    name = provider.value if isinstance(provider, VoiceProvider) else provider
    return getattr(keys, f"{name}_api_key", None)


def auto_select_provider(keys: ResolvedApiKeys) -> Optional[Tuple[VoiceProvider, str]]:
    """First vendor with a key, in Retell, Vapi, Bland order."""
    for provider in PROVIDER_PRIORITY:
        api_key = get_provider_key(keys, provider)
        if api_key:
            return provider, api_key
    return None

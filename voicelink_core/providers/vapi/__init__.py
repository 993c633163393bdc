"""Vapi (https://vapi.ai)."""

from .client import VapiClient
from .models import VapiAssistant, VapiCall, VapiPhoneNumber

__all__ = [
    "VapiClient",
    "VapiAssistant",
    "VapiCall",
    "VapiPhoneNumber",
]

"""Bland AI (https://www.bland.ai)."""

from .client import BlandClient
from .models import BlandCall, BlandInboundNumber, BlandPathway, BlandVoice

__all__ = [
    "BlandClient",
    "BlandCall",
    "BlandInboundNumber",
    "BlandPathway",
    "BlandVoice",
]

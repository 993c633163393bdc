"""Retell AI (https://www.retellai.com)."""

from .client import RetellClient
from .models import (
    KnowledgeBaseText,
    KnowledgeBaseURL,
    RetellAgent,
    RetellCall,
    RetellKnowledgeBase,
    RetellLLM,
)

__all__ = [
    "RetellClient",
    "RetellAgent",
    "RetellCall",
    "RetellLLM",
    "RetellKnowledgeBase",
    "KnowledgeBaseText",
    "KnowledgeBaseURL",
]

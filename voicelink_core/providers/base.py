"""
Canonical Voice Provider Types

Vendor-agnostic agent and call records plus the uniform client interface
every vendor implementation satisfies. The rest of the system (sync jobs,
workflow actions, the agent editor) only ever sees these shapes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class VoiceProvider(str, Enum):
    """Supported voice-AI vendors."""
    RETELL = "retell"
    VAPI = "vapi"
    BLAND = "bland"


class CallStatus(str, Enum):
    """Canonical call lifecycle status."""
    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class CallDirection(str, Enum):
    """Direction of a call."""
    INBOUND = "inbound"
    OUTBOUND = "outbound"


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class NormalizedAgent:
    """
    Agent record in the canonical shape.

    ``external_id`` is always the vendor-assigned id; together with
    ``provider`` it identifies the agent across the whole system.
    ``config`` keeps vendor-specific fields for round-tripping through the
    agent editor and is not interpreted here.
    """

    external_id: str
    name: str
    provider: VoiceProvider
    voice_id: Optional[str] = None
    voice_name: Optional[str] = None
    config: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None

    @property
    def key(self) -> Tuple[str, str]:
        """System-wide identity of the agent."""
        return (self.provider.value, self.external_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "external_id": self.external_id,
            "name": self.name,
            "provider": self.provider.value,
            "voice_id": self.voice_id,
            "voice_name": self.voice_name,
            "config": dict(self.config),
            "created_at": _isoformat(self.created_at),
        }


@dataclass
class NormalizedCall:
    """
    Call record in the canonical shape.

    ``duration_seconds`` and ``cost_cents`` are non-negative integers in
    fixed units whatever the vendor reports natively.
    """

    external_id: str
    agent_external_id: str
    provider: VoiceProvider
    status: CallStatus
    direction: CallDirection
    started_at: datetime
    duration_seconds: int = 0
    cost_cents: int = 0
    from_number: Optional[str] = None
    to_number: Optional[str] = None
    transcript: Optional[str] = None
    audio_url: Optional[str] = None
    summary: Optional[str] = None
    sentiment: Optional[str] = None
    ended_at: Optional[datetime] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_finished(self) -> bool:
        return self.status in (CallStatus.COMPLETED, CallStatus.FAILED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "external_id": self.external_id,
            "agent_external_id": self.agent_external_id,
            "provider": self.provider.value,
            "status": self.status.value,
            "direction": self.direction.value,
            "duration_seconds": self.duration_seconds,
            "cost_cents": self.cost_cents,
            "from_number": self.from_number,
            "to_number": self.to_number,
            "transcript": self.transcript,
            "audio_url": self.audio_url,
            "summary": self.summary,
            "sentiment": self.sentiment,
            "started_at": _isoformat(self.started_at),
            "ended_at": _isoformat(self.ended_at),
            "metadata": dict(self.metadata),
        }


@dataclass
class AgentDraft:
    """Fields accepted when creating an agent through the uniform interface."""
    name: str
    voice_id: Optional[str] = None
    prompt: Optional[str] = None


@dataclass
class AgentPatch:
    """Partial agent update; ``None`` means "leave unchanged"."""
    name: Optional[str] = None
    voice_id: Optional[str] = None
    prompt: Optional[str] = None

    def is_empty(self) -> bool:
        return self.name is None and self.voice_id is None and self.prompt is None


@dataclass
class CallFilters:
    """
    Call listing filters.

    ``cursor`` is handed to the vendor untouched; its meaning differs per
    vendor and callers must treat it as opaque.

    ``limit`` is an upper bound, not a page size guarantee. When a vendor
    cannot filter by agent on its side (Bland), calls for other agents are
    dropped after the limit was applied, so fewer than ``limit`` calls may
    come back even though more exist.
    """
    agent_id: Optional[str] = None
    limit: int = 100
    cursor: Optional[str] = None


class VoiceProviderClient(ABC):
    """
    Uniform interface over one vendor account.

    Instances are bound to a single API key and hold no other state, so one
    instance may serve concurrent requests.
    """

    PROVIDER: VoiceProvider

    def __init__(self, api_key: str):
        self.api_key = api_key

    @property
    def provider(self) -> VoiceProvider:
        return self.PROVIDER

    @abstractmethod
    async def list_agents(self) -> List[NormalizedAgent]:
        """List every agent in the vendor account, one entry per agent."""
        pass

    @abstractmethod
    async def get_agent(self, agent_id: str) -> NormalizedAgent:
        """Get an agent by its vendor id."""
        pass

    @abstractmethod
    async def create_agent(self, draft: AgentDraft) -> NormalizedAgent:
        """Create an agent."""
        pass

    @abstractmethod
    async def update_agent(self, agent_id: str, patch: AgentPatch) -> NormalizedAgent:
        """Apply a partial update and return the resulting agent."""
        pass

    @abstractmethod
    async def delete_agent(self, agent_id: str) -> None:
        """Delete an agent."""
        pass

    @abstractmethod
    async def list_calls(self, filters: Optional[CallFilters] = None) -> List[NormalizedCall]:
        """List calls, newest first where the vendor supports ordering."""
        pass

    @abstractmethod
    async def get_call(self, call_id: str) -> NormalizedCall:
        """Get a call by its vendor id."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(provider={self.PROVIDER.value!r})"

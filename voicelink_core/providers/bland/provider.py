"""Bland implementation of the uniform provider interface.

Pathways stand in for agents. Bland has no call cursor, so
``CallFilters.cursor`` is ignored here. Bland does not reliably honour the
``pathway_id`` query parameter, so agent filtering is repeated locally and
a filtered page can be shorter than ``CallFilters.limit``.
"""

from typing import Any, Dict, List, Optional

import structlog

from ...config import ProviderSettings
from ...transport import HTTPTransport
from ..base import (
    AgentDraft,
    AgentPatch,
    CallFilters,
    NormalizedAgent,
    NormalizedCall,
    VoiceProvider,
    VoiceProviderClient,
)
from ..normalization import dedupe_agents, normalize_bland_agent, normalize_bland_call
from .client import BlandClient

logger = structlog.get_logger(__name__)


class BlandProviderClient(VoiceProviderClient):
    """Bland pathways and calls in canonical form."""

    PROVIDER = VoiceProvider.BLAND

    def __init__(
        self,
        api_key: str,
        settings: Optional[ProviderSettings] = None,
        transport: Optional[HTTPTransport] = None,
    ):
        super().__init__(api_key)
        self.client = BlandClient(api_key, settings=settings, transport=transport)

    async def list_agents(self) -> List[NormalizedAgent]:
        pathways = await self.client.list_pathways()
        return dedupe_agents(normalize_bland_agent(p) for p in pathways)

    async def get_agent(self, agent_id: str) -> NormalizedAgent:
        return normalize_bland_agent(await self.client.get_pathway(agent_id))

    async def create_agent(self, draft: AgentDraft) -> NormalizedAgent:
        # Voice and prompt live on pathway nodes, not on the pathway itself
        pathway = await self.client.create_pathway(draft.name)
        return normalize_bland_agent(pathway)

    async def update_agent(self, agent_id: str, patch: AgentPatch) -> NormalizedAgent:
        updates: Dict[str, Any] = {}
        if patch.name is not None:
            updates["name"] = patch.name
        if patch.voice_id is not None or patch.prompt is not None:
            logger.info("bland_pathway_fields_ignored", agent_id=agent_id, fields=["voice_id", "prompt"])

        if not updates:
            return await self.get_agent(agent_id)
        return normalize_bland_agent(await self.client.update_pathway(agent_id, updates))

    async def delete_agent(self, agent_id: str) -> None:
        await self.client.delete_pathway(agent_id)

    async def list_calls(self, filters: Optional[CallFilters] = None) -> List[NormalizedCall]:
        filters = filters or CallFilters()
        calls = await self.client.list_calls(limit=filters.limit, pathway_id=filters.agent_id)
        normalized = [normalize_bland_call(call) for call in calls]
        if filters.agent_id:
            matching = [c for c in normalized if c.agent_external_id == filters.agent_id]
            if len(matching) < len(normalized):
                logger.info(
                    "bland_calls_filtered_locally",
                    agent_id=filters.agent_id,
                    received=len(normalized),
                    dropped=len(normalized) - len(matching),
                    limit=filters.limit,
                )
            normalized = matching
        return normalized

    async def get_call(self, call_id: str) -> NormalizedCall:
        return normalize_bland_call(await self.client.get_call(call_id))

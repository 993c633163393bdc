"""Retell implementation of the uniform provider interface."""

from typing import Any, Dict, List, Optional

import structlog

from ...config import ProviderSettings
from ...transport import NO_BODY, HTTPTransport
from ..base import (
    AgentDraft,
    AgentPatch,
    CallFilters,
    NormalizedAgent,
    NormalizedCall,
    VoiceProvider,
    VoiceProviderClient,
)
from ..normalization import dedupe_agents, normalize_retell_agent, normalize_retell_call
from .client import DEFAULT_VOICE_ID, RetellClient

logger = structlog.get_logger(__name__)


class RetellProviderClient(VoiceProviderClient):
    """Retell agents and calls in canonical form."""

    PROVIDER = VoiceProvider.RETELL

    def __init__(
        self,
        api_key: str,
        settings: Optional[ProviderSettings] = None,
        transport: Optional[HTTPTransport] = None,
    ):
        super().__init__(api_key)
        self.client = RetellClient(api_key, settings=settings, transport=transport)

    async def list_agents(self) -> List[NormalizedAgent]:
        agents = await self.client.list_agents()
        return dedupe_agents(normalize_retell_agent(agent) for agent in agents)

    async def get_agent(self, agent_id: str) -> NormalizedAgent:
        return normalize_retell_agent(await self.client.get_agent(agent_id))

    async def create_agent(self, draft: AgentDraft) -> NormalizedAgent:
        agent = await self.client.create_agent({
            "agent_name": draft.name,
            "voice_id": draft.voice_id or DEFAULT_VOICE_ID,
        })
        if draft.prompt and agent.effective_llm_id:
            await self.client.update_llm(agent.effective_llm_id, {"general_prompt": draft.prompt})
        return normalize_retell_agent(agent)

    async def update_agent(self, agent_id: str, patch: AgentPatch) -> NormalizedAgent:
        """
        Update name/voice on the agent and the prompt on its Retell LLM.

        Only fields set on ``patch`` are sent.
        """
        updates: Dict[str, Any] = {}
        if patch.name is not None:
            updates["agent_name"] = patch.name
        if patch.voice_id is not None:
            updates["voice_id"] = patch.voice_id

        agent = None
        if updates:
            result = await self.client.update_agent(agent_id, updates)
            if result is not NO_BODY:
                agent = result

        if patch.prompt is not None:
            if agent is None:
                agent = await self.client.get_agent(agent_id)
            llm_id = agent.effective_llm_id
            if llm_id:
                await self.client.update_llm(llm_id, {"general_prompt": patch.prompt})
            else:
                logger.warning("retell_prompt_update_skipped", agent_id=agent_id, reason="no_llm")

        if agent is None:
            agent = await self.client.get_agent(agent_id)
        return normalize_retell_agent(agent)

    async def delete_agent(self, agent_id: str) -> None:
        await self.client.delete_agent(agent_id)

    async def list_calls(self, filters: Optional[CallFilters] = None) -> List[NormalizedCall]:
        filters = filters or CallFilters()
        calls = await self.client.list_calls(
            filter_criteria={"agent_id": [filters.agent_id]} if filters.agent_id else None,
            sort_order="descending",
            limit=filters.limit,
            pagination_key=filters.cursor,
        )
        return [normalize_retell_call(call) for call in calls]

    async def get_call(self, call_id: str) -> NormalizedCall:
        return normalize_retell_call(await self.client.get_call(call_id))

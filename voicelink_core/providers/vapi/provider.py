"""Vapi implementation of the uniform provider interface."""

from typing import Any, Dict, List, Optional

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
from ..normalization import dedupe_agents, normalize_vapi_agent, normalize_vapi_call
from .client import VapiClient

DEFAULT_MODEL_PROVIDER = "openai"
DEFAULT_MODEL = "gpt-4"


class VapiProviderClient(VoiceProviderClient):
    """Vapi assistants and calls in canonical form."""

    PROVIDER = VoiceProvider.VAPI

    def __init__(
        self,
        api_key: str,
        settings: Optional[ProviderSettings] = None,
        transport: Optional[HTTPTransport] = None,
    ):
        super().__init__(api_key)
        self.client = VapiClient(api_key, settings=settings, transport=transport)

    async def list_agents(self) -> List[NormalizedAgent]:
        assistants = await self.client.list_assistants()
        return dedupe_agents(normalize_vapi_agent(a) for a in assistants)

    async def get_agent(self, agent_id: str) -> NormalizedAgent:
        return normalize_vapi_agent(await self.client.get_assistant(agent_id))

    async def create_agent(self, draft: AgentDraft) -> NormalizedAgent:
        config: Dict[str, Any] = {"name": draft.name}
        if draft.voice_id:
            config["voice"] = {"provider": "11labs", "voiceId": draft.voice_id}
        if draft.prompt:
            config["model"] = {
                "provider": DEFAULT_MODEL_PROVIDER,
                "model": DEFAULT_MODEL,
                "systemPrompt": draft.prompt,
            }
        return normalize_vapi_agent(await self.client.create_assistant(config))

    async def update_agent(self, agent_id: str, patch: AgentPatch) -> NormalizedAgent:
        """
        Apply name, voice and prompt changes.

        Voice and model are nested objects on Vapi; the current ones are
        fetched and merged so unrelated settings survive the PATCH.
        """
        updates: Dict[str, Any] = {}
        if patch.name is not None:
            updates["name"] = patch.name

        if patch.voice_id is not None or patch.prompt is not None:
            current = await self.client.get_assistant(agent_id)
            if patch.voice_id is not None:
                voice = current.voice.model_dump(exclude_none=True) if current.voice else {}
                voice.setdefault("provider", "11labs")
                voice["voiceId"] = patch.voice_id
                updates["voice"] = voice
            if patch.prompt is not None:
                model = current.model.model_dump(exclude_none=True) if current.model else {}
                model.setdefault("provider", DEFAULT_MODEL_PROVIDER)
                model.setdefault("model", DEFAULT_MODEL)
                model["systemPrompt"] = patch.prompt
                updates["model"] = model

        if not updates:
            return await self.get_agent(agent_id)
        return normalize_vapi_agent(await self.client.update_assistant(agent_id, updates))

    async def delete_agent(self, agent_id: str) -> None:
        await self.client.delete_assistant(agent_id)

    async def list_calls(self, filters: Optional[CallFilters] = None) -> List[NormalizedCall]:
        filters = filters or CallFilters()
        calls = await self.client.list_calls(
            assistant_id=filters.agent_id,
            limit=filters.limit,
            created_at_lt=filters.cursor,
        )
        return [normalize_vapi_call(call) for call in calls]

    async def get_call(self, call_id: str) -> NormalizedCall:
        return normalize_vapi_call(await self.client.get_call(call_id))

"""
Retell AI API Client

Vendor-native async client for https://api.retellai.com. Methods return
Retell's own shapes (``RetellAgent``, ``RetellCall``, ...); mapping to the
canonical model happens in ``voicelink_core.providers.normalization``.

Two endpoint families need special handling:

- ``publish-agent`` and ``delete-agent`` answer with empty or non-JSON
  bodies. They are sent with a minimal header set (no JSON content type)
  and any 2xx is success.
- Knowledge base create/add-sources only accept multipart/form-data and go
  through the aiohttp-based ``multipart_post`` primitive.
"""

import json
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import structlog

from ...config import ProviderSettings, get_settings
from ...transport import (
    NO_BODY,
    HTTPTransport,
    multipart_post,
    parse_items,
    parse_resource,
)
from .models import (
    KnowledgeBaseText,
    KnowledgeBaseURL,
    RetellAgent,
    RetellCall,
    RetellKnowledgeBase,
    RetellLLM,
)

logger = structlog.get_logger(__name__)

VENDOR = "retell"

DEFAULT_VOICE_ID = "11labs-Adrian"


def _as_list(data: Any) -> List[Dict[str, Any]]:
    return data if isinstance(data, list) else []


class RetellClient:
    """
    Retell API client bound to one API key.

    Args:
        api_key: Retell API key (sent as a bearer token)
        settings: Base URL, timeout and retry configuration
        transport: Shared HTTP transport; one is built from settings if omitted
    """

    def __init__(
        self,
        api_key: str,
        settings: Optional[ProviderSettings] = None,
        transport: Optional[HTTPTransport] = None,
    ):
        self.api_key = api_key
        self.settings = settings or get_settings()
        self.base_url = self.settings.retell_base_url
        self._transport = transport or HTTPTransport(
            timeout=self.settings.request_timeout_seconds,
            retry_policy=self.settings.retry_policy(),
        )

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _minimal_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "*/*",
        }

    def _on_retry(self, path: str):
        def observe(attempt: int, delay: float) -> None:
            logger.warning("retell_retry", path=path, attempt=attempt, delay=round(delay, 3))
        return observe

    async def _request(
        self,
        method: str,
        path: str,
        json_body: Any = None,
        minimal: bool = False,
    ) -> Any:
        return await self._transport.request(
            method,
            f"{self.base_url}{path}",
            vendor=VENDOR,
            path=path,
            headers=self._minimal_headers() if minimal else self._headers(),
            json=json_body,
            on_retry=self._on_retry(path),
            expect_body=not minimal,
        )

    async def _multipart(self, path: str, fields: Mapping[str, str]) -> Dict[str, Any]:
        return await multipart_post(
            f"{self.base_url}{path}",
            vendor=VENDOR,
            path=path,
            headers={"Authorization": f"Bearer {self.api_key}"},
            fields=fields,
            timeout=self.settings.request_timeout_seconds,
        )

    # =========================================================================
    # Agents
    # =========================================================================

    async def list_agents(self) -> List[RetellAgent]:
        """List agents. Retell returns one entry per agent version."""
        data = await self._request("GET", "/list-agents")
        return parse_items(RetellAgent, _as_list(data), VENDOR, "/list-agents")

    async def get_agent(self, agent_id: str) -> RetellAgent:
        path = f"/get-agent/{agent_id}"
        data = await self._request("GET", path)
        return parse_resource(RetellAgent, data, VENDOR, path)

    async def create_agent(self, config: Mapping[str, Any]) -> RetellAgent:
        """
        Create an agent.

        ``config`` uses Retell field names (``agent_name``, ``voice_id``,
        ``response_engine``, ``webhook_events``...).
        """
        payload = dict(config)
        payload.setdefault("voice_id", DEFAULT_VOICE_ID)
        data = await self._request("POST", "/create-agent", payload)
        return parse_resource(RetellAgent, data, VENDOR, "/create-agent")

    async def update_agent(self, agent_id: str, updates: Mapping[str, Any]) -> Union[RetellAgent, Any]:
        """
        Update an agent's draft configuration.

        Exactly the keys in ``updates`` are sent. A key that is absent keeps
        its current value on Retell's side; ``webhook_url: None`` clears it.
        Returns ``NO_BODY`` if Retell answers without a body.
        """
        path = f"/update-agent/{agent_id}"
        data = await self._request("PATCH", path, dict(updates))
        if data is NO_BODY:
            return NO_BODY
        return parse_resource(RetellAgent, data, VENDOR, path)

    async def publish_agent(self, agent_id: str) -> None:
        """
        Publish the agent's draft so live phone calls use it.

        ``update_agent`` only edits the draft.
        """
        await self._request("POST", f"/publish-agent/{agent_id}", minimal=True)

    async def delete_agent(self, agent_id: str) -> None:
        await self._request("DELETE", f"/delete-agent/{agent_id}", minimal=True)

    async def get_agent_versions(self, agent_id: str) -> List[RetellAgent]:
        path = f"/get-agent-versions/{agent_id}"
        data = await self._request("GET", path)
        return parse_items(RetellAgent, _as_list(data), VENDOR, path)

    # =========================================================================
    # Retell LLM
    # =========================================================================

    async def get_llm(self, llm_id: str) -> RetellLLM:
        path = f"/get-retell-llm/{llm_id}"
        data = await self._request("GET", path)
        return parse_resource(RetellLLM, data, VENDOR, path)

    async def update_llm(self, llm_id: str, updates: Mapping[str, Any]) -> RetellLLM:
        """Update ``general_prompt``, ``begin_message`` or ``model`` on an LLM.

        An empty response is followed by a re-fetch.
        """
        path = f"/update-retell-llm/{llm_id}"
        data = await self._request("PATCH", path, dict(updates))
        if data is NO_BODY:
            return await self.get_llm(llm_id)
        return parse_resource(RetellLLM, data, VENDOR, path)

    # =========================================================================
    # Calls
    # =========================================================================

    async def list_calls(
        self,
        filter_criteria: Optional[Dict[str, Any]] = None,
        sort_order: str = "descending",
        limit: Optional[int] = None,
        pagination_key: Optional[str] = None,
    ) -> List[RetellCall]:
        """
        List calls.

        ``pagination_key`` is Retell's cursor (the id of the last call of
        the previous page) and is sent as given.
        """
        payload: Dict[str, Any] = {"sort_order": sort_order}
        if filter_criteria:
            payload["filter_criteria"] = filter_criteria
        if limit:
            payload["limit"] = limit
        if pagination_key:
            payload["pagination_key"] = pagination_key

        data = await self._request("POST", "/v2/list-calls", payload)
        return parse_items(RetellCall, _as_list(data), VENDOR, "/v2/list-calls")

    async def get_call(self, call_id: str) -> RetellCall:
        path = f"/v2/get-call/{call_id}"
        data = await self._request("GET", path)
        return parse_resource(RetellCall, data, VENDOR, path)

    # =========================================================================
    # Knowledge Bases
    # =========================================================================

    async def list_knowledge_bases(self) -> List[RetellKnowledgeBase]:
        path = "/list-knowledge-bases"
        data = await self._request("GET", path)
        return parse_items(RetellKnowledgeBase, _as_list(data), VENDOR, path)

    async def get_knowledge_base(self, kb_id: str) -> RetellKnowledgeBase:
        path = f"/get-knowledge-base/{kb_id}"
        data = await self._request("GET", path)
        return parse_resource(RetellKnowledgeBase, data, VENDOR, path)

    async def create_knowledge_base(
        self,
        name: str,
        texts: Optional[Sequence[KnowledgeBaseText]] = None,
        urls: Optional[Sequence[KnowledgeBaseURL]] = None,
    ) -> RetellKnowledgeBase:
        fields = {"knowledge_base_name": name}
        fields.update(knowledge_base_fields(texts, urls))
        data = await self._multipart("/create-knowledge-base", fields)
        return parse_resource(RetellKnowledgeBase, data, VENDOR, "/create-knowledge-base")

    async def add_knowledge_base_sources(
        self,
        kb_id: str,
        texts: Optional[Sequence[KnowledgeBaseText]] = None,
        urls: Optional[Sequence[KnowledgeBaseURL]] = None,
    ) -> RetellKnowledgeBase:
        fields = knowledge_base_fields(texts, urls)
        path = f"/add-knowledge-base-sources/{kb_id}"
        data = await self._multipart(path, fields)
        return parse_resource(RetellKnowledgeBase, data, VENDOR, path)

    async def delete_knowledge_base(self, kb_id: str) -> None:
        await self._request("DELETE", f"/delete-knowledge-base/{kb_id}", minimal=True)

    async def delete_knowledge_base_source(self, kb_id: str, source_id: str) -> None:
        await self._request(
            "DELETE",
            f"/delete-knowledge-base-source/{kb_id}/{source_id}",
            minimal=True,
        )


def knowledge_base_fields(
    texts: Optional[Sequence[KnowledgeBaseText]] = None,
    urls: Optional[Sequence[KnowledgeBaseURL]] = None,
) -> Dict[str, str]:
    """
    Encode knowledge base sources as multipart form fields.

    Texts are sent as a JSON array of ``{title, text}``; URLs as a JSON
    array of plain strings.
    """
    fields: Dict[str, str] = {}
    if texts:
        fields["knowledge_base_texts"] = json.dumps(
            [{"title": t.title, "text": t.text} for t in texts]
        )
    if urls:
        fields["knowledge_base_urls"] = json.dumps([u.url for u in urls])
    return fields

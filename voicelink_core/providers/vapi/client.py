"""
Vapi API Client

Async client for https://api.vapi.ai. Assistants are Vapi's agents; ids are
URL-encoded into paths. ``createdAtLt`` doubles as the pagination cursor for
call listing and is passed through untouched.
"""

from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote

import structlog

from ...config import ProviderSettings, get_settings
from ...transport import NO_BODY, HTTPTransport, parse_items, parse_resource
from .models import VapiAssistant, VapiCall, VapiPhoneNumber

logger = structlog.get_logger(__name__)

VENDOR = "vapi"


def _segment(value: str) -> str:
    return quote(value, safe="")


class VapiClient:
    """Vapi API client bound to one API key."""

    def __init__(
        self,
        api_key: str,
        settings: Optional[ProviderSettings] = None,
        transport: Optional[HTTPTransport] = None,
    ):
        self.api_key = api_key
        self.settings = settings or get_settings()
        self.base_url = self.settings.vapi_base_url
        self._transport = transport or HTTPTransport(
            timeout=self.settings.request_timeout_seconds,
            retry_policy=self.settings.retry_policy(),
        )

    def _on_retry(self, path: str):
        def observe(attempt: int, delay: float) -> None:
            logger.warning("vapi_retry", path=path, attempt=attempt, delay=round(delay, 3))
        return observe

    async def _request(
        self,
        method: str,
        path: str,
        json_body: Any = None,
        params: Optional[Dict[str, Any]] = None,
        expect_body: bool = True,
    ) -> Any:
        return await self._transport.request(
            method,
            f"{self.base_url}{path}",
            vendor=VENDOR,
            path=path,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            params=params,
            json=json_body,
            on_retry=self._on_retry(path),
            expect_body=expect_body,
        )

    # =========================================================================
    # Assistants
    # =========================================================================

    async def list_assistants(self) -> List[VapiAssistant]:
        data = await self._request("GET", "/assistant")
        if not isinstance(data, list):
            return []
        return parse_items(VapiAssistant, data, VENDOR, "/assistant")

    async def get_assistant(self, assistant_id: str) -> VapiAssistant:
        path = f"/assistant/{_segment(assistant_id)}"
        data = await self._request("GET", path)
        return parse_resource(VapiAssistant, data, VENDOR, path)

    async def create_assistant(self, config: Mapping[str, Any]) -> VapiAssistant:
        data = await self._request("POST", "/assistant", dict(config))
        return parse_resource(VapiAssistant, data, VENDOR, "/assistant")

    async def update_assistant(self, assistant_id: str, updates: Mapping[str, Any]) -> VapiAssistant:
        path = f"/assistant/{_segment(assistant_id)}"
        data = await self._request("PATCH", path, dict(updates))
        if data is NO_BODY:
            return await self.get_assistant(assistant_id)
        return parse_resource(VapiAssistant, data, VENDOR, path)

    async def delete_assistant(self, assistant_id: str) -> None:
        await self._request("DELETE", f"/assistant/{_segment(assistant_id)}", expect_body=False)

    # =========================================================================
    # Calls
    # =========================================================================

    async def list_calls(
        self,
        assistant_id: Optional[str] = None,
        limit: Optional[int] = None,
        created_at_gt: Optional[str] = None,
        created_at_lt: Optional[str] = None,
        created_at_ge: Optional[str] = None,
        created_at_le: Optional[str] = None,
    ) -> List[VapiCall]:
        params = {
            "assistantId": assistant_id,
            "limit": limit,
            "createdAtGt": created_at_gt,
            "createdAtLt": created_at_lt,
            "createdAtGe": created_at_ge,
            "createdAtLe": created_at_le,
        }
        data = await self._request(
            "GET",
            "/call",
            params={k: v for k, v in params.items() if v},
        )
        if not isinstance(data, list):
            return []
        return parse_items(VapiCall, data, VENDOR, "/call")

    async def get_call(self, call_id: str) -> VapiCall:
        path = f"/call/{_segment(call_id)}"
        data = await self._request("GET", path)
        return parse_resource(VapiCall, data, VENDOR, path)

    # =========================================================================
    # Phone Numbers
    # =========================================================================

    async def list_phone_numbers(self) -> List[VapiPhoneNumber]:
        data = await self._request("GET", "/phone-number")
        if not isinstance(data, list):
            return []
        return parse_items(VapiPhoneNumber, data, VENDOR, "/phone-number")

    async def get_phone_number(self, phone_number_id: str) -> VapiPhoneNumber:
        path = f"/phone-number/{_segment(phone_number_id)}"
        data = await self._request("GET", path)
        return parse_resource(VapiPhoneNumber, data, VENDOR, path)

    async def update_phone_number(
        self,
        phone_number_id: str,
        updates: Mapping[str, Any],
    ) -> VapiPhoneNumber:
        """
        Update a phone number. ``assistantId: None`` detaches the number
        from its assistant. An empty response is followed by a re-fetch.
        """
        path = f"/phone-number/{_segment(phone_number_id)}"
        data = await self._request("PATCH", path, dict(updates))
        if data is NO_BODY:
            return await self.get_phone_number(phone_number_id)
        return parse_resource(VapiPhoneNumber, data, VENDOR, path)

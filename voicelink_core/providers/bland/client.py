"""
Bland API Client

Async client for https://api.bland.ai/v1. Bland authenticates with the raw
API key in the ``authorization`` header (no ``Bearer`` prefix), and several
list endpoints answer either with a bare array or with the array wrapped
under an endpoint-specific key.
"""

from typing import Any, Dict, List, Mapping, Optional

import structlog

from ...config import ProviderSettings, get_settings
from ...exceptions import DecodeError
from ...transport import HTTPTransport, parse_items, parse_resource
from .models import (
    BlandCall,
    BlandInboundNumber,
    BlandPathway,
    BlandPurchasedNumber,
    BlandVoice,
)

logger = structlog.get_logger(__name__)

VENDOR = "bland"

DEFAULT_AREA_CODE = "415"


def unwrap_list(data: Any, key: str) -> List[Dict[str, Any]]:
    """Return ``data`` if it is a list, else ``data[key]``, else ``[]``."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        wrapped = data.get(key)
        if isinstance(wrapped, list):
            return wrapped
    return []


class BlandClient:
    """Bland API client bound to one API key."""

    def __init__(
        self,
        api_key: str,
        settings: Optional[ProviderSettings] = None,
        transport: Optional[HTTPTransport] = None,
    ):
        self.api_key = api_key
        self.settings = settings or get_settings()
        self.base_url = self.settings.bland_base_url
        self._transport = transport or HTTPTransport(
            timeout=self.settings.request_timeout_seconds,
            retry_policy=self.settings.retry_policy(),
        )

    def _on_retry(self, path: str):
        def observe(attempt: int, delay: float) -> None:
            logger.warning("bland_retry", path=path, attempt=attempt, delay=round(delay, 3))
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
                "authorization": self.api_key,
                "Content-Type": "application/json",
            },
            params=params,
            json=json_body,
            on_retry=self._on_retry(path),
            expect_body=expect_body,
        )

    # =========================================================================
    # Pathways
    # =========================================================================

    async def list_pathways(self) -> List[BlandPathway]:
        data = await self._request("GET", "/all_pathway")
        return parse_items(BlandPathway, unwrap_list(data, "data"), VENDOR, "/all_pathway")

    async def get_pathway(self, pathway_id: str) -> BlandPathway:
        path = f"/pathway/{pathway_id}"
        data = await self._request("GET", path)
        if isinstance(data, dict) and "id" not in data and "pathway_id" not in data:
            data = {**data, "id": pathway_id}
        return parse_resource(BlandPathway, data, VENDOR, path)

    async def create_pathway(self, name: str, description: Optional[str] = None) -> BlandPathway:
        """
        Create a pathway.

        Bland only answers with ``{status, pathway_id}``; the returned
        pathway is assembled from that id and the submitted fields.
        """
        payload: Dict[str, Any] = {"name": name}
        if description is not None:
            payload["description"] = description

        data = await self._request("POST", "/pathway/create", payload)
        pathway_id = data.get("pathway_id") if isinstance(data, dict) else None
        if not pathway_id:
            logger.error("bland_pathway_create_missing_id", response=data)
            raise DecodeError(VENDOR, "/pathway/create")

        return BlandPathway(id=pathway_id, name=name, description=description)

    async def update_pathway(self, pathway_id: str, updates: Mapping[str, Any]) -> BlandPathway:
        """Update a pathway, then re-fetch it (the update response is a bare status)."""
        await self._request("POST", f"/pathway/{pathway_id}", dict(updates), expect_body=False)
        return await self.get_pathway(pathway_id)

    async def delete_pathway(self, pathway_id: str) -> None:
        await self._request("DELETE", f"/pathway/{pathway_id}", expect_body=False)

    # =========================================================================
    # Calls
    # =========================================================================

    async def list_calls(
        self,
        limit: Optional[int] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        status: Optional[str] = None,
        pathway_id: Optional[str] = None,
    ) -> List[BlandCall]:
        params = {
            "limit": limit,
            "start_date": start_date,
            "end_date": end_date,
            "status": status,
            "pathway_id": pathway_id,
        }
        data = await self._request(
            "GET",
            "/calls",
            params={k: v for k, v in params.items() if v},
        )
        return parse_items(BlandCall, unwrap_list(data, "calls"), VENDOR, "/calls")

    async def get_call(self, call_id: str) -> BlandCall:
        path = f"/calls/{call_id}"
        data = await self._request("GET", path)
        return parse_resource(BlandCall, data, VENDOR, path)

    async def list_active_calls(self) -> List[BlandCall]:
        data = await self._request("GET", "/active")
        return parse_items(BlandCall, unwrap_list(data, "active_calls"), VENDOR, "/active")

    async def stop_call(self, call_id: str) -> None:
        await self._request("POST", f"/calls/{call_id}/stop", expect_body=False)

    # =========================================================================
    # Voices & Numbers
    # =========================================================================

    async def list_voices(self) -> List[BlandVoice]:
        data = await self._request("GET", "/voices")
        return parse_items(BlandVoice, unwrap_list(data, "voices"), VENDOR, "/voices")

    async def list_phone_numbers(self) -> List[BlandInboundNumber]:
        data = await self._request("GET", "/inbound")
        return parse_items(
            BlandInboundNumber, unwrap_list(data, "inbound_numbers"), VENDOR, "/inbound"
        )

    async def purchase_inbound_number(self, area_code: Optional[str] = None) -> BlandPurchasedNumber:
        data = await self._request(
            "POST", "/inbound/purchase", {"area_code": area_code or DEFAULT_AREA_CODE}
        )
        return parse_resource(BlandPurchasedNumber, data, VENDOR, "/inbound/purchase")

    async def purchase_outbound_number(self, area_code: Optional[str] = None) -> BlandPurchasedNumber:
        data = await self._request(
            "POST", "/outbound/purchase", {"area_code": area_code or DEFAULT_AREA_CODE}
        )
        return parse_resource(BlandPurchasedNumber, data, VENDOR, "/outbound/purchase")

"""Shared pytest fixtures for testing."""

from typing import Any, Dict

import pytest

from voicelink_core.config import ProviderSettings


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def settings() -> ProviderSettings:
    """Settings with near-zero, deterministic backoff."""
    return ProviderSettings(
        retry_base_delay_seconds=0.001,
        retry_max_delay_seconds=0.05,
        retry_jitter=0.0,
        max_retries=3,
    )


@pytest.fixture
def api_key() -> str:
    return "key_test_123"


# =============================================================================
# Vendor Payload Fixtures
# =============================================================================


@pytest.fixture
def retell_agent_payload() -> Dict[str, Any]:
    """Sample Retell agent as returned by get-agent."""
    return {
        "agent_id": "agent_abc123",
        "agent_name": "Front Desk",
        "voice_id": "11labs-Adrian",
        "language": "en-US",
        "webhook_url": None,
        "webhook_events": ["call_started", "call_ended"],
        "responsiveness": 1.0,
        "interruption_sensitivity": 0.8,
        "response_engine": {"type": "retell-llm", "llm_id": "llm_xyz"},
        "is_published": False,
        "version": 3,
        "last_modification_timestamp": 1717000000000,
    }


@pytest.fixture
def retell_call_payload() -> Dict[str, Any]:
    """Sample ended Retell phone call."""
    return {
        "call_id": "call_r1",
        "agent_id": "agent_abc123",
        "call_type": "phone_call",
        "call_status": "ended",
        "direction": "inbound",
        "start_timestamp": 1717000000000,
        "end_timestamp": 1717000095400,
        "from_number": "+15555550100",
        "to_number": "+15555550199",
        "transcript": "Agent: Hello\nUser: Hi",
        "recording_url": "https://cdn.retellai.com/rec.wav",
        "call_analysis": {"call_summary": "Caller booked a cleaning.", "user_sentiment": "Positive"},
        "call_cost": {"combined_cost": 12.6},
        "metadata": {"crm_id": "c-1"},
    }


@pytest.fixture
def vapi_assistant_payload() -> Dict[str, Any]:
    return {
        "id": "asst_1",
        "orgId": "org_1",
        "name": "Sales Bot",
        "voice": {"provider": "11labs", "voiceId": "rachel"},
        "model": {"provider": "openai", "model": "gpt-4", "systemPrompt": "Be brief."},
        "serverUrl": "https://hooks.example.com/vapi",
        "createdAt": "2024-05-29T16:26:40.000Z",
        "updatedAt": "2024-05-30T10:00:00.000Z",
    }


@pytest.fixture
def vapi_call_payload() -> Dict[str, Any]:
    return {
        "id": "vcall_1",
        "assistantId": "asst_1",
        "type": "inboundPhoneCall",
        "status": "ended",
        "startedAt": "2024-05-29T16:26:40.000Z",
        "endedAt": "2024-05-29T16:28:10.000Z",
        "createdAt": "2024-05-29T16:26:30.000Z",
        "cost": 0.4567,
        "customer": {"number": "+15555550101"},
        "phoneNumber": {"number": "+15555550102"},
        "analysis": {"summary": "Asked about pricing."},
        "transcript": "AI: Hi there",
    }


@pytest.fixture
def bland_call_payload() -> Dict[str, Any]:
    return {
        "call_id": "bcall_1",
        "pathway_id": "pw_1",
        "to": "+15555550103",
        "from": "+15555550104",
        "status": "completed",
        "completed": True,
        "call_length": 2.5,
        "price": 0.23,
        "summary": "Left a voicemail.",
        "concatenated_transcript": "assistant: hello",
        "created_at": "2024-05-29T16:26:40Z",
        "metadata": {"direction": "inbound"},
    }

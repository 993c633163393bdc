"""
Vendor → canonical mapping.

Every function here is pure and total: any vendor record that passed
pydantic validation maps to a canonical record without raising. Unknown
statuses fall back to ``queued``, missing or negative numbers to ``0``,
and a call that never started gets a deterministic ``started_at``.

Unit conversions:

    vendor   duration                      cost
    retell   (end_ms - start_ms) / 1000    combined_cost, already cents
    vapi     endedAt - startedAt           cost dollars * 100
    bland    call_length minutes * 60      price dollars * 100
"""

import math
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Union

from .base import (
    CallDirection,
    CallStatus,
    NormalizedAgent,
    NormalizedCall,
    VoiceProvider,
)
from .bland.models import BlandCall, BlandPathway
from .retell.models import RetellAgent, RetellCall
from .vapi.models import VapiAssistant, VapiCall

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


RETELL_STATUS_MAP: Dict[str, CallStatus] = {
    "registered": CallStatus.QUEUED,
    "ongoing": CallStatus.IN_PROGRESS,
    "ended": CallStatus.COMPLETED,
    "error": CallStatus.FAILED,
    "not_connected": CallStatus.FAILED,
}

VAPI_STATUS_MAP: Dict[str, CallStatus] = {
    "queued": CallStatus.QUEUED,
    "ringing": CallStatus.QUEUED,
    "in-progress": CallStatus.IN_PROGRESS,
    "forwarding": CallStatus.IN_PROGRESS,
    "ended": CallStatus.COMPLETED,
}

BLAND_STATUS_MAP: Dict[str, CallStatus] = {
    "completed": CallStatus.COMPLETED,
    "complete": CallStatus.COMPLETED,
    "in-progress": CallStatus.IN_PROGRESS,
    "ongoing": CallStatus.IN_PROGRESS,
    "started": CallStatus.IN_PROGRESS,
    "error": CallStatus.FAILED,
    "failed": CallStatus.FAILED,
    "queued": CallStatus.QUEUED,
    "new": CallStatus.QUEUED,
}

# Agent config keys kept for the editor round-trip
RETELL_CONFIG_FIELDS = (
    "agent_name",
    "voice_id",
    "language",
    "webhook_url",
    "llm_websocket_url",
    "responsiveness",
    "interruption_sensitivity",
    "ambient_sound",
    "llm_id",
    "response_engine",
)


# =============================================================================
# Primitive conversions
# =============================================================================


def map_status(table: Dict[str, CallStatus], raw: Optional[str]) -> CallStatus:
    """Look up a vendor status, case-insensitively, defaulting to queued."""
    if not raw:
        return CallStatus.QUEUED
    return table.get(raw.strip().lower(), CallStatus.QUEUED)


def parse_timestamp(value: Union[str, int, float, datetime, None]) -> Optional[datetime]:
    """
    Parse a vendor timestamp into an aware UTC datetime.

    Accepts epoch milliseconds, ISO-8601 strings (with ``Z`` or an offset)
    and datetimes. Anything unparseable yields ``None``.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        try:
            dt = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.isdigit():
            return parse_timestamp(int(text))
        if text.endswith("Z") or text.endswith("z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def seconds_between(start: Optional[datetime], end: Optional[datetime]) -> int:
    """Whole seconds from start to end; 0 when either is missing or end < start."""
    if start is None or end is None:
        return 0
    return max(0, int(round((end - start).total_seconds())))


def non_negative_int(value: Optional[float]) -> int:
    if value is None:
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number) or number <= 0:
        return 0
    return int(round(number))


def dollars_to_cents(value: Optional[float]) -> int:
    if value is None:
        return 0
    return non_negative_int(float(value) * 100)


def _first_datetime(*candidates: Any) -> Optional[datetime]:
    for candidate in candidates:
        parsed = parse_timestamp(candidate)
        if parsed is not None:
            return parsed
    return None


# =============================================================================
# Retell
# =============================================================================


def normalize_retell_agent(agent: RetellAgent) -> NormalizedAgent:
    config: Dict[str, Any] = {}
    for name in RETELL_CONFIG_FIELDS:
        value = getattr(agent, name)
        if name == "response_engine" and value is not None:
            value = value.model_dump(exclude_none=True)
        config[name] = value

    return NormalizedAgent(
        external_id=agent.agent_id,
        name=agent.agent_name or "",
        provider=VoiceProvider.RETELL,
        voice_id=agent.voice_id,
        config=config,
        created_at=_first_datetime(agent.created_at, agent.last_modification_timestamp),
    )


def normalize_retell_call(call: RetellCall) -> NormalizedCall:
    started = parse_timestamp(call.start_timestamp)
    ended = parse_timestamp(call.end_timestamp)

    duration = 0
    if call.start_timestamp is not None and call.end_timestamp is not None:
        duration = non_negative_int((call.end_timestamp - call.start_timestamp) / 1000)

    analysis = call.call_analysis
    direction = (
        CallDirection.INBOUND
        if (call.direction or "").lower() == "inbound"
        else CallDirection.OUTBOUND
    )

    return NormalizedCall(
        external_id=call.call_id,
        agent_external_id=call.agent_id or "",
        provider=VoiceProvider.RETELL,
        status=map_status(RETELL_STATUS_MAP, call.call_status),
        direction=direction,
        started_at=started or EPOCH,
        duration_seconds=duration,
        cost_cents=non_negative_int(call.call_cost.combined_cost if call.call_cost else None),
        from_number=call.from_number,
        to_number=call.to_number,
        transcript=call.transcript,
        audio_url=call.recording_url,
        summary=analysis.call_summary if analysis else None,
        sentiment=analysis.user_sentiment if analysis else None,
        ended_at=ended,
        metadata=dict(call.metadata or {}),
    )


# =============================================================================
# Vapi
# =============================================================================


def normalize_vapi_agent(assistant: VapiAssistant) -> NormalizedAgent:
    voice = assistant.voice
    model = assistant.model
    return NormalizedAgent(
        external_id=assistant.id,
        name=assistant.name or "",
        provider=VoiceProvider.VAPI,
        voice_id=voice.voiceId if voice else None,
        voice_name=voice.provider if voice else None,
        config={
            "voice": voice.model_dump(exclude_none=True) if voice else None,
            "model": model.model_dump(exclude_none=True) if model else None,
            "system_prompt": model.systemPrompt if model else None,
            "first_message": assistant.firstMessage,
            "server_url": assistant.serverUrl,
            "metadata": assistant.metadata,
        },
        created_at=parse_timestamp(assistant.createdAt),
    )


def normalize_vapi_call(call: VapiCall) -> NormalizedCall:
    started = _first_datetime(call.startedAt, call.createdAt)
    ended = parse_timestamp(call.endedAt)
    summary = call.summary or (call.analysis.summary if call.analysis else None)

    return NormalizedCall(
        external_id=call.id,
        agent_external_id=call.assistantId or "",
        provider=VoiceProvider.VAPI,
        status=map_status(VAPI_STATUS_MAP, call.status),
        direction=(
            CallDirection.INBOUND if call.type == "inboundPhoneCall" else CallDirection.OUTBOUND
        ),
        started_at=started or EPOCH,
        duration_seconds=seconds_between(started, ended),
        cost_cents=dollars_to_cents(call.cost),
        from_number=call.customer.number if call.customer else None,
        to_number=call.phoneNumber.number if call.phoneNumber else None,
        transcript=call.transcript,
        audio_url=call.recordingUrl,
        summary=summary,
        ended_at=ended,
        metadata=dict(call.metadata or {}),
    )


# =============================================================================
# Bland
# =============================================================================


def normalize_bland_agent(pathway: BlandPathway) -> NormalizedAgent:
    return NormalizedAgent(
        external_id=pathway.id,
        name=pathway.name or "",
        provider=VoiceProvider.BLAND,
        config={
            "description": pathway.description,
            "node_count": len(pathway.nodes or []),
            "edge_count": len(pathway.edges or []),
        },
        created_at=parse_timestamp(pathway.created_at),
    )


def bland_status(call: BlandCall) -> CallStatus:
    if call.completed:
        return CallStatus.COMPLETED
    return map_status(BLAND_STATUS_MAP, call.status or call.queue_status)


def bland_direction(call: BlandCall) -> CallDirection:
    if call.inbound:
        return CallDirection.INBOUND
    metadata = call.metadata or {}
    if str(metadata.get("direction", "")).lower() == "inbound":
        return CallDirection.INBOUND
    return CallDirection.OUTBOUND


def normalize_bland_call(call: BlandCall) -> NormalizedCall:
    started = _first_datetime(call.started_at, call.created_at)
    ended = parse_timestamp(call.end_at)

    if call.call_length is not None:
        duration = non_negative_int(call.call_length * 60)
    else:
        duration = seconds_between(started, ended)

    return NormalizedCall(
        external_id=call.call_id,
        agent_external_id=call.pathway_id or "",
        provider=VoiceProvider.BLAND,
        status=bland_status(call),
        direction=bland_direction(call),
        started_at=started or EPOCH,
        duration_seconds=duration,
        cost_cents=dollars_to_cents(call.price),
        from_number=call.from_,
        to_number=call.to,
        transcript=call.concatenated_transcript,
        audio_url=call.recording_url,
        summary=call.summary,
        ended_at=ended,
        metadata=dict(call.metadata or {}),
    )


# =============================================================================
# Helpers
# =============================================================================


def dedupe_agents(agents: Iterable[NormalizedAgent]) -> List[NormalizedAgent]:
    """
    Keep the first agent seen for each (provider, external_id).

    Retell's list endpoint returns one entry per agent version.
    """
    seen = set()
    unique: List[NormalizedAgent] = []
    for agent in agents:
        if agent.key in seen:
            continue
        seen.add(agent.key)
        unique.append(agent)
    return unique

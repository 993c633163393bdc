"""Unit tests for vendor → canonical normalization."""

from datetime import datetime, timezone

import pytest

from voicelink_core.providers.base import (
    CallDirection,
    CallStatus,
    NormalizedAgent,
    VoiceProvider,
)
from voicelink_core.providers.bland.models import BlandCall, BlandPathway
from voicelink_core.providers.normalization import (
    BLAND_STATUS_MAP,
    EPOCH,
    RETELL_STATUS_MAP,
    VAPI_STATUS_MAP,
    dedupe_agents,
    dollars_to_cents,
    normalize_bland_agent,
    normalize_bland_call,
    normalize_retell_agent,
    normalize_retell_call,
    normalize_vapi_agent,
    normalize_vapi_call,
    parse_timestamp,
    seconds_between,
)
from voicelink_core.providers.retell.models import RetellAgent, RetellCall
from voicelink_core.providers.vapi.models import VapiAssistant, VapiCall


CANONICAL_STATUSES = set(CallStatus)


class TestTimestamps:
    """Tests for timestamp helpers."""

    def test_epoch_millis(self):
        assert parse_timestamp(1717000000000) == datetime(2024, 5, 29, 16, 26, 40, tzinfo=timezone.utc)

    def test_iso_with_z(self):
        assert parse_timestamp("2024-05-29T16:26:40.000Z") == datetime(
            2024, 5, 29, 16, 26, 40, tzinfo=timezone.utc
        )

    def test_naive_iso_is_utc(self):
        assert parse_timestamp("2024-05-29T16:26:40").tzinfo is not None

    @pytest.mark.parametrize("value", [None, "", "yesterday", True, object()])
    def test_garbage_is_none(self, value):
        assert parse_timestamp(value) is None

    def test_seconds_between_tolerates_missing_and_reversed(self):
        start = parse_timestamp("2024-01-01T00:00:10Z")
        end = parse_timestamp("2024-01-01T00:00:00Z")

        assert seconds_between(start, None) == 0
        assert seconds_between(None, end) == 0
        assert seconds_between(start, end) == 0
        assert seconds_between(end, start) == 10

    @pytest.mark.parametrize(
        "dollars,cents",
        [(None, 0), (0, 0), (-1.5, 0), (0.4567, 46), (1.0, 100), (float("nan"), 0), (float("inf"), 0)],
    )
    def test_dollars_to_cents(self, dollars, cents):
        assert dollars_to_cents(dollars) == cents


class TestStatusTables:
    """Tests for status mapping totality."""

    @pytest.mark.parametrize("raw", list(RETELL_STATUS_MAP) + ["unknown", None, ""])
    def test_retell_total(self, raw):
        call = normalize_retell_call(RetellCall(call_id="c", call_status=raw))
        assert call.status in CANONICAL_STATUSES

    @pytest.mark.parametrize("raw", list(VAPI_STATUS_MAP) + ["weird", None])
    def test_vapi_total(self, raw):
        call = normalize_vapi_call(VapiCall(id="c", status=raw))
        assert call.status in CANONICAL_STATUSES

    @pytest.mark.parametrize("raw", list(BLAND_STATUS_MAP) + ["???", None])
    def test_bland_total(self, raw):
        call = normalize_bland_call(BlandCall(call_id="c", status=raw))
        assert call.status in CANONICAL_STATUSES

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("registered", CallStatus.QUEUED),
            ("ongoing", CallStatus.IN_PROGRESS),
            ("ended", CallStatus.COMPLETED),
            ("error", CallStatus.FAILED),
            ("not_connected", CallStatus.FAILED),
            ("brand_new_state", CallStatus.QUEUED),
        ],
    )
    def test_retell_values(self, raw, expected):
        assert normalize_retell_call(RetellCall(call_id="c", call_status=raw)).status == expected

    def test_vapi_forwarding_in_progress(self):
        assert normalize_vapi_call(VapiCall(id="c", status="forwarding")).status == CallStatus.IN_PROGRESS

    def test_bland_completed_flag_wins(self):
        call = BlandCall(call_id="c", status="queued", completed=True)
        assert normalize_bland_call(call).status == CallStatus.COMPLETED

    def test_bland_status_case_insensitive(self):
        assert normalize_bland_call(BlandCall(call_id="c", status="In-Progress")).status == CallStatus.IN_PROGRESS


class TestRetellNormalization:
    """Tests for Retell mapping."""

    def test_call(self, retell_call_payload):
        call = normalize_retell_call(RetellCall.model_validate(retell_call_payload))

        assert call.provider == VoiceProvider.RETELL
        assert call.duration_seconds == 95
        assert call.cost_cents == 13  # combined_cost is already cents
        assert call.direction == CallDirection.INBOUND
        assert call.summary == "Caller booked a cleaning."
        assert call.sentiment == "Positive"
        assert call.ended_at is not None

    def test_direction_defaults_outbound(self):
        assert normalize_retell_call(RetellCall(call_id="c")).direction == CallDirection.OUTBOUND

    def test_missing_timing_and_cost(self):
        call = normalize_retell_call(RetellCall(call_id="c", start_timestamp=1717000000000))

        assert call.duration_seconds == 0
        assert call.cost_cents == 0
        assert call.ended_at is None

    def test_never_started_uses_epoch(self):
        assert normalize_retell_call(RetellCall(call_id="c")).started_at == EPOCH

    def test_agent_config_round_trip_fields(self, retell_agent_payload):
        agent = normalize_retell_agent(RetellAgent.model_validate(retell_agent_payload))

        assert agent.external_id == "agent_abc123"
        assert agent.voice_id == "11labs-Adrian"
        assert set(agent.config) >= {"agent_name", "voice_id", "webhook_url", "response_engine"}
        assert agent.created_at == datetime(2024, 5, 29, 16, 26, 40, tzinfo=timezone.utc)


class TestVapiNormalization:
    """Tests for Vapi mapping."""

    def test_call(self, vapi_call_payload):
        call = normalize_vapi_call(VapiCall.model_validate(vapi_call_payload))

        assert call.duration_seconds == 90
        assert call.cost_cents == 46
        assert call.direction == CallDirection.INBOUND
        assert call.from_number == "+15555550101"
        assert call.to_number == "+15555550102"
        assert call.summary == "Asked about pricing."

    def test_start_falls_back_to_created_at(self, vapi_call_payload):
        payload = dict(vapi_call_payload)
        payload.pop("startedAt")

        call = normalize_vapi_call(VapiCall.model_validate(payload))

        assert call.started_at == parse_timestamp(payload["createdAt"])
        assert call.duration_seconds == 100

    def test_outbound_types(self):
        for call_type in ("outboundPhoneCall", "webCall", None):
            call = normalize_vapi_call(VapiCall(id="c", type=call_type))
            assert call.direction == CallDirection.OUTBOUND

    def test_agent(self, vapi_assistant_payload):
        agent = normalize_vapi_agent(VapiAssistant.model_validate(vapi_assistant_payload))

        assert agent.voice_id == "rachel"
        assert agent.config["system_prompt"] == "Be brief."
        assert agent.config["server_url"] == "https://hooks.example.com/vapi"


class TestBlandNormalization:
    """Tests for Bland mapping."""

    def test_call_units(self, bland_call_payload):
        call = normalize_bland_call(BlandCall.model_validate(bland_call_payload))

        assert call.duration_seconds == 150  # minutes * 60
        assert call.cost_cents == 23  # dollars * 100
        assert call.direction == CallDirection.INBOUND
        assert call.from_number == "+15555550104"
        assert call.agent_external_id == "pw_1"

    def test_duration_falls_back_to_timestamps(self):
        call = BlandCall(
            call_id="c",
            started_at="2024-01-01T00:00:00Z",
            end_at="2024-01-01T00:01:05Z",
        )
        assert normalize_bland_call(call).duration_seconds == 65

    def test_negative_length(self):
        assert normalize_bland_call(BlandCall(call_id="c", call_length=-3)).duration_seconds == 0

    def test_agent_from_pathway(self):
        pathway = BlandPathway.model_validate({"pathway_id": "pw_9", "name": "Intake"})
        agent = normalize_bland_agent(pathway)

        assert agent.external_id == "pw_9"
        assert agent.provider == VoiceProvider.BLAND
        assert agent.created_at is None


class TestPurity:
    """Normalization is deterministic and leaves inputs alone."""

    def test_idempotent_per_vendor(self, retell_call_payload, vapi_call_payload, bland_call_payload):
        cases = [
            (normalize_retell_call, RetellCall.model_validate(retell_call_payload)),
            (normalize_vapi_call, VapiCall.model_validate(vapi_call_payload)),
            (normalize_bland_call, BlandCall.model_validate(bland_call_payload)),
        ]
        for normalize, raw in cases:
            before = raw.model_dump()
            first = normalize(raw)
            second = normalize(raw)

            assert first.to_dict() == second.to_dict()
            assert raw.model_dump() == before

    def test_metadata_is_copied(self, retell_call_payload):
        raw = RetellCall.model_validate(retell_call_payload)
        call = normalize_retell_call(raw)
        call.metadata["extra"] = 1

        assert "extra" not in raw.metadata


class TestDedupe:
    """Tests for dedupe_agents."""

    def test_keeps_first_per_key(self):
        agents = [
            NormalizedAgent(external_id="a", name="v3", provider=VoiceProvider.RETELL),
            NormalizedAgent(external_id="a", name="v2", provider=VoiceProvider.RETELL),
            NormalizedAgent(external_id="a", name="other", provider=VoiceProvider.VAPI),
        ]

        result = dedupe_agents(agents)

        assert [(a.provider, a.name) for a in result] == [
            (VoiceProvider.RETELL, "v3"),
            (VoiceProvider.VAPI, "other"),
        ]

"""Unit tests for Retell webhook reconciliation and diagnostics."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import respx
from structlog.testing import capture_logs

from voicelink_core.exceptions import NotFoundError, ServerError, TransportError
from voicelink_core.providers.retell.client import RetellClient
from voicelink_core.providers.retell.models import RetellAgent
from voicelink_core.webhooks import (
    REQUIRED_WEBHOOK_EVENTS,
    ensure_agent_webhook_config,
    get_webhook_status,
    reconcile_agent_webhooks,
    reconcile_all_agents,
)


def make_client(observed_events=None, publish_error=None, fetch_error=None):
    """Mock RetellClient with scripted publish and re-fetch outcomes."""
    client = MagicMock()
    client.update_agent = AsyncMock(return_value=None)
    client.publish_agent = AsyncMock(side_effect=publish_error)
    if fetch_error:
        client.get_agent = AsyncMock(side_effect=fetch_error)
    else:
        client.get_agent = AsyncMock(
            return_value=RetellAgent(agent_id="a1", webhook_events=observed_events)
        )
    return client


class TestReconcileAgentWebhooks:
    """Tests for reconcile_agent_webhooks."""

    @pytest.mark.asyncio
    async def test_converges(self):
        """Test update, publish and verify all succeed."""
        client = make_client(observed_events=list(REQUIRED_WEBHOOK_EVENTS))

        result = await reconcile_agent_webhooks(client, RetellAgent(agent_id="a1"))

        assert result.attempted and result.published and result.verified
        assert result.warnings == []
        assert result.converged

    @pytest.mark.asyncio
    async def test_update_payload_omits_webhook_url(self):
        """Test the update sends only webhook_events."""
        client = make_client(observed_events=list(REQUIRED_WEBHOOK_EVENTS))

        await reconcile_agent_webhooks(client, "a1")

        agent_id, payload = client.update_agent.await_args.args
        assert agent_id == "a1"
        assert payload == {"webhook_events": list(REQUIRED_WEBHOOK_EVENTS)}
        assert "webhook_url" not in payload

    @pytest.mark.asyncio
    async def test_publish_failure_is_non_fatal(self):
        """Test a failing publish still returns attempted and logs a warning."""
        client = make_client(
            observed_events=["call_started"],
            publish_error=ServerError(500, "retell", "/publish-agent/a1"),
        )

        with capture_logs() as logs:
            attempted = await ensure_agent_webhook_config(client, RetellAgent(agent_id="a1"))

        assert attempted is True
        events = [entry["event"] for entry in logs]
        assert "agent_publish_failed" in events
        missing = next(entry for entry in logs if entry["event"] == "webhook_events_missing")
        assert missing["log_level"] == "warning"
        assert missing["missing"] == ["call_ended", "call_analyzed", "transcript_updated"]
        assert missing["observed"] == ["call_started"]
        client.get_agent.assert_awaited_once_with("a1")

    @pytest.mark.asyncio
    async def test_warnings_recorded(self):
        """Test publish and verify problems are returned as warnings."""
        client = make_client(
            observed_events=None,
            publish_error=TransportError(4, None, "retell", "/publish-agent/a1"),
        )

        result = await reconcile_agent_webhooks(client, "a1")

        assert result.attempted is True
        assert result.published is False
        assert result.verified is False
        assert [w.stage for w in result.warnings] == ["publish", "verify"]
        assert result.warnings[1].details["observed"] == []

    @pytest.mark.asyncio
    async def test_refetch_failure_is_warning(self):
        """Test a failed re-fetch is recorded, not raised."""
        client = make_client(fetch_error=NotFoundError("retell", "/get-agent/a1"))

        result = await reconcile_agent_webhooks(client, "a1")

        assert result.attempted is True
        assert result.published is True
        assert result.warnings[0].stage == "verify"

    @pytest.mark.asyncio
    async def test_refetch_without_body_is_warning(self, settings, api_key):
        """Test a 2xx re-fetch with no JSON body becomes a verify warning."""
        client = RetellClient(api_key, settings=settings)

        with respx.mock(base_url=settings.retell_base_url) as mock:
            mock.patch("/update-agent/a1").mock(
                return_value=httpx.Response(200, json={"agent_id": "a1"})
            )
            mock.post("/publish-agent/a1").mock(return_value=httpx.Response(200))
            mock.get("/get-agent/a1").mock(return_value=httpx.Response(200, text="OK"))

            result = await reconcile_agent_webhooks(client, "a1")

        assert result.attempted is True
        assert result.published is True
        assert result.verified is False
        assert result.warnings[0].stage == "verify"
        assert result.warnings[0].details["error_code"] == "decode_error"

    @pytest.mark.asyncio
    async def test_update_failure_propagates(self):
        """Test the mandatory update step fails loudly."""
        client = make_client()
        client.update_agent.side_effect = TransportError(4, None, "retell", "/update-agent/a1")

        with pytest.raises(TransportError):
            await reconcile_agent_webhooks(client, "a1")

        client.publish_agent.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_custom_events(self):
        """Test a caller-supplied event set is pushed as given."""
        client = make_client(observed_events=["call_ended"])

        result = await reconcile_agent_webhooks(client, "a1", required_events=["call_ended"])

        assert client.update_agent.await_args.args[1] == {"webhook_events": ["call_ended"]}
        assert result.verified


class TestReconcileAllAgents:
    """Tests for reconcile_all_agents."""

    @pytest.mark.asyncio
    async def test_dedupes_and_skips_failures(self):
        """Test each agent is reconciled once and failures don't stop the batch."""
        client = make_client(observed_events=list(REQUIRED_WEBHOOK_EVENTS))
        client.list_agents = AsyncMock(return_value=[
            RetellAgent(agent_id="a1", version=2),
            RetellAgent(agent_id="a1", version=1),
            RetellAgent(agent_id="a2"),
            RetellAgent(agent_id="a3"),
        ])

        async def update(agent_id, payload):
            if agent_id == "a2":
                raise ServerError(502, "retell", f"/update-agent/{agent_id}")

        client.update_agent = AsyncMock(side_effect=update)

        with capture_logs() as logs:
            patched = await reconcile_all_agents(client)

        assert patched == 2
        assert client.update_agent.await_count == 3
        assert any(e["event"] == "webhook_reconcile_failed" and e["agent_id"] == "a2" for e in logs)

    @pytest.mark.asyncio
    async def test_restrict_to_ids(self):
        """Test agent_ids narrows the batch."""
        client = make_client(observed_events=list(REQUIRED_WEBHOOK_EVENTS))
        client.list_agents = AsyncMock(return_value=[
            RetellAgent(agent_id="a1"),
            RetellAgent(agent_id="a2"),
        ])

        patched = await reconcile_all_agents(client, agent_ids=["a2"])

        assert patched == 1
        assert client.update_agent.await_args.args[0] == "a2"


    @pytest.mark.asyncio
    async def test_undecodable_refetch_does_not_stop_batch(self, settings, api_key):
        """Test an agent whose re-fetch has no body still counts and the batch continues."""
        client = RetellClient(api_key, settings=settings)
        events = list(REQUIRED_WEBHOOK_EVENTS)

        with respx.mock(base_url=settings.retell_base_url) as mock:
            mock.get("/list-agents").mock(
                return_value=httpx.Response(200, json=[{"agent_id": "a1"}, {"agent_id": "a2"}])
            )
            for agent_id in ("a1", "a2"):
                mock.patch(f"/update-agent/{agent_id}").mock(
                    return_value=httpx.Response(200, json={"agent_id": agent_id})
                )
                mock.post(f"/publish-agent/{agent_id}").mock(return_value=httpx.Response(200))
            mock.get("/get-agent/a1").mock(return_value=httpx.Response(200, text="OK"))
            mock.get("/get-agent/a2").mock(
                return_value=httpx.Response(200, json={"agent_id": "a2", "webhook_events": events})
            )

            patched = await reconcile_all_agents(client)

        assert patched == 2


class TestWebhookStatus:
    """Tests for get_webhook_status."""

    @pytest.mark.asyncio
    async def test_never_published(self):
        client = MagicMock()
        client.get_agent_versions = AsyncMock(return_value=[
            RetellAgent(agent_id="a1", version=0, is_published=False, webhook_events=["call_ended"]),
        ])

        status = await get_webhook_status(client, "a1")

        assert status.published is None
        assert status.draft.webhook_events == ["call_ended"]
        assert status.diagnosis.startswith("NO PUBLISHED VERSION")
        assert not status.ok

    @pytest.mark.asyncio
    async def test_published_missing_transcript(self):
        client = MagicMock()
        client.get_agent_versions = AsyncMock(return_value=[
            RetellAgent(agent_id="a1", version=2, is_published=False,
                        webhook_events=list(REQUIRED_WEBHOOK_EVENTS)),
            RetellAgent(agent_id="a1", version=1, is_published=True,
                        webhook_events=["call_started", "call_ended"],
                        webhook_url="https://hooks.example.com"),
        ])

        status = await get_webhook_status(client, "a1")

        assert status.total_versions == 2
        assert status.draft.has_transcript_updated
        assert not status.published.has_transcript_updated
        assert "transcript_updated" in status.diagnosis
        assert status.to_dict()["published_version"]["version"] == 1

    @pytest.mark.asyncio
    async def test_ok(self):
        client = MagicMock()
        client.get_agent_versions = AsyncMock(return_value=[
            RetellAgent(agent_id="a1", version=1, is_published=True,
                        webhook_events=list(REQUIRED_WEBHOOK_EVENTS),
                        webhook_url="https://hooks.example.com"),
        ])

        status = await get_webhook_status(client, "a1")

        assert status.ok
        assert status.draft is None

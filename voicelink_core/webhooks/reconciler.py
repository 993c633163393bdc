"""
Retell webhook-event reconciliation.

Brings an agent's ``webhook_events`` to the required set so live-transcript
and lifecycle events reach the account-level webhook. The procedure is
"mandatory write, optional verify":

1. PATCH the event list. ``webhook_url`` is never part of the payload:
   absent means "use the account-level URL", while an empty value would
   disable delivery.
2. Publish the draft. Retell's publish endpoint is unreliable; a failure is
   logged and recorded, never raised.
3. Re-fetch and compare. Missing events are logged and recorded.

Only a failure in step 1 propagates. Re-running is safe.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

import structlog

from ..exceptions import ProviderError
from ..providers.retell.client import RetellClient
from ..providers.retell.models import RetellAgent

logger = structlog.get_logger(__name__)


REQUIRED_WEBHOOK_EVENTS = (
    "call_started",
    "call_ended",
    "call_analyzed",
    "transcript_updated",
)


@dataclass
class ReconciliationWarning:
    """A non-fatal condition met while reconciling. Logged, never raised."""

    agent_id: str
    stage: str  # publish | verify
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "agent_id": self.agent_id,
            "stage": self.stage,
            "message": self.message,
            "details": dict(self.details),
        }


@dataclass
class ReconciliationResult:
    agent_id: str
    attempted: bool = False
    published: bool = False
    verified: bool = False
    warnings: List[ReconciliationWarning] = field(default_factory=list)

    @property
    def converged(self) -> bool:
        return self.attempted and self.verified


def _agent_id(agent: Union[RetellAgent, str]) -> str:
    return agent if isinstance(agent, str) else agent.agent_id


async def reconcile_agent_webhooks(
    client: RetellClient,
    agent: Union[RetellAgent, str],
    required_events: Sequence[str] = REQUIRED_WEBHOOK_EVENTS,
) -> ReconciliationResult:
    """
    Push ``required_events`` to an agent, publish, and verify.

    Args:
        client: Retell client for the agent's account
        agent: The agent, or its id
        required_events: Event types the agent must emit

    Returns:
        Result with per-step outcome and any warnings

    Raises:
        ProviderError: The event-list update itself failed
    """
    agent_id = _agent_id(agent)
    events = list(required_events)
    result = ReconciliationResult(agent_id=agent_id)
    log = logger.bind(agent_id=agent_id)

    await client.update_agent(agent_id, {"webhook_events": events})
    log.info("webhook_events_updated", events=events)

    try:
        await client.publish_agent(agent_id)
        result.published = True
    except ProviderError as e:
        warning = ReconciliationWarning(
            agent_id=agent_id,
            stage="publish",
            message="publish failed; draft configuration is still updated",
            details={"error": str(e), "error_code": e.code},
        )
        result.warnings.append(warning)
        log.warning("agent_publish_failed", error=str(e), error_code=e.code)

    try:
        refreshed = await client.get_agent(agent_id)
    except ProviderError as e:
        warning = ReconciliationWarning(
            agent_id=agent_id,
            stage="verify",
            message="could not re-fetch agent to verify webhook events",
            details={"error": str(e), "error_code": e.code},
        )
        result.warnings.append(warning)
        log.warning("webhook_events_unverified", error=str(e), error_code=e.code)
    else:
        observed = list(refreshed.webhook_events or [])
        missing = [e for e in events if e not in observed]
        if missing:
            warning = ReconciliationWarning(
                agent_id=agent_id,
                stage="verify",
                message="webhook events missing after publish",
                details={"expected": events, "observed": observed, "missing": missing},
            )
            result.warnings.append(warning)
            log.warning(
                "webhook_events_missing",
                expected=events,
                observed=observed,
                missing=missing,
            )
        else:
            result.verified = True

    result.attempted = True
    return result


async def ensure_agent_webhook_config(
    client: RetellClient,
    agent: Union[RetellAgent, str],
) -> bool:
    """
    Reconcile an agent's webhook events; ``True`` once all steps ran.

    ``True`` does not mean the published version carries the events; the
    ``webhook_events_missing`` warning is the signal for that.
    """
    result = await reconcile_agent_webhooks(client, agent)
    return result.attempted


async def reconcile_all_agents(
    client: RetellClient,
    agent_ids: Optional[Iterable[str]] = None,
) -> int:
    """
    Reconcile every agent in the account, one at a time.

    Args:
        client: Retell client for the account
        agent_ids: Restrict to these agent ids; all agents when ``None``

    Returns:
        Number of agents reconciled. Agents whose update failed are logged
        and skipped.
    """
    wanted = set(agent_ids) if agent_ids is not None else None

    seen = set()
    targets: List[RetellAgent] = []
    for agent in await client.list_agents():
        if agent.agent_id in seen:
            continue
        if wanted is not None and agent.agent_id not in wanted:
            continue
        seen.add(agent.agent_id)
        targets.append(agent)

    patched = 0
    for agent in targets:
        try:
            if await ensure_agent_webhook_config(client, agent):
                patched += 1
        except ProviderError as e:
            logger.error(
                "webhook_reconcile_failed",
                agent_id=agent.agent_id,
                error=str(e),
                error_code=e.code,
            )

    if patched:
        logger.info(
            "webhook_reconcile_completed",
            patched=patched,
            total=len(targets),
            events=list(REQUIRED_WEBHOOK_EVENTS),
        )
    return patched

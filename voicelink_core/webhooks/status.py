"""Webhook configuration diagnostics for Retell agents."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..providers.retell.client import RetellClient
from ..providers.retell.models import RetellAgent
from .reconciler import REQUIRED_WEBHOOK_EVENTS

TRANSCRIPT_EVENT = "transcript_updated"


@dataclass
class VersionWebhookConfig:
    version: Optional[int]
    webhook_url: Optional[str]
    webhook_events: List[str]
    is_published: bool

    @property
    def has_transcript_updated(self) -> bool:
        return TRANSCRIPT_EVENT in self.webhook_events

    @classmethod
    def from_agent(cls, agent: RetellAgent) -> "VersionWebhookConfig":
        return cls(
            version=agent.version,
            webhook_url=agent.webhook_url or None,
            webhook_events=list(agent.webhook_events or []),
            is_published=bool(agent.is_published),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "webhook_url": self.webhook_url,
            "webhook_events": list(self.webhook_events),
            "has_transcript_updated": self.has_transcript_updated,
            "is_published": self.is_published,
        }


@dataclass
class WebhookStatus:
    agent_id: str
    published: Optional[VersionWebhookConfig]
    draft: Optional[VersionWebhookConfig]
    total_versions: int
    required_events: List[str] = field(default_factory=lambda: list(REQUIRED_WEBHOOK_EVENTS))

    @property
    def diagnosis(self) -> str:
        if self.published is None:
            return "NO PUBLISHED VERSION: agent has never been published"
        if not self.published.has_transcript_updated:
            return "PUBLISHED VERSION MISSING transcript_updated: reconcile to fix"
        if not self.published.webhook_url:
            return "PUBLISHED VERSION MISSING webhook_url: account-level webhook is used"
        return "OK: published version has correct webhook config"

    @property
    def ok(self) -> bool:
        return self.diagnosis.startswith("OK")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "agent_id": self.agent_id,
            "required_events": list(self.required_events),
            "published_version": self.published.to_dict() if self.published else None,
            "draft_version": self.draft.to_dict() if self.draft else None,
            "total_versions": self.total_versions,
            "diagnosis": self.diagnosis,
        }


async def get_webhook_status(client: RetellClient, agent_id: str) -> WebhookStatus:
    """
    Report webhook config for the draft and published versions of an agent.

    Live phone calls use the published version, so that is the one the
    diagnosis looks at.
    """
    versions = await client.get_agent_versions(agent_id)
    published = next((v for v in versions if v.is_published), None)
    draft = next((v for v in versions if not v.is_published), None)

    return WebhookStatus(
        agent_id=agent_id,
        published=VersionWebhookConfig.from_agent(published) if published else None,
        draft=VersionWebhookConfig.from_agent(draft) if draft else None,
        total_versions=len(versions),
    )

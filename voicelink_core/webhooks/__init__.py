"""Webhook delivery configuration for vendor agents."""

from .reconciler import (
    REQUIRED_WEBHOOK_EVENTS,
    ReconciliationResult,
    ReconciliationWarning,
    ensure_agent_webhook_config,
    reconcile_agent_webhooks,
    reconcile_all_agents,
)
from .status import VersionWebhookConfig, WebhookStatus, get_webhook_status

__all__ = [
    "REQUIRED_WEBHOOK_EVENTS",
    "ReconciliationResult",
    "ReconciliationWarning",
    "ensure_agent_webhook_config",
    "reconcile_agent_webhooks",
    "reconcile_all_agents",
    "VersionWebhookConfig",
    "WebhookStatus",
    "get_webhook_status",
]

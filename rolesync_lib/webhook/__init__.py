"""Webhook module: incremental updates from Notion automations."""

from .adapter import AutomationPayload, WebhookAdapter

__all__ = ["AutomationPayload", "WebhookAdapter"]

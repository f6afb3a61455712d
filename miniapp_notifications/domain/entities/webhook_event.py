"""Events delivered by the hosting client through the webhook."""

from __future__ import annotations

from dataclasses import dataclass

EVENT_MINIAPP_ADDED = "miniapp_added"
EVENT_MINIAPP_REMOVED = "miniapp_removed"
EVENT_NOTIFICATIONS_ENABLED = "notifications_enabled"
EVENT_NOTIFICATIONS_DISABLED = "notifications_disabled"

KNOWN_EVENTS = frozenset(
    {
        EVENT_MINIAPP_ADDED,
        EVENT_MINIAPP_REMOVED,
        EVENT_NOTIFICATIONS_ENABLED,
        EVENT_NOTIFICATIONS_DISABLED,
    }
)


@dataclass(frozen=True)
class NotificationDetails:
    """``url``/``token`` pair granted when the user enables notifications."""

    url: str
    token: str


@dataclass(frozen=True)
class WebhookEvent:
    """A verified lifecycle event for one user/app pair."""

    user_id: int
    app_id: int
    event: str
    notification_details: NotificationDetails | None = None


__all__ = [
    "EVENT_MINIAPP_ADDED",
    "EVENT_MINIAPP_REMOVED",
    "EVENT_NOTIFICATIONS_DISABLED",
    "EVENT_NOTIFICATIONS_ENABLED",
    "KNOWN_EVENTS",
    "NotificationDetails",
    "WebhookEvent",
]

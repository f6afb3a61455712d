"""Apply lifecycle events from the hosting client to the credential store."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from miniapp_notifications.domain.entities import (
    EVENT_MINIAPP_ADDED,
    EVENT_MINIAPP_REMOVED,
    EVENT_NOTIFICATIONS_DISABLED,
    EVENT_NOTIFICATIONS_ENABLED,
    WebhookEvent,
)
from miniapp_notifications.domain.entities.notification_request import MAX_TITLE_LENGTH
from miniapp_notifications.infrastructure.repositories import NotificationCredentialRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FollowUpNotification:
    """Notification to send once the webhook has been acknowledged."""

    user_id: int
    app_id: int
    title: str
    body: str
    label: str


async def handle_webhook_event(
    credentials: NotificationCredentialRepository,
    event: WebhookEvent,
    *,
    app_name: str,
) -> FollowUpNotification | None:
    """Store or forget the credential carried by ``event``.

    Returns the welcome/confirmation notification the caller should send in
    the background, or ``None``. Store failures propagate as
    :class:`StoreUnavailableError`.
    """

    logger.info(
        "Received event %s for fid=%s appFid=%s", event.event, event.user_id, event.app_id
    )

    if event.event == EVENT_MINIAPP_ADDED:
        if event.notification_details is None:
            return None
        await credentials.set(
            event.user_id,
            event.app_id,
            event.notification_details.url,
            event.notification_details.token,
        )
        return FollowUpNotification(
            user_id=event.user_id,
            app_id=event.app_id,
            title=f"Welcome to {app_name}"[:MAX_TITLE_LENGTH],
            body="Mini app is now added to your client",
            label="welcome notification",
        )

    if event.event == EVENT_NOTIFICATIONS_ENABLED:
        details = event.notification_details
        if details is None:
            return None
        await credentials.set(event.user_id, event.app_id, details.url, details.token)
        return FollowUpNotification(
            user_id=event.user_id,
            app_id=event.app_id,
            title="Ding ding ding",
            body="Notifications are now enabled",
            label="confirmation notification",
        )

    if event.event in (EVENT_MINIAPP_REMOVED, EVENT_NOTIFICATIONS_DISABLED):
        await credentials.delete(event.user_id, event.app_id)
        return None

    logger.info("Ignoring unknown webhook event type %s", event.event)
    return None


__all__ = ["FollowUpNotification", "handle_webhook_event"]

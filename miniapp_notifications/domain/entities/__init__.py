"""Domain entities exposed by the application."""

from .notification_credential import NotificationCredential
from .notification_request import NotificationRequest, new_notification_id
from .send_result import (
    BatchSendSummary,
    Recipient,
    SendFailed,
    SendNoToken,
    SendRateLimited,
    SendResult,
    SendSuccess,
)
from .webhook_event import (
    EVENT_MINIAPP_ADDED,
    EVENT_MINIAPP_REMOVED,
    EVENT_NOTIFICATIONS_DISABLED,
    EVENT_NOTIFICATIONS_ENABLED,
    NotificationDetails,
    WebhookEvent,
)

__all__ = [
    "BatchSendSummary",
    "EVENT_MINIAPP_ADDED",
    "EVENT_MINIAPP_REMOVED",
    "EVENT_NOTIFICATIONS_DISABLED",
    "EVENT_NOTIFICATIONS_ENABLED",
    "NotificationCredential",
    "NotificationDetails",
    "NotificationRequest",
    "Recipient",
    "SendFailed",
    "SendNoToken",
    "SendRateLimited",
    "SendResult",
    "SendSuccess",
    "WebhookEvent",
    "new_notification_id",
]

from .health import HealthResponse
from .notification import (
    NotificationBroadcastRequest,
    NotificationBroadcastResponse,
    NotificationSendRequest,
    NotificationSendResponse,
    RecipientSchema,
)
from .webhook import WebhookResponse

__all__ = [
    "HealthResponse",
    "NotificationBroadcastRequest",
    "NotificationBroadcastResponse",
    "NotificationSendRequest",
    "NotificationSendResponse",
    "RecipientSchema",
    "WebhookResponse",
]

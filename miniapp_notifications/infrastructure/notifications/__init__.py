"""Outbound notification delivery helpers for the infrastructure layer."""

from .classification import HTTP_TOO_MANY_REQUESTS, classify_notification_response
from .client import MiniAppNotificationClient

__all__ = [
    "HTTP_TOO_MANY_REQUESTS",
    "MiniAppNotificationClient",
    "classify_notification_response",
]

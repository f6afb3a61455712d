"""Aggregate application use cases."""

from .notifications import NotificationDispatcher, handle_webhook_event, send_to_many

__all__ = [
    "NotificationDispatcher",
    "handle_webhook_event",
    "send_to_many",
]

"""Public helpers for sending mini app notifications."""

from .background import log_send_result, send_and_log
from .batch import send_to_many
from .dispatcher import NotificationDispatcher
from .events import (
    notify_achievement,
    notify_construction_blocked,
    notify_daily_reminder,
    notify_facility_built,
    notify_resources_ready,
)
from .webhook_events import FollowUpNotification, handle_webhook_event

__all__ = [
    "FollowUpNotification",
    "NotificationDispatcher",
    "handle_webhook_event",
    "log_send_result",
    "notify_achievement",
    "notify_construction_blocked",
    "notify_daily_reminder",
    "notify_facility_built",
    "notify_resources_ready",
    "send_and_log",
    "send_to_many",
]

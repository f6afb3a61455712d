"""Notifications triggered by game events."""

from __future__ import annotations

from miniapp_notifications.domain.entities import SendResult
from miniapp_notifications.domain.entities.notification_request import (
    MAX_BODY_LENGTH,
    MAX_TITLE_LENGTH,
)

from .dispatcher import NotificationDispatcher


def _clip(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 1] + "…"


async def _send_game_event(
    dispatcher: NotificationDispatcher, user_id: int, app_id: int, title: str, body: str
) -> SendResult:
    return await dispatcher.send(
        user_id,
        app_id,
        _clip(title, MAX_TITLE_LENGTH),
        _clip(body, MAX_BODY_LENGTH),
    )


async def notify_facility_built(
    dispatcher: NotificationDispatcher, *, user_id: int, app_id: int, facility_name: str
) -> SendResult:
    """Tell the player a facility finished construction."""

    return await _send_game_event(
        dispatcher,
        user_id,
        app_id,
        "🏗️ Building Complete",
        f"Your {facility_name} is ready!",
    )


async def notify_resources_ready(
    dispatcher: NotificationDispatcher,
    *,
    user_id: int,
    app_id: int,
    resource_type: str,
    amount: int,
) -> SendResult:
    """Tell the player resources are waiting to be collected."""

    return await _send_game_event(
        dispatcher,
        user_id,
        app_id,
        "💎 Resources Ready",
        f"Collect {amount} {resource_type} now!",
    )


async def notify_construction_blocked(
    dispatcher: NotificationDispatcher, *, user_id: int, app_id: int, reason: str
) -> SendResult:
    return await _send_game_event(dispatcher, user_id, app_id, "⚠️ Construction Blocked", reason)


async def notify_daily_reminder(
    dispatcher: NotificationDispatcher, *, user_id: int, app_id: int, app_name: str
) -> SendResult:
    """Invite the player back; ``app_name`` normally comes from ``Settings.app_name``."""

    return await _send_game_event(
        dispatcher,
        user_id,
        app_id,
        f"🎮 Come back to {app_name}!",
        "Your facilities need attention",
    )


async def notify_achievement(
    dispatcher: NotificationDispatcher, *, user_id: int, app_id: int, achievement_name: str
) -> SendResult:
    """Announce an unlocked achievement; the body is the achievement name."""

    return await _send_game_event(
        dispatcher,
        user_id,
        app_id,
        "🏆 Achievement Unlocked!",
        achievement_name,
    )


__all__ = [
    "notify_achievement",
    "notify_construction_blocked",
    "notify_daily_reminder",
    "notify_facility_built",
    "notify_resources_ready",
]

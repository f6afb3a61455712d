"""Fire-and-forget sends whose outcome is still logged."""

from __future__ import annotations

import logging

from miniapp_notifications.domain.entities import SendFailed, SendNoToken, SendRateLimited, SendResult

from .dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)


def log_send_result(result: SendResult, *, user_id: int, app_id: int, label: str) -> None:
    """Log ``result`` at a severity matching how much attention it needs."""

    if isinstance(result, SendNoToken):
        logger.debug("%s: fid=%s appFid=%s has no notification token", label, user_id, app_id)
    elif isinstance(result, SendRateLimited):
        logger.warning(
            "%s: rate limited for fid=%s appFid=%s (status %s)",
            label,
            user_id,
            app_id,
            result.status_code,
        )
    elif isinstance(result, SendFailed):
        logger.warning(
            "%s: failed for fid=%s appFid=%s [%s] %s",
            label,
            user_id,
            app_id,
            result.kind,
            result.detail,
        )
    else:
        logger.info("%s: sent to fid=%s appFid=%s", label, user_id, app_id)


async def send_and_log(
    dispatcher: NotificationDispatcher,
    user_id: int,
    app_id: int,
    title: str,
    body: str,
    *,
    label: str = "notification",
) -> SendResult:
    """Send a notification nobody awaits and log what happened to it.

    Intended for background tasks. An unexpected exception is logged once
    here and returned as a ``dispatch`` failure since no caller is left to
    observe it.
    """

    try:
        result = await dispatcher.send(user_id, app_id, title, body)
    except Exception as exc:
        logger.exception("%s: unexpected error for fid=%s appFid=%s", label, user_id, app_id)
        return SendFailed(kind="dispatch", detail=str(exc), cause=exc)
    log_send_result(result, user_id=user_id, app_id=app_id, label=label)
    return result


__all__ = ["log_send_result", "send_and_log"]

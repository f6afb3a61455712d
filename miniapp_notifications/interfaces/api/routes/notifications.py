"""Endpoints used by game logic to trigger notifications."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from miniapp_notifications.application.use_cases.notifications import (
    NotificationDispatcher,
    log_send_result,
    send_to_many,
)
from miniapp_notifications.domain.entities import Recipient
from miniapp_notifications.interfaces.api.dependencies import (
    get_notification_dispatcher,
    require_notifications_api_key,
)
from miniapp_notifications.interfaces.api.schemas import (
    NotificationBroadcastRequest,
    NotificationBroadcastResponse,
    NotificationSendRequest,
    NotificationSendResponse,
)

router = APIRouter(
    prefix="/notifications",
    tags=["notifications"],
    dependencies=[Depends(require_notifications_api_key)],
)


@router.post("/send", response_model=NotificationSendResponse)
async def send_notification(
    payload: NotificationSendRequest,
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> NotificationSendResponse:
    """Send one notification and report how it was classified."""

    try:
        result = await dispatcher.send(
            payload.fid,
            payload.app_fid,
            payload.title,
            payload.body,
            payload.target_url,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    log_send_result(result, user_id=payload.fid, app_id=payload.app_fid, label="triggered notification")
    return NotificationSendResponse.from_result(result)


@router.post("/broadcast", response_model=NotificationBroadcastResponse)
async def broadcast_notification(
    payload: NotificationBroadcastRequest,
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> NotificationBroadcastResponse:
    """Send the same notification to every listed recipient."""

    summary = await send_to_many(
        dispatcher,
        [Recipient(user_id=item.fid, app_id=item.app_fid) for item in payload.unique_recipients()],
        payload.title,
        payload.body,
        payload.target_url,
    )
    return NotificationBroadcastResponse(
        successful=summary.successful,
        failed=summary.failed,
        skipped=summary.skipped,
        total=summary.total,
    )

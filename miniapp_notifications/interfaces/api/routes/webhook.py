"""Webhook receiving notification lifecycle events from the hosting client."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, status

from miniapp_notifications.application.use_cases.notifications import (
    NotificationDispatcher,
    handle_webhook_event,
    send_and_log,
)
from miniapp_notifications.config import Settings, get_settings
from miniapp_notifications.domain.errors import (
    AppKeyVerificationError,
    InvalidAppKeyError,
    InvalidWebhookDataError,
    StoreUnavailableError,
)
from miniapp_notifications.infrastructure.repositories import NotificationCredentialRepository
from miniapp_notifications.infrastructure.webhooks import AppKeyVerifier, parse_webhook_event
from miniapp_notifications.interfaces.api.dependencies import (
    get_app_key_verifier,
    get_credential_repository,
    get_notification_dispatcher,
)
from miniapp_notifications.interfaces.api.schemas import WebhookResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhook"])


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request body must be JSON",
        ) from exc


@router.post("/webhook", response_model=WebhookResponse)
async def receive_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    verifier: AppKeyVerifier = Depends(get_app_key_verifier),
    credentials: NotificationCredentialRepository = Depends(get_credential_repository),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    settings: Settings = Depends(get_settings),
) -> WebhookResponse:
    """Verify a signed event and update the stored notification credential.

    The acknowledgement is returned before any welcome notification goes out;
    those are sent as background tasks and their outcome is only logged.
    """

    body = await _read_json(request)

    try:
        event = await parse_webhook_event(body, verifier)
    except InvalidWebhookDataError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except InvalidAppKeyError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    except AppKeyVerificationError as exc:
        logger.error("Could not verify webhook app key: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
        ) from exc

    try:
        follow_up = await handle_webhook_event(credentials, event, app_name=settings.app_name)
    except StoreUnavailableError as exc:
        logger.error("Credential store unavailable while handling %s: %s", event.event, exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Credential store unavailable",
        ) from exc

    if follow_up is not None:
        background_tasks.add_task(
            send_and_log,
            dispatcher,
            follow_up.user_id,
            follow_up.app_id,
            follow_up.title,
            follow_up.body,
            label=follow_up.label,
        )

    return WebhookResponse(success=True)

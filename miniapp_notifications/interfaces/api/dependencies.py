"""FastAPI dependency utilities."""

import secrets

from fastapi import Depends, Header, HTTPException, Request, status

from miniapp_notifications.application.use_cases.notifications import NotificationDispatcher
from miniapp_notifications.config import Settings, get_settings
from miniapp_notifications.infrastructure.repositories import NotificationCredentialRepository
from miniapp_notifications.infrastructure.webhooks import AppKeyVerifier


def get_credential_repository(request: Request) -> NotificationCredentialRepository:
    """Return the credential repository created at startup."""

    return request.app.state.credentials


def get_notification_dispatcher(request: Request) -> NotificationDispatcher:
    """Return the process-wide notification dispatcher."""

    return request.app.state.dispatcher


def get_app_key_verifier(request: Request) -> AppKeyVerifier:
    """Return the configured webhook verifier or refuse the request."""

    verifier = getattr(request.app.state, "app_key_verifier", None)
    if verifier is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Webhook verification is not configured",
        )
    return verifier


def require_notifications_api_key(
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
    settings: Settings = Depends(get_settings),
) -> None:
    """Ensure the caller presented the shared notifications API key."""

    expected = settings.notifications_api_key
    if not expected:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notification triggers are disabled",
        )
    if x_api_key is None or not secrets.compare_digest(x_api_key, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
        )

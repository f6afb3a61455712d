"""Send a notification to one user/app pair."""

from __future__ import annotations

import logging

from miniapp_notifications.domain.entities import (
    NotificationRequest,
    SendFailed,
    SendNoToken,
    SendResult,
)
from miniapp_notifications.domain.errors import StoreUnavailableError
from miniapp_notifications.infrastructure.notifications import MiniAppNotificationClient
from miniapp_notifications.infrastructure.repositories import NotificationCredentialRepository

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Resolve the stored credential and post a single notification through it.

    The dispatcher only reads credentials. A rate limit or a failed delivery
    leaves the stored record untouched.
    """

    def __init__(
        self,
        credentials: NotificationCredentialRepository,
        client: MiniAppNotificationClient,
        *,
        default_target_url: str,
    ) -> None:
        self.credentials = credentials
        self.client = client
        self.default_target_url = default_target_url

    async def send(
        self,
        user_id: int,
        app_id: int,
        title: str,
        body: str,
        target_url: str | None = None,
    ) -> SendResult:
        """Send ``title``/``body`` to the user and return the classified outcome.

        ``no_token`` is returned without any network call when the user never
        enabled notifications. Expected failures come back as values,
        including content over the platform length limits
        (``invalid_request``). ``ValueError`` is raised only for invalid
        identifiers.
        """

        try:
            credential = await self.credentials.get(user_id, app_id)
        except StoreUnavailableError as exc:
            logger.error(
                "Credential lookup failed for fid=%s appFid=%s: %s", user_id, app_id, exc
            )
            return SendFailed(kind="store_unavailable", detail=str(exc), cause=exc)

        if credential is None:
            return SendNoToken()

        try:
            request = NotificationRequest(
                title=title,
                body=body,
                target_url=target_url or self.default_target_url,
                tokens=(credential.token,),
            )
        except ValueError as exc:
            logger.warning(
                "Refusing to send notification to fid=%s appFid=%s: %s", user_id, app_id, exc
            )
            return SendFailed(kind="invalid_request", detail=str(exc), cause=exc)

        result = await self.client.post(credential.endpoint_url, request)
        logger.debug(
            "Notification %s to fid=%s appFid=%s finished with %s",
            request.notification_id,
            user_id,
            app_id,
            result.state,
        )
        return result


__all__ = ["NotificationDispatcher"]

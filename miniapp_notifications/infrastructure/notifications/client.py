"""HTTP client posting notifications to hosting-client endpoints."""

from __future__ import annotations

import logging

import httpx

from miniapp_notifications.domain.entities import NotificationRequest, SendFailed, SendResult

from .classification import classify_notification_response

logger = logging.getLogger(__name__)


class MiniAppNotificationClient:
    """Send one :class:`NotificationRequest` per call, without retries."""

    def __init__(self, http_client: httpx.AsyncClient, *, timeout: float | None = None) -> None:
        self._http = http_client
        self._timeout = timeout

    async def post(self, endpoint_url: str, request: NotificationRequest) -> SendResult:
        """POST ``request`` to ``endpoint_url`` and classify the reply.

        Transport problems are returned as :class:`SendFailed` values, never
        raised, so a failing endpoint cannot break the caller.
        """

        token = request.tokens[0]
        try:
            response = await self._http.post(
                endpoint_url,
                json=request.to_payload(),
                headers={"Content-Type": "application/json"},
                timeout=self._timeout if self._timeout is not None else httpx.USE_CLIENT_DEFAULT,
            )
        except httpx.TimeoutException as exc:
            logger.warning(
                "Timed out sending notification %s to %s", request.notification_id, endpoint_url
            )
            return SendFailed(kind="timeout", detail=f"timeout: {exc}", cause=exc)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning(
                "Transport error sending notification %s to %s: %s",
                request.notification_id,
                endpoint_url,
                exc,
            )
            return SendFailed(kind="transport", detail=f"{type(exc).__name__}: {exc}", cause=exc)

        return classify_notification_response(response.status_code, response.content, token)


__all__ = ["MiniAppNotificationClient"]

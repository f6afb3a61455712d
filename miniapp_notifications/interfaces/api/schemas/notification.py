"""Pydantic models describing notification trigger payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from miniapp_notifications.domain.entities import SendFailed, SendRateLimited, SendResult
from miniapp_notifications.domain.entities.notification_request import (
    MAX_BODY_LENGTH,
    MAX_TARGET_URL_LENGTH,
    MAX_TITLE_LENGTH,
)


class RecipientSchema(BaseModel):
    """User/app pair addressed by a notification."""

    model_config = ConfigDict(populate_by_name=True)

    fid: int = Field(..., ge=0, description="Identifier of the user")
    app_fid: int = Field(..., ge=0, alias="appFid", description="Identifier of the client app")


class NotificationContent(BaseModel):
    """Text and deep link shared by single and batch sends."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    body: str = Field(..., min_length=1, max_length=MAX_BODY_LENGTH)
    target_url: str | None = Field(
        default=None,
        alias="targetUrl",
        max_length=MAX_TARGET_URL_LENGTH,
        description="Deep link opened by the notification; defaults to the app URL",
    )


class NotificationSendRequest(RecipientSchema, NotificationContent):
    """Payload used to notify one user."""


class NotificationSendResponse(BaseModel):
    """Outcome of a single send."""

    state: str
    kind: str | None = None
    detail: str | None = None
    status_code: int | None = None

    @classmethod
    def from_result(cls, result: SendResult) -> "NotificationSendResponse":
        if isinstance(result, SendFailed):
            return cls(
                state=result.state,
                kind=result.kind,
                detail=result.detail,
                status_code=result.status_code,
            )
        if isinstance(result, SendRateLimited):
            return cls(state=result.state, status_code=result.status_code)
        return cls(state=result.state)


class NotificationBroadcastRequest(NotificationContent):
    """Payload used to notify many users at once."""

    recipients: list[RecipientSchema] = Field(..., min_length=1, max_length=1000)

    def unique_recipients(self) -> list[RecipientSchema]:
        """Return the recipients without duplicates preserving order."""

        unique: list[RecipientSchema] = []
        seen: set[tuple[int, int]] = set()
        for recipient in self.recipients:
            key = (recipient.fid, recipient.app_fid)
            if key in seen:
                continue
            seen.add(key)
            unique.append(recipient)
        return unique


class NotificationBroadcastResponse(BaseModel):
    """Aggregate counts for a broadcast."""

    successful: int
    failed: int
    skipped: int
    total: int


__all__ = [
    "NotificationBroadcastRequest",
    "NotificationBroadcastResponse",
    "NotificationSendRequest",
    "NotificationSendResponse",
    "RecipientSchema",
]

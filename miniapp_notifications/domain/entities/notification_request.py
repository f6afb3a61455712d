"""Outbound notification payload sent to the hosting client."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

MAX_NOTIFICATION_ID_LENGTH = 128
MAX_TITLE_LENGTH = 32
MAX_BODY_LENGTH = 128
MAX_TARGET_URL_LENGTH = 1024


def new_notification_id() -> str:
    """Return a fresh identifier the receiving end can use for deduplication."""

    return str(uuid.uuid4())


@dataclass(frozen=True)
class NotificationRequest:
    """A single notification addressed to the tokens it lists."""

    title: str
    body: str
    target_url: str
    tokens: tuple[str, ...]
    notification_id: str = field(default_factory=new_notification_id)

    def __post_init__(self) -> None:
        _check_length("notification_id", self.notification_id, MAX_NOTIFICATION_ID_LENGTH)
        _check_length("title", self.title, MAX_TITLE_LENGTH)
        _check_length("body", self.body, MAX_BODY_LENGTH)
        _check_length("target_url", self.target_url, MAX_TARGET_URL_LENGTH)
        if not self.tokens:
            raise ValueError("A notification request needs at least one token")

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body expected by the notification endpoint."""

        return {
            "notificationId": self.notification_id,
            "title": self.title,
            "body": self.body,
            "targetUrl": self.target_url,
            "tokens": list(self.tokens),
        }


def _check_length(name: str, value: str, limit: int) -> None:
    if len(value) > limit:
        raise ValueError(f"{name} must be at most {limit} characters (got {len(value)})")


__all__ = [
    "MAX_BODY_LENGTH",
    "MAX_NOTIFICATION_ID_LENGTH",
    "MAX_TARGET_URL_LENGTH",
    "MAX_TITLE_LENGTH",
    "NotificationRequest",
    "new_notification_id",
]

"""Domain entity representing the notification grant of a user."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class NotificationCredential:
    """Endpoint and token issued by the hosting client for one user/app pair."""

    user_id: int
    app_id: int
    endpoint_url: str
    token: str
    updated_at: datetime


__all__ = ["NotificationCredential"]

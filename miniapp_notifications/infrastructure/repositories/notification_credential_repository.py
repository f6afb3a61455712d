"""Persistence helpers for notification credentials."""

from __future__ import annotations

import logging
from typing import Any

from miniapp_notifications.domain.entities import NotificationCredential
from miniapp_notifications.infrastructure.key_value import KeyValueStore
from miniapp_notifications.utils import now_in_app_timezone, parse_iso_datetime

logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "miniapp:notifications"


class NotificationCredentialRepository:
    """Provide get/set/delete operations for :class:`NotificationCredential` records.

    One record exists per ``(user_id, app_id)`` pair. ``set`` replaces the whole
    record in a single backend write; ``delete`` of a missing record is a no-op.
    Backend failures surface as :class:`StoreUnavailableError`.
    """

    def __init__(self, store: KeyValueStore, *, key_prefix: str = DEFAULT_KEY_PREFIX) -> None:
        self.store = store
        self.key_prefix = key_prefix

    def make_key(self, user_id: int, app_id: int) -> str:
        return f"{self.key_prefix}:{_canonical_id('user_id', user_id)}-{_canonical_id('app_id', app_id)}"

    async def get(self, user_id: int, app_id: int) -> NotificationCredential | None:
        key = self.make_key(user_id, app_id)
        record = await self.store.get(key)
        if record is None:
            return None
        credential = self._to_entity(user_id, app_id, record)
        if credential is None:
            logger.warning("Ignoring malformed notification credential stored under %s", key)
        return credential

    async def set(
        self,
        user_id: int,
        app_id: int,
        endpoint_url: str,
        token: str,
    ) -> NotificationCredential:
        if not endpoint_url or not token:
            raise ValueError("endpoint_url and token are required")

        credential = NotificationCredential(
            user_id=user_id,
            app_id=app_id,
            endpoint_url=endpoint_url,
            token=token,
            updated_at=now_in_app_timezone(),
        )
        await self.store.set(self.make_key(user_id, app_id), self._to_record(credential))
        logger.debug("Stored notification credential for fid=%s appFid=%s", user_id, app_id)
        return credential

    async def delete(self, user_id: int, app_id: int) -> None:
        await self.store.delete(self.make_key(user_id, app_id))
        logger.debug("Deleted notification credential for fid=%s appFid=%s", user_id, app_id)

    @staticmethod
    def _to_record(credential: NotificationCredential) -> dict[str, str]:
        return {
            "url": credential.endpoint_url,
            "token": credential.token,
            "updatedAt": credential.updated_at.isoformat(),
        }

    @staticmethod
    def _to_entity(user_id: int, app_id: int, record: Any) -> NotificationCredential | None:
        if not isinstance(record, dict):
            return None
        url = record.get("url")
        token = record.get("token")
        if not isinstance(url, str) or not isinstance(token, str) or not url or not token:
            return None
        updated_at = parse_iso_datetime(record.get("updatedAt")) or now_in_app_timezone()
        return NotificationCredential(
            user_id=user_id,
            app_id=app_id,
            endpoint_url=url,
            token=token,
            updated_at=updated_at,
        )


def _canonical_id(name: str, value: int) -> str:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
    return str(value)


__all__ = ["NotificationCredentialRepository"]

"""Decoding of signed webhook envelopes sent by the hosting client.

An envelope is a JSON object with three base64url encoded members:
``header`` (``{"fid", "type", "key"}``), ``payload`` (the event) and
``signature``. Checking the signature and resolving the app that owns the
key are delegated to an :class:`AppKeyVerifier`.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from dataclasses import dataclass
from typing import Any, Protocol

from miniapp_notifications.domain.entities import NotificationDetails, WebhookEvent
from miniapp_notifications.domain.entities.webhook_event import (
    EVENT_MINIAPP_ADDED,
    EVENT_NOTIFICATIONS_ENABLED,
)
from miniapp_notifications.domain.errors import InvalidAppKeyError, InvalidWebhookDataError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignedEnvelope:
    """Envelope members, both raw and decoded."""

    encoded_header: str
    encoded_payload: str
    signature: str
    header: dict[str, Any]
    payload: dict[str, Any]

    @property
    def fid(self) -> int:
        return self.header["fid"]

    @property
    def key(self) -> str:
        return self.header["key"]

    @property
    def signing_input(self) -> bytes:
        return f"{self.encoded_header}.{self.encoded_payload}".encode("ascii")


class AppKeyVerifier(Protocol):
    """Authenticate an envelope and return the fid of the client app.

    Implementations check ``signature`` against ``signing_input`` with the key
    named in the header, then confirm the key belongs to ``fid``. They raise
    :class:`InvalidAppKeyError` for a key that does not verify and
    :class:`AppKeyVerificationError` when the check itself could not run.
    """

    async def verify(self, envelope: SignedEnvelope) -> int:
        ...


class UnverifiedAppKeyVerifier:
    """Development verifier that trusts the envelope header.

    The client app fid is read from an ``appFid`` member of the header. Never
    enable this outside local development.
    """

    async def verify(self, envelope: SignedEnvelope) -> int:
        app_fid = envelope.header.get("appFid")
        if not _is_fid(app_fid):
            raise InvalidAppKeyError("Unverified envelopes must carry an appFid in the header")
        logger.warning(
            "Accepting unverified webhook envelope for fid=%s appFid=%s", envelope.fid, app_fid
        )
        return app_fid


def decode_envelope(body: Any) -> SignedEnvelope:
    """Split and decode a webhook request body."""

    if not isinstance(body, dict):
        raise InvalidWebhookDataError("Webhook body must be a JSON object")

    members: dict[str, str] = {}
    for name in ("header", "payload", "signature"):
        value = body.get(name)
        if not isinstance(value, str) or not value:
            raise InvalidWebhookDataError(f"Webhook body is missing '{name}'")
        members[name] = value

    header = _decode_json_member("header", members["header"])
    payload = _decode_json_member("payload", members["payload"])

    if not _is_fid(header.get("fid")):
        raise InvalidWebhookDataError("Envelope header has no valid fid")
    if header.get("type") != "app_key" or not isinstance(header.get("key"), str):
        raise InvalidWebhookDataError("Envelope header must describe an app_key signer")

    return SignedEnvelope(
        encoded_header=members["header"],
        encoded_payload=members["payload"],
        signature=members["signature"],
        header=header,
        payload=payload,
    )


async def parse_webhook_event(body: Any, verifier: AppKeyVerifier) -> WebhookEvent:
    """Decode ``body``, authenticate it with ``verifier`` and return the event."""

    envelope = decode_envelope(body)
    app_fid = await verifier.verify(envelope)

    event_name = envelope.payload.get("event")
    if not isinstance(event_name, str) or not event_name:
        raise InvalidWebhookDataError("Event payload has no event name")

    details = _parse_notification_details(envelope.payload.get("notificationDetails"))
    if event_name == EVENT_NOTIFICATIONS_ENABLED and details is None:
        raise InvalidWebhookDataError("notifications_enabled requires notificationDetails")
    if event_name not in (EVENT_MINIAPP_ADDED, EVENT_NOTIFICATIONS_ENABLED):
        details = None

    return WebhookEvent(
        user_id=envelope.fid,
        app_id=app_fid,
        event=event_name,
        notification_details=details,
    )


def encode_member(value: dict[str, Any]) -> str:
    """Encode ``value`` the way envelope members are encoded."""

    raw = json.dumps(value, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _decode_json_member(name: str, value: str) -> dict[str, Any]:
    padded = value + "=" * (-len(value) % 4)
    try:
        decoded = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
    except (binascii.Error, UnicodeError, ValueError) as exc:
        raise InvalidWebhookDataError(f"Envelope '{name}' is not base64url encoded JSON") from exc
    if not isinstance(decoded, dict):
        raise InvalidWebhookDataError(f"Envelope '{name}' must decode to a JSON object")
    return decoded


def _parse_notification_details(value: Any) -> NotificationDetails | None:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise InvalidWebhookDataError("notificationDetails must be an object")
    url = value.get("url")
    token = value.get("token")
    if not isinstance(url, str) or not url or not isinstance(token, str) or not token:
        raise InvalidWebhookDataError("notificationDetails requires url and token")
    return NotificationDetails(url=url, token=token)


def _is_fid(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


__all__ = [
    "AppKeyVerifier",
    "SignedEnvelope",
    "UnverifiedAppKeyVerifier",
    "decode_envelope",
    "encode_member",
    "parse_webhook_event",
]

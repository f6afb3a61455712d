"""Map replies from a notification endpoint onto :data:`SendResult` values."""

from __future__ import annotations

import json
import logging
from typing import Any

from miniapp_notifications.domain.entities import (
    SendFailed,
    SendRateLimited,
    SendResult,
    SendSuccess,
)

logger = logging.getLogger(__name__)

HTTP_TOO_MANY_REQUESTS = 429
_RATE_LIMIT_MARKERS = ("rate limit", "rate_limit", "ratelimit", "too many requests")
_MAX_BODY_IN_DETAIL = 500


def classify_notification_response(status_code: int, body: str | bytes, token: str) -> SendResult:
    """Return the outcome of a POST to a notification endpoint.

    A 429 status, or an error body that mentions rate limiting, is a rate
    limit. A 2xx reply is only a success when ``token`` is absent from
    ``result.rateLimitedTokens``; the endpoint may accept the request and
    still throttle that one token.
    """

    text = _body_text(body)
    parsed = _parse_json(text)

    if not 200 <= status_code < 300:
        if status_code == HTTP_TOO_MANY_REQUESTS or _signals_rate_limit(parsed, token):
            return SendRateLimited(status_code=status_code)
        details = _extract_error_details(parsed) or _truncate(text)
        detail = f"HTTP {status_code}: {details}" if details else f"HTTP {status_code}"
        return SendFailed(
            kind="dispatch",
            detail=detail,
            status_code=status_code,
            response_body=text or None,
        )

    if not isinstance(parsed, dict):
        return SendFailed(
            kind="invalid_response",
            detail="Invalid JSON response",
            status_code=status_code,
            response_body=text or None,
        )

    result = parsed.get("result")
    if not isinstance(result, dict):
        result = {}
    if token in _token_list(result, "rateLimitedTokens"):
        return SendRateLimited(status_code=status_code)
    if token in _token_list(result, "invalidTokens"):
        logger.warning("Notification endpoint reported the token as invalid")
    return SendSuccess()


def _signals_rate_limit(parsed: Any, token: str) -> bool:
    if not isinstance(parsed, dict):
        return False
    result = parsed.get("result")
    if isinstance(result, dict) and token in _token_list(result, "rateLimitedTokens"):
        return True
    for field_name in ("error", "message", "code"):
        value = parsed.get(field_name)
        if isinstance(value, str) and any(
            marker in value.lower() for marker in _RATE_LIMIT_MARKERS
        ):
            return True
    return False


def _token_list(result: dict[str, Any], name: str) -> list[str]:
    value = result.get(name)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _extract_error_details(parsed: Any) -> str | None:
    """Return a human readable description for an error payload."""

    if not isinstance(parsed, dict):
        return None
    for field_name in ("error", "message", "detail"):
        value = parsed.get(field_name)
        if isinstance(value, str) and value.strip():
            return value.strip()
        if isinstance(value, dict):
            message = value.get("message")
            if isinstance(message, str) and message.strip():
                return message.strip()
    return None


def _body_text(body: str | bytes) -> str:
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace").strip()
    return (body or "").strip()


def _parse_json(text: str) -> Any:
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


def _truncate(text: str) -> str:
    if len(text) <= _MAX_BODY_IN_DETAIL:
        return text
    return f"{text[:_MAX_BODY_IN_DETAIL]}..."


__all__ = ["HTTP_TOO_MANY_REQUESTS", "classify_notification_response"]

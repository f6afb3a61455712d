"""Tests for the webhook endpoint."""

from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import RecordingEndpoint
from main import create_app
from miniapp_notifications.domain.errors import (
    AppKeyVerificationError,
    InvalidAppKeyError,
    StoreUnavailableError,
)
from miniapp_notifications.infrastructure.key_value import InMemoryKeyValueStore
from miniapp_notifications.infrastructure.webhooks import encode_member

ENDPOINT_URL = "https://client.example/notifications"


class StaticVerifier:
    def __init__(self, app_fid: int = 9152, error: Exception | None = None) -> None:
        self.app_fid = app_fid
        self.error = error

    async def verify(self, envelope) -> int:
        if self.error is not None:
            raise self.error
        return self.app_fid


def _envelope(payload: dict, **header_extra) -> dict:
    header = {"fid": 10, "type": "app_key", "key": "0xabc", **header_extra}
    return {
        "header": encode_member(header),
        "payload": encode_member(payload),
        "signature": "c2ln",
    }


def _enabled(token: str = "tok") -> dict:
    return _envelope(
        {
            "event": "notifications_enabled",
            "notificationDetails": {"url": ENDPOINT_URL, "token": token},
        }
    )


@pytest.fixture()
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture()
def endpoint() -> RecordingEndpoint:
    return RecordingEndpoint()


def _client(store, endpoint, verifier=None) -> TestClient:
    app = create_app(
        store=store,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(endpoint)),
        app_key_verifier=verifier if verifier is not None else StaticVerifier(),
    )
    return TestClient(app)


def test_enabled_event_stores_credential_and_sends_confirmation(store, endpoint) -> None:
    with _client(store, endpoint) as client:
        response = client.post("/webhook", json=_enabled())

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert len(store) == 1
    assert endpoint.call_count == 1
    payload = endpoint.payloads()[0]
    assert payload["title"] == "Ding ding ding"
    assert payload["tokens"] == ["tok"]


def test_added_event_sends_welcome_with_app_name(store, endpoint, monkeypatch) -> None:
    monkeypatch.setenv("APP_NAME", "Lapu")
    body = _envelope(
        {
            "event": "miniapp_added",
            "notificationDetails": {"url": ENDPOINT_URL, "token": "tok"},
        }
    )

    with _client(store, endpoint) as client:
        response = client.post("/webhook", json=body)

    assert response.status_code == 200
    assert endpoint.payloads()[0]["title"] == "Welcome to Lapu"


def test_disabled_event_deletes_credential(store, endpoint) -> None:
    with _client(store, endpoint) as client:
        client.post("/webhook", json=_enabled())
        response = client.post("/webhook", json=_envelope({"event": "notifications_disabled"}))

    assert response.status_code == 200
    assert len(store) == 0
    assert endpoint.call_count == 1


def test_failed_confirmation_does_not_fail_the_webhook(store) -> None:
    endpoint = RecordingEndpoint(lambda request: httpx.Response(500, text="down"))

    with _client(store, endpoint) as client:
        response = client.post("/webhook", json=_enabled())

    assert response.status_code == 200
    assert len(store) == 1


@pytest.mark.parametrize(
    ("verifier", "expected_status"),
    [
        (StaticVerifier(error=InvalidAppKeyError("not your key")), 401),
        (StaticVerifier(error=AppKeyVerificationError("hub down")), 500),
    ],
)
def test_verifier_errors_map_to_status_codes(store, endpoint, verifier, expected_status) -> None:
    with _client(store, endpoint, verifier) as client:
        response = client.post("/webhook", json=_enabled())

    assert response.status_code == expected_status
    assert len(store) == 0
    assert endpoint.call_count == 0


@pytest.mark.parametrize("body", [{"header": "e30"}, {"not": "an envelope"}])
def test_invalid_envelopes_are_bad_requests(store, endpoint, body) -> None:
    with _client(store, endpoint) as client:
        response = client.post("/webhook", json=body)

    assert response.status_code == 400


def test_non_json_body_is_a_bad_request(store, endpoint) -> None:
    with _client(store, endpoint) as client:
        response = client.post(
            "/webhook", content=b"not json", headers={"Content-Type": "application/json"}
        )

    assert response.status_code == 400


def test_store_outage_is_reported_as_unavailable(endpoint) -> None:
    class UnreachableStore(InMemoryKeyValueStore):
        name = "unreachable"

        async def set(self, key, value):
            raise StoreUnavailableError("connection refused")

    with _client(UnreachableStore(), endpoint) as client:
        response = client.post("/webhook", json=_enabled())

    assert response.status_code == 503
    assert endpoint.call_count == 0


def test_webhook_without_verifier_is_unavailable(endpoint) -> None:
    app = create_app(
        store=InMemoryKeyValueStore(),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(endpoint)),
    )

    with TestClient(app) as client:
        response = client.post("/webhook", json=_enabled())

    assert response.status_code == 503


def test_development_mode_trusts_the_header(endpoint, monkeypatch) -> None:
    monkeypatch.setenv("WEBHOOK_ALLOW_UNVERIFIED", "true")
    store = InMemoryKeyValueStore()
    app = create_app(
        store=store,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(endpoint)),
    )
    body = _envelope({"event": "miniapp_removed"}, appFid=309857)

    with TestClient(app) as client:
        response = client.post("/webhook", json=body)

    assert response.status_code == 200


def test_health_reports_the_store_backend(store, endpoint) -> None:
    with _client(store, endpoint) as client:
        response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "store": "memory"}

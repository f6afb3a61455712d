"""Tests for the notification trigger endpoints."""

from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import RecordingEndpoint
from main import create_app
from miniapp_notifications.infrastructure.key_value import InMemoryKeyValueStore
from miniapp_notifications.infrastructure.repositories import NotificationCredentialRepository

API_KEY = "trigger-secret"
HEADERS = {"X-API-Key": API_KEY}


@pytest.fixture()
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture()
def endpoint() -> RecordingEndpoint:
    return RecordingEndpoint()


@pytest.fixture()
def client(store, endpoint, monkeypatch):
    monkeypatch.setenv("NOTIFICATIONS_API_KEY", API_KEY)
    app = create_app(
        store=store,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(endpoint)),
    )
    with TestClient(app) as test_client:
        yield test_client


def _register(client: TestClient, user_id: int, app_id: int, token: str) -> None:
    credentials: NotificationCredentialRepository = client.app.state.credentials
    client.portal.call(credentials.set, user_id, app_id, f"https://host{user_id}.example/n", token)


def test_send_reports_success(client, endpoint) -> None:
    _register(client, 1, 9152, "tok")

    response = client.post(
        "/notifications/send",
        json={"fid": 1, "appFid": 9152, "title": "Hi", "body": "There"},
        headers=HEADERS,
    )

    assert response.status_code == 200
    assert response.json()["state"] == "success"
    assert endpoint.call_count == 1


def test_send_without_token_reports_no_token(client, endpoint) -> None:
    response = client.post(
        "/notifications/send",
        json={"fid": 1, "appFid": 9152, "title": "Hi", "body": "There"},
        headers=HEADERS,
    )

    assert response.json()["state"] == "no_token"
    assert endpoint.call_count == 0


def test_send_reports_rate_limit(store, monkeypatch) -> None:
    monkeypatch.setenv("NOTIFICATIONS_API_KEY", API_KEY)
    endpoint = RecordingEndpoint(lambda request: httpx.Response(429))
    app = create_app(
        store=store,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(endpoint)),
    )

    with TestClient(app) as client:
        _register(client, 1, 9152, "tok")
        response = client.post(
            "/notifications/send",
            json={"fid": 1, "appFid": 9152, "title": "Hi", "body": "There"},
            headers=HEADERS,
        )

    assert response.json() == {
        "state": "rate_limit",
        "kind": None,
        "detail": None,
        "status_code": 429,
    }


def test_send_validates_lengths(client) -> None:
    response = client.post(
        "/notifications/send",
        json={"fid": 1, "appFid": 9152, "title": "x" * 33, "body": "There"},
        headers=HEADERS,
    )

    assert response.status_code == 422


@pytest.mark.parametrize("headers", [{}, {"X-API-Key": "wrong"}])
def test_send_requires_the_api_key(client, headers) -> None:
    response = client.post(
        "/notifications/send",
        json={"fid": 1, "appFid": 9152, "title": "Hi", "body": "There"},
        headers=headers,
    )

    assert response.status_code == 401


def test_triggers_are_disabled_without_a_configured_key(store, endpoint) -> None:
    app = create_app(
        store=store,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(endpoint)),
    )

    with TestClient(app) as client:
        response = client.post(
            "/notifications/send",
            json={"fid": 1, "appFid": 9152, "title": "Hi", "body": "There"},
            headers=HEADERS,
        )

    assert response.status_code == 503


def test_broadcast_counts_each_outcome(store, monkeypatch) -> None:
    monkeypatch.setenv("NOTIFICATIONS_API_KEY", API_KEY)

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "host2.example":
            return httpx.Response(500, text="down")
        return RecordingEndpoint.accept_all(request)

    app = create_app(
        store=store,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    with TestClient(app) as client:
        for user_id in (1, 2, 3):
            _register(client, user_id, 9152, f"tok{user_id}")
        response = client.post(
            "/notifications/broadcast",
            json={
                "title": "Festival",
                "body": "The sky market is open",
                "recipients": [
                    {"fid": 1, "appFid": 9152},
                    {"fid": 2, "appFid": 9152},
                    {"fid": 3, "appFid": 9152},
                    {"fid": 3, "appFid": 9152},
                    {"fid": 4, "appFid": 9152},
                ],
            },
            headers=HEADERS,
        )

    assert response.status_code == 200
    assert response.json() == {"successful": 2, "failed": 1, "skipped": 1, "total": 4}

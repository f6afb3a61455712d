"""Shared fixtures for the notification service tests."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Callable

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from miniapp_notifications.application.use_cases.notifications import (  # noqa: E402
    NotificationDispatcher,
)
from miniapp_notifications.config import reset_settings_cache  # noqa: E402
from miniapp_notifications.infrastructure.key_value import InMemoryKeyValueStore  # noqa: E402
from miniapp_notifications.infrastructure.notifications import (  # noqa: E402
    MiniAppNotificationClient,
)
from miniapp_notifications.infrastructure.repositories import (  # noqa: E402
    NotificationCredentialRepository,
)

Handler = Callable[[httpx.Request], httpx.Response]

APP_URL = "https://game.example"


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch):
    """Run every test against settings built only from the variables it sets."""

    for name in (
        "KV_REST_API_URL",
        "KV_REST_API_TOKEN",
        "NOTIFICATIONS_API_KEY",
        "WEBHOOK_ALLOW_UNVERIFIED",
        "APP_NAME",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("APP_URL", APP_URL)
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture()
def memory_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture()
def credentials(memory_store: InMemoryKeyValueStore) -> NotificationCredentialRepository:
    return NotificationCredentialRepository(memory_store, key_prefix="test")


class RecordingEndpoint:
    """Mock notification endpoint that records every request it receives."""

    def __init__(self, handler: Handler | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self._handler = handler or self.accept_all

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def payloads(self) -> list[dict]:
        return [json.loads(request.content) for request in self.requests]

    @staticmethod
    def accept_all(request: httpx.Request) -> httpx.Response:
        tokens = json.loads(request.content)["tokens"]
        return httpx.Response(
            200,
            json={
                "result": {
                    "successfulTokens": tokens,
                    "invalidTokens": [],
                    "rateLimitedTokens": [],
                }
            },
        )


@pytest.fixture()
def endpoint() -> RecordingEndpoint:
    return RecordingEndpoint()


@pytest.fixture()
def make_dispatcher(
    credentials: NotificationCredentialRepository,
) -> Callable[[Handler], NotificationDispatcher]:
    """Return a factory building a dispatcher whose HTTP calls go to ``handler``."""

    def factory(handler: Handler) -> NotificationDispatcher:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return NotificationDispatcher(
            credentials,
            MiniAppNotificationClient(http_client),
            default_target_url=APP_URL,
        )

    return factory

"""Key-value backends used to persist notification credentials.

Three implementations share the :class:`KeyValueStore` protocol:

* :class:`InMemoryKeyValueStore` keeps values in a process-local ``dict``.
  Data is lost on restart and is not shared between processes, so it is only
  suitable for development or as the fallback when no remote store is set up.
* :class:`RedisKeyValueStore` talks to Redis through ``redis.asyncio``.
* :class:`RestKeyValueStore` speaks the Redis-over-HTTP protocol offered by
  hosted key-value services (one JSON command array per POST).

Values are JSON-compatible objects. Every backend failure is raised as
:class:`StoreUnavailableError` so callers never mistake an outage for a
missing key.
"""

from __future__ import annotations

import copy
import json
import logging
from typing import Any, Protocol
from urllib.parse import urlsplit

import httpx
from redis.asyncio import Redis
from redis.exceptions import RedisError

from miniapp_notifications.config import Settings
from miniapp_notifications.domain.errors import StoreUnavailableError

logger = logging.getLogger(__name__)

JSONValue = Any


class KeyValueStore(Protocol):
    """Minimal get/set/delete capability keyed by opaque strings."""

    name: str

    async def get(self, key: str) -> JSONValue | None:
        ...

    async def set(self, key: str, value: JSONValue) -> None:
        ...

    async def delete(self, key: str) -> None:
        ...

    async def close(self) -> None:
        ...


class InMemoryKeyValueStore:
    """Process-local store backed by a ``dict``.

    Each write replaces the whole value under its key, and values are copied
    in and out so a reader never sees a record another coroutine is still
    building.
    """

    name = "memory"

    def __init__(self) -> None:
        self._data: dict[str, JSONValue] = {}

    async def get(self, key: str) -> JSONValue | None:
        value = self._data.get(key)
        return copy.deepcopy(value) if value is not None else None

    async def set(self, key: str, value: JSONValue) -> None:
        self._data[key] = copy.deepcopy(value)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def close(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)


class RedisKeyValueStore:
    """Store values as JSON strings in Redis."""

    name = "redis"

    def __init__(self, client: Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str, token: str, *, timeout: float) -> "RedisKeyValueStore":
        client = Redis.from_url(
            url,
            password=token,
            socket_timeout=timeout,
            socket_connect_timeout=timeout,
            decode_responses=True,
        )
        return cls(client)

    async def get(self, key: str) -> JSONValue | None:
        try:
            raw = await self._client.get(key)
        except RedisError as exc:
            raise StoreUnavailableError(f"Redis GET failed for {key!r}: {exc}") from exc
        if raw is None:
            return None
        return _decode_value(key, raw)

    async def set(self, key: str, value: JSONValue) -> None:
        try:
            await self._client.set(key, json.dumps(value))
        except RedisError as exc:
            raise StoreUnavailableError(f"Redis SET failed for {key!r}: {exc}") from exc

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(key)
        except RedisError as exc:
            raise StoreUnavailableError(f"Redis DEL failed for {key!r}: {exc}") from exc

    async def close(self) -> None:
        await self._client.aclose()


class RestKeyValueStore:
    """Redis commands sent as JSON arrays over HTTPS with a bearer token."""

    name = "rest"

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str, token: str, *, timeout: float) -> "RestKeyValueStore":
        client = httpx.AsyncClient(
            base_url=url.rstrip("/"),
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout,
        )
        return cls(client)

    async def get(self, key: str) -> JSONValue | None:
        raw = await self._command("GET", key)
        if raw is None:
            return None
        return _decode_value(key, raw)

    async def set(self, key: str, value: JSONValue) -> None:
        await self._command("SET", key, json.dumps(value))

    async def delete(self, key: str) -> None:
        await self._command("DEL", key)

    async def close(self) -> None:
        await self._client.aclose()

    async def _command(self, *command: str) -> Any:
        verb, key = command[0], command[1]
        try:
            response = await self._client.post("", json=list(command))
        except httpx.HTTPError as exc:
            raise StoreUnavailableError(f"{verb} request failed for {key!r}: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise StoreUnavailableError(
                f"{verb} for {key!r} returned a non-JSON reply (status {response.status_code})"
            ) from exc

        if not isinstance(payload, dict):
            raise StoreUnavailableError(f"{verb} for {key!r} returned an unexpected reply")
        if "error" in payload or response.is_error:
            error = payload.get("error") or f"status {response.status_code}"
            raise StoreUnavailableError(f"{verb} for {key!r} was rejected: {error}")
        return payload.get("result")


def _decode_value(key: str, raw: Any) -> JSONValue:
    if not isinstance(raw, (str, bytes)):
        return raw
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise StoreUnavailableError(f"Value stored under {key!r} is not valid JSON") from exc


def build_key_value_store(settings: Settings) -> KeyValueStore:
    """Select the backend once, from the configured connection parameters."""

    if not settings.remote_store_configured:
        logger.warning(
            "KV_REST_API_URL/KV_REST_API_TOKEN not set; using the in-memory store. "
            "Credentials will be lost on restart and are not shared between processes."
        )
        return InMemoryKeyValueStore()

    url = settings.kv_rest_api_url or ""
    token = settings.kv_rest_api_token or ""
    scheme = urlsplit(url).scheme.lower()
    timeout = settings.notification_timeout_seconds

    if scheme in {"redis", "rediss"}:
        logger.info("Using Redis credential store at %s", _redact(url))
        return RedisKeyValueStore.from_url(url, token, timeout=timeout)
    if scheme in {"http", "https"}:
        logger.info("Using REST credential store at %s", _redact(url))
        return RestKeyValueStore.from_url(url, token, timeout=timeout)

    msg = f"Unsupported key-value store URL scheme: {scheme or url!r}"
    raise ValueError(msg)


def _redact(url: str) -> str:
    parts = urlsplit(url)
    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    return f"{parts.scheme}://{host}"


__all__ = [
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "RedisKeyValueStore",
    "RestKeyValueStore",
    "build_key_value_store",
]

"""Utility script to send a notification to one user from the command line."""

from __future__ import annotations

import argparse
import asyncio

import httpx

from miniapp_notifications.application.use_cases.notifications import (
    NotificationDispatcher,
    log_send_result,
)
from miniapp_notifications.config import get_settings
from miniapp_notifications.domain.entities import SendFailed, SendResult
from miniapp_notifications.domain.errors import StoreUnavailableError
from miniapp_notifications.infrastructure.key_value import build_key_value_store
from miniapp_notifications.infrastructure.notifications import MiniAppNotificationClient
from miniapp_notifications.infrastructure.repositories import NotificationCredentialRepository


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for the notification."""

    parser = argparse.ArgumentParser(
        description="Send a mini app notification using the stored credentials.",
    )
    parser.add_argument("--fid", type=int, required=True, help="Identifier of the user")
    parser.add_argument(
        "--app-fid", type=int, required=True, help="Identifier of the client app"
    )
    parser.add_argument("--title", required=True, help="Notification title (max 32 characters)")
    parser.add_argument("--body", required=True, help="Notification body (max 128 characters)")
    parser.add_argument(
        "--target-url",
        default=None,
        help="Deep link opened by the notification (default: APP_URL)",
    )
    parser.add_argument(
        "--register",
        nargs=2,
        metavar=("ENDPOINT_URL", "TOKEN"),
        default=None,
        help="Store these credentials before sending (useful with the in-memory store).",
    )
    return parser.parse_args()


async def run(args: argparse.Namespace) -> SendResult:
    settings = get_settings()
    store = build_key_value_store(settings)
    try:
        credentials = NotificationCredentialRepository(store, key_prefix=settings.kv_key_prefix)
        if args.register:
            endpoint_url, token = args.register
            await credentials.set(args.fid, args.app_fid, endpoint_url, token)

        async with httpx.AsyncClient(timeout=settings.notification_timeout_seconds) as client:
            dispatcher = NotificationDispatcher(
                credentials,
                MiniAppNotificationClient(client),
                default_target_url=settings.app_url,
            )
            return await dispatcher.send(
                args.fid, args.app_fid, args.title, args.body, args.target_url
            )
    finally:
        await store.close()


def main() -> None:
    """Send the notification described by the command line arguments."""

    args = parse_args()
    try:
        result = asyncio.run(run(args))
    except ValueError as exc:
        raise SystemExit(f"Invalid notification: {exc}") from exc
    except StoreUnavailableError as exc:
        raise SystemExit(f"Credential store unavailable: {exc}") from exc

    log_send_result(result, user_id=args.fid, app_id=args.app_fid, label="cli notification")
    if isinstance(result, SendFailed):
        print(f"{result.state} ({result.kind}): {result.detail}")
        raise SystemExit(1)
    print(result.state)


if __name__ == "__main__":
    main()

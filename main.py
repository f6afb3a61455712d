import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from miniapp_notifications.application.use_cases.notifications import NotificationDispatcher
from miniapp_notifications.config import Settings, get_settings
from miniapp_notifications.infrastructure.key_value import KeyValueStore, build_key_value_store
from miniapp_notifications.infrastructure.notifications import MiniAppNotificationClient
from miniapp_notifications.infrastructure.repositories import NotificationCredentialRepository
from miniapp_notifications.infrastructure.webhooks import AppKeyVerifier, UnverifiedAppKeyVerifier
from miniapp_notifications.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


def _configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _resolve_verifier(settings: Settings, verifier: AppKeyVerifier | None) -> AppKeyVerifier | None:
    if verifier is not None:
        return verifier
    if settings.webhook_allow_unverified:
        logger.warning("WEBHOOK_ALLOW_UNVERIFIED is enabled; webhook signatures are not checked")
        return UnverifiedAppKeyVerifier()
    logger.warning("No webhook verifier configured; /webhook will answer 503")
    return None


def create_app(
    *,
    store: KeyValueStore | None = None,
    http_client: httpx.AsyncClient | None = None,
    app_key_verifier: AppKeyVerifier | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    The credential store and the outbound HTTP client are chosen once, when
    the application starts. Resources passed in by the caller are used as-is
    and left open on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings = get_settings()
        _configure_logging(settings)

        kv_store = store if store is not None else build_key_value_store(settings)
        client = http_client or httpx.AsyncClient(timeout=settings.notification_timeout_seconds)

        credentials = NotificationCredentialRepository(kv_store, key_prefix=settings.kv_key_prefix)
        app.state.key_value_store = kv_store
        app.state.credentials = credentials
        app.state.dispatcher = NotificationDispatcher(
            credentials,
            MiniAppNotificationClient(client, timeout=settings.notification_timeout_seconds),
            default_target_url=settings.app_url,
        )
        app.state.app_key_verifier = _resolve_verifier(settings, app_key_verifier)

        try:
            yield
        finally:
            if http_client is None:
                await client.aclose()
            if store is None:
                await kv_store.close()

    app = FastAPI(title="Mini app notifications", lifespan=lifespan)
    register_routes(app)
    return app


app = create_app()

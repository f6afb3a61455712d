"""Repository implementations for infrastructure layer."""

from .notification_credential_repository import NotificationCredentialRepository

__all__ = ["NotificationCredentialRepository"]

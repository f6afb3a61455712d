"""Exceptions raised across the service layers."""

from __future__ import annotations


class CredentialStoreError(Exception):
    """Base class for credential store failures."""


class StoreUnavailableError(CredentialStoreError):
    """The backing key-value store could not be reached or answered badly."""


class WebhookError(Exception):
    """Base class for webhook envelope problems."""


class InvalidWebhookDataError(WebhookError):
    """The envelope or the event it carries is malformed."""


class InvalidAppKeyError(WebhookError):
    """The app key that signed the event does not belong to the user."""


class AppKeyVerificationError(WebhookError):
    """The app key could not be checked; the sender may retry."""


__all__ = [
    "AppKeyVerificationError",
    "CredentialStoreError",
    "InvalidAppKeyError",
    "InvalidWebhookDataError",
    "StoreUnavailableError",
    "WebhookError",
]

"""Pydantic models returned by the webhook endpoint."""

from __future__ import annotations

from pydantic import BaseModel


class WebhookResponse(BaseModel):
    """Acknowledgement sent back to the hosting client."""

    success: bool


__all__ = ["WebhookResponse"]

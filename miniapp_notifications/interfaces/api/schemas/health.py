"""Pydantic model returned by the health check."""

from __future__ import annotations

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    store: str


__all__ = ["HealthResponse"]

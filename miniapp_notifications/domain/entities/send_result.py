"""Outcomes of a notification send.

Every send resolves to exactly one of four variants. Callers are expected to
branch on the concrete type (or on ``state``) and handle each case.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Literal, Union

SendState = Literal["success", "no_token", "rate_limit", "error"]

FailureKind = Literal[
    "transport",
    "timeout",
    "dispatch",
    "invalid_response",
    "invalid_request",
    "store_unavailable",
]


@dataclass(frozen=True)
class SendSuccess:
    """The hosting client accepted the notification for the token."""

    state: ClassVar[SendState] = "success"


@dataclass(frozen=True)
class SendNoToken:
    """The user has not enabled notifications for the app; nothing was sent."""

    state: ClassVar[SendState] = "no_token"


@dataclass(frozen=True)
class SendRateLimited:
    """The hosting client throttled the token."""

    state: ClassVar[SendState] = "rate_limit"
    status_code: int | None = None


@dataclass(frozen=True)
class SendFailed:
    """The notification could not be delivered.

    ``kind`` tells transport problems (``transport``, ``timeout``) apart from
    rejections by the endpoint (``dispatch``), unusable replies
    (``invalid_response``), content the endpoint would refuse
    (``invalid_request``) and credential lookups that could not be answered
    (``store_unavailable``).
    """

    state: ClassVar[SendState] = "error"
    kind: FailureKind
    detail: str
    status_code: int | None = None
    response_body: str | None = None
    cause: BaseException | None = field(default=None, compare=False, repr=False)


SendResult = Union[SendSuccess, SendNoToken, SendRateLimited, SendFailed]


@dataclass(frozen=True)
class Recipient:
    """A user/app pair addressed by a batch send."""

    user_id: int
    app_id: int


@dataclass(frozen=True)
class BatchSendSummary:
    """Aggregate counts for a batch send; ``results`` follows recipient order."""

    successful: int
    failed: int
    skipped: int
    results: tuple[tuple[Recipient, SendResult], ...] = ()

    @property
    def total(self) -> int:
        return self.successful + self.failed + self.skipped


__all__ = [
    "BatchSendSummary",
    "FailureKind",
    "Recipient",
    "SendFailed",
    "SendNoToken",
    "SendRateLimited",
    "SendResult",
    "SendState",
    "SendSuccess",
]

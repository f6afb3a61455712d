"""Fan a notification out to many recipients."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from miniapp_notifications.domain.entities import (
    BatchSendSummary,
    Recipient,
    SendFailed,
    SendNoToken,
    SendResult,
    SendSuccess,
)

from .dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)


async def send_to_many(
    dispatcher: NotificationDispatcher,
    recipients: Iterable[Recipient],
    title: str,
    body: str,
    target_url: str | None = None,
) -> BatchSendSummary:
    """Send the same notification to every recipient independently.

    Sends run concurrently and in no particular order. Recipients without a
    token are counted as skipped; rate limits, errors and unexpected
    exceptions count as failed.
    """

    targets = list(recipients)
    outcomes = await asyncio.gather(
        *(
            dispatcher.send(recipient.user_id, recipient.app_id, title, body, target_url)
            for recipient in targets
        ),
        return_exceptions=True,
    )

    successful = failed = skipped = 0
    results: list[tuple[Recipient, SendResult]] = []
    for recipient, outcome in zip(targets, outcomes):
        if isinstance(outcome, BaseException):
            if not isinstance(outcome, Exception):
                raise outcome
            logger.error(
                "Unexpected error sending to fid=%s appFid=%s: %s",
                recipient.user_id,
                recipient.app_id,
                outcome,
            )
            outcome = SendFailed(kind="dispatch", detail=str(outcome), cause=outcome)

        if isinstance(outcome, SendSuccess):
            successful += 1
        elif isinstance(outcome, SendNoToken):
            skipped += 1
        else:
            failed += 1
        results.append((recipient, outcome))

    logger.info(
        "Batch notification finished: %s sent, %s failed, %s without token",
        successful,
        failed,
        skipped,
    )
    return BatchSendSummary(
        successful=successful,
        failed=failed,
        skipped=skipped,
        results=tuple(results),
    )


__all__ = ["send_to_many"]

"""Failure recovery: keep the submission and tell an operator, whatever broke.

The fallback write and the operator alert are independent best-effort tasks.
Both are attempted, neither waits on or is affected by the other's outcome,
and no failure escapes to the caller.
"""
import asyncio
import logging
from typing import Awaitable, List, Optional, Tuple

from schemas.submission import Submission
from triage.notifications import LeadNotifier
from triage.ports import LeadStore

logger = logging.getLogger(__name__)

PROCESSING_ERROR = "processing_error"


async def attempt_all(*attempts: Tuple[str, Awaitable]) -> List[Optional[BaseException]]:
    """Await every attempt concurrently; log failures instead of raising them.

    Returns one entry per attempt: None on success, the exception otherwise.
    """
    results = await asyncio.gather(*(aw for _, aw in attempts), return_exceptions=True)
    outcomes: List[Optional[BaseException]] = []
    for (name, _), result in zip(attempts, results):
        if isinstance(result, BaseException):
            logger.error("Recovery step %r failed: %s", name, result, exc_info=result)
            outcomes.append(result)
        else:
            logger.info("Recovery step %r succeeded", name)
            outcomes.append(None)
    return outcomes


class FailureRecovery:
    def __init__(self, store: LeadStore, notifier: LeadNotifier):
        self.store = store
        self.notifier = notifier

    async def recover(
        self,
        submission: Submission,
        error: BaseException,
        failure_point: str,
    ) -> List[Optional[BaseException]]:
        """Save the submission as processing_error and alert the operator."""
        return await attempt_all(
            (
                "fallback_write",
                self.store.insert_rejected_lead(
                    submission, PROCESSING_ERROR, f"Processing error: {error}"
                ),
            ),
            (
                "admin_alert",
                self.notifier.send_admin_alert(submission, error, failure_point),
            ),
        )

"""
Notification Retry Workflow.

Sweeps the outbox:
1. Delivers rows left pending (their delivery workflow never started)
2. Redelivers failed rows with the resend marker

Designed to be run on a schedule (NOTIFICATION_RETRY_SCHEDULE cron) or on
demand. Idempotent: sent rows are never touched again.
"""

from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy

with workflow.unsafe.imports_passed_through():
    from src.projecthub.temporal.activities import (
        RetryFailedOutput,
        deliver_notification,
        list_pending_notifications,
        retry_failed_notifications,
    )

SWEEP_RETRY = RetryPolicy(
    maximum_attempts=3,
    initial_interval=timedelta(seconds=2),
)


@workflow.defn
class NotificationRetryWorkflow:
    """Deliver stranded pending rows, then retry failed ones."""

    @workflow.run
    async def run(self, limit: int = 50) -> dict[str, int]:
        """
        Args:
            limit: Maximum rows handled per step

        Returns:
            dict with pending_delivered, attempted, successful and failed counts
        """
        pending: list[str] = await workflow.execute_activity(
            list_pending_notifications,
            limit,
            start_to_close_timeout=timedelta(seconds=30),
            retry_policy=SWEEP_RETRY,
        )

        delivered = 0
        for notification_id in pending:
            sent: bool = await workflow.execute_activity(
                deliver_notification,
                notification_id,
                start_to_close_timeout=timedelta(seconds=30),
                retry_policy=SWEEP_RETRY,
            )
            delivered += int(sent)

        retried: RetryFailedOutput = await workflow.execute_activity(
            retry_failed_notifications,
            limit,
            start_to_close_timeout=timedelta(minutes=5),
            retry_policy=SWEEP_RETRY,
        )

        result = {
            "pending_delivered": delivered,
            "attempted": retried.attempted,
            "successful": retried.successful,
            "failed": retried.failed,
        }
        workflow.logger.info(
            f"Notification sweep complete: {delivered}/{len(pending)} pending delivered, "
            f"{retried.successful}/{retried.attempted} retries sent"
        )
        return result

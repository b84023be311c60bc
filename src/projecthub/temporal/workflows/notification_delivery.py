"""
Notification Delivery Workflow.

Started by the API right after the transaction that wrote the outbox row
commits. One workflow per row; the workflow id is derived from the row id so
a duplicate start is rejected by Temporal.
"""

from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy

with workflow.unsafe.imports_passed_through():
    from src.projecthub.temporal.activities import deliver_notification

# The activity only raises for infrastructure errors (database down);
# Telegram rejections are recorded on the row instead.
DELIVERY_RETRY = RetryPolicy(
    maximum_attempts=5,
    initial_interval=timedelta(seconds=2),
    backoff_coefficient=2.0,
)


def delivery_workflow_id(notification_id: str) -> str:
    return f"notification-delivery-{notification_id}"


@workflow.defn
class NotificationDeliveryWorkflow:
    """Deliver one outbox row."""

    @workflow.run
    async def run(self, notification_id: str) -> bool:
        sent: bool = await workflow.execute_activity(
            deliver_notification,
            notification_id,
            start_to_close_timeout=timedelta(seconds=30),
            retry_policy=DELIVERY_RETRY,
        )
        workflow.logger.info(
            f"Notification {notification_id} {'sent' if sent else 'not sent'}"
        )
        return sent

"""Hand committed outbox rows to Temporal for delivery."""

from collections.abc import Awaitable, Callable, Sequence
from uuid import UUID

from temporalio.client import Client
from temporalio.exceptions import WorkflowAlreadyStartedError

from src.projecthub.core.logging import get_logger
from src.projecthub.temporal.client import get_temporal_client
from src.projecthub.temporal.workflows import NotificationDeliveryWorkflow, delivery_workflow_id

logger = get_logger(__name__)


class TemporalNotificationDispatcher:
    """Starts one NotificationDeliveryWorkflow per notification.

    Scheduling never fails the request that wrote the rows: if Temporal is
    unreachable the rows stay pending and the retry sweep delivers them.
    """

    def __init__(
        self,
        task_queue: str,
        client_factory: Callable[[], Awaitable[Client]] = get_temporal_client,
    ):
        self.task_queue = task_queue
        self.client_factory = client_factory

    async def schedule(self, notification_ids: Sequence[UUID]) -> None:
        if not notification_ids:
            return
        try:
            client = await self.client_factory()
        except Exception as e:
            logger.warning(
                "Temporal unavailable, notifications left pending",
                count=len(notification_ids),
                error=str(e),
            )
            return

        for notification_id in notification_ids:
            workflow_id = delivery_workflow_id(str(notification_id))
            try:
                await client.start_workflow(
                    NotificationDeliveryWorkflow.run,
                    str(notification_id),
                    id=workflow_id,
                    task_queue=self.task_queue,
                )
            except WorkflowAlreadyStartedError:
                logger.debug("Delivery already scheduled", workflow_id=workflow_id)
            except Exception as e:
                logger.warning(
                    "Failed to schedule notification delivery",
                    notification_id=str(notification_id),
                    error=str(e),
                )

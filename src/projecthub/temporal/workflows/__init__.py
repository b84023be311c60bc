"""Temporal Workflows - Re-exports for worker registration."""

from src.projecthub.temporal.workflows.notification_delivery import (
    NotificationDeliveryWorkflow,
    delivery_workflow_id,
)
from src.projecthub.temporal.workflows.notification_retry import NotificationRetryWorkflow

__all__ = [
    "NotificationDeliveryWorkflow",
    "NotificationRetryWorkflow",
    "delivery_workflow_id",
]

"""
Temporal Activities - Fine-grained, idempotent operations.

Activities should be:
1. Idempotent - Safe to retry
2. Fine-grained - Do one thing well
3. Side-effect aware - External calls go here, not in workflows
"""

from src.projecthub.temporal.activities.notifications import (
    RetryFailedOutput,
    deliver_notification,
    list_pending_notifications,
    retry_failed_notifications,
)

__all__ = [
    "RetryFailedOutput",
    "deliver_notification",
    "list_pending_notifications",
    "retry_failed_notifications",
]

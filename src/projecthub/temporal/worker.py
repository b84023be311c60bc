"""
Temporal Worker - Separate process from API.

Run with:
    python -m src.projecthub.temporal.worker                 # Worker plus health server
    python -m src.projecthub.temporal.worker --no-schedule   # Skip the retry schedule setup
"""

import argparse
import asyncio

import uvicorn
from fastapi import FastAPI
from temporalio.client import (
    Client,
    Schedule,
    ScheduleActionStartWorkflow,
    ScheduleAlreadyRunningError,
    ScheduleSpec,
)
from temporalio.worker import Worker

from src.projecthub.core.config import Settings, get_settings
from src.projecthub.core.db import dispose_engine
from src.projecthub.core.logging import get_logger, setup_logging
from src.projecthub.temporal.activities import (
    deliver_notification,
    list_pending_notifications,
    retry_failed_notifications,
)
from src.projecthub.temporal.workflows import (
    NotificationDeliveryWorkflow,
    NotificationRetryWorkflow,
)

logger = get_logger(__name__)

WORKER_HEALTH_PORT = 8001
RETRY_SCHEDULE_ID = "notification-retry"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="ProjectHub notification worker")
    parser.add_argument(
        "--no-schedule",
        action="store_true",
        help="Do not create the notification retry schedule",
    )
    parser.add_argument(
        "--health-port",
        type=int,
        default=WORKER_HEALTH_PORT,
        help=f"Health server port (default: {WORKER_HEALTH_PORT})",
    )
    return parser.parse_args()


def create_worker(client: Client, task_queue: str) -> Worker:
    """Create the notification worker.

    Delivery is quick HTTP work, so concurrency is kept moderate to stay under
    the Telegram per-chat rate limit.
    """
    return Worker(
        client,
        task_queue=task_queue,
        workflows=[NotificationDeliveryWorkflow, NotificationRetryWorkflow],
        activities=[
            deliver_notification,
            list_pending_notifications,
            retry_failed_notifications,
        ],
        max_concurrent_activities=10,
        max_concurrent_workflow_tasks=50,
    )


async def ensure_retry_schedule(client: Client, settings: Settings) -> bool:
    """Create the cron schedule for NotificationRetryWorkflow if configured.

    Returns:
        True if a schedule was created by this call.
    """
    if not settings.notification_retry_schedule:
        logger.info("Notification retry schedule not configured")
        return False

    try:
        await client.create_schedule(
            RETRY_SCHEDULE_ID,
            Schedule(
                action=ScheduleActionStartWorkflow(
                    NotificationRetryWorkflow.run,
                    settings.notification_retry_limit,
                    id=f"{RETRY_SCHEDULE_ID}-run",
                    task_queue=settings.temporal_task_queue,
                ),
                spec=ScheduleSpec(cron_expressions=[settings.notification_retry_schedule]),
            ),
        )
    except ScheduleAlreadyRunningError:
        logger.info("Notification retry schedule already exists", schedule_id=RETRY_SCHEDULE_ID)
        return False

    logger.info(
        "Notification retry schedule created",
        schedule_id=RETRY_SCHEDULE_ID,
        cron=settings.notification_retry_schedule,
    )
    return True


async def run_health_server(task_queue: str, port: int = WORKER_HEALTH_PORT) -> None:
    """Run a lightweight health server for K8s liveness checks."""
    health_app = FastAPI(title="Notification Worker Health")

    @health_app.get("/health")
    async def health() -> dict[str, str]:
        return {
            "status": "healthy",
            "service": "notification-worker",
            "task_queue": task_queue,
        }

    @health_app.get("/ready")
    async def ready() -> dict[str, str]:
        return {"status": "ready"}

    config = uvicorn.Config(
        health_app,
        host="0.0.0.0",
        port=port,
        log_level="warning",
    )
    server = uvicorn.Server(config)
    logger.info(f"Starting health server on port {port}")
    await server.serve()


async def main() -> None:
    args = parse_args()
    settings = get_settings()
    setup_logging(settings.debug)

    client = await Client.connect(
        settings.temporal_host,
        namespace=settings.temporal_namespace,
    )

    if not args.no_schedule:
        await ensure_retry_schedule(client, settings)

    worker = create_worker(client, settings.temporal_task_queue)
    logger.info(f"Polling task queue: {settings.temporal_task_queue}")

    try:
        await asyncio.gather(
            worker.run(),
            run_health_server(settings.temporal_task_queue, args.health_port),
        )
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())

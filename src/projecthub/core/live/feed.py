"""In-process change feed for live queries.

Committed writes are published as ChangeEvents. Subscribers register the
tables (and optionally one indexed key) they depend on and receive matching
events on a bounded queue. Closing a subscription unregisters it immediately.
"""

import asyncio
import json
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import asdict, dataclass, field
from typing import Any

from src.projecthub.core.logging import get_logger

logger = get_logger(__name__)

Forwarder = Callable[[Sequence["ChangeEvent"]], Awaitable[None]]


@dataclass(frozen=True)
class ChangeEvent:
    """One committed row change."""

    table: str
    row_id: str
    op: str  # insert, update, delete
    keys: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChangeEvent":
        return cls(
            table=data["table"],
            row_id=data["row_id"],
            op=data["op"],
            keys=dict(data.get("keys") or {}),
        )


def encode_events(events: Sequence[ChangeEvent], origin: str) -> str:
    return json.dumps({"origin": origin, "events": [e.to_dict() for e in events]})


def decode_events(raw: str | bytes) -> tuple[str, list[ChangeEvent]]:
    payload = json.loads(raw)
    return payload["origin"], [ChangeEvent.from_dict(e) for e in payload["events"]]


@dataclass(frozen=True)
class Interest:
    """What a live query depends on: a table, optionally narrowed to one key value.

    key="id" matches the row's primary key; any other key matches the indexed
    column values captured on the event (project_id, thread_id, ...).
    """

    table: str
    key: str | None = None
    value: str | None = None

    def matches(self, event: ChangeEvent) -> bool:
        if event.table != self.table:
            return False
        if self.key is None:
            return True
        if self.key == "id":
            return event.row_id == self.value
        return event.keys.get(self.key) == self.value


class Subscription:
    """A registered interest set with its own event queue."""

    def __init__(self, feed: "ChangeFeed", interests: Sequence[Interest], maxsize: int):
        self._feed = feed
        self.interests = tuple(interests)
        self._queue: asyncio.Queue[ChangeEvent | None] = asyncio.Queue(maxsize=maxsize)
        self.closed = False

    def wants(self, event: ChangeEvent) -> bool:
        return any(interest.matches(event) for interest in self.interests)

    def offer(self, event: ChangeEvent) -> None:
        """Queue an event without blocking the publisher.

        A full queue already guarantees the subscriber will re-run its query,
        so overflow events are dropped.
        """
        if self.closed:
            return
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            logger.debug("Live subscription queue full, dropping event", table=event.table)

    def drain(self) -> int:
        """Discard queued events (coalesce a burst into a single refresh)."""
        dropped = 0
        while not self._queue.empty():
            item = self._queue.get_nowait()
            if item is None:
                # Keep the close sentinel for the iterator
                self._queue.put_nowait(None)
                break
            dropped += 1
        return dropped

    async def get(self) -> ChangeEvent | None:
        """Wait for the next matching event; None once closed."""
        if self.closed and self._queue.empty():
            return None
        return await self._queue.get()

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._feed.unsubscribe(self)
        try:
            self._queue.put_nowait(None)
        except asyncio.QueueFull:
            self.drain()
            self._queue.put_nowait(None)

    def __aiter__(self) -> "Subscription":
        return self

    async def __anext__(self) -> ChangeEvent:
        event = await self.get()
        if event is None:
            raise StopAsyncIteration
        return event

    async def __aenter__(self) -> "Subscription":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()


class ChangeFeed:
    """Fan-out of committed changes to live-query subscribers."""

    def __init__(self, queue_size: int = 100):
        self._queue_size = queue_size
        self._subscriptions: set[Subscription] = set()
        self._forwarder: Forwarder | None = None
        self._pending_forwards: set[asyncio.Task[None]] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, *interests: Interest) -> Subscription:
        if not interests:
            raise ValueError("A subscription needs at least one interest")
        subscription = Subscription(self, interests, self._queue_size)
        self._subscriptions.add(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        self._subscriptions.discard(subscription)

    def set_forwarder(self, forwarder: Forwarder | None) -> None:
        """Forward locally committed events to other processes (see RedisChangeRelay)."""
        self._forwarder = forwarder

    def publish(self, events: Sequence[ChangeEvent], *, forward: bool = True) -> int:
        """Deliver events to matching subscribers.

        Called synchronously from the session's after_commit hook, so delivery
        never awaits. Forwarding to other processes runs as a background task.

        Returns:
            Number of (subscription, event) deliveries made.
        """
        delivered = 0
        for subscription in list(self._subscriptions):
            for event in events:
                if subscription.wants(event):
                    subscription.offer(event)
                    delivered += 1

        if forward and self._forwarder is not None and events:
            self._schedule_forward(list(events))
        return delivered

    def _schedule_forward(self, events: list[ChangeEvent]) -> None:
        assert self._forwarder is not None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running loop, change events not forwarded", count=len(events))
            return
        task = loop.create_task(self._forwarder(events))
        self._pending_forwards.add(task)
        task.add_done_callback(self._forward_done)

    def _forward_done(self, task: "asyncio.Task[None]") -> None:
        self._pending_forwards.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("Failed to forward change events", error=str(exc))

    async def wait_forwarded(self) -> None:
        """Wait for in-flight forwards (shutdown and tests)."""
        if self._pending_forwards:
            await asyncio.gather(*self._pending_forwards, return_exceptions=True)

    def close(self) -> None:
        for subscription in list(self._subscriptions):
            subscription.close()

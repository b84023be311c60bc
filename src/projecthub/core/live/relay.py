"""Cross-process relay of change events over Redis pub/sub.

Each API process publishes its own committed changes to one channel and
replays the changes of the other processes into its local feed. Without
Redis the feed simply stays process-local.
"""

import asyncio
from collections.abc import Sequence
from uuid import uuid4

from redis.asyncio import Redis
from redis.asyncio.client import PubSub

from src.projecthub.core.live.feed import ChangeEvent, ChangeFeed, decode_events, encode_events
from src.projecthub.core.logging import get_logger

logger = get_logger(__name__)


class RedisChangeRelay:
    """Bridge a local ChangeFeed to a Redis pub/sub channel."""

    def __init__(self, redis: Redis, feed: ChangeFeed, channel: str):
        self.redis = redis
        self.feed = feed
        self.channel = channel
        self.origin = uuid4().hex
        self._pubsub: PubSub | None = None
        self._task: asyncio.Task[None] | None = None

    async def forward(self, events: Sequence[ChangeEvent]) -> None:
        """Publish locally committed events for the other processes."""
        await self.redis.publish(self.channel, encode_events(events, self.origin))

    def handle_message(self, data: str | bytes) -> int:
        """Replay a relayed payload into the local feed, ignoring our own."""
        try:
            origin, events = decode_events(data)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Ignoring malformed change payload", error=str(e))
            return 0
        if origin == self.origin:
            return 0
        return self.feed.publish(events, forward=False)

    async def start(self) -> None:
        self._pubsub = self.redis.pubsub(ignore_subscribe_messages=True)
        await self._pubsub.subscribe(self.channel)
        self.feed.set_forwarder(self.forward)
        self._task = asyncio.create_task(self._listen())
        logger.info("Live change relay started", channel=self.channel)

    async def _listen(self) -> None:
        assert self._pubsub is not None
        async for message in self._pubsub.listen():
            if message.get("type") == "message":
                self.handle_message(message["data"])

    async def stop(self) -> None:
        self.feed.set_forwarder(None)
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        if self._pubsub is not None:
            await self._pubsub.unsubscribe(self.channel)
            await self._pubsub.aclose()
            self._pubsub = None
        logger.info("Live change relay stopped", channel=self.channel)

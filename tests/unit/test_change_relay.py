"""Tests for relaying change events between processes over Redis pub/sub."""

import asyncio

import pytest
from fakeredis import FakeServer
from fakeredis import aioredis as fakeredis_aio

from src.projecthub.core.live import ChangeEvent, ChangeFeed, Interest, RedisChangeRelay
from src.projecthub.core.live.feed import encode_events

pytestmark = pytest.mark.unit

CHANNEL = "projecthub:test-changes"


def thread_event(row_id: str = "t-1") -> ChangeEvent:
    return ChangeEvent("threads", row_id, "update", {"project_id": "p-1"})


class TestHandleMessage:
    async def test_foreign_events_are_replayed_locally(self, fake_redis):
        feed = ChangeFeed()
        subscription = feed.subscribe(Interest("threads"))
        relay = RedisChangeRelay(fake_redis, feed, CHANNEL)

        delivered = relay.handle_message(encode_events([thread_event()], origin="other"))

        assert delivered == 1
        assert await subscription.get() == thread_event()

    async def test_own_events_are_ignored(self, fake_redis):
        feed = ChangeFeed()
        subscription = feed.subscribe(Interest("threads"))
        relay = RedisChangeRelay(fake_redis, feed, CHANNEL)

        assert relay.handle_message(encode_events([thread_event()], relay.origin)) == 0
        assert subscription.drain() == 0

    async def test_malformed_payload_is_ignored(self, fake_redis):
        relay = RedisChangeRelay(fake_redis, ChangeFeed(), CHANNEL)
        assert relay.handle_message("not json") == 0
        assert relay.handle_message('{"origin": "x"}') == 0


async def test_commit_in_one_process_reaches_the_other():
    server = FakeServer()
    redis_a = fakeredis_aio.FakeRedis(server=server, decode_responses=True)
    redis_b = fakeredis_aio.FakeRedis(server=server, decode_responses=True)
    feed_a, feed_b = ChangeFeed(), ChangeFeed()
    relay_a = RedisChangeRelay(redis_a, feed_a, CHANNEL)
    relay_b = RedisChangeRelay(redis_b, feed_b, CHANNEL)
    await relay_a.start()
    await relay_b.start()
    subscription = feed_b.subscribe(Interest("threads", "project_id", "p-1"))

    try:
        feed_a.publish([thread_event()])
        await feed_a.wait_forwarded()

        received = await asyncio.wait_for(subscription.get(), timeout=2)
        assert received == thread_event()
    finally:
        await relay_a.stop()
        await relay_b.stop()
        await redis_a.aclose()
        await redis_b.aclose()

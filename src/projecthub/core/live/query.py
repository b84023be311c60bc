"""Live queries: re-run a query whenever the data it depends on changes."""

from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from typing import TypeVar

from src.projecthub.core.live.feed import ChangeFeed, Interest

T = TypeVar("T")


async def live_query(
    feed: ChangeFeed,
    interests: Sequence[Interest],
    fetch: Callable[[], Awaitable[T]],
) -> AsyncIterator[T]:
    """Yield the query result now and again after every matching commit.

    Bursts of events are coalesced into one refresh. The generator ends when
    the feed closes; closing it early unsubscribes.

    Args:
        feed: Change feed the write path publishes to.
        interests: Tables/keys the query reads.
        fetch: Runs the query against a fresh session.
    """
    subscription = feed.subscribe(*interests)
    try:
        yield await fetch()
        while True:
            event = await subscription.get()
            if event is None:
                return
            subscription.drain()
            yield await fetch()
    finally:
        subscription.close()

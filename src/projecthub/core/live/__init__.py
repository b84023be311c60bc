"""Live queries - change capture, fan-out and cross-process relay."""

from src.projecthub.core.live.capture import attach_change_feed
from src.projecthub.core.live.feed import ChangeEvent, ChangeFeed, Interest, Subscription
from src.projecthub.core.live.query import live_query
from src.projecthub.core.live.relay import RedisChangeRelay

__all__ = [
    "ChangeEvent",
    "ChangeFeed",
    "Interest",
    "RedisChangeRelay",
    "Subscription",
    "attach_change_feed",
    "live_query",
]

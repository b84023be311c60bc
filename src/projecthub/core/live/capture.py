"""Capture rows written by a session and publish them after commit.

Listeners are registered once on the sync Session class; they only act on
sessions that carry a feed in session.info (see attach_change_feed), so plain
sessions used by migrations and workers are unaffected.
"""

from typing import Any

from sqlalchemy import event, inspect
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session, UOWTransaction

from src.projecthub.core.live.feed import ChangeEvent, ChangeFeed

FEED_KEY = "change_feed"
PENDING_KEY = "pending_changes"

# Indexed columns copied onto each event so subscribers can filter by them
TRACKED_KEYS = ("project_id", "thread_id", "folder_id", "client_id", "message_id", "status")


def attach_change_feed(session: AsyncSession | Session, feed: ChangeFeed) -> None:
    session.info[FEED_KEY] = feed


def _to_event(obj: Any, op: str) -> ChangeEvent | None:
    table = getattr(obj, "__tablename__", None)
    if table is None:
        return None
    # state.dict holds only loaded attributes, so no lazy load is triggered here
    values = inspect(obj).dict
    row_id = values.get("id")
    if row_id is None:
        return None
    keys = {
        key: str(values[key]) for key in TRACKED_KEYS if values.get(key) is not None
    }
    return ChangeEvent(table=table, row_id=str(row_id), op=op, keys=keys)


@event.listens_for(Session, "after_flush")
def _collect_changes(session: Session, flush_context: UOWTransaction) -> None:
    if FEED_KEY not in session.info:
        return
    pending: list[ChangeEvent] = session.info.setdefault(PENDING_KEY, [])
    for op, objects in (
        ("insert", session.new),
        ("update", session.dirty),
        ("delete", session.deleted),
    ):
        for obj in objects:
            change = _to_event(obj, op)
            if change is not None:
                pending.append(change)


@event.listens_for(Session, "after_commit")
def _publish_changes(session: Session) -> None:
    events: list[ChangeEvent] | None = session.info.pop(PENDING_KEY, None)
    feed: ChangeFeed | None = session.info.get(FEED_KEY)
    if feed is None or not events:
        return
    unique: dict[tuple[str, str], ChangeEvent] = {}
    for change in events:
        # Last write wins, but an insert followed by updates is still an insert
        previous = unique.get((change.table, change.row_id))
        if previous is not None and previous.op == "insert" and change.op == "update":
            change = ChangeEvent(change.table, change.row_id, "insert", change.keys)
        unique[(change.table, change.row_id)] = change
    feed.publish(list(unique.values()))


@event.listens_for(Session, "after_rollback")
def _discard_changes(session: Session) -> None:
    session.info.pop(PENDING_KEY, None)

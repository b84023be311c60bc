"""Thread and message repositories."""

from collections.abc import Sequence
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import func, or_
from sqlmodel import col, select

from src.projecthub.models import Message, MessageType, Role, Thread, ThreadStatus
from src.projecthub.repositories.base import BaseRepository


def _unread_column(role: Role) -> Any:
    if role is Role.CLIENT:
        return col(Thread.unread_count_client)
    return col(Thread.unread_count_developer)


class ThreadRepository(BaseRepository[Thread]):
    """Repository for thread operations."""

    model = Thread

    async def list_for_project(
        self, project_id: UUID, include_archived: bool = False
    ) -> list[Thread]:
        """Threads of a project, most recently active first."""
        query = select(Thread).where(Thread.project_id == project_id)
        if not include_archived:
            query = query.where(col(Thread.is_archived).is_(False))
        result = await self.session.execute(query.order_by(col(Thread.last_activity).desc()))
        return list(result.scalars().all())

    async def list_for_projects(self, project_ids: Sequence[UUID]) -> list[Thread]:
        if not project_ids:
            return []
        result = await self.session.execute(
            select(Thread).where(col(Thread.project_id).in_(project_ids))
        )
        return list(result.scalars().all())

    async def list_recent(self, limit: int) -> list[Thread]:
        result = await self.session.execute(
            select(Thread)
            .where(col(Thread.is_archived).is_(False))
            .order_by(col(Thread.last_activity).desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def latest_for_project(self, project_id: UUID) -> Thread | None:
        result = await self.session.execute(
            select(Thread)
            .where(Thread.project_id == project_id)
            .order_by(col(Thread.last_activity).desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def search_titles(
        self, query: str, project_id: UUID | None = None, limit: int = 50
    ) -> list[Thread]:
        stmt = select(Thread).where(col(Thread.title).ilike(f"%{query}%"))
        if project_id is not None:
            stmt = stmt.where(Thread.project_id == project_id)
        result = await self.session.execute(
            stmt.order_by(col(Thread.last_activity).desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def list_titles_like(self, pattern: str) -> list[Thread]:
        result = await self.session.execute(
            select(Thread).where(col(Thread.title).like(pattern))
        )
        return list(result.scalars().all())

    async def total_unread(self, role: Role, project_ids: Sequence[UUID] | None = None) -> int:
        """Sum of the role's unread counters over non-archived threads.

        Computed from the thread rows on every call; there is no cached total.
        """
        query = select(func.coalesce(func.sum(_unread_column(role)), 0)).where(
            col(Thread.is_archived).is_(False)
        )
        if project_ids is not None:
            if not project_ids:
                return 0
            query = query.where(col(Thread.project_id).in_(project_ids))
        result = await self.session.execute(query)
        return int(result.scalar_one())

    async def unread_by_project(
        self, role: Role, project_ids: Sequence[UUID]
    ) -> dict[UUID, int]:
        if not project_ids:
            return {}
        result = await self.session.execute(
            select(Thread.project_id, func.sum(_unread_column(role)))
            .where(col(Thread.project_id).in_(project_ids), col(Thread.is_archived).is_(False))
            .group_by(col(Thread.project_id))
        )
        return {row[0]: int(row[1] or 0) for row in result.all()}

    async def count_by_project(
        self, project_ids: Sequence[UUID]
    ) -> dict[UUID, tuple[int, int]]:
        """(total, active) thread counts per project; active = not closed."""
        if not project_ids:
            return {}
        total = await self.session.execute(
            select(Thread.project_id, func.count())
            .where(col(Thread.project_id).in_(project_ids))
            .group_by(col(Thread.project_id))
        )
        active = await self.session.execute(
            select(Thread.project_id, func.count())
            .where(
                col(Thread.project_id).in_(project_ids),
                Thread.status != ThreadStatus.CLOSED.value,
            )
            .group_by(col(Thread.project_id))
        )
        active_counts = {row[0]: row[1] for row in active.all()}
        return {row[0]: (row[1], active_counts.get(row[0], 0)) for row in total.all()}

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(Thread))
        return result.scalar_one()


class MessageRepository(BaseRepository[Message]):
    """Repository for message operations."""

    model = Message

    async def list_for_thread(
        self, thread_id: UUID, include_private: bool = False
    ) -> list[Message]:
        """Messages of a thread, oldest first."""
        query = select(Message).where(Message.thread_id == thread_id)
        if not include_private:
            query = query.where(col(Message.is_private).is_(False))
        result = await self.session.execute(
            query.order_by(col(Message.created_at), col(Message.id))
        )
        return list(result.scalars().all())

    async def list_for_threads(self, thread_ids: Sequence[UUID]) -> list[Message]:
        if not thread_ids:
            return []
        result = await self.session.execute(
            select(Message).where(col(Message.thread_id).in_(thread_ids))
        )
        return list(result.scalars().all())

    async def last_visible(
        self, thread_ids: Sequence[UUID], include_private: bool = False
    ) -> dict[UUID, Message]:
        """Newest message per thread."""
        if not thread_ids:
            return {}
        query = select(Message).where(col(Message.thread_id).in_(thread_ids))
        if not include_private:
            query = query.where(col(Message.is_private).is_(False))
        result = await self.session.execute(query.order_by(col(Message.created_at).desc()))
        latest: dict[UUID, Message] = {}
        for message in result.scalars().all():
            latest.setdefault(message.thread_id, message)
        return latest

    async def list_by_ids(self, message_ids: Sequence[UUID]) -> list[Message]:
        if not message_ids:
            return []
        result = await self.session.execute(
            select(Message).where(col(Message.id).in_(message_ids))
        )
        return list(result.scalars().all())

    async def list_file_messages(self, thread_ids: Sequence[UUID]) -> list[Message]:
        if not thread_ids:
            return []
        result = await self.session.execute(
            select(Message)
            .where(
                col(Message.thread_id).in_(thread_ids),
                Message.message_type == MessageType.FILE.value,
                col(Message.file_id).is_not(None),
            )
            .order_by(col(Message.created_at))
        )
        return list(result.scalars().all())

    async def search(
        self,
        query: str,
        thread_ids: Sequence[UUID] | None = None,
        include_private: bool = False,
        limit: int = 50,
    ) -> list[Message]:
        stmt = select(Message).where(col(Message.content).ilike(f"%{query}%"))
        if thread_ids is not None:
            stmt = stmt.where(col(Message.thread_id).in_(thread_ids))
        if not include_private:
            stmt = stmt.where(col(Message.is_private).is_(False))
        result = await self.session.execute(
            stmt.order_by(col(Message.created_at).desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def containing_any(self, fragments: Sequence[str]) -> list[Message]:
        if not fragments:
            return []
        result = await self.session.execute(
            select(Message).where(or_(*(col(Message.content).contains(f) for f in fragments)))
        )
        return list(result.scalars().all())

    async def list_since(
        self, since: datetime, thread_ids: Sequence[UUID] | None = None
    ) -> list[Message]:
        query = select(Message).where(Message.created_at >= since)
        if thread_ids is not None:
            query = query.where(col(Message.thread_id).in_(thread_ids))
        result = await self.session.execute(query.order_by(col(Message.created_at)))
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(Message))
        return result.scalar_one()

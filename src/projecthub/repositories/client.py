"""Client and project repositories."""

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import and_, case, func
from sqlmodel import col, select

from src.projecthub.models import Client, Project
from src.projecthub.repositories.base import BaseRepository


class ClientRepository(BaseRepository[Client]):
    """Repository for client operations."""

    model = Client

    async def get_by_name(self, name: str) -> Client | None:
        result = await self.session.execute(select(Client).where(Client.name == name))
        return result.scalar_one_or_none()

    async def list_all(self) -> list[Client]:
        result = await self.session.execute(select(Client).order_by(col(Client.name)))
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(Client))
        return result.scalar_one()


class ProjectRepository(BaseRepository[Project]):
    """Repository for project operations."""

    model = Project

    async def list_for_client(
        self, client_id: UUID, include_archived: bool = False
    ) -> list[Project]:
        query = select(Project).where(Project.client_id == client_id)
        if not include_archived:
            query = query.where(col(Project.is_archived).is_(False))
        result = await self.session.execute(query.order_by(col(Project.updated_at).desc()))
        return list(result.scalars().all())

    async def list_by_status(self, status: str | None = None) -> list[Project]:
        query = select(Project).where(col(Project.is_archived).is_(False))
        if status is not None:
            query = query.where(Project.status == status)
        result = await self.session.execute(query.order_by(col(Project.updated_at).desc()))
        return list(result.scalars().all())

    async def get_by_client_and_name(self, client_id: UUID, name: str) -> Project | None:
        result = await self.session.execute(
            select(Project).where(Project.client_id == client_id, Project.name == name)
        )
        return result.scalars().first()

    async def count_for_clients(
        self, client_ids: Sequence[UUID]
    ) -> dict[UUID, tuple[int, int]]:
        """(total, active) project counts per client; active = in progress and not archived."""
        if not client_ids:
            return {}
        active = func.sum(
            case(
                (and_(col(Project.is_archived).is_(False), Project.status == "in_progress"), 1),
                else_=0,
            )
        )
        result = await self.session.execute(
            select(Project.client_id, func.count(), active)
            .where(col(Project.client_id).in_(client_ids))
            .group_by(col(Project.client_id))
        )
        return {row[0]: (row[1], int(row[2] or 0)) for row in result.all()}

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(Project))
        return result.scalar_one()

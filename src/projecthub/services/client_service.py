"""Client management."""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.projecthub.core.exceptions import NotFoundError
from src.projecthub.core.logging import get_logger
from src.projecthub.models import Client, ProjectStatus, Role, ThreadStatus
from src.projecthub.models.base import utc_now
from src.projecthub.repositories import (
    ClientRepository,
    MessageRepository,
    ProjectRepository,
    ThreadRepository,
)
from src.projecthub.schemas.client import ClientCreate, ClientUpdate

logger = get_logger(__name__)


@dataclass(frozen=True)
class ClientSummary:
    client: Client
    project_count: int
    active_projects: int
    unread_messages: int


@dataclass
class ClientActivity:
    client_id: UUID
    days: int
    total_messages: int = 0
    client_messages: int = 0
    developer_messages: int = 0
    total_projects: int = 0
    active_projects: int = 0
    active_threads: int = 0
    daily_activity: dict[date, dict[str, int]] = field(default_factory=dict)
    most_recent_activity: datetime | None = None


class ClientService:
    """Client CRUD and activity summaries."""

    def __init__(
        self,
        session: AsyncSession,
        client_repo: ClientRepository,
        project_repo: ProjectRepository,
        thread_repo: ThreadRepository,
        message_repo: MessageRepository,
    ):
        self.session = session
        self.client_repo = client_repo
        self.project_repo = project_repo
        self.thread_repo = thread_repo
        self.message_repo = message_repo

    async def require_client(self, client_id: UUID) -> Client:
        client = await self.client_repo.get_by_id(client_id)
        if client is None:
            raise NotFoundError("Client", client_id)
        return client

    async def create_client(self, data: ClientCreate) -> Client:
        """Create a client.

        Raises:
            ValueError: A client with this name already exists.
        """
        if await self.client_repo.get_by_name(data.name) is not None:
            raise ValueError(f"Client '{data.name}' already exists")

        try:
            now = utc_now()
            client = Client(
                name=data.name,
                email=data.email,
                language=data.language.value,
                tech_level=data.tech_level,
                timezone=data.timezone,
                created_at=now,
                last_active=now,
            )
            self.client_repo.add(client)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ValueError(f"Client '{data.name}' already exists") from e
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Client created", client_id=str(client.id))
        return client

    async def update_client(self, client_id: UUID, data: ClientUpdate) -> Client:
        try:
            client = await self.require_client(client_id)
            for name, value in data.model_dump(exclude_unset=True).items():
                setattr(client, name, value.value if isinstance(value, Enum) else value)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ValueError(f"Client '{data.name}' already exists") from e
        except Exception:
            await self.session.rollback()
            raise
        return client

    async def touch_activity(self, client_id: UUID) -> Client:
        try:
            client = await self.require_client(client_id)
            client.last_active = utc_now()
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return client

    async def _summaries(self, clients: list[Client]) -> list[ClientSummary]:
        counts = await self.project_repo.count_for_clients([c.id for c in clients])
        summaries = []
        for client in clients:
            projects = await self.project_repo.list_for_client(client.id, include_archived=True)
            unread = await self.thread_repo.total_unread(
                Role.DEVELOPER, [p.id for p in projects]
            )
            total, active = counts.get(client.id, (0, 0))
            summaries.append(
                ClientSummary(
                    client=client,
                    project_count=total,
                    active_projects=active,
                    unread_messages=unread,
                )
            )
        return summaries

    async def get_client(self, client_id: UUID) -> ClientSummary:
        client = await self.require_client(client_id)
        summaries = await self._summaries([client])
        return summaries[0]

    async def list_clients(self) -> list[ClientSummary]:
        """All clients, most recently active first."""
        summaries = await self._summaries(await self.client_repo.list_all())
        return sorted(summaries, key=lambda s: s.client.last_active, reverse=True)

    async def activity_summary(self, client_id: UUID, days: int = 30) -> ClientActivity:
        """Message volume per day over the client's projects."""
        if days < 1:
            raise ValueError("days must be at least 1")
        await self.require_client(client_id)

        projects = await self.project_repo.list_for_client(client_id, include_archived=True)
        threads = await self.thread_repo.list_for_projects([p.id for p in projects])
        since = utc_now() - timedelta(days=days)
        messages = await self.message_repo.list_since(since, [t.id for t in threads])

        daily: dict[date, dict[str, int]] = defaultdict(
            lambda: {Role.CLIENT.value: 0, Role.DEVELOPER.value: 0, "total": 0}
        )
        for message in messages:
            bucket = daily[message.created_at.date()]
            bucket[message.author] = bucket.get(message.author, 0) + 1
            bucket["total"] += 1

        return ClientActivity(
            client_id=client_id,
            days=days,
            total_messages=len(messages),
            client_messages=sum(1 for m in messages if m.author == Role.CLIENT.value),
            developer_messages=sum(1 for m in messages if m.author == Role.DEVELOPER.value),
            total_projects=len(projects),
            active_projects=sum(
                1 for p in projects if p.status == ProjectStatus.IN_PROGRESS.value
            ),
            active_threads=sum(1 for t in threads if t.status != ThreadStatus.CLOSED.value),
            daily_activity=dict(sorted(daily.items())),
            most_recent_activity=max((t.last_activity for t in threads), default=None),
        )

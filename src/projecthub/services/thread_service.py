"""Thread and unread-counter bookkeeping."""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.projecthub.core.exceptions import CascadeError, NotFoundError
from src.projecthub.core.logging import get_logger
from src.projecthub.models import (
    Client,
    Language,
    Message,
    MessageType,
    Project,
    Role,
    Thread,
    ThreadPriority,
    ThreadStatus,
)
from src.projecthub.models.base import utc_now
from src.projecthub.repositories import (
    ClientRepository,
    MessageRepository,
    ProjectFileRepository,
    ProjectRepository,
    ThreadRepository,
)
from src.projecthub.services.composer import ComposedText, MessageComposer
from src.projecthub.services.notification_service import NotificationOutbox

logger = get_logger(__name__)

THREAD_STATUS_LABELS: dict[ThreadStatus, str] = {
    ThreadStatus.NEW: "Nueva conversación iniciada",
    ThreadStatus.ACKNOWLEDGED: "Conversación vista por el desarrollador",
    ThreadStatus.IN_PROGRESS: "Trabajando en esta conversación",
    ThreadStatus.RESOLVED: "Conversación marcada como resuelta",
    ThreadStatus.CLOSED: "Conversación cerrada",
}


def status_update_text(status: ThreadStatus, note: str | None = None) -> str:
    text = f"📋 **Estado actualizado: {THREAD_STATUS_LABELS[status]}**"
    if note:
        text += f"\n\n{note}"
    return text


def apply_message_to_counters(thread: Thread, author: Role, is_private: bool) -> None:
    """Counter effect of one new message.

    A visible message is unread for the other role, and the author has seen
    everything up to it. Private notes change nothing.
    """
    if is_private:
        return
    if author is Role.CLIENT:
        thread.unread_count_developer += 1
        thread.unread_count_client = 0
    else:
        thread.unread_count_client += 1
        thread.unread_count_developer = 0


def clear_unread(thread: Thread, reader: Role) -> bool:
    """Zero the reader's counter. Returns False when it already was zero."""
    if thread.unread_for(reader) == 0:
        return False
    if reader is Role.CLIENT:
        thread.unread_count_client = 0
    else:
        thread.unread_count_developer = 0
    return True


@dataclass(frozen=True)
class Attachment:
    file_id: str
    file_name: str
    file_type: str
    file_size: int
    file_url: str | None = None


@dataclass(frozen=True)
class ThreadSummary:
    """A thread as one viewer sees it in a list."""

    thread: Thread
    unread_count: int
    last_message: Message | None = None
    project: Project | None = None
    client: Client | None = None


class ThreadService:
    """Threads, messages and the per-role unread counters.

    Counter read-modify-write always happens on a row locked with
    SELECT ... FOR UPDATE, in the same transaction as the message insert.
    """

    def __init__(
        self,
        session: AsyncSession,
        thread_repo: ThreadRepository,
        message_repo: MessageRepository,
        project_repo: ProjectRepository,
        client_repo: ClientRepository,
        file_repo: ProjectFileRepository,
        outbox: NotificationOutbox,
        composer: MessageComposer | None = None,
    ):
        self.session = session
        self.thread_repo = thread_repo
        self.message_repo = message_repo
        self.project_repo = project_repo
        self.client_repo = client_repo
        self.file_repo = file_repo
        self.outbox = outbox
        self.composer = composer

    async def require_thread(self, thread_id: UUID, lock: bool = False) -> Thread:
        if lock:
            thread = await self.thread_repo.get_for_update(thread_id)
        else:
            thread = await self.thread_repo.get_by_id(thread_id)
        if thread is None:
            raise NotFoundError("Thread", thread_id)
        return thread

    async def _require_project(self, project_id: UUID) -> Project:
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFoundError("Project", project_id)
        return project

    async def commit(self) -> None:
        """Commit and hand queued alerts to the dispatcher."""
        await self.session.commit()
        await self.outbox.dispatch()

    async def rollback(self) -> None:
        await self.session.rollback()
        self.outbox.discard()

    async def compose(
        self, project_id: UUID, text: str, author: Role, translate: bool
    ) -> ComposedText:
        """Prepare message text, translating it when asked and possible.

        Must run before the caller writes anything: the read transaction is
        ended here so no connection is held while the translator waits on the
        network. Translation never fails the send.
        """
        if not translate or self.composer is None:
            return ComposedText.plain(text)
        project = await self._require_project(project_id)
        client = await self.client_repo.get_by_id(project.client_id)
        language = client.language if client else Language.ES.value
        # Nothing is pending yet, so this only releases the connection
        await self.session.commit()
        return await self.composer.compose(text, author, language)

    async def post_message(
        self,
        thread: Thread,
        author: Role,
        text: ComposedText,
        *,
        message_type: MessageType = MessageType.TEXT,
        is_private: bool = False,
        attachment: Attachment | None = None,
        touch_project: bool = True,
        notify: bool = False,
    ) -> Message:
        """Insert a message and apply its bookkeeping in the caller's transaction.

        The thread must be locked (or new in this transaction). With ``notify``,
        a client message the developer can see also queues an alert in the
        outbox. Only typed client messages ask for it.
        """
        now = utc_now()
        message = Message(
            thread_id=thread.id,
            author=author.value,
            message_type=message_type.value,
            is_private=is_private,
            created_at=now,
            **text.message_fields(),
        )
        if attachment is not None:
            message.file_id = attachment.file_id
            message.file_name = attachment.file_name
            message.file_type = attachment.file_type
            message.file_size = attachment.file_size
            message.file_url = attachment.file_url
        self.message_repo.add(message)

        thread.last_activity = now
        apply_message_to_counters(thread, author, is_private)

        project = await self._require_project(thread.project_id)
        if touch_project:
            project.updated_at = now

        if notify and author is Role.CLIENT and not is_private:
            client = await self.client_repo.get_by_id(project.client_id)
            self.outbox.client_message(
                client.name if client else "Cliente",
                project,
                thread,
                text.original_content or text.content,
            )

        await self.session.flush()
        return message

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create_thread(
        self,
        project_id: UUID,
        title: str,
        created_by: Role,
        priority: ThreadPriority = ThreadPriority.NORMAL,
        initial_message: str | None = None,
        translate: bool = False,
    ) -> Thread:
        """Open a thread, optionally with a first message.

        The first message goes through post_message, which leaves the creator's
        counter at 0 and the other role's at 1.
        """
        title = title.strip()
        if not title:
            raise ValueError("Thread title must not be empty")

        text = None
        if initial_message and initial_message.strip():
            text = await self.compose(project_id, initial_message, created_by, translate)

        try:
            project = await self._require_project(project_id)
            now = utc_now()
            thread = Thread(
                project_id=project_id,
                title=title,
                priority=priority.value,
                status=ThreadStatus.NEW.value,
                created_by=created_by.value,
                last_activity=now,
                created_at=now,
            )
            self.thread_repo.add(thread)
            await self.session.flush()

            if text is not None:
                await self.post_message(thread, created_by, text, notify=True)
            else:
                project.updated_at = now
            await self.commit()
        except (LookupError, ValueError):
            await self.rollback()
            raise
        except Exception as e:
            await self.rollback()
            logger.error("Failed to create thread", project_id=str(project_id), error=str(e))
            raise

        logger.info(
            "Thread created",
            thread_id=str(thread.id),
            project_id=str(project_id),
            created_by=created_by.value,
        )
        return thread

    async def send_message(
        self,
        thread_id: UUID,
        author: Role,
        content: str,
        is_private: bool = False,
        message_type: MessageType = MessageType.TEXT,
        translate: bool = False,
    ) -> Message:
        """Append a message and update the thread's counters atomically.

        Args:
            thread_id: Target thread.
            author: Who writes.
            content: Message text.
            is_private: Developer note; invisible to the client, no counter change.
            message_type: Stored message type.
            translate: Translate into the counterpart's language first.

        Raises:
            NotFoundError: Unknown thread.
            ValueError: Empty content.
        """
        if not content.strip():
            raise ValueError("Message content must not be empty")

        text = ComposedText.plain(content)
        try:
            if translate and not is_private:
                thread = await self.require_thread(thread_id)
                text = await self.compose(thread.project_id, content, author, translate=True)
            thread = await self.require_thread(thread_id, lock=True)
            message = await self.post_message(
                thread,
                author,
                text,
                message_type=message_type,
                is_private=is_private,
                notify=True,
            )
            await self.commit()
        except (LookupError, ValueError):
            await self.rollback()
            raise
        except Exception as e:
            await self.rollback()
            logger.error("Failed to send message", thread_id=str(thread_id), error=str(e))
            raise

        logger.info(
            "Message sent",
            thread_id=str(thread_id),
            message_id=str(message.id),
            author=author.value,
            is_private=is_private,
        )
        return message

    async def mark_as_read(self, thread_id: UUID, reader: Role) -> Thread:
        """Zero the reader's own counter. Idempotent."""
        try:
            thread = await self.require_thread(thread_id, lock=True)
            changed = clear_unread(thread, reader)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        if changed:
            logger.debug("Thread marked as read", thread_id=str(thread_id), reader=reader.value)
        return thread

    async def update_status(
        self,
        thread_id: UUID,
        status: ThreadStatus,
        updated_by: Role,
        note: str | None = None,
    ) -> Thread:
        """Change the status and post a status_update message about it.

        The message follows the normal counter rule: unread for the other role,
        read for the updater.
        """
        try:
            thread = await self.require_thread(thread_id, lock=True)
            thread.status = status.value
            await self.post_message(
                thread,
                updated_by,
                ComposedText.plain(status_update_text(status, note)),
                message_type=MessageType.STATUS_UPDATE,
            )
            await self.commit()
        except (LookupError, ValueError):
            await self.rollback()
            raise
        except Exception as e:
            await self.rollback()
            logger.error("Failed to update thread status", thread_id=str(thread_id), error=str(e))
            raise

        logger.info(
            "Thread status updated",
            thread_id=str(thread_id),
            status=status.value,
            updated_by=updated_by.value,
        )
        return thread

    async def toggle_archive(self, thread_id: UUID, archived: bool) -> Thread:
        """Archive or restore a thread. Archived threads drop out of unread totals."""
        try:
            thread = await self.require_thread(thread_id, lock=True)
            thread.is_archived = archived
            thread.last_activity = utc_now()
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Thread archive toggled", thread_id=str(thread_id), archived=archived)
        return thread

    async def delete_thread(self, thread_id: UUID) -> None:
        """Delete a thread and all of its messages in one transaction.

        Catalogue entries that came from those messages stay, unlinked.

        Raises:
            NotFoundError: Unknown thread.
            CascadeError: The cascade failed; nothing was deleted.
        """
        try:
            thread = await self.require_thread(thread_id, lock=True)
            messages = await self.message_repo.list_for_thread(thread_id, include_private=True)
            for project_file in await self.file_repo.list_by_messages([m.id for m in messages]):
                project_file.message_id = None
            await self.session.flush()
            for message in messages:
                await self.message_repo.delete(message)
            await self.session.flush()
            await self.thread_repo.delete(thread)
            await self.session.commit()
        except LookupError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Thread delete failed", thread_id=str(thread_id), error=str(e))
            raise CascadeError(f"Failed to delete thread {thread_id}") from e

        logger.info("Thread deleted", thread_id=str(thread_id), messages=len(messages))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def total_unread(self, viewer: Role) -> int:
        """Sum of the viewer's counters over non-archived threads, never cached."""
        return await self.thread_repo.total_unread(viewer)

    async def get_thread(self, thread_id: UUID, viewer: Role) -> ThreadSummary:
        thread = await self.require_thread(thread_id)
        project = await self.project_repo.get_by_id(thread.project_id)
        client = await self.client_repo.get_by_id(project.client_id) if project else None
        return ThreadSummary(
            thread=thread,
            unread_count=thread.unread_for(viewer),
            project=project,
            client=client,
        )

    async def list_project_threads(
        self, project_id: UUID, viewer: Role, include_archived: bool = False
    ) -> list[ThreadSummary]:
        """Threads newest activity first, each with its last visible message."""
        await self._require_project(project_id)
        threads = await self.thread_repo.list_for_project(project_id, include_archived)
        latest = await self.message_repo.last_visible(
            [t.id for t in threads], include_private=viewer is Role.DEVELOPER
        )
        return [
            ThreadSummary(
                thread=thread,
                unread_count=thread.unread_for(viewer),
                last_message=latest.get(thread.id),
            )
            for thread in threads
        ]

    async def recent_activity(self, viewer: Role, limit: int = 20) -> list[ThreadSummary]:
        threads = await self.thread_repo.list_recent(limit)
        latest = await self.message_repo.last_visible(
            [t.id for t in threads], include_private=viewer is Role.DEVELOPER
        )
        projects: dict[UUID, Project | None] = {}
        clients: dict[UUID, Client | None] = {}
        summaries = []
        for thread in threads:
            if thread.project_id not in projects:
                projects[thread.project_id] = await self.project_repo.get_by_id(thread.project_id)
            project = projects[thread.project_id]
            client = None
            if project is not None:
                if project.client_id not in clients:
                    clients[project.client_id] = await self.client_repo.get_by_id(
                        project.client_id
                    )
                client = clients[project.client_id]
            summaries.append(
                ThreadSummary(
                    thread=thread,
                    unread_count=thread.unread_for(viewer),
                    last_message=latest.get(thread.id),
                    project=project,
                    client=client,
                )
            )
        return summaries

    async def search_threads(
        self, query: str, viewer: Role, project_id: UUID | None = None, limit: int = 50
    ) -> list[ThreadSummary]:
        query = query.strip()
        if not query:
            return []
        threads = await self.thread_repo.search_titles(query, project_id, limit)
        return [ThreadSummary(thread=t, unread_count=t.unread_for(viewer)) for t in threads]

"""Message history, edits, private notes and attachments."""

from collections import Counter
from dataclasses import dataclass
from datetime import timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.projecthub.core.exceptions import NotFoundError, PermissionDeniedError
from src.projecthub.core.logging import get_logger
from src.projecthub.models import Message, MessageType, Project, Role, Thread
from src.projecthub.models.base import utc_now
from src.projecthub.repositories import MessageRepository, ProjectRepository, ThreadRepository
from src.projecthub.services.composer import ComposedText
from src.projecthub.services.file_service import FileService
from src.projecthub.services.thread_service import Attachment, ThreadService

logger = get_logger(__name__)

DELETED_MESSAGE_TEXT = "*Mensaje eliminado*"
_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def developer_note_text(note: str) -> str:
    return f"🔒 **Nota privada:** {note}"


def file_message_text(file_name: str, caption: str | None = None) -> str:
    text = f"📎 {file_name}"
    if caption:
        text += f"\n{caption}"
    return text


@dataclass(frozen=True)
class MessageHit:
    message: Message
    thread: Thread | None
    project: Project | None


@dataclass(frozen=True)
class MessageStats:
    total_messages: int
    client_messages: int
    developer_messages: int
    private_notes: int
    avg_response_time_hours: float
    most_active_day: str | None


def compute_stats(messages: list[Message]) -> MessageStats:
    """Counts plus the mean delay between a client message and the next reply.

    messages must be ordered oldest first.
    """
    by_author = Counter(m.author for m in messages)

    waits: list[float] = []
    pending: dict[UUID, Message] = {}
    for message in messages:
        if message.is_private:
            continue
        if message.author == Role.CLIENT.value:
            pending.setdefault(message.thread_id, message)
        elif message.thread_id in pending:
            asked = pending.pop(message.thread_id)
            waits.append((message.created_at - asked.created_at).total_seconds() / 3600)

    days = Counter(m.created_at.weekday() for m in messages)
    most_active = _WEEKDAYS[days.most_common(1)[0][0]] if days else None

    return MessageStats(
        total_messages=len(messages),
        client_messages=by_author[Role.CLIENT.value],
        developer_messages=by_author[Role.DEVELOPER.value],
        private_notes=sum(1 for m in messages if m.is_private),
        avg_response_time_hours=round(sum(waits) / len(waits), 2) if waits else 0.0,
        most_active_day=most_active,
    )


class MessageService:
    """Operations on individual messages.

    Anything that inserts a message goes through ThreadService.post_message so
    counter bookkeeping lives in one place.
    """

    def __init__(
        self,
        session: AsyncSession,
        threads: ThreadService,
        files: FileService,
        message_repo: MessageRepository,
        thread_repo: ThreadRepository,
        project_repo: ProjectRepository,
    ):
        self.session = session
        self.threads = threads
        self.files = files
        self.message_repo = message_repo
        self.thread_repo = thread_repo
        self.project_repo = project_repo

    async def _require_message(self, message_id: UUID) -> Message:
        message = await self.message_repo.get_by_id(message_id)
        if message is None:
            raise NotFoundError("Message", message_id)
        return message

    async def list_thread_messages(
        self, thread_id: UUID, include_private: bool = False, limit: int | None = None
    ) -> list[Message]:
        """Oldest first. With a limit, the newest `limit` messages are returned."""
        await self.threads.require_thread(thread_id)
        messages = await self.message_repo.list_for_thread(thread_id, include_private)
        if limit is not None:
            messages = messages[-limit:] if limit > 0 else []
        return messages

    async def edit_message(self, message_id: UUID, editor: Role, content: str) -> Message:
        """Replace a message's text. Only its author may edit it.

        Raises:
            NotFoundError: Unknown message.
            PermissionDeniedError: editor is not the author.
            ValueError: Empty content.
        """
        if not content.strip():
            raise ValueError("Message content must not be empty")

        try:
            message = await self._require_message(message_id)
            if message.author != editor.value:
                raise PermissionDeniedError("You can only edit your own messages")
            thread = await self.threads.require_thread(message.thread_id, lock=True)
            now = utc_now()
            message.content = content
            message.is_edited = True
            message.edited_at = now
            thread.last_activity = now
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Message edited", message_id=str(message_id), editor=editor.value)
        return message

    async def delete_message(self, message_id: UUID, deleter: Role) -> Message:
        """Soft delete: the row stays with placeholder content.

        Authors may delete their own messages; the developer may delete any.
        """
        try:
            message = await self._require_message(message_id)
            if message.author != deleter.value and deleter is not Role.DEVELOPER:
                raise PermissionDeniedError("You can only delete your own messages")
            message.content = DELETED_MESSAGE_TEXT
            message.is_edited = True
            message.edited_at = utc_now()
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Message deleted", message_id=str(message_id), deleter=deleter.value)
        return message

    async def add_developer_note(self, thread_id: UUID, note: str) -> Message:
        """Private developer note. Only the thread's last_activity changes."""
        if not note.strip():
            raise ValueError("Note must not be empty")

        try:
            thread = await self.threads.require_thread(thread_id, lock=True)
            message = await self.threads.post_message(
                thread,
                Role.DEVELOPER,
                ComposedText.plain(developer_note_text(note)),
                is_private=True,
                touch_project=False,
            )
            await self.threads.commit()
        except Exception:
            await self.threads.rollback()
            raise

        logger.info("Developer note added", thread_id=str(thread_id), message_id=str(message.id))
        return message

    async def send_file_message(
        self,
        thread_id: UUID,
        author: Role,
        file_id: str,
        file_name: str,
        file_type: str,
        file_size: int,
        caption: str | None = None,
        file_url: str | None = None,
    ) -> Message:
        """Post an attachment message and catalogue the file in one transaction.

        Counters follow the normal message rule. The catalogue entry is
        auto-filed like any other upload.
        """
        if self.files.storage is not None:
            stored = await self.files.storage.confirm_upload(file_id)
            file_size = stored.size

        try:
            thread = await self.threads.require_thread(thread_id, lock=True)
            message = await self.threads.post_message(
                thread,
                author,
                ComposedText.plain(file_message_text(file_name, caption)),
                message_type=MessageType.FILE,
                attachment=Attachment(
                    file_id=file_id,
                    file_name=file_name,
                    file_type=file_type,
                    file_size=file_size,
                    file_url=file_url,
                ),
            )
            await self.files.catalogue_file(
                thread.project_id,
                file_id=file_id,
                file_name=file_name,
                file_type=file_type,
                file_size=file_size,
                uploaded_by=author,
                message_id=message.id,
                file_url=file_url,
            )
            await self.threads.commit()
        except (LookupError, ValueError):
            await self.threads.rollback()
            raise
        except Exception as e:
            await self.threads.rollback()
            logger.error("Failed to send file message", thread_id=str(thread_id), error=str(e))
            raise

        logger.info(
            "File message sent",
            thread_id=str(thread_id),
            message_id=str(message.id),
            file_type=file_type,
        )
        return message

    async def _scope_thread_ids(
        self, thread_id: UUID | None, project_id: UUID | None
    ) -> list[UUID] | None:
        """Thread ids a query is limited to, or None for everything."""
        if thread_id is not None:
            return [thread_id]
        if project_id is not None:
            threads = await self.thread_repo.list_for_project(project_id, include_archived=True)
            return [t.id for t in threads]
        return None

    async def search_messages(
        self,
        query: str,
        thread_id: UUID | None = None,
        project_id: UUID | None = None,
        include_private: bool = False,
        limit: int = 50,
    ) -> list[MessageHit]:
        """Substring search over content, newest first, with thread and project."""
        query = query.strip()
        if not query:
            return []
        scope = await self._scope_thread_ids(thread_id, project_id)
        messages = await self.message_repo.search(query, scope, include_private, limit)

        threads: dict[UUID, Thread | None] = {}
        projects: dict[UUID, Project | None] = {}
        hits = []
        for message in messages:
            if message.thread_id not in threads:
                threads[message.thread_id] = await self.thread_repo.get_by_id(message.thread_id)
            thread = threads[message.thread_id]
            project = None
            if thread is not None:
                if thread.project_id not in projects:
                    projects[thread.project_id] = await self.project_repo.get_by_id(
                        thread.project_id
                    )
                project = projects[thread.project_id]
            hits.append(MessageHit(message=message, thread=thread, project=project))
        return hits

    async def message_stats(
        self,
        days: int = 30,
        thread_id: UUID | None = None,
        project_id: UUID | None = None,
    ) -> MessageStats:
        if days < 1:
            raise ValueError("days must be at least 1")
        scope = await self._scope_thread_ids(thread_id, project_id)
        since = utc_now() - timedelta(days=days)
        return compute_stats(await self.message_repo.list_since(since, scope))

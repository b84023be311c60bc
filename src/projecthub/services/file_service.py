"""Project file organisation: default folders, classification and the catalogue."""

from collections import Counter
from dataclasses import dataclass
from datetime import timedelta
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.projecthub.core.exceptions import NotFoundError
from src.projecthub.core.logging import get_logger
from src.projecthub.core.storage import ObjectStorage, UploadTarget
from src.projecthub.models import (
    Folder,
    FolderBucket,
    Message,
    Project,
    ProjectFile,
    Role,
)
from src.projecthub.models.base import utc_now
from src.projecthub.repositories import (
    FolderRepository,
    MessageRepository,
    ProjectFileRepository,
    ProjectRepository,
    ThreadRepository,
)

logger = get_logger(__name__)

_DOCUMENT_MARKERS = ("document", "text", "word", "excel", "powerpoint")
_FALLBACK_FILE_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class DefaultFolder:
    bucket: FolderBucket
    icon: str
    color: str


DEFAULT_FOLDERS: tuple[DefaultFolder, ...] = (
    DefaultFolder(FolderBucket.IMAGES, "🖼️", "#10B981"),
    DefaultFolder(FolderBucket.DOCUMENTS, "📄", "#3B82F6"),
    DefaultFolder(FolderBucket.PDFS, "📑", "#EF4444"),
    DefaultFolder(FolderBucket.OTHER, "📁", "#6B7280"),
)


def classify_file(file_type: str | None) -> FolderBucket:
    """Map a MIME type to its taxonomy bucket.

    Total and deterministic: anything that is not an image, a PDF or a
    document-like type lands in Other.
    """
    mime = (file_type or "").strip().lower()
    if mime.startswith("image/"):
        return FolderBucket.IMAGES
    if mime == "application/pdf":
        return FolderBucket.PDFS
    if any(marker in mime for marker in _DOCUMENT_MARKERS):
        return FolderBucket.DOCUMENTS
    return FolderBucket.OTHER


def normalize_tags(tags: list[str]) -> list[str]:
    """Strip, drop empties and de-duplicate while keeping first-seen order."""
    seen: set[str] = set()
    result: list[str] = []
    for tag in tags:
        cleaned = tag.strip()
        if cleaned and cleaned.lower() not in seen:
            seen.add(cleaned.lower())
            result.append(cleaned)
    return result


@dataclass(frozen=True)
class FileSystemSetup:
    folders_created: int
    files_synced: int
    files_organized: int

    @property
    def summary(self) -> str:
        return (
            f"Created {self.folders_created} folders, synced {self.files_synced} files "
            f"from conversations, and organized {self.files_organized} files"
        )


@dataclass(frozen=True)
class SetupStatus:
    folders_count: int
    files_count: int

    @property
    def is_setup(self) -> bool:
        # The four defaults minus at most one the user removed
        return self.folders_count >= 3

    @property
    def needs_setup(self) -> bool:
        return not self.is_setup


@dataclass(frozen=True)
class FileView:
    """A catalogue entry with its originating message and a fresh URL."""

    file: ProjectFile
    url: str | None
    message: Message | None = None


@dataclass(frozen=True)
class FileStats:
    total_files: int
    total_size: int
    by_type: dict[str, int]
    recent_uploads: int


class FileService:
    """Folder taxonomy and project file catalogue.

    Every insertion path bootstraps the default folders first, so nothing
    depends on an explicit setup call having happened.
    """

    def __init__(
        self,
        session: AsyncSession,
        project_repo: ProjectRepository,
        folder_repo: FolderRepository,
        file_repo: ProjectFileRepository,
        thread_repo: ThreadRepository,
        message_repo: MessageRepository,
        storage: ObjectStorage | None = None,
    ):
        self.session = session
        self.project_repo = project_repo
        self.folder_repo = folder_repo
        self.file_repo = file_repo
        self.thread_repo = thread_repo
        self.message_repo = message_repo
        self.storage = storage

    async def _require_project(self, project_id: UUID) -> Project:
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFoundError("Project", project_id)
        return project

    async def _require_file(self, file_id: UUID) -> ProjectFile:
        project_file = await self.file_repo.get_by_id(file_id)
        if project_file is None:
            raise NotFoundError("File", file_id)
        return project_file

    async def _require_folder(self, project_id: UUID, folder_id: UUID) -> Folder:
        folder = await self.folder_repo.get_by_id(folder_id)
        if folder is None:
            raise NotFoundError("Folder", folder_id)
        if folder.project_id != project_id:
            raise ValueError("Folder belongs to another project")
        return folder

    # ------------------------------------------------------------------
    # Default folders and classification
    # ------------------------------------------------------------------

    async def ensure_default_folders(self, project_id: UUID, created_by: Role) -> int:
        """Create the four taxonomy folders if the project has no folders.

        Flushes but does not commit; callers own the transaction.

        Returns:
            Number of folders created (0 or 4).
        """
        if await self.folder_repo.count_for_project(project_id) > 0:
            return 0
        now = utc_now()
        for default in DEFAULT_FOLDERS:
            self.folder_repo.add(
                Folder(
                    project_id=project_id,
                    name=default.bucket.value,
                    bucket=default.bucket.value,
                    icon=default.icon,
                    color=default.color,
                    created_by=created_by.value,
                    created_at=now,
                )
            )
        await self.session.flush()
        return len(DEFAULT_FOLDERS)

    async def setup_default_folders(self, project_id: UUID, created_by: Role) -> int:
        """Idempotently create the default folders.

        A concurrent setup that wins the unique (project_id, bucket) race makes
        this call report zero created.
        """
        await self._require_project(project_id)
        try:
            created = await self.ensure_default_folders(project_id, created_by)
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            logger.info("Default folders created concurrently", project_id=str(project_id))
            return 0
        except Exception:
            await self.session.rollback()
            raise

        if created:
            logger.info("Default folders created", project_id=str(project_id), count=created)
        return created

    async def resolve_folder(self, project_id: UUID, bucket: FolderBucket) -> Folder | None:
        """Folder a file of the given bucket goes to.

        The bucket's default folder, then the Other folder, then any folder.
        Folders created before buckets existed are matched by canonical name.
        """
        for candidate in (bucket, FolderBucket.OTHER):
            folder = await self.folder_repo.get_by_bucket(project_id, candidate.value)
            if folder is None:
                folder = await self.folder_repo.get_by_name(project_id, candidate.value)
            if folder is not None:
                return folder
        return await self.folder_repo.first_for_project(project_id)

    # ------------------------------------------------------------------
    # Catalogue writes
    # ------------------------------------------------------------------

    async def catalogue_file(
        self,
        project_id: UUID,
        *,
        file_id: str,
        file_name: str,
        file_type: str,
        file_size: int,
        uploaded_by: Role,
        folder_id: UUID | None = None,
        message_id: UUID | None = None,
        file_url: str | None = None,
        tags: list[str] | None = None,
    ) -> ProjectFile:
        """Insert a catalogue entry inside the caller's transaction.

        Without an explicit folder the file is auto-filed, creating the default
        folders first when the project has none.
        """
        if folder_id is not None:
            folder = await self._require_folder(project_id, folder_id)
        else:
            await self.ensure_default_folders(project_id, uploaded_by)
            folder = await self.resolve_folder(project_id, classify_file(file_type))

        project_file = ProjectFile(
            project_id=project_id,
            folder_id=folder.id if folder else None,
            message_id=message_id,
            file_id=file_id,
            file_name=file_name,
            file_type=file_type or _FALLBACK_FILE_TYPE,
            file_size=file_size,
            file_url=file_url,
            tags=normalize_tags(tags or []),
            uploaded_by=uploaded_by.value,
            manually_placed=folder_id is not None,
        )
        self.file_repo.add(project_file)
        await self.session.flush()
        return project_file

    async def add_file_to_project(
        self,
        project_id: UUID,
        *,
        file_id: str,
        file_name: str,
        file_type: str,
        file_size: int,
        uploaded_by: Role,
        folder_id: UUID | None = None,
        tags: list[str] | None = None,
    ) -> ProjectFile:
        """Catalogue an uploaded object.

        When object storage is configured the upload is confirmed first and the
        stored size wins over the one reported by the caller.

        Raises:
            NotFoundError: Unknown project or folder, or the upload is missing.
            ValueError: The folder belongs to another project.
        """
        if self.storage is not None:
            stored = await self.storage.confirm_upload(file_id)
            file_size = stored.size

        try:
            await self._require_project(project_id)
            project_file = await self.catalogue_file(
                project_id,
                file_id=file_id,
                file_name=file_name,
                file_type=file_type,
                file_size=file_size,
                uploaded_by=uploaded_by,
                folder_id=folder_id,
                tags=tags,
            )
            await self.session.commit()
        except (LookupError, ValueError):
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to add file", project_id=str(project_id), error=str(e))
            raise

        logger.info(
            "File added to project",
            project_id=str(project_id),
            file_id=str(project_file.id),
            folder_id=str(project_file.folder_id) if project_file.folder_id else None,
        )
        return project_file

    async def organize_pending(self, project_id: UUID) -> int:
        """Classify every unorganised file; flushes without committing."""
        now = utc_now()
        targets: dict[FolderBucket, Folder | None] = {}
        organized = 0
        for project_file in await self.file_repo.list_unorganized(project_id):
            bucket = classify_file(project_file.file_type)
            if bucket not in targets:
                targets[bucket] = await self.resolve_folder(project_id, bucket)
            folder = targets[bucket]
            if folder is None:
                continue
            project_file.folder_id = folder.id
            project_file.moved_at = now
            organized += 1
        await self.session.flush()
        return organized

    async def auto_organize(self, project_id: UUID) -> int:
        """File every unorganised file; a second run organises nothing."""
        await self._require_project(project_id)
        try:
            organized = await self.organize_pending(project_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Files organized", project_id=str(project_id), count=organized)
        return organized

    async def move_file_to_folder(self, file_id: UUID, folder_id: UUID | None) -> ProjectFile:
        """Re-file a file. folder_id None moves it to the project root.

        Either way the placement is marked manual, so automatic organising
        leaves it alone afterwards.
        """
        try:
            project_file = await self._require_file(file_id)
            if folder_id is not None:
                await self._require_folder(project_file.project_id, folder_id)
            project_file.folder_id = folder_id
            project_file.moved_at = utc_now()
            project_file.manually_placed = True
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "File moved",
            file_id=str(file_id),
            folder_id=str(folder_id) if folder_id else None,
        )
        return project_file

    async def sync_pending_messages(self, project_id: UUID) -> int:
        """Catalogue attachment messages that have no file entry yet.

        The new entries stay unorganised; flushes without committing.
        """
        threads = await self.thread_repo.list_for_project(project_id, include_archived=True)
        messages = await self.message_repo.list_file_messages([t.id for t in threads])
        linked = await self.file_repo.linked_message_ids(project_id)

        synced = 0
        for message in messages:
            if message.id in linked or not message.file_id:
                continue
            self.file_repo.add(
                ProjectFile(
                    project_id=project_id,
                    message_id=message.id,
                    file_id=message.file_id,
                    file_name=message.file_name or message.file_id,
                    file_type=message.file_type or _FALLBACK_FILE_TYPE,
                    file_size=message.file_size or 0,
                    file_url=message.file_url,
                    uploaded_by=message.author,
                    uploaded_at=message.created_at,
                )
            )
            linked.add(message.id)
            synced += 1
        await self.session.flush()
        return synced

    async def sync_message_files(self, project_id: UUID) -> int:
        await self._require_project(project_id)
        try:
            synced = await self.sync_pending_messages(project_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Message files synced", project_id=str(project_id), count=synced)
        return synced

    async def setup_project_file_system(
        self, project_id: UUID, created_by: Role
    ) -> FileSystemSetup:
        """Default folders, then message sync, then organising.

        Each step is idempotent, so this is safe on every project view.
        """
        folders_created = await self.setup_default_folders(project_id, created_by)
        try:
            files_synced = await self.sync_pending_messages(project_id)
            files_organized = await self.organize_pending(project_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        result = FileSystemSetup(folders_created, files_synced, files_organized)
        logger.info("Project file system ready", project_id=str(project_id), summary=result.summary)
        return result

    async def check_setup(self, project_id: UUID) -> SetupStatus:
        await self._require_project(project_id)
        return SetupStatus(
            folders_count=await self.folder_repo.count_for_project(project_id),
            files_count=await self.file_repo.count_for_project(project_id),
        )

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    async def create_folder(
        self,
        project_id: UUID,
        name: str,
        created_by: Role,
        parent_folder_id: UUID | None = None,
        color: str | None = None,
        icon: str | None = None,
    ) -> Folder:
        name = name.strip()
        if not name:
            raise ValueError("Folder name must not be empty")

        try:
            await self._require_project(project_id)
            if parent_folder_id is not None:
                await self._require_folder(project_id, parent_folder_id)
            folder = Folder(
                project_id=project_id,
                parent_folder_id=parent_folder_id,
                name=name,
                created_by=created_by.value,
            )
            if color:
                folder.color = color
            if icon:
                folder.icon = icon
            self.folder_repo.add(folder)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Folder created", project_id=str(project_id), folder_id=str(folder.id))
        return folder

    async def list_folders(
        self, project_id: UUID, parent_folder_id: UUID | None = None
    ) -> list[tuple[Folder, int]]:
        """Folders of one level, sorted by name, each with its file count."""
        await self._require_project(project_id)
        folders = await self.folder_repo.list_for_project(project_id, parent_folder_id)
        counts = await self.file_repo.count_by_folder(project_id)
        return [(folder, counts.get(folder.id, 0)) for folder in folders]

    # ------------------------------------------------------------------
    # Catalogue reads and edits
    # ------------------------------------------------------------------

    def file_url(self, project_file: ProjectFile) -> str | None:
        if self.storage is not None:
            return self.storage.get_url(project_file.file_id)
        return project_file.file_url

    async def _views(self, files: list[ProjectFile]) -> list[FileView]:
        message_ids = [f.message_id for f in files if f.message_id is not None]
        messages = {m.id: m for m in await self.message_repo.list_by_ids(message_ids)}
        return [
            FileView(
                file=f,
                url=self.file_url(f),
                message=messages.get(f.message_id) if f.message_id else None,
            )
            for f in files
        ]

    async def list_project_files(
        self,
        project_id: UUID,
        folder_id: UUID | None = None,
        file_type: str | None = None,
        search: str | None = None,
    ) -> list[FileView]:
        """Files newest first with message context and fresh URLs."""
        await self._require_project(project_id)
        files = await self.file_repo.list_for_project(
            project_id, folder_id=folder_id, file_type=file_type, search=search
        )
        return await self._views(files)

    async def search_files(
        self, project_id: UUID, query: str, file_type: str | None = None
    ) -> list[FileView]:
        query = query.strip()
        if not query:
            return []
        return await self.list_project_files(project_id, file_type=file_type, search=query)

    async def get_file(self, file_id: UUID) -> FileView:
        project_file = await self._require_file(file_id)
        views = await self._views([project_file])
        return views[0]

    async def update_file_tags(self, file_id: UUID, tags: list[str]) -> ProjectFile:
        try:
            project_file = await self._require_file(file_id)
            project_file.tags = normalize_tags(tags)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return project_file

    async def delete_file(self, file_id: UUID) -> None:
        """Remove the catalogue entry. The stored object and any message stay."""
        try:
            project_file = await self._require_file(file_id)
            await self.file_repo.delete(project_file)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("File removed from project", file_id=str(file_id))

    async def file_stats(self, project_id: UUID, recent_days: int = 7) -> FileStats:
        await self._require_project(project_id)
        files = await self.file_repo.list_for_project(project_id)
        by_type = Counter(f.file_type.split("/")[0] for f in files)
        return FileStats(
            total_files=len(files),
            total_size=sum(f.file_size for f in files),
            by_type=dict(by_type),
            recent_uploads=await self.file_repo.count_uploaded_since(
                project_id, utc_now() - timedelta(days=recent_days)
            ),
        )

    # ------------------------------------------------------------------
    # Storage boundary
    # ------------------------------------------------------------------

    def _require_storage(self) -> ObjectStorage:
        if self.storage is None:
            raise RuntimeError("Object storage is not configured")
        return self.storage

    def create_upload_target(self, file_name: str, content_type: str) -> UploadTarget:
        return self._require_storage().create_upload_target(file_name, content_type)

    def get_download_url(self, file_id: str) -> str:
        return self._require_storage().get_url(file_id)

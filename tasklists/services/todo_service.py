"""Todo service orchestrating scans, aggregation and reverse sync."""

from typing import Optional, Sequence
import asyncio
import logging

from tasklists.config.settings import TaskListsSettings
from tasklists.domain.exceptions import AggregateDocumentError, NotADocumentError
from tasklists.domain.models import (
    AggregateDocument,
    AggregateResult,
    DocumentEvent,
    DocumentRef,
    EventKind,
    SyncResult,
    Todo,
    normalize_path,
)
from tasklists.domain.protocols import DocumentStore
from tasklists.parsers.aggregate_parser import AggregateParser
from tasklists.parsers.todo_parser import TodoParser
from .aggregate_service import TodoAggregator
from .exclusion_service import ExclusionResolver
from .scan_service import DocumentScanner
from .sync_service import ReverseSyncService


logger = logging.getLogger(__name__)


class TodoService:
    """Run aggregation and reverse sync against one document store.

    Every run holds the run lock, so runs started from the queue, the API
    and scheduled jobs never interleave when they share one lock.
    """

    def __init__(
        self,
        store: DocumentStore,
        settings: TaskListsSettings,
        lock: Optional[asyncio.Lock] = None,
    ) -> None:
        self._store = store
        self._lock = lock or asyncio.Lock()
        self._settings = settings
        included = settings.included_task_types()

        self._parser = TodoParser()
        self._aggregate_parser = AggregateParser()
        self._scanner = DocumentScanner(
            store,
            ExclusionResolver(
                store,
                todo_filename=settings.todo_filename,
                exclude_folder_filename=settings.exclude_folder_filename,
            ),
            exclude_file_pattern=settings.exclude_file_pattern,
        )
        self._aggregator = TodoAggregator(
            store, included, use_full_filepath=settings.use_full_filepath
        )
        self._sync = ReverseSyncService(store, included, self._aggregate_parser)

    @property
    def aggregate_path(self) -> str:
        return normalize_path(self._settings.todo_filename)

    async def get_aggregate_document(self, create: bool = True) -> Optional[DocumentRef]:
        """Resolve the aggregate document, creating it if asked.

        Returns:
            The aggregate ref, or None when it is missing and create is False

        Raises:
            AggregateDocumentError: If the document cannot be created
            NotADocumentError: If the path is a folder
        """
        filename = self._settings.todo_filename
        try:
            document = await self._store.resolve(filename)
            if document is None and create:
                document = await self._store.create(filename, "")
        except OSError as e:
            raise AggregateDocumentError(filename, str(e)) from e

        if document is None:
            if create:
                raise AggregateDocumentError(filename)
            return None
        if document.is_folder:
            raise NotADocumentError(document.path)
        return document

    async def find_todos(self) -> tuple[int, list[Todo]]:
        """Scan the store and parse todos from every surviving document.

        Returns:
            Number of documents scanned and the todos found
        """
        todo_documents = await self._scanner.find_todo_documents()
        todos: list[Todo] = []
        for todo_document in todo_documents:
            todos.extend(self._parser.parse(todo_document.contents, todo_document.document))
        return len(todo_documents), todos

    async def update_todos(self) -> AggregateResult:
        """Rebuild the aggregate document from scratch."""
        async with self._lock:
            return await self._update_todos()

    async def _update_todos(self) -> AggregateResult:
        document = await self.get_aggregate_document()
        current = await self._store.read(document)

        scanned, todos = await self.find_todos()
        aggregate, changed = await self._aggregator.save(document, todos, current=current)

        result = AggregateResult(
            documents_scanned=scanned,
            groups=len(aggregate.groups),
            todos=aggregate.todo_count,
            changed=changed,
        )
        logger.info(
            f"Aggregated {result.todos} todo(s) from {result.groups} document(s) "
            f"into {document.path} (scanned={scanned}, changed={changed})"
        )
        return result

    async def read_aggregate(self) -> AggregateDocument:
        """Parse the aggregate document as it currently stands."""
        document = await self.get_aggregate_document(create=False)
        if document is None:
            return AggregateDocument()
        return self._aggregate_parser.parse(await self._store.read(document))

    async def sync_todos(self) -> SyncResult:
        """Push marker edits in the aggregate back to source documents."""
        async with self._lock:
            return await self._sync_todos()

    async def _sync_todos(self) -> SyncResult:
        document = await self.get_aggregate_document(create=False)
        if document is None:
            logger.debug(f"No {self._settings.todo_filename} to sync from")
            return SyncResult()
        return await self._sync.sync(await self._store.read(document))

    def touches_aggregate(self, event: DocumentEvent) -> bool:
        """True for an edit of the aggregate document itself."""
        return (
            event.kind == EventKind.MODIFIED
            and normalize_path(event.path) == self.aggregate_path
        )

    async def handle_events(
        self, events: Sequence[DocumentEvent]
    ) -> tuple[Optional[SyncResult], AggregateResult]:
        """Run once for a batch of change notifications.

        An edit of the aggregate document is first synced back to the
        source documents so finished items drop out of the rebuilt aggregate.
        """
        async with self._lock:
            sync_result = None
            if any(self.touches_aggregate(e) for e in events):
                sync_result = await self._sync_todos()
            return sync_result, await self._update_todos()

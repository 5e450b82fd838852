"""Reverse sync: push marker edits from the aggregate back to source documents."""

from typing import Iterable, Sequence
import logging

from tasklists.domain.models import AggregateDocument, SyncResult, TaskType, Todo
from tasklists.domain.protocols import DocumentStore
from tasklists.parsers.aggregate_parser import AggregateParser
from tasklists.parsers.line_parser import match_task_line, replace_marker
from tasklists.parsers.todo_parser import LINE_BREAK_PATTERN


logger = logging.getLogger(__name__)


def patch_markers(contents: str, todos: Sequence[Todo]) -> tuple[str, int]:
    """Apply each todo's marker to the first line with the same text.

    Lines are matched on text, not line number, so edits made to the source
    since the aggregate was generated are tolerated. Line endings are kept.

    Returns:
        Patched contents and the number of lines that changed
    """
    lines = LINE_BREAK_PATTERN.split(contents)
    separators = LINE_BREAK_PATTERN.findall(contents)

    patched = 0
    for todo in todos:
        for index, line in enumerate(lines):
            match = match_task_line(line)
            if match is None or match.text != todo.text:
                continue
            if match.marker != todo.marker:
                lines[index] = replace_marker(line, todo.marker)
                patched += 1
            break

    result = [lines[0]]
    for separator, line in zip(separators, lines[1:]):
        result.append(separator)
        result.append(line)
    return "".join(result), patched


class ReverseSyncService:
    """Propagate status edits made in the aggregate to their documents."""

    def __init__(
        self,
        store: DocumentStore,
        included: Iterable[TaskType],
        parser: AggregateParser | None = None,
    ) -> None:
        """Initialize reverse sync.

        Args:
            store: Store holding the source documents
            included: Task types currently shown in the aggregate; anything
                else found there is a pending patch
            parser: Aggregate parser (default instance if omitted)
        """
        self._store = store
        self._included = frozenset(included)
        self._parser = parser or AggregateParser()

    def pending_patches(self, todos: Sequence[Todo]) -> list[Todo]:
        """Todos whose type is no longer shown in the aggregate."""
        return [t for t in todos if t.task not in self._included]

    async def sync(self, aggregate_text: str) -> SyncResult:
        """Parse aggregate text and patch the source documents."""
        return await self.sync_aggregate(self._parser.parse(aggregate_text))

    async def sync_aggregate(self, aggregate: AggregateDocument) -> SyncResult:
        result = SyncResult()

        for path, todos in aggregate.by_path().items():
            pending = self.pending_patches(todos)
            if not pending:
                continue

            document = await self._store.resolve(path)
            if document is None or document.is_folder:
                logger.debug(f"Skipping unresolvable path: {path}")
                result.skipped_paths.append(path)
                continue

            contents = await self._store.read(document)
            patched_contents, patched = patch_markers(contents, pending)
            if patched:
                await self._store.write(document, patched_contents)
                result.documents_patched += 1
                result.lines_patched += patched
                logger.info(f"Patched {patched} line(s) in {path}")

        logger.info(
            f"Reverse sync: documents={result.documents_patched}, "
            f"lines={result.lines_patched}, skipped={len(result.skipped_paths)}"
        )
        return result

"""Find the documents that may contain task lines."""

import asyncio
import logging

from tasklists.domain.models import TodoDocument
from tasklists.domain.protocols import DocumentStore
from tasklists.parsers.todo_parser import split_lines
from .exclusion_service import ExclusionCache, ExclusionResolver


logger = logging.getLogger(__name__)


class DocumentScanner:
    """Enumerate, filter and read candidate documents."""

    def __init__(
        self,
        store: DocumentStore,
        resolver: ExclusionResolver,
        exclude_file_pattern: str,
    ) -> None:
        self._store = store
        self._resolver = resolver
        self._exclude_file_pattern = exclude_file_pattern

    def has_exclude_pattern(self, contents: str) -> bool:
        """True if any trimmed line equals the inline exclude pattern."""
        return any(
            line.strip() == self._exclude_file_pattern
            for line in split_lines(contents)
        )

    async def find_todo_documents(self) -> list[TodoDocument]:
        """Find all non-excluded documents with their contents.

        Exclusion checks and reads are issued concurrently; the result keeps
        the store's listing order.
        """
        documents = list(await self._store.list_documents())

        cache: ExclusionCache = {}
        verdicts = await asyncio.gather(
            *(self._resolver.should_exclude(doc, cache) for doc in documents)
        )
        candidates = [doc for doc, excluded in zip(documents, verdicts) if not excluded]

        contents = await asyncio.gather(*(self._store.read(doc) for doc in candidates))

        todo_documents = [
            TodoDocument(document=doc, contents=text)
            for doc, text in zip(candidates, contents)
            if not self.has_exclude_pattern(text)
        ]

        logger.debug(
            f"Scanned {len(documents)} documents: "
            f"{len(documents) - len(candidates)} folder-excluded, "
            f"{len(candidates) - len(todo_documents)} pattern-excluded"
        )
        return todo_documents

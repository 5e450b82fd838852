"""Decide which documents stay out of the aggregate."""

from typing import Optional
import logging
import posixpath

from tasklists.domain.models import DocumentRef, join_path
from tasklists.domain.protocols import DocumentStore


logger = logging.getLogger(__name__)


ExclusionCache = dict[str, bool]


class ExclusionResolver:
    """Folder-level exclusion check with an injected, per-run cache.

    A folder is excluded when it, or any folder above it, holds the marker
    file. Verdicts are cached by folder path so sibling documents share a
    single existence check.
    """

    def __init__(
        self,
        store: DocumentStore,
        todo_filename: str,
        exclude_folder_filename: str,
    ) -> None:
        self._store = store
        self._todo_filename = posixpath.basename(todo_filename)
        self._exclude_folder_filename = exclude_folder_filename

    async def should_exclude(
        self, document: DocumentRef, cache: Optional[ExclusionCache] = None
    ) -> bool:
        """Check whether a document is left out of aggregation.

        Args:
            document: Document (or folder, on recursion) to check
            cache: Verdicts by path, shared across one aggregation run

        Returns:
            True if the document must be skipped
        """
        if cache is None:
            cache = {}

        if document.name == self._todo_filename:
            return True

        if cache.get(document.path):
            return True

        parent = document.parent
        if parent is None:
            return False

        if parent.path in cache:
            return cache[parent.path]

        marker_path = join_path(parent.path, self._exclude_folder_filename)
        excluded = await self._store.exists(marker_path)

        if excluded:
            logger.debug(f"Folder excluded by marker: {parent.path}")
        else:
            # Recurse upwards: a distant ancestor may carry the marker
            excluded = await self.should_exclude(parent, cache)

        cache[parent.path] = excluded
        return excluded

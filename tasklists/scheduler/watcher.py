"""Watchers emitting document change events.

`FilesystemWatcher` follows a vault directory through watchdog.
`DocumentWatcher` polls any document store and diffs snapshots.
"""

from pathlib import Path
from typing import Callable, Optional
import asyncio
import logging
import os

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from tasklists.domain.models import DocumentEvent, EventKind
from tasklists.domain.protocols import DocumentStore


logger = logging.getLogger(__name__)


Snapshot = dict[str, float]


def diff_snapshots(old: Snapshot, new: Snapshot) -> list[DocumentEvent]:
    """Compare two path -> mtime snapshots.

    Renames show up as a deletion plus a creation.
    """
    events = [
        DocumentEvent(kind=EventKind.DELETED, path=path)
        for path in old
        if path not in new
    ]
    for path, modified_at in new.items():
        if path not in old:
            events.append(DocumentEvent(kind=EventKind.CREATED, path=path))
        elif modified_at != old[path]:
            events.append(DocumentEvent(kind=EventKind.MODIFIED, path=path))
    return events


class DocumentWatcher:
    """Detect document changes by polling the store."""

    def __init__(
        self,
        store: DocumentStore,
        on_event: Callable[[DocumentEvent], None],
    ) -> None:
        """Initialize watcher.

        Args:
            store: Store to poll
            on_event: Called once per detected change
        """
        self._store = store
        self._on_event = on_event
        self._snapshot: Optional[Snapshot] = None

    async def snapshot(self) -> Snapshot:
        documents = await self._store.list_documents()
        return {doc.path: doc.modified_at for doc in documents}

    async def poll(self) -> list[DocumentEvent]:
        """Take a snapshot and emit changes since the last one.

        The first poll only records the baseline.
        """
        current = await self.snapshot()
        previous, self._snapshot = self._snapshot, current
        if previous is None:
            logger.debug(f"Watching {len(current)} document(s)")
            return []

        events = diff_snapshots(previous, current)
        for event in events:
            self._on_event(event)
        if events:
            logger.info(f"Detected {len(events)} change(s)")
        return events


class _VaultEventHandler(FileSystemEventHandler):
    """Translate watchdog callbacks into document events."""

    def __init__(self, watcher: "FilesystemWatcher") -> None:
        self._watcher = watcher

    def on_created(self, event: FileSystemEvent) -> None:
        self._watcher.dispatch(EventKind.CREATED, event.src_path)

    def on_deleted(self, event: FileSystemEvent) -> None:
        self._watcher.dispatch(EventKind.DELETED, event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        # Folder mtimes change with every child; the child event is enough
        if not event.is_directory:
            self._watcher.dispatch(EventKind.MODIFIED, event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        self._watcher.dispatch(EventKind.RENAMED, event.dest_path, event.src_path)


class FilesystemWatcher:
    """Push document events from a watchdog observer onto the event loop.

    Observer callbacks arrive on watchdog's thread and are handed to
    ``on_event`` on the loop that called ``start``. Paths under hidden
    folders and outside the root are ignored.
    """

    def __init__(
        self,
        root: str | Path,
        on_event: Callable[[DocumentEvent], None],
    ) -> None:
        self._root = Path(root).resolve()
        self._on_event = on_event
        self._observer: Optional[BaseObserver] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self.handler = _VaultEventHandler(self)

    @property
    def is_running(self) -> bool:
        return self._observer is not None

    def start(self) -> None:
        """Start observing. Must be called with a running event loop."""
        if self._observer is not None:
            logger.warning("File watcher already running")
            return
        self._loop = asyncio.get_running_loop()
        observer = Observer()
        observer.schedule(self.handler, str(self._root), recursive=True)
        observer.start()
        self._observer = observer
        logger.info(f"Watching {self._root} for changes")

    def stop(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join(timeout=2.0)
        self._observer = None
        logger.info("File watcher stopped")

    def relative_path(self, path: str | bytes) -> Optional[str]:
        """Store-relative path, None for paths that are not watched."""
        try:
            relative = Path(os.fsdecode(path)).resolve().relative_to(self._root)
        except ValueError:
            return None
        parts = relative.parts
        if not parts or any(part.startswith(".") for part in parts[:-1]):
            return None
        return relative.as_posix()

    def dispatch(
        self,
        kind: EventKind,
        path: str | bytes,
        old_path: Optional[str | bytes] = None,
    ) -> None:
        """Hand an event over to the loop. Safe to call from any thread."""
        relative = self.relative_path(path)
        old_relative = self.relative_path(old_path) if old_path is not None else None
        if relative is None and old_relative is None:
            return
        if kind == EventKind.RENAMED and relative is None:
            # Moved out of the vault
            kind, relative, old_relative = EventKind.DELETED, old_relative, None
        elif kind == EventKind.RENAMED and old_relative is None:
            kind = EventKind.CREATED
        if self._loop is None:
            logger.debug(f"Dropping {kind.value} event for {relative}: not started")
            return
        event = DocumentEvent(kind=kind, path=relative or "", old_path=old_relative)
        self._loop.call_soon_threadsafe(self._on_event, event)

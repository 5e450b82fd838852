"""Dependency injection container."""

from dataclasses import dataclass
import asyncio
from typing import TypeVar, Generic, Callable, Optional, Any

from tasklists.domain.protocols import DocumentStore


T = TypeVar("T")


class Provider(Generic[T]):
    """Lazy provider that creates instance on first access."""

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory = factory
        self._instance: Optional[T] = None

    def get(self) -> T:
        """Get the instance, creating it if necessary."""
        if self._instance is None:
            self._instance = self._factory()
        return self._instance

    def reset(self) -> None:
        """Reset the instance (for testing)."""
        self._instance = None

    def override(self, instance: T) -> None:
        """Override with a specific instance (for testing)."""
        self._instance = instance


@dataclass
class Container:
    """Dependency injection container."""

    _document_store: Optional[Provider[DocumentStore]] = None
    _event_queue: Optional[Provider[Any]] = None
    _watcher: Optional[Provider[Any]] = None
    _file_watcher: Optional[Provider[Any]] = None
    _run_lock: Optional[asyncio.Lock] = None

    # Settings cache
    _settings: Optional[Any] = None
    _task_lists_settings: Optional[Any] = None

    @property
    def document_store(self) -> DocumentStore:
        """Get the document store."""
        if self._document_store is None:
            raise RuntimeError("Document store not configured")
        return self._document_store.get()

    @property
    def settings(self) -> Any:
        """Get application settings."""
        if self._settings is None:
            from tasklists.config.settings import get_settings

            self._settings = get_settings()
        return self._settings

    @property
    def task_lists_settings(self) -> Any:
        """Get aggregation settings, overridable per container."""
        if self._task_lists_settings is None:
            self._task_lists_settings = self.settings.task_lists
        return self._task_lists_settings

    @property
    def run_lock(self) -> asyncio.Lock:
        """Lock shared by every aggregation and sync run."""
        if self._run_lock is None:
            self._run_lock = asyncio.Lock()
        return self._run_lock

    @property
    def todo_service(self) -> Any:
        """Get TodoService instance."""
        from tasklists.services.todo_service import TodoService

        return TodoService(
            self.document_store, self.task_lists_settings, lock=self.run_lock
        )

    @property
    def event_queue(self) -> Any:
        """Get the shared EventQueue, running runs through TodoService."""
        if self._event_queue is None:
            from tasklists.scheduler.queue import EventQueue

            self._event_queue = Provider(
                lambda: EventQueue(lambda events: self.todo_service.handle_events(events))
            )
        return self._event_queue.get()

    @property
    def watcher(self) -> Any:
        """Get the DocumentWatcher feeding the event queue."""
        if self._watcher is None:
            from tasklists.scheduler.watcher import DocumentWatcher

            self._watcher = Provider(
                lambda: DocumentWatcher(self.document_store, self.event_queue.submit)
            )
        return self._watcher.get()

    @property
    def file_watcher(self) -> Any:
        """Get the watchdog FilesystemWatcher feeding the event queue.

        Raises:
            RuntimeError: If the document store is not directory backed
        """
        if self._file_watcher is None:
            from tasklists.scheduler.watcher import FilesystemWatcher

            root = getattr(self.document_store, "root", None)
            if root is None:
                raise RuntimeError("Document store has no root directory to watch")
            self._file_watcher = Provider(
                lambda: FilesystemWatcher(root, self.event_queue.submit)
            )
        return self._file_watcher.get()

    def configure_document_store(
        self, factory: Callable[[], DocumentStore]
    ) -> "Container":
        """Configure the document store."""
        self._document_store = Provider(factory)
        return self

    def configure_task_lists_settings(self, settings: Any) -> "Container":
        """Use specific aggregation settings instead of the environment."""
        self._task_lists_settings = settings
        return self

    def reset(self) -> None:
        """Reset all providers (for testing)."""
        for provider in (
            self._document_store,
            self._event_queue,
            self._watcher,
            self._file_watcher,
        ):
            if provider:
                provider.reset()
        self._document_store = None
        self._event_queue = None
        self._watcher = None
        self._file_watcher = None
        self._run_lock = None
        self._settings = None
        self._task_lists_settings = None


# Global container instance
container = Container()


def get_container() -> Container:
    """Get the global container instance."""
    return container


def reset_container() -> None:
    """Reset the global container (for testing)."""
    global container
    container.reset()
    container = Container()

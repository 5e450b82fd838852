"""Tests for dependency injection container."""

import pytest

from tasklists.container import Container, Provider, get_container, reset_container
from tasklists.repositories.filesystem import FilesystemDocumentStore
from tasklists.repositories.memory import InMemoryDocumentStore
from tasklists.scheduler.queue import EventQueue
from tasklists.scheduler.watcher import DocumentWatcher, FilesystemWatcher
from tasklists.services.todo_service import TodoService


class TestProvider:
    """Tests for Provider class."""

    def test_lazy_initialization(self):
        """Should not call factory until get() is called."""
        call_count = 0

        def factory():
            nonlocal call_count
            call_count += 1
            return InMemoryDocumentStore()

        provider = Provider(factory)
        assert call_count == 0

        provider.get()
        assert call_count == 1

        # Should use cached instance
        provider.get()
        assert call_count == 1

    def test_reset_clears_instance(self):
        """Should clear instance when reset() is called."""
        provider = Provider(InMemoryDocumentStore)

        instance1 = provider.get()
        provider.reset()
        instance2 = provider.get()

        assert instance1 is not instance2

    def test_override(self):
        """Should use overridden instance."""
        provider = Provider(InMemoryDocumentStore)
        override_instance = InMemoryDocumentStore()

        provider.override(override_instance)

        assert provider.get() is override_instance


class TestContainer:
    """Tests for Container class."""

    @pytest.fixture
    def container(self, settings) -> Container:
        return (
            Container()
            .configure_document_store(InMemoryDocumentStore)
            .configure_task_lists_settings(settings)
        )

    def test_unconfigured_store_raises(self):
        """Should raise when the document store was never configured."""
        with pytest.raises(RuntimeError, match="not configured"):
            Container().document_store

    def test_document_store_is_shared(self, container):
        """Should hand out the same store instance."""
        assert container.document_store is container.document_store

    def test_todo_service(self, container, settings):
        """Should build a TodoService over the configured store and settings."""
        service = container.todo_service

        assert isinstance(service, TodoService)
        assert service.aggregate_path == settings.todo_filename

    def test_event_queue_and_watcher(self, container):
        """Should share one queue and feed it from the watcher."""
        queue = container.event_queue

        assert isinstance(queue, EventQueue)
        assert container.event_queue is queue
        assert isinstance(container.watcher, DocumentWatcher)

    def test_services_share_run_lock(self, container):
        """Every TodoService should hold the same run lock."""
        assert container.todo_service._lock is container.run_lock
        assert container.todo_service._lock is container.todo_service._lock

    def test_file_watcher_needs_directory_store(self, container):
        """Should refuse to watch a store without a root directory."""
        with pytest.raises(RuntimeError, match="root directory"):
            container.file_watcher

    def test_file_watcher_for_filesystem_store(self, settings, tmp_path):
        """Should watch the filesystem store root."""
        container = (
            Container()
            .configure_document_store(lambda: FilesystemDocumentStore(tmp_path))
            .configure_task_lists_settings(settings)
        )

        watcher = container.file_watcher

        assert isinstance(watcher, FilesystemWatcher)
        assert container.file_watcher is watcher
        assert watcher.is_running is False

    def test_reset(self, container):
        """Should forget every configured provider."""
        container.document_store
        container.reset()

        with pytest.raises(RuntimeError):
            container.document_store


class TestGlobalContainer:
    """Tests for the global container helpers."""

    def test_reset_container_replaces_instance(self):
        """Should hand out a fresh container after reset."""
        first = get_container()
        first.configure_document_store(InMemoryDocumentStore)

        reset_container()

        assert get_container() is not first
        with pytest.raises(RuntimeError):
            get_container().document_store

"""Tests for scheduler and job registry."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from tasklists.domain.models import EventKind
from tasklists.scheduler.jobs import Job, JobRegistry, create_default_jobs
from tasklists.scheduler.scheduler import JobScheduler


class TestJob:
    """Tests for Job dataclass."""

    def test_job_creation(self):
        """Should create job with required fields."""
        def my_func():
            return "result"

        job = Job(name="test_job", func=my_func, cron="0 * * * *")

        assert job.name == "test_job"
        assert job.func == my_func
        assert job.enabled is True
        assert job.description == ""
        assert job.last_run is None


class TestJobRegistry:
    """Tests for JobRegistry."""

    @pytest.fixture
    def registry(self):
        return JobRegistry()

    def test_register_and_unregister(self, registry):
        """Should register and unregister jobs by name."""
        job = registry.register(name="test", func=lambda: None, cron="0 * * * *")

        assert registry.get("test") == job
        assert registry.unregister("test") is True
        assert registry.get("test") is None
        assert registry.unregister("test") is False

    def test_register_replaces_existing(self, registry):
        """Should replace a job registered under the same name."""
        registry.register(name="test", func=lambda: 1, cron="0 * * * *")
        registry.register(name="test", func=lambda: 2, cron="*/5 * * * *")

        assert len(registry.list_jobs()) == 1
        assert registry.get("test").cron == "*/5 * * * *"

    def test_list_enabled_jobs(self, registry):
        """Should list only enabled jobs."""
        registry.register(name="enabled", func=lambda: None, cron="0 * * * *")
        registry.register(
            name="disabled", func=lambda: None, cron="0 * * * *", enabled=False
        )

        assert [j.name for j in registry.list_enabled()] == ["enabled"]

    @pytest.mark.asyncio
    async def test_run_job_sync(self, registry):
        """Should run a sync job and record the run."""
        registry.register(name="sync_job", func=lambda: {"ran": True}, cron="0 * * * *")

        result = await registry.run_job("sync_job")

        assert result == {"ran": True}
        assert registry.get("sync_job").last_run is not None

    @pytest.mark.asyncio
    async def test_run_job_async(self, registry):
        """Should await coroutine jobs."""
        async def async_func(value):
            return value * 2

        registry.register(name="async_job", func=async_func, cron="0 * * * *", args=(21,))

        assert await registry.run_job("async_job") == 42

    @pytest.mark.asyncio
    async def test_run_nonexistent_job(self, registry):
        """Should raise KeyError for nonexistent job."""
        with pytest.raises(KeyError, match="not found"):
            await registry.run_job("nonexistent")


class TestCreateDefaultJobs:
    """Tests for create_default_jobs function."""

    @pytest.fixture
    def container(self):
        container = MagicMock()
        container.settings.scheduler.poll_cron = "* * * * *"
        container.settings.scheduler.aggregate_cron = "0 * * * *"
        container.watcher.poll = AsyncMock(return_value=["event"])
        container.event_queue.pending = 1
        container.todo_service.update_todos = AsyncMock(return_value="updated")
        container.todo_service.sync_todos = AsyncMock(return_value="synced")
        return container

    @pytest.fixture
    def registry(self, container):
        registry = JobRegistry()
        create_default_jobs(registry, container)
        return registry

    def test_creates_default_jobs(self, registry):
        """Should register polling and refresh jobs, immediate runs disabled."""
        assert {j.name for j in registry.list_jobs()} == {
            "poll_documents",
            "refresh_todos",
            "update_todos",
            "sync_todos",
        }
        assert {j.name for j in registry.list_enabled()} == {
            "poll_documents",
            "refresh_todos",
        }
        assert registry.get("poll_documents").cron == "* * * * *"
        assert registry.get("refresh_todos").cron == "0 * * * *"

    @pytest.mark.asyncio
    async def test_poll_documents(self, registry, container):
        """Should poll the watcher and report the number of changes."""
        assert await registry.run_job("poll_documents") == 1
        container.watcher.poll.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_refresh_todos_queues_event(self, registry, container):
        """Should submit a refresh event instead of running directly."""
        await registry.run_job("refresh_todos")

        event = container.event_queue.submit.call_args.args[0]
        assert event.kind is EventKind.REFRESH
        container.todo_service.update_todos.assert_not_called()

    @pytest.mark.asyncio
    async def test_immediate_jobs(self, registry, container):
        """Should call the service directly."""
        assert await registry.run_job("update_todos") == "updated"
        assert await registry.run_job("sync_todos") == "synced"


class TestJobScheduler:
    """Tests for JobScheduler."""

    @pytest.fixture
    def registry(self):
        return JobRegistry()

    @pytest.fixture
    def scheduler(self, registry):
        return JobScheduler(registry)

    def test_initial_state(self, scheduler, registry):
        """Should start in stopped state."""
        assert scheduler.is_running is False
        assert scheduler.registry is registry

    def test_remove_job(self, scheduler, registry):
        """Should drop a job from the registry."""
        registry.register(name="test", func=lambda: None, cron="0 * * * *")

        assert scheduler.remove_job("test") is True
        assert scheduler.registry.get("test") is None

    @pytest.mark.asyncio
    async def test_run_job_now(self, scheduler, registry):
        """Should run job immediately."""
        async def my_func():
            return "executed"

        registry.register(name="test", func=my_func, cron="0 * * * *")

        assert await scheduler.run_job_now("test") == "executed"

    def test_get_job_status(self, scheduler, registry):
        """Should describe a job."""
        registry.register(
            name="test", func=lambda: None, cron="0 * * * *", description="Test job"
        )

        status = scheduler.get_job_status("test")

        assert status == {
            "name": "test",
            "description": "Test job",
            "cron": "0 * * * *",
            "enabled": True,
            "last_run": None,
        }
        assert scheduler.get_job_status("nonexistent") is None

    @pytest.mark.asyncio
    async def test_start_schedules_enabled_jobs(self, scheduler, registry):
        """Should schedule enabled jobs and report their next run."""
        registry.register(name="on", func=lambda: None, cron="0 * * * *")
        registry.register(name="off", func=lambda: None, cron="0 * * * *", enabled=False)

        scheduler.start()
        try:
            assert scheduler.is_running is True
            statuses = {s["name"]: s for s in scheduler.list_jobs()}
            assert statuses["on"]["next_run"] is not None
            assert "next_run" not in statuses["off"]
            assert scheduler.remove_job("off") is True
        finally:
            scheduler.stop()

        assert scheduler.is_running is False

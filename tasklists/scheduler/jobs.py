"""Job definitions for the scheduler."""

import asyncio
from datetime import datetime
from typing import Callable, Any, Optional
from dataclasses import dataclass, field

from tasklists.domain.models import DocumentEvent, EventKind


@dataclass
class Job:
    """Definition of a scheduled job."""

    name: str
    func: Callable[..., Any]
    cron: str  # Cron expression
    description: str = ""
    enabled: bool = True
    args: tuple = field(default_factory=tuple)
    kwargs: dict = field(default_factory=dict)
    last_run: Optional[datetime] = None


class JobRegistry:
    """Registry for managing scheduled jobs."""

    def __init__(self):
        self._jobs: dict[str, Job] = {}

    def register(
        self,
        name: str,
        func: Callable[..., Any],
        cron: str,
        description: str = "",
        enabled: bool = True,
        args: tuple = (),
        kwargs: Optional[dict] = None,
    ) -> Job:
        """Register a new job, replacing any job with the same name.

        Args:
            name: Unique job name
            func: Function or coroutine function to execute
            cron: Cron expression for scheduling
            description: Job description
            enabled: Whether job is enabled
            args: Positional arguments for func
            kwargs: Keyword arguments for func

        Returns:
            Created Job instance
        """
        job = Job(
            name=name,
            func=func,
            cron=cron,
            description=description,
            enabled=enabled,
            args=args,
            kwargs=kwargs or {},
        )
        self._jobs[name] = job
        return job

    def unregister(self, name: str) -> bool:
        """Unregister a job by name, False if not found."""
        if name in self._jobs:
            del self._jobs[name]
            return True
        return False

    def get(self, name: str) -> Optional[Job]:
        return self._jobs.get(name)

    def list_jobs(self) -> list[Job]:
        return list(self._jobs.values())

    def list_enabled(self) -> list[Job]:
        return [job for job in self._jobs.values() if job.enabled]

    async def run_job(self, name: str) -> Any:
        """Run a job immediately.

        Raises:
            KeyError: If job not found
        """
        job = self._jobs.get(name)
        if not job:
            raise KeyError(f"Job not found: {name}")

        result = job.func(*job.args, **job.kwargs)
        if asyncio.iscoroutine(result):
            result = await result

        job.last_run = datetime.now()
        return result


def create_default_jobs(registry: JobRegistry, container) -> None:
    """Create default jobs for task list aggregation.

    Polling and refresh jobs only enqueue events, so scheduled runs go
    through the same serialized queue as everything else. The immediate
    jobs hold the shared run lock, so they wait for a queued run in progress.

    Args:
        registry: Job registry to add jobs to
        container: DI container for service access
    """
    scheduler_settings = container.settings.scheduler

    async def poll_documents():
        """Detect changed documents and queue a run."""
        events = await container.watcher.poll()
        return len(events)

    def refresh_todos():
        """Queue a full rebuild of the aggregate document."""
        container.event_queue.submit(DocumentEvent(kind=EventKind.REFRESH, path=""))
        return container.event_queue.pending

    async def update_todos():
        """Rebuild the aggregate document now."""
        return await container.todo_service.update_todos()

    async def sync_todos():
        """Push aggregate marker edits back to their documents now."""
        return await container.todo_service.sync_todos()

    registry.register(
        name="poll_documents",
        func=poll_documents,
        cron=scheduler_settings.poll_cron,
        description="Poll the vault for changed documents",
    )

    registry.register(
        name="refresh_todos",
        func=refresh_todos,
        cron=scheduler_settings.aggregate_cron,
        description="Queue a full rebuild of the aggregate document",
    )

    registry.register(
        name="update_todos",
        func=update_todos,
        cron=scheduler_settings.aggregate_cron,
        description="Rebuild the aggregate document immediately",
        enabled=False,
    )

    registry.register(
        name="sync_todos",
        func=sync_todos,
        cron=scheduler_settings.aggregate_cron,
        description="Sync aggregate edits back to source documents",
        enabled=False,
    )

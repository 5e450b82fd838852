"""Cron scheduling of registry jobs with APScheduler."""

from typing import Any, Optional
import logging

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from .jobs import JobRegistry, Job

logger = logging.getLogger(__name__)


class JobScheduler:
    """Fire enabled registry jobs on their cron expressions.

    Jobs run on the asyncio loop that was running when ``start`` was
    called. A job still running when its next fire time comes is skipped
    rather than started twice.
    """

    def __init__(self, registry: JobRegistry, timezone: str = "UTC") -> None:
        self._registry = registry
        self._timezone = timezone
        self._scheduler: Optional[AsyncIOScheduler] = None

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None

    @property
    def registry(self) -> JobRegistry:
        return self._registry

    def start(self) -> None:
        """Schedule every enabled job. Needs a running event loop."""
        if self._scheduler is not None:
            logger.warning("Scheduler already running")
            return

        scheduler = AsyncIOScheduler(timezone=self._timezone)
        for job in self._registry.list_enabled():
            self._schedule(scheduler, job)
        scheduler.start()
        self._scheduler = scheduler
        logger.info(f"Scheduler started with {len(scheduler.get_jobs())} job(s)")

    def stop(self) -> None:
        if self._scheduler is None:
            return
        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("Scheduler stopped")

    def _schedule(self, scheduler: AsyncIOScheduler, job: Job) -> None:
        async def fire():
            try:
                result = await self._registry.run_job(job.name)
            except Exception as e:
                logger.error(f"Job {job.name} failed: {e}")
                raise
            logger.debug(f"Job {job.name} completed: {result}")

        scheduler.add_job(
            fire,
            trigger=CronTrigger.from_crontab(job.cron, timezone=self._timezone),
            id=job.name,
            name=job.description or job.name,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        logger.debug(f"Scheduled {job.name} at '{job.cron}'")

    def remove_job(self, name: str) -> bool:
        """Unschedule a job and drop it from the registry."""
        if self._scheduler is not None:
            try:
                self._scheduler.remove_job(name)
            except JobLookupError:
                logger.debug(f"Job {name} was not scheduled")
        return self._registry.unregister(name)

    async def run_job_now(self, name: str) -> Any:
        return await self._registry.run_job(name)

    def get_job_status(self, name: str) -> Optional[dict]:
        """Describe a job, with its next fire time while running."""
        job = self._registry.get(name)
        if job is None:
            return None

        status = {
            "name": job.name,
            "description": job.description,
            "cron": job.cron,
            "enabled": job.enabled,
            "last_run": job.last_run.isoformat() if job.last_run else None,
        }
        scheduled = self._scheduler.get_job(name) if self._scheduler else None
        if scheduled is not None and scheduled.next_run_time:
            status["next_run"] = scheduled.next_run_time.isoformat()
        return status

    def list_jobs(self) -> list[dict]:
        return [self.get_job_status(job.name) for job in self._registry.list_jobs()]

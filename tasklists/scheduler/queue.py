"""Serialized queue turning change notifications into runs."""

from typing import Any, Awaitable, Callable, Optional, Sequence
import asyncio
import logging

from tasklists.domain.models import DocumentEvent


logger = logging.getLogger(__name__)


EventHandler = Callable[[Sequence[DocumentEvent]], Awaitable[Any]]


class EventQueue:
    """Queue of document events consumed by a single worker.

    Runs never overlap. Events that pile up while a run is in progress are
    folded into the next run, since every run rebuilds the aggregate from
    scratch anyway.
    """

    def __init__(self, handler: EventHandler) -> None:
        self._handler = handler
        self._queue: asyncio.Queue[Optional[DocumentEvent]] = asyncio.Queue()
        self._worker: Optional[asyncio.Task] = None
        self.runs = 0

    @property
    def is_running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    @property
    def pending(self) -> int:
        """Number of events waiting for the worker."""
        return self._queue.qsize()

    def submit(self, event: DocumentEvent) -> None:
        """Enqueue an event without waiting."""
        logger.debug(f"Queued {event.kind.value} event for {event.path!r}")
        self._queue.put_nowait(event)

    def start(self) -> None:
        """Start the worker on the running event loop."""
        if self.is_running:
            logger.warning("Event queue already running")
            return
        self._worker = asyncio.get_running_loop().create_task(self._run())
        logger.info("Event queue started")

    async def stop(self) -> None:
        """Process what is already queued, then stop the worker."""
        if not self.is_running:
            return
        self._queue.put_nowait(None)
        await self._worker
        self._worker = None
        logger.info("Event queue stopped")

    async def join(self) -> None:
        """Wait until every submitted event has been handled."""
        await self._queue.join()

    def _drain(self, batch: list[DocumentEvent]) -> bool:
        """Move already queued events into batch; True if a stop was queued."""
        stop = False
        while True:
            try:
                event = self._queue.get_nowait()
            except asyncio.QueueEmpty:
                return stop
            self._queue.task_done()
            if event is None:
                stop = True
            else:
                batch.append(event)

    async def _run(self) -> None:
        while True:
            event = await self._queue.get()
            if event is None:
                self._queue.task_done()
                return

            batch = [event]
            stop = self._drain(batch)
            if len(batch) > 1:
                logger.debug(f"Folded {len(batch)} events into one run")
            try:
                await self._handler(batch)
                self.runs += 1
            except Exception:
                logger.exception(f"Run for {len(batch)} event(s) failed")
            finally:
                self._queue.task_done()

            if stop:
                return

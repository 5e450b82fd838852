"""Scheduler module for background runs."""

from .scheduler import JobScheduler
from .jobs import JobRegistry
from .queue import EventQueue
from .watcher import DocumentWatcher

__all__ = ["JobScheduler", "JobRegistry", "EventQueue", "DocumentWatcher"]

"""Configuration module."""

from .settings import (
    AppSettings,
    TaskListsSettings,
    SchedulerSettings,
    get_settings,
    clear_settings_cache,
)

__all__ = [
    "AppSettings",
    "TaskListsSettings",
    "SchedulerSettings",
    "get_settings",
    "clear_settings_cache",
]

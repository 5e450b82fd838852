"""Application settings using Pydantic."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tasklists.domain.models import TaskType


class TaskListsSettings(BaseSettings):
    """Task list aggregation configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TASK_LISTS_",
        extra="ignore",
    )

    # Vault served by the filesystem document store
    root_dir: str = Field(default=".")
    document_extension: str = Field(default=".md")

    todo_filename: str = Field(default="TODO.md")
    # A line equal to this excludes the whole document
    exclude_file_pattern: str = Field(default="<!-- exclude TODO -->")
    # A file with this name excludes its folder and all subfolders
    exclude_folder_filename: str = Field(default=".exclude_todos")

    include_not_started: bool = Field(default=True)
    include_in_progress: bool = Field(default=True)
    include_wont_do: bool = Field(default=False)
    include_done: bool = Field(default=False)

    # Heading label: full path instead of the document name
    use_full_filepath: bool = Field(default=False)

    def included_task_types(self) -> frozenset[TaskType]:
        """Task types that appear in the aggregate document."""
        toggles = {
            TaskType.NOT_STARTED: self.include_not_started,
            TaskType.IN_PROGRESS: self.include_in_progress,
            TaskType.WONT_DO: self.include_wont_do,
            TaskType.DONE: self.include_done,
        }
        return frozenset(t for t, enabled in toggles.items() if enabled)


class SchedulerSettings(BaseSettings):
    """Scheduler configuration."""

    model_config = SettingsConfigDict(env_prefix="SCHEDULER_", extra="ignore")

    enabled: bool = Field(default=True)
    timezone: str = Field(default="UTC")
    poll_cron: str = Field(default="* * * * *")  # Every minute
    aggregate_cron: str = Field(default="0 * * * *")  # Every hour


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = Field(default=False)
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000)
    log_level: str = Field(default="INFO")

    # Nested settings - manually create to avoid env prefix issues
    @property
    def task_lists(self) -> TaskListsSettings:
        return TaskListsSettings()

    @property
    def scheduler(self) -> SchedulerSettings:
        return SchedulerSettings()


@lru_cache
def get_settings() -> AppSettings:
    """Get cached application settings."""
    return AppSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()

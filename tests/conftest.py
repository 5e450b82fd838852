"""Shared pytest fixtures."""

import pytest

from tasklists.config.settings import TaskListsSettings
from tasklists.repositories.memory import InMemoryDocumentStore


@pytest.fixture
def settings() -> TaskListsSettings:
    """Aggregation settings with the default values, ignoring the environment."""
    return TaskListsSettings(
        _env_file=None,
        root_dir=".",
        todo_filename="TODO.md",
        exclude_file_pattern="<!-- exclude TODO -->",
        exclude_folder_filename=".exclude_todos",
        include_not_started=True,
        include_in_progress=True,
        include_wont_do=False,
        include_done=False,
        use_full_filepath=False,
    )


@pytest.fixture
def store() -> InMemoryDocumentStore:
    """Create an empty in-memory document store."""
    return InMemoryDocumentStore()

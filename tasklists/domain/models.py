"""Domain models for task list aggregation."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import posixpath


INDENT_UNIT = "    "


def normalize_path(path: str) -> str:
    """Store-relative form of a path: no leading, trailing or doubled slashes."""
    return "/".join(part for part in path.replace("\\", "/").split("/") if part)


def join_path(folder: str, name: str) -> str:
    return normalize_path(f"{folder}/{name}")


class TaskType(Enum):
    """Task status values, keyed by their checkbox marker."""

    NOT_STARTED = " "
    IN_PROGRESS = "."
    WONT_DO = "~"
    DONE = "x"

    @property
    def marker(self) -> str:
        return self.value

    @classmethod
    def from_marker(cls, marker: str) -> Optional["TaskType"]:
        """Map a marker character to a TaskType, None if unknown."""
        try:
            return cls(marker)
        except ValueError:
            return None


class EventKind(Enum):
    """Kinds of document store change notifications."""

    CREATED = "created"
    DELETED = "deleted"
    RENAMED = "renamed"
    MODIFIED = "modified"
    # Scheduled full rebuild, not tied to a document
    REFRESH = "refresh"


@dataclass(frozen=True)
class DocumentRef:
    """Reference to a document or folder in the document store.

    Paths are store-relative and "/"-separated. The store root itself has
    no ref, so top-level documents carry ``parent=None``.
    """

    path: str
    parent: Optional["DocumentRef"] = None
    created_at: float = 0.0
    modified_at: float = 0.0
    is_folder: bool = False

    @property
    def name(self) -> str:
        """Last path component, extension included."""
        return posixpath.basename(self.path)

    @property
    def display_name(self) -> str:
        """Name without its extension."""
        if self.is_folder:
            return self.name
        return posixpath.splitext(self.name)[0]

    def __str__(self) -> str:
        return self.path


@dataclass
class Todo:
    """A single task line occurrence."""

    marker: str
    text: str
    line_number: int = 0
    indentation: str = ""
    document: Optional[DocumentRef] = None

    @property
    def task(self) -> Optional[TaskType]:
        return TaskType.from_marker(self.marker)


@dataclass(frozen=True)
class TodoDocument:
    """A scanned document that survived exclusion, with its contents."""

    document: DocumentRef
    contents: str


@dataclass
class TodoGroup:
    """Todos of one source document inside the aggregate."""

    path: str
    label: str
    todos: list[Todo] = field(default_factory=list)


@dataclass
class AggregateDocument:
    """The generated summary, one group per source document."""

    groups: list[TodoGroup] = field(default_factory=list)

    @property
    def todo_count(self) -> int:
        return sum(len(g.todos) for g in self.groups)

    def by_path(self) -> dict[str, list[Todo]]:
        """Mapping of source path to its todos."""
        return {g.path: g.todos for g in self.groups}


@dataclass(frozen=True)
class DocumentEvent:
    """Change notification from the document store."""

    kind: EventKind
    path: str
    old_path: Optional[str] = None


@dataclass
class AggregateResult:
    """Result of an aggregation run."""

    documents_scanned: int = 0
    groups: int = 0
    todos: int = 0
    changed: bool = False


@dataclass
class SyncResult:
    """Result of a reverse sync run."""

    documents_patched: int = 0
    lines_patched: int = 0
    skipped_paths: list[str] = field(default_factory=list)

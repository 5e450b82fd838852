"""Build and render the aggregate document."""

from typing import Iterable, Optional
import logging

from tasklists.domain.models import (
    AggregateDocument,
    DocumentRef,
    TaskType,
    Todo,
    TodoGroup,
)
from tasklists.domain.protocols import DocumentStore
from tasklists.parsers.aggregate_parser import format_heading, format_todo


logger = logging.getLogger(__name__)


class TodoAggregator:
    """Filter, order, group and render todos from many documents."""

    def __init__(
        self,
        store: DocumentStore,
        included: Iterable[TaskType],
        use_full_filepath: bool = False,
    ) -> None:
        """Initialize aggregator.

        Args:
            store: Store the aggregate document is written to
            included: Task types that appear in the aggregate
            use_full_filepath: Label headings with the path instead of the name
        """
        self._store = store
        self._included = frozenset(included)
        self._use_full_filepath = use_full_filepath

    def is_included(self, todo: Todo) -> bool:
        """True for todos of an enabled task type; unknown markers never are."""
        return todo.task is not None and todo.task in self._included

    def label_for(self, document: DocumentRef) -> str:
        """Heading label: the display name, or the full path if configured."""
        return document.path if self._use_full_filepath else document.display_name

    def build(self, todos: Iterable[Todo]) -> AggregateDocument:
        """Group included todos by document, oldest document first.

        Raises:
            ValueError: If a todo has no owning document
        """
        todos = list(todos)
        for todo in todos:
            if todo.document is None:
                raise ValueError(f"Todo on line {todo.line_number} has no document")

        # sorted() is stable: ties keep input order
        ordered = sorted(todos, key=lambda t: t.document.created_at)

        aggregate = AggregateDocument()
        groups: dict[str, TodoGroup] = {}
        for todo in ordered:
            if not self.is_included(todo):
                continue
            group = groups.get(todo.document.path)
            if group is None:
                group = TodoGroup(
                    path=todo.document.path,
                    label=self.label_for(todo.document),
                )
                groups[group.path] = group
                aggregate.groups.append(group)
            group.todos.append(todo)

        return aggregate

    def render(self, aggregate: AggregateDocument) -> str:
        """Render the aggregate's canonical text."""
        parts: list[str] = []
        for group in aggregate.groups:
            parts.append(format_heading(group.label, group.path))
            parts.extend(format_todo(todo) for todo in group.todos)
        return "".join(parts)

    async def save(
        self,
        aggregate_document: DocumentRef,
        todos: Iterable[Todo],
        current: Optional[str] = None,
    ) -> tuple[AggregateDocument, bool]:
        """Rebuild the aggregate and overwrite the aggregate document.

        Args:
            aggregate_document: Ref of the document to overwrite
            todos: Todos from every scanned document
            current: Current aggregate text; the write is skipped when equal

        Returns:
            The built aggregate and whether the document was written
        """
        aggregate = self.build(todos)
        data = self.render(aggregate)

        if current is not None and current == data:
            logger.debug(f"{aggregate_document.path} already up to date")
            return aggregate, False

        await self._store.write(aggregate_document, data)
        return aggregate, True

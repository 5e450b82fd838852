"""Extract todos from a document's text."""

from typing import Optional
import re

from tasklists.domain.models import INDENT_UNIT, DocumentRef, Todo
from .line_parser import match_task_line


LINE_BREAK_PATTERN = re.compile(r"\r\n|\r|\n")


def split_lines(contents: str) -> list[str]:
    """Split text on CRLF, CR or LF."""
    return LINE_BREAK_PATTERN.split(contents)


class TodoParser:
    """Parse task lines and rebuild their nesting depth.

    Nesting comes from physical adjacency only: a task line nests under the
    task line directly above it when it is indented further. Anything else,
    including a task line after a plain bullet or prose, starts at depth 0.
    """

    def __init__(self, indent_unit: str = INDENT_UNIT) -> None:
        self._indent_unit = indent_unit

    def parse(
        self, contents: str, document: Optional[DocumentRef] = None
    ) -> list[Todo]:
        """Parse all task lines from contents.

        Args:
            contents: Full document text
            document: Optional owning document assigned to every todo

        Returns:
            Todos in source order with canonical indentation
        """
        todos: list[Todo] = []
        previous: Optional[Todo] = None
        previous_raw = ""

        for line_number, line in enumerate(split_lines(contents)):
            match = match_task_line(line)
            if match is None:
                continue

            indentation = ""
            if (
                previous is not None
                and previous.line_number == line_number - 1
                and len(match.indentation) > len(previous_raw)
            ):
                indentation = previous.indentation + self._indent_unit

            todo = Todo(
                marker=match.marker,
                text=match.text,
                line_number=line_number,
                indentation=indentation,
                document=document,
            )
            todos.append(todo)
            previous = todo
            previous_raw = match.indentation

        return todos


def parse_todos(contents: str, document: Optional[DocumentRef] = None) -> list[Todo]:
    """Parse todos with the default indentation unit."""
    return TodoParser().parse(contents, document)

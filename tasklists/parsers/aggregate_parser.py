"""Parse a generated aggregate document back into groups."""

from typing import Optional
from urllib.parse import quote, unquote
import re

from tasklists.domain.models import AggregateDocument, Todo, TodoGroup
from .line_parser import match_task_line
from .todo_parser import split_lines


# Characters left alone by ECMAScript encodeURI, besides alphanumerics and "_.-~"
LINK_SAFE_CHARS = "/;,?:@&=+$!*'()#"

HEADING_PATTERN = re.compile(r"^- \[(?P<label>.*)\]\((?P<path>[^\]]*)\)$")


def encode_path(path: str) -> str:
    """Percent-encode a document path for a Markdown link target."""
    return quote(path, safe=LINK_SAFE_CHARS)


def decode_path(encoded: str) -> str:
    """Reverse encode_path."""
    return unquote(encoded)


def format_heading(label: str, path: str) -> str:
    """Heading line linking to a source document, newline included."""
    return f"- [{label}]({encode_path(path)})\n"


def format_todo(todo: Todo) -> str:
    """Tab-prefixed aggregate line keeping the canonical indentation."""
    return f"\t{todo.indentation}- [{todo.marker}] {todo.text}\n"


def match_heading(line: str) -> Optional[tuple[str, str]]:
    """Return (label, decoded path) for a heading line, None otherwise."""
    # "- [ ] see [doc](doc.md)" is a task line, not a heading
    if match_task_line(line) is not None:
        return None
    match = HEADING_PATTERN.match(line)
    if match is None:
        return None
    return match.group("label"), decode_path(match.group("path"))


class AggregateParser:
    """Parse aggregate text into per-document todo groups.

    Indentation is carried through literally, minus the leading tab every
    aggregate task line starts with. Task lines before the first heading
    belong to no document and are dropped.
    """

    def parse(self, contents: str) -> AggregateDocument:
        aggregate = AggregateDocument()
        groups: dict[str, TodoGroup] = {}
        current: Optional[TodoGroup] = None

        for line_number, line in enumerate(split_lines(contents)):
            heading = match_heading(line)
            if heading is not None:
                label, path = heading
                current = groups.get(path)
                if current is None:
                    current = TodoGroup(path=path, label=label)
                    groups[path] = current
                    aggregate.groups.append(current)
                continue

            if current is None:
                continue

            match = match_task_line(line)
            if match is None:
                continue

            indentation = match.indentation
            if indentation.startswith("\t"):
                indentation = indentation[1:]

            current.todos.append(
                Todo(
                    marker=match.marker,
                    text=match.text,
                    line_number=line_number,
                    indentation=indentation,
                )
            )

        return aggregate

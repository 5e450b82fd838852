"""Checkbox task line matcher."""

from dataclasses import dataclass
from typing import Optional
import re


TASK_LINE_PATTERN = re.compile(
    r"^(?P<indentation>\s*)-\s?\[(?P<marker>.)\]\s+(?P<text>.*)$"
)


@dataclass(frozen=True)
class TaskLineMatch:
    """Pieces of a recognized task line."""

    indentation: str
    marker: str
    text: str
    marker_start: int
    marker_end: int


def match_task_line(line: str) -> Optional[TaskLineMatch]:
    """Recognize a checkbox task line.

    The marker is any single character; unknown markers are returned as-is.

    Args:
        line: One line of text, without its line ending

    Returns:
        TaskLineMatch if the line is a task line, None otherwise
    """
    match = TASK_LINE_PATTERN.match(line)
    if match is None:
        return None
    return TaskLineMatch(
        indentation=match.group("indentation"),
        marker=match.group("marker"),
        text=match.group("text"),
        marker_start=match.start("marker"),
        marker_end=match.end("marker"),
    )


def replace_marker(line: str, marker: str) -> Optional[str]:
    """Swap the bracketed marker of a task line, None if not a task line."""
    match = match_task_line(line)
    if match is None:
        return None
    return line[: match.marker_start] + marker + line[match.marker_end :]

"""Parsers for task lines, documents and the aggregate document."""

from .line_parser import TaskLineMatch, match_task_line, replace_marker
from .todo_parser import TodoParser, parse_todos, split_lines
from .aggregate_parser import AggregateParser, encode_path, decode_path

__all__ = [
    "TaskLineMatch",
    "match_task_line",
    "replace_marker",
    "TodoParser",
    "parse_todos",
    "split_lines",
    "AggregateParser",
    "encode_path",
    "decode_path",
]

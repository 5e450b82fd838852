"""Tests for parsing the aggregate document."""

from tasklists.domain.models import TaskType
from tasklists.parsers.aggregate_parser import (
    AggregateParser,
    decode_path,
    encode_path,
    match_heading,
)


class TestPathEncoding:
    """Tests for link target encoding."""

    def test_encodes_like_encode_uri(self):
        """Should encode spaces and non-ASCII but keep URI punctuation."""
        path = "/Folder/Tasks & Porpoises \U0001F42C.md"

        assert encode_path(path) == "/Folder/Tasks%20&%20Porpoises%20%F0%9F%90%AC.md"

    def test_keeps_parentheses(self):
        """Should leave parentheses alone."""
        assert encode_path("Notes (old).md") == "Notes%20(old).md"

    def test_encodes_brackets(self):
        """Should encode square brackets so headings stay parseable."""
        assert encode_path("a[1].md") == "a%5B1%5D.md"

    def test_decode_reverses_encode(self):
        """Should decode back to the original path."""
        path = "Projects/Q3 plan – draft.md"

        assert decode_path(encode_path(path)) == path


class TestMatchHeading:
    """Tests for match_heading."""

    def test_matches_heading(self):
        """Should return label and decoded path."""
        assert match_heading("- [My Notes](Folder/My%20Notes.md)") == (
            "My Notes",
            "Folder/My Notes.md",
        )

    def test_ignores_task_lines(self):
        """Should not treat a task line as a heading."""
        assert match_heading("\t- [ ] see [doc](doc.md)") is None
        assert match_heading("- [ ] see [doc](doc.md)") is None


class TestAggregateParser:
    """Tests for AggregateParser."""

    def test_groups_task_lines_under_headings(self):
        """Should attach task lines to the preceding heading's path."""
        content = (
            "- [Old](Old.md)\n"
            "\t- [ ] Old TODO\n"
            "\t    - [x] Old child\n"
            "- [New](Folder/New%20File.md)\n"
            "\t- [.] New TODO\n"
        )

        aggregate = AggregateParser().parse(content)

        assert [g.path for g in aggregate.groups] == ["Old.md", "Folder/New File.md"]
        assert [g.label for g in aggregate.groups] == ["Old", "New"]
        old, new = aggregate.groups
        assert [(t.marker, t.text, t.indentation) for t in old.todos] == [
            (" ", "Old TODO", ""),
            ("x", "Old child", "    "),
        ]
        assert new.todos[0].task == TaskType.IN_PROGRESS

    def test_ignores_lines_before_first_heading(self):
        """Should drop task lines that belong to no document."""
        aggregate = AggregateParser().parse("- [ ] orphan\n- [A](A.md)\n\t- [ ] a\n")

        assert aggregate.by_path() == {"A.md": aggregate.groups[0].todos}
        assert [t.text for t in aggregate.groups[0].todos] == ["a"]

    def test_ignores_noise(self):
        """Should skip blank lines and prose."""
        aggregate = AggregateParser().parse("- [A](A.md)\n\nsome note\n\t- [ ] a\n")

        assert aggregate.todo_count == 1

    def test_repeated_heading_merges(self):
        """Should merge todos when the same path appears twice."""
        content = "- [A](A.md)\n\t- [ ] one\n- [A](A.md)\n\t- [ ] two\n"

        aggregate = AggregateParser().parse(content)

        assert len(aggregate.groups) == 1
        assert [t.text for t in aggregate.groups[0].todos] == ["one", "two"]

    def test_empty_content(self):
        """Should return no groups for an empty aggregate."""
        assert AggregateParser().parse("").groups == []

"""Tests for the plain, pretty and JSON renderers."""

import io
import json
from datetime import datetime, timezone

import pytest
from rich.console import Console

from prreview_core.models import Comment, PullSummary, ReviewThread
from prreview_core.render import (
    JsonRenderer,
    PlainRenderer,
    PrettyRenderer,
    RenderOptions,
    get_renderer,
    truncate,
)

CREATED = datetime(2025, 1, 2, 9, 30, tzinfo=timezone.utc)


def _console():
    return Console(file=io.StringIO(), width=200, color_system=None)


def _output(renderer):
    return renderer.console.file.getvalue()


def _comment(**kwargs):
    defaults = {
        "id": "C1",
        "author": "alice",
        "body": "Please rename this variable\nIt shadows a builtin.",
        "created_at": CREATED,
        "updated_at": CREATED,
        "url": "https://github.com/o/r/pull/1#discussion_r1",
        "path": "src/app.py",
        "line": 12,
    }
    defaults.update(kwargs)
    return Comment(**defaults)


def _thread(**kwargs):
    defaults = {
        "id": "PRRT_1",
        "is_resolved": False,
        "is_outdated": False,
        "path": "src/app.py",
        "line": 12,
        "comments": [_comment()],
    }
    defaults.update(kwargs)
    return ReviewThread(**defaults)


class TestTruncate:
    def test_short_text_unchanged(self):
        assert truncate("short", 80) == "short"

    def test_long_text_cut_with_ellipsis(self):
        result = truncate("x" * 100, 20)
        assert result == "x" * 17 + "..."
        assert len(result) == 20

    def test_only_first_line(self):
        assert truncate("first\nsecond", 80) == "first"


class TestPlainRenderer:
    def test_thread_block(self):
        renderer = PlainRenderer(_console())
        renderer.thread(_thread())
        lines = _output(renderer).splitlines()

        assert lines[0] == "---"
        assert "Thread ID: PRRT_1" in lines
        assert "Resolved: false" in lines
        assert "Path: src/app.py" in lines
        assert "Line: 12" in lines
        assert "Comments: 1" in lines
        assert (
            "  Author: alice | Created: 2025-01-02T09:30:00Z | Body: Please rename this variable It shadows a builtin."
            in lines
        )

    def test_general_thread_without_line(self):
        renderer = PlainRenderer(_console())
        renderer.thread(_thread(path=None, line=None, comments=[]))
        out = _output(renderer)
        assert "Path: (general)" in out
        assert "Line: N/A" in out
        assert "Comments: 0" in out

    def test_comment_block(self):
        renderer = PlainRenderer(_console())
        renderer.comment(_comment(author=None))
        lines = _output(renderer).splitlines()
        assert "Comment ID: C1" in lines
        assert "Updated: 2025-01-02T09:30:00Z" in lines
        assert "User: ghost" in lines
        assert "URL: https://github.com/o/r/pull/1#discussion_r1" in lines

    def test_square_brackets_not_treated_as_markup(self):
        renderer = PlainRenderer(_console())
        renderer.comment(_comment(body="[bold]not markup[/bold]"))
        assert "Body: [bold]not markup[/bold]" in _output(renderer)


class TestPrettyRenderer:
    def test_thread_summary_line(self):
        renderer = PrettyRenderer(_console(), RenderOptions(color=False))
        renderer.thread(_thread())
        out = _output(renderer)
        assert "📁 src/app.py:12" in out
        assert "❌ unresolved" in out
        assert "✓ Current" in out
        assert "💬 1 comment(s)" in out
        assert '@alice 2025-01-02: "Please rename this variable"' in out

    def test_resolved_and_outdated(self):
        renderer = PrettyRenderer(_console(), RenderOptions(color=False))
        renderer.thread(_thread(is_resolved=True, is_outdated=True))
        out = _output(renderer)
        assert "✅ resolved" in out
        assert "OUTDATED" in out

    def test_zero_comment_thread(self):
        renderer = PrettyRenderer(_console(), RenderOptions(color=False))
        renderer.thread(_thread(path=None, line=None, comments=[]))
        out = _output(renderer)
        assert "general:N/A" in out
        assert "(no comments)" in out

    def test_body_truncated_to_option_width(self):
        renderer = PrettyRenderer(_console(), RenderOptions(color=False, truncate=10))
        renderer.thread(_thread(comments=[_comment(body="abcdefghijklmnop")]))
        assert '"abcdefg..."' in _output(renderer)

    def test_markup_in_body_printed_literally(self):
        renderer = PrettyRenderer(_console(), RenderOptions(color=False))
        renderer.thread(_thread(comments=[_comment(body="use [red]x[/red]")]))
        assert "use [red]x[/red]" in _output(renderer)

    def test_thread_counts(self):
        renderer = PrettyRenderer(_console(), RenderOptions(color=False))
        renderer.thread_counts(5, 3, 2)
        out = _output(renderer)
        assert "Total: 5 threads" in out
        assert "3 resolved" in out
        assert "2 unresolved" in out


class TestJsonRenderer:
    def test_thread_record(self):
        renderer = JsonRenderer(_console())
        renderer.thread(_thread())
        record = json.loads(_output(renderer).strip())
        assert record["type"] == "thread"
        assert record["id"] == "PRRT_1"
        assert record["display_line"] == 12
        assert record["comments"][0]["created_at"] == "2025-01-02T09:30:00Z"

    def test_one_record_per_line(self):
        renderer = JsonRenderer(_console())
        renderer.heading("ignored")
        renderer.comment(_comment(id="C1"))
        renderer.comment(_comment(id="C2"))
        renderer.note("ignored")
        lines = _output(renderer).splitlines()
        assert [json.loads(line)["id"] for line in lines] == ["C1", "C2"]

    def test_pull_summary_record(self):
        renderer = JsonRenderer(_console())
        renderer.pull_summary(PullSummary(1, "Title", None, "OPEN", None, "https://x"))
        record = json.loads(_output(renderer))
        assert record == {
            "type": "pull_request",
            "number": 1,
            "title": "Title",
            "author": None,
            "state": "OPEN",
            "review_decision": None,
            "url": "https://x",
        }


class TestGetRenderer:
    @pytest.mark.parametrize("fmt, cls", [("plain", PlainRenderer), ("pretty", PrettyRenderer), ("json", JsonRenderer)])
    def test_known_formats(self, fmt, cls):
        assert isinstance(get_renderer(fmt, _console()), cls)

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="xml"):
            get_renderer("xml", _console())

    def test_styles_from_config(self):
        options = RenderOptions.from_config({"color": False, "truncate": 40, "styles": {"path": "magenta"}})
        assert options.color is False
        assert options.truncate == 40
        assert options.styles["path"] == "magenta"
        assert options.styles["author"] == "cyan"

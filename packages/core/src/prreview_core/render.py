"""Output renderers for threads, comments and PR summaries.

One renderer per output format, picked by name with get_renderer(). Colours
and truncation come from a RenderOptions object handed to the renderer, so
two renderers in the same process can be configured differently.

  plain  : "---" separated key/value blocks, one line per field
  pretty : rich styles and emoji markers, first body line truncated
  json   : one JSON object per line (JSON Lines), headings suppressed
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from rich.console import Console
from rich.text import Text

from prreview_core.models import GENERAL_PATH, NOT_AVAILABLE, Comment, PullSummary, ReviewThread

DEFAULT_STYLES: dict[str, str] = {
    "heading": "bold",
    "rule": "dim",
    "path": "bold yellow",
    "author": "cyan",
    "timestamp": "yellow",
    "url": "blue",
    "resolved": "green",
    "unresolved": "red",
    "outdated": "yellow",
    "current": "green",
    "muted": "dim",
}


@dataclass
class RenderOptions:
    color: bool = True
    truncate: int = 80
    styles: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_STYLES))

    @classmethod
    def from_config(cls, config: dict) -> RenderOptions:
        styles = dict(DEFAULT_STYLES)
        styles.update(config.get("styles") or {})
        return cls(color=bool(config.get("color", True)), truncate=int(config.get("truncate", 80)), styles=styles)


def truncate(text: str, width: int) -> str:
    """Return the first line of text, cut to width characters with a '...' suffix."""
    first = text.replace("\r", "").split("\n", 1)[0]
    if width > 3 and len(first) > width:
        return first[: width - 3] + "..."
    return first


def flatten(text: str) -> str:
    return text.replace("\r", "").replace("\n", " ")


def _date(comment: Comment) -> str:
    return comment.created_at.strftime("%Y-%m-%d")


def _timestamp(value) -> str:
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


class Renderer(ABC):
    def __init__(self, console: Console, options: RenderOptions | None = None):
        self.console = console
        self.options = options or RenderOptions()

    @abstractmethod
    def thread(self, thread: ReviewThread) -> None:
        """Render one review thread with its comments."""

    @abstractmethod
    def comment(self, comment: Comment) -> None:
        """Render one comment."""

    @abstractmethod
    def pull_summary(self, summary: PullSummary) -> None:
        """Render the headline fields of a pull request."""

    @abstractmethod
    def thread_counts(self, total: int, resolved: int, unresolved: int) -> None:
        """Render the resolved/unresolved breakdown."""

    def heading(self, text: str) -> None:
        self._line(text)

    def note(self, text: str) -> None:
        self._line(text)

    def _line(self, text: str) -> None:
        self.console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)


class PlainRenderer(Renderer):
    def thread(self, thread: ReviewThread) -> None:
        self._line("---")
        self._line(f"Thread ID: {thread.id}")
        self._line(f"Resolved: {str(thread.is_resolved).lower()}")
        self._line(f"Outdated: {str(thread.is_outdated).lower()}")
        self._line(f"Path: {thread.path or '(' + GENERAL_PATH + ')'}")
        self._line(f"Line: {thread.display_line}")
        self._line(f"Comments: {thread.comment_count}")
        for c in thread.comments:
            self._line(
                f"  Author: {c.display_author} | Created: {_timestamp(c.created_at)} | Body: {flatten(c.body)}"
            )

    def comment(self, comment: Comment) -> None:
        self._line("---")
        self._line(f"Comment ID: {comment.id}")
        self._line(f"Updated: {_timestamp(comment.updated_at)}")
        self._line(f"Path: {comment.path or '(' + GENERAL_PATH + ')'}")
        self._line(f"Line: {comment.line if comment.line is not None else NOT_AVAILABLE}")
        self._line(f"User: {comment.display_author}")
        self._line(f"Body: {flatten(comment.body)}")
        if comment.url:
            self._line(f"URL: {comment.url}")

    def pull_summary(self, summary: PullSummary) -> None:
        self._line(f"PR #{summary.number}: {summary.title}")
        self._line(f"Author: {summary.author or 'ghost'}")
        self._line(f"State: {summary.state}")
        self._line(f"Review Decision: {summary.review_decision or 'PENDING'}")
        self._line(f"URL: {summary.url}")

    def thread_counts(self, total: int, resolved: int, unresolved: int) -> None:
        self._line(f"Total: {total} threads ({resolved} resolved, {unresolved} unresolved)")


class PrettyRenderer(Renderer):
    def _style(self, name: str) -> str:
        if not self.options.color:
            return ""
        return self.options.styles.get(name, "")

    def _print(self, *parts: tuple[str, str] | str) -> None:
        text = Text.assemble(*[(p[0], self._style(p[1])) if isinstance(p, tuple) else p for p in parts])
        self.console.print(text, soft_wrap=True)

    def heading(self, text: str) -> None:
        self._print(("─" * 67, "rule"))
        self._print((text, "heading"))
        self._print(("─" * 67, "rule"))

    def thread(self, thread: ReviewThread) -> None:
        status = ("✅ resolved", "resolved") if thread.is_resolved else ("❌ unresolved", "unresolved")
        freshness = ("⚠️  OUTDATED", "outdated") if thread.is_outdated else ("✓ Current", "current")
        self._print(
            "📁 ",
            (f"{thread.display_path}:{thread.display_line}", "path"),
            "  ",
            status,
            " · ",
            freshness,
            f" · 💬 {thread.comment_count} comment(s)",
        )
        if not thread.comments:
            self._print(("   (no comments)", "muted"))
        for c in thread.comments:
            self._print(
                "   👤 ",
                (f"@{c.display_author}", "author"),
                " ",
                (_date(c), "timestamp"),
                f': "{truncate(c.body, self.options.truncate)}"',
            )
            if c.url:
                self._print("      🔗 ", (c.url, "url"))
        self._print("")

    def comment(self, comment: Comment) -> None:
        where = ""
        if comment.path:
            line = f":{comment.line}" if comment.line is not None else ""
            where = f" on {comment.path}{line}"
        self._print(
            (comment.updated_at.strftime("%Y-%m-%d %H:%M:%S"), "timestamp"),
            "  ",
            (f"@{comment.display_author}", "author"),
            where,
        )
        for body_line in (comment.body.replace("\r", "") or " ").split("\n"):
            self._print(f"  {body_line}")
        if comment.url:
            self._print("  ", (comment.url, "url"))
        self._print("")

    def pull_summary(self, summary: PullSummary) -> None:
        self._print("📌 ", (summary.title, "heading"))
        self._print("👤 Author: ", (summary.author or "ghost", "author"))
        self._print(f"📊 State: {summary.state}")
        self._print(f"✅ Review Decision: {summary.review_decision or 'PENDING'}")
        self._print("🔗 ", (summary.url, "url"))
        self._print("")

    def thread_counts(self, total: int, resolved: int, unresolved: int) -> None:
        self._print(
            f"📊 Total: {total} threads (",
            (f"✅ {resolved} resolved", "resolved"),
            ", ",
            (f"❌ {unresolved} unresolved", "unresolved"),
            ")",
        )
        self._print("")


class JsonRenderer(Renderer):
    def _emit(self, record_type: str, data: dict) -> None:
        self._line(json.dumps({"type": record_type, **data}))

    def heading(self, text: str) -> None:
        pass

    def note(self, text: str) -> None:
        pass

    def thread(self, thread: ReviewThread) -> None:
        self._emit("thread", thread.to_dict())

    def comment(self, comment: Comment) -> None:
        self._emit("comment", comment.to_dict())

    def pull_summary(self, summary: PullSummary) -> None:
        self._emit("pull_request", summary.to_dict())

    def thread_counts(self, total: int, resolved: int, unresolved: int) -> None:
        self._emit("thread_counts", {"total": total, "resolved": resolved, "unresolved": unresolved})


_RENDERERS: dict[str, type[Renderer]] = {
    "plain": PlainRenderer,
    "pretty": PrettyRenderer,
    "json": JsonRenderer,
}


def get_renderer(fmt: str, console: Console, options: RenderOptions | None = None) -> Renderer:
    try:
        renderer_cls = _RENDERERS[fmt]
    except KeyError:
        raise ValueError(f"Unknown output format {fmt!r}. Choose one of: {', '.join(_RENDERERS)}.")
    return renderer_cls(console, options)

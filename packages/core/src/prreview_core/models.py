"""Transient data models for pull-request review data.

Nothing here is persisted: every command re-fetches from GitHub and builds
these objects for the duration of one invocation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

NOT_AVAILABLE = "N/A"
GENERAL_PATH = "general"
GHOST_AUTHOR = "ghost"


@dataclass(frozen=True)
class RepoRef:
    owner: str
    name: str

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.name}"

    @classmethod
    def from_slug(cls, slug: str) -> RepoRef:
        owner, sep, name = slug.strip().partition("/")
        if not owner or not name or sep != "/" or "/" in name:
            raise ValueError(f"Expected owner/name, got {slug!r}")
        return cls(owner=owner, name=name)


@dataclass(frozen=True)
class PullRequestRef:
    repo: RepoRef
    number: int

    def __post_init__(self):
        if self.number <= 0:
            raise ValueError(f"Pull request number must be positive, got {self.number}")

    def __str__(self) -> str:
        return f"{self.repo.slug}#{self.number}"


@dataclass
class Comment:
    """A review comment (anchored to a diff) or a top-level conversation comment."""

    id: str
    author: str | None
    body: str
    created_at: datetime
    updated_at: datetime
    url: str = ""
    path: str | None = None
    line: int | None = None
    kind: str = "review"  # "review" | "conversation"

    @property
    def display_author(self) -> str:
        # Deleted accounts come back with a null author.
        return self.author or GHOST_AUTHOR

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind,
            "author": self.author,
            "body": self.body,
            "created_at": _isoformat(self.created_at),
            "updated_at": _isoformat(self.updated_at),
            "url": self.url,
            "path": self.path,
            "line": self.line,
        }


@dataclass
class ReviewThread:
    id: str
    is_resolved: bool
    is_outdated: bool
    path: str | None = None
    line: int | None = None
    original_line: int | None = None
    start_line: int | None = None
    original_start_line: int | None = None
    comments: list[Comment] = field(default_factory=list)
    total_comments: int | None = None

    @property
    def display_path(self) -> str:
        return self.path or GENERAL_PATH

    @property
    def display_line(self) -> int | str:
        """First known anchor line, falling back to the NOT_AVAILABLE sentinel."""
        for value in (self.line, self.original_line, self.start_line, self.original_start_line):
            if value is not None:
                return value
        return NOT_AVAILABLE

    @property
    def comment_count(self) -> int:
        if self.total_comments is not None:
            return self.total_comments
        return len(self.comments)

    @property
    def first_comment(self) -> Comment | None:
        return self.comments[0] if self.comments else None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "is_resolved": self.is_resolved,
            "is_outdated": self.is_outdated,
            "path": self.path,
            "line": self.line,
            "original_line": self.original_line,
            "start_line": self.start_line,
            "original_start_line": self.original_start_line,
            "display_line": self.display_line,
            "comment_count": self.comment_count,
            "comments": [c.to_dict() for c in self.comments],
        }


@dataclass
class PageInfo:
    has_next_page: bool
    end_cursor: str | None = None


@dataclass
class PullSummary:
    number: int
    title: str
    author: str | None
    state: str
    review_decision: str | None
    url: str

    def to_dict(self) -> dict:
        return {
            "number": self.number,
            "title": self.title,
            "author": self.author,
            "state": self.state,
            "review_decision": self.review_decision,
            "url": self.url,
        }


@dataclass
class IssueCreated:
    title: str
    url: str


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC.

    Raises ValueError on anything unparsable.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    return ensure_utc(parsed)


def ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _isoformat(value: datetime) -> str:
    return ensure_utc(value).isoformat().replace("+00:00", "Z")

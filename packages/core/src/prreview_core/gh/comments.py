"""List pull request comments updated after a cutoff.

The cutoff defaults to the committer date of the PR's last commit, which
answers "what has the reviewer said since I last pushed?".

Comments are compared on ``updated_at``: a comment written before the push
but edited after it is still news to the author.
"""

from __future__ import annotations

import logging
from datetime import datetime

from github import GithubException

from prreview_core.errors import CommentFetchError, TimestampResolutionError
from prreview_core.gh.pull_request import get_last_commit_date
from prreview_core.models import Comment, ensure_utc

logger = logging.getLogger(__name__)


def resolve_since(pr) -> datetime:
    """Return the timestamp of the PR's last commit.

    Raises TimestampResolutionError when the commit list is empty or cannot
    be read.
    """
    try:
        since = get_last_commit_date(pr)
    except GithubException as e:
        raise TimestampResolutionError(f"Could not fetch commits for PR #{pr.number}: {e}") from e
    if since is None:
        raise TimestampResolutionError(f"PR #{pr.number} has no commits; pass --since to set a cutoff.")
    logger.debug("Using last commit timestamp %s as cutoff", since.isoformat())
    return since


def list_comments_since(pr, since: datetime | None = None, include_conversation: bool = False) -> list[Comment]:
    """Return comments whose updated_at is strictly after ``since``, oldest first.

    Review comments are always included; top-level conversation comments
    only when include_conversation is set.
    """
    cutoff = ensure_utc(since) if since is not None else resolve_since(pr)

    try:
        # The API's own `since` is inclusive, so the strict filter below still applies.
        comments = [_from_review_comment(c) for c in pr.get_review_comments(since=cutoff)]
        if include_conversation:
            comments.extend(_from_issue_comment(c) for c in pr.get_issue_comments())
    except GithubException as e:
        raise CommentFetchError(f"Failed to list comments for PR #{pr.number}: {e}") from e

    recent = [c for c in comments if c.updated_at > cutoff]
    recent.sort(key=lambda c: (c.updated_at, c.created_at, c.id))
    return recent


def _login(user) -> str | None:
    return user.login if user is not None else None


def _from_review_comment(c) -> Comment:
    line = c.line if c.line is not None else getattr(c, "original_line", None)
    return Comment(
        id=str(c.id),
        author=_login(c.user),
        body=c.body or "",
        created_at=ensure_utc(c.created_at),
        updated_at=ensure_utc(c.updated_at or c.created_at),
        url=c.html_url or "",
        path=c.path,
        line=line,
        kind="review",
    )


def _from_issue_comment(c) -> Comment:
    return Comment(
        id=str(c.id),
        author=_login(c.user),
        body=c.body or "",
        created_at=ensure_utc(c.created_at),
        updated_at=ensure_utc(c.updated_at or c.created_at),
        url=c.html_url or "",
        kind="conversation",
    )

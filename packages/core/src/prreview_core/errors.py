"""Error taxonomy for prreview.

Every failure that should end a command with a one-line diagnostic derives
from PRReviewError. The CLI layer turns these into click exceptions; the
interactive menu catches them and keeps looping.

FileNotFoundError (missing issue file) is the builtin and is not wrapped.
"""

from __future__ import annotations


class PRReviewError(Exception):
    """Base class for all prreview errors."""


class GhCommandError(PRReviewError):
    """A `gh` or `git` subprocess exited non-zero or could not be started."""

    def __init__(self, cmd: list[str], message: str, returncode: int | None = None):
        self.cmd = cmd
        self.returncode = returncode
        super().__init__(message)


class ContextResolutionError(PRReviewError):
    """Owner, repository or pull request number could not be determined."""


class ThreadFetchError(PRReviewError):
    """Fetching a page of review threads failed or returned a malformed payload."""

    def __init__(self, message: str, page: int):
        self.page = page
        super().__init__(f"{message} (page {page})")


class CommentFetchError(PRReviewError):
    """Listing review or conversation comments failed."""


class TimestampResolutionError(PRReviewError):
    """No commit timestamp is available to use as the comment cutoff."""


class IssueCreateError(PRReviewError):
    """`gh issue create` failed."""

"""Create a GitHub issue from a local Markdown file."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from prreview_core.errors import GhCommandError, IssueCreateError
from prreview_core.gh import cli as gh_cli
from prreview_core.models import IssueCreated

logger = logging.getLogger(__name__)

_SEPARATORS_RE = re.compile(r"[-_]")


def derive_title(file_path: str | Path) -> str:
    """Build an issue title from a file name.

    ``docs/fix_login-bug.md`` becomes ``Fix login bug``: extension dropped,
    dashes and underscores turned into spaces, first character upper-cased.
    """
    title = _SEPARATORS_RE.sub(" ", Path(file_path).stem)
    return title[:1].upper() + title[1:]


def build_issue_command(
    file_path: str | Path,
    labels: list[str] | None = None,
    assignee: str | None = None,
    repo: str | None = None,
) -> list[str]:
    cmd = ["gh", "issue", "create", "--title", derive_title(file_path), "--body-file", str(file_path)]
    if repo:
        cmd.extend(["--repo", repo])
    label_value = ",".join(label.strip() for label in labels or [] if label.strip())
    if label_value:
        cmd.extend(["--label", label_value])
    if assignee:
        cmd.extend(["--assignee", assignee])
    return cmd


def create_issue_from_file(
    file_path: str | Path,
    labels: list[str] | None = None,
    assignee: str | None = None,
    repo: str | None = None,
) -> IssueCreated:
    """Create an issue whose title comes from the file name and body from its contents.

    Raises FileNotFoundError before contacting GitHub if the file is missing.
    """
    path = Path(file_path)
    if not path.is_file():
        raise FileNotFoundError(f"File not found at '{file_path}'")

    cmd = build_issue_command(path, labels=labels, assignee=assignee, repo=repo)
    try:
        output = gh_cli.run(cmd)
    except GhCommandError as e:
        raise IssueCreateError(f"Could not create issue from {file_path}: {e}") from e

    # gh prints the new issue URL as the last line of stdout.
    lines = [line.strip() for line in output.splitlines() if line.strip()]
    url = lines[-1] if lines else ""
    logger.info("Created issue %s", url)
    return IssueCreated(title=derive_title(path), url=url)

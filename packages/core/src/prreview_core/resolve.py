"""Work out which repository and pull request a command targets.

Explicit flags always win. Anything missing is detected from the working
directory: first through the `gh` CLI, then from local git metadata.

Resolution order for the repository:
  1. --owner / --repo (or --repo owner/name)
  2. `gh repo view --json owner,name`
  3. the remote URL of the current branch's upstream (or origin)

Resolution order for the pull request number:
  1. --pr
  2. `gh pr view --json number` (PR for the current branch)
  3. the first open PR whose head branch is the current branch
"""

from __future__ import annotations

import logging
import re

from prreview_core.errors import ContextResolutionError, GhCommandError
from prreview_core.gh import cli as gh_cli
from prreview_core.models import PullRequestRef, RepoRef

logger = logging.getLogger(__name__)

# https://github.com/owner/repo.git, ssh://git@github.com/owner/repo, git@github.com:owner/repo.git
_REMOTE_RE = re.compile(
    r"""^(?:
        [a-z][a-z0-9+.-]*://(?:[^@/]+@)?[^/]+/   # scheme://[user@]host/
      | (?:[^@/]+@)?[^:/]+:                      # [user@]host:
    )
    (?P<path>.+?)/*$""",
    re.VERBOSE | re.IGNORECASE,
)


def parse_remote_url(url: str) -> RepoRef | None:
    """Extract owner/name from a git remote URL, or None if it has no such shape."""
    match = _REMOTE_RE.match(url.strip())
    if not match:
        return None
    path = match.group("path")
    if path.endswith(".git"):
        path = path[: -len(".git")]
    parts = [p for p in path.split("/") if p]
    if len(parts) < 2:
        return None
    # Nested groups (GitLab-style) keep the last two segments.
    return RepoRef(owner=parts[-2], name=parts[-1])


def detect_repo() -> RepoRef | None:
    """Detect the repository for the current working directory."""
    try:
        data = gh_cli.run_json(["gh", "repo", "view", "--json", "owner,name"])
    except GhCommandError as e:
        logger.debug("gh repo view failed: %s", e)
        data = None
    if isinstance(data, dict):
        owner = (data.get("owner") or {}).get("login")
        name = data.get("name")
        if owner and name:
            return RepoRef(owner=owner, name=name)

    branch = gh_cli.current_branch()
    remote = gh_cli.branch_remote(branch)
    url = gh_cli.remote_url(remote)
    if not url:
        logger.debug("No URL configured for remote %r", remote)
        return None
    repo = parse_remote_url(url)
    if repo is not None:
        logger.debug("Parsed %s from remote %r (%s)", repo.slug, remote, url)
    return repo


def detect_pr_number(repo: RepoRef) -> int | None:
    """Detect the PR associated with the current branch."""
    try:
        data = gh_cli.run_json(["gh", "pr", "view", "--json", "number"])
        if isinstance(data, dict) and data.get("number"):
            return int(data["number"])
    except GhCommandError as e:
        logger.debug("gh pr view failed: %s", e)

    branch = gh_cli.current_branch()
    if not branch:
        return None
    try:
        prs = gh_cli.run_json(
            ["gh", "pr", "list", "--repo", repo.slug, "--head", branch, "--state", "open", "--json", "number"]
        )
    except GhCommandError as e:
        logger.debug("gh pr list failed: %s", e)
        return None
    if isinstance(prs, list):
        for entry in prs:
            if isinstance(entry, dict) and isinstance(entry.get("number"), int):
                return entry["number"]
    return None


def resolve_repo(owner: str | None = None, repo: str | None = None) -> RepoRef:
    if repo and "/" in repo:
        try:
            ref = RepoRef.from_slug(repo)
        except ValueError as e:
            raise ContextResolutionError(f"Invalid --repo value: {e}") from e
        if owner and owner != ref.owner:
            raise ContextResolutionError(f"--owner {owner} conflicts with --repo {repo}.")
        return ref

    if owner and repo:
        return RepoRef(owner=owner, name=repo)

    detected = detect_repo()
    if detected is None:
        raise ContextResolutionError(
            "Could not detect repository. Use --owner and --repo or run from within a git repository."
        )
    ref = RepoRef(owner=owner or detected.owner, name=repo or detected.name)
    logger.info("Detected repository: %s", ref.slug)
    return ref


def resolve_pull(owner: str | None = None, repo: str | None = None, pr_number: int | None = None) -> PullRequestRef:
    """Return a fully resolved pull request reference or raise ContextResolutionError."""
    repo_ref = resolve_repo(owner, repo)

    if pr_number is None:
        pr_number = detect_pr_number(repo_ref)
        if pr_number is None:
            raise ContextResolutionError(
                "No pull request found for the current branch. Use --pr or create a PR first."
            )
        logger.info("Detected PR #%d", pr_number)

    try:
        return PullRequestRef(repo=repo_ref, number=pr_number)
    except ValueError as e:
        raise ContextResolutionError(str(e)) from e

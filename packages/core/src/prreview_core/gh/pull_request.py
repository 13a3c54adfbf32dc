from __future__ import annotations

from datetime import datetime

from github import Github

from prreview_core.gh import cli as gh_cli
from prreview_core.models import PullRequestRef, PullSummary, ensure_utc

_SUMMARY_FIELDS = "number,title,author,state,reviewDecision,url"

# GET /repos/{owner}/{repo}/pulls/{n}/commits returns at most this many.
MAX_LISTED_COMMITS = 250


def get_repo(repo_name: str, token: str):
    return Github(token).get_repo(repo_name)


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)


def get_pull_requests(repo, state: str = "open"):
    return repo.get_pulls(state=state)


def get_last_commit_date(pr) -> datetime | None:
    """Return the committer date of the PR's last (highest-indexed) commit, or None.

    The PR commits endpoint stops listing at 250 entries, so longer PRs read
    the head commit directly.
    """
    if pr.commits > MAX_LISTED_COMMITS:
        last = pr.base.repo.get_commit(pr.head.sha)
    else:
        commits = list(pr.get_commits())
        if not commits:
            return None
        last = commits[-1]
    committer = last.commit.committer
    if committer is None or committer.date is None:
        return None
    return ensure_utc(committer.date)


def fetch_pull_summary(pull: PullRequestRef) -> PullSummary:
    """Read the headline fields for a PR through `gh pr view`.

    reviewDecision only exists in GitHub's GraphQL schema, which `gh pr view`
    exposes directly.
    """
    data = gh_cli.run_json(gh_cli.pr_command("view", pull.number, pull.repo.slug, "--json", _SUMMARY_FIELDS)) or {}
    author = data.get("author") or {}
    return PullSummary(
        number=data.get("number", pull.number),
        title=data.get("title") or "",
        author=author.get("login"),
        state=data.get("state") or "",
        review_decision=data.get("reviewDecision") or None,
        url=data.get("url") or "",
    )

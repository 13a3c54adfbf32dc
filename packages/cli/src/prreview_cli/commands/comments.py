"""comments command: review comments updated since the last commit."""

from __future__ import annotations

from datetime import datetime

import click

from prreview_cli.options import (
    build_renderer,
    core_errors,
    format_options,
    github_pull,
    parse_since,
    resolve_target,
    target_options,
)
from prreview_core.gh.comments import list_comments_since, resolve_since


@click.command("comments")
@target_options
@click.option(
    "--since",
    callback=parse_since,
    default=None,
    help="ISO-8601 cutoff (e.g. 2025-01-01T00:00:00Z). Defaults to the last commit on the PR.",
)
@click.option(
    "--include-conversation/--review-only",
    "include_conversation",
    default=None,
    help="Also list top-level PR conversation comments.",
)
@format_options
@click.pass_context
def comments_cmd(
    ctx,
    owner: str | None,
    repo: str | None,
    pr_number: int | None,
    since: datetime | None,
    include_conversation: bool | None,
    fmt: str | None,
    as_json: bool,
):
    """List review comments updated since the latest commit, oldest first."""
    config = ctx.obj["config"]
    renderer = build_renderer(config, fmt, as_json)
    pull = resolve_target(owner, repo, pr_number)
    pr = github_pull(config, pull)

    if include_conversation is None:
        include_conversation = bool(config.get("include_conversation"))

    with core_errors():
        cutoff = since if since is not None else resolve_since(pr)
        comments = list_comments_since(pr, since=cutoff, include_conversation=include_conversation)

    stamp = cutoff.strftime("%Y-%m-%dT%H:%M:%SZ")
    renderer.heading(f"Comments on {pull} since {stamp}")
    renderer.note(f"New comments: {len(comments)}")
    for comment in comments:
        renderer.comment(comment)

"""status command: PR summary, thread counts and unresolved threads."""

from __future__ import annotations

import click

from prreview_cli.options import (
    build_renderer,
    core_errors,
    format_options,
    github_pull,
    resolve_target,
    target_options,
)
from prreview_core.gh.comments import list_comments_since, resolve_since
from prreview_core.gh.pull_request import fetch_pull_summary
from prreview_core.gh.threads import iter_review_threads


@click.command("status")
@target_options
@click.option("--all", "-a", "show_resolved", is_flag=True, help="Also list resolved threads.")
@click.option("--since-commit", "-s", is_flag=True, help="Also list comments since the last commit.")
@format_options
@click.option("--interactive", "-i", is_flag=True, help="Open the action menu afterwards.")
@click.pass_context
def status_cmd(
    ctx,
    owner: str | None,
    repo: str | None,
    pr_number: int | None,
    show_resolved: bool,
    since_commit: bool,
    fmt: str | None,
    as_json: bool,
    interactive: bool,
):
    """Show the review status of a pull request.

    Prints the PR headline (title, author, state, review decision), how many
    review threads are resolved, and every unresolved thread.
    """
    config = ctx.obj["config"]
    renderer = build_renderer(config, fmt, as_json)
    pull = resolve_target(owner, repo, pr_number)

    with core_errors():
        summary = fetch_pull_summary(pull)
        renderer.heading(f"PR Review Status for {pull}")
        renderer.pull_summary(summary)

        threads = list(iter_review_threads(pull, include_resolved=True, page_size=config["page_size"]))

    unresolved = [t for t in threads if not t.is_resolved]
    resolved = [t for t in threads if t.is_resolved]

    renderer.heading("Review Threads")
    renderer.thread_counts(len(threads), len(resolved), len(unresolved))
    if unresolved:
        renderer.note("Unresolved threads:")
        for thread in unresolved:
            renderer.thread(thread)
    if show_resolved and resolved:
        renderer.note("Resolved threads:")
        for thread in resolved:
            renderer.thread(thread)

    if since_commit:
        pr = github_pull(config, pull)
        with core_errors():
            cutoff = resolve_since(pr)
            comments = list_comments_since(
                pr, since=cutoff, include_conversation=bool(config.get("include_conversation"))
            )
        renderer.heading("Comments Since Last Commit")
        renderer.note(f"Last commit at {cutoff.strftime('%Y-%m-%dT%H:%M:%SZ')}")
        for comment in comments:
            renderer.comment(comment)

    if interactive:
        from prreview_cli.menu import run_menu

        run_menu(config, pull)

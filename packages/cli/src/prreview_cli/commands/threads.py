"""threads command: list review threads on a pull request."""

from __future__ import annotations

import click

from prreview_cli.options import build_renderer, core_errors, format_options, resolve_target, target_options
from prreview_core.gh.threads import iter_review_threads


@click.command("threads")
@target_options
@click.option(
    "--include-resolved",
    "--all",
    "-a",
    "include_resolved",
    is_flag=True,
    help="Include resolved threads as well.",
)
@format_options
@click.option("--interactive", "-i", is_flag=True, help="Open the action menu after listing.")
@click.pass_context
def threads_cmd(
    ctx,
    owner: str | None,
    repo: str | None,
    pr_number: int | None,
    include_resolved: bool,
    fmt: str | None,
    as_json: bool,
    interactive: bool,
):
    """List unresolved review threads on a pull request.

    Threads are fetched 100 at a time and printed as each page arrives.

    \b
    Examples:
      prreview threads
      prreview threads --include-resolved
      prreview threads --repo octocat/hello-world --pr 42 --json
    """
    config = ctx.obj["config"]
    renderer = build_renderer(config, fmt, as_json)
    pull = resolve_target(owner, repo, pr_number)

    renderer.heading(f"Review threads for {pull}")
    shown = 0
    with core_errors():
        for thread in iter_review_threads(pull, include_resolved=include_resolved, page_size=config["page_size"]):
            renderer.thread(thread)
            shown += 1

    if shown == 0:
        renderer.note("No review threads." if include_resolved else "No unresolved review threads.")

    if interactive:
        from prreview_cli.menu import run_menu

        run_menu(config, pull)

"""menu command: interactive action menu for a pull request."""

from __future__ import annotations

import click

from prreview_cli.options import resolve_target, target_options


@click.command("menu")
@target_options
@click.pass_context
def menu_cmd(ctx, owner: str | None, repo: str | None, pr_number: int | None):
    """Browse and act on a pull request from an interactive menu.

    View threads and recent comments, approve, request changes, comment,
    checkout, diff, check CI, or switch to another PR or repository.
    """
    from prreview_cli.menu import run_menu

    pull = resolve_target(owner, repo, pr_number)
    run_menu(ctx.obj["config"], pull)

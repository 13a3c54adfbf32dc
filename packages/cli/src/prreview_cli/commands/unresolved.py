"""unresolved command: find open PRs that still have unresolved review threads."""

from __future__ import annotations

import json

import click
from rich.console import Console
from rich.table import Table

from prreview_cli.options import core_errors, require_token, verbose_option
from prreview_core.gh.pull_request import get_pull_requests, get_repo
from prreview_core.gh.threads import iter_review_threads
from prreview_core.models import PullRequestRef

console = Console()


@click.command("unresolved")
@click.option("--owner", "-o", default=None, help="Repository owner. Auto-detected if omitted.")
@click.option("--repo", "-r", default=None, help="Repository name, or owner/name. Auto-detected if omitted.")
@click.option("--json", "as_json", is_flag=True, help="Print one JSON object per PR.")
@verbose_option
@click.pass_context
def unresolved_cmd(ctx, owner: str | None, repo: str | None, as_json: bool):
    """List open pull requests that have unresolved review threads."""
    from prreview_core.resolve import resolve_repo

    config = ctx.obj["config"]
    with core_errors():
        repo_ref = resolve_repo(owner, repo)
    token = require_token(config)

    rows: list[dict] = []
    with core_errors():
        for pr in get_pull_requests(get_repo(repo_ref.slug, token=token)):
            pull = PullRequestRef(repo=repo_ref, number=pr.number)
            count = sum(1 for _ in iter_review_threads(pull, page_size=config["page_size"]))
            if count:
                rows.append(
                    {
                        "number": pr.number,
                        "title": pr.title or "",
                        "author": pr.user.login if pr.user is not None else None,
                        "unresolved": count,
                    }
                )

    if as_json:
        for row in rows:
            click.echo(json.dumps(row))
        return

    if not rows:
        console.print(f"[green]No open pull requests in {repo_ref.slug} have unresolved threads.[/green]")
        return

    table = Table(title=f"Unresolved review threads in {repo_ref.slug}", show_header=True, header_style="bold cyan")
    table.add_column("PR", style="bold", width=6)
    table.add_column("Title", max_width=50)
    table.add_column("Author", width=16)
    table.add_column("Unresolved", justify="right", width=10)
    for row in rows:
        table.add_row(f"#{row['number']}", row["title"], row["author"] or "ghost", f"[red]{row['unresolved']}[/red]")
    console.print(table)

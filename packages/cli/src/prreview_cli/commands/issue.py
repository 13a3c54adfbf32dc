"""issue command: create a GitHub issue from a Markdown file."""

from __future__ import annotations

import shlex
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from prreview_cli.options import core_errors
from prreview_core.issues import build_issue_command, create_issue_from_file

console = Console()


def _split_labels(values: tuple[str, ...]) -> list[str]:
    labels: list[str] = []
    for value in values:
        labels.extend(part.strip() for part in value.split(",") if part.strip())
    return labels


@click.command("issue")
@click.argument("file_path", type=click.Path(dir_okay=False))
@click.option(
    "--label",
    "-l",
    "labels",
    multiple=True,
    help="Label to add. Repeat or pass a comma-separated list.",
)
@click.option("--assignee", "-a", default=None, help="GitHub username to assign. Use @me to self-assign.")
@click.option("--repo", "-R", default=None, help="Target repository (owner/name). Defaults to the current one.")
@click.option("--dry-run", is_flag=True, help="Print the gh command instead of running it.")
def issue_cmd(file_path: str, labels: tuple[str, ...], assignee: str | None, repo: str | None, dry_run: bool):
    """Create a GitHub issue from a Markdown file.

    The title is the file name without its extension, with dashes and
    underscores turned into spaces and the first letter capitalised
    (fix_login-bug.md -> "Fix login bug"). The body is the file contents.
    """
    label_list = _split_labels(labels)

    if dry_run:
        if not Path(file_path).is_file():
            raise click.ClickException(f"File not found at '{file_path}'")
        click.echo(shlex.join(build_issue_command(file_path, labels=label_list, assignee=assignee, repo=repo)))
        return

    with core_errors():
        issue = create_issue_from_file(file_path, labels=label_list, assignee=assignee, repo=repo)

    console.print(f"[green]Created issue:[/green] {escape(issue.title)}", highlight=False)
    if issue.url:
        console.print(issue.url, markup=False, highlight=False)

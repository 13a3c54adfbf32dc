"""Interactive PR action menu.

MenuSession is a small state machine: while ``active`` it draws the menu,
reads one line and dispatches the matching action. Only the quit action (or
end of input) leaves the loop. A failing action is reported and the menu is
drawn again; the only state carried between iterations is the current pull
request reference.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

import click
from github import GithubException
from rich.console import Console
from rich.markup import escape

from prreview_core.errors import PRReviewError
from prreview_core.gh import cli as gh_cli
from prreview_core.gh.comments import list_comments_since, resolve_since
from prreview_core.gh.threads import iter_review_threads
from prreview_core.models import PullRequestRef, RepoRef
from prreview_core.render import RenderOptions, Renderer, get_renderer

logger = logging.getLogger(__name__)


@dataclass
class MenuAction:
    key: str
    label: str
    handler: Callable[[MenuSession], None]
    pause: bool = False


@dataclass
class MenuSession:
    pull: PullRequestRef
    config: dict
    console: Console
    renderer: Renderer
    run_command: Callable[[list[str]], bool] = gh_cli.run_passthrough
    active: bool = True
    actions: dict[str, MenuAction] = field(init=False)

    def __post_init__(self):
        self.actions = {a.key: a for a in _ACTIONS}

    # ------------------------------------------------------------------ #
    # Loop                                                                 #
    # ------------------------------------------------------------------ #

    def run(self) -> None:
        while self.active:
            click.clear()
            self.draw()
            try:
                choice = click.prompt("Select option", default="", show_default=False)
                self.step(choice)
            except click.Abort:
                # End of input (or Ctrl-C at a prompt) behaves like quit.
                self.console.print()
                self.active = False

    def draw(self) -> None:
        self.console.print("[bold cyan]GitHub PR Review Dashboard[/bold cyan]")
        self.console.print(f"[blue]Repository: {escape(self.pull.repo.slug)}[/blue]")
        self.console.print(f"[blue]PR #{self.pull.number}[/blue]")
        self.console.print("━" * 35)
        self.console.print("[bold]Options:[/bold]")
        for action in _ACTIONS:
            key_style = "red" if action.key == "q" else "green"
            self.console.print(f"  [{key_style}]{action.key}[/{key_style}]) {action.label}")
        self.console.print()

    def step(self, choice: str) -> None:
        """Dispatch one menu choice; report failures instead of raising."""
        action = self.actions.get(choice.strip().lower())
        if action is None:
            self.console.print("[red]Invalid option[/red]")
            return
        try:
            action.handler(self)
        except (PRReviewError, GithubException, click.ClickException) as e:
            message = e.format_message() if isinstance(e, click.ClickException) else str(e)
            self.console.print(f"[red]Error:[/red] {escape(message)}")
        if action.pause and self.active:
            click.pause()

    # ------------------------------------------------------------------ #
    # Helpers                                                              #
    # ------------------------------------------------------------------ #

    def shell(self, verb: str, *extra: str) -> bool:
        cmd = gh_cli.pr_command(verb, self.pull.number, self.pull.repo.slug, *extra)
        ok = self.run_command(cmd)
        if not ok:
            self.console.print(f"[red]Command failed:[/red] {escape(' '.join(cmd))}")
        return ok

    def github_pull(self):
        from prreview_cli.options import github_pull

        return github_pull(self.config, self.pull)


# ---------------------------------------------------------------------- #
# Actions                                                                  #
# ---------------------------------------------------------------------- #


def _view_threads(session: MenuSession) -> None:
    shown = 0
    for thread in iter_review_threads(session.pull, page_size=session.config.get("page_size", 100)):
        session.renderer.thread(thread)
        shown += 1
    if not shown:
        session.renderer.note("No unresolved review threads.")


def _view_comments_since_commit(session: MenuSession) -> None:
    pr = session.github_pull()
    cutoff = resolve_since(pr)
    comments = list_comments_since(
        pr, since=cutoff, include_conversation=bool(session.config.get("include_conversation"))
    )
    session.renderer.note(f"Last commit: {cutoff.strftime('%Y-%m-%dT%H:%M:%SZ')}")
    session.renderer.note(f"New comments: {len(comments)}")
    for comment in comments:
        session.renderer.comment(comment)


def _approve(session: MenuSession) -> None:
    body = click.prompt("Add approval comment (optional)", default="", show_default=False)
    extra = ["--approve"] + (["--body", body] if body else [])
    if session.shell("review", *extra):
        session.console.print("[green]Approved.[/green]")


def _request_changes(session: MenuSession) -> None:
    body = click.prompt("Request changes comment", default="", show_default=False)
    if not body.strip():
        session.console.print("[yellow]A comment is required to request changes.[/yellow]")
        return
    if session.shell("review", "--request-changes", "--body", body):
        session.console.print("[green]Changes requested.[/green]")


def _add_comment(session: MenuSession) -> None:
    body = click.prompt("Add comment", default="", show_default=False)
    if not body.strip():
        session.console.print("[yellow]Empty comment; nothing posted.[/yellow]")
        return
    if session.shell("comment", "--body", body):
        session.console.print("[green]Comment posted.[/green]")


def _change_pr(session: MenuSession) -> None:
    number = click.prompt("Enter new PR number", type=click.IntRange(min=1))
    session.pull = PullRequestRef(repo=session.pull.repo, number=number)


def _change_repo(session: MenuSession) -> None:
    slug = click.prompt("Enter owner/repo (e.g., facebook/react)")
    try:
        repo = RepoRef.from_slug(slug)
    except ValueError as e:
        session.console.print(f"[red]{escape(str(e))}[/red]")
        return
    number = click.prompt("Enter PR number", type=click.IntRange(min=1))
    session.pull = PullRequestRef(repo=repo, number=number)


def _quit(session: MenuSession) -> None:
    session.console.print("[green]Goodbye![/green]")
    session.active = False


_ACTIONS: list[MenuAction] = [
    MenuAction("1", "View unresolved review threads", _view_threads, pause=True),
    MenuAction("2", "View comments since last commit", _view_comments_since_commit, pause=True),
    MenuAction("3", "View all PR comments", lambda s: s.shell("view", "--comments"), pause=True),
    MenuAction("4", "View PR details", lambda s: s.shell("view"), pause=True),
    MenuAction("5", "Open PR in browser", lambda s: s.shell("view", "--web")),
    MenuAction("6", "Approve PR", _approve, pause=True),
    MenuAction("7", "Request changes", _request_changes, pause=True),
    MenuAction("8", "Add comment", _add_comment, pause=True),
    MenuAction("c", "Checkout PR locally", lambda s: s.shell("checkout"), pause=True),
    MenuAction("d", "View PR diff", lambda s: s.shell("diff"), pause=True),
    MenuAction("k", "View CI checks", lambda s: s.shell("checks"), pause=True),
    MenuAction("9", "Change PR number", _change_pr),
    MenuAction("0", "Change repository", _change_repo),
    MenuAction("q", "Quit", _quit),
]


def run_menu(config: dict, pull: PullRequestRef, console: Console | None = None) -> MenuSession:
    console = console or Console(highlight=False)
    options = RenderOptions.from_config(config)
    # JSON lines make no sense inside an interactive session.
    fmt = config.get("format", "pretty")
    renderer = get_renderer("pretty" if fmt == "json" else fmt, console, options)
    session = MenuSession(pull=pull, config=config, console=console, renderer=renderer)
    session.run()
    return session

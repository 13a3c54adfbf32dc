"""Option decorators and helpers shared by the PR commands."""

from __future__ import annotations

import contextlib
import logging

import click
from github import GithubException
from rich.console import Console
from rich.logging import RichHandler

from prreview_core.config import FORMATS
from prreview_core.errors import PRReviewError
from prreview_core.models import PullRequestRef, parse_timestamp
from prreview_core.render import RenderOptions, Renderer, get_renderer

logger = logging.getLogger(__name__)


class UnknownArgumentError(click.UsageError):
    """A command-line value could not be parsed."""


def configure_logging(verbose: bool) -> None:
    handler = RichHandler(console=Console(stderr=True), show_time=False, show_path=False)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )


def _enable_verbose(ctx: click.Context, param, value: bool) -> None:
    if value:
        configure_logging(True)
        ctx.ensure_object(dict)["verbose"] = True


def verbose_option(f):
    """Add -v / --verbose to a command; same effect as the group-level flag."""
    return click.option(
        "--verbose",
        "-v",
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=_enable_verbose,
        help="Show detection details and API calls on stderr.",
    )(f)


def target_options(f):
    """Add --owner / --repo / --pr and --verbose to a command."""
    f = verbose_option(f)
    f = click.option(
        "--pr",
        "--pr-number",
        "-p",
        "pr_number",
        type=click.IntRange(min=1),
        default=None,
        help="Pull request number. Auto-detected from the current branch if omitted.",
    )(f)
    f = click.option(
        "--repo",
        "-r",
        default=None,
        help="Repository name, or owner/name. Auto-detected if omitted.",
    )(f)
    f = click.option("--owner", "-o", default=None, help="Repository owner. Auto-detected if omitted.")(f)
    return f


def format_options(f):
    """Add --format and the --json shorthand to a command."""
    f = click.option("--json", "as_json", is_flag=True, help="Shorthand for --format json.")(f)
    f = click.option(
        "--format",
        "fmt",
        type=click.Choice(FORMATS),
        default=None,
        help="Output format. Overrides the config file.",
    )(f)
    return f


def parse_since(ctx, param, value):
    """click callback: turn an ISO-8601 string into an aware datetime."""
    if value is None:
        return None
    try:
        return parse_timestamp(value)
    except ValueError:
        raise UnknownArgumentError(f"Invalid --since value {value!r}; expected ISO-8601, e.g. 2025-01-01T00:00:00Z.")


def build_renderer(config: dict, fmt: str | None = None, as_json: bool = False) -> Renderer:
    chosen = "json" if as_json else (fmt or config.get("format", "pretty"))
    options = RenderOptions.from_config(config)
    console = Console(no_color=not options.color, highlight=False)
    return get_renderer(chosen, console, options)


@contextlib.contextmanager
def core_errors():
    """Turn prreview and GitHub API failures into one-line click errors (exit 1)."""
    try:
        yield
    except PRReviewError as e:
        raise click.ClickException(str(e)) from e
    except FileNotFoundError as e:
        raise click.ClickException(str(e)) from e
    except GithubException as e:
        message = e.data.get("message") if isinstance(e.data, dict) else None
        raise click.ClickException(f"GitHub API error ({e.status}): {message or e}") from e


def resolve_target(owner: str | None, repo: str | None, pr_number: int | None) -> PullRequestRef:
    from prreview_core.resolve import resolve_pull

    with core_errors():
        pull = resolve_pull(owner, repo, pr_number)
    logger.info("Using %s", pull)
    return pull


def require_token(config: dict) -> str:
    from prreview_cli.auth import resolve_github_token

    token = config.get("github_token") or resolve_github_token()
    if not token:
        raise click.UsageError(
            "No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.\n"
            "Create a token at https://github.com/settings/tokens"
        )
    config["github_token"] = token
    return token


def github_pull(config: dict, pull: PullRequestRef):
    """Fetch the PyGithub PullRequest object for a resolved reference."""
    from prreview_core.gh.pull_request import get_pull, get_repo

    token = require_token(config)
    with core_errors():
        return get_pull(get_repo(pull.repo.slug, token=token), pull.number)

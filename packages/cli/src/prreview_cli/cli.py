"""CLI entry point for prreview.

Commands:
  threads     list review threads on a pull request (unresolved by default)
  comments    list review comments updated since the last commit
  status      PR summary, thread counts and unresolved threads
  unresolved  scan every open PR in a repository for unresolved threads
  menu        interactive action menu for one pull request
  issue       create an issue from a Markdown file
  help        show this message
"""

from __future__ import annotations

import importlib.metadata

import click

from prreview_cli.commands.comments import comments_cmd
from prreview_cli.commands.issue import issue_cmd
from prreview_cli.commands.menu import menu_cmd
from prreview_cli.commands.status import status_cmd
from prreview_cli.commands.threads import threads_cmd
from prreview_cli.commands.unresolved import unresolved_cmd
from prreview_cli.options import configure_logging


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(
    version=importlib.metadata.version("prreview"),
    prog_name="prreview",
)
@click.option(
    "--config",
    "config_path",
    default=".prreview.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRREVIEW_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Show detection details and API calls on stderr.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Review GitHub pull requests from the terminal."""
    from prreview_core.config import load_config

    configure_logging(verbose)
    ctx.ensure_object(dict)

    try:
        config = load_config(config_path)
    except ValueError as e:
        raise click.UsageError(str(e))

    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose


@click.command("help")
@click.pass_context
def help_cmd(ctx: click.Context):
    """Show usage information."""
    click.echo(ctx.parent.get_help())


main.add_command(threads_cmd)
main.add_command(comments_cmd)
main.add_command(status_cmd)
main.add_command(unresolved_cmd)
main.add_command(menu_cmd)
main.add_command(issue_cmd)
main.add_command(help_cmd)

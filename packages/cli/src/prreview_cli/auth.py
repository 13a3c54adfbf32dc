"""GitHub token lookup for the commands that talk to the REST API.

Sources, first match wins:
  1. GITHUB_TOKEN
  2. GH_TOKEN (the variable `gh` itself reads)
  3. `gh auth token`, the session stored by `gh auth login`
"""

from __future__ import annotations

import logging
import os

from prreview_core.errors import GhCommandError
from prreview_core.gh import cli as gh_cli

logger = logging.getLogger(__name__)

TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GH_TOKEN")


def resolve_github_token() -> str | None:
    """Return a GitHub token, or None when no source has one."""
    for name in TOKEN_ENV_VARS:
        token = os.environ.get(name, "").strip()
        if token:
            logger.debug("Using GitHub token from %s.", name)
            return token

    try:
        token = gh_cli.run(["gh", "auth", "token"]).strip()
    except GhCommandError as e:
        logger.debug("No gh session token: %s", e)
        return None
    if token:
        logger.debug("Using GitHub token from the gh CLI session.")
    return token or None

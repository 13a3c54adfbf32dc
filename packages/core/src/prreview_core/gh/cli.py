"""Thin subprocess layer over the `gh` and `git` command-line tools.

Everything that needs the user's local checkout or their `gh` session goes
through here: repository/PR detection, GraphQL queries, issue creation and
the interactive workflow verbs (checkout, diff, checks, review).
"""

from __future__ import annotations

import json
import logging
import subprocess

from prreview_core.errors import GhCommandError

logger = logging.getLogger(__name__)


def run(cmd: list[str]) -> str:
    """Run a command, capture its output and return stdout.

    Raises GhCommandError on a non-zero exit or when the binary is missing.
    """
    logger.debug("Running: %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, stdin=subprocess.DEVNULL)
    except FileNotFoundError as e:
        raise GhCommandError(cmd, f"{cmd[0]} is not installed or not on PATH") from e
    if result.returncode != 0:
        message = (result.stderr or "").strip() or (result.stdout or "").strip()
        if not message:
            message = f"Command failed: {' '.join(cmd)}"
        raise GhCommandError(cmd, message, returncode=result.returncode)
    return result.stdout


def run_json(cmd: list[str]):
    output = run(cmd)
    try:
        return json.loads(output) if output.strip() else None
    except json.JSONDecodeError as e:
        raise GhCommandError(cmd, f"Invalid JSON from {' '.join(cmd)}") from e


def run_passthrough(cmd: list[str]) -> bool:
    """Run a command attached to the terminal and report whether it succeeded.

    Used for workflow verbs whose output the user reads directly (diff,
    checks, checkout). Blocks until the subprocess exits.
    """
    logger.debug("Running: %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd)
    except FileNotFoundError:
        logger.warning("%s is not installed or not on PATH", cmd[0])
        return False
    return result.returncode == 0


def graphql(query: str, variables: dict) -> dict:
    """Execute a GraphQL query through `gh api graphql` and return the payload.

    String variables are sent raw (-f) so a repository called "123" is not
    coerced to an integer; ints and None are sent typed (-F).
    """
    cmd = ["gh", "api", "graphql", "-f", f"query={query}"]
    for key, value in variables.items():
        if value is None:
            continue
        if isinstance(value, (bool, int)):
            cmd.extend(["-F", f"{key}={json.dumps(value)}"])
        else:
            cmd.extend(["-f", f"{key}={value}"])
    payload = run_json(cmd)
    if not isinstance(payload, dict):
        raise GhCommandError(cmd, "Unexpected GraphQL response (not a JSON object)")
    errors = payload.get("errors")
    if errors:
        messages = "; ".join(str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors)
        raise GhCommandError(cmd, f"GraphQL error: {messages}")
    return payload


def git(*args: str) -> str:
    return run(["git", *args]).strip()


def current_branch() -> str | None:
    try:
        branch = git("rev-parse", "--abbrev-ref", "HEAD")
    except GhCommandError:
        return None
    # Detached HEAD reports the literal "HEAD".
    if not branch or branch == "HEAD":
        return None
    return branch


def branch_remote(branch: str | None) -> str:
    """Return the remote the branch tracks, defaulting to origin."""
    if branch:
        try:
            remote = git("config", "--get", f"branch.{branch}.remote")
        except GhCommandError:
            remote = ""
        if remote and remote != ".":
            return remote
    return "origin"


def remote_url(remote: str) -> str | None:
    try:
        return git("remote", "get-url", remote) or None
    except GhCommandError:
        return None


def pr_command(verb: str, number: int, repo_slug: str, *extra: str) -> list[str]:
    return ["gh", "pr", verb, str(number), "--repo", repo_slug, *extra]

"""Cursor-paginated review thread listing over GitHub's GraphQL API.

Pages are fetched strictly in order: page N+1 is requested only once page N's
endCursor is known. Threads are yielded as soon as their page arrives, so a
failure on a later page never retracts output already produced.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterator

from prreview_core.config import MAX_PAGE_SIZE
from prreview_core.errors import GhCommandError, ThreadFetchError
from prreview_core.gh import cli as gh_cli
from prreview_core.models import Comment, PageInfo, PullRequestRef, ReviewThread, parse_timestamp

logger = logging.getLogger(__name__)

REVIEW_THREADS_QUERY = """
query($owner: String!, $name: String!, $number: Int!, $first: Int!, $cursor: String) {
  repository(owner: $owner, name: $name) {
    pullRequest(number: $number) {
      reviewThreads(first: $first, after: $cursor) {
        nodes {
          id
          isResolved
          isOutdated
          path
          line
          originalLine
          startLine
          originalStartLine
          comments(first: 100) {
            totalCount
            nodes {
              id
              author { login }
              body
              createdAt
              updatedAt
              url
              path
              line
            }
          }
        }
        pageInfo { hasNextPage endCursor }
      }
    }
  }
}
""".strip()

GraphQLRunner = Callable[[str, dict], dict]


def iter_review_threads(
    pull: PullRequestRef,
    include_resolved: bool = False,
    page_size: int = MAX_PAGE_SIZE,
    run_query: GraphQLRunner | None = None,
) -> Iterator[ReviewThread]:
    """Yield the pull request's review threads in server order.

    Resolved threads are dropped after each page is fetched unless
    include_resolved is set.
    """
    for page, nodes in _iter_pages(pull, page_size, run_query or gh_cli.graphql):
        for node in nodes:
            try:
                thread = parse_thread(node)
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                raise ThreadFetchError(f"Malformed review thread in response: {e}", page) from e
            if thread.is_resolved and not include_resolved:
                continue
            yield thread


def _iter_pages(pull: PullRequestRef, page_size: int, run_query: GraphQLRunner) -> Iterator[tuple[int, list]]:
    cursor: str | None = None
    page = 0
    while True:
        page += 1
        variables = {
            "owner": pull.repo.owner,
            "name": pull.repo.name,
            "number": pull.number,
            "first": page_size,
            "cursor": cursor,
        }
        logger.debug("Fetching review threads page %d for %s (cursor=%s)", page, pull, cursor)
        try:
            payload = run_query(REVIEW_THREADS_QUERY, variables)
        except GhCommandError as e:
            raise ThreadFetchError(f"Failed to fetch review threads for {pull}: {e}", page) from e

        nodes, page_info = _extract_connection(payload, pull, page)
        yield page, nodes

        if not page_info.has_next_page:
            return
        if not page_info.end_cursor:
            raise ThreadFetchError("Response reported more pages but no endCursor", page)
        cursor = page_info.end_cursor


def _extract_connection(payload, pull: PullRequestRef, page: int) -> tuple[list, PageInfo]:
    try:
        repository = payload["data"]["repository"]
        if repository is None:
            raise ThreadFetchError(f"Repository {pull.repo.slug} not found", page)
        pull_request = repository["pullRequest"]
        if pull_request is None:
            raise ThreadFetchError(f"Pull request {pull} not found", page)
        connection = pull_request["reviewThreads"]
        nodes = connection["nodes"] or []
        info = connection["pageInfo"]
        page_info = PageInfo(has_next_page=bool(info["hasNextPage"]), end_cursor=info.get("endCursor"))
    except (KeyError, TypeError) as e:
        raise ThreadFetchError(f"Malformed review threads response: missing {e}", page) from e
    if not isinstance(nodes, list):
        raise ThreadFetchError("Malformed review threads response: nodes is not a list", page)
    return nodes, page_info


def parse_thread(node: dict) -> ReviewThread:
    comments_conn = node.get("comments") or {}
    comment_nodes = comments_conn.get("nodes") or []
    return ReviewThread(
        id=node["id"],
        is_resolved=bool(node.get("isResolved")),
        is_outdated=bool(node.get("isOutdated")),
        path=node.get("path"),
        line=node.get("line"),
        original_line=node.get("originalLine"),
        start_line=node.get("startLine"),
        original_start_line=node.get("originalStartLine"),
        comments=[_parse_comment(c) for c in comment_nodes if c is not None],
        total_comments=comments_conn.get("totalCount"),
    )


def _parse_comment(node: dict) -> Comment:
    author = node.get("author") or {}
    created_at = parse_timestamp(node["createdAt"])
    updated = node.get("updatedAt")
    return Comment(
        id=str(node["id"]),
        author=author.get("login"),
        body=node.get("body") or "",
        created_at=created_at,
        updated_at=parse_timestamp(updated) if updated else created_at,
        url=node.get("url") or "",
        path=node.get("path"),
        line=node.get("line"),
    )

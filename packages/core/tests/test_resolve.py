"""Tests for repository and pull request context resolution."""

import pytest

from prreview_core.errors import ContextResolutionError, GhCommandError
from prreview_core.models import PullRequestRef, RepoRef
from prreview_core.resolve import parse_remote_url, resolve_pull, resolve_repo


class TestParseRemoteUrl:
    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/octocat/hello-world.git",
            "https://github.com/octocat/hello-world",
            "https://token@github.com/octocat/hello-world.git",
            "ssh://git@github.com/octocat/hello-world.git",
            "git@github.com:octocat/hello-world.git",
            "git@github.com:octocat/hello-world",
            "https://github.com/octocat/hello-world/",
        ],
    )
    def test_common_forms(self, url):
        assert parse_remote_url(url) == RepoRef("octocat", "hello-world")

    def test_nested_groups_keep_last_two_segments(self):
        assert parse_remote_url("https://gitlab.com/group/sub/project.git") == RepoRef("sub", "project")

    @pytest.mark.parametrize("url", ["", "not a url", "https://github.com/onlyowner"])
    def test_unparseable(self, url):
        assert parse_remote_url(url) is None


@pytest.fixture
def no_detection(mocker):
    """Fail loudly if a test expected to skip detection touches gh or git."""
    return mocker.patch("prreview_core.resolve.detect_repo", side_effect=AssertionError("detection attempted"))


class TestResolveRepo:
    def test_explicit_owner_and_repo(self, no_detection):
        assert resolve_repo("octocat", "hello-world") == RepoRef("octocat", "hello-world")

    def test_slug_form(self, no_detection):
        assert resolve_repo(None, "octocat/hello-world") == RepoRef("octocat", "hello-world")

    def test_slug_with_matching_owner(self, no_detection):
        assert resolve_repo("octocat", "octocat/hello-world") == RepoRef("octocat", "hello-world")

    def test_slug_conflicting_owner(self, no_detection):
        with pytest.raises(ContextResolutionError, match="conflicts"):
            resolve_repo("someone", "octocat/hello-world")

    def test_invalid_slug(self, no_detection):
        with pytest.raises(ContextResolutionError, match="Invalid --repo"):
            resolve_repo(None, "a/b/c")

    def test_detected_via_gh(self, mocker):
        run_json = mocker.patch(
            "prreview_core.resolve.gh_cli.run_json",
            return_value={"owner": {"login": "octocat"}, "name": "hello-world"},
        )
        assert resolve_repo() == RepoRef("octocat", "hello-world")
        assert run_json.call_args[0][0][:3] == ["gh", "repo", "view"]

    def test_falls_back_to_git_remote(self, mocker):
        mocker.patch("prreview_core.resolve.gh_cli.run_json", side_effect=GhCommandError(["gh"], "not a repo"))
        mocker.patch("prreview_core.resolve.gh_cli.current_branch", return_value="feature")
        branch_remote = mocker.patch("prreview_core.resolve.gh_cli.branch_remote", return_value="upstream")
        remote_url = mocker.patch(
            "prreview_core.resolve.gh_cli.remote_url", return_value="git@github.com:octocat/hello-world.git"
        )

        assert resolve_repo() == RepoRef("octocat", "hello-world")
        branch_remote.assert_called_once_with("feature")
        remote_url.assert_called_once_with("upstream")

    def test_partial_flag_fills_missing_half(self, mocker):
        mocker.patch("prreview_core.resolve.detect_repo", return_value=RepoRef("octocat", "hello-world"))
        assert resolve_repo(owner="fork-owner") == RepoRef("fork-owner", "hello-world")
        assert resolve_repo(repo="other") == RepoRef("octocat", "other")

    def test_no_remote_raises(self, mocker):
        mocker.patch("prreview_core.resolve.gh_cli.run_json", side_effect=GhCommandError(["gh"], "not a repo"))
        mocker.patch("prreview_core.resolve.gh_cli.current_branch", return_value=None)
        mocker.patch("prreview_core.resolve.gh_cli.branch_remote", return_value="origin")
        mocker.patch("prreview_core.resolve.gh_cli.remote_url", return_value=None)

        with pytest.raises(ContextResolutionError, match="--owner and --repo"):
            resolve_repo()


class TestResolvePull:
    def test_explicit_everything_skips_detection(self, no_detection, mocker):
        detect_pr = mocker.patch("prreview_core.resolve.detect_pr_number")
        pull = resolve_pull("octocat", "hello-world", 42)
        assert pull == PullRequestRef(RepoRef("octocat", "hello-world"), 42)
        detect_pr.assert_not_called()

    def test_pr_detected_from_gh_pr_view(self, mocker):
        mocker.patch("prreview_core.resolve.gh_cli.run_json", return_value={"number": 17})
        assert resolve_pull("octocat", "hello-world").number == 17

    def test_pr_falls_back_to_branch_search(self, mocker):
        responses = [GhCommandError(["gh"], "no pull requests found"), [{"number": 9}, {"number": 3}]]

        def fake_run_json(cmd):
            result = responses.pop(0)
            if isinstance(result, Exception):
                raise result
            return result

        run_json = mocker.patch("prreview_core.resolve.gh_cli.run_json", side_effect=fake_run_json)
        mocker.patch("prreview_core.resolve.gh_cli.current_branch", return_value="feature/login")

        assert resolve_pull("octocat", "hello-world").number == 9
        list_cmd = run_json.call_args_list[1][0][0]
        assert list_cmd[:3] == ["gh", "pr", "list"]
        assert "--head" in list_cmd and "feature/login" in list_cmd
        assert "octocat/hello-world" in list_cmd

    def test_no_pr_for_branch_raises(self, mocker):
        mocker.patch("prreview_core.resolve.gh_cli.run_json", side_effect=[GhCommandError(["gh"], "none"), []])
        mocker.patch("prreview_core.resolve.gh_cli.current_branch", return_value="feature")

        with pytest.raises(ContextResolutionError, match="--pr"):
            resolve_pull("octocat", "hello-world")

    def test_detached_head_without_pr_raises(self, mocker):
        mocker.patch("prreview_core.resolve.gh_cli.run_json", side_effect=GhCommandError(["gh"], "none"))
        mocker.patch("prreview_core.resolve.gh_cli.current_branch", return_value=None)

        with pytest.raises(ContextResolutionError):
            resolve_pull("octocat", "hello-world")

    def test_non_positive_number_rejected(self, no_detection):
        with pytest.raises(ContextResolutionError):
            resolve_pull("octocat", "hello-world", 0)

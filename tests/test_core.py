from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from conftest import requires_git

from trackstat import git_ops
from trackstat.models import DETACHED_BRANCH, GONE
from trackstat.provider import AheadBehindDataProvider

pytestmark = requires_git


def _provider(repo: Path) -> AheadBehindDataProvider:
    return AheadBehindDataProvider(lambda: git_ops.Executable(repo))


def test_repo_root_and_branches(repo: Path) -> None:
    assert git_ops.get_repo_root(repo) == repo.resolve()
    assert sorted(git_ops.list_local_branches(repo)) == [
        "local-only",
        "main",
        "removed",
        "stale",
        "synced",
    ]
    assert git_ops.current_branch(repo) == "main"


def test_ahead_behind_from_git(repo: Path) -> None:
    data = _provider(repo).get_data()
    assert data is not None
    assert "local-only" not in data

    main = data["main"]
    assert main.remote_ref == "refs/remotes/origin/main"
    assert (main.ahead_count, main.behind_count) == ("2", "")

    synced = data["synced"]
    assert (synced.ahead_count, synced.behind_count) == ("0", "")

    # push reports only "behind", so ahead does not apply
    stale = data["stale"]
    assert (stale.ahead_count, stale.behind_count) == ("", "1")

    removed = data["removed"]
    assert removed.remote_ref == "refs/remotes/origin/removed"
    assert removed.ahead_count == GONE


def test_single_branch_query(repo: Path) -> None:
    data = _provider(repo).get_data("stale")
    assert data is not None
    assert list(data) == ["stale"]


def test_detached_head(repo: Path, run_git: Callable[..., None]) -> None:
    run_git("switch", "--detach", "HEAD", cwd=repo)
    branch = git_ops.current_branch(repo)
    assert branch == DETACHED_BRANCH
    assert _provider(repo).get_data(branch) is None


def test_executable_reports_failure(tmp_path: Path, git_env: None) -> None:
    result = git_ops.Executable(tmp_path).execute(git_ops.build_ahead_behind_args())
    assert not result.exited_successfully

    missing = git_ops.Executable(tmp_path, git_path="definitely-not-git")
    assert not missing.execute(["status"]).exited_successfully


def test_run_raises_git_error(tmp_path: Path, git_env: None) -> None:
    with pytest.raises(git_ops.GitError):
        git_ops.run(["rev-parse", "--show-toplevel"], cwd=tmp_path)
    assert git_ops.try_run(["rev-parse", "--show-toplevel"], cwd=tmp_path) is None
